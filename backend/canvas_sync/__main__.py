"""
Package entry point.

Allows running the application via:

    python -m canvas_sync
"""

import sys

from canvas_sync.main import main

if __name__ == "__main__":
    sys.exit(main())
