"""
Command line entry point.

    canvas-sync                  scrape Canvas and export to enabled targets
    canvas-sync --dev            same, with a visible browser and debug logs
    canvas-sync --skip-scraping  re-export the items saved in output.json
"""

import argparse
import logging
import sys
import uuid

from .config import load_config
from .errors import CanvasSyncError
from .log_setup import configure_logging
from .snapshot import DEFAULT_SNAPSHOT
from .sync_service import SyncService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="canvas-sync",
        description="Scrape Canvas planner items and export them to Todoist / Notion",
    )
    p.add_argument("--dev", action="store_true", help="Visible browser and debug logging")
    p.add_argument("--skip-scraping", action="store_true", help="Load items from the snapshot instead of Canvas")
    p.add_argument("--output", "-o", default=str(DEFAULT_SNAPSHOT), help="Snapshot file (default: output.json)")
    p.add_argument("--todoist", action="store_true", help="Export to Todoist even if TODOIST_EXPORT is off")
    p.add_argument("--notion", action="store_true", help="Export to Notion even if NOTION_EXPORT is off")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config()
    if args.todoist:
        config.export_to.todoist = True
    if args.notion:
        config.export_to.notion = True

    session_id = str(uuid.uuid4())
    configure_logging(config.logging, session_id=session_id, dev=args.dev)

    print("\nCanvas Sync - Assignment Exporter\n")
    service = SyncService(config, dev=args.dev, snapshot_path=args.output, session_id=session_id)
    try:
        service.run(skip_scraping=args.skip_scraping)
    except CanvasSyncError as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        # Browser or driver failures from outside the package
        logger.error(f"Canvas sync failed: {type(e).__name__}: {e}")
        print(f"\nError: {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    print(f"\nDone: {service.summary()}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
