"""
Local JSON snapshot of scraped items (output.json).

Written when no export target is enabled, and read back by
--skip-scraping so exports can be retried without logging in again.
"""

import json
import logging
from pathlib import Path
from typing import Iterable

from .models import CanvasItem

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT = Path("output.json")


def save_items(items: Iterable[CanvasItem], path: str | Path = DEFAULT_SNAPSHOT) -> Path:
    """Write items as pretty-printed JSON, creating parent directories."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    payload = [item.to_dict() for item in items]
    out.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info(f"Saved {len(payload)} items to {out}")
    return out


def load_items(path: str | Path = DEFAULT_SNAPSHOT) -> list[CanvasItem]:
    """Load items from a snapshot.

    Returns an empty list if the file is missing or not valid JSON; entries
    that cannot be read are skipped with a warning.
    """
    src = Path(path)
    if not src.exists():
        logger.warning(f"Snapshot {src} not found, nothing to load")
        return []

    try:
        data = json.loads(src.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"Could not read snapshot {src}: {e}")
        return []
    if not isinstance(data, list):
        logger.error(f"Snapshot {src} does not contain a list")
        return []

    items = []
    for i, entry in enumerate(data):
        try:
            items.append(CanvasItem.from_dict(entry))
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Skipping snapshot entry {i}: {e}")
    logger.info(f"Loaded {len(items)} items from {src}")
    return items
