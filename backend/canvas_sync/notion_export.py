"""
Notion export.

Reconciles scraped Canvas items against a Notion database. Unlike the
Todoist export, pages match on title only, and a matched page has every
synced property rewritten.

Only pages whose "Due Date" falls within the next year are fetched, so
anything older always looks new.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from .config import Config
from .dates import parse_due_date, to_notion_instant
from .errors import ApiError, ExportError
from .models import ApiStats, CanvasItem
from .notion_api import NotionClient

logger = logging.getLogger(__name__)

DUE_DATE_FILTER = {"or": [{"property": "Due Date", "date": {"next_year": {}}}]}
INITIAL_STATUS = "Not Started"
PAGE_PRIORITY = 3
SCHOOL_TAG = "School"
# Notion rejects rich text runs longer than this
TEXT_LIMIT = 2000


def page_title(page: dict) -> Optional[str]:
    """Plain text of the first run of a page's Title property."""
    try:
        return page["properties"]["Title"]["title"][0]["plain_text"]
    except (KeyError, IndexError, TypeError):
        return None


def find_existing_page(pages: list[dict], item: CanvasItem) -> Optional[dict]:
    for page in pages:
        if page_title(page) == item.title:
            return page
    return None


def notion_due_date(item: CanvasItem, now: datetime) -> str:
    """Due date of an item as the ISO instant written to Notion.

    Unparseable text falls back to ``now`` so the item is still exported.
    """
    parsed = parse_due_date(item.due_date.text, now=now)
    if parsed is None:
        logger.warning(
            f"Failed to parse due date {item.due_date.text!r} for {item.title!r}, "
            f"using current date {now.isoformat()}"
        )
        parsed = now
    return to_notion_instant(parsed)


def _rich_text(content: str) -> list[dict]:
    return [{"type": "text", "text": {"content": content[:TEXT_LIMIT]}}]


def build_properties(item: CanvasItem, due: str, new: bool = False) -> dict:
    """Page properties for an item; ``new`` adds the fields only set on creation."""
    properties = {
        "Title": {"title": _rich_text(item.title)},
        "Due Date": {"date": {"start": due}},
        "Tags": {"multi_select": [{"name": SCHOOL_TAG}, {"name": item.class_name}]},
        "Description": {"rich_text": _rich_text(item.description or "")},
    }
    if new:
        properties["PRIORITY"] = {"number": PAGE_PRIORITY}
        properties["Status"] = {"select": {"name": INITIAL_STATUS}}
    return properties


def export_to_notion(items: list[CanvasItem], config: Config, stats: ApiStats,
                     client: Optional[NotionClient] = None, now: Optional[datetime] = None):
    """Create or update a Notion page for every item.

    Args:
        items: Scraped Canvas items, processed in order
        config: Run configuration (needs notion_api_key and notion_db_id)
        stats: Counter sink for Notion operations
        client: Client to use; built from the API key when omitted
        now: Reference instant for date parsing (defaults to the current time)

    Raises:
        ExportError: if the database query fails
    """
    if not config.notion_api_key:
        logger.info("Notion export skipped - no API key configured")
        return
    if not config.notion_db_id:
        logger.warning("Notion export skipped - no database ID configured")
        return

    client = client or NotionClient(config.notion_api_key)
    now = now or datetime.now(timezone.utc)
    logger.info(f"Starting Notion export of {len(items)} items to database {config.notion_db_id}")

    try:
        pages = client.query_database(config.notion_db_id, filter=DUE_DATE_FILTER)
    except ApiError as e:
        logger.error(f"Notion database query failed: {e}")
        raise ExportError("Could not query the Notion database") from e
    logger.info(f"Notion database query completed: {len(pages)} pages due within a year")

    for item in items:
        try:
            _sync_item(client, config.notion_db_id, item, pages, stats, now)
        except ApiError as e:
            stats.errors += 1
            logger.error(f"Notion API error for {item.title!r} ({item.class_name}): {e} {e.body}")
        except Exception as e:
            stats.errors += 1
            logger.error(
                f"Failed to export {item.title!r} ({item.class_name}) to Notion: "
                f"{type(e).__name__}: {e}"
            )

    logger.info(
        f"Notion export completed: {stats.summary()}, "
        f"success {stats.success_rate(len(items))}%"
    )


def _sync_item(client: NotionClient, database_id: str, item: CanvasItem,
               pages: list[dict], stats: ApiStats, now: datetime):
    due = notion_due_date(item, now)
    existing = find_existing_page(pages, item)

    if existing is not None:
        logger.info(f"Updating Notion page {existing.get('id')} for {item.title!r} (due {due})")
        client.update_page(existing["id"], build_properties(item, due))
        stats.updates += 1
        return

    logger.info(f"Creating Notion page for {item.title!r} ({item.class_name}, due {due})")
    created = client.create_page(database_id, build_properties(item, due, new=True))
    stats.creates += 1
    logger.info(f"Notion page created: {item.title!r} (id {created.get('id')})")
