"""
Todoist export.

Reconciles scraped Canvas items against the user's Todoist tasks:
  - an existing task matches by exact title OR by the Canvas URL embedded
    in its description (titles collide or get renamed; the link does not)
  - completed matches are left alone
  - unmatched items are created, matched items get their description
    refreshed

Remote state (tasks and projects) is fetched once per run.
"""

import logging
import re
from typing import Optional

from .config import Config
from .errors import ApiError, ExportError
from .models import ApiStats, CanvasItem, RemoteProject, RemoteTask
from .todoist_api import TodoistClient

logger = logging.getLogger(__name__)

TASK_PRIORITY = 3


def normalize_class_name(name: str) -> str:
    """Reduce a Canvas course name to the part a Todoist project would contain.

    "ATLS 5420-001" -> "atls", "CS 2270 Section 003" -> "cs"
    """
    cleaned = name.lower()
    cleaned = re.sub(r"[^a-z0-9\s]", "", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    cleaned = re.sub(r"\s(-|section)\s.*$", "", cleaned)
    cleaned = re.sub(r"\s\d{3,}$", "", cleaned)
    return cleaned


def find_existing_task(tasks: list[RemoteTask], item: CanvasItem) -> Optional[RemoteTask]:
    """First task whose content equals the title or whose description holds the URL."""
    for task in tasks:
        if task.content == item.title:
            return task
        if item.source_url and task.description and item.source_url in task.description:
            return task
    return None


def find_related_project(projects: list[RemoteProject], class_name: str) -> Optional[RemoteProject]:
    """Project whose name contains the normalized class name, if any."""
    cleaned = normalize_class_name(class_name)
    for project in projects:
        if cleaned in project.name.lower():
            logger.debug(f"Class {class_name!r} -> project {project.name!r}")
            return project
    logger.debug(f"No project matches class {class_name!r} (normalized {cleaned!r})")
    return None


def _description_with_link(item: CanvasItem) -> str:
    return f"{item.description}\n\n[Canvas Link]({item.source_url})"


def build_task_payload(item: CanvasItem, project: Optional[RemoteProject]) -> dict:
    """Full payload for creating a task."""
    payload = {"content": item.title}
    if project is not None:
        payload["project_id"] = project.id
    due_string = re.sub(r"^Due:\s*", "", item.due_date.text, flags=re.IGNORECASE)
    if due_string:
        payload["due_string"] = due_string
    if item.description:
        payload["description"] = _description_with_link(item)
        payload["labels"] = [normalize_class_name(item.class_name), item.kind.value]
    payload["priority"] = TASK_PRIORITY
    return payload


def build_update_payload(item: CanvasItem) -> dict:
    """Payload for refreshing an existing task; empty when there is nothing to send."""
    if item.description:
        return {"description": _description_with_link(item)}
    return {}


def export_to_todoist(items: list[CanvasItem], config: Config, stats: ApiStats,
                      client: Optional[TodoistClient] = None):
    """Create or update a Todoist task for every item.

    Args:
        items: Scraped Canvas items, processed in order
        config: Run configuration (needs todoist_api_key)
        stats: Counter sink for Todoist operations
        client: Client to use; built from the API key when omitted

    Raises:
        ExportError: if the current tasks/projects cannot be fetched
    """
    if not config.todoist_api_key:
        logger.info("Todoist export skipped - no API key configured")
        return

    client = client or TodoistClient(config.todoist_api_key)
    logger.info(f"Starting Todoist export of {len(items)} items")

    try:
        tasks = client.get_tasks()
        projects = client.get_projects()
    except ApiError as e:
        logger.error(f"Failed to retrieve Todoist state: {e}")
        raise ExportError("Could not load Todoist tasks/projects") from e
    logger.info(f"Todoist state retrieved: {len(tasks)} tasks, {len(projects)} projects")

    for item in items:
        try:
            _sync_item(client, item, tasks, projects, stats)
        except ApiError as e:
            stats.errors += 1
            logger.error(f"Todoist API error for {item.title!r} ({item.source_url}): {e} {e.body}")
        except Exception as e:
            stats.errors += 1
            logger.error(
                f"Failed to export {item.title!r} ({item.source_url}) to Todoist: "
                f"{type(e).__name__}: {e}"
            )

    logger.info(
        f"Todoist export completed: {stats.summary()}, "
        f"success {stats.success_rate(len(items))}%"
    )


def _sync_item(client: TodoistClient, item: CanvasItem, tasks: list[RemoteTask],
               projects: list[RemoteProject], stats: ApiStats):
    """Create, update or skip one item. API failures propagate to the caller."""
    existing = find_existing_task(tasks, item)

    if existing is not None and existing.is_completed:
        stats.skipped += 1
        logger.info(f"Skipping {item.title!r}: already completed in Todoist")
        return

    if existing is None:
        project = find_related_project(projects, item.class_name)
        payload = build_task_payload(item, project)
        logger.info(
            f"Adding {item.title!r} to Todoist "
            f"(project: {project.name if project else 'default'}, due: {payload.get('due_string')!r})"
        )
        created = client.add_task(payload)
        stats.creates += 1
        logger.info(f"Todoist task added: {item.title!r} (id {created.id})")
        return

    payload = build_update_payload(item)
    if not payload:
        stats.skipped += 1
        logger.info(f"Skipping update of {item.title!r} (id {existing.id}): no description to add")
        return

    logger.info(f"Updating Todoist task {existing.id} for {item.title!r}")
    client.update_task(existing.id, payload)
    stats.updates += 1
