import pytest

from canvas_sync.config import Account, Config
from canvas_sync.models import CanvasItem, DueDate, ItemKind

CANVAS_URL = "https://canvas.example.edu/"


def make_item(title="Essay 1", due="Mon Sep 22, 2025 4:00pm", description="Write an essay",
              class_name="ATLS 5420-001", url=CANVAS_URL + "courses/1/assignments/1",
              kind=ItemKind.ASSIGNMENT) -> CanvasItem:
    return CanvasItem(
        title=title,
        due_date=DueDate(due),
        description=description,
        class_name=class_name,
        source_url=url,
        kind=kind,
    )


@pytest.fixture
def config():
    return Config(url=CANVAS_URL, account=Account(username="student", password="hunter2"))


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable load_config reads; restored after the test."""
    for key in ("CANVAS_URL", "CANVAS_USERNAME", "CANVAS_PWD", "TODOIST_API_KEY",
                "TODOIST_EXPORT", "NOTION_API_KEY", "NOTION_DB_ID", "NOTION_EXPORT",
                "LOG_LEVEL", "ENABLE_FILE_LOGGING"):
        # setenv first so the undo also removes values load_dotenv adds
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch
