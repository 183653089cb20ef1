"""
Data model for Canvas Sync.

CanvasItem is the unit of work flowing through the whole pipeline:
scraper -> Todoist export / Notion export / JSON snapshot.

The stats classes replace ad hoc counter dicts: each component receives
the accumulator it should update instead of touching shared state.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class ItemKind(str, Enum):
    """Kind of Canvas item, set once by content classification."""
    ASSIGNMENT = "assignment"
    QUIZ = "quiz"
    DISCUSSION = "discussion"


@dataclass(frozen=True)
class DueDate:
    """Free-text due/publish date as rendered by Canvas."""
    text: str


@dataclass(frozen=True)
class CanvasItem:
    """One coursework entry extracted from the Canvas planner."""
    title: str
    due_date: DueDate
    description: Optional[str]
    class_name: str
    source_url: str
    kind: ItemKind

    def to_dict(self) -> dict:
        """Serialize to the snapshot (output.json) format."""
        return {
            "class_name": self.class_name,
            "title": self.title,
            "due_date": {"string": self.due_date.text},
            "description": self.description,
            "url": self.source_url,
            "type": self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CanvasItem":
        """Build an item from a snapshot dict.

        Raises:
            KeyError / ValueError if the dict is missing required fields
            or carries an unknown type.
        """
        kind = ItemKind(data["type"])
        description = data.get("description")
        if kind is ItemKind.QUIZ:
            description = None
        due = data.get("due_date") or {}
        return cls(
            title=data["title"],
            due_date=DueDate(due.get("string", "")),
            description=description,
            class_name=data.get("class_name") or "Unknown Class",
            source_url=data.get("url", ""),
            kind=kind,
        )


@dataclass
class RemoteTask:
    """A task as returned by the Todoist API."""
    id: str
    content: str
    description: str = ""
    is_completed: bool = False
    project_id: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> "RemoteTask":
        return cls(
            id=str(data["id"]),
            content=data.get("content") or "",
            description=data.get("description") or "",
            # API v1 calls it "checked", older payloads "is_completed"
            is_completed=bool(data.get("checked", data.get("is_completed", False))),
            project_id=data.get("project_id"),
        )


@dataclass
class RemoteProject:
    """A Todoist project (one per course, usually)."""
    id: str
    name: str

    @classmethod
    def from_api(cls, data: dict) -> "RemoteProject":
        return cls(id=str(data["id"]), name=data.get("name") or "")


def _percent(part: int, whole: int) -> int:
    return round(part / max(whole, 1) * 100)


@dataclass
class ScrapeStats:
    """Counters for one scraping run."""
    total_items: int = 0
    processed_items: int = 0
    assignments: int = 0
    quizzes: int = 0
    discussions: int = 0
    errors: int = 0
    skipped: int = 0

    def record_kind(self, kind: ItemKind):
        if kind is ItemKind.ASSIGNMENT:
            self.assignments += 1
        elif kind is ItemKind.QUIZ:
            self.quizzes += 1
        elif kind is ItemKind.DISCUSSION:
            self.discussions += 1

    def success_rate(self) -> int:
        return _percent(self.processed_items, self.total_items)

    def summary(self) -> str:
        return (
            f"total={self.total_items} processed={self.processed_items} "
            f"assignments={self.assignments} quizzes={self.quizzes} "
            f"discussions={self.discussions} errors={self.errors} "
            f"skipped={self.skipped} success={self.success_rate()}%"
        )


@dataclass
class ApiStats:
    """Counters for one export target."""
    creates: int = 0
    updates: int = 0
    errors: int = 0
    skipped: int = 0

    def success_rate(self, total: int) -> int:
        return _percent(self.creates + self.updates, total)

    def summary(self) -> str:
        return (
            f"creates={self.creates} updates={self.updates} "
            f"skipped={self.skipped} errors={self.errors}"
        )


@dataclass
class RunStats:
    """Everything one invocation accumulates, passed explicitly to each phase."""
    session_id: str
    scraping: ScrapeStats = field(default_factory=ScrapeStats)
    todoist: ApiStats = field(default_factory=ApiStats)
    notion: ApiStats = field(default_factory=ApiStats)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None

    def duration_seconds(self) -> float:
        end = self.finished_at or datetime.now(timezone.utc)
        return (end - self.started_at).total_seconds()
