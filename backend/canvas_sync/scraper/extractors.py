"""
Content extractors for Canvas item pages.

Each extractor is a pure function from a BeautifulSoup snapshot of a
rendered item page to its title, due date text and description. Fields
are extracted independently: a missing element logs a warning and the
field falls back to its default, it never aborts the extraction.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from bs4 import BeautifulSoup

from .selectors import ANNOUNCEMENTS_CRUMB, SELECTORS, css

logger = logging.getLogger(__name__)

NO_DUE_DATE = "No due date"
NO_PUBLISH_DATE = "No publish date"
UNKNOWN_CLASS = "Unknown Class"


@dataclass(frozen=True)
class ExtractedFields:
    """Fields an extractor can read from the page itself."""
    title: str
    due_date: str
    description: Optional[str]


class ContentType(str, Enum):
    """Result of classifying an item page."""
    ASSIGNMENT = "assignment"
    QUIZ = "quiz"
    DISCUSSION = "discussion"
    UNKNOWN = "unknown"


def clean_due_text(text: str) -> str:
    """Normalize a rendered due/publish date.

    "Due: Mon Sep 22, 2025 by 4:00pm" -> "Mon Sep 22, 2025 4:00pm"
    """
    text = re.sub(r"^(?:Due:\s*)+", "", text.strip())
    while " by " in text:
        text = text.replace(" by ", " ", 1)
    return text.strip()


def _text(soup: BeautifulSoup, locator: tuple, multiline: bool = False) -> Optional[str]:
    """Rendered text of the first match, or None if nothing matches."""
    element = soup.select_one(css(locator))
    if element is None:
        return None
    if multiline:
        return element.get_text("\n", strip=True)
    return " ".join(element.get_text(" ", strip=True).split())


def _field(soup: BeautifulSoup, locator: tuple, default, field_name: str,
           kind: str, multiline: bool = False, warn: bool = True):
    value = _text(soup, locator, multiline=multiline)
    if value is None:
        if warn:
            logger.warning(
                f"Failed to extract {kind} {field_name}, using fallback {default!r} "
                f"(selector: {locator[1]})"
            )
        return default
    return value


def scrape_assignment_data(soup: BeautifulSoup) -> ExtractedFields:
    """Extract an assignment page (Canvas "Assignments 2" student view)."""
    sel = SELECTORS["assignment"]
    title = _field(soup, sel["title"], "Untitled Assignment", "title", "assignment")
    due = _field(soup, sel["due_date"], NO_DUE_DATE, "due date", "assignment")
    # Description is optional on assignments
    description = _field(soup, sel["description"], "", "description", "assignment",
                         multiline=True, warn=False)
    return ExtractedFields(title=title, due_date=clean_due_text(due), description=description)


def scrape_quiz_data(soup: BeautifulSoup) -> ExtractedFields:
    """Extract a classic quiz page. Quizzes never carry a description."""
    sel = SELECTORS["quiz"]
    title = _field(soup, sel["title"], "Untitled Quiz", "title", "quiz")
    due = _field(soup, sel["due_date"], NO_DUE_DATE, "due date", "quiz")
    return ExtractedFields(title=title, due_date=clean_due_text(due), description=None)


def scrape_discussion_data(soup: BeautifulSoup) -> ExtractedFields:
    """Extract an announcement page; the publish date stands in for a due date."""
    sel = SELECTORS["discussion"]
    title = _field(soup, sel["title"], "Untitled Discussion", "title", "discussion")
    due = _field(soup, sel["due_date"], NO_PUBLISH_DATE, "publish date", "discussion")
    description = _field(soup, sel["description"], "", "description", "discussion",
                         multiline=True, warn=False)
    return ExtractedFields(title=title, due_date=clean_due_text(due), description=description)


def extract_class_name(soup: BeautifulSoup) -> str:
    """Course name from the breadcrumb trail."""
    return _field(soup, SELECTORS["breadcrumbs"]["class_name"], UNKNOWN_CLASS,
                  "class name", "item")


def _is_announcement(soup: BeautifulSoup) -> bool:
    if soup.select_one(css(SELECTORS["discussion"]["marker"])) is None:
        return False
    crumb = _text(soup, SELECTORS["breadcrumbs"]["first_level"])
    return crumb == ANNOUNCEMENTS_CRUMB


def classify_content(soup: BeautifulSoup) -> ContentType:
    """Decide what kind of item a page holds.

    Priority is fixed: assignment, then quiz, then discussion. Legacy pages
    that carry more than one marker resolve to the earliest kind.
    """
    if soup.select_one(css(SELECTORS["assignment"]["marker"])) is not None:
        return ContentType.ASSIGNMENT
    if soup.select_one(css(SELECTORS["quiz"]["marker"])) is not None:
        return ContentType.QUIZ
    if _is_announcement(soup):
        return ContentType.DISCUSSION
    return ContentType.UNKNOWN


EXTRACTORS: dict[ContentType, Callable[[BeautifulSoup], ExtractedFields]] = {
    ContentType.ASSIGNMENT: scrape_assignment_data,
    ContentType.QUIZ: scrape_quiz_data,
    ContentType.DISCUSSION: scrape_discussion_data,
}
