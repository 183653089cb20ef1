"""
Due date parsing for Canvas date text.

Canvas renders dates as free text whose shape depends on the page:
  - "Mon Sep 22, 2025 4:00pm"   (assignments, after cleaning)
  - "Sep 23 at 11:59pm"         (quizzes)
  - "Sep 20, 2025 at 10:13am"   (announcements)
  - "Tomorrow at 11:59pm"       (anything due soon)

Relative days and dates without a year are resolved against a reference
"now"; a date without a year is pushed forward a year if it would
otherwise land in the past. A date with no time means noon.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

# Canvas renders in the account's local time; the deployment this tool
# grew up with is in Colorado and always read it as daylight time.
SOURCE_TZ = timezone(timedelta(hours=-6), "MDT")

# Empirical correction so Notion displays the same wall-clock time Canvas
# shows. Applied after parsing, never before.
NOTION_OFFSET = timedelta(hours=7)

_WEEKDAY = r"(?P<weekday>Mon|Tue|Tues|Wed|Thu|Thur|Thurs|Fri|Sat|Sun)(?:day|sday|nesday|rsday|urday)?"
_WEEKDAY_PREFIX = re.compile(r"^" + _WEEKDAY + r"\.?,?\s+", re.IGNORECASE)
_RELATIVE_DAY = re.compile(
    r"^(?:(?P<word>today|tomorrow|yesterday)|" + _WEEKDAY + r")\.?,?(?:\s+(?P<rest>.*))?$",
    re.IGNORECASE,
)
_WEEKDAY_NUMBERS = {"mon": 0, "tue": 1, "wed": 2, "thu": 3, "fri": 4, "sat": 5, "sun": 6}

# Time of day assumed when the text names only a date
DEFAULT_TIME = (12, 0)

_TIME_FORMATS = ["%I:%M%p", "%I%p", "%H:%M"]

_DATE_FORMATS = [
    # With year
    "%b %d, %Y %I:%M%p",
    "%b %d, %Y %I%p",
    "%B %d, %Y %I:%M%p",
    "%B %d, %Y %I%p",
    "%b %d %Y %I:%M%p",
    "%b %d, %Y",
    "%B %d, %Y",
    # Without year
    "%b %d %I:%M%p",
    "%b %d %I%p",
    "%B %d %I:%M%p",
    "%B %d %I%p",
    "%b %d",
    "%B %d",
    # Numeric
    "%m/%d/%Y %I:%M%p",
    "%m/%d/%Y",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
]


def _normalize(text: str) -> str:
    text = re.sub(r"\s+", " ", text).strip()
    text = re.sub(r"^(Due|Posted|Available)( on| until)?:?\s*", "", text, flags=re.IGNORECASE)
    text = re.sub(r"\s+at\s+", " ", text, flags=re.IGNORECASE)
    # "4:00 pm" -> "4:00pm", "11:59 p.m." -> "11:59pm"
    text = re.sub(r"\s*([ap])\.?m\.?\b", r"\1m", text, flags=re.IGNORECASE)
    # "Sep 20, 2025, 10:13am" -> "Sep 20, 2025 10:13am"
    text = re.sub(r",\s*(?=\d{1,2}(?::\d{2})?[ap]m\b)", " ", text, flags=re.IGNORECASE)
    text = re.sub(r"\s+(MST|MDT|UTC|GMT)$", "", text, flags=re.IGNORECASE)
    return text.strip()


def _parse_time(text: str) -> Optional[tuple[int, int]]:
    for fmt in _TIME_FORMATS:
        try:
            t = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return t.hour, t.minute
    return None


def _resolve_relative(text: str, reference: datetime) -> Optional[datetime]:
    """Resolve "Today", "Tomorrow at 4pm" or "Friday 9am" against ``reference``.

    Weekday names always mean the next such day (today included, unless
    that time has already passed).
    """
    match = _RELATIVE_DAY.match(text)
    if match is None:
        return None
    rest = match.group("rest")
    time = _parse_time(rest) if rest else DEFAULT_TIME
    if time is None:
        # "Mon Sep 22, ..." is an absolute date with a weekday in front
        return None

    day = reference.date()
    word = (match.group("word") or "").lower()
    if word == "tomorrow":
        day += timedelta(days=1)
    elif word == "yesterday":
        day -= timedelta(days=1)
    elif not word:
        target = _WEEKDAY_NUMBERS[match.group("weekday")[:3].lower()]
        day += timedelta(days=(target - day.weekday()) % 7)

    dt = datetime(day.year, day.month, day.day, *time, tzinfo=reference.tzinfo)
    if not word and dt < reference:
        dt += timedelta(days=7)
    return dt


def parse_due_date(text: str, now: Optional[datetime] = None,
                   tz: timezone = SOURCE_TZ) -> Optional[datetime]:
    """Parse Canvas date text into an aware datetime.

    Args:
        text: Date text as extracted from Canvas
        now: Reference instant for relative dates and dates without a year
            (defaults to now)
        tz: Zone the text is expressed in

    Returns:
        Aware datetime in ``tz``, or None if the text is not a date
    """
    if not text:
        return None
    now = now or datetime.now(timezone.utc)
    reference = now.astimezone(tz)
    cleaned = _normalize(text)

    relative = _resolve_relative(cleaned, reference)
    if relative is not None:
        return relative
    cleaned = _WEEKDAY_PREFIX.sub("", cleaned)

    for fmt in _DATE_FORMATS:
        has_year = "%Y" in fmt
        has_time = "%I" in fmt or "%H" in fmt
        try:
            if has_year:
                dt = datetime.strptime(cleaned, fmt)
            else:
                dt = datetime.strptime(f"{cleaned} {reference.year}", f"{fmt} %Y")
        except ValueError:
            continue

        if not has_time:
            dt = dt.replace(hour=DEFAULT_TIME[0], minute=DEFAULT_TIME[1])
        dt = dt.replace(tzinfo=tz)

        if not has_year and dt < reference:
            try:
                dt = dt.replace(year=dt.year + 1)
            except ValueError:
                # Feb 29 with no leap day next year
                dt = dt + timedelta(days=365)
        return dt

    return None


def to_notion_instant(dt: datetime) -> str:
    """Apply the Notion display offset and render an ISO-8601 UTC instant."""
    shifted = (dt - NOTION_OFFSET).astimezone(timezone.utc)
    return shifted.isoformat(timespec="milliseconds").replace("+00:00", "Z")
