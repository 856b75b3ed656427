"""
Title and date canonicalisation used for fuzzy duplicate matching.
"""
import re
from datetime import date, datetime, timezone
from typing import Optional

from dateutil import parser as date_parser

_NON_WORD = re.compile(r"[^\w\s]|_")
_WHITESPACE = re.compile(r"\s+")
_ISO_DATE = re.compile(r"(\d{4}-\d{2}-\d{2})")

# Any date field dateutil fills in from its default differs between these two.
_DEFAULTS = (datetime(2000, 1, 1), datetime(2011, 12, 28))


def normalize_title(title: str) -> str:
    """
    Lowercase, replace punctuation with spaces, collapse whitespace and trim.
    """
    text = _NON_WORD.sub(" ", title.lower())
    return _WHITESPACE.sub(" ", text).strip()


def _parse_complete(value: str) -> Optional[datetime]:
    """
    Parse a timestamp that names its own year, month and day (ISO 8601,
    RFC 2822 and similar). Returns None when any date part would have to
    be guessed.
    """
    try:
        return date_parser.isoparse(value)
    except (ValueError, OverflowError, TypeError):
        pass

    try:
        first, second = (date_parser.parse(value, default=d) for d in _DEFAULTS)
    except (ValueError, OverflowError, TypeError):
        return None
    if first.date() != second.date():
        return None
    return first


def date_only(value: str) -> str:
    """
    Extract the calendar date (YYYY-MM-DD) of a source timestamp.

    Priority: full parse (converted to UTC when the timestamp carries an
    offset), then the first YYYY-MM-DD substring, then the raw string up to
    the first 'T'.
    """
    parsed = _parse_complete(value)
    if parsed is not None:
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
        return parsed.date().isoformat()

    match = _ISO_DATE.search(value)
    if match:
        return match.group(1)
    return value.split("T")[0]


def calendar_day(day: str) -> Optional[str]:
    """
    Return `day` when it is a real YYYY-MM-DD calendar date, else None.
    """
    try:
        return date.fromisoformat(day).isoformat() if _ISO_DATE.fullmatch(day) else None
    except ValueError:
        return None


def published_day(published_at: str) -> Optional[str]:
    """
    Calendar date used to bucket an article for same-day matching, or None
    when the timestamp yields no usable date.
    """
    return calendar_day(date_only(published_at))
