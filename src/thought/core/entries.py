"""Log entry formatting, tags and in-memory filters."""

import re
from datetime import date, datetime

_TAG_PATTERN = re.compile(r"\[(.*?)\]")


def format_date(day: date) -> str:
    """Locale-formatted date, as used in entry prefixes."""
    return day.strftime("%x")


def format_timestamp(now: datetime, include_seconds: bool = False) -> str:
    """Entry timestamp: '<locale date>, HH:MM[:SS]'."""
    time_fmt = "%H:%M:%S" if include_seconds else "%H:%M"
    return f"{format_date(now)}, {now.strftime(time_fmt)}"


def make_entry(text: str, now: datetime | None = None) -> str:
    """Prefix text with the creation timestamp."""
    now = now or datetime.now()
    return f"{format_timestamp(now, include_seconds=True)} {text}"


def create_tagged_message(tag: str, message: str) -> str:
    return f"[{tag}] {message}"


def extract_tag(entry: str) -> str | None:
    """Return the first [tag] in the entry, or None."""
    match = _TAG_PATTERN.search(entry)
    return match.group(1) if match else None


def search_entries(entries: list[str], term: str) -> list[str]:
    """Case-insensitive substring search, preserving order."""
    needle = term.lower()
    return [e for e in entries if needle in e.lower()]


def entries_for_day(entries: list[str], day: date) -> list[str]:
    """Entries whose timestamp prefix carries the given day."""
    stamp = format_date(day)
    return [e for e in entries if stamp in e]
