"""Terminal rendering helpers for the shell and CLI."""

import shutil
from datetime import datetime

import click

from .core.backups import BackupRecord
from .core.entries import extract_tag, format_timestamp

TAG_COLORS = {
    "important": "red",
    "idea": "green",
    "todo": "blue",
}


def format_entry(entry: str) -> str:
    """Colour a whole entry for well-known tags, or just the tag otherwise."""
    tag = extract_tag(entry)
    if tag is None:
        return entry

    color = TAG_COLORS.get(tag.lower())
    if color:
        return click.style(entry, fg=color)

    marker = f"[{tag}]"
    start = entry.index(marker)
    return entry[:start] + click.style(marker, fg="cyan") + entry[start + len(marker):]


def format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def max_entries_for_terminal(has_description: bool) -> int:
    rows = shutil.get_terminal_size().lines
    reserved = 6 + (1 if has_description else 0)
    return max(5, rows - reserved)


def render_screen(
    section: str,
    description: str,
    entries: list[str],
    header: str | None = None,
    limit: int | None = None,
    now: datetime | None = None,
) -> list[str]:
    """Lines for the logger view: header, hints, then the newest entries."""
    now = now or datetime.now()
    lines = [click.style(f"thought cli [{section}] - {format_timestamp(now)}", fg="green", bold=True)]
    if description:
        lines.append(click.style(f"Description: {description}", fg="cyan"))
    lines.append(click.style('Type "/help" for commands or "/menu" to return to menu', dim=True))
    if header:
        lines.append(header)

    if not entries:
        lines.append(click.style("No logs to display. Type a thought and press Enter.", dim=True))
        return lines

    shown = entries
    if limit is not None and len(entries) > limit:
        shown = entries[-limit:]
        lines.append(click.style(f"Showing most recent {limit} of {len(entries)} logs", dim=True))

    lines.extend(format_entry(e) for e in shown)
    return lines


def render_backups(full: list[BackupRecord], sections: list[BackupRecord]) -> list[str]:
    """Numbered backup listing; numbers are what /restore and `thought restore` take."""
    lines = ["Available backups:", "Full backups:"]
    if not full:
        lines.append("No full backups available.")
    for i, record in enumerate(full, 1):
        lines.append(f"{i}. {record.name} - {record.modified.astimezone():%Y-%m-%d %H:%M:%S} ({format_size(record.size)})")

    lines.append("Section backups:")
    if not sections:
        lines.append("No section backups available.")
    for i, record in enumerate(sections, 1):
        lines.append(
            f"{i}. {record.section}: {record.name} - "
            f"{record.modified.astimezone():%Y-%m-%d %H:%M:%S} ({format_size(record.size)})"
        )
    return lines
