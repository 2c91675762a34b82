"""Functional core - pure business logic with no I/O."""

from .errors import (
    ThoughtError,
    NotFoundError,
    IOFailureError,
    InvalidArgumentError,
    CorruptDataError,
)
from .sections import sanitize_section_name, is_valid_section_id, validate_section_name
from .entries import make_entry, extract_tag, search_entries, entries_for_day
from .backups import (
    BackupRecord,
    FullBackup,
    SectionBackup,
    RestoreResult,
    classify_backup_name,
    newest_first,
    select_for_retention,
)

__all__ = [
    # Errors
    "ThoughtError",
    "NotFoundError",
    "IOFailureError",
    "InvalidArgumentError",
    "CorruptDataError",
    # Sections
    "sanitize_section_name",
    "is_valid_section_id",
    "validate_section_name",
    # Entries
    "make_entry",
    "extract_tag",
    "search_entries",
    "entries_for_day",
    # Backups
    "BackupRecord",
    "FullBackup",
    "SectionBackup",
    "RestoreResult",
    "classify_backup_name",
    "newest_first",
    "select_for_retention",
]
