"""Shared workflow layer between the CLI and the interactive shell.

Builds the store and engine from config, and holds the few multi-step
operations both front ends need: logging with rotation and restoring a
backup picked by its listing number.
"""

from dataclasses import dataclass
from datetime import datetime

from .adapters.file_backups import FileBackupEngine
from .adapters.file_sections import FileSectionStore
from .config import Config
from .core.backups import BackupRecord, RestoreResult, newest_first
from .core.entries import make_entry
from .core.errors import InvalidArgumentError
from .ports.backup_engine import BackupEngine
from .ports.section_store import SectionStore

ROTATION_NOTICE = "[SYSTEM] Log file rotated, previous logs backed up"


def get_store(config: Config) -> FileSectionStore:
    """Section store rooted at the configured sections directory."""
    return FileSectionStore(
        config.sections_dir,
        rotation_size=config.log_rotation_size,
        default_section=config.default_section,
        default_description=config.default_section_description,
        reserved_prefix=config.backup.full_backup_prefix,
    )


def get_engine(config: Config, store: SectionStore | None = None) -> FileBackupEngine:
    """Backup engine writing to the configured backup directory."""
    return FileBackupEngine(store or get_store(config), config.backup_dir, config.backup)


@dataclass
class LoggedEntry:
    """An appended entry and whether the log was rotated because of it."""

    entry: str
    rotated: bool = False


def log_message(
    store: SectionStore,
    engine: BackupEngine,
    section_id: str,
    message: str,
    now: datetime | None = None,
) -> LoggedEntry:
    """
    Timestamp and append a message.

    When the append pushes the log past the rotation size, the section is
    backed up with rotate=True and a system notice starts the fresh log.
    """
    entry = make_entry(message, now)
    if not store.append_entry(section_id, entry):
        return LoggedEntry(entry)

    if engine.backup_section(section_id, rotate=True) is None:
        return LoggedEntry(entry)

    store.append_entry(section_id, make_entry(ROTATION_NOTICE, now))
    return LoggedEntry(entry, rotated=True)


def backups_by_kind(engine: BackupEngine) -> tuple[list[BackupRecord], list[BackupRecord]]:
    """Full and section backups, each newest first, as numbered in listings."""
    records = engine.list_all_backups()
    full = newest_first([r for r in records if r.is_full])
    sections = newest_first([r for r in records if not r.is_full])
    return full, sections


def select_backup(engine: BackupEngine, kind: str, number: str | int) -> BackupRecord:
    """Resolve '<full|section> <number>' to a record. Raises InvalidArgumentError."""
    if kind not in ("full", "section"):
        raise InvalidArgumentError("Backup type must be 'full' or 'section'")

    try:
        index = int(number) - 1
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Invalid backup number: {number}")

    full, sections = backups_by_kind(engine)
    candidates = full if kind == "full" else sections
    if not candidates:
        raise InvalidArgumentError(f"No {kind} backups found.")
    if not 0 <= index < len(candidates):
        raise InvalidArgumentError(f"Invalid backup number. Choose 1-{len(candidates)}")
    return candidates[index]


def restore_numbered(
    engine: BackupEngine,
    kind: str,
    number: str | int,
    section_id: str | None = None,
    overwrite: bool = False,
) -> RestoreResult:
    """Restore the Nth backup of a kind; section backups default to their owner."""
    return restore_record(engine, select_backup(engine, kind, number), section_id, overwrite)


def restore_record(
    engine: BackupEngine,
    record: BackupRecord,
    section_id: str | None = None,
    overwrite: bool = False,
) -> RestoreResult:
    target = None
    if not record.is_full:
        target = section_id or record.section
    return engine.restore_from_backup(record.path, target, overwrite)
