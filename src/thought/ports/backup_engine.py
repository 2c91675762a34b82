"""Backup engine interface."""

from pathlib import Path
from typing import Protocol

from thought.core.backups import BackupRecord, RestoreResult


class BackupEngine(Protocol):
    """Interface for creating, listing, restoring and pruning snapshots."""

    def backup_section(self, section_id: str, rotate: bool = False) -> Path | None:
        """Snapshot one section, optionally truncating its live log afterwards."""
        ...

    def create_full_backup(self) -> Path | None:
        """Snapshot every section plus metadata into one artifact."""
        ...

    def list_all_backups(self) -> list[BackupRecord]:
        """Every artifact in the backup directory, in directory order."""
        ...

    def restore_from_backup(
        self, path: Path | str, section_id: str | None = None, overwrite: bool = False
    ) -> RestoreResult:
        """Restore an artifact into the live store."""
        ...

    def cleanup_old_backups(self, section_id: str) -> list[Path]:
        ...

    def cleanup_old_full_backups(self) -> list[Path]:
        ...
