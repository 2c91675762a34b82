"""File-based backup engine adapter."""

import gzip
import json
import logging
import zlib
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from thought.config import BackupConfig
from thought.core.backups import (
    BackupRecord,
    FullBackup,
    RestoreResult,
    build_full_payload,
    classify_backup_name,
    full_backup_name,
    is_compressed,
    parse_full_payload,
    section_backup_name,
    select_for_retention,
)
from thought.core.errors import IOFailureError, InvalidArgumentError, NotFoundError, ThoughtError
from thought.core.sections import is_valid_section_id
from thought.ports.section_store import SectionStore

from .atomic import atomic_write_bytes

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FileBackupEngine:
    """
    Snapshot engine over a SectionStore.

    Implements BackupEngine protocol. Artifacts are plain or gzipped files in
    one backup directory; everything known about a backup is derived from its
    name and stat. Every operation logs and returns a sentinel on failure.
    """

    def __init__(
        self,
        store: SectionStore,
        backup_dir: Path | str,
        config: BackupConfig | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.backup_dir = Path(backup_dir).expanduser()
        self.config = config or BackupConfig()
        self._clock = clock

    def _write_artifact(self, name: str, text: str) -> Path:
        data = text.encode("utf-8")
        if self.config.use_compression:
            data = gzip.compress(data)
        path = self.backup_dir / name
        atomic_write_bytes(path, data)
        return path

    def _read_artifact(self, path: Path) -> str:
        """Artifact text. Raises NotFoundError or IOFailureError."""
        if not path.is_file():
            raise NotFoundError(f"backup file not found: {path}")
        try:
            data = path.read_bytes()
            if is_compressed(path.name, self.config):
                data = gzip.decompress(data)
            return data.decode("utf-8")
        except (OSError, EOFError, zlib.error, gzip.BadGzipFile, UnicodeDecodeError) as e:
            raise IOFailureError(f"could not read {path.name}: {e}") from e

    # ---- creation ----

    def backup_section(self, section_id: str, rotate: bool = False) -> Path | None:
        """
        Snapshot one section.

        With rotate=True the live log is truncated only after the artifact
        has been fsynced and renamed into place.
        """
        content = self.store.read_content(section_id)
        if content is None:
            logger.error(f"No log file found for section: {section_id}")
            return None

        name = section_backup_name(section_id, self._clock(), self.config)
        try:
            path = self._write_artifact(name, content)
        except OSError as e:
            logger.error(f"Error creating backup for section {section_id}: {e}")
            return None

        if rotate and not self.store.rotate(section_id):
            logger.warning(f"Backup {path.name} written but {section_id} log was not rotated")

        logger.info(f"Backup created: {path}")
        self.cleanup_old_backups(section_id)
        return path

    def create_full_backup(self) -> Path | None:
        """Snapshot all sections and the metadata sidecar as one JSON document."""
        now = self._clock()
        sections = {}
        for section_id in sorted(self.store.list_sections()):
            content = self.store.read_content(section_id)
            if content is not None:
                sections[section_id] = content

        payload = build_full_payload(now, self.store.load_metadata(), sections)
        try:
            path = self._write_artifact(
                full_backup_name(now, self.config),
                json.dumps(payload, indent=2, ensure_ascii=False),
            )
        except OSError as e:
            logger.error(f"Error creating full backup: {e}")
            return None

        logger.info(f"Full backup created: {path} ({len(sections)} sections)")
        self.cleanup_old_full_backups()
        return path

    # ---- listing ----

    def list_all_backups(self) -> list[BackupRecord]:
        """Every artifact in the backup directory, in directory order."""
        if not self.backup_dir.exists():
            return []

        records = []
        try:
            for path in self.backup_dir.iterdir():
                # Dotfiles are in-flight temp files
                if path.name.startswith("."):
                    continue
                try:
                    if not path.is_file():
                        continue
                    stat = path.stat()
                except OSError as e:
                    logger.warning(f"Skipping unreadable backup {path.name}: {e}")
                    continue
                records.append(
                    BackupRecord(
                        path=path,
                        name=path.name,
                        modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                        size=stat.st_size,
                        kind=classify_backup_name(path.name, self.config),
                    )
                )
        except OSError as e:
            logger.error(f"Error listing backups: {e}")
            return []
        return records

    # ---- restore ----

    def restore_from_backup(
        self, path: Path | str, section_id: str | None = None, overwrite: bool = False
    ) -> RestoreResult:
        """
        Restore an artifact into the live store.

        Full backups merge per item: metadata and each section are written only
        if overwrite is set or the target does not exist yet. Sections missing
        from the backup are never deleted. Section backups need section_id.
        """
        path = Path(path)
        is_full = isinstance(classify_backup_name(path.name, self.config), FullBackup)
        try:
            text = self._read_artifact(path)
            payload = parse_full_payload(text) if is_full else None
        except ThoughtError as e:
            logger.error(f"Error restoring from backup {path.name}: {e}")
            return RestoreResult.failed(e)

        if payload is not None:
            return self._restore_full(payload, overwrite)

        if not section_id:
            logger.error("Section name required for individual backup restoration")
            return RestoreResult.failed(
                InvalidArgumentError("section name required for section backup restoration")
            )

        return self._restore_section(section_id, text, overwrite)

    def _restore_full(self, payload: dict, overwrite: bool) -> RestoreResult:
        result = RestoreResult(ok=True)

        metadata = payload.get("metadata")
        if metadata is not None:
            if overwrite or not self.store.metadata_exists():
                result.metadata_restored = self.store.save_metadata(metadata)
                if result.metadata_restored:
                    logger.info("Metadata restored")
            else:
                logger.info("Skipping metadata restoration (file exists)")

        sections: dict[str, str] = payload["sections"]
        result.total = len(sections)
        for section_id, content in sections.items():
            if not is_valid_section_id(section_id):
                logger.warning(f"Skipping section with invalid id in backup: {section_id!r}")
                result.skipped.append(section_id)
                continue
            if overwrite or not self.store.section_exists(section_id):
                if self.store.write_content(section_id, content):
                    result.restored += 1
            else:
                logger.info(f"Skipping section {section_id} (file exists)")
                result.skipped.append(section_id)

        logger.info(result.summary())
        return result

    def _restore_section(self, section_id: str, content: str, overwrite: bool) -> RestoreResult:
        if not is_valid_section_id(section_id):
            logger.error(f"Cannot restore into invalid section id: {section_id!r}")
            return RestoreResult.failed(InvalidArgumentError(f"invalid section id: {section_id!r}"))

        if not overwrite and self.store.section_exists(section_id):
            logger.info(f"Skipping section {section_id} (file exists)")
            return RestoreResult(ok=True, restored=0, total=1, skipped=[section_id])

        if not self.store.write_content(section_id, content):
            return RestoreResult.failed(IOFailureError(f"could not write section {section_id}"))

        logger.info(f"Section {section_id} restored successfully")
        return RestoreResult(ok=True, restored=1, total=1)

    # ---- retention ----

    def cleanup_old_backups(self, section_id: str) -> list[Path]:
        """Apply count and age retention to one section's backups."""
        records = [
            r for r in self.list_all_backups() if not r.is_full and r.section == section_id
        ]
        return self._prune(records, "backup")

    def cleanup_old_full_backups(self) -> list[Path]:
        records = [r for r in self.list_all_backups() if r.is_full]
        return self._prune(records, "full backup")

    def _prune(self, records: list[BackupRecord], label: str) -> list[Path]:
        doomed = select_for_retention(
            records,
            now=self._clock(),
            max_count=self.config.max_backups_per_section,
            retention_days=self.config.retention_days,
        )
        deleted = []
        for record in doomed:
            try:
                record.path.unlink()
            except OSError as e:
                logger.error(f"Error deleting old {label} {record.name}: {e}")
                continue
            deleted.append(record.path)
            logger.info(f"Deleted old {label}: {record.name}")
        return deleted
