"""Pure backup domain logic - naming, classification and retention.

Backup records are derived entirely from the artifact's file name and its
filesystem stat; nothing about a backup is stored anywhere else.
"""

import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path

from thought.config import BackupConfig

from .errors import CorruptDataError, ThoughtError

_EMBEDDED_TIMESTAMP = re.compile(
    r"^(?P<section>.+?)-\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}-\d{3}Z"
)


@dataclass(frozen=True)
class FullBackup:
    """Snapshot of every section plus the metadata sidecar."""

    label = "full"


@dataclass(frozen=True)
class SectionBackup:
    """Snapshot of one section's raw text."""

    section: str | None

    label = "section"


BackupKind = FullBackup | SectionBackup


@dataclass
class BackupRecord:
    """A backup artifact found on disk."""

    path: Path
    name: str
    modified: datetime
    size: int
    kind: BackupKind

    @property
    def type(self) -> str:
        return self.kind.label

    @property
    def section(self) -> str | None:
        if isinstance(self.kind, SectionBackup):
            return self.kind.section
        return None

    @property
    def is_full(self) -> bool:
        return isinstance(self.kind, FullBackup)

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "name": self.name,
            "section": self.section,
            "path": str(self.path),
            "modified": self.modified.isoformat(),
            "size": self.size,
        }


def backup_timestamp(now: datetime) -> str:
    """ISO-8601 UTC instant with ':' and '.' replaced by '-'.

    2025-01-15T09:30:00.123Z -> 2025-01-15T09-30-00-123Z
    """
    now = now.astimezone(timezone.utc)
    return f"{now:%Y-%m-%dT%H-%M-%S}-{now.microsecond // 1000:03d}Z"


def _extension(config: BackupConfig) -> str:
    if config.use_compression:
        return config.backup_extension + config.compressed_suffix
    return config.backup_extension


def section_backup_name(section_id: str, now: datetime, config: BackupConfig) -> str:
    return f"{section_id}-{backup_timestamp(now)}{_extension(config)}"


def full_backup_name(now: datetime, config: BackupConfig) -> str:
    return f"{config.full_backup_prefix}{backup_timestamp(now)}{_extension(config)}"


def is_compressed(name: str, config: BackupConfig) -> bool:
    return name.endswith(config.compressed_suffix)


def classify_backup_name(name: str, config: BackupConfig) -> BackupKind:
    """Derive the backup kind (and owning section) from an artifact name."""
    if name.startswith(config.full_backup_prefix):
        return FullBackup()

    match = _EMBEDDED_TIMESTAMP.match(name)
    if match:
        return SectionBackup(match.group("section"))

    # Not one of ours, fall back to the text before the first dash
    head, sep, _ = name.partition("-")
    return SectionBackup(head if sep and head else None)


def newest_first(records: list[BackupRecord]) -> list[BackupRecord]:
    """Sort by modification time, newest first; name breaks ties."""
    return sorted(records, key=lambda r: (r.modified, r.name), reverse=True)


def select_for_retention(
    records: list[BackupRecord],
    now: datetime,
    max_count: int,
    retention_days: int,
) -> list[BackupRecord]:
    """
    Pick the backups that retention policy removes.

    Count rule: keep the newest max_count (disabled when max_count <= 0).
    Age rule: drop anything modified before now - retention_days
    (disabled when retention_days <= 0). The result is the union of both.
    """
    ordered = newest_first(records)
    doomed: dict[Path, BackupRecord] = {}

    if max_count > 0:
        for record in ordered[max_count:]:
            doomed[record.path] = record

    if retention_days > 0:
        cutoff = now - timedelta(days=retention_days)
        for record in ordered:
            if record.modified < cutoff:
                doomed[record.path] = record

    return [r for r in ordered if r.path in doomed]


@dataclass
class RestoreResult:
    """Outcome of a restore: per-item counts rather than all-or-nothing."""

    ok: bool
    restored: int = 0
    total: int = 0
    skipped: list[str] = field(default_factory=list)
    metadata_restored: bool = False
    error: str | None = None
    cause: ThoughtError | None = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def failed(cls, cause: ThoughtError) -> "RestoreResult":
        return cls(ok=False, error=str(cause), cause=cause)

    def summary(self) -> str:
        if not self.ok:
            return f"restore failed: {self.error}"
        return f"restored {self.restored} of {self.total} sections"


def build_full_payload(now: datetime, metadata: dict, sections: dict[str, str]) -> dict:
    return {
        "timestamp": now.astimezone(timezone.utc).isoformat(),
        "metadata": metadata,
        "sections": sections,
    }


def parse_full_payload(text: str) -> dict:
    """Parse and sanity-check a full backup's JSON payload.

    Raises CorruptDataError if the document is not a full backup.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptDataError(f"full backup is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise CorruptDataError("full backup payload is not a JSON object")

    sections = payload.get("sections")
    if not isinstance(sections, dict) or not all(isinstance(v, str) for v in sections.values()):
        raise CorruptDataError("full backup has no usable 'sections' mapping")

    metadata = payload.get("metadata")
    if metadata is not None and not isinstance(metadata, dict):
        raise CorruptDataError("full backup 'metadata' is not a JSON object")
    if metadata and not all(isinstance(v, dict) for v in metadata.values()):
        raise CorruptDataError("full backup 'metadata' entries must be JSON objects")

    return payload
