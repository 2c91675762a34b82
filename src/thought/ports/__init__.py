"""Ports - interfaces/protocols for storage dependencies."""

from .section_store import SectionStore
from .backup_engine import BackupEngine

__all__ = [
    "SectionStore",
    "BackupEngine",
]
