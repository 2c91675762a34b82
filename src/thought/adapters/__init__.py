"""Adapters - I/O implementations of ports."""

from .file_sections import FileSectionStore
from .file_backups import FileBackupEngine

__all__ = [
    "FileSectionStore",
    "FileBackupEngine",
]
