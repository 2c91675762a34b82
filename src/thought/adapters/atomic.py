"""Durable whole-file writes."""

import os
from pathlib import Path


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """
    Write data to path via a fsynced temp file and a rename.

    Readers see either the old file or the complete new one. Raises OSError;
    the temp file is removed on failure.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.tmp")
    try:
        with open(tmp, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def atomic_write_text(path: Path, text: str) -> None:
    atomic_write_bytes(path, text.encode("utf-8"))
