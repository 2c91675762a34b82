"""File-based section storage adapter."""

import json
import logging
from pathlib import Path

from thought.config import METADATA_FILENAME, BackupConfig
from thought.core.sections import is_reserved_section_id, is_valid_section_id, sanitize_section_name

from .atomic import atomic_write_text

logger = logging.getLogger(__name__)


class FileSectionStore:
    """
    File-based section storage.

    Implements SectionStore protocol. Each section is an append-only
    ``<id>.txt`` file; descriptions live in one ``metadata.json`` sidecar
    that is rewritten wholesale on every change.

    Storage faults are logged and turned into safe defaults; nothing here
    raises into the interactive session.
    """

    def __init__(
        self,
        sections_dir: Path | str,
        rotation_size: int = 5 * 1024 * 1024,
        default_section: str = "base",
        default_description: str = "General thoughts",
        reserved_prefix: str = BackupConfig.full_backup_prefix,
    ):
        self.sections_dir = Path(sections_dir).expanduser()
        self.metadata_file = self.sections_dir / METADATA_FILENAME
        self.rotation_size = rotation_size
        self.default_section = default_section
        self.default_description = default_description
        self.reserved_prefix = reserved_prefix
        try:
            self.sections_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Could not create sections directory {self.sections_dir}: {e}")

    def _log_path(self, section_id: str) -> Path | None:
        """Path of a section's log, or None if the id is not a sanitized id."""
        if not is_valid_section_id(section_id):
            logger.warning(f"Rejecting invalid section id: {section_id!r}")
            return None
        return self.sections_dir / f"{section_id}.txt"

    # ---- sections ----

    def create_section(self, name: str, description: str) -> str | None:
        """Create a section if absent and (re)write its description."""
        section_id = sanitize_section_name(name)
        if is_reserved_section_id(section_id, self.reserved_prefix):
            logger.error(f"Section id {section_id!r} is reserved for full backups")
            return None
        path = self._log_path(section_id)
        if path is None:
            return None

        try:
            with open(path, "x", encoding="utf-8"):
                pass
        except FileExistsError:
            pass
        except OSError as e:
            logger.error(f"Error creating section {section_id}: {e}")
            return None

        metadata = self.load_metadata()
        metadata[section_id] = {"description": description}
        if not self.save_metadata(metadata):
            return None
        return section_id

    def list_sections(self) -> set[str]:
        """Section ids derived from the log files present."""
        try:
            return {
                p.stem
                for p in self.sections_dir.glob("*.txt")
                if p.is_file() and p.name != METADATA_FILENAME and is_valid_section_id(p.stem)
            }
        except OSError as e:
            logger.error(f"Error loading sections: {e}")
            return set()

    def section_exists(self, section_id: str) -> bool:
        path = self._log_path(section_id)
        return path is not None and path.is_file()

    def ensure_default_section(self) -> None:
        if self.section_exists(self.default_section):
            return
        if self.create_section(self.default_section, self.default_description):
            logger.info(f"Created default section: {self.default_section}")

    def describe(self, section_id: str) -> str:
        record = self.load_metadata().get(section_id)
        if not isinstance(record, dict):
            return ""
        description = record.get("description", "")
        return description if isinstance(description, str) else ""

    # ---- entries ----

    def append_entry(self, section_id: str, text: str) -> bool:
        """Append one line. Returns True once the file outgrows the rotation size."""
        path = self._log_path(section_id)
        if path is None:
            return False
        try:
            with open(path, "a", encoding="utf-8", newline="") as f:
                f.write(text + "\n")
            return path.stat().st_size > self.rotation_size
        except OSError as e:
            logger.error(f"Error saving log to {section_id}: {e}")
            return False

    def load_entries(self, section_id: str) -> list[str]:
        """Non-blank lines in file order, trailing whitespace removed."""
        content = self.read_content(section_id)
        if not content:
            return []
        lines = (line.rstrip() for line in content.split("\n"))
        return [line for line in lines if line]

    def rotate(self, section_id: str) -> bool:
        """Truncate the live log. Callers snapshot it first."""
        path = self._log_path(section_id)
        if path is None:
            return False
        try:
            with open(path, "w", encoding="utf-8"):
                pass
            return True
        except OSError as e:
            logger.error(f"Error truncating log for {section_id}: {e}")
            return False

    # ---- raw content, used by the backup engine ----

    def read_content(self, section_id: str) -> str | None:
        """Exact log text, or None if the file is missing or unreadable."""
        path = self._log_path(section_id)
        if path is None or not path.exists():
            return None
        try:
            with open(path, encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error loading logs for {section_id}: {e}")
            return None

    def write_content(self, section_id: str, content: str) -> bool:
        path = self._log_path(section_id)
        if path is None:
            return False
        try:
            atomic_write_text(path, content)
            return True
        except OSError as e:
            logger.error(f"Error writing section {section_id}: {e}")
            return False

    # ---- metadata sidecar ----

    def metadata_exists(self) -> bool:
        return self.metadata_file.exists()

    def load_metadata(self) -> dict[str, dict]:
        if not self.metadata_file.exists():
            return {}
        try:
            data = json.loads(self.metadata_file.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Error loading section metadata: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Section metadata is not a JSON object: {self.metadata_file}")
            return {}
        return data

    def save_metadata(self, metadata: dict[str, dict]) -> bool:
        try:
            atomic_write_text(
                self.metadata_file, json.dumps(metadata, indent=2, ensure_ascii=False)
            )
            return True
        except OSError as e:
            logger.error(f"Error saving section metadata: {e}")
            return False
