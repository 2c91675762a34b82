"""Section storage interface."""

from typing import Protocol


class SectionStore(Protocol):
    """Interface for the append-only section logs and their metadata."""

    def create_section(self, name: str, description: str) -> str | None:
        """Create a section (idempotent) and set its description. Returns the id."""
        ...

    def list_sections(self) -> set[str]:
        """Ids of all sections on disk."""
        ...

    def append_entry(self, section_id: str, text: str) -> bool:
        """Append one entry. Returns True if the log should be rotated."""
        ...

    def load_entries(self, section_id: str) -> list[str]:
        """All non-blank entries in append order."""
        ...

    def ensure_default_section(self) -> None:
        """Create the default section if missing."""
        ...

    def rotate(self, section_id: str) -> bool:
        """Truncate a section's log to empty."""
        ...

    def section_exists(self, section_id: str) -> bool:
        ...

    def read_content(self, section_id: str) -> str | None:
        """Raw log text, or None if the section has no log file."""
        ...

    def write_content(self, section_id: str, content: str) -> bool:
        """Replace a section's log text."""
        ...

    def load_metadata(self) -> dict[str, dict]:
        ...

    def save_metadata(self, metadata: dict[str, dict]) -> bool:
        ...

    def metadata_exists(self) -> bool:
        ...
