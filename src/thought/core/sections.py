"""Pure section naming rules - no I/O dependencies."""

import re

from .errors import InvalidArgumentError

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")
_SECTION_ID = re.compile(r"^[A-Za-z0-9_-]+$")


def sanitize_section_name(name: str) -> str:
    """Replace every character outside [A-Za-z0-9_-] with an underscore."""
    return _UNSAFE_CHARS.sub("_", name)


def is_valid_section_id(section_id: str | None) -> bool:
    """True if the id is non-empty and already sanitized."""
    return bool(section_id) and _SECTION_ID.match(section_id) is not None


def validate_section_name(name: str, max_length: int, reserved_prefix: str = "") -> str:
    """Check a user-supplied section name and return its sanitized id.

    Raises InvalidArgumentError for empty or over-long names, and for ids
    that would collide with full backup artifact names.
    """
    if not name or not name.strip():
        raise InvalidArgumentError("Section name cannot be empty")
    if len(name) > max_length:
        raise InvalidArgumentError(f"Section name too long (max {max_length} chars)")
    section_id = sanitize_section_name(name)
    if is_reserved_section_id(section_id, reserved_prefix):
        raise InvalidArgumentError(f"Section name cannot start with '{reserved_prefix}'")
    return section_id


def is_reserved_section_id(section_id: str, reserved_prefix: str) -> bool:
    """True if backups of this section would be named like full backups."""
    return bool(reserved_prefix) and section_id.startswith(reserved_prefix)


def validate_description(description: str, max_length: int) -> str:
    if len(description) > max_length:
        raise InvalidArgumentError(f"Description too long (max {max_length} chars)")
    return description


def order_sections(sections: set[str], default_section: str) -> list[str]:
    """Default section first, then the rest alphabetically."""
    others = sorted(s for s in sections if s != default_section)
    if default_section in sections:
        return [default_section, *others]
    return others
