"""Tests for pure section naming rules."""

import pytest

from thought.core.errors import InvalidArgumentError
from thought.core.sections import (
    is_valid_section_id,
    order_sections,
    sanitize_section_name,
    validate_description,
    validate_section_name,
)


class TestSanitize:
    def test_replaces_unsafe_characters(self):
        assert sanitize_section_name("work notes!") == "work_notes_"

    def test_keeps_allowed_characters(self):
        assert sanitize_section_name("Side-project_2") == "Side-project_2"

    def test_path_separators_are_neutralized(self):
        assert sanitize_section_name("../etc/passwd") == "___etc_passwd"

    def test_non_ascii_replaced(self):
        assert sanitize_section_name("café") == "caf_"


class TestIsValidSectionId:
    @pytest.mark.parametrize("section_id", ["base", "work_notes_", "a-b", "X9"])
    def test_valid(self, section_id):
        assert is_valid_section_id(section_id)

    @pytest.mark.parametrize("section_id", ["", None, "a b", "../x", "x.txt"])
    def test_invalid(self, section_id):
        assert not is_valid_section_id(section_id)


class TestValidateSectionName:
    def test_returns_sanitized_id(self):
        assert validate_section_name("work notes!", 30) == "work_notes_"

    @pytest.mark.parametrize("name", ["", "   "])
    def test_rejects_empty(self, name):
        with pytest.raises(InvalidArgumentError, match="cannot be empty"):
            validate_section_name(name, 30)

    def test_rejects_too_long(self):
        with pytest.raises(InvalidArgumentError, match="max 5 chars"):
            validate_section_name("toolong", 5)

    @pytest.mark.parametrize("name", ["full-backup-notes", "full-backup-"])
    def test_rejects_full_backup_prefix(self, name):
        with pytest.raises(InvalidArgumentError, match="cannot start with"):
            validate_section_name(name, 30, "full-backup-")

    def test_prefix_elsewhere_is_fine(self):
        assert validate_section_name("my-full-backup-notes", 30, "full-backup-") == "my-full-backup-notes"
        assert validate_section_name("full backup notes", 30, "full-backup-") == "full_backup_notes"

    def test_description_length(self):
        assert validate_description("ok", 10) == "ok"
        with pytest.raises(InvalidArgumentError, match="Description too long"):
            validate_description("x" * 11, 10)


class TestOrderSections:
    def test_default_first_then_alphabetical(self):
        assert order_sections({"zeta", "base", "alpha"}, "base") == ["base", "alpha", "zeta"]

    def test_without_default(self):
        assert order_sections({"b", "a"}, "base") == ["a", "b"]
