"""Tests for the file-based section store."""

import json
import logging
from unittest.mock import patch

import pytest

from thought.adapters.file_sections import FileSectionStore


@pytest.fixture
def sections_dir(tmp_path):
    return tmp_path / "sections"


@pytest.fixture
def store(sections_dir):
    return FileSectionStore(sections_dir)


class TestCreateSection:
    def test_creates_dir_on_init(self, sections_dir, store):
        assert sections_dir.is_dir()

    def test_sanitizes_and_writes_files(self, sections_dir, store):
        section_id = store.create_section("work notes!", "Things for work")

        assert section_id == "work_notes_"
        assert (sections_dir / "work_notes_.txt").read_text() == ""
        metadata = json.loads((sections_dir / "metadata.json").read_text())
        assert metadata == {"work_notes_": {"description": "Things for work"}}

    def test_idempotent_keeps_content_and_latest_description(self, sections_dir, store):
        store.create_section("work", "first")
        store.append_entry("work", "keep me")

        assert store.create_section("work", "second") == "work"

        assert (sections_dir / "work.txt").read_text() == "keep me\n"
        assert store.describe("work") == "second"
        assert sorted(p.name for p in sections_dir.iterdir()) == ["metadata.json", "work.txt"]

    def test_keeps_other_descriptions(self, store):
        store.create_section("a", "A")
        store.create_section("b", "B")
        assert store.load_metadata() == {"a": {"description": "A"}, "b": {"description": "B"}}

    def test_empty_name_rejected(self, sections_dir, store):
        assert store.create_section("", "nothing") is None
        assert not (sections_dir / "metadata.json").exists()

    def test_full_backup_prefix_rejected(self, sections_dir, store, caplog):
        with caplog.at_level(logging.ERROR):
            assert store.create_section("full-backup-notes", "x") is None
        assert "reserved" in caplog.text
        assert not (sections_dir / "full-backup-notes.txt").exists()
        assert not (sections_dir / "metadata.json").exists()

    def test_io_failure_returns_none(self, store, caplog):
        with patch("thought.adapters.file_sections.open", side_effect=PermissionError("denied"), create=True):
            with caplog.at_level(logging.ERROR):
                assert store.create_section("work", "x") is None
        assert "denied" in caplog.text


class TestListSections:
    def test_excludes_metadata_and_other_files(self, sections_dir, store):
        store.create_section("a", "")
        store.create_section("b", "")
        (sections_dir / "notes.md").write_text("ignored")

        assert store.list_sections() == {"a", "b"}

    def test_empty(self, store):
        assert store.list_sections() == set()


class TestEntries:
    def test_append_then_load_in_order(self, store):
        store.create_section("work", "")
        for text in ["first", "second", "third"]:
            store.append_entry("work", text)

        assert store.load_entries("work") == ["first", "second", "third"]

    def test_append_creates_file_on_first_write(self, sections_dir, store):
        store.append_entry("fresh", "hello")
        assert (sections_dir / "fresh.txt").read_text() == "hello\n"

    def test_load_drops_blank_lines_and_trailing_whitespace(self, store):
        store.write_content("work", "a  \n\n   \n  indented\nb\t\n")
        assert store.load_entries("work") == ["a", "  indented", "b"]

    def test_load_missing_section(self, store):
        assert store.load_entries("nope") == []

    def test_rotation_needed_past_threshold(self, sections_dir):
        store = FileSectionStore(sections_dir, rotation_size=10)
        assert store.append_entry("work", "12345") is False
        assert store.append_entry("work", "67890") is True

    def test_append_failure_is_swallowed(self, store, caplog):
        with patch("thought.adapters.file_sections.open", side_effect=OSError("disk full"), create=True):
            with caplog.at_level(logging.ERROR):
                assert store.append_entry("work", "x") is False
        assert "disk full" in caplog.text

    def test_invalid_id_never_touches_disk(self, tmp_path, store):
        assert store.append_entry("../escape", "x") is False
        assert store.load_entries("../escape") == []
        assert not (tmp_path / "escape.txt").exists()

    def test_rotate_truncates(self, store):
        store.append_entry("work", "x")
        assert store.rotate("work") is True
        assert store.read_content("work") == ""


class TestRawContent:
    def test_round_trip_preserves_line_endings(self, store):
        content = "crlf line\r\nunicode ✓\n"
        assert store.write_content("work", content) is True
        assert store.read_content("work") == content

    def test_read_missing(self, store):
        assert store.read_content("nope") is None

    def test_section_exists(self, store):
        assert not store.section_exists("work")
        store.create_section("work", "")
        assert store.section_exists("work")


class TestDefaultSection:
    def test_creates_default(self, store):
        store.ensure_default_section()
        assert "base" in store.list_sections()
        assert store.describe("base") == "General thoughts"

    def test_does_not_overwrite_existing(self, store):
        store.create_section("base", "mine")
        store.ensure_default_section()
        assert store.describe("base") == "mine"

    def test_custom_default(self, sections_dir):
        store = FileSectionStore(sections_dir, default_section="inbox", default_description="Inbox")
        store.ensure_default_section()
        assert store.describe("inbox") == "Inbox"


class TestMetadata:
    def test_missing_is_empty(self, store):
        assert store.metadata_exists() is False
        assert store.load_metadata() == {}

    def test_corrupt_is_logged_and_empty(self, sections_dir, store, caplog):
        (sections_dir / "metadata.json").write_text("{not json")
        with caplog.at_level(logging.ERROR):
            assert store.load_metadata() == {}
        assert "metadata" in caplog.text

    def test_non_object_is_empty(self, sections_dir, store):
        (sections_dir / "metadata.json").write_text("[]")
        assert store.load_metadata() == {}

    @pytest.mark.parametrize("record", ["oops", ["x"], {"description": 3}, {}])
    def test_describe_tolerates_malformed_entries(self, store, record):
        store.save_metadata({"work": record})
        assert store.describe("work") == ""

    def test_save_is_pretty_printed(self, sections_dir, store):
        store.save_metadata({"a": {"description": "é"}})
        text = (sections_dir / "metadata.json").read_text(encoding="utf-8")
        assert text == '{\n  "a": {\n    "description": "é"\n  }\n}'
