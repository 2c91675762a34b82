"""Tests for the interactive shell."""

from unittest.mock import MagicMock

import pytest

from thought.config import Config
from thought.shell import Session, handle_line, handle_menu_choice
from thought.workflows import get_engine, get_store


@pytest.fixture
def config(tmp_path):
    return Config(base_dir=str(tmp_path), auto_backup_minutes=0)


@pytest.fixture
def session(config):
    store = get_store(config)
    store.ensure_default_section()
    answers = []
    session = Session(
        config=config,
        store=store,
        engine=get_engine(config, store),
        prompt=lambda text: answers.pop(0),
        confirm=lambda text: True,
    )
    session.answers = answers
    return session


@pytest.fixture
def logging_session(session):
    handle_menu_choice(session, "b")
    return session


class TestMenu:
    def test_default_section(self, session):
        handle_menu_choice(session, "b")
        assert session.current_section == "base"

    def test_create_section(self, session):
        session.answers.extend(["work notes!", "Work stuff"])

        handle_menu_choice(session, "n")

        assert session.current_section == "work_notes_"
        assert session.store.describe("work_notes_") == "Work stuff"

    def test_create_rejects_empty_name(self, session, capsys):
        session.answers.append("  ")

        handle_menu_choice(session, "n")

        assert session.current_section is None
        assert "cannot be empty" in capsys.readouterr().out
        assert session.store.list_sections() == {"base"}

    def test_create_rejects_full_backup_prefix(self, session, capsys):
        session.answers.append("full-backup-notes")

        handle_menu_choice(session, "n")

        assert session.current_section is None
        assert "cannot start with" in capsys.readouterr().out
        assert session.store.list_sections() == {"base"}

    def test_create_rejects_long_description(self, session, capsys):
        session.answers.extend(["work", "x" * 101])

        handle_menu_choice(session, "n")

        assert "Description too long" in capsys.readouterr().out
        assert "work" not in session.store.list_sections()

    def test_numbered_choice_is_alphabetical(self, session):
        session.store.create_section("zeta", "")
        session.store.create_section("alpha", "")

        handle_menu_choice(session, "2")

        assert session.current_section == "zeta"

    def test_invalid_choice(self, session, capsys):
        handle_menu_choice(session, "9")
        assert session.current_section is None
        assert "Invalid selection" in capsys.readouterr().out

    def test_exit(self, session):
        handle_menu_choice(session, "X")
        assert session.running is False


class TestLogging:
    def test_plain_line_is_appended(self, logging_session):
        handle_line(logging_session, "  remember the milk  ")

        entries = logging_session.store.load_entries("base")
        assert len(entries) == 1
        assert entries[0].endswith(" remember the milk")
        assert logging_session.entries == entries

    def test_ignored_outside_a_section(self, session):
        handle_line(session, "hello")
        assert session.store.load_entries("base") == []

    def test_tag(self, logging_session):
        handle_line(logging_session, "/tag idea build a boat")
        assert logging_session.entries[-1].endswith("[idea] build a boat")

    def test_tag_usage(self, logging_session, capsys):
        handle_line(logging_session, "/tag idea")
        assert "Usage: /tag <tag> <message>" in capsys.readouterr().out
        assert logging_session.entries == []

    def test_search(self, logging_session, capsys):
        handle_line(logging_session, "buy milk")
        handle_line(logging_session, "walk dog")
        capsys.readouterr()

        handle_line(logging_session, "/search MILK")

        out = capsys.readouterr().out
        assert 'Search results for "MILK" (1 matches)' in out
        assert "buy milk" in out
        assert "walk dog" not in out

    def test_count(self, logging_session, capsys):
        handle_line(logging_session, "one")
        handle_line(logging_session, "two")
        handle_line(logging_session, "/count")
        assert "Total logs: 2" in capsys.readouterr().out

    def test_today(self, logging_session, capsys):
        handle_line(logging_session, "fresh thought")
        handle_line(logging_session, "/today")
        assert "Today's logs (1):" in capsys.readouterr().out

    def test_unknown_command(self, logging_session, capsys):
        handle_line(logging_session, "/dance")
        assert "Unknown command: /dance" in capsys.readouterr().out

    def test_help(self, logging_session, capsys):
        handle_line(logging_session, "/help")
        out = capsys.readouterr().out
        assert "/backup-all" in out
        assert "/restore [type] [number]" in out


class TestBackupCommands:
    def test_backup(self, logging_session, capsys):
        handle_line(logging_session, "note")
        handle_line(logging_session, "/backup")

        assert "Backup created" in capsys.readouterr().out
        [record] = logging_session.engine.list_all_backups()
        assert record.section == "base"

    def test_backup_all(self, logging_session, capsys):
        handle_line(logging_session, "/backup-all")
        assert "Full backup created" in capsys.readouterr().out

    def test_list_backups(self, logging_session, capsys):
        handle_line(logging_session, "note")
        handle_line(logging_session, "/backup")
        capsys.readouterr()

        handle_line(logging_session, "/list-backups")

        out = capsys.readouterr().out
        assert "No full backups available." in out
        assert "1. base: base-" in out

    def test_restore_confirmed(self, logging_session, capsys):
        handle_line(logging_session, "keep this")
        handle_line(logging_session, "/backup")
        logging_session.store.write_content("base", "")

        handle_line(logging_session, "/restore section 1")

        assert "Restoration completed successfully" in capsys.readouterr().out
        assert logging_session.entries[0].endswith("keep this")

    def test_restore_cancelled(self, logging_session, capsys):
        logging_session.confirm = lambda text: False
        handle_line(logging_session, "keep this")
        handle_line(logging_session, "/backup")
        logging_session.store.write_content("base", "")

        handle_line(logging_session, "/restore section 1")

        assert "Restoration cancelled" in capsys.readouterr().out
        assert logging_session.store.load_entries("base") == []

    def test_restore_invalid_number(self, logging_session, capsys):
        handle_line(logging_session, "/restore full 3")
        assert "No full backups found." in capsys.readouterr().out

    def test_commands_run_under_session_lock(self, logging_session, tmp_path):
        seen = []
        engine = MagicMock()
        engine.backup_section.side_effect = lambda *a, **kw: seen.append(logging_session.lock.locked()) or tmp_path
        logging_session.engine = engine

        handle_line(logging_session, "/backup")

        assert seen == [True]
        assert not logging_session.lock.locked()


class TestNavigation:
    def test_menu(self, logging_session):
        handle_line(logging_session, "/menu")
        assert logging_session.current_section is None
        assert logging_session.entries == []

    def test_exit(self, logging_session):
        handle_line(logging_session, "/exit")
        assert logging_session.running is False
