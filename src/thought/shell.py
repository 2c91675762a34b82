"""Interactive shell: section menu and slash-command logger.

All state lives on an explicit Session passed to every handler. Handlers run
while holding session.lock, which the auto-backup job also takes, so a
scheduled backup only ever runs between two commands.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Callable

import click
from apscheduler.schedulers.background import BackgroundScheduler

from .config import Config
from .core.entries import create_tagged_message, entries_for_day, search_entries
from .core.errors import InvalidArgumentError
from .core.sections import order_sections, validate_description, validate_section_name
from .display import max_entries_for_terminal, render_backups, render_screen
from .ports.backup_engine import BackupEngine
from .ports.section_store import SectionStore
from .scheduler import setup_scheduler
from .workflows import backups_by_kind, get_engine, get_store, log_message, restore_record, select_backup

logger = logging.getLogger(__name__)


def _prompt(text: str) -> str:
    return click.prompt(text, default="", show_default=False, prompt_suffix="")


def _confirm(text: str) -> bool:
    return _prompt(text).strip().lower() == "y"


@dataclass
class Session:
    """Everything the shell knows between input lines."""

    config: Config
    store: SectionStore
    engine: BackupEngine
    current_section: str | None = None
    entries: list[str] = field(default_factory=list)
    running: bool = True
    lock: threading.Lock = field(default_factory=threading.Lock)
    scheduler: BackgroundScheduler | None = None
    prompt: Callable[[str], str] = _prompt
    confirm: Callable[[str], bool] = _confirm


def _warn(message: str) -> None:
    click.echo(click.style(message, fg="yellow"))


def _error(message: str) -> None:
    click.echo(click.style(message, fg="red"))


def _ok(message: str) -> None:
    click.echo(click.style(message, fg="green"))


# ============== Screens ==============


def show(session: Session, entries: list[str] | None = None, header: str | None = None) -> None:
    """Redraw the logger view. Without explicit entries, show the newest ones."""
    description = session.store.describe(session.current_section)
    limit = None
    if entries is None:
        entries = session.entries
        limit = max_entries_for_terminal(bool(description))
    click.clear()
    for line in render_screen(session.current_section, description, entries, header, limit):
        click.echo(line)


def start_section(session: Session, section_id: str) -> None:
    session.current_section = section_id
    session.entries = session.store.load_entries(section_id)
    click.echo(f"Loaded {len(session.entries)} log entries")
    show(session)


def main_menu(session: Session) -> None:
    """Show the section menu and act on one choice."""
    config = session.config
    sections = session.store.list_sections()

    click.echo(click.style("Select a section to log your thoughts:", fg="cyan"))
    if not sections:
        _warn("No sections found. Create your first section:")
    else:
        click.echo(click.style("Available sections:", bold=True))
        if config.default_section in sections:
            desc = session.store.describe(config.default_section) or config.default_section_description
            click.echo(f"{click.style('b', fg='green')}. {config.default_section} - {desc}")
        others = [s for s in order_sections(sections, config.default_section) if s != config.default_section]
        for i, section in enumerate(others, 1):
            desc = session.store.describe(section) or "No description"
            click.echo(f"{click.style(str(i), fg='green')}. {section} - {desc}")

    click.echo("\n" + click.style("n", fg="green") + ". Create new section")
    click.echo(click.style("x", fg="green") + ". Exit")

    answer = session.prompt("Enter your choice: ")
    with session.lock:
        handle_menu_choice(session, answer)


def handle_menu_choice(session: Session, answer: str) -> None:
    config = session.config
    answer = answer.strip().lower()

    if answer == "x":
        session.running = False
        return

    if answer == "b":
        session.store.ensure_default_section()
        start_section(session, config.default_section)
        return

    if answer == "n":
        create_section_flow(session)
        return

    others = [
        s for s in order_sections(session.store.list_sections(), config.default_section)
        if s != config.default_section
    ]
    try:
        choice = int(answer)
    except ValueError:
        choice = 0
    if not 1 <= choice <= len(others):
        _error("Invalid selection")
        return
    start_section(session, others[choice - 1])


def create_section_flow(session: Session) -> None:
    config = session.config
    try:
        name = session.prompt(f"Enter new section name (max {config.max_section_name_length} chars): ")
        validate_section_name(name, config.max_section_name_length, config.backup.full_backup_prefix)
        description = session.prompt(
            f"Enter section description (max {config.max_description_length} chars): "
        )
        validate_description(description, config.max_description_length)
    except InvalidArgumentError as e:
        _warn(str(e))
        return

    section_id = session.store.create_section(name, description)
    if section_id is None:
        _error("Could not create section. Please check the logs.")
        return
    _ok(f"Created section: {section_id}")
    start_section(session, section_id)


# ============== Commands ==============


def record(session: Session, message: str) -> None:
    """Append a message to the current section, rotating the log if needed."""
    logged = log_message(session.store, session.engine, session.current_section, message)
    if logged.rotated:
        session.entries = session.store.load_entries(session.current_section)
    else:
        session.entries.append(logged.entry)
    show(session)


def cmd_help(session: Session, *args: str) -> None:
    click.clear()
    click.echo(click.style("=== THOUGHT LOGGER COMMANDS ===", fg="green", bold=True))
    for usage, text in HELP_LINES:
        click.echo(f"{click.style(usage, fg='cyan')} - {text}")
    click.echo(click.style("=============================", fg="green", bold=True))


def cmd_clear(session: Session, *args: str) -> None:
    session.entries = session.store.load_entries(session.current_section)
    show(session, [])


def cmd_search(session: Session, *terms: str) -> None:
    term = " ".join(terms)
    if not term:
        _warn("Please provide a search term")
        return
    results = search_entries(session.entries, term)
    show(
        session,
        results,
        click.style(f'Search results for "{term}" ({len(results)} matches):', fg="yellow"),
    )


def cmd_tag(session: Session, tag: str | None = None, *words: str) -> None:
    message = " ".join(words)
    if not tag or not message:
        _warn("Usage: /tag <tag> <message>")
        return
    record(session, create_tagged_message(tag, message))


def cmd_count(session: Session, *args: str) -> None:
    click.echo(click.style(f"Total logs: {len(session.entries)}", fg="cyan"))


def cmd_today(session: Session, *args: str) -> None:
    todays = entries_for_day(session.entries, date.today())
    show(session, todays, click.style(f"Today's logs ({len(todays)}):", fg="yellow"))


def cmd_backup(session: Session, *args: str) -> None:
    path = session.engine.backup_section(session.current_section)
    if path is None:
        _error(f"Backup of {session.current_section} failed. Please check the logs.")
    else:
        _ok(f"Backup created: {path}")


def cmd_backup_all(session: Session, *args: str) -> None:
    path = session.engine.create_full_backup()
    if path is None:
        _error("Full backup failed. Please check the logs.")
    else:
        _ok(f"Full backup created: {path}")


def cmd_list_backups(session: Session, *args: str) -> None:
    for line in render_backups(*backups_by_kind(session.engine)):
        click.echo(line)
    click.echo("Use /restore <type> <number> to restore a specific backup")
    click.echo("Example: /restore full 1 or /restore section 1")


def cmd_restore(session: Session, kind: str | None = None, number: str | None = None, *args: str) -> None:
    if not kind or not number:
        cmd_list_backups(session)
        return

    try:
        backup = select_backup(session.engine, kind, number)
    except InvalidArgumentError as e:
        _error(str(e))
        return

    _warn(f"Restoring from backup: {backup.name}")
    if not session.confirm("This will overwrite current data. Proceed? (y/n): "):
        _warn("Restoration cancelled")
        return

    result = restore_record(session.engine, backup, overwrite=True)
    if not result:
        _error("Restoration failed. Please check the logs.")
        return

    session.entries = session.store.load_entries(session.current_section)
    show(session)
    _ok(f"Restoration completed successfully ({result.summary()})")


def cmd_menu(session: Session, *args: str) -> None:
    session.current_section = None
    session.entries = []


def cmd_exit(session: Session, *args: str) -> None:
    session.running = False


COMMANDS: dict[str, Callable[..., None]] = {
    "/help": cmd_help,
    "/clear": cmd_clear,
    "/search": cmd_search,
    "/tag": cmd_tag,
    "/count": cmd_count,
    "/today": cmd_today,
    "/backup": cmd_backup,
    "/backup-all": cmd_backup_all,
    "/list-backups": cmd_list_backups,
    "/restore": cmd_restore,
    "/menu": cmd_menu,
    "/exit": cmd_exit,
}

HELP_LINES = [
    ("/help", "Display this help message"),
    ("/clear", "Clear the display (logs remain saved)"),
    ("/search <term>", "Search for logs containing a term"),
    ("/tag <tag> <message>", "Add a tagged thought"),
    ("/count", "Show total number of logs"),
    ("/today", "Show only today's logs"),
    ("/backup", "Create backup of current section"),
    ("/backup-all", "Create full backup of all sections"),
    ("/list-backups", "List all available backups"),
    ("/restore [type] [number]", "Restore from backup"),
    ("/menu", "Return to section selection menu"),
    ("/exit", "Exit the program"),
]


def handle_line(session: Session, line: str) -> None:
    """Process one input line in the logger view."""
    if session.current_section is None:
        return

    trimmed = line.strip()
    with session.lock:
        if not trimmed:
            show(session)
            return

        if not trimmed.startswith("/"):
            record(session, trimmed)
            return

        cmd, *args = trimmed.split()
        handler = COMMANDS.get(cmd)
        if handler is None:
            _warn(f"Unknown command: {cmd}. Type /help for available commands.")
            return
        handler(session, *args)


def run_shell(config: Config) -> None:
    """Run the interactive shell until /exit, 'x' or end of input."""
    logger.debug(f"Using data directory {config.home}")
    store = get_store(config)
    store.ensure_default_section()
    session = Session(config=config, store=store, engine=get_engine(config, store))

    session.scheduler = setup_scheduler(session.engine, config.auto_backup_minutes, session.lock)
    if session.scheduler is not None:
        session.scheduler.start()

    try:
        while session.running:
            if session.current_section is None:
                main_menu(session)
            else:
                handle_line(session, session.prompt("> "))
    except (click.Abort, EOFError, KeyboardInterrupt):
        pass
    finally:
        if session.scheduler is not None:
            session.scheduler.shutdown(wait=False)
        _ok("\nThought Logger closed")
