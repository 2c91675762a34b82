"""thought CLI - terminal journal with sections, tags and backups."""

import json
import logging
import sys
from datetime import date
from pathlib import Path

import click

from .config import Config, load_config
from .core.entries import create_tagged_message, entries_for_day, search_entries
from .core.errors import InvalidArgumentError
from .core.sections import is_valid_section_id, order_sections, validate_description, validate_section_name
from .display import format_entry, render_backups
from .workflows import backups_by_kind, get_engine, get_store, log_message, restore_numbered


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _require_section(section: str) -> None:
    if not is_valid_section_id(section):
        _fail(f"Invalid section id: {section!r} (allowed: letters, digits, '_' and '-')")


@click.group(invoke_without_command=True)
@click.version_option(package_name="thought-cli")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to thought.conf",
)
@click.pass_context
def main(ctx, debug: bool, config_path: Path | None):
    """thought - journal your thoughts in sections from the terminal."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.WARNING,
    )
    ctx.obj = load_config(config_path)

    if ctx.invoked_subcommand is None:
        from .shell import run_shell

        run_shell(ctx.obj)


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def sections(config: Config, as_json: bool):
    """List sections."""
    store = get_store(config)
    ordered = order_sections(store.list_sections(), config.default_section)

    if as_json:
        click.echo(
            json.dumps(
                [{"id": s, "description": store.describe(s)} for s in ordered],
                indent=2,
            )
        )
        return

    if not ordered:
        click.echo("No sections yet.")
        return

    for section in ordered:
        desc = store.describe(section) or "No description"
        click.echo(f"{section:20} {desc}")


@main.command()
@click.argument("name")
@click.option("--description", "-d", default="", help="Section description")
@click.pass_obj
def create(config: Config, name: str, description: str):
    """Create a section (or update its description)."""
    try:
        validate_section_name(name, config.max_section_name_length, config.backup.full_backup_prefix)
        validate_description(description, config.max_description_length)
    except InvalidArgumentError as e:
        _fail(str(e))

    section_id = get_store(config).create_section(name, description)
    if section_id is None:
        _fail("could not create section (see log output)")
    click.echo(f"Created section: {section_id}")


@main.command()
@click.argument("section")
@click.argument("text", nargs=-1, required=True)
@click.option("--tag", "-t", default=None, help="Tag the entry, e.g. idea or todo")
@click.pass_obj
def add(config: Config, section: str, text: tuple[str, ...], tag: str | None):
    """Append an entry to a section."""
    _require_section(section)
    message = " ".join(text)
    if tag:
        message = create_tagged_message(tag, message)

    store = get_store(config)
    logged = log_message(store, get_engine(config, store), section, message)
    click.echo(format_entry(logged.entry))
    if logged.rotated:
        click.echo("Log file rotated, previous logs backed up.")


@main.command()
@click.argument("section")
@click.option("--search", "-s", "term", default=None, help="Only entries containing TERM")
@click.option("--today", is_flag=True, help="Only today's entries")
@click.option("--limit", "-n", type=int, default=None, help="Show at most N newest entries")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def show(config: Config, section: str, term: str | None, today: bool, limit: int | None, as_json: bool):
    """Show a section's entries."""
    _require_section(section)
    store = get_store(config)
    if not store.section_exists(section):
        _fail(f"No such section: {section}")

    entries = store.load_entries(section)
    if term:
        entries = search_entries(entries, term)
    if today:
        entries = entries_for_day(entries, date.today())
    if limit is None:
        limit = config.max_logs_to_display
    if limit > 0:
        entries = entries[-limit:]

    if as_json:
        click.echo(json.dumps(entries, indent=2))
        return

    if not entries:
        click.echo("No logs to display.")
        return

    for entry in entries:
        click.echo(format_entry(entry))


@main.command()
@click.argument("section")
@click.option("--rotate", is_flag=True, help="Empty the live log after backing it up")
@click.pass_obj
def backup(config: Config, section: str, rotate: bool):
    """Back up one section."""
    _require_section(section)
    path = get_engine(config).backup_section(section, rotate=rotate)
    if path is None:
        _fail(f"backup of {section} failed")
    click.echo(f"Backup created: {path}")


@main.command("backup-all")
@click.pass_obj
def backup_all(config: Config):
    """Back up every section plus metadata."""
    path = get_engine(config).create_full_backup()
    if path is None:
        _fail("full backup failed")
    click.echo(f"Full backup created: {path}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def backups(config: Config, as_json: bool):
    """List backups, numbered newest first."""
    full, section_backups = backups_by_kind(get_engine(config))

    if as_json:
        click.echo(
            json.dumps(
                {
                    "full": [r.to_dict() for r in full],
                    "section": [r.to_dict() for r in section_backups],
                },
                indent=2,
            )
        )
        return

    for line in render_backups(full, section_backups):
        click.echo(line)


@main.command()
@click.argument("kind", type=click.Choice(["full", "section"]))
@click.argument("number", type=int)
@click.option("--section", "section_id", default=None, help="Restore a section backup into this section")
@click.option("--overwrite", is_flag=True, help="Replace sections that already exist")
@click.pass_obj
def restore(config: Config, kind: str, number: int, section_id: str | None, overwrite: bool):
    """Restore backup NUMBER of KIND (see `thought backups`)."""
    if section_id is not None:
        _require_section(section_id)

    try:
        result = restore_numbered(get_engine(config), kind, number, section_id, overwrite)
    except InvalidArgumentError as e:
        _fail(str(e))

    if not result:
        _fail(result.summary())

    click.echo(result.summary())
    if result.metadata_restored:
        click.echo("Metadata restored.")
    for skipped in result.skipped:
        click.echo(f"Skipped {skipped} (already exists, use --overwrite)")


if __name__ == "__main__":
    main()
