"""Daybook CLI - Personal Journal."""

import json
import logging
import sys
from datetime import date

import click

from .adapters.markdown_export import format_mood_line
from .config import load_config
from .core.entries import Entry, MoodKind, compose_entry
from .errors import DaybookError
from .workflows import export_journal, get_auth, get_dashboard, get_repository, get_store

MOOD_CHOICES = click.Choice([k.label for k in MoodKind], case_sensitive=False)


def _parse_date(ctx, param, value: str | None) -> date:
    if value is None:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {value!r}")


def _fail(e: Exception | str) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _entry_to_dict(entry: Entry) -> dict:
    primary = entry.primary_mood
    return {
        "id": entry.id,
        "date": entry.date.isoformat(),
        "content": entry.content,
        "category": entry.category,
        "primary_mood": primary.kind.label if primary else None,
        "secondary_moods": [m.kind.label for m in entry.secondary_moods],
        "tags": entry.tag_names,
        "created_at": entry.created_at.isoformat() if entry.created_at else None,
        "updated_at": entry.updated_at.isoformat() if entry.updated_at else None,
    }


def _show_entries(entries: list[Entry], as_json: bool, empty_msg: str = "No entries.") -> None:
    """Shared entry list display logic."""
    if as_json:
        click.echo(json.dumps([_entry_to_dict(e) for e in entries], indent=2))
        return

    if not entries:
        click.echo(empty_msg)
        return

    for entry in entries:
        primary = entry.primary_mood
        mood = primary.kind.label if primary else "-"
        tags = f" [{', '.join(entry.tag_names)}]" if entry.tags else ""
        first_line = entry.content.strip().splitlines()[0] if entry.content.strip() else ""
        click.echo(f"{entry.date.isoformat()}  {mood:10} {first_line[:60]}{tags}")


@click.group()
@click.version_option()
@click.option("--db", "db_path", default=None, help="Path to the journal database")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, db_path: str | None, debug: bool):
    """Daybook - one journal entry per day."""
    config = load_config()
    if db_path:
        config.database_path = db_path

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else getattr(logging, config.log_level, logging.WARNING),
    )
    ctx.obj = config


@main.command()
@click.pass_obj
def init(config):
    """Create the journal database."""
    try:
        store = get_store(config)
    except DaybookError as e:
        _fail(e)
    click.echo(f"Journal database ready at {store.db_path}")


# ============== Users ==============


@main.command()
@click.argument("username")
@click.password_option()
@click.option("--pin", default=None, help="Optional PIN for quick unlock")
@click.pass_obj
def register(config, username: str, password: str, pin: str | None):
    """Register a journal owner."""
    try:
        created = get_auth(config).create_user(username, password, pin)
    except DaybookError as e:
        _fail(e)
    if not created:
        _fail(f"Username '{username}' already exists.")
    click.echo(f"Registered {username}.")


@main.command()
@click.argument("username")
@click.option("--password", prompt=True, hide_input=True)
@click.pass_obj
def login(config, username: str, password: str):
    """Check a username and password."""
    try:
        user = get_auth(config).authenticate(username, password)
    except DaybookError as e:
        _fail(e)
    if user is None:
        _fail("Invalid username or password.")
    click.echo(f"Welcome back, {user.username}.")


@main.command("verify-pin")
@click.argument("username")
@click.option("--password", prompt=True, hide_input=True)
@click.option("--pin", prompt=True, hide_input=True)
@click.pass_obj
def verify_pin(config, username: str, password: str, pin: str):
    """Check a user's PIN."""
    try:
        auth = get_auth(config)
        user = auth.authenticate(username, password)
        if user is None:
            _fail("Invalid username or password.")
        if not auth.verify_pin(user, pin):
            _fail("Incorrect PIN.")
    except DaybookError as e:
        _fail(e)
    click.echo("PIN accepted.")


# ============== Entries ==============


@main.command()
@click.argument("content")
@click.option("--date", "-d", "entry_date", default=None, callback=_parse_date,
              help="Entry date (YYYY-MM-DD), defaults to today")
@click.option("--mood", "-m", type=MOOD_CHOICES, default="Calm", show_default=True,
              help="Primary mood")
@click.option("--also", "-a", type=MOOD_CHOICES, multiple=True,
              help="Secondary mood (up to two)")
@click.option("--tag", "-t", "tags", multiple=True, help="Tag (repeatable)")
@click.option("--category", "-c", default=None, help="Category")
@click.pass_obj
def write(config, content: str, entry_date: date, mood: str, also: tuple[str, ...],
          tags: tuple[str, ...], category: str | None):
    """Write or replace the entry for a day."""
    entry = compose_entry(
        entry_date,
        content,
        primary_mood=MoodKind.parse(mood),
        secondary_moods=[MoodKind.parse(a) for a in also],
        tags=tags,
        category=category,
    )
    try:
        saved = get_repository(config).save_entry(entry)
    except DaybookError as e:
        _fail(e)

    verb = "Updated" if saved.updated_at else "Saved"
    click.echo(f"{verb} entry for {saved.date.strftime('%A, %b %d %Y')}.")


@main.command()
@click.option("--date", "-d", "entry_date", default=None, callback=_parse_date,
              help="Entry date (YYYY-MM-DD), defaults to today")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def show(config, entry_date: date, as_json: bool):
    """Show the entry for a day."""
    try:
        entry = get_repository(config).get_entry_by_date(entry_date)
    except DaybookError as e:
        _fail(e)

    if entry is None:
        click.echo(f"No entry for {entry_date.strftime('%A, %b %d %Y')}.")
        return

    if as_json:
        click.echo(json.dumps(_entry_to_dict(entry), indent=2))
        return

    click.echo(f"### {entry.date.strftime('%A, %B %d %Y')}")
    click.echo(format_mood_line(entry))
    if entry.category:
        click.echo(f"Category: {entry.category}")
    if entry.tags:
        click.echo(f"Tags: {', '.join(entry.tag_names)}")
    click.echo()
    click.echo(entry.content.strip())


@main.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def list_entries(config, as_json: bool):
    """List all entries, newest first."""
    try:
        entries = get_repository(config).get_all_entries()
    except DaybookError as e:
        _fail(e)
    _show_entries(entries, as_json, "Your journal is empty.")


@main.command()
@click.argument("term")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def search(config, term: str, as_json: bool):
    """Search entry text and tags."""
    try:
        entries = get_repository(config).search_entries(term)
    except DaybookError as e:
        _fail(e)
    _show_entries(entries, as_json, f"No entries match '{term}'.")


@main.command("filter")
@click.option("--mood", "-m", type=MOOD_CHOICES, default=None, help="Any mood of this kind")
@click.option("--tag", "-t", default=None, help="Exact tag name (any case)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def filter_entries(config, mood: str | None, tag: str | None, as_json: bool):
    """Filter entries by mood or tag."""
    if (mood is None) == (tag is None):
        raise click.UsageError("Pass exactly one of --mood or --tag.")

    try:
        repo = get_repository(config)
        if mood is not None:
            entries = repo.filter_by_mood(MoodKind.parse(mood))
        else:
            entries = repo.filter_by_tag(tag)
    except DaybookError as e:
        _fail(e)
    _show_entries(entries, as_json, "No matching entries.")


@main.command()
@click.option("--date", "-d", "entry_date", default=None, callback=_parse_date,
              help="Entry date (YYYY-MM-DD), defaults to today")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
def delete(config, entry_date: date, yes: bool):
    """Delete the entry for a day."""
    if not yes and not click.confirm(f"Delete the entry for {entry_date}?"):
        click.echo("Cancelled.")
        return
    try:
        get_repository(config).delete_entry(entry_date)
    except DaybookError as e:
        _fail(e)
    click.echo(f"Deleted entry for {entry_date}.")


# ============== Stats & Export ==============


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def stats(config, as_json: bool):
    """Show streak, mood distribution and top tags."""
    try:
        dashboard = get_dashboard(config)
    except DaybookError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps(dashboard.to_dict(), indent=2))
        return

    click.echo(f"Current streak: {dashboard.streak} day(s)")
    click.echo(f"Total entries:  {dashboard.total_entries}")
    if dashboard.first_entry_date:
        click.echo(f"First entry:    {dashboard.first_entry_date.isoformat()}")
        click.echo(f"Last entry:     {dashboard.last_entry_date.isoformat()}")

    if dashboard.mood_distribution:
        click.echo("\nMoods:")
        scale = dashboard.mood_distribution_max
        for kind, count in sorted(dashboard.mood_distribution.items(), key=lambda kv: -kv[1]):
            bar = "#" * max(1, round(20 * count / scale))
            click.echo(f"  {kind.label:11} {bar} {count}")

    if dashboard.top_tags:
        click.echo(f"\nTop tags: {', '.join(dashboard.top_tags)}")


@main.command()
@click.argument("path", required=False)
@click.pass_obj
def export(config, path: str | None):
    """Export the journal to Markdown, oldest entry first."""
    try:
        written = export_journal(config, path)
    except DaybookError as e:
        _fail(e)
    click.echo(f"Exported to {written}")
