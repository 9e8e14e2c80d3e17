"""Command line companion for the 33-day consecration.

Usage:
    python main.py feasts                         # Upcoming feasts and start dates
    python main.py start --feast assumption       # Begin so day 34 lands on the feast
    python main.py start --date 2026-07-13        # Begin on a specific day
    python main.py status                         # Where am I?
    python main.py day                            # Today's meditation and prayers
    python main.py day 3 --language English       # An earlier day, in English
    python main.py complete 3 --reflection "..."  # Mark a day as prayed
    python main.py journal                        # Read back reflections
    python main.py --verbose status               # Verbose logging
"""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from companion.config import load_config
from companion.core import Companion, DayPlan
from companion.memory import PersistenceError
from consecration.dates import PROGRAM_LENGTH, parse_date
from consecration.errors import ConsecrationError
from prayers.bilingual import BilingualFormatError, LanguageMode, split_line


def _setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    fmt = "%(asctime)s — %(name)s — %(levelname)s — %(message)s"

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=fmt, handlers=handlers)

    # aiosqlite logs every statement at debug
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _language_option(value: str | None) -> LanguageMode | None:
    if value is None:
        return None
    try:
        return LanguageMode.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def _echo_plan(plan: DayPlan) -> None:
    content = plan.content
    click.echo(f"\n  {content.ordinal_label} — {content.day_label}")
    click.echo(f"  {plan.phase.name}: {plan.phase.subtitle}")
    click.echo(f"  Day {content.position_in_phase} of {plan.phase.day_count} in this phase\n")
    click.echo(f"  {content.title}")
    if content.meditation_title:
        source = f" ({content.meditation_source})" if content.meditation_source else ""
        click.echo(f"  {content.meditation_title}{source}\n")
    click.echo(content.meditation_text)

    for rendered in plan.prayers:
        click.echo(f"\n  ✠ {rendered.title}\n")
        for line in rendered.text.split("\n"):
            primary, secondary = split_line(line)
            click.echo(f"    {primary}")
            if secondary:
                click.echo(f"      {secondary}")

    click.echo(f"\n  Reflection: {content.reflection_prompt}")
    if plan.reflection:
        click.echo(f"  You wrote: {plan.reflection}")
    click.echo(f"\n  {'Completed' if plan.is_completed else 'Not yet completed'}\n")


@click.group()
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.option("--config-dir", type=click.Path(), default=None, help="Config directory")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_dir: str | None) -> None:
    """Companion for the 33-Day Total Consecration to Jesus through Mary."""
    try:
        cfg = load_config(config_dir)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))
        return
    _setup_logging(verbose=verbose, log_file=cfg.get("storage", {}).get("log_file"))
    try:
        ctx.obj = Companion(config=cfg)
    except ValueError as e:
        _fail(str(e))


@cli.command()
@click.pass_obj
def feasts(companion: Companion) -> None:
    """List Marian feasts by their next start date."""
    for row in companion.upcoming_feasts():
        feast = row["feast"]
        marker = "  ← start today" if row["available_today"] else ""
        click.echo(
            f"  {row['start_date'].isoformat()} → {row['feast_date'].isoformat()}  "
            f"{feast.name} [{feast.id}]{marker}"
        )


@cli.command()
@click.option("--feast", "feast_id", default=None, help="Feast id to finish on (see `feasts`)")
@click.option("--date", "start_on", default=None, help="Start date, YYYY-MM-DD")
@click.option("--restart", is_flag=True, help="Discard an unfinished consecration")
@click.pass_obj
def start(companion: Companion, feast_id: str | None, start_on: str | None, restart: bool) -> None:
    """Begin a new consecration."""
    if feast_id and start_on:
        _fail("Use either --feast or --date, not both")
    try:
        if feast_id:
            state = companion.start_for_feast(feast_id, restart=restart)
        else:
            state = companion.start(parse_date(start_on) if start_on else None, restart=restart)
    except (ConsecrationError, PersistenceError, ValueError) as e:
        _fail(str(e))
        return

    status = companion.status()
    click.echo(f"\n  Consecration begins {state.start_date.isoformat()}.")
    click.echo(f"  Consecration Day: {status['expected_completion'].isoformat()}\n")


@cli.command()
@click.pass_obj
def status(companion: Companion) -> None:
    """Show today's day and overall progress."""
    try:
        info = companion.status()
    except PersistenceError as e:
        _fail(str(e))
        return

    if not info["started"]:
        click.echo("No consecration in progress. Use `start` to begin.")
        return

    if not info["has_begun"]:
        click.echo(f"\n  Begins {info['start_date'].isoformat()} (in {info['days_until_start']} day(s)).")
    click.echo(f"\n  Day {info['current_day']} of {PROGRAM_LENGTH} — {info['phase']}")
    click.echo(f"  Completed {len(info['completed_days'])} day(s), {info['progress']:.0%}; {info['days_remaining']} remaining")
    if info["next_incomplete_day"] is not None:
        click.echo(f"  Next to pray: day {info['next_incomplete_day']}")
    click.echo(f"  Consecration Day: {info['expected_completion'].isoformat()}\n")


@cli.command()
@click.argument("day_number", type=int, required=False)
@click.option("--language", default=None, help="English, Latin, 'Latin & English' or 'English & Latin'")
@click.pass_obj
def day(companion: Companion, day_number: int | None, language: str | None) -> None:
    """Show a day's meditation and prayers (today by default)."""
    mode = _language_option(language)
    try:
        plan = asyncio.run(companion.day_plan(day_number, language=mode))
    except (ConsecrationError, PersistenceError, BilingualFormatError) as e:
        _fail(str(e))
        return
    _echo_plan(plan)


@cli.command()
@click.argument("day_number", type=int)
@click.option("--reflection", default="", help="Journal reflection for the day")
@click.pass_obj
def complete(companion: Companion, day_number: int, reflection: str) -> None:
    """Mark a day as prayed."""
    try:
        changed = asyncio.run(companion.complete_day(day_number, reflection))
    except (ConsecrationError, PersistenceError) as e:
        _fail(str(e))
        return

    if changed:
        click.echo(f"Day {day_number} completed.")
    else:
        click.echo(f"Day {day_number} was already completed.")

    state = companion.progress
    if state is not None and state.is_completed:
        click.echo("\n  Totus tuus. Your consecration is complete.\n")


@cli.command()
@click.pass_obj
def journal(companion: Companion) -> None:
    """Print saved reflections."""
    try:
        entries = asyncio.run(companion.reflections())
    except PersistenceError as e:
        _fail(str(e))
        return

    if not entries:
        click.echo("No reflections yet.")
        return
    for entry in entries:
        click.echo(f"\n  Day {entry['day_number']} ({entry['updated_at'][:10]})")
        click.echo(f"  {entry['text']}")
    click.echo("")


@cli.command()
@click.option("--clear-journal", is_flag=True, help="Also delete saved reflections")
@click.confirmation_option(prompt="Discard the current consecration?")
@click.pass_obj
def reset(companion: Companion, clear_journal: bool) -> None:
    """Discard the unfinished consecration."""
    try:
        removed = companion.reset()
        if clear_journal:
            asyncio.run(companion.clear_journal())
    except PersistenceError as e:
        _fail(str(e))
        return
    click.echo("Consecration discarded." if removed else "No consecration in progress.")


if __name__ == "__main__":
    cli()
