"""Calendar event commands."""

from datetime import datetime, time, timedelta

import click

from familyhub.cli.recurrence_options import build_rule_or_exit, recurrence_options
from familyhub.cli.resolution import (
    get_store,
    parse_date_or_exit,
    resolve_or_exit,
    resolve_profiles_or_exit,
    save_store,
)
from familyhub.domain.entities import EventCategory
from familyhub.domain.recurrence import describe, expand
from familyhub.utils.date_parser import get_date_range, parse_datetime


@click.group()
def event_group():
    """Manage calendar events."""
    pass


@event_group.command("add")
@click.argument("title", metavar="TITLE")
@click.option("--start", "start_str", required=True, help='Start, e.g. "2024-01-15 18:30"')
@click.option("--end", "end_str", help="End (defaults to one hour after start, or the start for all-day events)")
@click.option("--all-day", is_flag=True, help="All-day event")
@click.option("--profile", "profiles", multiple=True, required=True, help="Attendee name or ID (repeatable)")
@click.option(
    "--category",
    type=click.Choice([c.value for c in EventCategory], case_sensitive=False),
    default=EventCategory.OTHER.value,
    show_default=True,
)
@click.option("--location", default="", help="Location")
@recurrence_options
@click.pass_context
def add_event(
    ctx,
    title: str,
    start_str: str,
    end_str: str | None,
    all_day: bool,
    profiles: tuple[str, ...],
    category: str,
    location: str,
    **recurrence,
):
    """Add an event, optionally repeating.

    Examples:
        familyhub event add "Swimming" --start "2024-01-15 17:00" --profile Sam --repeat weekly
        familyhub event add "Book club" --start 2024-01-05 --all-day --profile Alex \\
            --repeat monthly --weekday fri --set-pos last
    """
    store = get_store(ctx)
    profile_ids = resolve_profiles_or_exit(ctx, profiles)
    try:
        start = parse_datetime(start_str)
        end = parse_datetime(end_str) if end_str else None
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    rule = build_rule_or_exit(ctx, anchor=start.date(), **recurrence)

    if all_day:
        start = datetime.combine(start.date(), time.min)
        end = datetime.combine((end or start).date(), time.min)
    elif end is None:
        end = start + timedelta(hours=1)
    if end < start:
        click.echo("Error: Event end is before its start", err=True)
        ctx.exit(1)

    event_id = store.add_event(
        title=title,
        start=start,
        end=end,
        profile_ids=profile_ids,
        all_day=all_day,
        recurrence=rule,
        category=EventCategory(category.lower()),
        location=location,
    )
    save_store(ctx)
    click.echo(f"Added event '{title}' (ID: {event_id})")
    click.echo(describe(rule))


@event_group.command("list")
@click.option(
    "--period",
    type=click.Choice(["this-week", "next-week", "this-month", "next-month"], case_sensitive=False),
    help="List each occurrence in a calendar period instead of the events",
)
@click.pass_context
def list_events(ctx, period: str | None):
    """List all events and how they repeat.

    With --period, list every occurrence inside that period, repeats included.
    """
    store = get_store(ctx)
    events = store.events
    if not events:
        click.echo("No events found.")
        return

    if period:
        start_date, end_date = get_date_range(period)
        occurrences = [
            (day, event)
            for event in events
            for day in expand(event.start, start_date, end_date, event.recurrence)
        ]
        occurrences.sort(key=lambda pair: (pair[0], pair[1].start.time()))
        click.echo(f"\nEvents {start_date} to {end_date}:")
        click.echo("-" * 60)
        for day, event in occurrences:
            when = "all day" if event.all_day else event.start.strftime("%H:%M")
            click.echo(f"{day.isoformat()} {day.strftime('%a')} | {when:8s} | {event.title}")
        return

    click.echo("\nEvents:")
    click.echo("-" * 80)
    for event in sorted(events, key=lambda e: e.start):
        when = event.start.strftime("%Y-%m-%d") if event.all_day else event.start.strftime("%Y-%m-%d %H:%M")
        click.echo(f"{event.id:28s} | {when:16s} | {event.title:20s} | {describe(event.recurrence)}")


@event_group.command("on")
@click.argument("day", metavar="DATE", default="today")
@click.option("--profile", "profiles", multiple=True, help="Only events attended by this profile (repeatable)")
@click.pass_context
def events_on(ctx, day: str, profiles: tuple[str, ...]):
    """Show the events occurring on a date, including repeats.

    DATE accepts absolute and relative forms ("2024-01-15", "tomorrow",
    "next friday"); defaults to today.
    """
    store = get_store(ctx)
    target = parse_date_or_exit(ctx, day)
    profile_ids = resolve_profiles_or_exit(ctx, profiles) or None

    events = store.events_on(target, profile_ids)
    if not events:
        click.echo(f"No events on {target}.")
        return

    click.echo(f"\nEvents on {target}:")
    click.echo("-" * 60)
    for event in events:
        when = "all day" if event.all_day else event.start.strftime("%H:%M")
        names = ", ".join(
            store.get_profile(pid).name if store.get_profile(pid) else pid for pid in event.profile_ids
        )
        click.echo(f"{when:8s} | {event.title:25s} | {names}")


@event_group.command("delete")
@click.argument("event", metavar="EVENT")
@click.pass_context
def delete_event(ctx, event: str):
    """Delete an event.

    EVENT can be an event title or ID.
    """
    store = get_store(ctx)
    event_obj = resolve_or_exit(ctx, "Event", event, store.events, name_attr="title")

    if not click.confirm(f"Are you sure you want to delete event '{event_obj.title}' (ID: {event_obj.id})?"):
        click.echo("Deletion cancelled.")
        return

    store.delete_event(event_obj.id)
    save_store(ctx)
    click.echo(f"Deleted event '{event_obj.title}'")


def register_commands(cli):
    """Register event commands with main CLI."""
    cli.add_command(event_group, name="event")
