"""Shared click options for recurrence rules."""

from __future__ import annotations

from datetime import date

import click

from familyhub.domain.errors import InvalidRecurrenceRuleError
from familyhub.domain.recurrence import LAST, WEEKDAY_NAMES, Frequency, RecurrenceRule, weekday_of
from familyhub.cli.error_handling import handle_domain_error


def recurrence_options(command):
    """Add --repeat/--interval/--weekday/--month-day/--set-pos/--count/--until to a command."""
    options = [
        click.option(
            "--repeat",
            type=click.Choice([f.value for f in Frequency], case_sensitive=False),
            default=Frequency.NONE.value,
            show_default=True,
            help="Recurrence frequency",
        ),
        click.option("--interval", type=int, default=1, show_default=True, help="Repeat every N periods"),
        click.option(
            "--weekday",
            "weekdays",
            multiple=True,
            help="Weekday name or number (0=Sunday); repeat the option for several days",
        ),
        click.option(
            "--month-day",
            "month_days",
            multiple=True,
            help="Day of month (1-31) or 'last'; repeat the option for several days",
        ),
        click.option("--set-pos", help="Weekday occurrence in the month: 1-4 or 'last'"),
        click.option("--count", type=int, help="Maximum number of occurrences (informational)"),
        click.option("--until", help="Last date of the series (informational)"),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def _parse_weekday(value: str) -> int:
    value = value.strip().lower()
    if value.isdigit():
        return int(value)
    for ordinal, name in enumerate(WEEKDAY_NAMES):
        if value[:3] == name.lower():
            return ordinal
    raise InvalidRecurrenceRuleError(f"Unknown weekday '{value}'")


def _parse_last(value: str) -> int:
    value = value.strip().lower()
    if value == "last":
        return LAST
    try:
        return int(value)
    except ValueError:
        raise InvalidRecurrenceRuleError(f"Expected a number or 'last', got '{value}'")


def build_rule_or_exit(
    ctx: click.Context,
    repeat: str,
    interval: int,
    weekdays: tuple[str, ...],
    month_days: tuple[str, ...],
    set_pos: str | None,
    count: int | None,
    until: str | None,
    anchor: date | None = None,
) -> RecurrenceRule:
    """Build a recurrence rule from CLI options, or exit with a CLI error.

    A weekly rule without --weekday repeats on the anchor's weekday.
    """
    try:
        by_weekday = [_parse_weekday(w) for w in weekdays]
        if not by_weekday and anchor is not None and repeat.lower() == Frequency.WEEKLY.value:
            by_weekday = [weekday_of(anchor)]
        return RecurrenceRule(
            freq=repeat,
            interval=interval,
            by_weekday=by_weekday or None,
            by_month_day=[_parse_last(d) for d in month_days] or None,
            by_set_pos=_parse_last(set_pos) if set_pos else None,
            count=count,
            until=until,
        )
    except (InvalidRecurrenceRuleError, ValueError) as e:
        handle_domain_error(ctx, e)
