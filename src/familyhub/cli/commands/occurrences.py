"""Preview the dates a recurrence rule produces."""

import click

from familyhub.cli.recurrence_options import build_rule_or_exit, recurrence_options
from familyhub.cli.resolution import parse_date_or_exit
from familyhub.domain.recurrence import describe, expand


@click.command("occurrences")
@click.option("--start", "start_str", required=True, help="Anchor date of the series")
@click.option("--from", "from_str", help="First date of the range (defaults to the anchor)")
@click.option("--to", "to_str", required=True, help="Last date of the range (inclusive)")
@recurrence_options
@click.pass_context
def occurrences(ctx, start_str: str, from_str: str | None, to_str: str, **recurrence):
    """List the dates a rule anchored at --start produces in a range.

    Examples:
        familyhub occurrences --start 2024-01-01 --to 2024-01-31 --repeat weekly --weekday mon --weekday fri
        familyhub occurrences --start 2024-01-31 --to 2024-06-30 --repeat monthly --month-day last
    """
    anchor = parse_date_or_exit(ctx, start_str, "start date")
    range_start = parse_date_or_exit(ctx, from_str, "range start") if from_str else anchor
    range_end = parse_date_or_exit(ctx, to_str, "range end")
    rule = build_rule_or_exit(ctx, anchor=anchor, **recurrence)

    dates = expand(anchor, range_start, range_end, rule)
    click.echo(describe(rule))
    if not dates:
        click.echo("No occurrences in range.")
        return
    for day in dates:
        click.echo(f"{day.isoformat()} {day.strftime('%a')}")


def register_commands(cli):
    """Register occurrences command with main CLI."""
    cli.add_command(occurrences)
