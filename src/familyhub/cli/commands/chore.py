"""Chore commands: scheduling, completion and parent approval."""

import click

from familyhub.cli.error_handling import handle_domain_error
from familyhub.cli.recurrence_options import build_rule_or_exit, recurrence_options
from familyhub.cli.resolution import (
    get_store,
    parse_date_or_exit,
    resolve_or_exit,
    resolve_profiles_or_exit,
    save_store,
)
from familyhub.domain.entities import ChoreType, CompletionStatus, TimeOfDay
from familyhub.domain.errors import DomainError
from familyhub.domain.progress import find_completion
from familyhub.domain.recurrence import describe


@click.group()
def chore_group():
    """Manage chores."""
    pass


@chore_group.command("add")
@click.argument("title", metavar="TITLE")
@click.option("--profile", "profiles", multiple=True, required=True, help="Assignee name or ID (repeatable)")
@click.option("--start", "start_str", default="today", show_default=True, help="First date of the chore")
@click.option(
    "--time-of-day",
    type=click.Choice([t.value for t in TimeOfDay], case_sensitive=False),
    default=TimeOfDay.ANY.value,
    show_default=True,
)
@click.option("--at", "scheduled_time", help="Scheduled time (HH:MM); makes the chore timed")
@click.option("--stars", type=int, default=0, show_default=True, help="Reward stars for completing it")
@click.option("--shared", is_flag=True, help="One completion per day covers everyone")
@click.option("--approval", is_flag=True, help="Completions need a parent's approval")
@recurrence_options
@click.pass_context
def add_chore(
    ctx,
    title: str,
    profiles: tuple[str, ...],
    start_str: str,
    time_of_day: str,
    scheduled_time: str | None,
    stars: int,
    shared: bool,
    approval: bool,
    **recurrence,
):
    """Add a chore, optionally repeating.

    Examples:
        familyhub chore add "Feed the cat" --profile Sam --repeat daily --stars 1
        familyhub chore add "Bins" --profile Sam --profile Kim --shared --repeat weekly --weekday tue
    """
    store = get_store(ctx)
    profile_ids = resolve_profiles_or_exit(ctx, profiles)
    start_date = parse_date_or_exit(ctx, start_str, "start date")
    rule = build_rule_or_exit(ctx, anchor=start_date, **recurrence)

    chore_id = store.add_chore(
        title=title,
        profile_ids=profile_ids,
        start_date=start_date,
        time_of_day=TimeOfDay(time_of_day.lower()),
        type=ChoreType.TIMED if scheduled_time else ChoreType.ANYTIME,
        recurrence=rule,
        scheduled_time=scheduled_time,
        reward_stars=stars,
        is_shared=shared,
        requires_approval=approval,
    )
    save_store(ctx)
    click.echo(f"Added chore '{title}' (ID: {chore_id})")
    click.echo(describe(rule))


@chore_group.command("list")
@click.pass_context
def list_chores(ctx):
    """List all chores."""
    store = get_store(ctx)
    chores = store.chores
    if not chores:
        click.echo("No chores found.")
        return

    click.echo("\nChores:")
    click.echo("-" * 80)
    for chore in chores:
        stars = f"{chore.reward_stars}*" if chore.reward_stars else ""
        click.echo(f"{chore.id:28s} | {chore.title:20s} | {stars:4s} | {describe(chore.recurrence)}")


@chore_group.command("due")
@click.argument("day", metavar="DATE", default="today")
@click.option("--profile", help="Only this profile's chores")
@click.pass_context
def chores_due(ctx, day: str, profile: str | None):
    """Show the chores due on a date and who has done them.

    DATE defaults to today.
    """
    store = get_store(ctx)
    target = parse_date_or_exit(ctx, day)
    profile_id = resolve_or_exit(ctx, "Profile", profile, store.profiles).id if profile else None

    chores = store.chores_due_on(target, profile_id)
    if not chores:
        click.echo(f"No chores due on {target}.")
        return

    click.echo(f"\nChores due on {target}:")
    click.echo("-" * 60)
    for chore in chores:
        assignees = [profile_id] if profile_id else list(chore.profile_ids)
        marks = []
        for pid in assignees:
            profile_obj = store.get_profile(pid)
            record = find_completion(chore, pid, target)
            status = record.status.value if record else "todo"
            marks.append(f"{profile_obj.name if profile_obj else pid}: {status}")
        percentage = store.chore_completion_percentage(chore.id, target)
        click.echo(f"{chore.title:25s} | {percentage:3d}% | {', '.join(marks)}")

    if profile_id:
        for time_of_day in (TimeOfDay.MORNING, TimeOfDay.MIDDAY, TimeOfDay.EVENING):
            if store.is_time_segment_completed(profile_id, time_of_day, target):
                click.echo(f"All {time_of_day.value} chores done!")


def _completion_args(ctx, chore: str, profile: str, day: str):
    store = get_store(ctx)
    chore_obj = resolve_or_exit(ctx, "Chore", chore, store.chores, name_attr="title")
    profile_obj = resolve_or_exit(ctx, "Profile", profile, store.profiles)
    return store, chore_obj, profile_obj, parse_date_or_exit(ctx, day)


@chore_group.command("complete")
@click.argument("chore", metavar="CHORE")
@click.argument("profile", metavar="PROFILE")
@click.option("--date", "day", default="today", show_default=True, help="Date the chore was done")
@click.pass_context
def complete_chore(ctx, chore: str, profile: str, day: str):
    """Mark a chore done by a profile.

    CHORE can be a chore title or ID; PROFILE a profile name or ID.
    """
    store, chore_obj, profile_obj, target = _completion_args(ctx, chore, profile, day)
    store.complete_chore(chore_obj.id, profile_obj.id, target)
    save_store(ctx)

    record = find_completion(store.get_chore(chore_obj.id), profile_obj.id, target)
    if record.status == CompletionStatus.PENDING_APPROVAL:
        click.echo(f"'{chore_obj.title}' done by {profile_obj.name} on {target}; waiting for approval")
    else:
        click.echo(f"'{chore_obj.title}' done by {profile_obj.name} on {target}")


@chore_group.command("uncomplete")
@click.argument("chore", metavar="CHORE")
@click.argument("profile", metavar="PROFILE")
@click.option("--date", "day", default="today", show_default=True)
@click.pass_context
def uncomplete_chore(ctx, chore: str, profile: str, day: str):
    """Remove a profile's completion of a chore."""
    store, chore_obj, profile_obj, target = _completion_args(ctx, chore, profile, day)
    try:
        store.uncomplete_chore(chore_obj.id, profile_obj.id, target)
    except DomainError as e:
        handle_domain_error(ctx, e)
    save_store(ctx)
    click.echo(f"'{chore_obj.title}' no longer done by {profile_obj.name} on {target}")


def _review(ctx, chore: str, profile: str, day: str, reviewer: str, approve: bool) -> None:
    store, chore_obj, profile_obj, target = _completion_args(ctx, chore, profile, day)
    reviewer_obj = resolve_or_exit(ctx, "Profile", reviewer, store.profiles)
    try:
        if approve:
            store.approve_chore(chore_obj.id, profile_obj.id, target, reviewer_obj.id)
        else:
            store.reject_chore(chore_obj.id, profile_obj.id, target, reviewer_obj.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    save_store(ctx)
    verdict = "Approved" if approve else "Rejected"
    click.echo(f"{verdict} '{chore_obj.title}' by {profile_obj.name} on {target}")


@chore_group.command("approve")
@click.argument("chore", metavar="CHORE")
@click.argument("profile", metavar="PROFILE")
@click.option("--by", "reviewer", required=True, help="Approving parent's name or ID")
@click.option("--date", "day", default="today", show_default=True)
@click.pass_context
def approve_chore(ctx, chore: str, profile: str, reviewer: str, day: str):
    """Approve a profile's completion of a chore."""
    _review(ctx, chore, profile, day, reviewer, approve=True)


@chore_group.command("reject")
@click.argument("chore", metavar="CHORE")
@click.argument("profile", metavar="PROFILE")
@click.option("--by", "reviewer", required=True, help="Rejecting parent's name or ID")
@click.option("--date", "day", default="today", show_default=True)
@click.pass_context
def reject_chore(ctx, chore: str, profile: str, reviewer: str, day: str):
    """Reject a profile's completion of a chore."""
    _review(ctx, chore, profile, day, reviewer, approve=False)


@chore_group.command("pending")
@click.pass_context
def pending_approvals(ctx):
    """List completions waiting for approval."""
    store = get_store(ctx)
    pending = store.pending_approvals()
    if not pending:
        click.echo("Nothing waiting for approval.")
        return

    click.echo("\nWaiting for approval:")
    click.echo("-" * 60)
    for chore, record in pending:
        profile_obj = store.get_profile(record.profile_id)
        name = profile_obj.name if profile_obj else record.profile_id
        click.echo(f"{record.date} | {chore.title:25s} | {name}")


def register_commands(cli):
    """Register chore commands with main CLI."""
    cli.add_command(chore_group, name="chore")
