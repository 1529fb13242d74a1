"""Profile management commands."""

import click

from familyhub.cli.error_handling import handle_domain_error
from familyhub.cli.resolution import get_store, resolve_or_exit, save_store
from familyhub.domain.entities import ProfileRole
from familyhub.domain.errors import DomainError
from familyhub.domain.store import ReferencePolicy


@click.group()
def profile_group():
    """Manage family member profiles."""
    pass


@profile_group.command("add")
@click.argument("name", metavar="NAME")
@click.option(
    "--role",
    type=click.Choice([r.value for r in ProfileRole], case_sensitive=False),
    default=ProfileRole.CHILD.value,
    show_default=True,
)
@click.option("--color", default="#2F80ED", show_default=True, help="Display color")
@click.pass_context
def add_profile(ctx, name: str, role: str, color: str):
    """Add a family member.

    Examples:
        familyhub profile add "Alex" --role parent
        familyhub profile add "Sam" --color "#EB5757"
    """
    store = get_store(ctx)
    profile_id = store.add_profile(name=name, role=ProfileRole(role.lower()), color=color)
    save_store(ctx)
    click.echo(f"Added profile '{name}' (ID: {profile_id})")


@profile_group.command("list")
@click.pass_context
def list_profiles(ctx):
    """List all profiles with their star balance."""
    store = get_store(ctx)
    profiles = store.profiles
    if not profiles:
        click.echo("No profiles found.")
        return

    click.echo("\nProfiles:")
    click.echo("-" * 70)
    for profile in profiles:
        stars = store.star_balance(profile.id)
        click.echo(f"{profile.id:28s} | {profile.name:15s} | {profile.role.value:6s} | {stars:4d} stars")


@profile_group.command("delete")
@click.argument("profile", metavar="PROFILE")
@click.option(
    "--references",
    type=click.Choice([p.value for p in ReferencePolicy], case_sensitive=False),
    default=ReferencePolicy.REJECT.value,
    show_default=True,
    help="keep: leave references; detach: remove them; reject: refuse while referenced",
)
@click.pass_context
def delete_profile(ctx, profile: str, references: str):
    """Delete a profile.

    PROFILE can be a profile name or ID.

    Examples:
        familyhub profile delete "Sam"
        familyhub profile delete "Sam" --references detach
    """
    store = get_store(ctx)
    profile_obj = resolve_or_exit(ctx, "Profile", profile, store.profiles)

    if not click.confirm(f"Are you sure you want to delete profile '{profile_obj.name}' (ID: {profile_obj.id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        store.delete_profile(profile_obj.id, references=ReferencePolicy(references.lower()))
    except DomainError as e:
        handle_domain_error(ctx, e)
    save_store(ctx)
    click.echo(f"Deleted profile '{profile_obj.name}'")


def register_commands(cli):
    """Register profile commands with main CLI."""
    cli.add_command(profile_group, name="profile")
