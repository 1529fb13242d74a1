"""Reward and star balance commands."""

import click

from familyhub.cli.resolution import get_store, resolve_or_exit, resolve_profiles_or_exit, save_store
from familyhub.domain.entities import RewardCategory


@click.group()
def reward_group():
    """Manage rewards and star balances."""
    pass


@reward_group.command("add")
@click.argument("title", metavar="TITLE")
@click.option("--cost", type=click.IntRange(min=0), required=True, help="Price in stars")
@click.option(
    "--category",
    type=click.Choice([c.value for c in RewardCategory], case_sensitive=False),
    default=RewardCategory.TREAT.value,
    show_default=True,
)
@click.option("--description", default="", help="Description")
@click.option("--profile", "profiles", multiple=True, help="Limit to this profile (repeatable; default everyone)")
@click.pass_context
def add_reward(ctx, title: str, cost: int, category: str, description: str, profiles: tuple[str, ...]):
    """Add a reward that can be bought with stars.

    Examples:
        familyhub reward add "Ice cream" --cost 5
        familyhub reward add "Late bedtime" --cost 10 --category privilege --profile Sam
    """
    store = get_store(ctx)
    profile_ids = resolve_profiles_or_exit(ctx, profiles)
    reward_id = store.add_reward(
        title=title,
        star_cost=cost,
        description=description,
        category=RewardCategory(category.lower()),
        profile_ids=profile_ids,
    )
    save_store(ctx)
    click.echo(f"Added reward '{title}' for {cost} stars (ID: {reward_id})")


@reward_group.command("list")
@click.pass_context
def list_rewards(ctx):
    """List all rewards."""
    store = get_store(ctx)
    rewards = store.rewards
    if not rewards:
        click.echo("No rewards found.")
        return

    click.echo("\nRewards:")
    click.echo("-" * 70)
    for reward in rewards:
        active = "" if reward.is_active else " (inactive)"
        click.echo(f"{reward.id:28s} | {reward.title:20s} | {reward.star_cost:4d} stars{active}")


@reward_group.command("redeem")
@click.argument("reward", metavar="REWARD")
@click.argument("profile", metavar="PROFILE")
@click.option("--notes", help="Notes")
@click.pass_context
def redeem_reward(ctx, reward: str, profile: str, notes: str | None):
    """Spend a profile's stars on a reward.

    REWARD can be a reward title or ID; PROFILE a profile name or ID.
    """
    store = get_store(ctx)
    reward_obj = resolve_or_exit(ctx, "Reward", reward, store.rewards, name_attr="title")
    profile_obj = resolve_or_exit(ctx, "Profile", profile, store.profiles)

    if not reward_obj.is_active:
        click.echo(f"Error: Reward '{reward_obj.title}' is not active", err=True)
        ctx.exit(1)
    if reward_obj.profile_ids and profile_obj.id not in reward_obj.profile_ids:
        click.echo(f"Error: Reward '{reward_obj.title}' is not available to {profile_obj.name}", err=True)
        ctx.exit(1)
    balance = store.star_balance(profile_obj.id)
    if balance < reward_obj.star_cost:
        click.echo(
            f"Error: {profile_obj.name} has {balance} stars; '{reward_obj.title}' costs {reward_obj.star_cost}",
            err=True,
        )
        ctx.exit(1)

    store.add_reward_redemption(reward_obj.id, profile_obj.id, notes=notes)
    save_store(ctx)
    click.echo(
        f"{profile_obj.name} redeemed '{reward_obj.title}'; "
        f"{store.star_balance(profile_obj.id)} stars left"
    )


@reward_group.command("balance")
@click.argument("profile", metavar="PROFILE")
@click.pass_context
def star_balance(ctx, profile: str):
    """Show a profile's star balance."""
    store = get_store(ctx)
    profile_obj = resolve_or_exit(ctx, "Profile", profile, store.profiles)
    click.echo(f"{profile_obj.name}: {store.star_balance(profile_obj.id)} stars")


def register_commands(cli):
    """Register reward commands with main CLI."""
    cli.add_command(reward_group, name="reward")
