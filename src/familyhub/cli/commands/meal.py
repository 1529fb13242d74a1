"""Meal catalog and weekly meal plan commands."""

import click

from familyhub.cli.error_handling import handle_domain_error
from familyhub.cli.resolution import get_store, parse_date_or_exit, resolve_or_exit, save_store
from familyhub.domain.entities import DAYS_OF_WEEK, MEAL_TYPES, MealCategory
from familyhub.domain.errors import DomainError
from familyhub.domain.meal_plan import week_start


@click.group()
def meal_group():
    """Manage meals and the weekly meal plan."""
    pass


def _slot_options(command):
    command = click.option(
        "--type", "meal_type", type=click.Choice(MEAL_TYPES, case_sensitive=False), required=True
    )(command)
    command = click.option("--day", type=click.Choice(DAYS_OF_WEEK, case_sensitive=False), required=True)(command)
    command = click.option(
        "--week", default="this week", show_default=True, help="Any date in the week (weeks start on Monday)"
    )(command)
    return command


@meal_group.command("add")
@click.argument("name", metavar="NAME")
@click.option(
    "--category",
    type=click.Choice([c.value for c in MealCategory], case_sensitive=False),
    default=MealCategory.DINNER.value,
    show_default=True,
)
@click.option("--ingredient", "ingredients", multiple=True, help="Ingredient (repeatable)")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable)")
@click.pass_context
def add_meal(ctx, name: str, category: str, ingredients: tuple[str, ...], tags: tuple[str, ...]):
    """Add a meal to the catalog.

    Examples:
        familyhub meal add "Pancakes" --category breakfast --ingredient flour --ingredient eggs
    """
    store = get_store(ctx)
    meal_id = store.add_meal(
        name=name, category=MealCategory(category.lower()), ingredients=ingredients, tags=tags
    )
    save_store(ctx)
    click.echo(f"Added meal '{name}' (ID: {meal_id})")


@meal_group.command("plan")
@click.option("--week", default="this week", show_default=True, help="Any date in the week")
@click.pass_context
def show_plan(ctx, week: str):
    """Show the meal plan of a week."""
    store = get_store(ctx)
    monday = week_start(parse_date_or_exit(ctx, week, "week"))
    plan = store.meal_plan_for_week(monday)
    if plan is None:
        click.echo(f"No meal plan for the week of {monday}.")
        return

    click.echo(f"\nMeal plan for the week of {monday}:")
    click.echo("-" * 60)
    for day in DAYS_OF_WEEK:
        for meal_type in MEAL_TYPES:
            meals = store.meals_for(monday, day, meal_type)
            if meals:
                names = ", ".join(meal.name for meal in meals)
                click.echo(f"{day.capitalize():10s} | {meal_type:9s} | {names}")


@meal_group.command("assign")
@click.argument("meal", metavar="MEAL")
@click.argument("profile", metavar="PROFILE")
@_slot_options
@click.pass_context
def assign_meal(ctx, meal: str, profile: str, week: str, day: str, meal_type: str):
    """Plan a meal for a profile, creating the week's plan if needed.

    MEAL can be a meal name or ID; PROFILE a profile name or ID.

    Examples:
        familyhub meal assign "Pancakes" Sam --day saturday --type breakfast
    """
    store = get_store(ctx)
    meal_obj = resolve_or_exit(ctx, "Meal", meal, store.meals)
    profile_obj = resolve_or_exit(ctx, "Profile", profile, store.profiles)
    monday = week_start(parse_date_or_exit(ctx, week, "week"))
    try:
        store.assign_meal(monday, day, meal_type, profile_obj.id, meal_obj.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    save_store(ctx)
    click.echo(f"Planned '{meal_obj.name}' for {profile_obj.name} on {day} ({meal_type}), week of {monday}")


@meal_group.command("remove")
@click.argument("meal", metavar="MEAL")
@_slot_options
@click.option("--profile", help="Profile asking for the removal")
@click.pass_context
def remove_meal(ctx, meal: str, week: str, day: str, meal_type: str, profile: str | None):
    """Remove a meal from a slot of the week's plan, for everyone."""
    store = get_store(ctx)
    meal_obj = resolve_or_exit(ctx, "Meal", meal, store.meals)
    profile_id = resolve_or_exit(ctx, "Profile", profile, store.profiles).id if profile else ""
    monday = week_start(parse_date_or_exit(ctx, week, "week"))
    try:
        store.remove_meal_from_plan(monday, day, meal_type, profile_id, meal_obj.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    save_store(ctx)
    click.echo(f"Removed '{meal_obj.name}' from {day} ({meal_type}), week of {monday}")


def register_commands(cli):
    """Register meal commands with main CLI."""
    cli.add_command(meal_group, name="meal")
