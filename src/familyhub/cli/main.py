"""Main CLI entry point."""

import logging

import click
from familyhub.database.factories import create_sqlite_database
from familyhub.domain.store import DomainStore

# Import and register all commands at module level
from familyhub.cli.commands import (
    chore,
    event,
    family_list,
    meal,
    occurrences,
    profile,
    reward,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FAMILYHUB_DB_PATH environment variable)",
    envvar="FAMILYHUB_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log store and database activity to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Familyhub - Family organizer.

    Keep the family calendar, chores with star rewards, shared lists and
    the weekly meal plan in one place.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["store"] = DomainStore(db.load_snapshot(), strict=True)
        ctx.call_on_close(db.disconnect)


# Register all commands
profile.register_commands(cli)
event.register_commands(cli)
chore.register_commands(cli)
family_list.register_commands(cli)
reward.register_commands(cli)
meal.register_commands(cli)
occurrences.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
