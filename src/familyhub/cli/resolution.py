"""CLI helpers for resolving entities, parsing dates and saving the store."""

from __future__ import annotations

from datetime import date
from typing import Iterable, TypeVar

import click

from familyhub.domain.store import DomainStore
from familyhub.utils.date_parser import parse_date

T = TypeVar("T")


def get_store(ctx: click.Context) -> DomainStore:
    return ctx.obj["store"]


def save_store(ctx: click.Context) -> None:
    """Persist the store's current state to the database."""
    ctx.obj["db"].save_snapshot(get_store(ctx).snapshot())


def resolve_or_exit(
    ctx: click.Context, kind: str, value: str, entities: Iterable[T], name_attr: str = "name"
) -> T:
    """Resolve an entity by ID or by (case-insensitive) name, or exit with a CLI error.

    Raises no exception; ambiguous and unknown names both exit with status 1.
    """
    entities = list(entities)
    for entity in entities:
        if entity.id == value:
            return entity

    wanted = value.strip().lower()
    found = [entity for entity in entities if getattr(entity, name_attr).lower() == wanted]
    if len(found) == 1:
        return found[0]
    if not found:
        click.echo(f"Error: {kind} '{value}' not found", err=True)
    else:
        ids = ", ".join(entity.id for entity in found)
        click.echo(f"Error: {kind} name '{value}' is ambiguous ({ids}); use an ID", err=True)
    ctx.exit(1)


def resolve_profiles_or_exit(ctx: click.Context, values: Iterable[str]) -> list[str]:
    """Resolve several profile names or IDs to profile IDs."""
    profiles = get_store(ctx).profiles
    return [resolve_or_exit(ctx, "Profile", value, profiles).id for value in values]


def parse_date_or_exit(ctx: click.Context, value: str, label: str = "date") -> date:
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)
