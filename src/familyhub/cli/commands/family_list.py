"""Shopping and todo list commands."""

import click

from familyhub.cli.resolution import get_store, resolve_or_exit, save_store
from familyhub.domain.entities import ListKind


@click.group()
def list_group():
    """Manage shopping and todo lists."""
    pass


@list_group.command("add")
@click.argument("name", metavar="NAME")
@click.option(
    "--kind",
    type=click.Choice([k.value for k in ListKind], case_sensitive=False),
    default=ListKind.TODO.value,
    show_default=True,
)
@click.option("--color", default="#2F80ED", show_default=True)
@click.pass_context
def add_list(ctx, name: str, kind: str, color: str):
    """Create an empty list.

    Examples:
        familyhub list add "Groceries" --kind shopping
    """
    store = get_store(ctx)
    list_id = store.add_list(name=name, kind=ListKind(kind.lower()), color=color)
    save_store(ctx)
    click.echo(f"Created list '{name}' (ID: {list_id})")


@list_group.command("show")
@click.argument("family_list", metavar="LIST", required=False)
@click.pass_context
def show_list(ctx, family_list: str | None):
    """Show all lists, or the items of one list.

    LIST can be a list name or ID.
    """
    store = get_store(ctx)

    if family_list is None:
        lists = store.lists
        if not lists:
            click.echo("No lists found.")
            return
        click.echo("\nLists:")
        click.echo("-" * 60)
        for fl in lists:
            click.echo(f"{fl.id:28s} | {fl.name:20s} | {fl.kind.value:8s} | {fl.item_count} items")
        return

    list_obj = resolve_or_exit(ctx, "List", family_list, store.lists)
    items = store.items_of(list_obj.id)
    click.echo(f"\n{list_obj.name} ({list_obj.item_count} items):")
    click.echo("-" * 60)
    for item in items:
        mark = "[x]" if item.checked else "[ ]"
        quantity = f" ({item.quantity})" if item.quantity else ""
        click.echo(f"{mark} {item.title}{quantity}  [{item.id}]")


@list_group.command("delete")
@click.argument("family_list", metavar="LIST")
@click.pass_context
def delete_list(ctx, family_list: str):
    """Delete a list and all of its items."""
    store = get_store(ctx)
    list_obj = resolve_or_exit(ctx, "List", family_list, store.lists)

    prompt = f"Are you sure you want to delete list '{list_obj.name}' and its {list_obj.item_count} items?"
    if not click.confirm(prompt):
        click.echo("Deletion cancelled.")
        return

    store.delete_list(list_obj.id)
    save_store(ctx)
    click.echo(f"Deleted list '{list_obj.name}'")


@list_group.command("item-add")
@click.argument("family_list", metavar="LIST")
@click.argument("title", metavar="TITLE")
@click.option("--quantity", help='Quantity, e.g. "2 kg"')
@click.option("--notes", help="Notes")
@click.pass_context
def add_item(ctx, family_list: str, title: str, quantity: str | None, notes: str | None):
    """Add an item to a list."""
    store = get_store(ctx)
    list_obj = resolve_or_exit(ctx, "List", family_list, store.lists)
    item_id = store.add_list_item(list_obj.id, title, quantity=quantity, notes=notes)
    save_store(ctx)
    click.echo(f"Added '{title}' to '{list_obj.name}' (ID: {item_id})")


@list_group.command("item-toggle")
@click.argument("item", metavar="ITEM")
@click.pass_context
def toggle_item(ctx, item: str):
    """Check or uncheck an item.

    ITEM can be an item title or ID.
    """
    store = get_store(ctx)
    item_obj = resolve_or_exit(ctx, "Item", item, store.list_items, name_attr="title")
    store.toggle_list_item(item_obj.id)
    save_store(ctx)
    state = "checked" if store.get_list_item(item_obj.id).checked else "unchecked"
    click.echo(f"'{item_obj.title}' {state}")


@list_group.command("item-delete")
@click.argument("item", metavar="ITEM")
@click.pass_context
def delete_item(ctx, item: str):
    """Delete an item from its list."""
    store = get_store(ctx)
    item_obj = resolve_or_exit(ctx, "Item", item, store.list_items, name_attr="title")
    store.delete_list_item(item_obj.id)
    save_store(ctx)
    click.echo(f"Deleted '{item_obj.title}'")


def register_commands(cli):
    """Register list commands with main CLI."""
    cli.add_command(list_group, name="list")
