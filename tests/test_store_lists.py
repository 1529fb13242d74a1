"""Tests for lists and list items in DomainStore."""

import pytest

from familyhub.domain.entities import FamilyList, ListItem, ListKind, Snapshot
from familyhub.domain.errors import ConflictError, NotFoundError, ValidationError
from familyhub.domain.store import DomainStore


def _assert_counts_consistent(store):
    for family_list in store.lists:
        assert family_list.item_count == len(store.items_of(family_list.id))
        assert family_list.item_count >= 0


def test_add_list(store):
    list_id = store.add_list("Groceries", kind=ListKind.SHOPPING)
    family_list = store.get_list(list_id)
    assert family_list.name == "Groceries"
    assert family_list.kind == ListKind.SHOPPING
    assert family_list.item_count == 0


def test_item_count_follows_adds_and_deletes(store):
    groceries = store.add_list("Groceries", kind=ListKind.SHOPPING)
    chores = store.add_list("Weekend")

    milk = store.add_list_item(groceries, "Milk", quantity="2 l")
    eggs = store.add_list_item(groceries, "Eggs")
    store.add_list_item(chores, "Clean garage")
    _assert_counts_consistent(store)
    assert store.get_list(groceries).item_count == 2

    store.delete_list_item(milk)
    store.delete_list_item(milk)
    _assert_counts_consistent(store)
    assert store.get_list(groceries).item_count == 1

    store.delete_list_item(eggs)
    assert store.get_list(groceries).item_count == 0
    _assert_counts_consistent(store)


def test_toggle_does_not_change_count(store):
    list_id = store.add_list("Groceries")
    item_id = store.add_list_item(list_id, "Milk")
    store.toggle_list_item(item_id)
    assert store.get_list_item(item_id).checked
    store.toggle_list_item(item_id)
    assert not store.get_list_item(item_id).checked
    assert store.get_list(list_id).item_count == 1


def test_moving_item_moves_count(store):
    first = store.add_list("First")
    second = store.add_list("Second")
    item_id = store.add_list_item(first, "Milk")
    store.update_list_item(item_id, list_id=second)
    assert store.get_list(first).item_count == 0
    assert store.get_list(second).item_count == 1
    _assert_counts_consistent(store)


def test_item_count_cannot_be_set(store):
    list_id = store.add_list("Groceries")
    with pytest.raises(ValidationError):
        store.update_list(list_id, item_count=10)


def test_add_item_to_missing_list(store, strict_store):
    assert store.add_list_item("list-missing", "Milk") is None
    assert store.list_items == []
    with pytest.raises(NotFoundError):
        strict_store.add_list_item("list-missing", "Milk")


def test_delete_list_cascades_items(store):
    keep = store.add_list("Keep")
    drop = store.add_list("Drop")
    kept_item = store.add_list_item(keep, "Stays")
    store.add_list_item(drop, "Goes")
    store.add_list_item(drop, "Goes too")

    store.delete_list(drop)
    assert store.get_list(drop) is None
    assert [item.id for item in store.list_items] == [kept_item]


def test_snapshot_counts_are_repaired(caplog):
    snapshot = Snapshot(
        lists=[FamilyList(id="list-1", name="Groceries", kind=ListKind.SHOPPING, color="#fff", item_count=7)],
        list_items=[ListItem(id="item-1", list_id="list-1", title="Milk")],
    )
    store = DomainStore(snapshot)
    assert store.get_list("list-1").item_count == 1
    assert "Repaired item counts" in caplog.text


def test_snapshot_with_duplicate_ids():
    snapshot = Snapshot(
        lists=[
            FamilyList(id="list-1", name="A", kind=ListKind.TODO, color="#fff"),
            FamilyList(id="list-1", name="B", kind=ListKind.TODO, color="#fff"),
        ]
    )
    with pytest.raises(ConflictError):
        DomainStore(snapshot)
