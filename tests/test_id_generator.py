"""Tests for entity id generation."""

import pytest

from familyhub.domain.store import DomainStore
from familyhub.utils.id_generator import generate_id, to_base36


def test_to_base36():
    assert to_base36(0) == "0"
    assert to_base36(35) == "z"
    assert to_base36(36) == "10"
    with pytest.raises(ValueError):
        to_base36(-1)


def test_generate_id_format():
    entity_id = generate_id("chore", timestamp_ms=36**3)
    prefix, stamp, suffix = entity_id.split("-")
    assert prefix == "chore"
    assert stamp == "1000"
    assert len(suffix) == 5
    assert all(c in "0123456789abcdefghijklmnopqrstuvwxyz" for c in suffix)


def test_generate_id_without_prefix():
    assert generate_id(timestamp_ms=1, suffix_length=3).startswith("1-")


def test_store_retries_colliding_ids():
    ids = iter(["profile-a", "profile-a", "profile-b"])
    store = DomainStore(id_generator=lambda prefix: next(ids))
    assert store.add_profile("Alex") == "profile-a"
    assert store.add_profile("Sam") == "profile-b"
