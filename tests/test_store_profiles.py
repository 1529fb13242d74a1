"""Tests for profiles, reference policies and filter state."""

import pytest
from datetime import date, datetime

from familyhub.domain.entities import FeatureFlags, ProfileRole
from familyhub.domain.errors import DependencyError, NotFoundError, ValidationError
from familyhub.domain.store import ReferencePolicy


@pytest.fixture
def referenced(store, family):
    """Give Sam an event, a chore, a reward, a redemption and a planned meal."""
    sam, kim = family["sam"], family["kim"]
    store.add_event("Swimming", datetime(2024, 1, 1, 17), datetime(2024, 1, 1, 18), [sam, kim])
    chore_id = store.add_chore("Feed the cat", [sam], date(2024, 1, 1))
    store.complete_chore(chore_id, sam, date(2024, 1, 1))
    reward_id = store.add_reward("Ice cream", 0, profile_ids=[sam])
    store.add_reward_redemption(reward_id, sam)
    meal_id = store.add_meal("Pancakes")
    store.assign_meal(date(2024, 1, 1), "monday", "breakfast", sam, meal_id)
    store.assign_meal(date(2024, 1, 1), "monday", "breakfast", kim, meal_id)
    return chore_id


def test_add_and_update_profile(store):
    profile_id = store.add_profile("Alex", role=ProfileRole.PARENT, color="#000")
    store.update_profile(profile_id, name="Alexandra")
    profile = store.get_profile(profile_id)
    assert profile.name == "Alexandra"
    assert profile.role == ProfileRole.PARENT
    with pytest.raises(ValidationError):
        store.update_profile(profile_id, id="profile-other")


def test_reference_counts(store, family, referenced):
    assert store.profile_reference_counts(family["sam"]) == {
        "event": 1,
        "chore": 1,
        "reward": 1,
        "redemption": 1,
        "meal plan": 0,
    }


def test_delete_keeps_references(store, family, referenced):
    sam = family["sam"]
    store.set_selected_profile_ids([sam, family["kim"]])
    store.delete_profile(sam)

    assert store.get_profile(sam) is None
    assert store.selected_profile_ids == [family["kim"]]
    assert sam in store.get_chore(referenced).profile_ids
    assert len(store.reward_redemptions) == 1


def test_delete_detaches_references(store, family, referenced):
    sam, kim = family["sam"], family["kim"]
    store.delete_profile(sam, references=ReferencePolicy.DETACH)

    assert store.events[0].profile_ids == (kim,)
    assert store.get_chore(referenced).profile_ids == ()
    # Completion history stays
    assert len(store.get_chore(referenced).completed_by) == 1
    assert store.rewards[0].profile_ids == ()
    assert store.reward_redemptions == []
    slot = store.meal_plans[0].meals["monday"]["breakfast"]
    assert [a.profile_id for a in slot.assignments] == [kim]


def test_delete_rejected_while_referenced(store, family, referenced):
    with pytest.raises(DependencyError) as excinfo:
        store.delete_profile(family["sam"], references=ReferencePolicy.REJECT)
    assert "chore" in str(excinfo.value)
    assert store.get_profile(family["sam"]) is not None

    # An unreferenced profile can still go
    store.delete_profile(family["alex"], references=ReferencePolicy.REJECT)
    assert store.get_profile(family["alex"]) is None


def test_delete_missing_profile(store, strict_store):
    store.delete_profile("profile-missing")
    with pytest.raises(NotFoundError):
        strict_store.delete_profile("profile-missing")


def test_profile_filter_toggle(store, family):
    store.toggle_profile_filter(family["sam"])
    store.toggle_profile_filter(family["kim"])
    store.toggle_profile_filter(family["sam"])
    assert store.selected_profile_ids == [family["kim"]]


def test_chore_filter(store, family):
    assert store.selected_chore_filter == "all"
    store.set_chore_filter(family["sam"])
    assert store.selected_chore_filter == family["sam"]


def test_feature_flags(store):
    assert store.feature_flags == FeatureFlags()
    store.toggle_feature_flag("sidekick")
    assert store.feature_flags.sidekick
    with pytest.raises(ValidationError):
        store.toggle_feature_flag("teleport")
