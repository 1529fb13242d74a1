"""Tests for rewards, redemptions and star balances."""

import pytest
from datetime import date

from familyhub.domain.entities import CompletionStatus, RedemptionStatus, RewardCategory
from familyhub.domain.errors import NotFoundError

DAY = date(2024, 1, 10)


def _approved_chore(store, profile_id, stars):
    chore_id = store.add_chore(f"{stars}-star chore", [profile_id], DAY, reward_stars=stars)
    store.complete_chore(chore_id, profile_id, DAY)
    return chore_id


def test_add_reward(store, family):
    reward_id = store.add_reward("Late bedtime", 10, category=RewardCategory.PRIVILEGE, profile_ids=[family["sam"]])
    reward = store.get_reward(reward_id)
    assert reward.star_cost == 10
    assert reward.is_active
    assert reward.profile_ids == (family["sam"],)


def test_star_balance(store, family):
    sam = family["sam"]
    _approved_chore(store, sam, 10)
    _approved_chore(store, sam, 20)
    treat = store.add_reward("Ice cream", 15)
    toy = store.add_reward("Toy", 50)
    store.add_reward_redemption(treat, sam)
    store.add_reward_redemption(toy, sam, status=RedemptionStatus.CANCELLED)

    assert store.star_balance(sam) == 15


def test_star_balance_counts_each_chore_once(store, family):
    sam = family["sam"]
    chore_id = store.add_chore("Feed the cat", [sam], DAY, reward_stars=3)
    store.complete_chore(chore_id, sam, DAY)
    store.complete_chore(chore_id, sam, date(2024, 1, 11))
    assert store.star_balance(sam) == 3


def test_pending_and_rejected_completions_earn_nothing(store, family):
    sam = family["sam"]
    chore_id = store.add_chore("Homework", [sam], DAY, reward_stars=5, requires_approval=True)
    store.complete_chore(chore_id, sam, DAY)
    assert store.star_balance(sam) == 0
    store.reject_chore(chore_id, sam, DAY, rejected_by=family["alex"])
    assert store.get_chore(chore_id).completed_by[0].status == CompletionStatus.REJECTED
    assert store.star_balance(sam) == 0


def test_balance_is_per_profile(store, family):
    _approved_chore(store, family["sam"], 4)
    assert store.star_balance(family["kim"]) == 0


def test_redemption_of_missing_reward(store, strict_store, family):
    assert store.add_reward_redemption("reward-missing", family["sam"]) is None
    with pytest.raises(NotFoundError):
        strict_store.add_reward_redemption("reward-missing", "profile-x")


def test_cancel_redemption_restores_stars(store, family):
    sam = family["sam"]
    _approved_chore(store, sam, 10)
    reward_id = store.add_reward("Ice cream", 8)
    redemption_id = store.add_reward_redemption(reward_id, sam, notes="Friday")
    assert store.star_balance(sam) == 2

    store.update_reward_redemption(redemption_id, status=RedemptionStatus.CANCELLED)
    assert store.star_balance(sam) == 10


def test_delete_reward_cascades_redemptions(store, family):
    reward_id = store.add_reward("Ice cream", 8)
    other_id = store.add_reward("Movie", 12)
    store.add_reward_redemption(reward_id, family["sam"])
    kept = store.add_reward_redemption(other_id, family["sam"])

    store.delete_reward(reward_id)
    assert [r.id for r in store.reward_redemptions] == [kept]
