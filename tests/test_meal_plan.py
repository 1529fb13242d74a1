"""Tests for meal plan slot helpers."""

import pytest
from datetime import date

from familyhub.domain.entities import AssignmentSlot, LegacySlot, MealAssignment
from familyhub.domain.errors import ValidationError
from familyhub.domain.meal_plan import (
    add_assignment,
    meal_ids_for,
    meals_to_record,
    normalize_slot,
    remove_profile,
    week_start,
)


def test_week_start():
    assert week_start(date(2024, 1, 14)) == date(2024, 1, 8)
    assert week_start("2024-01-08") == date(2024, 1, 8)


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, None),
        ("meal-1", LegacySlot(meal_ids=("meal-1",))),
        (["meal-1", "meal-2"], LegacySlot(meal_ids=("meal-1", "meal-2"))),
        ([], AssignmentSlot()),
        (
            [{"mealId": "meal-1", "profileId": "profile-1"}],
            AssignmentSlot(assignments=(MealAssignment("meal-1", "profile-1"),)),
        ),
    ],
)
def test_normalize_slot(raw, expected):
    assert normalize_slot(raw) == expected


def test_normalize_slot_rejects_garbage():
    with pytest.raises(ValidationError):
        normalize_slot([{"name": "soup"}])


def test_add_assignment_converts_legacy_slot():
    slot = add_assignment(LegacySlot(meal_ids=("meal-old",)), "meal-1", "profile-1")
    assert slot == AssignmentSlot(assignments=(MealAssignment("meal-1", "profile-1"),))


def test_remove_profile_keeps_legacy_slot():
    legacy = LegacySlot(meal_ids=("meal-1",))
    assert remove_profile(legacy, "profile-1") is legacy


def test_meal_ids_for_profile():
    slot = AssignmentSlot(
        assignments=(MealAssignment("meal-1", "profile-1"), MealAssignment("meal-2", "profile-2"))
    )
    assert meal_ids_for(slot, "profile-2") == ["meal-2"]
    assert meal_ids_for(None) == []


def test_meals_to_record():
    meals = {
        "monday": {
            "dinner": LegacySlot(meal_ids=("meal-1",)),
            "lunch": AssignmentSlot(assignments=(MealAssignment("meal-2", "profile-1"),)),
        }
    }
    assert meals_to_record(meals) == {
        "monday": {"dinner": ["meal-1"], "lunch": [{"mealId": "meal-2", "profileId": "profile-1"}]}
    }
