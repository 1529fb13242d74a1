"""Tests for the meal catalog and weekly meal plans in DomainStore."""

import pytest
from datetime import date

from familyhub.domain.entities import AssignmentSlot, LegacySlot, MealAssignment, MealCategory
from familyhub.domain.errors import NotFoundError, ValidationError

MONDAY = date(2024, 1, 8)
THURSDAY = date(2024, 1, 11)


@pytest.fixture
def meals(store):
    return {
        "pancakes": store.add_meal("Pancakes", category=MealCategory.BREAKFAST, ingredients=["flour", "eggs"]),
        "porridge": store.add_meal("Porridge", category=MealCategory.BREAKFAST),
    }


def test_add_meal(store, meals):
    meal = store.get_meal(meals["pancakes"])
    assert meal.ingredients == ("flour", "eggs")
    assert meal.category == MealCategory.BREAKFAST


def test_meal_plan_is_anchored_to_monday(store):
    plan_id = store.add_meal_plan(THURSDAY)
    assert store.get_meal_plan(plan_id).week_start_date == MONDAY
    assert store.meal_plan_for_week("2024-01-14").id == plan_id
    assert store.meal_plan_for_week(date(2024, 1, 15)) is None


def test_assign_meal_creates_plan(store, family, meals):
    plan_id = store.assign_meal(THURSDAY, "Saturday", "breakfast", family["sam"], meals["pancakes"])
    store.assign_meal(MONDAY, "saturday", "breakfast", family["kim"], meals["porridge"])
    store.assign_meal(MONDAY, "saturday", "breakfast", family["kim"], meals["porridge"])

    assert len(store.meal_plans) == 1
    slot = store.get_meal_plan(plan_id).meals["saturday"]["breakfast"]
    assert slot == AssignmentSlot(
        assignments=(
            MealAssignment(meals["pancakes"], family["sam"]),
            MealAssignment(meals["porridge"], family["kim"]),
        )
    )
    assert [m.name for m in store.meals_for(MONDAY, "saturday", "breakfast")] == ["Pancakes", "Porridge"]
    assert [m.name for m in store.meals_for(MONDAY, "saturday", "breakfast", family["kim"])] == ["Porridge"]


def test_assign_meal_rejects_unknown_slot(store, family, meals):
    with pytest.raises(ValidationError):
        store.assign_meal(MONDAY, "someday", "breakfast", family["sam"], meals["pancakes"])
    with pytest.raises(ValidationError):
        store.assign_meal(MONDAY, "monday", "brunch", family["sam"], meals["pancakes"])


def test_remove_meal_removes_for_everyone(store, family, meals):
    store.assign_meal(MONDAY, "monday", "dinner", family["sam"], meals["pancakes"])
    store.assign_meal(MONDAY, "monday", "dinner", family["kim"], meals["pancakes"])
    store.assign_meal(MONDAY, "monday", "dinner", family["kim"], meals["porridge"])

    store.remove_meal_from_plan(THURSDAY, "monday", "dinner", family["sam"], meals["pancakes"])

    slot = store.meal_plan_for_week(MONDAY).meals["monday"]["dinner"]
    assert slot.assignments == (MealAssignment(meals["porridge"], family["kim"]),)


def test_remove_meal_from_legacy_slot(store, meals):
    store.add_meal_plan(MONDAY, meals={"tuesday": {"lunch": [meals["pancakes"], meals["porridge"]]}})
    store.remove_meal_from_plan(MONDAY, "tuesday", "lunch", "profile-x", meals["pancakes"])
    slot = store.meal_plan_for_week(MONDAY).meals["tuesday"]["lunch"]
    assert slot == LegacySlot(meal_ids=(meals["porridge"],))


def test_remove_meal_without_plan(store, strict_store):
    store.remove_meal_from_plan(MONDAY, "monday", "dinner", "profile-x", "meal-x")
    with pytest.raises(NotFoundError):
        strict_store.remove_meal_from_plan(MONDAY, "monday", "dinner", "profile-x", "meal-x")


def test_legacy_meals_are_normalized(store, meals):
    plan_id = store.add_meal_plan(
        MONDAY,
        meals={
            "monday": {"dinner": meals["pancakes"], "snacks": [meals["porridge"]]},
            "friday": {"lunch": [{"mealId": meals["porridge"], "profileId": "profile-1"}]},
        },
    )
    plan = store.get_meal_plan(plan_id)
    assert plan.meals["monday"]["dinner"] == LegacySlot(meal_ids=(meals["pancakes"],))
    assert plan.meals["monday"]["snacks"] == LegacySlot(meal_ids=(meals["porridge"],))
    assert plan.meals["friday"]["lunch"] == AssignmentSlot(
        assignments=(MealAssignment(meals["porridge"], "profile-1"),)
    )
    # Legacy slots are shared by everyone
    assert [m.name for m in store.meals_for(MONDAY, "monday", "dinner", "profile-1")] == ["Pancakes"]


def test_delete_meal_clears_slots(store, family, meals):
    store.assign_meal(MONDAY, "monday", "breakfast", family["sam"], meals["pancakes"])
    store.assign_meal(MONDAY, "monday", "breakfast", family["sam"], meals["porridge"])
    store.delete_meal(meals["pancakes"])
    assert [m.name for m in store.meals_for(MONDAY, "monday", "breakfast")] == ["Porridge"]


def test_update_and_delete_meal_plan(store, meals):
    plan_id = store.add_meal_plan(MONDAY)
    store.update_meal_plan(plan_id, week_start_date=date(2024, 1, 17), meals={"sunday": {"dinner": meals["pancakes"]}})
    plan = store.get_meal_plan(plan_id)
    assert plan.week_start_date == date(2024, 1, 15)
    assert plan.meals["sunday"]["dinner"] == LegacySlot(meal_ids=(meals["pancakes"],))

    store.delete_meal_plan(plan_id)
    assert store.meal_plans == []


def test_update_meal(store, meals):
    store.update_meal(meals["porridge"], tags=["quick"], servings=2)
    meal = store.get_meal(meals["porridge"])
    assert meal.tags == ("quick",)
    assert meal.servings == 2
