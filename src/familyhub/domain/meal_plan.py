"""Meal plan slot normalization and slot edits.

Meal plan records come in two shapes: older records hold a bare meal id (or a
list of ids for snacks), newer ones hold ``{"mealId", "profileId"}``
assignments. Records are normalized into :class:`LegacySlot` or
:class:`AssignmentSlot` once, when they enter the store, so the rest of the
code never inspects raw shapes.
"""

from datetime import date, timedelta
from typing import Any, Optional

from familyhub.domain.entities import (
    DAYS_OF_WEEK,
    MEAL_TYPES,
    AssignmentSlot,
    LegacySlot,
    MealAssignment,
    MealSlot,
)
from familyhub.domain.errors import ValidationError
from familyhub.domain.recurrence import DateLike, to_date


def week_start(day: DateLike) -> date:
    """Return the Monday of the week containing ``day``."""
    day = to_date(day)
    return day - timedelta(days=day.weekday())


def check_day_and_meal_type(day: str, meal_type: str) -> tuple[str, str]:
    """Normalize and validate a day name and meal type.

    Raises:
        ValidationError: If either is not recognized
    """
    day = day.strip().lower()
    meal_type = meal_type.strip().lower()
    if day not in DAYS_OF_WEEK:
        raise ValidationError(f"Unknown day '{day}'. Expected one of: {', '.join(DAYS_OF_WEEK)}")
    if meal_type not in MEAL_TYPES:
        raise ValidationError(
            f"Unknown meal type '{meal_type}'. Expected one of: {', '.join(MEAL_TYPES)}"
        )
    return day, meal_type


def normalize_slot(raw: Any) -> Optional[MealSlot]:
    """Resolve a raw slot value into its tagged form.

    Args:
        raw: None, a slot object, a meal id string, a list of meal id strings,
            or a list of assignment records/objects

    Returns:
        Normalized slot, or None for an empty legacy value
    """
    if raw is None:
        return None
    if isinstance(raw, (LegacySlot, AssignmentSlot)):
        return raw
    if isinstance(raw, str):
        return LegacySlot(meal_ids=(raw,))
    items = list(raw)
    if not items:
        return AssignmentSlot()
    if all(isinstance(item, str) for item in items):
        return LegacySlot(meal_ids=tuple(items))
    assignments = []
    for item in items:
        if isinstance(item, MealAssignment):
            assignments.append(item)
        elif isinstance(item, dict) and "mealId" in item:
            assignments.append(MealAssignment(meal_id=item["mealId"], profile_id=item.get("profileId", "")))
        else:
            raise ValidationError(f"Unrecognized meal slot entry: {item!r}")
    return AssignmentSlot(assignments=tuple(assignments))


def normalize_meals(raw_meals: Optional[dict[str, Any]]) -> dict[str, dict[str, MealSlot]]:
    """Normalize every slot of a meal plan's ``meals`` mapping."""
    meals: dict[str, dict[str, MealSlot]] = {}
    for day, day_meals in (raw_meals or {}).items():
        slots = {}
        for meal_type, raw in (day_meals or {}).items():
            slot = normalize_slot(raw)
            if slot is not None:
                slots[meal_type] = slot
        meals[day] = slots
    return meals


def slot_to_record(slot: MealSlot) -> list[Any]:
    """Return the persisted form of a slot."""
    if isinstance(slot, LegacySlot):
        return list(slot.meal_ids)
    return [{"mealId": a.meal_id, "profileId": a.profile_id} for a in slot.assignments]


def meals_to_record(meals: dict[str, dict[str, MealSlot]]) -> dict[str, dict[str, list[Any]]]:
    return {
        day: {meal_type: slot_to_record(slot) for meal_type, slot in slots.items()}
        for day, slots in meals.items()
    }


def remove_meal(slot: MealSlot, meal_id: str) -> MealSlot:
    """Drop every occurrence of ``meal_id`` from a slot, whoever it is assigned to."""
    if isinstance(slot, LegacySlot):
        return LegacySlot(meal_ids=tuple(m for m in slot.meal_ids if m != meal_id))
    return AssignmentSlot(assignments=tuple(a for a in slot.assignments if a.meal_id != meal_id))


def remove_profile(slot: MealSlot, profile_id: str) -> MealSlot:
    """Drop a profile's assignments from a slot; legacy slots have none."""
    if isinstance(slot, LegacySlot):
        return slot
    return AssignmentSlot(assignments=tuple(a for a in slot.assignments if a.profile_id != profile_id))


def add_assignment(slot: Optional[MealSlot], meal_id: str, profile_id: str) -> AssignmentSlot:
    """Append an assignment, converting a legacy or missing slot first.

    Legacy ids carry no profile, so they are dropped when a slot is converted.
    An existing identical assignment is left as is.
    """
    assignments = slot.assignments if isinstance(slot, AssignmentSlot) else ()
    assignment = MealAssignment(meal_id=meal_id, profile_id=profile_id)
    if assignment in assignments:
        return AssignmentSlot(assignments=assignments)
    return AssignmentSlot(assignments=assignments + (assignment,))


def meal_ids_for(slot: Optional[MealSlot], profile_id: Optional[str] = None) -> list[str]:
    """Return the meal ids in a slot, optionally only those assigned to a profile.

    Legacy slots are shared by everyone and ignore ``profile_id``.
    """
    if slot is None:
        return []
    if isinstance(slot, LegacySlot):
        return list(slot.meal_ids)
    return [
        a.meal_id for a in slot.assignments if profile_id is None or a.profile_id == profile_id
    ]
