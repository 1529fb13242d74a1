"""In-memory family organizer store.

The store exclusively owns every entity collection. Collaborators read
snapshots of entities and change them only through the store's methods, which
keep the cross-entity invariants:

- a List's ``item_count`` equals the number of its items;
- a chore has at most one completion record per (profile, date);
- a shared chore keeps only one profile's completion per date.

Mutations referencing a missing id are tolerated as no-ops unless the store
was constructed with ``strict=True``, in which case they raise
:class:`~familyhub.domain.errors.NotFoundError`.

The store is synchronous and single-threaded: every call runs to completion
before the next one starts.
"""

import logging
from dataclasses import fields, replace
from datetime import datetime, UTC
from enum import Enum
from typing import Any, Callable, Iterable, Optional, TypeVar

from familyhub.domain import progress
from familyhub.domain.entities import (
    Chore,
    ChoreType,
    CompletionRecord,
    CompletionStatus,
    Event,
    FamilyList,
    FeatureFlags,
    ListItem,
    ListKind,
    Meal,
    MealCategory,
    MealPlan,
    Profile,
    ProfileRole,
    RedemptionStatus,
    Reward,
    RewardCategory,
    RewardRedemption,
    Snapshot,
    TimeOfDay,
)
from familyhub.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    completion_not_found,
    duplicate_id,
    entity_not_found,
    meal_plan_not_found,
    profile_delete_blocked,
)
from familyhub.domain.meal_plan import (
    add_assignment,
    check_day_and_meal_type,
    meal_ids_for,
    normalize_meals,
    remove_meal,
    remove_profile,
    week_start,
)
from familyhub.domain.recurrence import (
    NO_RECURRENCE,
    DateLike,
    RecurrenceRule,
    matches,
    to_date,
    to_datetime,
)
from familyhub.utils.id_generator import generate_id

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Fields given as lists by callers but stored as tuples.
_TUPLE_FIELDS = frozenset({"profile_ids", "attachments", "ingredients", "tags", "instructions"})
_INSTANT_FIELDS = ("start", "end")


class ReferencePolicy(str, Enum):
    """What deleting a profile does to entities that still reference it."""

    KEEP = "keep"
    DETACH = "detach"
    REJECT = "reject"


def _coerce(changes: dict[str, Any]) -> dict[str, Any]:
    coerced = dict(changes)
    for name in _TUPLE_FIELDS & coerced.keys():
        coerced[name] = tuple(coerced[name])
    if "completed_by" in coerced:
        coerced["completed_by"] = tuple(
            CompletionRecord.from_record(record) if isinstance(record, dict) else record
            for record in coerced["completed_by"]
        )
    for name in _INSTANT_FIELDS:
        if name in coerced:
            coerced[name] = _instant(name, coerced[name])
    if isinstance(coerced.get("recurrence"), dict):
        coerced["recurrence"] = RecurrenceRule.from_record(coerced["recurrence"])
    return coerced


def _instant(name: str, value: Any) -> datetime:
    try:
        return to_datetime(value)
    except ValueError as e:
        raise ValidationError(f"Invalid event {name}: {e}")


def _check_fields(kind: str, entity_type: type, names: Iterable[str], protected: Iterable[str] = ()) -> None:
    allowed = {f.name for f in fields(entity_type)} - {"id"} - set(protected)
    unknown = sorted(set(names) - allowed)
    if unknown:
        raise ValidationError(f"Cannot set {kind} field(s): {', '.join(unknown)}")


class DomainStore:
    """Normalized, in-memory collections of family organizer entities."""

    def __init__(
        self,
        snapshot: Optional[Snapshot] = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        id_generator: Optional[Callable[[str], str]] = None,
        strict: bool = False,
    ):
        """Initialize the store.

        Args:
            snapshot: Initial state; an empty store when None
            clock: Returns the current time for audit fields and stamps
            id_generator: Returns a new id for a collection prefix
            strict: Raise NotFoundError instead of ignoring missing ids

        Raises:
            ConflictError: If the snapshot contains duplicate ids
        """
        self._clock = clock or (lambda: datetime.now(UTC))
        self._id_generator = id_generator or generate_id
        self.strict = strict

        snapshot = snapshot or Snapshot()
        self._profiles = self._index("Profile", snapshot.profiles)
        self._events = self._index("Event", snapshot.events)
        self._chores = self._index("Chore", snapshot.chores)
        self._lists = self._index("List", snapshot.lists)
        self._list_items = self._index("List item", snapshot.list_items)
        self._rewards = self._index("Reward", snapshot.rewards)
        self._redemptions = self._index("Redemption", snapshot.reward_redemptions)
        self._meals = self._index("Meal", snapshot.meals)
        self._meal_plans = self._index(
            "Meal plan",
            [replace(plan, meals=normalize_meals(plan.meals)) for plan in snapshot.meal_plans],
        )
        self._selected_profile_ids = list(snapshot.selected_profile_ids)
        self._chore_filter = snapshot.selected_chore_filter
        self._feature_flags = snapshot.feature_flags

        repaired = self.recount_lists()
        if repaired:
            logger.warning("Repaired item counts of %d list(s) from snapshot", repaired)

    @staticmethod
    def _index(kind: str, entities: Iterable[T]) -> dict[str, T]:
        indexed: dict[str, T] = {}
        for entity in entities:
            if entity.id in indexed:
                raise ConflictError(duplicate_id(kind, entity.id))
            indexed[entity.id] = entity
        return indexed

    def snapshot(self) -> Snapshot:
        """Return the complete current state."""
        return Snapshot(
            profiles=self.profiles,
            events=self.events,
            chores=self.chores,
            lists=self.lists,
            list_items=self.list_items,
            rewards=self.rewards,
            reward_redemptions=self.reward_redemptions,
            meals=self.meals,
            meal_plans=self.meal_plans,
            selected_profile_ids=list(self._selected_profile_ids),
            selected_chore_filter=self._chore_filter,
            feature_flags=self._feature_flags,
        )

    # Collections (copies; entities themselves are immutable)
    @property
    def profiles(self) -> list[Profile]:
        return list(self._profiles.values())

    @property
    def events(self) -> list[Event]:
        return list(self._events.values())

    @property
    def chores(self) -> list[Chore]:
        return list(self._chores.values())

    @property
    def lists(self) -> list[FamilyList]:
        return list(self._lists.values())

    @property
    def list_items(self) -> list[ListItem]:
        return list(self._list_items.values())

    @property
    def rewards(self) -> list[Reward]:
        return list(self._rewards.values())

    @property
    def reward_redemptions(self) -> list[RewardRedemption]:
        return list(self._redemptions.values())

    @property
    def meals(self) -> list[Meal]:
        return list(self._meals.values())

    @property
    def meal_plans(self) -> list[MealPlan]:
        return list(self._meal_plans.values())

    def get_profile(self, profile_id: str) -> Optional[Profile]:
        return self._profiles.get(profile_id)

    def get_event(self, event_id: str) -> Optional[Event]:
        return self._events.get(event_id)

    def get_chore(self, chore_id: str) -> Optional[Chore]:
        return self._chores.get(chore_id)

    def get_list(self, list_id: str) -> Optional[FamilyList]:
        return self._lists.get(list_id)

    def get_list_item(self, item_id: str) -> Optional[ListItem]:
        return self._list_items.get(item_id)

    def get_reward(self, reward_id: str) -> Optional[Reward]:
        return self._rewards.get(reward_id)

    def get_reward_redemption(self, redemption_id: str) -> Optional[RewardRedemption]:
        return self._redemptions.get(redemption_id)

    def get_meal(self, meal_id: str) -> Optional[Meal]:
        return self._meals.get(meal_id)

    def get_meal_plan(self, plan_id: str) -> Optional[MealPlan]:
        return self._meal_plans.get(plan_id)

    def items_of(self, list_id: str) -> list[ListItem]:
        """Items of one list, in insertion order."""
        return [item for item in self._list_items.values() if item.list_id == list_id]

    # Shared plumbing
    def _missing(self, message: str) -> None:
        if self.strict:
            raise NotFoundError(message)
        logger.debug("%s; ignoring", message)

    def _new_id(self, prefix: str, collection: dict[str, Any]) -> str:
        while True:
            new_id = self._id_generator(prefix)
            if new_id not in collection:
                return new_id

    def _update(
        self,
        kind: str,
        collection: dict[str, T],
        entity_id: str,
        changes: dict[str, Any],
        touch: bool = False,
    ) -> Optional[T]:
        """Shallow-merge ``changes`` into an entity; returns the previous version."""
        entity = collection.get(entity_id)
        if entity is None:
            self._missing(entity_not_found(kind, entity_id))
            return None
        changes = _coerce(changes)
        if touch:
            changes["updated_at"] = self._clock()
        collection[entity_id] = replace(entity, **changes)
        logger.debug("Updated %s '%s': %s", kind, entity_id, sorted(changes))
        return entity

    def _delete(self, kind: str, collection: dict[str, T], entity_id: str) -> Optional[T]:
        entity = collection.pop(entity_id, None)
        if entity is None:
            self._missing(entity_not_found(kind, entity_id))
        else:
            logger.debug("Deleted %s '%s'", kind, entity_id)
        return entity

    # Profile operations
    def add_profile(self, name: str, role: ProfileRole = ProfileRole.CHILD, color: str = "#2F80ED") -> str:
        """Add a profile. Returns profile ID."""
        profile = Profile(id=self._new_id("profile", self._profiles), name=name, role=role, color=color)
        self._profiles[profile.id] = profile
        logger.debug("Added profile '%s' (%s)", profile.id, name)
        return profile.id

    def update_profile(self, profile_id: str, **changes: Any) -> None:
        _check_fields("profile", Profile, changes)
        self._update("Profile", self._profiles, profile_id, changes)

    def delete_profile(self, profile_id: str, references: ReferencePolicy = ReferencePolicy.KEEP) -> None:
        """Delete a profile and drop it from the filter selection.

        Args:
            profile_id: Profile ID to delete
            references: KEEP leaves other entities' references dangling,
                DETACH removes them (and the profile's redemptions), REJECT
                refuses while any reference exists

        Raises:
            DependencyError: With REJECT, if the profile is still referenced
        """
        if profile_id not in self._profiles:
            self._missing(entity_not_found("Profile", profile_id))
            return

        if references == ReferencePolicy.REJECT:
            counts = self.profile_reference_counts(profile_id)
            if any(counts.values()):
                raise DependencyError(profile_delete_blocked(profile_id, counts))
        elif references == ReferencePolicy.DETACH:
            self._detach_profile(profile_id)

        self._delete("Profile", self._profiles, profile_id)
        self._selected_profile_ids = [pid for pid in self._selected_profile_ids if pid != profile_id]

    def profile_reference_counts(self, profile_id: str) -> dict[str, int]:
        """Count entities referencing a profile, by kind."""
        return {
            "event": sum(1 for e in self._events.values() if profile_id in e.profile_ids),
            "chore": sum(1 for c in self._chores.values() if profile_id in c.profile_ids),
            "reward": sum(1 for r in self._rewards.values() if profile_id in r.profile_ids),
            "redemption": sum(1 for r in self._redemptions.values() if r.profile_id == profile_id),
            "meal plan": sum(1 for p in self._meal_plans.values() if profile_id in p.profile_ids),
        }

    def _detach_profile(self, profile_id: str) -> None:
        def without(ids: tuple[str, ...]) -> tuple[str, ...]:
            return tuple(pid for pid in ids if pid != profile_id)

        for collection in (self._events, self._chores, self._rewards):
            for entity_id, entity in collection.items():
                if profile_id in entity.profile_ids:
                    collection[entity_id] = replace(entity, profile_ids=without(entity.profile_ids))
        for plan_id, plan in self._meal_plans.items():
            meals = {
                day: {meal_type: remove_profile(slot, profile_id) for meal_type, slot in slots.items()}
                for day, slots in plan.meals.items()
            }
            self._meal_plans[plan_id] = replace(plan, profile_ids=without(plan.profile_ids), meals=meals)
        for redemption_id in [r.id for r in self._redemptions.values() if r.profile_id == profile_id]:
            del self._redemptions[redemption_id]
        logger.info("Detached profile '%s' from all references", profile_id)

    # Event operations
    def add_event(
        self,
        title: str,
        start: datetime,
        end: datetime,
        profile_ids: Iterable[str],
        all_day: bool = False,
        recurrence: Optional[RecurrenceRule] = None,
        created_by: str = "",
        **details: Any,
    ) -> str:
        """Add an event, filling defaults for omitted details.

        Args:
            title: Event title
            start: Start instant (anchors the recurrence)
            end: End instant
            profile_ids: Attendee profile IDs
            all_day: All-day flag
            recurrence: Recurrence rule; does not repeat when None
            created_by: Profile ID of the creator
            **details: Optional Event fields (description, location, category,
                priority, reminder, attachments, is_private, ...)

        Returns:
            Event ID
        """
        _check_fields("event", Event, details, protected=("created_at", "updated_at"))
        now = self._clock()
        event = Event(
            id=self._new_id("event", self._events),
            title=title,
            start=_instant("start", start),
            end=_instant("end", end),
            all_day=all_day,
            profile_ids=tuple(profile_ids),
            created_by=created_by,
            created_at=now,
            updated_at=now,
            recurrence=recurrence or NO_RECURRENCE,
            **_coerce(details),
        )
        self._events[event.id] = event
        logger.debug("Added event '%s' (%s)", event.id, title)
        return event.id

    def update_event(self, event_id: str, **changes: Any) -> None:
        """Shallow-merge fields into an event and refresh ``updated_at``."""
        _check_fields("event", Event, changes, protected=("created_at", "updated_at"))
        self._update("Event", self._events, event_id, changes, touch=True)

    def delete_event(self, event_id: str) -> None:
        self._delete("Event", self._events, event_id)

    # Chore operations
    def add_chore(
        self,
        title: str,
        profile_ids: Iterable[str],
        start_date: DateLike,
        time_of_day: TimeOfDay = TimeOfDay.ANY,
        type: ChoreType = ChoreType.ANYTIME,
        recurrence: Optional[RecurrenceRule] = None,
        created_by: str = "",
        **details: Any,
    ) -> str:
        """Add a chore, filling defaults for omitted details.

        Args:
            title: Chore title
            profile_ids: Assigned profile IDs
            start_date: Anchor date of the recurrence
            time_of_day: Part of the day the chore belongs to
            type: Timed, all-day or anytime
            recurrence: Recurrence rule; does not repeat when None
            created_by: Profile ID of the creator
            **details: Optional Chore fields (description, scheduled_time,
                reward_stars, is_shared, requires_approval, completed_by)

        Returns:
            Chore ID
        """
        _check_fields("chore", Chore, details, protected=("created_at", "updated_at"))
        now = self._clock()
        chore = Chore(
            id=self._new_id("chore", self._chores),
            title=title,
            profile_ids=tuple(profile_ids),
            start_date=to_date(start_date),
            time_of_day=time_of_day,
            type=type,
            created_by=created_by,
            created_at=now,
            updated_at=now,
            recurrence=recurrence or NO_RECURRENCE,
            **_coerce(details),
        )
        self._chores[chore.id] = chore
        logger.debug("Added chore '%s' (%s)", chore.id, title)
        return chore.id

    def update_chore(self, chore_id: str, **changes: Any) -> None:
        """Shallow-merge fields into a chore and refresh ``updated_at``."""
        _check_fields("chore", Chore, changes, protected=("created_at", "updated_at"))
        if "start_date" in changes:
            changes["start_date"] = to_date(changes["start_date"])
        self._update("Chore", self._chores, chore_id, changes, touch=True)

    def delete_chore(self, chore_id: str) -> None:
        self._delete("Chore", self._chores, chore_id)

    def complete_chore(self, chore_id: str, profile_id: str, day: DateLike) -> None:
        """Record that a profile completed a chore on a date.

        A second completion for the same (profile, date) is a no-op. For a
        shared chore, any other profile's completion on that date is removed
        first. The new record is pending approval if the chore requires it,
        approved otherwise.
        """
        chore = self._chores.get(chore_id)
        if chore is None:
            self._missing(entity_not_found("Chore", chore_id))
            return
        day = to_date(day)
        if progress.find_completion(chore, profile_id, day) is not None:
            logger.debug("Chore '%s' already completed by '%s' on %s", chore_id, profile_id, day)
            return

        records = chore.completed_by
        if chore.is_shared:
            records = tuple(record for record in records if record.date != day)

        now = self._clock()
        status = CompletionStatus.PENDING_APPROVAL if chore.requires_approval else CompletionStatus.APPROVED
        record = CompletionRecord(date=day, profile_id=profile_id, completed_at=now, status=status)
        self._chores[chore_id] = replace(chore, completed_by=records + (record,), updated_at=now)
        logger.debug("Chore '%s' completed by '%s' on %s (%s)", chore_id, profile_id, day, status.value)

    def uncomplete_chore(self, chore_id: str, profile_id: str, day: DateLike) -> None:
        """Remove a profile's completion for a date, whatever its status."""
        chore = self._chores.get(chore_id)
        if chore is None:
            self._missing(entity_not_found("Chore", chore_id))
            return
        day = to_date(day)
        records = tuple(
            record
            for record in chore.completed_by
            if not (record.profile_id == profile_id and record.date == day)
        )
        if len(records) == len(chore.completed_by):
            self._missing(completion_not_found(chore_id, profile_id, day.isoformat()))
            return
        self._chores[chore_id] = replace(chore, completed_by=records, updated_at=self._clock())

    def approve_chore(self, chore_id: str, profile_id: str, day: DateLike, approved_by: str) -> None:
        """Mark a completion approved, stamping the approver and time."""
        self._review(chore_id, profile_id, day, CompletionStatus.APPROVED, approved_by)

    def reject_chore(self, chore_id: str, profile_id: str, day: DateLike, rejected_by: str) -> None:
        """Mark a completion rejected, stamping the rejecting profile and time."""
        self._review(chore_id, profile_id, day, CompletionStatus.REJECTED, rejected_by)

    def _review(
        self, chore_id: str, profile_id: str, day: DateLike, status: CompletionStatus, reviewer: str
    ) -> None:
        chore = self._chores.get(chore_id)
        if chore is None:
            self._missing(entity_not_found("Chore", chore_id))
            return
        day = to_date(day)
        record = progress.find_completion(chore, profile_id, day)
        if record is None:
            self._missing(completion_not_found(chore_id, profile_id, day.isoformat()))
            return
        now = self._clock()
        reviewed = replace(record, status=status, approved_by=reviewer, approved_at=now)
        records = tuple(reviewed if r is record else r for r in chore.completed_by)
        self._chores[chore_id] = replace(chore, completed_by=records, updated_at=now)
        logger.debug("Chore '%s' for '%s' on %s %s by '%s'", chore_id, profile_id, day, status.value, reviewer)

    # List operations
    def add_list(self, name: str, kind: ListKind = ListKind.TODO, color: str = "#2F80ED") -> str:
        """Add an empty list. Returns list ID."""
        family_list = FamilyList(id=self._new_id("list", self._lists), name=name, kind=kind, color=color)
        self._lists[family_list.id] = family_list
        logger.debug("Added list '%s' (%s)", family_list.id, name)
        return family_list.id

    def update_list(self, list_id: str, **changes: Any) -> None:
        _check_fields("list", FamilyList, changes, protected=("item_count",))
        self._update("List", self._lists, list_id, changes)

    def delete_list(self, list_id: str) -> None:
        """Delete a list together with its items."""
        if self._delete("List", self._lists, list_id) is None:
            return
        for item_id in [item.id for item in self.items_of(list_id)]:
            del self._list_items[item_id]

    def _adjust_count(self, list_id: str, delta: int) -> None:
        family_list = self._lists.get(list_id)
        if family_list is not None:
            self._lists[list_id] = replace(family_list, item_count=max(0, family_list.item_count + delta))

    def add_list_item(self, list_id: str, title: str, **details: Any) -> Optional[str]:
        """Add an item to a list and increment the list's count.

        Returns:
            List item ID, or None if the list does not exist (non-strict store)
        """
        if list_id not in self._lists:
            self._missing(entity_not_found("List", list_id))
            return None
        _check_fields("list item", ListItem, details, protected=("list_id", "title"))
        item = ListItem(id=self._new_id("item", self._list_items), list_id=list_id, title=title, **details)
        self._list_items[item.id] = item
        self._adjust_count(list_id, 1)
        return item.id

    def update_list_item(self, item_id: str, **changes: Any) -> None:
        """Shallow-merge fields into an item.

        Moving an item to another list moves one count along with it.
        """
        _check_fields("list item", ListItem, changes)
        previous = self._update("List item", self._list_items, item_id, changes)
        if previous is not None and "list_id" in changes and changes["list_id"] != previous.list_id:
            self._adjust_count(previous.list_id, -1)
            self._adjust_count(changes["list_id"], 1)

    def delete_list_item(self, item_id: str) -> None:
        """Delete an item and decrement its list's count (never below zero)."""
        item = self._delete("List item", self._list_items, item_id)
        if item is not None:
            self._adjust_count(item.list_id, -1)

    def toggle_list_item(self, item_id: str) -> None:
        item = self._list_items.get(item_id)
        if item is None:
            self._missing(entity_not_found("List item", item_id))
            return
        self._list_items[item_id] = replace(item, checked=not item.checked)

    def recount_lists(self) -> int:
        """Recompute every list's item count from its items.

        Returns:
            Number of lists whose count was wrong
        """
        counts: dict[str, int] = {}
        for item in self._list_items.values():
            counts[item.list_id] = counts.get(item.list_id, 0) + 1
        repaired = 0
        for list_id, family_list in self._lists.items():
            actual = counts.get(list_id, 0)
            if family_list.item_count != actual:
                self._lists[list_id] = replace(family_list, item_count=actual)
                repaired += 1
        return repaired

    # Reward operations
    def add_reward(
        self,
        title: str,
        star_cost: int,
        description: str = "",
        category: RewardCategory = RewardCategory.TREAT,
        is_active: bool = True,
        profile_ids: Iterable[str] = (),
    ) -> str:
        """Add a reward. Returns reward ID."""
        reward = Reward(
            id=self._new_id("reward", self._rewards),
            title=title,
            description=description,
            star_cost=star_cost,
            category=category,
            is_active=is_active,
            profile_ids=tuple(profile_ids),
        )
        self._rewards[reward.id] = reward
        return reward.id

    def update_reward(self, reward_id: str, **changes: Any) -> None:
        _check_fields("reward", Reward, changes)
        self._update("Reward", self._rewards, reward_id, changes)

    def delete_reward(self, reward_id: str) -> None:
        """Delete a reward together with its redemptions."""
        if self._delete("Reward", self._rewards, reward_id) is None:
            return
        for redemption_id in [r.id for r in self._redemptions.values() if r.reward_id == reward_id]:
            del self._redemptions[redemption_id]

    def add_reward_redemption(
        self,
        reward_id: str,
        profile_id: str,
        status: RedemptionStatus = RedemptionStatus.PENDING,
        notes: Optional[str] = None,
        redeemed_at: Optional[datetime] = None,
    ) -> Optional[str]:
        """Record a profile redeeming a reward.

        Returns:
            Redemption ID, or None if the reward does not exist (non-strict store)
        """
        if reward_id not in self._rewards:
            self._missing(entity_not_found("Reward", reward_id))
            return None
        redemption = RewardRedemption(
            id=self._new_id("redemption", self._redemptions),
            reward_id=reward_id,
            profile_id=profile_id,
            redeemed_at=redeemed_at or self._clock(),
            status=status,
            notes=notes,
        )
        self._redemptions[redemption.id] = redemption
        return redemption.id

    def update_reward_redemption(self, redemption_id: str, **changes: Any) -> None:
        _check_fields("redemption", RewardRedemption, changes)
        self._update("Redemption", self._redemptions, redemption_id, changes)

    def delete_reward_redemption(self, redemption_id: str) -> None:
        self._delete("Redemption", self._redemptions, redemption_id)

    # Meal operations
    def add_meal(self, name: str, category: MealCategory = MealCategory.DINNER, **details: Any) -> str:
        """Add a meal to the catalog. Returns meal ID."""
        _check_fields("meal", Meal, details)
        meal = Meal(id=self._new_id("meal", self._meals), name=name, category=category, **_coerce(details))
        self._meals[meal.id] = meal
        return meal.id

    def update_meal(self, meal_id: str, **changes: Any) -> None:
        _check_fields("meal", Meal, changes)
        self._update("Meal", self._meals, meal_id, changes)

    def delete_meal(self, meal_id: str) -> None:
        """Delete a meal and remove it from every meal plan slot."""
        if self._delete("Meal", self._meals, meal_id) is None:
            return
        for plan_id, plan in self._meal_plans.items():
            meals = {
                day: {meal_type: remove_meal(slot, meal_id) for meal_type, slot in slots.items()}
                for day, slots in plan.meals.items()
            }
            self._meal_plans[plan_id] = replace(plan, meals=meals)

    # Meal plan operations
    def add_meal_plan(
        self,
        week_start_date: DateLike,
        meals: Optional[dict[str, Any]] = None,
        profile_ids: Iterable[str] = (),
    ) -> str:
        """Add a meal plan for the Monday-anchored week containing a date.

        ``meals`` may hold slots in either record shape; they are normalized.
        """
        plan = MealPlan(
            id=self._new_id("mealplan", self._meal_plans),
            week_start_date=week_start(week_start_date),
            meals=normalize_meals(meals),
            profile_ids=tuple(profile_ids),
        )
        self._meal_plans[plan.id] = plan
        logger.debug("Added meal plan '%s' for week %s", plan.id, plan.week_start_date)
        return plan.id

    def update_meal_plan(self, plan_id: str, **changes: Any) -> None:
        _check_fields("meal plan", MealPlan, changes)
        if "meals" in changes:
            changes["meals"] = normalize_meals(changes["meals"])
        if "week_start_date" in changes:
            changes["week_start_date"] = week_start(changes["week_start_date"])
        self._update("Meal plan", self._meal_plans, plan_id, changes)

    def delete_meal_plan(self, plan_id: str) -> None:
        self._delete("Meal plan", self._meal_plans, plan_id)

    def meal_plan_for_week(self, week: DateLike) -> Optional[MealPlan]:
        """Return the plan of the Monday-anchored week containing ``week``."""
        target = week_start(week)
        for plan in self._meal_plans.values():
            if plan.week_start_date == target:
                return plan
        return None

    def assign_meal(self, week: DateLike, day: str, meal_type: str, profile_id: str, meal_id: str) -> str:
        """Assign a meal to a profile in one slot, creating the week's plan if needed.

        Returns:
            Meal plan ID
        """
        day, meal_type = check_day_and_meal_type(day, meal_type)
        plan = self.meal_plan_for_week(week)
        if plan is None:
            plan = self._meal_plans[self.add_meal_plan(week)]
        meals = {d: dict(slots) for d, slots in plan.meals.items()}
        day_meals = meals.setdefault(day, {})
        day_meals[meal_type] = add_assignment(day_meals.get(meal_type), meal_id, profile_id)
        self._meal_plans[plan.id] = replace(plan, meals=meals)
        return plan.id

    def remove_meal_from_plan(
        self, week: DateLike, day: str, meal_type: str, profile_id: str, meal_id: str
    ) -> None:
        """Remove a meal from one slot of a week's plan.

        Every assignment of ``meal_id`` in the slot is removed, for all
        profiles; ``profile_id`` identifies who asked but does not narrow the
        removal.
        """
        day, meal_type = check_day_and_meal_type(day, meal_type)
        target = week_start(week)
        plans = [plan for plan in self._meal_plans.values() if plan.week_start_date == target]
        if not plans:
            self._missing(meal_plan_not_found(target.isoformat()))
            return
        for plan in plans:
            slot = plan.meals.get(day, {}).get(meal_type)
            if slot is None:
                continue
            meals = {d: dict(slots) for d, slots in plan.meals.items()}
            meals[day][meal_type] = remove_meal(slot, meal_id)
            self._meal_plans[plan.id] = replace(plan, meals=meals)
        logger.debug(
            "Removed meal '%s' from %s %s of week %s (requested by '%s')",
            meal_id, day, meal_type, target, profile_id,
        )

    def meals_for(
        self, week: DateLike, day: str, meal_type: str, profile_id: Optional[str] = None
    ) -> list[Meal]:
        """Meals planned in one slot, optionally only a profile's; unknown ids are skipped."""
        day, meal_type = check_day_and_meal_type(day, meal_type)
        plan = self.meal_plan_for_week(week)
        if plan is None:
            return []
        slot = plan.meals.get(day, {}).get(meal_type)
        return [self._meals[m] for m in meal_ids_for(slot, profile_id) if m in self._meals]

    # Filter state and feature flags
    @property
    def selected_profile_ids(self) -> list[str]:
        return list(self._selected_profile_ids)

    def set_selected_profile_ids(self, profile_ids: Iterable[str]) -> None:
        self._selected_profile_ids = list(profile_ids)

    def toggle_profile_filter(self, profile_id: str) -> None:
        if profile_id in self._selected_profile_ids:
            self._selected_profile_ids.remove(profile_id)
        else:
            self._selected_profile_ids.append(profile_id)

    @property
    def selected_chore_filter(self) -> str:
        return self._chore_filter

    def set_chore_filter(self, profile_id: str) -> None:
        """Set the chores view filter: a profile ID or "all"."""
        self._chore_filter = profile_id

    @property
    def feature_flags(self) -> FeatureFlags:
        return self._feature_flags

    def toggle_feature_flag(self, flag: str) -> None:
        _check_fields("feature flag", FeatureFlags, [flag])
        self._feature_flags = replace(self._feature_flags, **{flag: not getattr(self._feature_flags, flag)})

    # Derived reads
    def is_chore_completed(self, chore_id: str, profile_id: str, day: DateLike) -> bool:
        """Check whether a chore counts as done (approved or completed) for a profile on a date."""
        chore = self._chores.get(chore_id)
        return chore is not None and progress.is_chore_completed(chore, profile_id, to_date(day))

    def chore_completion_percentage(self, chore_id: str, day: DateLike) -> int:
        """Rounded percentage of a chore's assignees who have it done on a date."""
        chore = self._chores.get(chore_id)
        return 0 if chore is None else progress.chore_completion_percentage(chore, to_date(day))

    def is_time_segment_completed(self, profile_id: str, time_of_day: TimeOfDay, day: DateLike) -> bool:
        """Check whether a profile has done every chore due in one part of a day.

        A segment with no chores due is not completed.
        """
        day = to_date(day)
        return progress.is_time_segment_completed(self.chores_due_on(day, profile_id), profile_id, time_of_day, day)

    def star_balance(self, profile_id: str) -> int:
        """Stars earned from done chores minus stars spent on non-cancelled redemptions."""
        earned = progress.stars_earned(self._chores.values(), profile_id)
        spent = progress.stars_spent(self._redemptions.values(), self._rewards, profile_id)
        return earned - spent

    def events_on(self, day: DateLike, profile_ids: Optional[Iterable[str]] = None) -> list[Event]:
        """Events occurring on a date, optionally only those attended by given profiles.

        Returns:
            Events ordered by start time
        """
        day = to_date(day)
        wanted = set(profile_ids) if profile_ids else None
        found = [
            event
            for event in self._events.values()
            if matches(event.start, day, event.recurrence)
            and (wanted is None or wanted.intersection(event.profile_ids))
        ]
        return sorted(found, key=lambda event: (not event.all_day, event.start.time()))

    def chores_due_on(self, day: DateLike, profile_id: Optional[str] = None) -> list[Chore]:
        """Chores whose recurrence falls on a date, optionally only a profile's."""
        day = to_date(day)
        return [
            chore
            for chore in self._chores.values()
            if matches(chore.start_date, day, chore.recurrence)
            and (profile_id is None or profile_id in chore.profile_ids)
        ]

    def pending_approvals(self) -> list[tuple[Chore, CompletionRecord]]:
        """Completion records awaiting a parent's review, oldest first."""
        pending = [
            (chore, record)
            for chore in self._chores.values()
            for record in chore.completed_by
            if record.status == CompletionStatus.PENDING_APPROVAL
        ]
        return sorted(pending, key=lambda pair: pair[1].completed_at)
