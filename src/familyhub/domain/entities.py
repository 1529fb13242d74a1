"""Domain model entities for familyhub.

These are pure data classes representing the family organizer's concepts,
independent of how snapshots are persisted. They are frozen: the store is the
only owner, and every mutation replaces an entity with an updated copy.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from enum import Enum
from typing import Any, Optional, Union

from familyhub.domain.recurrence import NO_RECURRENCE, RecurrenceRule, to_date, to_datetime


class ProfileRole(str, Enum):
    PARENT = "parent"
    CHILD = "child"


class EventCategory(str, Enum):
    PERSONAL = "personal"
    WORK = "work"
    FAMILY = "family"
    HEALTH = "health"
    EDUCATION = "education"
    SOCIAL = "social"
    OTHER = "other"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TimeOfDay(str, Enum):
    MORNING = "morning"
    MIDDAY = "midday"
    EVENING = "evening"
    ANY = "any"


class ChoreType(str, Enum):
    TIMED = "timed"
    ALL_DAY = "allDay"
    ANYTIME = "anytime"


class CompletionStatus(str, Enum):
    COMPLETED = "completed"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"


# Statuses that count as "done" for display and star balance.
DONE_STATUSES = frozenset({CompletionStatus.APPROVED, CompletionStatus.COMPLETED})


class ListKind(str, Enum):
    TODO = "todo"
    SHOPPING = "shopping"
    OTHER = "other"


class RewardCategory(str, Enum):
    TREAT = "treat"
    PRIVILEGE = "privilege"
    ACTIVITY = "activity"
    ITEM = "item"


class RedemptionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MealCategory(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


DAYS_OF_WEEK = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
MEAL_TYPES = ("breakfast", "lunch", "dinner", "snacks")


@dataclass(frozen=True)
class Profile:
    """Family member."""

    id: str
    name: str
    role: ProfileRole
    color: str


@dataclass(frozen=True)
class Reminder:
    """Event reminder, in minutes before the start."""

    minutes: int = 15
    enabled: bool = False


@dataclass(frozen=True)
class Event:
    """Calendar event; occurrences are computed from ``start`` and ``recurrence``."""

    id: str
    title: str
    start: datetime
    end: datetime
    all_day: bool
    profile_ids: tuple[str, ...]
    created_by: str
    created_at: datetime
    updated_at: datetime
    recurrence: RecurrenceRule = NO_RECURRENCE
    description: str = ""
    location: str = ""
    location_details: str = ""
    notes: str = ""
    category: EventCategory = EventCategory.OTHER
    priority: Priority = Priority.MEDIUM
    reminder: Reminder = Reminder()
    attachments: tuple[str, ...] = ()
    is_private: bool = False


@dataclass(frozen=True)
class CompletionRecord:
    """One profile's completion of a chore on one date."""

    date: date
    profile_id: str
    completed_at: datetime
    status: CompletionStatus
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "CompletionRecord":
        """Build a record from its persisted camelCase shape."""
        approved_at = record.get("approvedAt")
        return cls(
            date=to_date(record["date"]),
            profile_id=record["profileId"],
            completed_at=to_datetime(record["completedAt"]),
            status=CompletionStatus(record["status"]),
            approved_by=record.get("approvedBy"),
            approved_at=to_datetime(approved_at) if approved_at else None,
        )

    def to_record(self) -> dict[str, Any]:
        """Return the persisted camelCase shape, omitting unset approval fields."""
        record: dict[str, Any] = {
            "date": self.date.isoformat(),
            "profileId": self.profile_id,
            "completedAt": self.completed_at.isoformat(),
            "status": self.status.value,
        }
        if self.approved_by is not None:
            record["approvedBy"] = self.approved_by
        if self.approved_at is not None:
            record["approvedAt"] = self.approved_at.isoformat()
        return record


@dataclass(frozen=True)
class Chore:
    """Chore domain entity; ``start_date`` anchors its recurrence."""

    id: str
    title: str
    profile_ids: tuple[str, ...]
    start_date: date
    time_of_day: TimeOfDay
    type: ChoreType
    created_by: str
    created_at: datetime
    updated_at: datetime
    recurrence: RecurrenceRule = NO_RECURRENCE
    description: str = ""
    scheduled_time: Optional[str] = None
    reward_stars: int = 0
    is_shared: bool = False
    requires_approval: bool = False
    completed_by: tuple[CompletionRecord, ...] = ()


@dataclass(frozen=True)
class FamilyList:
    """Shopping/todo list; ``item_count`` is maintained by the store."""

    id: str
    name: str
    kind: ListKind
    color: str
    item_count: int = 0


@dataclass(frozen=True)
class ListItem:
    """Entry of a :class:`FamilyList`."""

    id: str
    list_id: str
    title: str
    checked: bool = False
    notes: Optional[str] = None
    quantity: Optional[str] = None
    category: Optional[str] = None
    due_date: Optional[date] = None
    priority: Optional[Priority] = None


@dataclass(frozen=True)
class Reward:
    """Reward redeemable for stars by the listed profiles."""

    id: str
    title: str
    description: str
    star_cost: int
    category: RewardCategory
    is_active: bool = True
    profile_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class RewardRedemption:
    """A profile spending stars on a reward."""

    id: str
    reward_id: str
    profile_id: str
    redeemed_at: datetime
    status: RedemptionStatus = RedemptionStatus.PENDING
    notes: Optional[str] = None


@dataclass(frozen=True)
class Meal:
    """Meal catalog entry."""

    id: str
    name: str
    category: MealCategory
    ingredients: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    description: Optional[str] = None
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    servings: Optional[int] = None
    instructions: tuple[str, ...] = ()
    image_url: Optional[str] = None


@dataclass(frozen=True)
class MealAssignment:
    meal_id: str
    profile_id: str


@dataclass(frozen=True)
class LegacySlot:
    """Older slot form: bare meal ids, not tied to any profile."""

    meal_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class AssignmentSlot:
    """Current slot form: meals assigned to individual profiles."""

    assignments: tuple[MealAssignment, ...] = ()


MealSlot = Union[LegacySlot, AssignmentSlot]


@dataclass(frozen=True)
class MealPlan:
    """Meals for one Monday-anchored week.

    ``meals`` maps a day name (see :data:`DAYS_OF_WEEK`) to a mapping of meal
    type (see :data:`MEAL_TYPES`) to slot.
    """

    id: str
    week_start_date: date
    meals: dict[str, dict[str, MealSlot]] = field(default_factory=dict)
    profile_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class FeatureFlags:
    plus_features: bool = False
    sidekick: bool = False
    rewards: bool = True


@dataclass
class Snapshot:
    """Complete store state, the unit loaded from and saved to a database."""

    profiles: list[Profile] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    chores: list[Chore] = field(default_factory=list)
    lists: list[FamilyList] = field(default_factory=list)
    list_items: list[ListItem] = field(default_factory=list)
    rewards: list[Reward] = field(default_factory=list)
    reward_redemptions: list[RewardRedemption] = field(default_factory=list)
    meals: list[Meal] = field(default_factory=list)
    meal_plans: list[MealPlan] = field(default_factory=list)
    selected_profile_ids: list[str] = field(default_factory=list)
    selected_chore_filter: str = "all"
    feature_flags: FeatureFlags = FeatureFlags()
