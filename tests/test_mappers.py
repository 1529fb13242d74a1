"""Tests for database mappers."""

from datetime import datetime, date, UTC

from familyhub.database.mappers import (
    chore_to_domain,
    chore_to_orm,
    meal_plan_to_domain,
    redemption_to_domain,
)
from familyhub.database.models import (
    MealPlan as ORMMealPlan,
    RewardRedemption as ORMRewardRedemption,
)
from familyhub.domain.entities import (
    AssignmentSlot,
    Chore,
    ChoreType,
    CompletionRecord,
    CompletionStatus,
    LegacySlot,
    MealAssignment,
    RedemptionStatus,
    TimeOfDay,
)
from familyhub.domain.recurrence import Frequency, RecurrenceRule

NOW = datetime(2024, 1, 1, 8, 0, tzinfo=UTC)


class TestCompletionRecord:
    """Tests for the completion record shape."""

    def test_to_record_uses_camel_case(self):
        record = CompletionRecord(
            date=date(2024, 1, 2),
            profile_id="profile-1",
            completed_at=NOW,
            status=CompletionStatus.APPROVED,
            approved_by="profile-2",
            approved_at=NOW,
        )
        assert record.to_record() == {
            "date": "2024-01-02",
            "profileId": "profile-1",
            "completedAt": "2024-01-01T08:00:00+00:00",
            "status": "approved",
            "approvedBy": "profile-2",
            "approvedAt": "2024-01-01T08:00:00+00:00",
        }

    def test_from_record_accepts_z_suffix(self):
        record = CompletionRecord.from_record(
            {
                "date": "2024-01-02T00:00:00.000Z",
                "profileId": "profile-1",
                "completedAt": "2024-01-02T07:30:00.000Z",
                "status": "pending_approval",
            }
        )
        assert record.date == date(2024, 1, 2)
        assert record.completed_at == datetime(2024, 1, 2, 7, 30, tzinfo=UTC)
        assert record.status == CompletionStatus.PENDING_APPROVAL
        assert record.approved_by is None
        assert record.approved_at is None


class TestChoreMapper:
    """Tests for Chore mapper."""

    def test_chore_round_trip(self):
        chore = Chore(
            id="chore-1",
            title="Bins",
            profile_ids=("profile-1",),
            start_date=date(2024, 1, 2),
            time_of_day=TimeOfDay.EVENING,
            type=ChoreType.TIMED,
            created_by="profile-2",
            created_at=NOW,
            updated_at=NOW,
            recurrence=RecurrenceRule(freq=Frequency.WEEKLY, by_weekday={2}),
            scheduled_time="19:00",
            is_shared=True,
        )
        orm_chore = chore_to_orm(chore, position=3)
        assert orm_chore.position == 3
        assert orm_chore.recurrence == {"freq": "weekly", "interval": 1, "byWeekday": [2]}
        assert orm_chore.type == "timed"
        assert chore_to_domain(orm_chore) == chore

    def test_naive_timestamps_become_utc(self):
        chore = Chore(
            id="chore-1",
            title="Bins",
            profile_ids=(),
            start_date=date(2024, 1, 2),
            time_of_day=TimeOfDay.ANY,
            type=ChoreType.ANYTIME,
            created_by="",
            created_at=NOW,
            updated_at=NOW,
        )
        orm_chore = chore_to_orm(chore, position=0)
        orm_chore.created_at = NOW.replace(tzinfo=None)
        assert chore_to_domain(orm_chore).created_at == NOW


def test_redemption_to_domain():
    orm_redemption = ORMRewardRedemption(
        id="redemption-1",
        reward_id="reward-1",
        profile_id="profile-1",
        redeemed_at=NOW,
        status="cancelled",
        notes=None,
    )
    redemption = redemption_to_domain(orm_redemption)
    assert redemption.status == RedemptionStatus.CANCELLED
    assert redemption.redeemed_at == NOW


def test_meal_plan_to_domain_normalizes_slots():
    orm_plan = ORMMealPlan(
        id="mealplan-1",
        week_start_date=date(2024, 1, 8),
        meals={
            "monday": {"dinner": "meal-1", "snacks": ["meal-2", "meal-3"]},
            "tuesday": {"lunch": [{"mealId": "meal-4", "profileId": "profile-1"}]},
        },
        profile_ids=["profile-1"],
    )
    plan = meal_plan_to_domain(orm_plan)
    assert plan.meals["monday"]["dinner"] == LegacySlot(meal_ids=("meal-1",))
    assert plan.meals["monday"]["snacks"] == LegacySlot(meal_ids=("meal-2", "meal-3"))
    assert plan.meals["tuesday"]["lunch"] == AssignmentSlot(
        assignments=(MealAssignment("meal-4", "profile-1"),)
    )
    assert plan.profile_ids == ("profile-1",)
