"""Derived, read-only views over chores and rewards."""

from datetime import date
from typing import Iterable, Optional

from familyhub.domain.entities import (
    DONE_STATUSES,
    Chore,
    CompletionRecord,
    RedemptionStatus,
    Reward,
    RewardRedemption,
    TimeOfDay,
)


def find_completion(chore: Chore, profile_id: str, day: date) -> Optional[CompletionRecord]:
    """Return the completion record for (profile, date), if any."""
    for record in chore.completed_by:
        if record.profile_id == profile_id and record.date == day:
            return record
    return None


def is_chore_completed(chore: Chore, profile_id: str, day: date) -> bool:
    """Check whether a chore counts as done for a profile on a date.

    Records awaiting approval or rejected do not count, even though they exist.
    """
    record = find_completion(chore, profile_id, day)
    return record is not None and record.status in DONE_STATUSES


def chore_completion_percentage(chore: Chore, day: date) -> int:
    """Percentage (rounded) of assigned profiles that completed the chore on a date."""
    if not chore.profile_ids:
        return 0
    done = sum(1 for profile_id in chore.profile_ids if is_chore_completed(chore, profile_id, day))
    return round(done * 100 / len(chore.profile_ids))


def is_time_segment_completed(
    chores: Iterable[Chore], profile_id: str, time_of_day: TimeOfDay, day: date
) -> bool:
    """Check whether every chore of a profile in a time-of-day segment is done.

    An empty segment is not considered completed.
    """
    segment = [
        chore
        for chore in chores
        if profile_id in chore.profile_ids and chore.time_of_day == time_of_day
    ]
    if not segment:
        return False
    return all(is_chore_completed(chore, profile_id, day) for chore in segment)


def stars_earned(chores: Iterable[Chore], profile_id: str) -> int:
    """Stars of every chore the profile has at least one done record for."""
    return sum(
        chore.reward_stars
        for chore in chores
        if any(
            record.profile_id == profile_id and record.status in DONE_STATUSES
            for record in chore.completed_by
        )
    )


def stars_spent(
    redemptions: Iterable[RewardRedemption], rewards: dict[str, Reward], profile_id: str
) -> int:
    """Star cost of the profile's redemptions that were not cancelled."""
    total = 0
    for redemption in redemptions:
        if redemption.profile_id != profile_id or redemption.status == RedemptionStatus.CANCELLED:
            continue
        reward = rewards.get(redemption.reward_id)
        if reward is not None:
            total += reward.star_cost
    return total
