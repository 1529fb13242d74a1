"""Mapper functions to convert between domain entities and SQLAlchemy models.

This layer isolates the conversion logic, including the record shape used for
nested JSON columns, so the domain stays independent of the storage schema.
"""

from datetime import datetime, UTC
from typing import Optional

from familyhub.domain import entities as domain
from familyhub.domain.meal_plan import meals_to_record, normalize_meals
from familyhub.domain.recurrence import RecurrenceRule
from familyhub.database.models import (
    Chore as ORMChore,
    Event as ORMEvent,
    FamilyList as ORMFamilyList,
    ListItem as ORMListItem,
    Meal as ORMMeal,
    MealPlan as ORMMealPlan,
    Profile as ORMProfile,
    Reward as ORMReward,
    RewardRedemption as ORMRewardRedemption,
)


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite returns naive datetimes for timezone-aware columns.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def profile_to_domain(orm_profile: ORMProfile) -> domain.Profile:
    """Convert SQLAlchemy Profile model to domain Profile entity."""
    return domain.Profile(
        id=orm_profile.id,
        name=orm_profile.name,
        role=domain.ProfileRole(orm_profile.role),
        color=orm_profile.color,
    )


def profile_to_orm(profile: domain.Profile, position: int) -> ORMProfile:
    return ORMProfile(
        id=profile.id,
        position=position,
        name=profile.name,
        role=profile.role.value,
        color=profile.color,
    )


def event_to_domain(orm_event: ORMEvent) -> domain.Event:
    """Convert SQLAlchemy Event model to domain Event entity."""
    reminder = orm_event.reminder or {}
    return domain.Event(
        id=orm_event.id,
        title=orm_event.title,
        start=orm_event.start,
        end=orm_event.end,
        all_day=orm_event.all_day,
        profile_ids=tuple(orm_event.profile_ids),
        created_by=orm_event.created_by,
        created_at=_aware(orm_event.created_at),
        updated_at=_aware(orm_event.updated_at),
        recurrence=RecurrenceRule.from_record(orm_event.recurrence),
        description=orm_event.description,
        location=orm_event.location,
        location_details=orm_event.location_details,
        notes=orm_event.notes,
        category=domain.EventCategory(orm_event.category),
        priority=domain.Priority(orm_event.priority),
        reminder=domain.Reminder(
            minutes=reminder.get("minutes", 15), enabled=reminder.get("enabled", False)
        ),
        attachments=tuple(orm_event.attachments),
        is_private=orm_event.is_private,
    )


def event_to_orm(event: domain.Event, position: int) -> ORMEvent:
    return ORMEvent(
        id=event.id,
        position=position,
        title=event.title,
        start=event.start,
        end=event.end,
        all_day=event.all_day,
        profile_ids=list(event.profile_ids),
        recurrence=event.recurrence.to_record(),
        description=event.description,
        location=event.location,
        location_details=event.location_details,
        notes=event.notes,
        category=event.category.value,
        priority=event.priority.value,
        reminder={"minutes": event.reminder.minutes, "enabled": event.reminder.enabled},
        attachments=list(event.attachments),
        is_private=event.is_private,
        created_by=event.created_by,
        created_at=event.created_at,
        updated_at=event.updated_at,
    )


def chore_to_domain(orm_chore: ORMChore) -> domain.Chore:
    """Convert SQLAlchemy Chore model to domain Chore entity."""
    return domain.Chore(
        id=orm_chore.id,
        title=orm_chore.title,
        profile_ids=tuple(orm_chore.profile_ids),
        start_date=orm_chore.start_date,
        time_of_day=domain.TimeOfDay(orm_chore.time_of_day),
        type=domain.ChoreType(orm_chore.type),
        created_by=orm_chore.created_by,
        created_at=_aware(orm_chore.created_at),
        updated_at=_aware(orm_chore.updated_at),
        recurrence=RecurrenceRule.from_record(orm_chore.recurrence),
        description=orm_chore.description,
        scheduled_time=orm_chore.scheduled_time,
        reward_stars=orm_chore.reward_stars,
        is_shared=orm_chore.is_shared,
        requires_approval=orm_chore.requires_approval,
        completed_by=tuple(domain.CompletionRecord.from_record(r) for r in orm_chore.completed_by),
    )


def chore_to_orm(chore: domain.Chore, position: int) -> ORMChore:
    return ORMChore(
        id=chore.id,
        position=position,
        title=chore.title,
        description=chore.description,
        profile_ids=list(chore.profile_ids),
        start_date=chore.start_date,
        time_of_day=chore.time_of_day.value,
        type=chore.type.value,
        scheduled_time=chore.scheduled_time,
        recurrence=chore.recurrence.to_record(),
        reward_stars=chore.reward_stars,
        is_shared=chore.is_shared,
        requires_approval=chore.requires_approval,
        completed_by=[r.to_record() for r in chore.completed_by],
        created_by=chore.created_by,
        created_at=chore.created_at,
        updated_at=chore.updated_at,
    )


def list_to_domain(orm_list: ORMFamilyList) -> domain.FamilyList:
    """Convert SQLAlchemy FamilyList model to domain FamilyList entity."""
    return domain.FamilyList(
        id=orm_list.id,
        name=orm_list.name,
        kind=domain.ListKind(orm_list.kind),
        color=orm_list.color,
        item_count=orm_list.item_count,
    )


def list_to_orm(family_list: domain.FamilyList, position: int) -> ORMFamilyList:
    return ORMFamilyList(
        id=family_list.id,
        position=position,
        name=family_list.name,
        kind=family_list.kind.value,
        color=family_list.color,
        item_count=family_list.item_count,
    )


def list_item_to_domain(orm_item: ORMListItem) -> domain.ListItem:
    """Convert SQLAlchemy ListItem model to domain ListItem entity."""
    return domain.ListItem(
        id=orm_item.id,
        list_id=orm_item.list_id,
        title=orm_item.title,
        checked=orm_item.checked,
        notes=orm_item.notes,
        quantity=orm_item.quantity,
        category=orm_item.category,
        due_date=orm_item.due_date,
        priority=domain.Priority(orm_item.priority) if orm_item.priority else None,
    )


def list_item_to_orm(item: domain.ListItem, position: int) -> ORMListItem:
    return ORMListItem(
        id=item.id,
        position=position,
        list_id=item.list_id,
        title=item.title,
        checked=item.checked,
        notes=item.notes,
        quantity=item.quantity,
        category=item.category,
        due_date=item.due_date,
        priority=item.priority.value if item.priority else None,
    )


def reward_to_domain(orm_reward: ORMReward) -> domain.Reward:
    """Convert SQLAlchemy Reward model to domain Reward entity."""
    return domain.Reward(
        id=orm_reward.id,
        title=orm_reward.title,
        description=orm_reward.description,
        star_cost=orm_reward.star_cost,
        category=domain.RewardCategory(orm_reward.category),
        is_active=orm_reward.is_active,
        profile_ids=tuple(orm_reward.profile_ids),
    )


def reward_to_orm(reward: domain.Reward, position: int) -> ORMReward:
    return ORMReward(
        id=reward.id,
        position=position,
        title=reward.title,
        description=reward.description,
        star_cost=reward.star_cost,
        category=reward.category.value,
        is_active=reward.is_active,
        profile_ids=list(reward.profile_ids),
    )


def redemption_to_domain(orm_redemption: ORMRewardRedemption) -> domain.RewardRedemption:
    """Convert SQLAlchemy RewardRedemption model to domain RewardRedemption entity."""
    return domain.RewardRedemption(
        id=orm_redemption.id,
        reward_id=orm_redemption.reward_id,
        profile_id=orm_redemption.profile_id,
        redeemed_at=_aware(orm_redemption.redeemed_at),
        status=domain.RedemptionStatus(orm_redemption.status),
        notes=orm_redemption.notes,
    )


def redemption_to_orm(redemption: domain.RewardRedemption, position: int) -> ORMRewardRedemption:
    return ORMRewardRedemption(
        id=redemption.id,
        position=position,
        reward_id=redemption.reward_id,
        profile_id=redemption.profile_id,
        redeemed_at=redemption.redeemed_at,
        status=redemption.status.value,
        notes=redemption.notes,
    )


def meal_to_domain(orm_meal: ORMMeal) -> domain.Meal:
    """Convert SQLAlchemy Meal model to domain Meal entity."""
    return domain.Meal(
        id=orm_meal.id,
        name=orm_meal.name,
        category=domain.MealCategory(orm_meal.category),
        ingredients=tuple(orm_meal.ingredients),
        tags=tuple(orm_meal.tags),
        description=orm_meal.description,
        prep_time=orm_meal.prep_time,
        cook_time=orm_meal.cook_time,
        servings=orm_meal.servings,
        instructions=tuple(orm_meal.instructions),
        image_url=orm_meal.image_url,
    )


def meal_to_orm(meal: domain.Meal, position: int) -> ORMMeal:
    return ORMMeal(
        id=meal.id,
        position=position,
        name=meal.name,
        category=meal.category.value,
        ingredients=list(meal.ingredients),
        tags=list(meal.tags),
        description=meal.description,
        prep_time=meal.prep_time,
        cook_time=meal.cook_time,
        servings=meal.servings,
        instructions=list(meal.instructions),
        image_url=meal.image_url,
    )


def meal_plan_to_domain(orm_plan: ORMMealPlan) -> domain.MealPlan:
    """Convert SQLAlchemy MealPlan model to domain MealPlan entity.

    Slots in either the legacy or the assignment shape are normalized here.
    """
    return domain.MealPlan(
        id=orm_plan.id,
        week_start_date=orm_plan.week_start_date,
        meals=normalize_meals(orm_plan.meals),
        profile_ids=tuple(orm_plan.profile_ids),
    )


def meal_plan_to_orm(plan: domain.MealPlan, position: int) -> ORMMealPlan:
    return ORMMealPlan(
        id=plan.id,
        position=position,
        week_start_date=plan.week_start_date,
        meals=meals_to_record(plan.meals),
        profile_ids=list(plan.profile_ids),
    )
