"""SQLAlchemy models for familyhub snapshots.

Nested structures (recurrence rules, id lists, completion records, meal slots)
are stored in JSON columns using the persisted record shape: camelCase keys,
ISO-8601 strings, Sunday-first weekday ordinals and the -1 "last" sentinel.
Every table keeps a ``position`` column so collections load in the order they
were saved.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Profile(Base):
    """Family member model."""

    __tablename__ = "profiles"

    id = Column(String, primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False)
    color = Column(String, nullable=False)


class Event(Base):
    """Calendar event model."""

    __tablename__ = "events"

    id = Column(String, primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    title = Column(String, nullable=False)
    start = Column(DateTime(timezone=True), nullable=False)
    end = Column(DateTime(timezone=True), nullable=False)
    all_day = Column(Boolean, default=False, nullable=False)
    profile_ids = Column(JSON, nullable=False, default=list)
    recurrence = Column(JSON, nullable=False)
    description = Column(String, nullable=False, default="")
    location = Column(String, nullable=False, default="")
    location_details = Column(String, nullable=False, default="")
    notes = Column(String, nullable=False, default="")
    category = Column(String, nullable=False)
    priority = Column(String, nullable=False)
    reminder = Column(JSON, nullable=False)
    attachments = Column(JSON, nullable=False, default=list)
    is_private = Column(Boolean, default=False, nullable=False)
    created_by = Column(String, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class Chore(Base):
    """Chore model; completion records live in ``completed_by``."""

    __tablename__ = "chores"

    id = Column(String, primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    profile_ids = Column(JSON, nullable=False, default=list)
    start_date = Column(Date, nullable=False)
    time_of_day = Column(String, nullable=False)
    type = Column(String, nullable=False)
    scheduled_time = Column(String, nullable=True)
    recurrence = Column(JSON, nullable=False)
    reward_stars = Column(Integer, nullable=False, default=0)
    is_shared = Column(Boolean, default=False, nullable=False)
    requires_approval = Column(Boolean, default=False, nullable=False)
    completed_by = Column(JSON, nullable=False, default=list)
    created_by = Column(String, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class FamilyList(Base):
    """Shopping/todo list model."""

    __tablename__ = "lists"

    id = Column(String, primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)
    kind = Column(String, nullable=False)
    color = Column(String, nullable=False)
    item_count = Column(Integer, nullable=False, default=0)

    # Relationships
    items = relationship("ListItem", back_populates="family_list", cascade="all, delete-orphan")


class ListItem(Base):
    """List item model."""

    __tablename__ = "list_items"

    id = Column(String, primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    list_id = Column(String, ForeignKey("lists.id"), nullable=False)
    title = Column(String, nullable=False)
    checked = Column(Boolean, default=False, nullable=False)
    notes = Column(String, nullable=True)
    quantity = Column(String, nullable=True)
    category = Column(String, nullable=True)
    due_date = Column(Date, nullable=True)
    priority = Column(String, nullable=True)

    # Relationships
    family_list = relationship("FamilyList", back_populates="items")


class Reward(Base):
    """Reward model."""

    __tablename__ = "rewards"

    id = Column(String, primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    star_cost = Column(Integer, nullable=False)
    category = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    profile_ids = Column(JSON, nullable=False, default=list)

    # Relationships
    redemptions = relationship("RewardRedemption", back_populates="reward", cascade="all, delete-orphan")


class RewardRedemption(Base):
    """Reward redemption model."""

    __tablename__ = "reward_redemptions"

    id = Column(String, primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    reward_id = Column(String, ForeignKey("rewards.id"), nullable=False)
    profile_id = Column(String, nullable=False)
    redeemed_at = Column(DateTime(timezone=True), nullable=False)
    status = Column(String, nullable=False)
    notes = Column(String, nullable=True)

    # Relationships
    reward = relationship("Reward", back_populates="redemptions")


class Meal(Base):
    """Meal catalog model."""

    __tablename__ = "meals"

    id = Column(String, primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    ingredients = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)
    description = Column(String, nullable=True)
    prep_time = Column(Integer, nullable=True)
    cook_time = Column(Integer, nullable=True)
    servings = Column(Integer, nullable=True)
    instructions = Column(JSON, nullable=False, default=list)
    image_url = Column(String, nullable=True)


class MealPlan(Base):
    """Weekly meal plan model; ``meals`` holds day -> meal type -> slot records."""

    __tablename__ = "meal_plans"

    id = Column(String, primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    week_start_date = Column(Date, nullable=False)
    meals = Column(JSON, nullable=False, default=dict)
    profile_ids = Column(JSON, nullable=False, default=list)


class Setting(Base):
    """Key/value store for filter selection and feature flags."""

    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
