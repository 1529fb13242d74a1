"""Recurrence rules and calendar-date matching.

A recurring event or chore has no stored occurrences. Instead, a rule is
anchored at the entity's own start date and every candidate calendar date is
tested against it. All comparisons are date-only: datetimes and ISO strings are
truncated to their calendar date first, so a series starting at 23:30 still
matches its first day.

Weekday ordinals follow the persisted record format: 0 is Sunday, 6 is
Saturday. ``-1`` means "last" for both month days and set positions.
"""

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Iterable, Optional, Union

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from familyhub.domain.errors import InvalidRecurrenceRuleError

DateLike = Union[date, datetime, str]

# Safety valve against misconfigured rules; counted in periods, not days.
MAX_EXPANSION_STEPS = 1000

LAST = -1
SET_POSITIONS = (LAST, 1, 2, 3, 4)
WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
ORDINAL_NAMES = {LAST: "last", 1: "first", 2: "second", 3: "third", 4: "fourth"}


class Frequency(str, Enum):
    """Recurrence frequency, valued as persisted."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def to_date(value: DateLike) -> date:
    """Truncate a date, datetime or ISO-8601 string to its calendar date.

    Args:
        value: Date, datetime, or ISO string such as "2024-01-01" or
            "2024-01-01T08:00:00.000Z"

    Returns:
        Calendar date, ignoring time of day and time zone

    Raises:
        ValueError: If a string cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date_parser.isoparse(value.strip()).date()
    except (ValueError, TypeError, AttributeError) as e:
        raise ValueError(f"Could not parse date '{value}': {e}")


def to_datetime(value: Union[datetime, str]) -> datetime:
    """Return a datetime, parsing ISO-8601 strings such as "2024-01-01T08:00:00.000Z".

    Raises:
        ValueError: If the value is neither a datetime nor a parseable string
    """
    if isinstance(value, datetime):
        return value
    try:
        return date_parser.isoparse(value.strip())
    except (ValueError, TypeError, AttributeError) as e:
        raise ValueError(f"Could not parse date and time '{value}': {e}")


def weekday_of(day: date) -> int:
    """Return the Sunday-first weekday ordinal (0=Sunday .. 6=Saturday)."""
    return (day.weekday() + 1) % 7


def _week_of_month(day_of_month: int) -> int:
    return (day_of_month + 6) // 7


def _optional_set(values: Optional[Iterable[int]]) -> Optional[frozenset[int]]:
    if values is None:
        return None
    result = frozenset(int(v) for v in values)
    # An empty selection carries no constraint.
    return result or None


@dataclass(frozen=True)
class RecurrenceRule:
    """Recurrence rule anchored at the owning entity's start date.

    ``count`` and ``until`` are carried for round-tripping but are not
    consulted by :func:`matches` or :func:`expand`.
    """

    freq: Frequency = Frequency.NONE
    interval: int = 1
    by_weekday: Optional[frozenset[int]] = None
    by_month_day: Optional[frozenset[int]] = None
    by_set_pos: Optional[int] = None
    count: Optional[int] = None
    until: Optional[date] = None

    def __post_init__(self) -> None:
        try:
            if not isinstance(self.freq, Frequency):
                object.__setattr__(self, "freq", Frequency(str(self.freq).lower()))
        except ValueError:
            raise InvalidRecurrenceRuleError(f"Unknown recurrence frequency '{self.freq}'")
        object.__setattr__(self, "by_weekday", _optional_set(self.by_weekday))
        object.__setattr__(self, "by_month_day", _optional_set(self.by_month_day))
        if self.until is not None:
            object.__setattr__(self, "until", to_date(self.until))
        self._validate()

    def _validate(self) -> None:
        if not isinstance(self.interval, int) or self.interval < 1:
            raise InvalidRecurrenceRuleError(
                f"Recurrence interval must be a positive integer, got {self.interval!r}"
            )
        if self.by_weekday is not None:
            bad = sorted(d for d in self.by_weekday if not 0 <= d <= 6)
            if bad:
                raise InvalidRecurrenceRuleError(f"Weekdays must be 0-6 (0=Sunday), got {bad}")
        if self.by_month_day is not None:
            bad = sorted(d for d in self.by_month_day if d != LAST and not 1 <= d <= 31)
            if bad:
                raise InvalidRecurrenceRuleError(f"Month days must be 1-31 or -1, got {bad}")
        if self.by_set_pos is not None and self.by_set_pos not in SET_POSITIONS:
            raise InvalidRecurrenceRuleError(
                f"Set position must be one of {SET_POSITIONS}, got {self.by_set_pos}"
            )
        if self.count is not None and self.count < 1:
            raise InvalidRecurrenceRuleError(f"Recurrence count must be positive, got {self.count}")
        if (
            self.freq is Frequency.MONTHLY
            and self.by_month_day is not None
            and self.by_set_pos is not None
        ):
            raise InvalidRecurrenceRuleError(
                "Monthly rule cannot combine month days with a weekday set position"
            )

    @classmethod
    def from_record(cls, record: Optional[dict[str, Any]]) -> "RecurrenceRule":
        """Build a rule from its persisted camelCase record."""
        if not record:
            return cls()
        return cls(
            freq=record.get("freq", Frequency.NONE.value),
            interval=record.get("interval", 1),
            by_weekday=record.get("byWeekday"),
            by_month_day=record.get("byMonthDay"),
            # A falsy position is unset, as older records store 0.
            by_set_pos=record.get("bySetPos") or None,
            count=record.get("count"),
            until=record.get("until"),
        )

    def to_record(self) -> dict[str, Any]:
        """Return the persisted camelCase record, omitting unset fields."""
        record: dict[str, Any] = {"freq": self.freq.value, "interval": self.interval}
        if self.by_weekday is not None:
            record["byWeekday"] = sorted(self.by_weekday)
        if self.by_month_day is not None:
            record["byMonthDay"] = sorted(self.by_month_day)
        if self.by_set_pos is not None:
            record["bySetPos"] = self.by_set_pos
        if self.count is not None:
            record["count"] = self.count
        if self.until is not None:
            record["until"] = self.until.isoformat()
        return record


NO_RECURRENCE = RecurrenceRule()


def matches(anchor: DateLike, candidate: DateLike, rule: RecurrenceRule) -> bool:
    """Check whether a calendar date is an occurrence of an anchored series.

    Args:
        anchor: Start date of the series (the entity's own start)
        candidate: Date to test
        rule: Recurrence rule

    Returns:
        True if ``candidate`` is an occurrence
    """
    start = to_date(anchor)
    day = to_date(candidate)

    if rule.freq is Frequency.NONE:
        return day == start

    elapsed_days = (day - start).days

    if rule.freq is Frequency.DAILY:
        return elapsed_days >= 0 and elapsed_days % rule.interval == 0

    if rule.freq is Frequency.WEEKLY:
        # Raw elapsed weeks, not calendar-week boundaries.
        weeks = elapsed_days // 7
        return (
            weeks >= 0
            and weeks % rule.interval == 0
            and (rule.by_weekday is None or weekday_of(day) in rule.by_weekday)
        )

    months = (day.year - start.year) * 12 + (day.month - start.month)
    if months < 0 or months % rule.interval != 0:
        return False
    return _matches_monthly_day(start, day, rule)


def _matches_monthly_day(start: date, day: date, rule: RecurrenceRule) -> bool:
    last_day = monthrange(day.year, day.month)[1]

    if rule.by_month_day is not None:
        return any(
            day.day == last_day if month_day == LAST else day.day == month_day
            for month_day in rule.by_month_day
        )

    if rule.by_set_pos is not None and rule.by_weekday is not None:
        if weekday_of(day) not in rule.by_weekday:
            return False
        week = _week_of_month(day.day)
        if rule.by_set_pos == LAST:
            return week == _week_of_month(last_day)
        return week == rule.by_set_pos

    return day.day == start.day


def _period_boundary(start: date, freq: Frequency, steps: int) -> date:
    if freq is Frequency.DAILY:
        return start + timedelta(days=steps)
    if freq is Frequency.WEEKLY:
        return start + timedelta(weeks=steps)
    return start + relativedelta(months=steps)


def _first_relevant_period(start: date, first: date, freq: Frequency) -> int:
    """Number of whole periods after the anchor that end before ``first``."""
    if first <= start:
        return 0
    if freq is Frequency.DAILY:
        return (first - start).days
    if freq is Frequency.WEEKLY:
        return (first - start).days // 7
    # Month lengths vary; back off one period so clamping never skips a day.
    return max(0, (first.year - start.year) * 12 + (first.month - start.month) - 1)


def expand(
    anchor: DateLike,
    range_start: DateLike,
    range_end: DateLike,
    rule: RecurrenceRule,
) -> list[date]:
    """List the occurrences of a series inside an inclusive date range.

    Walks the series one period at a time (a day, week or month, per the
    rule's frequency) from the anchor, testing every day inside each period
    with :func:`matches`. Periods that end before ``range_start`` are skipped
    without counting; at most :data:`MAX_EXPANSION_STEPS` periods are walked.

    Args:
        anchor: Start date of the series
        range_start: First date of the range (inclusive)
        range_end: Last date of the range (inclusive)
        rule: Recurrence rule

    Returns:
        Occurrence dates in ascending order
    """
    start = to_date(anchor)
    first = to_date(range_start)
    last = to_date(range_end)

    if rule.freq is Frequency.NONE:
        return [start] if first <= start <= last else []

    occurrences: list[date] = []
    period = _first_relevant_period(start, first, rule.freq)
    steps = 0
    period_start = _period_boundary(start, rule.freq, period)

    while period_start <= last and steps < MAX_EXPANSION_STEPS:
        period_end = _period_boundary(start, rule.freq, period + 1)
        day = max(period_start, first)
        while day < period_end and day <= last:
            if matches(start, day, rule):
                occurrences.append(day)
            day += timedelta(days=1)
        period += 1
        steps += 1
        period_start = period_end

    return occurrences


def describe(rule: RecurrenceRule) -> str:
    """Return a short human-readable description of a rule."""
    if rule.freq is Frequency.NONE:
        return "Does not repeat"

    unit = {Frequency.DAILY: "day", Frequency.WEEKLY: "week", Frequency.MONTHLY: "month"}[rule.freq]
    text = f"Every {unit}" if rule.interval == 1 else f"Every {rule.interval} {unit}s"

    if rule.freq is Frequency.WEEKLY and rule.by_weekday is not None:
        text += " on " + ", ".join(WEEKDAY_NAMES[d] for d in sorted(rule.by_weekday))
    elif rule.freq is Frequency.MONTHLY:
        if rule.by_month_day is not None:
            days = ["last day" if d == LAST else f"day {d}" for d in sorted(rule.by_month_day, key=lambda d: (d == LAST, d))]
            text += " on the " + ", ".join(days)
        elif rule.by_set_pos is not None and rule.by_weekday is not None:
            weekdays = "/".join(WEEKDAY_NAMES[d] for d in sorted(rule.by_weekday))
            text += f" on the {ORDINAL_NAMES[rule.by_set_pos]} {weekdays}"
    return text
