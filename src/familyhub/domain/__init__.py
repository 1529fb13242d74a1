"""Domain layer for familyhub application."""

from familyhub.domain.recurrence import RecurrenceRule, Frequency, matches, expand
from familyhub.domain.store import DomainStore, ReferencePolicy

__all__ = [
    "RecurrenceRule",
    "Frequency",
    "matches",
    "expand",
    "DomainStore",
    "ReferencePolicy",
]
