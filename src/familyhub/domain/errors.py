"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class InvalidRecurrenceRuleError(ValidationError):
    """Recurrence rule is misconfigured (bad interval, weekday, set position...)."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as duplicate ids in a snapshot."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


def entity_not_found(kind: str, entity_id: str) -> str:
    """Return message for a missing entity of the given kind."""
    return f"{kind} '{entity_id}' not found"


def completion_not_found(chore_id: str, profile_id: str, day: str) -> str:
    """Return message for a missing completion record."""
    return f"Chore '{chore_id}' has no completion by '{profile_id}' on {day}"


def meal_plan_not_found(week_start: str) -> str:
    """Return message for a week without a meal plan."""
    return f"No meal plan for week starting {week_start}"


def duplicate_id(kind: str, entity_id: str) -> str:
    """Return message for an id that appears twice in a snapshot."""
    return f"Duplicate {kind} id '{entity_id}'"


def profile_delete_blocked(profile_id: str, reference_counts: dict[str, int]) -> str:
    """Return message when a profile is still referenced by other entities."""
    parts = [
        f"{count} {kind}{'s' if count != 1 else ''}"
        for kind, count in reference_counts.items()
        if count > 0
    ]
    return (
        f"Cannot delete profile '{profile_id}': it is referenced by {', '.join(parts)}. "
        "Please reassign or delete them first."
    )
