"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class InsufficientPointsError(DomainError):
    """A child's score does not cover a reward's cost."""


class StorageError(DomainError):
    """The underlying store failed (full, unavailable or corrupt)."""


class SchemaVersionError(StorageError):
    """The store was written by an incompatible schema version."""


class InvalidBackupError(ValidationError):
    """A backup payload could not be decoded."""


def user_not_found(user_id: str) -> str:
    """Return message for missing user."""
    return f"User '{user_id}' not found"


def score_item_not_found(item_id: str) -> str:
    """Return message for missing score item."""
    return f"Score item '{item_id}' not found"


def reward_item_not_found(reward_id: str) -> str:
    """Return message for missing reward item."""
    return f"Reward item '{reward_id}' not found"


def message_not_found(message_id: str) -> str:
    """Return message for missing secret message."""
    return f"Message '{message_id}' not found"


def not_a_child(user_id: str) -> str:
    """Return message when a child-only action names another role."""
    return f"User '{user_id}' is not a child"


def insufficient_points(child_name: str, score: int, cost: int) -> str:
    """Return message when a redemption costs more than the child has."""
    return (
        f"{child_name} has {score} point{'s' if score != 1 else ''}, "
        f"but the reward costs {cost}"
    )


def invalid_backup(reason: str) -> str:
    """Return message for a rejected backup payload."""
    return f"Invalid backup format: {reason}"


def storage_failure(action: str, error: Exception) -> str:
    """Return message for a failed storage operation."""
    return f"Failed to {action}: {error}"
