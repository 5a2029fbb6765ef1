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


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness or triage invariant violations."""


class MalformedRuleError(DomainError):
    """Tag rule whose predicate cannot be evaluated."""


class StorageError(Exception):
    """The persistence transaction could not be committed.

    Always fatal to the enclosing high-level action. The store rolls back
    before raising, so nothing is left half-applied.
    """


def operation_not_found(operation_id: int) -> str:
    """Return message for missing operation."""
    return f"Operation {operation_id} not found"


def bank_account_not_found(account_id: int) -> str:
    """Return message for missing bank account."""
    return f"Bank account {account_id} not found"


def tag_not_found(tag_id: int) -> str:
    """Return message for missing tag by ID."""
    return f"Tag {tag_id} not found"


def tag_name_not_found(name: str) -> str:
    """Return message for missing tag by name."""
    return f"Tag '{name}' not found"


def tag_rule_not_found(rule_id: int) -> str:
    """Return message for missing tag rule."""
    return f"Tag rule {rule_id} not found"


def duplicate_tag_name(name: str) -> str:
    """Return message for duplicate tag name."""
    return f"Tag with name '{name}' already exists"


def mixed_hash_group(hash_value: str, states: dict[int, str]) -> str:
    """Return message when a colliding hash group is not fully in triage."""
    listing = ", ".join(f"{op_id}={state}" for op_id, state in sorted(states.items()))
    return (
        f"Operations sharing hash '{hash_value}' must all be pending triage "
        f"(found: {listing})"
    )
