"""Domain model entities for opstrack.

These are pure data classes representing business concepts, independent of
database schema. Storage rows are converted to these by the mappers in
``opstrack.database.mappers`` so the engine never handles ORM objects.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional


# Version of the textual encoding used to persist OperationState values.
# Version 0 stored the variant names verbatim ("PendingTriage", "Ok").
STATE_ENCODING_VERSION = 1

LEGACY_STATE_VALUES = {
    "PendingTriage": "pending_triage",
    "Ok": "ok",
}


class OperationState(enum.Enum):
    """Review status of an operation."""

    PENDING_TRIAGE = "pending_triage"
    OK = "ok"

    @classmethod
    def from_storage(cls, value: str) -> "OperationState":
        """Decode a persisted state value.

        Raises:
            ValueError: If the value is not part of the current encoding
        """
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Unknown operation state '{value}' "
                f"(encoding version {STATE_ENCODING_VERSION})"
            ) from None

    def to_storage(self) -> str:
        """Encode the state for persistence."""
        return self.value


class RuleKind(enum.Enum):
    """Predicate kinds a tag rule may use."""

    DETAILS_CONTAINS = "details_contains"
    DETAILS_MATCHES = "details_matches"
    TYPE_EQUALS = "type_equals"
    AMOUNT_RANGE = "amount_range"


@dataclass(frozen=True)
class BankAccount:
    """Bank account owning operations."""

    id: int
    name: str
    slug: str
    currency: str


@dataclass(frozen=True)
class NewOperation:
    """Operation record as produced by an import, before the store assigns identity."""

    date: str
    type: str
    type_display: str
    details: str
    amount_in_cents: int
    hash: str
    bank_account_id: int
    ignored_from_charts: bool = False


@dataclass(frozen=True)
class Operation:
    """Operation (financial transaction) domain entity."""

    id: int
    date: str
    type: str
    type_display: str
    details: str
    amount_in_cents: int
    hash: str
    state: OperationState
    ignored_from_charts: bool
    bank_account_id: int
    tags_ids: frozenset[int] = field(default_factory=frozenset)

    @property
    def needs_triage(self) -> bool:
        return self.state is OperationState.PENDING_TRIAGE


@dataclass(frozen=True)
class Tag:
    """User-defined label."""

    id: int
    name: str
    color: Optional[str] = None


@dataclass(frozen=True)
class TagRule:
    """Automatic tagging rule: attach ``tag_id`` when the predicate holds."""

    id: int
    tag_id: int
    kind: RuleKind
    pattern: Optional[str] = None
    min_amount_in_cents: Optional[int] = None
    max_amount_in_cents: Optional[int] = None
