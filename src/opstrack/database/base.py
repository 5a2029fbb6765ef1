"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Iterable

# Import entities directly to avoid circular import through domain/__init__.py
from opstrack.domain.entities import (
    BankAccount,
    NewOperation,
    Operation,
    RuleKind,
    Tag,
    TagRule,
)


class Database(ABC):
    """Abstract operation store for opstrack.

    Every public method is atomic: it either commits completely or raises
    and leaves the store unchanged.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Create tables and upgrade persisted values to the current encoding."""
        pass

    # Bank account operations
    @abstractmethod
    def create_bank_account(self, name: str, slug: str, currency: str) -> int:
        """Create a bank account. Returns account ID."""
        pass

    @abstractmethod
    def get_bank_account(self, account_id: int) -> Optional[BankAccount]:
        """Get bank account by ID."""
        pass

    @abstractmethod
    def list_bank_accounts(self) -> list[BankAccount]:
        """List all bank accounts."""
        pass

    # Operation operations
    @abstractmethod
    def insert_operations(self, operations: Sequence[NewOperation]) -> int:
        """Insert a batch of operations in one transaction. Returns inserted count."""
        pass

    @abstractmethod
    def get_operation(self, operation_id: int) -> Optional[Operation]:
        """Get operation by ID."""
        pass

    @abstractmethod
    def list_operations(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> list[Operation]:
        """List operations, newest first, ties in insertion order.

        Args:
            start_date: Optional inclusive lower bound (ISO date string)
            end_date: Optional inclusive upper bound (ISO date string)
        """
        pass

    @abstractmethod
    def list_triage_operations(self) -> list[Operation]:
        """List operations pending triage, ordered by details descending."""
        pass

    @abstractmethod
    def refresh_triage_states(self) -> int:
        """Flag every operation sharing its hash with another one as pending triage.

        Returns the number of operations that changed state.
        """
        pass

    @abstractmethod
    def resolve_operation_via_edit(self, operation_id: int, details: str) -> None:
        """Replace details and mark the operation as reviewed (state OK)."""
        pass

    @abstractmethod
    def delete_operation(self, operation_id: int) -> None:
        """Delete an operation together with its tag associations."""
        pass

    @abstractmethod
    def attach_tags(self, operation_id: int, tag_ids: Iterable[int]) -> frozenset[int]:
        """Attach tags to an operation. Returns the resulting tag ID set."""
        pass

    @abstractmethod
    def detach_tag(self, operation_id: int, tag_id: int) -> None:
        """Remove one tag from an operation."""
        pass

    # Tag operations
    @abstractmethod
    def create_tag(self, name: str, color: Optional[str] = None) -> int:
        """Create a tag. Returns tag ID."""
        pass

    @abstractmethod
    def get_tag(self, tag_id: int) -> Optional[Tag]:
        """Get tag by ID."""
        pass

    @abstractmethod
    def get_tag_by_name(self, name: str) -> Optional[Tag]:
        """Get tag by name."""
        pass

    @abstractmethod
    def list_tags(self) -> list[Tag]:
        """List all tags."""
        pass

    # Tag rule operations
    @abstractmethod
    def create_tag_rule(
        self,
        tag_id: int,
        kind: RuleKind,
        pattern: Optional[str] = None,
        min_amount_in_cents: Optional[int] = None,
        max_amount_in_cents: Optional[int] = None,
    ) -> int:
        """Create a tag rule. Returns rule ID."""
        pass

    @abstractmethod
    def get_tag_rule(self, rule_id: int) -> Optional[TagRule]:
        """Get tag rule by ID."""
        pass

    @abstractmethod
    def list_tag_rules(self) -> list[TagRule]:
        """List all tag rules."""
        pass

    @abstractmethod
    def delete_tag_rule(self, rule_id: int) -> None:
        """Delete a tag rule."""
        pass
