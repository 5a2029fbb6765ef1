"""Operation domain service."""

import logging
from typing import Iterable, Optional, Sequence

from opstrack.database.base import Database
from opstrack.domain.entities import NewOperation, Operation as OperationEntity
from opstrack.domain.errors import (
    NotFoundError,
    ValidationError,
    bank_account_not_found,
    operation_not_found,
)

logger = logging.getLogger(__name__)

REQUIRED_TEXT_FIELDS = ("date", "type", "hash")
TEXT_FIELDS = ("date", "type", "type_display", "details", "hash")


def validate_new_operation(operation: NewOperation) -> None:
    """Check the structural constraints of an imported operation.

    Raises:
        ValidationError: If a field is missing or has the wrong type
    """
    for name in TEXT_FIELDS:
        value = getattr(operation, name)
        if not isinstance(value, str):
            raise ValidationError(f"Field '{name}' must be a string, got {value!r}")
    for name in REQUIRED_TEXT_FIELDS:
        if not getattr(operation, name).strip():
            raise ValidationError(f"Field '{name}' is required")
    amount = operation.amount_in_cents
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError(f"Field 'amount_in_cents' must be an integer, got {amount!r}")
    if not isinstance(operation.ignored_from_charts, bool):
        raise ValidationError("Field 'ignored_from_charts' must be a boolean")
    if isinstance(operation.bank_account_id, bool) or not isinstance(operation.bank_account_id, int):
        raise ValidationError("Field 'bank_account_id' must be an integer")


class OperationService:
    """Service for storing and reading operations."""

    def __init__(self, db: Database):
        """Initialize operation service.

        Args:
            db: Database instance
        """
        self.db = db

    def insert_batch(self, operations: Sequence[NewOperation]) -> int:
        """Insert imported operations.

        No deduplication happens here; colliding hashes are handled by the
        collision detector afterwards. The batch is all-or-nothing: every
        record is validated before anything is written.

        Args:
            operations: Operations to insert

        Returns:
            Number of inserted operations

        Raises:
            ValidationError: If any record is structurally invalid
            StorageError: If the insert transaction fails
        """
        known_accounts: set[int] = set()
        for position, operation in enumerate(operations, start=1):
            try:
                validate_new_operation(operation)
            except ValidationError as e:
                raise ValidationError(f"Operation #{position}: {e}") from e
            account_id = operation.bank_account_id
            if account_id not in known_accounts:
                if self.db.get_bank_account(account_id) is None:
                    raise ValidationError(
                        f"Operation #{position}: {bank_account_not_found(account_id)}"
                    )
                known_accounts.add(account_id)

        if not operations:
            return 0
        return self.db.insert_operations(operations)

    def find_all(
        self, start_date: Optional[str] = None, end_date: Optional[str] = None
    ) -> list[OperationEntity]:
        """List operations sorted by date descending (ties in insertion order).

        Args:
            start_date: Optional inclusive ISO lower bound
            end_date: Optional inclusive ISO upper bound
        """
        return self.db.list_operations(start_date=start_date, end_date=end_date)

    def find_by_id(self, operation_id: int) -> OperationEntity:
        """Get an operation by ID.

        Raises:
            NotFoundError: If the operation does not exist
        """
        operation = self.db.get_operation(operation_id)
        if operation is None:
            raise NotFoundError(operation_not_found(operation_id))
        return operation

    def find_triage(self) -> list[OperationEntity]:
        """List operations pending triage, sorted by details descending.

        Similar-looking duplicates end up next to each other.
        """
        return self.db.list_triage_operations()

    def update_details(self, operation_id: int, details: str) -> None:
        """Resolve an operation via an edit of its details.

        The edit counts as acknowledgement: the operation leaves triage even
        if the hash collision that flagged it still exists.

        Raises:
            ValidationError: If details is not a string
            NotFoundError: If the operation does not exist
        """
        if not isinstance(details, str):
            raise ValidationError("Details must be a string")
        self.db.resolve_operation_via_edit(operation_id, details)
        logger.info("Operation %d resolved via edit", operation_id)

    def delete(self, operation_id: int) -> None:
        """Delete an operation and its tag associations.

        Raises:
            NotFoundError: If the operation does not exist
        """
        self.db.delete_operation(operation_id)
        logger.info("Operation %d deleted", operation_id)

    def attach_tags(self, operation_id: int, tag_ids: Iterable[int]) -> frozenset[int]:
        """Attach existing tags to an operation.

        Returns:
            The operation's tag IDs after attachment

        Raises:
            NotFoundError: If the operation or one of the tags does not exist
        """
        return self.db.attach_tags(operation_id, tag_ids)

    def detach_tag(self, operation_id: int, tag_id: int) -> None:
        """Remove a tag from an operation."""
        self.db.detach_tag(operation_id, tag_id)
