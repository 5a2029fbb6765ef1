"""Triage workflow service.

The review queue of operations that need a human decision. Operations
enter it through collision detection and leave it through an edit of
their details or by being deleted.

Deleting one member of a colliding group does not re-run detection: a
lone survivor stays pending until it is edited.
"""

from opstrack.database.base import Database
from opstrack.domain.collision import CollisionDetector
from opstrack.domain.entities import Operation as OperationEntity
from opstrack.domain.operation import OperationService


class TriageService:
    """Service driving the triage workflow."""

    def __init__(self, db: Database):
        """Initialize triage service.

        Args:
            db: Database instance
        """
        self.db = db
        self.operations = OperationService(db)
        self.detector = CollisionDetector(db)

    def pending(self) -> list[OperationEntity]:
        """Operations waiting for review, grouped by similar details."""
        return self.operations.find_triage()

    def refresh(self) -> int:
        """Run collision detection. Returns the number of newly flagged operations."""
        return self.detector.run()

    def resolve_via_edit(self, operation_id: int, details: str) -> OperationEntity:
        """Confirm or correct an operation; it leaves triage.

        Returns:
            The operation as stored after the edit

        Raises:
            NotFoundError: If the operation does not exist
        """
        self.operations.update_details(operation_id, details)
        return self.operations.find_by_id(operation_id)

    def delete(self, operation_id: int) -> None:
        """Discard an operation, typically a confirmed duplicate.

        Raises:
            NotFoundError: If the operation does not exist
        """
        self.operations.delete(operation_id)
