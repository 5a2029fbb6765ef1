"""Hash-collision detection.

Operations sharing a content hash are probable duplicate imports of the
same real-world event. Until a human looks at them, every member of such
a group must be pending triage.
"""

import logging
from collections import defaultdict
from typing import Iterable

from opstrack.database.base import Database
from opstrack.domain.entities import Operation, OperationState
from opstrack.domain.errors import ConflictError, mixed_hash_group

logger = logging.getLogger(__name__)


def group_by_hash(operations: Iterable[Operation]) -> dict[str, list[Operation]]:
    """Group operations by content hash, keeping input order inside groups."""
    groups: dict[str, list[Operation]] = defaultdict(list)
    for operation in operations:
        groups[operation.hash].append(operation)
    return dict(groups)


def collision_groups(operations: Iterable[Operation]) -> dict[str, list[Operation]]:
    """Return only the hash groups with more than one member."""
    return {
        hash_value: members
        for hash_value, members in group_by_hash(operations).items()
        if len(members) > 1
    }


def check_hash_invariant(operations: Iterable[Operation]) -> None:
    """Verify every colliding operation is pending triage.

    Raises:
        ConflictError: If a multi-member hash group has a member that is not
            pending triage
    """
    for hash_value, members in collision_groups(operations).items():
        if any(op.state is not OperationState.PENDING_TRIAGE for op in members):
            states = {op.id: op.state.value for op in members}
            raise ConflictError(mixed_hash_group(hash_value, states))


class CollisionDetector:
    """Flags colliding operations for triage after an import."""

    def __init__(self, db: Database):
        """Initialize collision detector.

        Args:
            db: Database instance
        """
        self.db = db

    def run(self, verify: bool = True) -> int:
        """Flag every operation whose hash is shared by another one.

        Singleton groups are left alone; an operation is never moved back
        to OK here.

        Args:
            verify: Re-read the store afterwards and check the invariant

        Returns:
            Number of operations that entered triage

        Raises:
            StorageError: If the refresh transaction fails
            ConflictError: If the invariant does not hold after the refresh
        """
        flagged = self.db.refresh_triage_states()
        if flagged:
            logger.info("Collision detection flagged %d operation(s)", flagged)
        else:
            logger.debug("Collision detection found nothing new")
        if verify:
            check_hash_invariant(self.db.list_operations())
        return flagged
