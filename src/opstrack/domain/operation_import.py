"""Operation import domain service.

An import is: insert the batch, flag hash collisions, then let the tag
rules propose tags for operations that have none. Each step commits on its
own; if a later step fails the caller re-runs the whole import.
"""

import json
import logging
from pathlib import Path
from typing import Any, Sequence

from opstrack.database.base import Database
from opstrack.domain.collision import CollisionDetector
from opstrack.domain.entities import NewOperation
from opstrack.domain.errors import ValidationError
from opstrack.domain.operation import OperationService
from opstrack.domain.tag_rules import TagRuleService
from opstrack.utils.amount_parser import parse_amount_in_cents
from opstrack.utils.date_parser import parse_date, to_iso
from opstrack.utils.hashing import operation_hash

logger = logging.getLogger(__name__)


def record_to_new_operation(record: dict[str, Any], bank_account_id: int) -> NewOperation:
    """Decode one serialized operation record.

    Recognized keys: ``date``, ``type``, ``type_display``, ``details``,
    ``amount_in_cents`` or ``amount`` (currency units), ``hash`` and
    ``ignored_from_charts``. A missing hash is computed from the source
    fields. Dates are normalized to ISO ``YYYY-MM-DD``.

    Raises:
        ValueError: If a required key is missing or a value is invalid
    """
    if not isinstance(record, dict):
        raise ValueError(f"Expected an object, got {type(record).__name__}")

    for key in ("date", "type"):
        if not record.get(key):
            raise ValueError(f"Missing {key}")

    if "amount_in_cents" in record:
        amount_in_cents = record["amount_in_cents"]
        if isinstance(amount_in_cents, bool) or not isinstance(amount_in_cents, int):
            raise ValueError(f"amount_in_cents must be an integer, got {amount_in_cents!r}")
    elif "amount" in record:
        amount_in_cents = parse_amount_in_cents(record["amount"])
    else:
        raise ValueError("Missing amount")

    if not isinstance(record["date"], str):
        raise ValueError(f"date must be a string, got {record['date']!r}")
    # Stored dates are ISO so that string order is chronological
    date = to_iso(parse_date(record["date"]))

    ignored_from_charts = record.get("ignored_from_charts", False)
    if not isinstance(ignored_from_charts, bool):
        raise ValueError(f"ignored_from_charts must be true or false, got {ignored_from_charts!r}")

    op_type = str(record["type"])
    details = str(record.get("details") or "")
    op_hash = record.get("hash") or operation_hash(
        date, op_type, details, amount_in_cents, bank_account_id
    )

    return NewOperation(
        date=date,
        type=op_type,
        type_display=str(record.get("type_display") or op_type),
        details=details,
        amount_in_cents=amount_in_cents,
        hash=str(op_hash),
        bank_account_id=bank_account_id,
        ignored_from_charts=ignored_from_charts,
    )


class OperationImportService:
    """Service for importing batches of operations."""

    def __init__(self, db: Database):
        """Initialize operation import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.operation_service = OperationService(db)
        self.collision_detector = CollisionDetector(db)
        self.tag_rule_service = TagRuleService(db)

    def import_operations(self, operations: Sequence[NewOperation]) -> dict[str, int]:
        """Insert a batch, detect collisions and auto-tag untagged operations.

        Returns:
            Dict with import statistics:
            - inserted: number of operations inserted
            - flagged: number of operations that entered triage
            - tagged: number of operations that received tags from rules

        Raises:
            ValidationError: If any record is invalid (nothing is inserted)
            StorageError: If a storage transaction fails
        """
        inserted = self.operation_service.insert_batch(operations)
        flagged = self.collision_detector.run()
        tagged = self.tag_rule_service.apply_rules(only_untagged=True)
        logger.info(
            "Import finished: %d inserted, %d flagged for triage, %d tagged",
            inserted,
            flagged,
            tagged,
        )
        return {"inserted": inserted, "flagged": flagged, "tagged": tagged}

    def import_records(
        self, records: Sequence[dict[str, Any]], bank_account_id: int
    ) -> dict[str, int]:
        """Decode serialized records and import them as one batch.

        Raises:
            ValidationError: If any record cannot be decoded; the message
                lists every bad record and nothing is inserted
        """
        operations = []
        errors = []
        for position, record in enumerate(records, start=1):
            try:
                operations.append(record_to_new_operation(record, bank_account_id))
            except ValueError as e:
                errors.append(f"Record {position}: {e}")
        if errors:
            raise ValidationError("; ".join(errors))
        return self.import_operations(operations)

    def import_json(self, json_file_path: str, bank_account_id: int) -> dict[str, int]:
        """Import a JSON file holding an array of operation records.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValidationError: If the file is not a JSON array or a record is invalid
        """
        json_path = Path(json_file_path)
        if not json_path.exists():
            raise FileNotFoundError(f"JSON file not found: {json_file_path}")

        with open(json_path, "r", encoding="utf-8") as f:
            try:
                records = json.load(f)
            except json.JSONDecodeError as e:
                raise ValidationError(f"Invalid JSON in {json_file_path}: {e}") from e

        if not isinstance(records, list):
            raise ValidationError("Expected a JSON array of operation records")
        return self.import_records(records, bank_account_id)
