"""Utility functions for opstrack."""

from opstrack.utils.date_parser import parse_date
from opstrack.utils.amount_parser import parse_amount_in_cents
from opstrack.utils.hashing import operation_hash

__all__ = ["parse_date", "parse_amount_in_cents", "operation_hash"]
