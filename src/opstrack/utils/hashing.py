"""Content fingerprints for imported operations.

The engine never computes hashes itself; importers call this when the
source did not provide one. Equal fingerprints mark probable duplicates.
"""

import hashlib


def operation_hash(
    date: str,
    op_type: str,
    details: str,
    amount_in_cents: int,
    bank_account_id: int,
) -> str:
    """Return the SHA-512 hex digest of an operation's source fields."""
    payload = "|".join(
        [date, op_type, " ".join(details.split()), str(amount_in_cents), str(bank_account_id)]
    )
    return hashlib.sha512(payload.encode("utf-8")).hexdigest()
