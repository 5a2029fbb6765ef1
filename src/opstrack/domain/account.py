"""Bank account domain service."""

import re
from typing import Optional

from opstrack.database.base import Database
from opstrack.domain.entities import BankAccount as BankAccountEntity
from opstrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    bank_account_not_found,
)


def slugify(name: str) -> str:
    """Turn an account name into a lowercase, dash-separated slug."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


class BankAccountService:
    """Service for managing bank accounts."""

    def __init__(self, db: Database):
        """Initialize bank account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self, name: str, slug: Optional[str] = None, currency: str = "EUR"
    ) -> int:
        """Create a new bank account.

        Args:
            name: Account name
            slug: Optional short identifier (derived from the name if omitted)
            currency: ISO currency code

        Returns:
            Account ID

        Raises:
            ValidationError: If name or slug is empty
            ConflictError: If an account with the same name or slug exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Account name cannot be empty")
        slug = slugify(slug if slug is not None else name)
        if not slug:
            raise ValidationError(f"Cannot derive a slug from '{name}'")

        for acc in self.db.list_bank_accounts():
            if acc.name == name:
                raise ConflictError(f"Account with name '{name}' already exists")
            if acc.slug == slug:
                raise ConflictError(f"Account with slug '{slug}' already exists")

        return self.db.create_bank_account(name=name, slug=slug, currency=currency.upper())

    def get_account(self, account_id: int) -> BankAccountEntity:
        """Get bank account by ID.

        Raises:
            NotFoundError: If the account does not exist
        """
        account = self.db.get_bank_account(account_id)
        if account is None:
            raise NotFoundError(bank_account_not_found(account_id))
        return account

    def list_accounts(self) -> list[BankAccountEntity]:
        """List all bank accounts."""
        return self.db.list_bank_accounts()
