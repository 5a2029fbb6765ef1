"""Utility for resolving bank account names to IDs."""

from opstrack.domain.account import BankAccountService
from opstrack.domain.errors import NotFoundError


def resolve_account(account_service: BankAccountService, account: str | int) -> int:
    """Resolve a bank account name, slug or ID to its ID.

    Raises:
        NotFoundError: If the account is not found
    """
    if isinstance(account, int):
        return account_service.get_account(account).id

    try:
        account_id = int(account)
    except (ValueError, TypeError):
        # Not a number, treat as name or slug
        pass
    else:
        return account_service.get_account(account_id).id

    for acc in account_service.list_accounts():
        if account in (acc.name, acc.slug):
            return acc.id

    raise NotFoundError(f"Bank account '{account}' not found")
