"""Utility for resolving bank account names to IDs."""

from fintrack.domain.bank_account import BankAccountService


def resolve_account(account_service: BankAccountService, user_id: str, account: str) -> str:
    """Resolve a bank account name or ID to an account ID.

    IDs are matched first, then names (case-insensitive). Only the user's
    own accounts are considered.

    Args:
        account_service: BankAccountService instance
        user_id: Owner user ID
        account: Account ID or name

    Returns:
        Bank account ID

    Raises:
        ValueError: If no account matches or the name is ambiguous
    """
    accounts = account_service.list_accounts(user_id)
    for acc in accounts:
        if acc.id == account:
            return acc.id

    matches = [acc for acc in accounts if acc.name.lower() == account.strip().lower()]
    if len(matches) > 1:
        ids = ", ".join(acc.id for acc in matches)
        raise ValueError(f"Account name '{account}' is ambiguous (IDs: {ids}); use the ID")
    if matches:
        return matches[0].id

    raise ValueError(f"Account '{account}' not found")
