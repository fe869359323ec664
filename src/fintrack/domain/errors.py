"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class AuthenticationError(DomainError):
    """Login failed or no user is logged in."""


def user_not_found(user_id: str) -> str:
    """Return message for missing user."""
    return f"User {user_id} not found"


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def bank_account_not_found(account_id: str) -> str:
    """Return message for missing bank account."""
    return f"Bank account {account_id} not found"


def duplicate_username(username: str) -> str:
    """Return message for a username that is already taken."""
    return f"Username '{username}' is already taken"


INVALID_CREDENTIALS = "Invalid username or password"
NOT_LOGGED_IN = "Not logged in. Run 'fintrack login' first."
PASSWORD_MISMATCH = "Passwords do not match"
