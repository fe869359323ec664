"""Authentication and session domain service.

The session is the logged-in user's ID and username kept in the store's
settings, so it survives between CLI invocations. The username guards
against an ID that means a different user in the fallback store. There is no token or expiry: the
backend is a stand-in and passwords are compared as stored.
"""

import logging
import re
from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.entities import User
from fintrack.domain.errors import (
    INVALID_CREDENTIALS,
    NOT_LOGGED_IN,
    PASSWORD_MISMATCH,
    AuthenticationError,
    ConflictError,
    ValidationError,
    duplicate_username,
)

logger = logging.getLogger(__name__)

SESSION_KEY = "session_user_id"
SESSION_USERNAME_KEY = "session_username"

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AuthService:
    """Register, log in and track the current user."""

    def __init__(self, db: Database):
        """Initialize auth service.

        Args:
            db: Database instance
        """
        self.db = db

    def register(
        self,
        username: str,
        email: str,
        password: str,
        confirm_password: Optional[str] = None,
    ) -> User:
        """Create a user and log them in.

        Args:
            username: Unique username
            email: Email address
            password: Password
            confirm_password: Must equal password when given

        Returns:
            The new user

        Raises:
            ValidationError: If a field is missing, the email is malformed or
                the passwords differ
            ConflictError: If the username is taken
        """
        username = (username or "").strip()
        email = (email or "").strip()
        if not username:
            raise ValidationError("Username is required")
        if not password:
            raise ValidationError("Password is required")
        if not _EMAIL_RE.match(email):
            raise ValidationError(f"Invalid email address '{email}'")
        if confirm_password is not None and password != confirm_password:
            raise ValidationError(PASSWORD_MISMATCH)

        if self.db.get_user_by_username(username) is not None:
            raise ConflictError(duplicate_username(username))

        user_id = self.db.create_user(username=username, email=email, password=password)
        self._start_session(user_id, username)
        logger.info("Registered user %s (%s)", username, user_id)
        return self.db.get_user(user_id)

    def _find_user(self, identifier: str) -> Optional[User]:
        user = self.db.get_user_by_username(identifier)
        if user is None and "@" in identifier:
            for candidate in self.db.list_users():
                if candidate.email.lower() == identifier.lower():
                    return candidate
        return user

    def login(self, username: str, password: str) -> User:
        """Log in by username (or email) and password.

        Raises:
            AuthenticationError: If the user is unknown or the password is wrong
        """
        identifier = (username or "").strip()
        user = self._find_user(identifier) if identifier else None
        if user is None or user.password != password:
            logger.info("Failed login for %s", identifier)
            raise AuthenticationError(INVALID_CREDENTIALS)

        self._start_session(user.id, user.username)
        logger.info("User %s logged in", user.username)
        return user

    def _start_session(self, user_id: str, username: str) -> None:
        self.db.set_setting(SESSION_KEY, user_id)
        self.db.set_setting(SESSION_USERNAME_KEY, username)

    def logout(self) -> None:
        """Forget the logged-in user."""
        self.db.delete_setting(SESSION_KEY)
        self.db.delete_setting(SESSION_USERNAME_KEY)

    def current_user(self) -> Optional[User]:
        """Return the logged-in user, or None.

        The session only matches a user with the recorded ID and username.
        A stale session is cleared, except while the store is serving from
        its fallback, where the session user may simply be unknown.
        """
        user_id = self.db.get_setting(SESSION_KEY)
        if user_id is None:
            return None
        username = self.db.get_setting(SESSION_USERNAME_KEY)
        user = self.db.get_user(user_id)
        if user is not None and user.username == username:
            return user

        if self.db.offline:
            logger.warning("Session user %s is not available in the fallback store", username)
        else:
            logger.info("Clearing stale session for user %s", user_id)
            self.logout()
        return None

    def require_user(self) -> User:
        """Return the logged-in user.

        Raises:
            AuthenticationError: If nobody is logged in
        """
        user = self.current_user()
        if user is None:
            raise AuthenticationError(NOT_LOGGED_IN)
        return user
