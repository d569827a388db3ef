"""SQLite-backed authentication adapter."""

import logging
from datetime import datetime

from daybook.core.users import User, hash_secret, verify_secret
from daybook.errors import ConstraintViolation, ValidationError

from .sqlite_store import SqliteJournalStore

logger = logging.getLogger(__name__)


class SqliteAuthProvider:
    """
    Password and PIN authentication.

    Implements AuthProvider protocol. Users live in the same database as
    the journal entries.
    """

    def __init__(self, store: SqliteJournalStore):
        self.store = store

    def create_user(self, username: str, password: str, pin: str | None = None) -> bool:
        """Register a user. Returns False if the username is taken."""
        if not username or not username.strip():
            raise ValidationError("Username cannot be empty.")
        if not password:
            raise ValidationError("Password cannot be empty.")

        pin_hash = hash_secret(pin) if pin else None
        try:
            self.store.insert_user(username.strip(), hash_secret(password), pin_hash, datetime.now())
        except ConstraintViolation:
            logger.warning(f"Registration refused, username '{username}' already exists")
            return False
        logger.info(f"Registered user '{username}'")
        return True

    def authenticate(self, username: str, password: str) -> User | None:
        """Return the user if the password matches, else None."""
        user = self.store.get_user(username.strip()) if username else None
        if user is None or not verify_secret(password, user.password_hash):
            logger.warning(f"Failed login for '{username}'")
            return None
        return user

    def verify_pin(self, user: User, pin: str) -> bool:
        """Check a user's PIN. False if the user has none."""
        if not user.pin_hash:
            return False
        return verify_secret(pin, user.pin_hash)

    def user_exists(self) -> bool:
        """Whether anyone has registered yet."""
        return self.store.count_users() > 0
