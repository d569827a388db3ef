"""Authentication interface."""

from typing import Protocol

from daybook.core.users import User


class AuthProvider(Protocol):
    """Interface for registering and authenticating journal owners."""

    def create_user(self, username: str, password: str, pin: str | None = None) -> bool:
        """Register a user. Returns False if the username is taken."""
        ...

    def authenticate(self, username: str, password: str) -> User | None:
        """Return the user if the password matches, else None."""
        ...

    def verify_pin(self, user: User, pin: str) -> bool:
        """Check a user's PIN. False if the user has none."""
        ...
