"""User record and password hashing helpers."""

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime

HASH_ALGORITHM = "pbkdf2_sha256"
HASH_ITERATIONS = 200_000


@dataclass
class User:
    """A registered journal owner."""

    id: int
    username: str
    password_hash: str
    pin_hash: str | None = None
    created_at: datetime | None = None

    @property
    def has_pin(self) -> bool:
        return bool(self.pin_hash)


def hash_secret(secret: str, iterations: int = HASH_ITERATIONS) -> str:
    """Hash a password or PIN as algorithm$iterations$salt$digest."""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", secret.encode(), salt.encode(), iterations)
    return f"{HASH_ALGORITHM}${iterations}${salt}${digest.hex()}"


def verify_secret(secret: str, stored: str) -> bool:
    """Check a secret against a stored hash. Malformed hashes never match."""
    try:
        algorithm, iterations, salt, expected = stored.split("$")
        rounds = int(iterations)
    except ValueError:
        return False
    if algorithm != HASH_ALGORITHM:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", secret.encode(), salt.encode(), rounds)
    return hmac.compare_digest(digest.hex(), expected)
