"""
Secret hashing for passwords and PINs.

Both secrets are stored as bcrypt hashes. bcrypt salts automatically and
produces hashes starting with "$2b$". Inputs are truncated to 72 bytes,
bcrypt's limit.
"""

from functools import lru_cache
from typing import Optional

import bcrypt

from shared.config import get_settings

_MAX_BYTES = 72


def hash_secret(secret: str, rounds: Optional[int] = None) -> str:
    """Hash a password or PIN with bcrypt."""
    if rounds is None:
        rounds = get_settings().bcrypt_rounds
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(secret.encode("utf-8")[:_MAX_BYTES], salt).decode("utf-8")


def verify_secret(secret: str, secret_hash: Optional[str]) -> bool:
    """
    Verify a password or PIN against its stored hash.

    A missing or unparseable hash never verifies.
    """
    if not secret_hash:
        return False
    try:
        return bcrypt.checkpw(
            secret.encode("utf-8")[:_MAX_BYTES],
            secret_hash.encode("utf-8"),
        )
    except (ValueError, TypeError):
        return False


@lru_cache
def _dummy_hash() -> str:
    return hash_secret("hearth-timing-equalizer")


def burn_verification(secret: str) -> None:
    """
    Spend the same bcrypt work as a real check when there is nothing to check.

    Used for unknown usernames so response time does not reveal whether
    the account exists.
    """
    verify_secret(secret, _dummy_hash())
