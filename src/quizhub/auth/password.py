"""Password hashing utilities.

Learn: bcrypt salts every hash and stores the work factor in the hash
itself ("$2b$12$..."), so raising settings.bcrypt_rounds only affects new
hashes. bcrypt reads at most 72 bytes of input; longer passwords are
truncated before hashing and verifying alike.
"""

from typing import Optional

import bcrypt

from quizhub.config import settings

BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored hash. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False
