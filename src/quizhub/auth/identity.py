"""Identity values bound to a single request.

Learn: Identity is what a verified token proves: who (subject) and as
what (role). IdentityContext wraps it for exactly one request; the gate
creates it and everything downstream only reads it.
"""

import enum
from dataclasses import dataclass
from typing import Optional


class Role(str, enum.Enum):
    OWNER = "OWNER"
    TAKER = "TAKER"

    @classmethod
    def parse(cls, value: str) -> "Role":
        """Case-insensitive lookup. Raises ValueError for unknown roles."""
        return cls(value.strip().upper())


@dataclass(frozen=True)
class Identity:
    subject: str
    role: Role


@dataclass(frozen=True)
class IdentityContext:
    """Per-request auth state.

    identity is None for anonymous requests. credential_rejected records
    that a bearer token was presented but failed verification, so a later
    401 can say "invalid token" instead of "authentication required".
    """

    identity: Optional[Identity] = None
    credential_rejected: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    @classmethod
    def anonymous(cls) -> "IdentityContext":
        return cls()


ANONYMOUS = IdentityContext.anonymous()
