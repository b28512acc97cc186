"""Bearer token issuing and verification.

Learn: A token is a JWT (HS256) carrying a flat claim set:

    {"sub": "ada@example.com", "role": "TAKER", "iat": 1700000000, "exp": 1700086400}

The signature is an HMAC over header+payload keyed by settings.jwt_secret,
so any change to either part breaks verification. There is exactly one
token type with a fixed lifetime (access_token_expire_minutes). No
refresh tokens, no revocation list.

verify() collapses every failure (garbled, bad signature, missing claim,
unknown role, expired) into one InvalidToken with one message, so callers
can't be used as an oracle for which check failed.
"""

from datetime import datetime, timezone
from typing import Optional

import jwt

from quizhub.auth.identity import Identity, Role
from quizhub.config import settings
from quizhub.errors import InvalidToken

REQUIRED_CLAIMS = ("sub", "role", "iat", "exp")


def _epoch(now: Optional[datetime]) -> int:
    return int((now or datetime.now(timezone.utc)).timestamp())


class TokenCodec:
    """Issues and verifies identity tokens for one signing secret.

    Pure: the result depends only on (token, secret, now).
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int,
        algorithm: str = "HS256",
    ):
        self.secret = secret
        self.ttl_seconds = ttl_seconds
        self.algorithm = algorithm

    def issue(self, subject: str, role: Role, now: Optional[datetime] = None) -> str:
        issued_at = _epoch(now)
        claims = {
            "sub": subject,
            "role": Role(role).value,
            "iat": issued_at,
            "exp": issued_at + self.ttl_seconds,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: str, now: Optional[datetime] = None) -> Identity:
        """Return the Identity a token proves, or raise InvalidToken."""
        try:
            # Expiry is checked below against the caller's clock, not PyJWT's.
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={
                    "require": list(REQUIRED_CLAIMS),
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except (jwt.InvalidTokenError, TypeError, ValueError):
            raise InvalidToken()

        subject = claims.get("sub")
        expires_at = claims.get("exp")
        if not isinstance(subject, str) or not subject:
            raise InvalidToken()
        if not isinstance(expires_at, int) or isinstance(expires_at, bool):
            raise InvalidToken()
        if not isinstance(claims.get("iat"), int):
            raise InvalidToken()
        try:
            role = Role(claims.get("role"))
        except (TypeError, ValueError):
            raise InvalidToken()

        if _epoch(now) >= expires_at:
            raise InvalidToken()

        return Identity(subject=subject, role=role)


def default_codec() -> TokenCodec:
    """Codec built from the process-wide settings."""
    return TokenCodec(
        secret=settings.jwt_secret,
        ttl_seconds=settings.access_token_expire_minutes * 60,
        algorithm=settings.jwt_algorithm,
    )


def create_access_token(subject: str, role: Role) -> str:
    return default_codec().issue(subject, role)


def verify_token(token: str) -> Identity:
    return default_codec().verify(token)
