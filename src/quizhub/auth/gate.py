"""Authentication gate — binds an IdentityContext to every request.

Learn: Runs before routing on every request. It never rejects: a missing
header means anonymous, and a bad token is logged and also treated as
anonymous (with credential_rejected set). Whether anonymous is good
enough is decided per route by the policy in quizhub.auth.policy.

The context lives on request.state, so it is private to the request and
gone when the request ends.
"""

from typing import Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from quizhub.auth.identity import ANONYMOUS, IdentityContext
from quizhub.auth.tokens import TokenCodec, default_codec
from quizhub.errors import InvalidToken

logger = structlog.get_logger()

BEARER_SCHEME = "bearer"


def extract_bearer(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an Authorization header, or None.

    The scheme name is case-insensitive ("Bearer", "bearer", "BEARER").
    """
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None
    return token.strip() or None


def authenticate(authorization: Optional[str], codec: TokenCodec) -> IdentityContext:
    token = extract_bearer(authorization)
    if token is None:
        return ANONYMOUS

    try:
        identity = codec.verify(token)
    except InvalidToken:
        logger.warning("auth.token_rejected")
        return IdentityContext(credential_rejected=True)

    structlog.contextvars.bind_contextvars(subject=identity.subject)
    return IdentityContext(identity=identity)


class AuthenticationGate(BaseHTTPMiddleware):
    """Populate request.state.identity from the bearer token, if any."""

    def __init__(self, app, codec: Optional[TokenCodec] = None):
        super().__init__(app)
        self.codec = codec

    async def dispatch(self, request: Request, call_next) -> Response:
        if getattr(request.state, "identity", None) is None:
            codec = self.codec or default_codec()
            request.state.identity = authenticate(
                request.headers.get("Authorization"), codec
            )
        return await call_next(request)
