"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to hand them the
request's IdentityContext explicitly, rather than reading a global
"current user".

- get_identity_context: the context the AuthenticationGate bound
- enforce_route_policy: router-level dependency; runs the route table
  before any handler on the router
- get_current_account: the stored Account behind the identity
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from quizhub.auth.gate import authenticate
from quizhub.auth.identity import Identity, IdentityContext
from quizhub.auth.policy import GuardOutcome, default_policy, raise_for_outcome
from quizhub.auth.tokens import default_codec
from quizhub.db.engine import get_db
from quizhub.db.models import Account
from quizhub.services.account_service import AccountService


def get_identity_context(request: Request) -> IdentityContext:
    """Return the context bound by the gate.

    Falls back to authenticating the header directly if the gate
    middleware isn't installed (e.g. a bare router mounted in a test app).
    """
    context = getattr(request.state, "identity", None)
    if context is None:
        context = authenticate(request.headers.get("Authorization"), default_codec())
        request.state.identity = context
    return context


async def enforce_route_policy(
    request: Request,
    context: IdentityContext = Depends(get_identity_context),
) -> None:
    """Reject the request unless the route table allows this caller."""
    outcome = default_policy.evaluate(request.method, request.url.path, context)
    raise_for_outcome(outcome, context)


def require_identity(
    context: IdentityContext = Depends(get_identity_context),
) -> Identity:
    raise_for_outcome(
        GuardOutcome.ALLOWED if context.identity else GuardOutcome.UNAUTHORIZED,
        context,
    )
    return context.identity


async def get_current_account(
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
) -> Account:
    return await AccountService(db).resolve(identity)
