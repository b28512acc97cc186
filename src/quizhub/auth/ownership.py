"""Ownership checks for entity-scoped operations.

Learn: Role checks answer "may an OWNER call this route at all?"; the
ownership check answers "is this OWNER the one who created this quiz?".
It only compares ids. Handlers must load the resource first and raise
ResourceNotFound for a missing one before asking about ownership.
"""

from typing import Optional

from quizhub.auth.policy import GuardOutcome, raise_for_outcome


def check_owner(resource_owner_id: int, acting_id: int) -> GuardOutcome:
    if resource_owner_id != acting_id:
        return GuardOutcome.UNAUTHORIZED
    return GuardOutcome.ALLOWED


def assert_owner(
    resource_owner_id: int,
    acting_id: int,
    message: Optional[str] = None,
) -> None:
    """Raise Unauthorized unless acting_id owns the resource."""
    raise_for_outcome(
        check_owner(resource_owner_id, acting_id),
        message=message or "You can only access your own resources",
    )
