"""Route policy — which roles may call which endpoints.

Learn: All role decisions live in one ordered table instead of being
scattered across handlers. Patterns are path globs:

    *   matches exactly one path segment
    **  matches zero or more trailing segments

When several rules match, the most specific wins: more literal segments
first, then fewer single-segment wildcards, then a rule without a
trailing "**". Anything the table doesn't mention requires a signed-in
caller of either role.

evaluate() is a pure function returning a GuardOutcome; the router
dependency in quizhub.auth.dependencies turns a non-ALLOWED outcome into
the matching HTTP error via raise_for_outcome().
"""

import enum
from dataclasses import dataclass
from typing import Optional, Union

from quizhub.auth.identity import IdentityContext, Role
from quizhub.errors import Forbidden, InvalidToken, ResourceNotFound, Unauthorized


class Access(str, enum.Enum):
    PUBLIC = "PUBLIC"
    ANY_AUTHENTICATED = "ANY_AUTHENTICATED"


Requirement = Union[Access, frozenset[Role]]


class GuardOutcome(str, enum.Enum):
    ALLOWED = "ALLOWED"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"


def _segments(path: str) -> tuple[str, ...]:
    return tuple(part for part in path.split("/") if part)


@dataclass(frozen=True)
class RouteRule:
    pattern: str
    methods: frozenset[str]
    requirement: Requirement

    @property
    def segments(self) -> tuple[str, ...]:
        return _segments(self.pattern)

    def applies_to(self, method: str, path_segments: tuple[str, ...]) -> bool:
        if method.upper() not in self.methods:
            return False

        pattern = self.segments
        for i, seg in enumerate(pattern):
            if seg == "**":
                return True
            if i >= len(path_segments):
                return False
            if seg != "*" and seg != path_segments[i]:
                return False
        return len(pattern) == len(path_segments)

    def specificity(self) -> tuple[int, int, int]:
        pattern = self.segments
        literals = sum(1 for seg in pattern if seg not in ("*", "**"))
        singles = sum(1 for seg in pattern if seg == "*")
        open_ended = 1 if pattern and pattern[-1] == "**" else 0
        return (literals, -singles, -open_ended)


def rule(pattern: str, methods: str, requirement: Union[Access, Role, set]) -> RouteRule:
    """Shorthand: rule("/api/admin/**", "GET POST", Role.OWNER)."""
    if isinstance(requirement, Role):
        requirement = frozenset({requirement})
    elif isinstance(requirement, (set, frozenset)):
        requirement = frozenset(requirement)
    return RouteRule(
        pattern=pattern,
        methods=frozenset(m.upper() for m in methods.split()),
        requirement=requirement,
    )


ROUTE_TABLE: tuple[RouteRule, ...] = (
    rule("/api/admin/**", "GET POST PUT DELETE", Role.OWNER),
    rule("/api/quizzes/**", "GET", Role.TAKER),
    rule("/api/quiz/*", "GET", Role.TAKER),
    rule("/api/quiz/submit", "POST", Role.TAKER),
    rule("/api/user/**", "GET", Role.TAKER),
    rule("/api/attempt/**", "GET", Role.TAKER),
    rule("/api/auth/**", "POST", Access.PUBLIC),
    rule("/api/health", "GET", Access.PUBLIC),
)


class RoutePolicy:
    """Read-only rule table; safe to share between concurrent requests."""

    def __init__(
        self,
        rules: tuple[RouteRule, ...] = ROUTE_TABLE,
        default: Requirement = Access.ANY_AUTHENTICATED,
    ):
        self.rules = tuple(rules)
        self.default = default

    def resolve(self, method: str, path: str) -> Optional[RouteRule]:
        """Most specific rule for (method, path), or None when unmatched."""
        path_segments = _segments(path)
        matching = [r for r in self.rules if r.applies_to(method, path_segments)]
        if not matching:
            return None
        # max() keeps the first of equally specific rules
        return max(matching, key=lambda r: r.specificity())

    def requirement_for(self, method: str, path: str) -> Requirement:
        matched = self.resolve(method, path)
        return matched.requirement if matched else self.default

    def evaluate(self, method: str, path: str, context: IdentityContext) -> GuardOutcome:
        requirement = self.requirement_for(method, path)

        if requirement == Access.PUBLIC:
            return GuardOutcome.ALLOWED
        if context.identity is None:
            return GuardOutcome.UNAUTHORIZED
        if requirement == Access.ANY_AUTHENTICATED:
            return GuardOutcome.ALLOWED
        if context.identity.role in requirement:
            return GuardOutcome.ALLOWED
        return GuardOutcome.FORBIDDEN


def raise_for_outcome(
    outcome: GuardOutcome,
    context: Optional[IdentityContext] = None,
    message: Optional[str] = None,
) -> None:
    """Translate a guard outcome into the error the boundary renders."""
    if outcome == GuardOutcome.ALLOWED:
        return
    if outcome == GuardOutcome.UNAUTHORIZED:
        if context is not None and context.credential_rejected and message is None:
            raise InvalidToken()
        raise Unauthorized(message)
    if outcome == GuardOutcome.FORBIDDEN:
        raise Forbidden(message)
    raise ResourceNotFound(message)


default_policy = RoutePolicy()
