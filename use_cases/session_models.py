"""Session DTOs shared across application layers."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Optional

SessionState = Literal["anonymous", "pending", "incomplete_profile", "complete"]
RouteRequirement = Literal["public", "any_authenticated", "complete_profile_required"]
DecisionKind = Literal["allow", "redirect"]

AUTHENTICATED_STATES = frozenset({"incomplete_profile", "complete"})
SESSION_STATES = frozenset({"anonymous", "pending", "incomplete_profile", "complete"})


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Session:
    """Immutable snapshot of the visitor's authentication status."""

    state: SessionState = "anonymous"
    user_id: Optional[str] = None
    profile_complete: bool = False
    token: Optional[str] = None
    expiry: Optional[datetime] = None
    attempt: int = 0
    since: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if self.state not in SESSION_STATES:
            raise ValueError(f"Unknown session state: {self.state!r}")
        authenticated = self.state in AUTHENTICATED_STATES
        if authenticated and not self.user_id:
            raise ValueError(f"{self.state} session requires a user_id")
        if not authenticated and self.user_id is not None:
            raise ValueError(f"{self.state} session must not carry a user_id")
        if not authenticated and (self.token is not None or self.expiry is not None):
            raise ValueError(f"{self.state} session must not carry a token")
        if self.state == "complete" and not self.profile_complete:
            raise ValueError("complete session requires profile_complete=True")
        if self.state == "incomplete_profile" and self.profile_complete:
            raise ValueError("incomplete_profile session requires profile_complete=False")


def anonymous_session(attempt: int = 0, now: Optional[datetime] = None) -> Session:
    return Session(state="anonymous", attempt=attempt, since=now or utcnow())


def pending_session(attempt: int, now: Optional[datetime] = None) -> Session:
    return Session(state="pending", attempt=attempt, since=now or utcnow())


def authenticated_session(
    user_id: str,
    profile_complete: bool,
    *,
    token: Optional[str] = None,
    expiry: Optional[datetime] = None,
    attempt: int = 0,
    now: Optional[datetime] = None,
) -> Session:
    return Session(
        state="complete" if profile_complete else "incomplete_profile",
        user_id=user_id,
        profile_complete=profile_complete,
        token=token,
        expiry=expiry,
        attempt=attempt,
        since=now or utcnow(),
    )


def is_authenticated(session: Session) -> bool:
    return session.state in AUTHENTICATED_STATES


def is_pending(session: Session) -> bool:
    return session.state == "pending"


@dataclass(frozen=True)
class AccessDecision:
    """Guard verdict for a single navigation attempt."""

    kind: DecisionKind
    route: Optional[str] = None
    reason: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.kind == "allow"


ALLOW = AccessDecision(kind="allow")


def redirect_to(route: str, reason: str) -> AccessDecision:
    return AccessDecision(kind="redirect", route=route, reason=reason)
