"""Route access decisions computed from a session snapshot."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from use_cases.auth_errors import AuthIssue
from use_cases.session_models import (
    ALLOW,
    AccessDecision,
    RouteRequirement,
    Session,
    SessionState,
    redirect_to,
    utcnow,
)

log = logging.getLogger(__name__)

DEFAULT_PENDING_TIMEOUT = timedelta(seconds=5)


@dataclass(frozen=True)
class GuardRoutes:
    """Redirect targets used by the guards."""

    sign_in: str = "/auth"
    complete_profile: str = "/complete-profile"
    loading: str = "/loading"
    landing: str = "/"


class RouteGuard:
    """
    Evaluates a route requirement against a Session.

    A pending session never grants access to a protected route. Once it has
    been pending for longer than ``pending_timeout`` it is read as anonymous;
    the stored session itself is left alone, so a late resolution still
    applies on the next evaluation.
    """

    def __init__(
        self,
        routes: Optional[GuardRoutes] = None,
        *,
        pending_timeout: timedelta = DEFAULT_PENDING_TIMEOUT,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.routes = routes or GuardRoutes()
        self.pending_timeout = pending_timeout
        self.clock = clock

    def evaluate(
        self,
        requirement: RouteRequirement,
        session: Session,
        *,
        now: Optional[datetime] = None,
    ) -> AccessDecision:
        if requirement == "public":
            return ALLOW

        state = self.effective_state(session, now=now)
        if state == "pending":
            return redirect_to(self.routes.loading, "resolving")

        if requirement == "any_authenticated":
            if state in ("incomplete_profile", "complete"):
                return ALLOW
            return redirect_to(self.routes.sign_in, "unauthenticated")

        if requirement == "complete_profile_required":
            if state == "complete":
                return ALLOW
            if state == "incomplete_profile":
                return redirect_to(self.routes.complete_profile, "profile-incomplete")
            return redirect_to(self.routes.sign_in, "unauthenticated")

        raise ValueError(f"Unknown route requirement: {requirement!r}")

    def effective_state(self, session: Session, *, now: Optional[datetime] = None) -> SessionState:
        """State used for decisions: pending past the timeout reads as anonymous."""
        if session.state != "pending":
            return session.state
        waited = (now or self.clock()) - session.since
        if waited > self.pending_timeout:
            log.info(
                f"{AuthIssue.RESOLUTION_TIMEOUT.value}: attempt {session.attempt} pending for "
                f"{waited.total_seconds():.1f}s, treating as anonymous"
            )
            return "anonymous"
        return "pending"
