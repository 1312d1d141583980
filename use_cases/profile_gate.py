"""Access rule for the profile-completion destination."""

from datetime import datetime
from typing import Optional

from use_cases.auth_state import AuthStateResolver, ProfileCompleted, ResolverOutcome
from use_cases.route_guard import RouteGuard
from use_cases.session_models import ALLOW, AccessDecision, Session, redirect_to


class ProfileCompletionGate:
    """
    Guards the page where a signed-in visitor finishes their profile.

    Visitors with an incomplete profile must reach this page even though they
    are barred from complete_profile_required routes; everyone else gets the
    usual any_authenticated decision.
    """

    def __init__(self, guard: RouteGuard, resolver: Optional[AuthStateResolver] = None):
        self.guard = guard
        self.resolver = resolver

    def evaluate(self, session: Session, *, now: Optional[datetime] = None) -> AccessDecision:
        if session.state in ("incomplete_profile", "complete"):
            return ALLOW
        return self.guard.evaluate("any_authenticated", session, now=now)

    def evaluate_destination(self, session: Session, *, now: Optional[datetime] = None) -> AccessDecision:
        """Decision for navigating to the completion page itself."""
        decision = self.evaluate(session, now=now)
        if decision.allowed and session.state == "complete":
            return redirect_to(self.guard.routes.landing, "profile-complete")
        return decision

    def complete(self, user_id: str) -> ResolverOutcome:
        if self.resolver is None:
            raise RuntimeError("ProfileCompletionGate has no resolver to complete profiles")
        return self.resolver.handle(ProfileCompleted(user_id=user_id))
