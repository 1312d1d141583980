"""Navigation orchestration: route lookup plus guard evaluation."""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Literal, Optional, Tuple

from use_cases.profile_gate import ProfileCompletionGate
from use_cases.route_guard import RouteGuard
from use_cases.session_models import AccessDecision, RouteRequirement, Session, redirect_to

NavigationStatus = Literal["CONTINUE", "REDIRECT"]
RouteAccess = Literal["public", "any_authenticated", "complete_profile_required", "profile_gate"]


@dataclass(frozen=True)
class Route:
    path: str
    title: str
    access: RouteAccess = "public"


ROUTES: Tuple[Route, ...] = (
    Route("/", "Home"),
    Route("/auth", "Sign in"),
    Route("/complete-profile", "Complete your profile", access="profile_gate"),
    Route("/share", "Share a sighting", access="complete_profile_required"),
    Route("/about", "About us"),
    Route("/contact", "Contact"),
    Route("/donate", "Donate"),
    Route("/privacy-policy", "Privacy policy"),
    Route("/terms-of-service", "Terms of service"),
    Route("/disclaimer", "Disclaimer"),
    Route("/loading", "Signing you in"),
)

ROUTES_BY_PATH: Dict[str, Route] = {route.path: route for route in ROUTES}


def find_route(path: str) -> Optional[Route]:
    normalized = "/" + (path or "").strip().strip("/")
    return ROUTES_BY_PATH.get(normalized)


@dataclass(frozen=True)
class NavigationResult:
    """Result contract for a single navigation attempt."""

    status: NavigationStatus
    path: str
    decision: AccessDecision
    route: Optional[Route] = None


def resolve_navigation(
    path: str,
    session: Session,
    guard: RouteGuard,
    gate: ProfileCompletionGate,
    *,
    now: Optional[datetime] = None,
) -> NavigationResult:
    """Decide whether ``path`` may render for ``session``."""
    route = find_route(path)
    if route is None:
        decision = redirect_to(guard.routes.landing, "not-found")
        return NavigationResult(status="REDIRECT", path=path, decision=decision)

    if route.access == "profile_gate":
        decision = gate.evaluate_destination(session, now=now)
    else:
        requirement: RouteRequirement = route.access
        decision = guard.evaluate(requirement, session, now=now)

    status: NavigationStatus = "CONTINUE" if decision.allowed else "REDIRECT"
    return NavigationResult(status=status, path=route.path, decision=decision, route=route)
