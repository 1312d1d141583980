"""Application layer contracts for the session and route-access flows."""

from .auth_errors import AuthIssue, ProviderError
from .auth_flow import AuthFlowResult, AuthFlowStatus, ensure_fresh_session, sign_in_with_password, sign_out, sign_up_with_password
from .auth_state import (
    AuthStateResolver,
    ProfileCompleted,
    ResolverOutcome,
    SignedOut,
    SignInFailed,
    SignInSucceeded,
    TokenExpired,
)
from .navigation_flow import ROUTES, NavigationResult, Route, find_route, resolve_navigation
from .profile_flow import ProfileFlowResult, ProfileForm, submit_profile
from .profile_gate import ProfileCompletionGate
from .route_guard import DEFAULT_PENDING_TIMEOUT, GuardRoutes, RouteGuard
from .session_models import ALLOW, AccessDecision, RouteRequirement, Session, SessionState, is_authenticated, redirect_to
from .session_store import SessionStore

__all__ = [
    "ALLOW",
    "AccessDecision",
    "AuthFlowResult",
    "AuthFlowStatus",
    "AuthIssue",
    "AuthStateResolver",
    "DEFAULT_PENDING_TIMEOUT",
    "GuardRoutes",
    "NavigationResult",
    "ProfileCompleted",
    "ProfileCompletionGate",
    "ProfileFlowResult",
    "ProfileForm",
    "ProviderError",
    "ROUTES",
    "ResolverOutcome",
    "Route",
    "RouteGuard",
    "RouteRequirement",
    "Session",
    "SessionState",
    "SessionStore",
    "SignInFailed",
    "SignInSucceeded",
    "SignedOut",
    "TokenExpired",
    "ensure_fresh_session",
    "find_route",
    "is_authenticated",
    "redirect_to",
    "resolve_navigation",
    "sign_in_with_password",
    "sign_out",
    "sign_up_with_password",
    "submit_profile",
]
