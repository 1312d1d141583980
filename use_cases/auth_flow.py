"""Authentication flow orchestration (application layer)."""

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Literal, Optional

from use_cases.auth_errors import ProviderError
from use_cases.auth_state import AuthStateResolver, SignedOut, SignInFailed, SignInSucceeded

log = logging.getLogger(__name__)

AuthFlowStatus = Literal["CONTINUE", "STOP"]


@dataclass(frozen=True)
class AuthFlowResult:
    """Result contract for auth flow orchestration."""

    status: AuthFlowStatus
    reason: str
    user_id: Optional[str] = None
    notice: Optional[str] = None


def sign_in_with_password(
    resolver: AuthStateResolver,
    provider: Any,
    profiles: Any,
    email: str,
    password: str,
) -> AuthFlowResult:
    """Run one sign-in attempt against the identity provider."""
    return _run_attempt(
        resolver,
        lambda: provider.sign_in_with_password(email.strip(), password),
        lambda user_id: profiles.is_profile_complete(user_id),
    )


def sign_up_with_password(
    resolver: AuthStateResolver,
    provider: Any,
    email: str,
    password: str,
) -> AuthFlowResult:
    """Register a new account; new accounts always start with an incomplete profile."""
    return _run_attempt(
        resolver,
        lambda: provider.sign_up_with_password(email.strip(), password),
        lambda _user_id: False,
    )


def sign_out(resolver: AuthStateResolver) -> AuthFlowResult:
    resolver.handle(SignedOut())
    return AuthFlowResult(status="STOP", reason="signed_out")


def ensure_fresh_session(resolver: AuthStateResolver, now: Optional[datetime] = None) -> AuthFlowResult:
    """Expire the session if its token is past due, before any route is evaluated."""
    outcome = resolver.expire_if_due(now)
    session = resolver.store.current()
    if outcome is not None and outcome.applied:
        return AuthFlowResult(status="STOP", reason="session_expired", notice=outcome.notice)
    return AuthFlowResult(status="CONTINUE", reason=session.state, user_id=session.user_id)


def _run_attempt(
    resolver: AuthStateResolver,
    call_provider: Callable[[], Any],
    lookup_profile: Callable[[str], bool],
) -> AuthFlowResult:
    attempt = resolver.begin_sign_in()

    try:
        identity = call_provider()
        profile_complete = bool(lookup_profile(identity.user_id))
    except ProviderError as e:
        outcome = resolver.handle(SignInFailed(attempt=attempt, cause=e.code))
        return _stopped(outcome, "provider_error")
    except sqlite3.Error as e:
        log.error(f"Profile lookup failed during sign-in attempt {attempt}: {e}", exc_info=True)
        outcome = resolver.handle(SignInFailed(attempt=attempt, cause="PROFILE_LOOKUP_FAILED"))
        return _stopped(outcome, "provider_error")

    outcome = resolver.handle(
        SignInSucceeded(
            attempt=attempt,
            user_id=identity.user_id,
            profile_complete=profile_complete,
            token=identity.id_token,
            expiry=identity.expires_at,
        )
    )
    if not outcome.applied:
        return AuthFlowResult(status="STOP", reason="superseded")

    reason = "authenticated" if profile_complete else "profile_incomplete"
    return AuthFlowResult(status="CONTINUE", reason=reason, user_id=identity.user_id)


def _stopped(outcome, reason: str) -> AuthFlowResult:
    if not outcome.applied:
        return AuthFlowResult(status="STOP", reason="superseded")
    return AuthFlowResult(status="STOP", reason=reason, notice=outcome.notice)
