"""
Authentication state machine.

AuthStateResolver is the only writer of the SessionStore. It turns
identity-provider callbacks and profile-completion events into canonical
Session snapshots:

    anonymous --begin_sign_in--> pending
    pending --SignInSucceeded--> incomplete_profile | complete
    pending --SignInFailed--> anonymous
    incomplete_profile --ProfileCompleted--> complete
    * --SignedOut--> anonymous
    incomplete_profile | complete --TokenExpired--> anonymous

Every sign-in carries the attempt counter handed out by begin_sign_in().
Resolutions for any other attempt are discarded, so a slow callback can never
overwrite a later one.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Union

from infrastructure.repositories.sqlite_audit_repository import AuditAction
from use_cases.auth_errors import NOTICES, AuthIssue
from use_cases.session_models import (
    Session,
    anonymous_session,
    authenticated_session,
    is_authenticated,
    pending_session,
    utcnow,
)
from use_cases.session_store import SessionStore

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignInSucceeded:
    attempt: int
    user_id: str
    profile_complete: bool
    token: Optional[str] = None
    expiry: Optional[datetime] = None


@dataclass(frozen=True)
class SignInFailed:
    attempt: int
    cause: str


@dataclass(frozen=True)
class SignedOut:
    pass


@dataclass(frozen=True)
class ProfileCompleted:
    user_id: str


@dataclass(frozen=True)
class TokenExpired:
    pass


AuthEvent = Union[SignInSucceeded, SignInFailed, SignedOut, ProfileCompleted, TokenExpired]


@dataclass(frozen=True)
class ResolverOutcome:
    """What handling one event did to the session."""

    applied: bool
    session: Session
    issue: Optional[AuthIssue] = None
    notice: Optional[str] = None


class AuthStateResolver:
    def __init__(
        self,
        store: SessionStore,
        *,
        audit: Optional[Any] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.audit = audit
        self.clock = clock
        self._attempt = store.current().attempt
        self._lock = threading.RLock()
        self._last_notice: Optional[str] = None

    @property
    def attempt(self) -> int:
        return self._attempt

    def begin_sign_in(self) -> int:
        """Move to pending and return the attempt number callbacks must carry."""
        with self._lock:
            superseded = self._attempt if self.store.current().state == "pending" else None
            self._attempt += 1
            self.store.replace(pending_session(self._attempt, now=self.clock()))
            if superseded is not None:
                log.info(f"Sign-in attempt {superseded} superseded by attempt {self._attempt}")
            self._audit(AuditAction.SIGN_IN_STARTED, metadata={"attempt": self._attempt})
            return self._attempt

    def handle(self, event: AuthEvent) -> ResolverOutcome:
        with self._lock:
            handler = self._HANDLERS.get(type(event))
            if handler is None:
                raise TypeError(f"Unsupported auth event: {event!r}")
            return handler(self, event)

    def expire_if_due(self, now: Optional[datetime] = None) -> Optional[ResolverOutcome]:
        with self._lock:
            session = self.store.current()
            if not is_authenticated(session) or session.expiry is None:
                return None
            if (now or self.clock()) < session.expiry:
                return None
            if self.store.current() is not session:
                # Replaced while the clock was read; the new session has its own expiry
                return None
            return self.handle(TokenExpired())

    def consume_notice(self) -> Optional[str]:
        """Return the pending user-visible notice once, then forget it."""
        with self._lock:
            notice, self._last_notice = self._last_notice, None
            return notice

    # --- event handlers ---

    def _on_sign_in_succeeded(self, event: SignInSucceeded) -> ResolverOutcome:
        if not self._is_current_attempt(event.attempt):
            return self._discard_stale(event)
        nxt = authenticated_session(
            event.user_id,
            event.profile_complete,
            token=event.token,
            expiry=event.expiry,
            attempt=event.attempt,
            now=self.clock(),
        )
        self.store.replace(nxt)
        self._audit(
            AuditAction.SIGN_IN_SUCCESS,
            actor_user_id=event.user_id,
            metadata={"attempt": event.attempt, "status": nxt.state},
        )
        return ResolverOutcome(applied=True, session=nxt)

    def _on_sign_in_failed(self, event: SignInFailed) -> ResolverOutcome:
        if not self._is_current_attempt(event.attempt):
            return self._discard_stale(event)
        log.warning(f"Sign-in attempt {event.attempt} failed: {event.cause}")
        nxt = anonymous_session(self._attempt, now=self.clock())
        self.store.replace(nxt)
        self._audit(
            AuditAction.SIGN_IN_FAIL,
            metadata={"attempt": event.attempt, "reason": event.cause},
            result="fail",
        )
        return self._recoverable(nxt, AuthIssue.PROVIDER_ERROR)

    def _on_signed_out(self, event: SignedOut) -> ResolverOutcome:
        current = self.store.current()
        if current.state == "anonymous":
            return ResolverOutcome(applied=False, session=current)
        nxt = anonymous_session(self._attempt, now=self.clock())
        self.store.replace(nxt)
        self._audit(AuditAction.SIGN_OUT, actor_user_id=current.user_id, metadata={"status": current.state})
        return ResolverOutcome(applied=True, session=nxt)

    def _on_profile_completed(self, event: ProfileCompleted) -> ResolverOutcome:
        current = self.store.current()
        if current.state == "complete" and current.user_id == event.user_id:
            return ResolverOutcome(applied=False, session=current)
        if current.state != "incomplete_profile" or current.user_id != event.user_id:
            return self._discard_invalid(event, current)
        nxt = authenticated_session(
            current.user_id,
            True,
            token=current.token,
            expiry=current.expiry,
            attempt=current.attempt,
            now=self.clock(),
        )
        self.store.replace(nxt)
        self._audit(AuditAction.PROFILE_COMPLETED, actor_user_id=current.user_id)
        return ResolverOutcome(applied=True, session=nxt)

    def _on_token_expired(self, event: TokenExpired) -> ResolverOutcome:
        current = self.store.current()
        if not is_authenticated(current):
            return self._discard_invalid(event, current)
        log.info(f"Session for user {current.user_id} expired")
        nxt = anonymous_session(self._attempt, now=self.clock())
        self.store.replace(nxt)
        self._audit(AuditAction.TOKEN_EXPIRED, actor_user_id=current.user_id)
        return self._recoverable(nxt, AuthIssue.SESSION_EXPIRED)

    _HANDLERS: Dict[type, Callable[["AuthStateResolver", Any], ResolverOutcome]] = {
        SignInSucceeded: _on_sign_in_succeeded,
        SignInFailed: _on_sign_in_failed,
        SignedOut: _on_signed_out,
        ProfileCompleted: _on_profile_completed,
        TokenExpired: _on_token_expired,
    }

    # --- helpers ---

    def _is_current_attempt(self, attempt: int) -> bool:
        return attempt == self._attempt and self.store.current().state == "pending"

    def _discard_stale(self, event: AuthEvent) -> ResolverOutcome:
        attempt = getattr(event, "attempt", None)
        log.debug(f"Discarding stale {type(event).__name__} for attempt {attempt} (current {self._attempt})")
        self._audit(
            AuditAction.STALE_EVENT_DISCARDED,
            metadata={"attempt": attempt, "reason": type(event).__name__},
            result="ignored",
        )
        return ResolverOutcome(
            applied=False,
            session=self.store.current(),
            issue=AuthIssue.STALE_EVENT_DISCARDED,
        )

    def _discard_invalid(self, event: AuthEvent, current: Session) -> ResolverOutcome:
        log.debug(f"Ignoring {type(event).__name__} in state {current.state}")
        return ResolverOutcome(applied=False, session=current, issue=AuthIssue.INVALID_TRANSITION)

    def _recoverable(self, session: Session, issue: AuthIssue) -> ResolverOutcome:
        notice = NOTICES[issue]
        self._last_notice = notice
        return ResolverOutcome(applied=True, session=session, issue=issue, notice=notice)

    def _audit(self, action: AuditAction, **kwargs: Any) -> None:
        if self.audit is None:
            return
        self.audit.log_action(action, target_type="session", **kwargs)
