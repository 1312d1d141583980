"""Holder for the visitor's current session snapshot."""

import logging
import threading
from typing import Callable, List, Optional

from use_cases.session_models import Session, anonymous_session

log = logging.getLogger(__name__)

SessionListener = Callable[[Session], None]


class SessionStore:
    """
    Passive container for the single current Session.

    The snapshot is swapped wholesale under a lock; listeners run after the
    swap, synchronously and in registration order.
    """

    def __init__(self, initial: Optional[Session] = None):
        self._session = initial or anonymous_session()
        self._lock = threading.Lock()
        self._listeners: List[SessionListener] = []

    def current(self) -> Session:
        return self._session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def replace(self, next_session: Session) -> None:
        with self._lock:
            self._session = next_session
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(next_session)
            except Exception as e:
                # A broken subscriber must not stop the others or the writer
                log.error(f"Session listener {listener!r} failed: {e}", exc_info=True)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
