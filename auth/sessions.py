"""
auth/sessions.py -- Session registry: opaque token -> user id.

SessionRegistry is the capability every caller depends on: issue, resolve,
get, revoke. InMemorySessionRegistry is the only implementation shipped. It
is process-local and volatile:

  - sessions are lost on restart (every client must log in again);
  - sessions are not shared between worker processes or hosts.

A horizontally scaled deployment swaps in an implementation backed by a
shared, expiring key/value store. Nothing outside this module changes.

The registry is created in the FastAPI lifespan and stored on app.state, so
each app (and each test) gets its own instance. There is no module-level map.

Layer rule: no imports from api/ or alerts/.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Protocol

from auth.models import Session
from auth.tokens import generate_token

logger = logging.getLogger("alertservice.auth")


class SessionRegistry(Protocol):
    def issue(self, user_id: int) -> str: ...

    def resolve(self, token: str) -> int | None: ...

    def get(self, token: str) -> Session | None: ...

    def revoke(self, token: str) -> bool: ...


class InMemorySessionRegistry:
    """Thread-safe in-memory SessionRegistry.

    Route handlers run concurrently in FastAPI's thread pool. A single lock
    guards the map, so a reader sees either no entry or a complete Session --
    never a partial one. Sessions are immutable once inserted.

    Tokens carry no expiry here. Session.created_at is exposed through get()
    so a max-age policy can be applied by the caller (see
    auth/dependencies.resolve_credential).
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: dict[str, Session] = {}

    def issue(self, user_id: int) -> str:
        """Create a session for user_id and return its token."""
        while True:
            token = generate_token()
            session = Session(token=token, user_id=user_id, created_at=self._clock())
            with self._lock:
                # Tokens are unique across live sessions.
                if token not in self._sessions:
                    self._sessions[token] = session
                    break
        logger.info("Session issued for user_id=%s", user_id)
        return token

    def get(self, token: str) -> Session | None:
        with self._lock:
            return self._sessions.get(token)

    def resolve(self, token: str) -> int | None:
        """Return the user id bound to token, or None if the token is unknown."""
        session = self.get(token)
        return session.user_id if session is not None else None

    def revoke(self, token: str) -> bool:
        """Forget a token. Returns True if it was live."""
        with self._lock:
            session = self._sessions.pop(token, None)
        if session is not None:
            logger.info("Session revoked for user_id=%s", session.user_id)
        return session is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
