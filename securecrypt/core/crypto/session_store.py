"""
Key Exchange Session Store
==========================

In-memory map of pending Diffie-Hellman sessions keyed by caller-supplied
identifier, with bounded retention.

Security Features:
- Insert, lookup-and-remove and eviction are atomic under one lock
- Sessions expire after a fixed TTL whether or not they were completed
- A session is handed out at most once (take() removes it)
- Capacity limit bounds memory even inside the TTL window
"""

from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING, Callable, Final, Optional

from securecrypt.core.config import KeyExchangeConfig
from securecrypt.core.errors import DuplicateSession, InvalidParameter
from securecrypt.core.logging import get_secure_logger

if TYPE_CHECKING:
    from securecrypt.core.crypto.key_exchange import DHSession

DEFAULT_SESSION_TTL: Final[int] = 300  # 5 minutes
DEFAULT_MAX_SESSIONS: Final[int] = 10_000

logger = get_secure_logger(__name__)


class DHSessionStore:
    """
    Thread-safe, TTL-bounded store of pending key-exchange sessions.

    Usage:
        store = DHSessionStore(ttl_seconds=300)
        store.add(session)             # DuplicateSession if live id exists
        session = store.take("abc")    # None if missing or expired

    Notes:
        - An expired session is treated as absent: a new add() with the same
          identifier replaces it, take() returns None.
        - ``clock`` must be monotonic; tests inject a fake one.
    """

    __slots__ = ("_ttl", "_max_sessions", "_clock", "_lock", "_sessions")

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_SESSION_TTL,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")

        self._ttl = ttl_seconds
        self._max_sessions = max_sessions
        self._clock = clock
        self._lock = threading.Lock()
        # session_id -> (session, expires_at)
        self._sessions: dict[str, tuple[DHSession, float]] = {}

    @classmethod
    def from_config(
        cls,
        config: KeyExchangeConfig,
        clock: Callable[[], float] = time.monotonic,
    ) -> DHSessionStore:
        return cls(
            ttl_seconds=config.session_ttl_seconds,
            max_sessions=config.max_sessions,
            clock=clock,
        )

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def max_sessions(self) -> int:
        return self._max_sessions

    def add(self, session: DHSession) -> float:
        """
        Store a new session.

        Returns:
            The monotonic-clock expiry time of the stored session

        Raises:
            DuplicateSession: If a live session already uses the identifier
            InvalidParameter: If the store is at capacity
        """
        with self._lock:
            now = self._clock()
            self._evict_expired(now)

            if session.session_id in self._sessions:
                raise DuplicateSession(
                    f"Key exchange session {session.session_id!r} is already pending"
                )
            if len(self._sessions) >= self._max_sessions:
                raise InvalidParameter("Too many pending key exchange sessions")

            expires_at = now + self._ttl
            self._sessions[session.session_id] = (session, expires_at)
            return expires_at

    def take(self, session_id: str) -> Optional[DHSession]:
        """Remove and return the live session for ``session_id``, or None."""
        with self._lock:
            entry = self._sessions.pop(session_id, None)
            if entry is None:
                return None
            session, expires_at = entry
            if self._clock() >= expires_at:
                logger.info("Key exchange session expired: %s", session_id)
                return None
            return session

    def contains(self, session_id: str) -> bool:
        """True if a live (unexpired) session uses ``session_id``."""
        with self._lock:
            entry = self._sessions.get(session_id)
            return entry is not None and self._clock() < entry[1]

    def sweep(self) -> int:
        """
        Evict every expired session.

        Returns:
            Number of sessions evicted
        """
        with self._lock:
            return self._evict_expired(self._clock())

    def _evict_expired(self, now: float) -> int:
        # Caller holds the lock.
        expired = [sid for sid, (_, expires_at) in self._sessions.items() if now >= expires_at]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("Evicted %d expired key exchange session(s)", len(expired))
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for _, expires_at in self._sessions.values() if now < expires_at)

    def __contains__(self, session_id: object) -> bool:
        return isinstance(session_id, str) and self.contains(session_id)

    def __repr__(self) -> str:
        return f"DHSessionStore(ttl={self._ttl}s, max_sessions={self._max_sessions})"
