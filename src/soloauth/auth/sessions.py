# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-memory session table.

Session ids are the SHA-512 hex digest of 256 random bits. No collision retry
is attempted: with that much entropy a duplicate id is not a practical concern.

Expired records are not evicted on their own; they stay in the table until
looked up and rejected by the caller, removed, or purged by ``SessionSweeper``.
Without a sweeper the table grows with every login that never logs out, which
is acceptable for a single-user service with few logins.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Sequence

logger = logging.getLogger(__name__)

SESSION_TTL = timedelta(days=30)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_session_id() -> str:
    return hashlib.sha512(secrets.token_bytes(32)).hexdigest()


@dataclass(frozen=True)
class SessionRecord:
    id: str
    expires: datetime

    def expired(self, now: datetime) -> bool:
        return self.expires < now


class SessionStore:
    def __init__(self, *, clock: Callable[[], datetime] = utcnow):
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: Dict[str, SessionRecord] = {}

    def now(self) -> datetime:
        return self._clock()

    def create(self, ttl: timedelta = SESSION_TTL) -> SessionRecord:
        record = SessionRecord(id=generate_session_id(), expires=self._clock() + ttl)
        with self._lock:
            self._sessions[record.id] = record
        return record

    def lookup(self, session_id: str) -> Optional[SessionRecord]:
        with self._lock:
            return self._sessions.get(session_id)

    def remove(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            stale = [sid for sid, rec in self._sessions.items() if rec.expired(now)]
            for sid in stale:
                del self._sessions[sid]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


class SessionSweeper:
    """Background thread purging expired sessions every ``interval`` seconds.

    Each callable in ``cleanups`` runs on the same tick and returns the number
    of entries it dropped (e.g. ``RateLimiter.cleanup``).
    """

    def __init__(self, store: SessionStore, interval: float, *, cleanups: Sequence[Callable[[], int]] = ()):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.store = store
        self.interval = interval
        self.cleanups = list(cleanups)
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="session-sweeper", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            removed = self.store.purge_expired()
            if removed:
                logger.debug("Purged %d expired sessions", removed)
            for cleanup in self.cleanups:
                dropped = cleanup()
                if dropped:
                    logger.debug("Dropped %d stale entries via %r", dropped, cleanup)
