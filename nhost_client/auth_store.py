"""
Credential stores used to persist sessions between process restarts.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Optional

from .session import Session


class AuthStore(ABC):
    """Persists the current session across restarts."""

    @abstractmethod
    def load(self) -> Optional[Session]:
        """Return the persisted session, or None when nothing is stored."""

    @abstractmethod
    def save(self, session: Session) -> None:
        """Persist ``session``, replacing anything stored before."""

    @abstractmethod
    def clear(self) -> None:
        """Forget the persisted session."""


class InMemoryAuthStore(AuthStore):
    """Volatile store; keeps nothing beyond the lifetime of the process."""

    def __init__(self):
        self._lock = threading.Lock()
        self._session: Optional[Session] = None

    def load(self) -> Optional[Session]:
        with self._lock:
            return self._session

    def save(self, session: Session) -> None:
        with self._lock:
            self._session = session

    def clear(self) -> None:
        with self._lock:
            self._session = None
