"""
Shared authentication session.

One ``UserSession`` exists per client. The auth service writes to it; storage
and functions only see it through a ``SessionView``.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from .auth_store import AuthStore


class Session(BaseModel):
    """Tokens and user returned by the auth service."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    access_token: str
    access_token_expires_in: int = 900
    refresh_token: Optional[str] = None
    user: Dict[str, Any] = Field(default_factory=dict)


class UserSession:
    """Mutable holder of the current session, persisted through an AuthStore."""

    def __init__(self, auth_store: "AuthStore"):
        self.auth_store = auth_store
        self._lock = threading.Lock()
        self._session: Optional[Session] = None

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def access_token(self) -> Optional[str]:
        session = self._session
        return session.access_token if session else None

    @property
    def refresh_token(self) -> Optional[str]:
        session = self._session
        return session.refresh_token if session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def set(self, session: Session) -> None:
        """Replace the current session and persist it."""
        with self._lock:
            self._session = session
            self.auth_store.save(session)

    def clear(self) -> None:
        """Drop the current session and the persisted copy."""
        with self._lock:
            self._session = None
            self.auth_store.clear()

    def restore(self) -> Optional[Session]:
        """Load the persisted session into memory, if there is one."""
        with self._lock:
            stored = self.auth_store.load()
            if stored is not None:
                self._session = stored
            return stored

    def auth_headers(self) -> Dict[str, str]:
        token = self.access_token
        return {"Authorization": f"Bearer {token}"} if token else {}


class SessionView:
    """Read-only access to a UserSession."""

    def __init__(self, user_session: UserSession):
        self._user_session = user_session

    @property
    def session(self) -> Optional[Session]:
        return self._user_session.session

    @property
    def access_token(self) -> Optional[str]:
        return self._user_session.access_token

    @property
    def is_authenticated(self) -> bool:
        return self._user_session.is_authenticated

    def auth_headers(self) -> Dict[str, str]:
        return self._user_session.auth_headers()

    def is_view_of(self, user_session: UserSession) -> bool:
        """True when this view reads from ``user_session``."""
        return self._user_session is user_session
