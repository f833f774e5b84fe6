"""
Auth service client.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import httpx

from shared.errors import ApiException

from ..session import Session, UserSession
from .base import BaseServiceClient

REFRESH_MARGIN_SECONDS = 30


class AuthenticationState(Enum):
    """Authentication states reported to listeners."""
    IN_PROGRESS = "in_progress"
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"


AuthStateChangedCallback = Callable[[AuthenticationState], None]
UnsubscribeDelegate = Callable[[], None]


class AuthClient(BaseServiceClient):
    """Client for the Nhost Authentication API.

    The only service client allowed to write the shared session: sign-in and
    token refresh store the new tokens there, where storage and functions pick
    them up on their next request.
    """

    service_name = "auth"

    def __init__(
        self,
        endpoint: str,
        session: UserSession,
        transport: httpx.AsyncClient,
        token_refresh_interval: Optional[timedelta] = None,
    ) -> None:
        super().__init__(endpoint, session, transport)
        self.token_refresh_interval = token_refresh_interval
        self._callbacks: List[AuthStateChangedCallback] = []
        self._refresh_task: Optional[asyncio.Task] = None
        self._state = AuthenticationState.SIGNED_IN if session.is_authenticated else AuthenticationState.SIGNED_OUT
        self._closed = False

    @property
    def authentication_state(self) -> AuthenticationState:
        return self._state

    @property
    def access_token(self) -> Optional[str]:
        return self.session.access_token

    @property
    def current_user(self) -> Optional[Dict[str, Any]]:
        current = self.session.session
        return current.user if current else None

    def add_auth_state_changed_callback(self, callback: AuthStateChangedCallback) -> UnsubscribeDelegate:
        """Register ``callback`` for state changes; returns a function that removes it."""
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    async def sign_up(self, email: str, password: str, options: Optional[Dict[str, Any]] = None) -> Optional[Session]:
        """Register a user. Returns the session when the server signs the user in."""
        payload: Dict[str, Any] = {"email": email, "password": password}
        if options:
            payload["options"] = options
        return await self._authenticate("/signup/email-password", payload)

    async def sign_in_email_password(self, email: str, password: str) -> Optional[Session]:
        """Sign in with an email and password.

        Returns None when the server answers without a session, e.g. when a
        second factor is required; the client is then signed out.
        """
        return await self._authenticate("/signin/email-password", {"email": email, "password": password})

    async def refresh_session(self, refresh_token: Optional[str] = None) -> Session:
        """Exchange a refresh token for a new session."""
        token = refresh_token or self.session.refresh_token
        if not token:
            raise ValueError("No refresh token available")

        response = await self._request("POST", "/token", authenticated=False, json={"refreshToken": token})
        return self._accept_session(response.json())

    async def restore_session(self) -> Optional[Session]:
        """Resume the session persisted in the auth store, refreshing its tokens."""
        stored = self.session.restore()
        if stored is None or not stored.refresh_token:
            return None
        try:
            return await self.refresh_session(stored.refresh_token)
        except ApiException as exc:
            if exc.status_code in (400, 401):
                self.logger.warning("Stored session rejected", status_code=exc.status_code)
                self._sign_out_locally()
                return None
            raise

    async def get_user(self) -> Dict[str, Any]:
        """Fetch the signed-in user."""
        response = await self._request("GET", "/user")
        return response.json()

    async def sign_out(self, all_sessions: bool = False) -> None:
        """Sign out, revoking the refresh token server-side."""
        refresh_token = self.session.refresh_token
        try:
            if refresh_token:
                await self._request(
                    "POST",
                    "/signout",
                    json={"refreshToken": refresh_token, "all": all_sessions},
                )
        finally:
            self._sign_out_locally()

    async def close(self) -> None:
        """Stop token refresh. The session and its persisted copy are kept."""
        if self._closed:
            return
        self._closed = True
        self._cancel_refresh()
        self._callbacks.clear()
        self.logger.debug("Auth client closed")

    async def _authenticate(self, path: str, payload: Dict[str, Any]) -> Optional[Session]:
        self._set_state(AuthenticationState.IN_PROGRESS)
        try:
            response = await self._request("POST", path, authenticated=False, json=payload)
            data = response.json() or {}
            if not data.get("session"):
                # Email verification or MFA pending
                self.logger.info("No session returned", path=path, mfa_required=bool(data.get("mfa")))
                self._set_state(AuthenticationState.SIGNED_OUT)
                return None
            return self._accept_session(data["session"])
        except Exception:
            if self._state is AuthenticationState.IN_PROGRESS:
                self._set_state(
                    AuthenticationState.SIGNED_IN if self.session.is_authenticated
                    else AuthenticationState.SIGNED_OUT
                )
            raise

    def _accept_session(self, payload: Dict[str, Any]) -> Session:
        session = Session.model_validate(payload)
        self.session.set(session)
        self._schedule_refresh(session)
        self._set_state(AuthenticationState.SIGNED_IN)
        return session

    def _sign_out_locally(self) -> None:
        self._cancel_refresh()
        self.session.clear()
        self._set_state(AuthenticationState.SIGNED_OUT)

    def _set_state(self, state: AuthenticationState) -> None:
        if state is self._state:
            return
        self._state = state
        for callback in list(self._callbacks):
            try:
                callback(state)
            except Exception as exc:
                self.logger.error("Auth state callback failed", state=state.value, error=str(exc))

    def _refresh_delay(self, session: Session) -> float:
        if self.token_refresh_interval is not None:
            return max(self.token_refresh_interval.total_seconds(), 0.0)
        return float(max(session.access_token_expires_in - REFRESH_MARGIN_SECONDS, 1))

    def _schedule_refresh(self, session: Session) -> None:
        if self._closed or not session.refresh_token:
            return
        current = asyncio.current_task()
        if self._refresh_task is not None and self._refresh_task is not current:
            self._refresh_task.cancel()
        self._refresh_task = asyncio.get_running_loop().create_task(
            self._refresh_after(self._refresh_delay(session))
        )

    def _cancel_refresh(self) -> None:
        task, self._refresh_task = self._refresh_task, None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()

    async def _refresh_after(self, delay: float) -> None:
        await asyncio.sleep(delay)
        try:
            await self.refresh_session()
        except ApiException as exc:
            self.logger.warning("Token refresh rejected", status_code=exc.status_code)
            if exc.status_code in (400, 401):
                self._sign_out_locally()
        except httpx.HTTPError as exc:
            self.logger.error("Token refresh failed", error=str(exc))
        except ValueError as exc:
            # Undecodable body or pydantic ValidationError
            self.logger.error("Token refresh returned an invalid session", error=str(exc))
