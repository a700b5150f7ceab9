# auth/supabase_auth.py
"""
Minimal client for the Supabase auth API (GoTrue) over HTTP.

The current session is kept in a mutable mapping supplied by the caller;
the app passes `st.session_state` so each browser tab keeps its own.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, MutableMapping, Optional

import requests

from auth.errors import AuthApiError
from auth.config import get_supabase_config
from auth.models import Session, User

logger = logging.getLogger(__name__)

SESSION_KEY = "auth_session"
HTTP_TIMEOUT = 15
# refresh a little before the token actually expires
EXPIRY_MARGIN = 10

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
TOKEN_REFRESHED = "TOKEN_REFRESHED"
USER_UPDATED = "USER_UPDATED"
PASSWORD_RECOVERY = "PASSWORD_RECOVERY"

AuthListener = Callable[[str, Optional[Session]], None]


class AuthSubscription:
    def __init__(self, listeners: list, callback: AuthListener):
        self._listeners = listeners
        self._callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        try:
            self._listeners.remove(self._callback)
        except ValueError:
            pass

    def __enter__(self) -> "AuthSubscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unsubscribe()


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"

    if not isinstance(body, dict):
        return str(body) if body else f"HTTP {response.status_code}"

    for key in ("error_description", "msg", "message", "error"):
        if body.get(key):
            return str(body[key])
    return f"HTTP {response.status_code}"


class SupabaseAuth:
    def __init__(
        self,
        url: str,
        anon_key: str,
        storage: Optional[MutableMapping] = None,
        http: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.base_url = f"{url.rstrip('/')}/auth/v1"
        self.anon_key = anon_key
        self.storage = storage if storage is not None else {}
        self.http = http or requests.Session()
        self.clock = clock
        self._listeners: list[AuthListener] = []

    # =====================================================
    # HTTP
    # =====================================================
    def _headers(self, access_token: Optional[str] = None) -> dict:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {access_token or self.anon_key}",
            "Content-Type": "application/json",
        }

    def _request(
        self,
        method: str,
        path: str,
        payload: Optional[dict] = None,
        params: Optional[dict] = None,
        access_token: Optional[str] = None,
    ) -> dict:
        try:
            response = self.http.request(
                method,
                f"{self.base_url}{path}",
                json=payload,
                params=params,
                headers=self._headers(access_token),
                timeout=HTTP_TIMEOUT,
            )
        except requests.RequestException as e:
            raise AuthApiError(f"Could not reach the auth service: {e}") from e

        if response.status_code >= 400:
            raise AuthApiError(_error_message(response), status=response.status_code)

        if not response.content:
            return {}
        return response.json()

    # =====================================================
    # Session storage + events
    # =====================================================
    def _now(self) -> int:
        return int(self.clock())

    def _store(self, session: Optional[Session]) -> None:
        if session is None:
            self.storage.pop(SESSION_KEY, None)
        else:
            self.storage[SESSION_KEY] = session

    def _emit(self, event: str, session: Optional[Session]) -> None:
        logger.debug("Auth event %s", event)
        for callback in list(self._listeners):
            callback(event, session)

    def on_auth_state_change(self, callback: AuthListener) -> AuthSubscription:
        self._listeners.append(callback)
        return AuthSubscription(self._listeners, callback)

    def _set_session(self, data: dict, event: str) -> Session:
        session = Session.from_api(data, now=self._now())
        self._store(session)
        self._emit(event, session)
        return session

    # =====================================================
    # Operations
    # =====================================================
    def get_session(self) -> Optional[Session]:
        """
        Current session, refreshed once if the access token expired.
        A refresh the server rejects signs the user out locally.
        """
        session = self.storage.get(SESSION_KEY)
        if session is None:
            return None

        if session.expires_at - EXPIRY_MARGIN > self._now():
            return session

        if not session.refresh_token:
            self._store(None)
            return None

        try:
            data = self._request(
                "POST",
                "/token",
                payload={"refresh_token": session.refresh_token},
                params={"grant_type": "refresh_token"},
            )
        except AuthApiError as e:
            logger.warning("Session refresh failed: %s", e.message)
            self._store(None)
            self._emit(SIGNED_OUT, None)
            return None

        return self._set_session(data, TOKEN_REFRESHED)

    def sign_in_with_password(self, email: str, password: str) -> Session:
        data = self._request(
            "POST",
            "/token",
            payload={"email": email.strip(), "password": password},
            params={"grant_type": "password"},
        )
        return self._set_session(data, SIGNED_IN)

    def sign_up(
        self,
        email: str,
        password: str,
        first_name: str = "",
        last_name: str = "",
        redirect_to: str = "",
    ) -> Optional[Session]:
        """
        Creates the account. With email confirmation enabled no session
        comes back until the user follows the link.
        """
        data = self._request(
            "POST",
            "/signup",
            payload={
                "email": email.strip(),
                "password": password,
                "data": {
                    "first_name": first_name or None,
                    "last_name": last_name or None,
                },
            },
            params={"redirect_to": redirect_to} if redirect_to else None,
        )
        if data.get("access_token"):
            return self._set_session(data, SIGNED_IN)
        return None

    def sign_out(self) -> None:
        session = self.storage.get(SESSION_KEY)
        try:
            if session is not None:
                self._request("POST", "/logout", access_token=session.access_token)
        finally:
            self._store(None)
            self._emit(SIGNED_OUT, None)

    def update_user(self, password: str) -> None:
        session = self.get_session()
        if session is None:
            raise AuthApiError("Auth session missing!", status=401)

        data = self._request(
            "PUT",
            "/user",
            payload={"password": password},
            access_token=session.access_token,
        )
        if data.get("id"):
            session.user = User.from_api(data)
        self._emit(USER_UPDATED, session)

    def reset_password_for_email(self, email: str, redirect_to: str = "") -> None:
        self._request(
            "POST",
            "/recover",
            payload={"email": email.strip()},
            params={"redirect_to": redirect_to} if redirect_to else None,
        )

    def verify_recovery(self, token_hash: str) -> Session:
        """
        Exchanges the token_hash from a reset email for a session.
        """
        data = self._request(
            "POST",
            "/verify",
            payload={"type": "recovery", "token_hash": token_hash},
        )
        return self._set_session(data, PASSWORD_RECOVERY)


def get_auth_client(storage: MutableMapping) -> SupabaseAuth:
    url, anon_key = get_supabase_config()
    return SupabaseAuth(url, anon_key, storage=storage)
