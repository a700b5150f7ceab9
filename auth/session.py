# auth/session.py
"""
Session gate: who is signed in, where they may go, and the
password-recovery flow.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from auth.errors import BackendError, PasswordValidationError
from auth.models import Profile, Session, User
from auth.supabase_auth import PASSWORD_RECOVERY, SupabaseAuth
from core.routes import AUTH, HOME, PUBLIC_ROUTES

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


# =====================================================
# Auth state (injected into every page/component)
# =====================================================
@dataclass(frozen=True)
class AuthState:
    session: Optional[Session] = None
    user: Optional[User] = None
    profile: Optional[Profile] = None
    loading: bool = False

    @classmethod
    def pending(cls) -> "AuthState":
        return cls(loading=True)

    @property
    def is_authenticated(self) -> bool:
        return not self.loading and self.user is not None


def load_auth_state(
    auth: SupabaseAuth,
    load_profile: Callable[[str], Optional[Profile]],
) -> AuthState:
    try:
        session = auth.get_session()
    except BackendError as e:
        logger.warning("Auth init error: %s", e.message)
        return AuthState()

    if session is None:
        return AuthState()

    try:
        profile = load_profile(session.user.id)
    except BackendError as e:
        # signed in without a profile row: permissions fall back to free
        logger.warning("Profile load error for %s: %s", session.user.id, e.message)
        profile = None

    return AuthState(session=session, user=session.user, profile=profile)


def redirect_target(state: AuthState, route: str) -> Optional[str]:
    """
    None while loading (render nothing) or when the visitor may stay.
    """
    if state.loading:
        return None

    if not state.is_authenticated and route not in PUBLIC_ROUTES:
        return AUTH

    if state.is_authenticated and route == AUTH:
        return HOME

    return None


# =====================================================
# Password recovery
# =====================================================
class RecoveryGate:
    """
    Decides whether the reset-password form can be shown.

    Ready when a session already exists or once the auth client reports a
    PASSWORD_RECOVERY event (verifying `token_hash` from the email link
    emits one). Use as a context manager: the auth subscription is
    released on every exit path.
    """

    def __init__(self, auth: SupabaseAuth, token_hash: Optional[str] = None):
        self.auth = auth
        self.token_hash = token_hash
        self.ready = False
        self.loading = True
        self.error: Optional[str] = None
        self._alive = False
        self._subscription = None

    def _on_auth_event(self, event: str, session: Optional[Session]) -> None:
        if not self._alive:
            return
        if event == PASSWORD_RECOVERY:
            self.ready = True

    def __enter__(self) -> "RecoveryGate":
        self._alive = True
        self._subscription = self.auth.on_auth_state_change(self._on_auth_event)
        try:
            if self.auth.get_session() is not None:
                self.ready = True
            elif self.token_hash:
                self.auth.verify_recovery(self.token_hash)
        except BackendError as e:
            logger.warning("Reset link validation failed: %s", e.message)
            self.error = e.message
        except BaseException:
            self.close()
            raise
        finally:
            self.loading = False
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._alive = False
        if self._subscription is not None:
            self._subscription.unsubscribe()


def validate_new_password(password: str, confirm: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordValidationError(
            "Password too short",
            f"Please use at least {MIN_PASSWORD_LENGTH} characters.",
        )
    if password != confirm:
        raise PasswordValidationError(
            "Passwords don't match",
            "Please re-enter your password.",
        )


@dataclass
class ResetResult:
    ok: bool
    title: str
    message: str
    redirect_to: Optional[str] = None


def submit_password_reset(auth: SupabaseAuth, password: str, confirm: str) -> ResetResult:
    try:
        validate_new_password(password, confirm)
    except PasswordValidationError as e:
        return ResetResult(False, e.title, e.message)

    try:
        auth.update_user(password=password)
    except BackendError as e:
        logger.error("Password update failed: %s", e.message)
        return ResetResult(False, "Couldn't update password", e.message)

    return ResetResult(
        True,
        "Password updated",
        "You can now sign in with your new password.",
        redirect_to=AUTH,
    )
