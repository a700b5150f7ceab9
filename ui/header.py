# ui/header.py
import logging
from typing import Callable, Optional

import streamlit as st

from auth.errors import BackendError
from auth.models import Profile, User
from auth.permissions import resolve_feature_access, tier_display_name
from auth.session import AuthState
from auth.supabase_auth import SupabaseAuth
from core.routes import ANALYTICS, AUTH, DASHBOARDS, HOME, LESSONS, navigate
from ui.notify import flash_error

logger = logging.getLogger(__name__)

APP_NAME = "Learnd"

NAV_ITEMS = (
    ("Home", HOME),
    ("Dashboards", DASHBOARDS),
    ("Lessons", LESSONS),
    ("Analytics", ANALYTICS),
)


def initials_for(user: Optional[User], profile: Optional[Profile] = None) -> str:
    """
    First + last name initials when the profile has a name, otherwise
    built from the email local part ("jane.doe@x" -> "JD", "jane@x" -> "J").
    """
    if profile and (profile.first_name or profile.last_name):
        return (profile.first_name[:1] + profile.last_name[:1]).upper()

    email = (user.email if user else "") or (profile.email if profile else "")
    local = email.split("@")[0]
    if not local:
        return "?"

    parts = local.split(".")
    second = parts[1][:1] if len(parts) > 1 else ""
    return (local[0] + second).upper()


def sign_out_and_redirect(
    auth: SupabaseAuth,
    navigate_to: Callable[[str], None] = navigate,
    notify: Optional[Callable[[str, str], None]] = None,
) -> None:
    """
    The local session is cleared even if the server call fails.
    """
    try:
        auth.sign_out()
    except BackendError as e:
        logger.error("Sign out failed: %s", e.message)
        if notify:
            notify("Sign out failed", e.message)
    navigate_to(AUTH)


def render_header(state: AuthState, auth: SupabaseAuth, current: str) -> None:
    # nothing until auth is known, so a signed-in user never sees "signed out" chrome
    if state.loading:
        return

    left, right = st.columns([3, 2])

    with left:
        cols = st.columns(len(NAV_ITEMS) + 1)
        cols[0].markdown(f"**{APP_NAME}**")
        for col, (label, route) in zip(cols[1:], NAV_ITEMS):
            if col.button(label, key=f"nav_{route}", type="primary" if route == current else "secondary"):
                navigate(route)

    if state.user is None:
        return

    with right:
        access = resolve_feature_access(state.profile, state.loading)
        badge, who, action = st.columns([1, 3, 2])
        badge.markdown(f"`{initials_for(state.user, state.profile)}`", help=state.user.email)
        who.caption(f"{state.user.email} · {tier_display_name(access.tier)}")
        if action.button("Sign out", key="sign_out"):
            sign_out_and_redirect(auth, notify=flash_error)

    st.divider()
