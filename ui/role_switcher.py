# ui/role_switcher.py
"""
Dev-only panel to flip the stored role of the signed-in profile.
Shown only when [app] dev_tools = true.
"""
import logging
from typing import Callable

import streamlit as st

from auth.errors import BackendError
from auth.models import Profile, ROLES
from auth.permissions import resolve_role_permissions, role_tier_display_name
from auth.profiles import update_profile_role

logger = logging.getLogger(__name__)

ROLE_LABELS = {
    "basic_user": "Free User",
    "power_user": "Power User",
    "admin": "Admin",
}

ROLE_BUTTONS = {
    "basic_user": "👥 Free",
    "power_user": "⚡ Paid",
    "admin": "👑 Admin",
}


def role_display_name(role: str) -> str:
    return ROLE_LABELS.get(role, "Unknown")


def switch_role(
    update_role: Callable[[str, str], None],
    profile: Profile,
    new_role: str,
) -> bool:
    """
    Returns False (and writes nothing) when the role is already active.
    """
    if new_role not in ROLES:
        raise ValueError("Invalid role")

    if new_role == profile.role:
        return False

    update_role(profile.id, new_role)
    return True


def render_role_switcher(profile: Profile, on_change: Callable[[], None]) -> None:
    perms = resolve_role_permissions(profile, False)

    with st.sidebar.expander("🛠 Dev Role Switcher", expanded=False):
        st.caption("Switch user roles to test permission restrictions")
        st.markdown(f"Current role: **{role_tier_display_name(perms.tier)}**")
        st.markdown(
            f"Export: {'Yes' if perms.can_export else 'No'} · "
            f"Premium: {'Yes' if perms.can_access_premium_features else 'No'}"
        )

        for role in ROLES:
            if st.button(ROLE_BUTTONS[role], key=f"role_{role}", disabled=role == profile.role):
                try:
                    if switch_role(update_profile_role, profile, role):
                        st.toast(f"Switched to {role_display_name(role)} role", icon="✅")
                        on_change()
                except BackendError as e:
                    logger.error("Error updating role: %s", e.message)
                    st.toast("Failed to switch role", icon="❌")

        st.warning("Remove this panel before production deployment.")
