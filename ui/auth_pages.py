# ui/auth_pages.py
import logging

import streamlit as st

from auth.errors import BackendError
from auth.session import RecoveryGate, submit_password_reset
from auth.supabase_auth import SupabaseAuth
from core.routes import HOME, PAGE_PARAM, RESET_PASSWORD, navigate
from ui.notify import flash

logger = logging.getLogger(__name__)


# =====================================================
# Sign in / Sign up
# =====================================================
def _sign_in_form(auth: SupabaseAuth, site_url: str) -> None:
    with st.form("sign_in_form"):
        email = st.text_input("Email", key="sign_in_email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", use_container_width=True)
        forgot = st.form_submit_button("Forgot your password?")

    if forgot:
        _send_reset_link(auth, email, site_url)
        return

    if submitted:
        try:
            auth.sign_in_with_password(email, password)
        except BackendError as e:
            st.error(e.message)
        else:
            flash("Welcome back!", "You have successfully signed in.", "success")
            navigate(HOME)


def _send_reset_link(auth: SupabaseAuth, email: str, site_url: str) -> None:
    email = (email or "").strip()
    if not email:
        st.error(
            "Type your account email in the Email field, then click "
            "“Forgot your password?” again."
        )
        return

    redirect_to = f"{site_url}/?{PAGE_PARAM}={RESET_PASSWORD}" if site_url else ""
    try:
        auth.reset_password_for_email(email, redirect_to=redirect_to)
    except BackendError as e:
        logger.warning("Reset link request failed: %s", e.message)
        st.toast(f"**Couldn’t send reset link** · {e.message}", icon="❌")
        return

    st.toast("**Check your email** · We sent you a link to reset your password.", icon="📧")


def _sign_up_form(auth: SupabaseAuth, site_url: str) -> None:
    with st.form("sign_up_form"):
        c1, c2 = st.columns(2)
        first_name = c1.text_input("First name")
        last_name = c2.text_input("Last name")
        email = st.text_input("Email", key="sign_up_email")
        password = st.text_input("Password", type="password", key="sign_up_password")
        submitted = st.form_submit_button("Create account", use_container_width=True)

    if not submitted:
        return

    try:
        session = auth.sign_up(
            email,
            password,
            first_name=first_name,
            last_name=last_name,
            redirect_to=f"{site_url}/" if site_url else "",
        )
    except BackendError as e:
        logger.warning("Sign up failed: %s", e.message)
        st.error(e.message)
        return

    if session is None:
        st.success("Account created! Please check your email to verify your account.")
    else:
        flash("Account created!", "", "success")
        navigate(HOME)


def render_auth_page(auth: SupabaseAuth, site_url: str) -> None:
    st.title("🔐 Learnd")
    st.markdown("Capture and analyze your project lessons.")

    sign_in, sign_up = st.tabs(["Sign in", "Sign up"])
    with sign_in:
        _sign_in_form(auth, site_url)
    with sign_up:
        _sign_up_form(auth, site_url)


# =====================================================
# Reset password
# =====================================================
def render_reset_password_page(auth: SupabaseAuth) -> None:
    st.title("Set a new password")

    token_hash = st.query_params.get("token_hash")
    placeholder = st.empty()
    placeholder.info("Validating your reset link…")

    with RecoveryGate(auth, token_hash=token_hash) as gate:
        placeholder.empty()
        if not gate.ready:
            st.error(gate.error or "We couldn't validate your reset link.")
            return

        with st.form("reset_password_form"):
            password = st.text_input("New password", type="password")
            confirm = st.text_input("Confirm new password", type="password")
            submitted = st.form_submit_button("Save new password", use_container_width=True)

        if not submitted:
            return

        result = submit_password_reset(auth, password, confirm)

    if not result.ok:
        st.error(f"**{result.title}** · {result.message}")
        return

    flash(result.title, result.message, "success")
    navigate(result.redirect_to)
