# ui/notify.py
"""
Toasts that survive st.rerun(): queued in session_state and shown on the
next script run.
"""
import streamlit as st

FLASH_KEY = "_flash"

ICONS = {"success": "✅", "error": "❌", "info": "ℹ️"}


def flash(title: str, message: str = "", kind: str = "info") -> None:
    st.session_state.setdefault(FLASH_KEY, []).append((title, message, kind))


def flash_error(title: str, message: str) -> None:
    flash(title, message, "error")


def show_flashes() -> None:
    for title, message, kind in st.session_state.pop(FLASH_KEY, []):
        text = f"**{title}**" + (f" · {message}" if message else "")
        st.toast(text, icon=ICONS.get(kind, "ℹ️"))


def toast_error(title: str, message: str) -> None:
    st.toast(f"**{title}** · {message}", icon=ICONS["error"])
