import logging

import streamlit as st

# ======================================================
# 1. CONFIG STREAMLIT (must come first)
# ======================================================
st.set_page_config(
    page_title="Learnd",
    page_icon="📘",
    layout="wide"
)

from auth.config import get_app_config
from auth.guard import current_auth_state, get_auth, invalidate_auth_state, require_route
from auth.permissions import resolve_feature_access
from core.dashboard import DashboardLoader
from core.lessons import fetch_clients, fetch_lessons
from core.routes import ANALYTICS, AUTH, DASHBOARDS, HOME, LESSONS, RESET_PASSWORD, current_route
from ui.auth_pages import render_auth_page, render_reset_password_page
from ui.header import render_header
from ui.notify import show_flashes, toast_error
from ui.pages import render_analytics, render_dashboards, render_home, render_lessons
from ui.role_switcher import render_role_switcher

APP_CFG = get_app_config()

logging.basicConfig(
    level=getattr(logging, APP_CFG["log_level"], logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

LOADER_KEY = "dashboard_loader"

PAGES = {
    HOME: render_home,
    DASHBOARDS: render_dashboards,
    LESSONS: render_lessons,
    ANALYTICS: render_analytics,
}


def get_loader() -> DashboardLoader:
    loader = st.session_state.get(LOADER_KEY)
    if loader is None or not loader.alive:
        loader = DashboardLoader(fetch_lessons, fetch_clients, notify=toast_error)
        st.session_state[LOADER_KEY] = loader
    return loader


def drop_loader() -> None:
    loader = st.session_state.pop(LOADER_KEY, None)
    if loader is not None:
        loader.close()


def reload_profile() -> None:
    invalidate_auth_state()
    st.rerun()


# ======================================================
# 2. SESSION
# ======================================================
auth = get_auth()
route = current_route()
state = current_auth_state(auth)

require_route(state, route)
show_flashes()

# ======================================================
# 3. PUBLIC ROUTES
# ======================================================
if route == AUTH:
    drop_loader()
    render_auth_page(auth, APP_CFG["site_url"])
    st.stop()

if route == RESET_PASSWORD:
    render_reset_password_page(auth)
    st.stop()

# ======================================================
# 4. SIGNED-IN ROUTES
# ======================================================
render_header(state, auth, route)

loader = get_loader()
loader.set_user(state.user.id)

access = resolve_feature_access(state.profile, state.loading)

if APP_CFG["dev_tools"] and state.profile is not None:
    render_role_switcher(state.profile, on_change=reload_profile)

PAGES[route](loader, access)
