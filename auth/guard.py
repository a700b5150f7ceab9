# auth/guard.py
import streamlit as st

from auth.profiles import get_profile
from auth.session import AuthState, load_auth_state, redirect_target
from auth.supabase_auth import SupabaseAuth, get_auth_client
from core.routes import navigate

AUTH_CLIENT_KEY = "auth_client"
AUTH_STATE_KEY = "auth_state"


# =====================================================
# 1️⃣ Auth client (one per browser session)
# =====================================================
def get_auth() -> SupabaseAuth:
    auth = st.session_state.get(AUTH_CLIENT_KEY)
    if auth is None:
        auth = get_auth_client(st.session_state)
        # any sign in/out, refresh or recovery invalidates the cached state
        auth.on_auth_state_change(lambda event, session: invalidate_auth_state())
        st.session_state[AUTH_CLIENT_KEY] = auth
    return auth


# =====================================================
# 2️⃣ Current auth state (resolved once until the next auth event)
# =====================================================
def invalidate_auth_state() -> None:
    st.session_state.pop(AUTH_STATE_KEY, None)


def current_auth_state(auth: SupabaseAuth) -> AuthState:
    state = st.session_state.get(AUTH_STATE_KEY)
    if state is None:
        with st.spinner("Loading..."):
            state = load_auth_state(auth, get_profile)
        st.session_state[AUTH_STATE_KEY] = state
    return state


# =====================================================
# 3️⃣ Route guard
# =====================================================
def require_route(state: AuthState, route: str) -> None:
    """
    Stops rendering while auth is unresolved; redirects when the visitor
    may not be on `route`.
    """
    if state.loading:
        st.stop()

    target = redirect_target(state, route)
    if target is not None:
        navigate(target)
