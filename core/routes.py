import streamlit as st

HOME = "/"
DASHBOARDS = "/dashboards"
LESSONS = "/lessons"
ANALYTICS = "/analytics"
AUTH = "/auth"
RESET_PASSWORD = "/auth/reset"

PUBLIC_ROUTES = {AUTH, RESET_PASSWORD}
ALL_ROUTES = (HOME, DASHBOARDS, LESSONS, ANALYTICS, AUTH, RESET_PASSWORD)

# the current route travels in ?page=...
PAGE_PARAM = "page"


def normalize_route(value) -> str:
    if not value:
        return HOME
    route = "/" + str(value).strip().strip("/")
    return route if route in ALL_ROUTES else HOME


def current_route() -> str:
    return normalize_route(st.query_params.get(PAGE_PARAM))


def navigate(route: str) -> None:
    """
    Moves to `route` and reruns the script. Other query params are dropped.
    """
    st.query_params.clear()
    if route != HOME:
        st.query_params[PAGE_PARAM] = route
    st.rerun()
