# ui/pages.py
import pandas as pd
import streamlit as st

from auth.permissions import (
    ADVANCED_ANALYTICS_TIER,
    CUSTOM_DASHBOARDS_TIER,
    EXPORTS_TIER,
    FeatureAccess,
    tier_display_name,
    tier_features,
)
from core.dashboard import DashboardLoader
from core.exports import EXCEL_MIME, csv_bytes, excel_bytes
from core.filters import (
    ITEMS_PER_PAGE,
    LessonFilters,
    apply_filters,
    page_count,
    paginate,
)
from core.kpis import KPI_WINDOW_DAYS, compute_kpis, lessons_frame, satisfaction_distribution
from core.models import BUDGET_STATUSES, TIMELINE_STATUSES
from core.routes import DASHBOARDS, navigate


def _upgrade_prompt(feature: str, required_tier: str, access: FeatureAccess) -> None:
    limits = tier_features(required_tier)
    st.info(
        f"🔒 **{feature}** is available on the {tier_display_name(required_tier)} plan "
        f"and above. You are on {tier_display_name(access.tier)}."
    )
    if limits.get("max_dashboards"):
        st.caption(
            f"{tier_display_name(required_tier)} includes up to "
            f"{limits['max_dashboards']} dashboards and {limits['max_users']} users."
        )


def _lessons_table(lessons) -> None:
    df = lessons_frame(lessons).drop(columns=["id", "notes"])
    st.dataframe(df, use_container_width=True, hide_index=True)


# =====================================================
# Home
# =====================================================
def render_home(loader: DashboardLoader, access: FeatureAccess) -> None:
    head, actions = st.columns([4, 2])
    head.markdown("## Home")
    head.caption("High-level delivery health at a glance.")

    c1, c2 = actions.columns(2)
    if c1.button("View Dashboards"):
        navigate(DASHBOARDS)
    if c2.button("🔄 Refresh"):
        loader.refresh()

    state = loader.state
    st.markdown("### Key Metrics")
    st.caption(f"Last {KPI_WINDOW_DAYS} days · based on {len(state.lessons)} total records loaded")

    if state.lessons_loading:
        st.info("Loading…")
        return

    if state.error:
        st.error(state.error)

    kpi = compute_kpis(state.lessons)
    cols = st.columns(5)
    cols[0].metric("Total lessons", kpi["total"])
    cols[1].metric("Avg. satisfaction", kpi["avg_satisfaction"] if kpi["avg_satisfaction"] is not None else "—")
    cols[2].metric("On budget", kpi["budget_counts"]["on"])
    cols[3].metric("On time", kpi["timeline_counts"]["on_time"])
    cols[4].metric("Change order revenue", f"${kpi['revenue']:,.0f}")

    st.markdown("### Recent lessons")
    if not kpi["recent"]:
        st.caption("No lessons yet.")
        return
    _lessons_table(kpi["recent"])


# =====================================================
# Lessons
# =====================================================
def _filters_form(clients) -> LessonFilters:
    filters = LessonFilters()
    filters.search = st.text_input("🔎 Search project, role or client")

    with st.expander("Filter Lessons"):
        c1, c2 = st.columns(2)
        filters.role = c1.text_input("Role")
        client_names = [""] + [c.name for c in clients]
        filters.client = c2.selectbox("Client", client_names)

        c3, c4, c5 = st.columns(3)
        filters.budget_status = c3.multiselect("Budget", BUDGET_STATUSES)
        filters.timeline_status = c4.multiselect("Timeline", TIMELINE_STATUSES)
        filters.satisfaction = c5.multiselect("Satisfaction", [1, 2, 3, 4, 5])

        scope = st.radio("Scope changes", ["Any", "Yes", "No"], horizontal=True)
        filters.scope_changes = None if scope == "Any" else scope == "Yes"

    return filters


def render_lessons(loader: DashboardLoader, access: FeatureAccess) -> None:
    state = loader.state
    head, action = st.columns([5, 1])
    head.markdown("## Lessons")
    if action.button("🔄 Refresh", key="lessons_refresh"):
        loader.refresh()

    filters = _filters_form(state.clients)

    if state.lessons_loading:
        st.info("Loading…")
        return

    filtered = apply_filters(state.lessons, filters)

    st.markdown(f"### Lessons ({len(filtered)})")
    if len(filtered) != len(state.lessons):
        st.caption(f"Showing {len(filtered)} of {len(state.lessons)} lessons")

    if not filtered:
        st.caption(
            "No lessons yet." if not state.lessons
            else "No lessons match your current filters."
        )
        return

    pages = page_count(len(filtered), ITEMS_PER_PAGE)
    page = st.number_input("Page", min_value=1, max_value=pages, value=1) if pages > 1 else 1
    _lessons_table(paginate(filtered, int(page)))

    st.markdown("---")
    if not access.can_access_exports:
        _upgrade_prompt("Export", EXPORTS_TIER, access)
        return

    c1, c2 = st.columns(2)
    c1.download_button(
        "⬇️ Export Excel",
        excel_bytes(filtered),
        file_name="lessons.xlsx",
        mime=EXCEL_MIME,
    )
    c2.download_button(
        "⬇️ Export CSV",
        csv_bytes(filtered),
        file_name="lessons.csv",
        mime="text/csv",
    )


# =====================================================
# Dashboards / Analytics
# =====================================================
def render_dashboards(loader: DashboardLoader, access: FeatureAccess) -> None:
    st.markdown("## Dashboards")

    if not access.can_access_custom_dashboards:
        _upgrade_prompt("Custom dashboards", CUSTOM_DASHBOARDS_TIER, access)
        return

    kpi = compute_kpis(loader.state.lessons)
    c1, c2 = st.columns(2)
    with c1:
        st.markdown("#### Budget status")
        st.bar_chart(pd.Series(kpi["budget_counts"], name="lessons"))
    with c2:
        st.markdown("#### Timeline status")
        st.bar_chart(pd.Series(kpi["timeline_counts"], name="lessons"))


def render_analytics(loader: DashboardLoader, access: FeatureAccess) -> None:
    st.markdown("## Analytics")

    if not access.can_access_advanced_analytics:
        _upgrade_prompt("Advanced analytics", ADVANCED_ANALYTICS_TIER, access)
        return

    lessons = loader.state.lessons
    if not lessons:
        st.caption("No lessons yet.")
        return

    st.markdown("#### Satisfaction distribution")
    st.bar_chart(satisfaction_distribution(lessons), x="rating", y="count")

    df = lessons_frame(lessons)
    df["satisfaction_rating"] = pd.to_numeric(df["satisfaction_rating"], errors="coerce")
    by_client = (
        df[df["client"] != ""]
        .groupby("client")["satisfaction_rating"]
        .mean()
        .round(2)
        .sort_values(ascending=False)
    )
    if not by_client.empty:
        st.markdown("#### Average satisfaction by client")
        st.bar_chart(by_client)
