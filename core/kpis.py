# core/kpis.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import pandas as pd

from core.models import BUDGET_STATUSES, TIMELINE_STATUSES, Lesson

KPI_WINDOW_DAYS = 90
RECENT_LIMIT = 10


def lessons_frame(lessons: list[Lesson]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "id": l.id,
                "project_name": l.project_name,
                "role": l.role,
                "client": l.client_name,
                "satisfaction_rating": l.satisfaction_rating,
                "budget_status": l.budget_status,
                "timeline_status": l.timeline_status,
                "scope_changes": l.scope_changes,
                "change_orders_revenue_usd": l.change_orders_revenue_usd,
                "notes": l.notes,
                "created_at": l.created_at,
            }
            for l in lessons
        ],
        columns=[
            "id", "project_name", "role", "client", "satisfaction_rating",
            "budget_status", "timeline_status", "scope_changes",
            "change_orders_revenue_usd", "notes", "created_at",
        ],
    )


def _status_counts(series: pd.Series, statuses: tuple) -> dict:
    counts = series.value_counts()
    return {s: int(counts.get(s, 0)) for s in statuses}


def compute_kpis(lessons: list[Lesson], now: Optional[datetime] = None) -> dict:
    """
    Headline numbers over the last KPI_WINDOW_DAYS, plus the most recent
    lessons regardless of the window (input is newest first).
    """
    now = now or datetime.now(timezone.utc)
    since = now - timedelta(days=KPI_WINDOW_DAYS)

    df = lessons_frame(lessons)
    created = pd.to_datetime(df["created_at"], utc=True)
    windowed = df[created >= since]

    ratings = pd.to_numeric(windowed["satisfaction_rating"], errors="coerce").dropna()
    revenue = pd.to_numeric(windowed["change_orders_revenue_usd"], errors="coerce").fillna(0)

    return {
        "total": int(len(windowed)),
        "avg_satisfaction": round(float(ratings.mean()), 2) if len(ratings) else None,
        "budget_counts": _status_counts(windowed["budget_status"], BUDGET_STATUSES),
        "timeline_counts": _status_counts(windowed["timeline_status"], TIMELINE_STATUSES),
        "revenue": float(revenue.sum()),
        "recent": lessons[:RECENT_LIMIT],
    }


def satisfaction_distribution(lessons: list[Lesson]) -> pd.DataFrame:
    df = lessons_frame(lessons)
    counts = df["satisfaction_rating"].dropna().astype(int).value_counts()
    return pd.DataFrame(
        {"rating": list(range(1, 6)), "count": [int(counts.get(r, 0)) for r in range(1, 6)]}
    )
