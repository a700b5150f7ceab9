from datetime import datetime, timedelta, timezone

from core.exports import csv_bytes, excel_bytes
from core.filters import LessonFilters, apply_filters, page_count, paginate
from core.kpis import compute_kpis, satisfaction_distribution
from core.models import Client, Lesson
from core.routes import normalize_route

NOW = datetime(2025, 9, 10, tzinfo=timezone.utc)


def make_lessons():
    acme = Client(id="c-1", name="Acme Corp")
    return [
        Lesson(
            id="l-1", user_id="u-1", project_name="Website revamp", role="PM",
            client=acme, satisfaction_rating=5, budget_status="on",
            timeline_status="on_time", scope_changes=False,
            change_orders_revenue_usd=1200.0, created_at=NOW - timedelta(days=1),
        ),
        Lesson(
            id="l-2", user_id="u-1", project_name="Mobile app", role="Designer",
            satisfaction_rating=3, budget_status="over", timeline_status="delayed",
            scope_changes=True, created_at=NOW - timedelta(days=10),
        ),
        Lesson(
            id="l-3", user_id="u-1", project_name="Data warehouse", role="Engineer",
            client=acme, satisfaction_rating=4, budget_status="under",
            timeline_status="early", created_at=NOW - timedelta(days=200),
        ),
    ]


# =====================================================
# Filters
# =====================================================
def test_empty_filters_keep_everything():
    assert LessonFilters().is_empty()
    assert len(apply_filters(make_lessons(), LessonFilters())) == 3


def test_search_covers_project_role_and_client():
    lessons = make_lessons()

    assert [l.id for l in apply_filters(lessons, LessonFilters(search="mobile"))] == ["l-2"]
    assert [l.id for l in apply_filters(lessons, LessonFilters(search="engineer"))] == ["l-3"]
    assert [l.id for l in apply_filters(lessons, LessonFilters(search="acme"))] == ["l-1", "l-3"]


def test_membership_and_flag_filters():
    lessons = make_lessons()

    assert [l.id for l in apply_filters(lessons, LessonFilters(budget_status=["over", "under"]))] == ["l-2", "l-3"]
    assert [l.id for l in apply_filters(lessons, LessonFilters(satisfaction=[5]))] == ["l-1"]
    assert [l.id for l in apply_filters(lessons, LessonFilters(scope_changes=True))] == ["l-2"]
    assert [l.id for l in apply_filters(lessons, LessonFilters(client="acme corp", timeline_status=["early"]))] == ["l-3"]


def test_client_filter_matches_whole_name_only():
    lessons = make_lessons()
    lessons.append(
        Lesson(id="l-4", user_id="u-1", project_name="Intranet", client=Client(id="c-2", name="Acme"))
    )

    assert [l.id for l in apply_filters(lessons, LessonFilters(client="Acme"))] == ["l-4"]
    assert [l.id for l in apply_filters(lessons, LessonFilters(client="ACME CORP"))] == ["l-1", "l-3"]


def test_pagination():
    items = list(range(23))

    assert page_count(23) == 3
    assert page_count(0) == 1
    assert paginate(items, 3) == [20, 21, 22]
    assert paginate(items, 99) == [20, 21, 22]
    assert paginate(items, 0) == list(range(10))


# =====================================================
# KPIs
# =====================================================
def test_kpis_use_the_90_day_window():
    kpi = compute_kpis(make_lessons(), now=NOW)

    assert kpi["total"] == 2
    assert kpi["avg_satisfaction"] == 4.0
    assert kpi["budget_counts"] == {"under": 0, "on": 1, "over": 1}
    assert kpi["timeline_counts"] == {"early": 0, "on_time": 1, "delayed": 1}
    assert kpi["revenue"] == 1200.0
    assert [l.id for l in kpi["recent"]] == ["l-1", "l-2", "l-3"]


def test_kpis_of_nothing():
    kpi = compute_kpis([], now=NOW)

    assert kpi["total"] == 0
    assert kpi["avg_satisfaction"] is None
    assert kpi["revenue"] == 0
    assert kpi["recent"] == []


def test_satisfaction_distribution_has_every_rating():
    dist = satisfaction_distribution(make_lessons())

    assert list(dist["rating"]) == [1, 2, 3, 4, 5]
    assert list(dist["count"]) == [0, 0, 1, 1, 1]


# =====================================================
# Exports / rows / routes
# =====================================================
def test_excel_export_is_xlsx():
    data = excel_bytes(make_lessons())

    # xlsx files are zip archives
    assert data[:2] == b"PK"
    assert len(data) > 1000


def test_csv_export_has_header():
    text = csv_bytes(make_lessons()).decode("utf-8")
    assert text.splitlines()[0].startswith("project_name,role,client")


def test_lesson_from_row_with_joined_client():
    row = {
        "id": "l-1",
        "user_id": "u-1",
        "project_name": "Website revamp",
        "client_id": "c-1",
        "client": {"id": "c-1", "name": "Acme Corp", "user_id": "u-1"},
        "satisfaction_rating": 4,
        "scope_changes": None,
        "created_at": "2025-09-01T10:00:00+00:00",
    }

    lesson = Lesson.from_row(row)

    assert lesson.client_name == "Acme Corp"
    assert lesson.scope_changes is False
    assert lesson.created_at.year == 2025
    assert Lesson.from_row({"id": "l-2", "client": None}).client is None


def test_routes_normalize():
    assert normalize_route(None) == "/"
    assert normalize_route("lessons") == "/lessons"
    assert normalize_route("/auth/reset") == "/auth/reset"
    assert normalize_route("/admin") == "/"
