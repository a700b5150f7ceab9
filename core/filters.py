# core/filters.py
from dataclasses import dataclass, field
from typing import Optional

from core.models import Lesson

ITEMS_PER_PAGE = 10


@dataclass
class LessonFilters:
    search: str = ""
    role: str = ""
    client: str = ""
    satisfaction: list[int] = field(default_factory=list)
    budget_status: list[str] = field(default_factory=list)
    timeline_status: list[str] = field(default_factory=list)
    scope_changes: Optional[bool] = None

    def is_empty(self) -> bool:
        return self == LessonFilters()


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in (haystack or "").lower()


def matches(lesson: Lesson, filters: LessonFilters) -> bool:
    search = filters.search.strip()
    if search and not (
        _contains(lesson.project_name, search)
        or _contains(lesson.role, search)
        or _contains(lesson.client_name, search)
    ):
        return False

    if filters.role.strip() and not _contains(lesson.role, filters.role.strip()):
        return False

    # exact client name, case-insensitive
    client = filters.client.strip().lower()
    if client and (lesson.client_name or "").strip().lower() != client:
        return False

    if filters.satisfaction and lesson.satisfaction_rating not in filters.satisfaction:
        return False

    if filters.budget_status and lesson.budget_status not in filters.budget_status:
        return False

    if filters.timeline_status and lesson.timeline_status not in filters.timeline_status:
        return False

    if filters.scope_changes is not None and lesson.scope_changes != filters.scope_changes:
        return False

    return True


def apply_filters(lessons: list[Lesson], filters: LessonFilters) -> list[Lesson]:
    return [l for l in lessons if matches(l, filters)]


def page_count(total: int, per_page: int = ITEMS_PER_PAGE) -> int:
    return max(1, -(-total // per_page))


def paginate(items: list, page: int, per_page: int = ITEMS_PER_PAGE) -> list:
    """
    1-based page; out-of-range pages are clamped.
    """
    page = min(max(1, page), page_count(len(items), per_page))
    start = (page - 1) * per_page
    return items[start:start + per_page]
