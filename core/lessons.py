# core/lessons.py
from auth.db import fetch_all
from core.models import Client, Lesson


def fetch_lessons(user_id: str) -> list[Lesson]:
    """
    Lessons of one user, newest first, each with its client row (or None).
    """
    rows = fetch_all(
        """
        SELECT
            l.*,
            CASE WHEN c.id IS NULL THEN NULL ELSE to_jsonb(c) END AS client
        FROM lessons l
        LEFT JOIN clients c
            ON c.id = l.client_id
        WHERE l.user_id = %s
        ORDER BY l.created_at DESC
        """,
        (user_id,),
    )
    return [Lesson.from_row(r) for r in rows]


def fetch_clients(user_id: str) -> list[Client]:
    rows = fetch_all(
        "SELECT * FROM clients WHERE user_id = %s ORDER BY name",
        (user_id,),
    )
    return [Client.from_row(r) for r in rows]
