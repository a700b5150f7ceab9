# auth/db.py
import logging

import psycopg2
from psycopg2.extras import RealDictCursor

from auth.config import get_postgres_url
from auth.errors import BackendError

logger = logging.getLogger(__name__)


def get_connection():
    """
    Connects to the Supabase Postgres and returns rows as dicts.
    """
    try:
        return psycopg2.connect(
            get_postgres_url(),
            cursor_factory=RealDictCursor
        )
    except psycopg2.Error as e:
        logger.error("Database connection failed: %s", e)
        raise BackendError(f"Could not connect to the database: {e}") from e


def fetch_all(sql: str, params: tuple) -> list[dict]:
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(sql, params)
            return [dict(r) for r in cur.fetchall()]
    except psycopg2.Error as e:
        raise BackendError(str(e).strip()) from e
    finally:
        conn.close()


def fetch_one(sql: str, params: tuple) -> dict | None:
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(sql, params)
            row = cur.fetchone()
            return dict(row) if row else None
    except psycopg2.Error as e:
        raise BackendError(str(e).strip()) from e
    finally:
        conn.close()


def execute(sql: str, params: tuple) -> int:
    conn = get_connection()
    try:
        with conn:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return cur.rowcount
    except psycopg2.Error as e:
        raise BackendError(str(e).strip()) from e
    finally:
        conn.close()
