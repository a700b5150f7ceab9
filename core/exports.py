# core/exports.py
from io import BytesIO

import pandas as pd

from core.kpis import lessons_frame
from core.models import Lesson

EXCEL_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _export_frame(lessons: list[Lesson]) -> pd.DataFrame:
    df = lessons_frame(lessons).drop(columns=["id"])
    # Excel does not take timezone-aware datetimes
    df["created_at"] = pd.to_datetime(df["created_at"], utc=True).dt.tz_localize(None)
    return df


def excel_bytes(lessons: list[Lesson]) -> bytes:
    bio = BytesIO()
    with pd.ExcelWriter(bio, engine="xlsxwriter") as writer:
        _export_frame(lessons).to_excel(writer, index=False, sheet_name="Lessons")
    bio.seek(0)
    return bio.getvalue()


def csv_bytes(lessons: list[Lesson]) -> bytes:
    return _export_frame(lessons).to_csv(index=False).encode("utf-8")
