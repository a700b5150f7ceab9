from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import pandas as pd

BUDGET_STATUSES = ("under", "on", "over")
TIMELINE_STATUSES = ("early", "on_time", "delayed")


def _to_datetime(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    try:
        return pd.to_datetime(value, utc=True).to_pydatetime()
    except (ValueError, TypeError):
        return None


@dataclass(frozen=True)
class Client:
    id: str
    name: str
    user_id: Optional[str] = None
    logo_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict) -> "Client":
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            user_id=str(row["user_id"]) if row.get("user_id") else None,
            logo_url=row.get("logo_url"),
            created_at=_to_datetime(row.get("created_at")),
        )


@dataclass(frozen=True)
class Lesson:
    id: str
    user_id: str
    project_name: str
    role: str = ""
    client_id: Optional[str] = None
    client: Optional[Client] = None
    satisfaction_rating: Optional[int] = None  # 1..5
    budget_status: Optional[str] = None        # under | on | over
    timeline_status: Optional[str] = None      # early | on_time | delayed
    scope_changes: bool = False
    change_orders_revenue_usd: Optional[float] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def client_name(self) -> str:
        return self.client.name if self.client else ""

    @classmethod
    def from_row(cls, row: dict) -> "Lesson":
        client = row.get("client")
        rating = row.get("satisfaction_rating")
        revenue = row.get("change_orders_revenue_usd")
        return cls(
            id=str(row["id"]),
            user_id=str(row.get("user_id") or ""),
            project_name=row.get("project_name") or "",
            role=row.get("role") or "",
            client_id=str(row["client_id"]) if row.get("client_id") else None,
            client=Client.from_row(client) if client else None,
            satisfaction_rating=int(rating) if rating is not None else None,
            budget_status=row.get("budget_status"),
            timeline_status=row.get("timeline_status"),
            scope_changes=bool(row.get("scope_changes")),
            change_orders_revenue_usd=float(revenue) if revenue is not None else None,
            notes=row.get("notes"),
            created_at=_to_datetime(row.get("created_at")),
        )
