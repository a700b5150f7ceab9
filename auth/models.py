from dataclasses import dataclass, field
from typing import Optional

ROLES = ("basic_user", "power_user", "admin")
TIERS = ("free", "team", "business", "enterprise")


@dataclass(frozen=True)
class Profile:
    id: str
    role: str                         # basic_user | power_user | admin
    subscription_tier: Optional[str]  # free | team | business | enterprise
    email: str = ""
    first_name: str = ""
    last_name: str = ""

    @property
    def display_name(self) -> str:
        full = f"{self.first_name} {self.last_name}".strip()
        if full:
            return full
        return self.email.split("@")[0]

    @classmethod
    def from_row(cls, row: dict) -> "Profile":
        role = row.get("role")
        return cls(
            id=str(row["id"]),
            role=role if role in ROLES else "basic_user",
            subscription_tier=row.get("subscription_tier") or None,
            email=(row.get("email") or "").strip(),
            first_name=(row.get("first_name") or "").strip(),
            last_name=(row.get("last_name") or "").strip(),
        )


@dataclass(frozen=True)
class User:
    id: str
    email: str = ""
    user_metadata: dict = field(default_factory=dict, hash=False, compare=False)

    @classmethod
    def from_api(cls, data: dict) -> "User":
        return cls(
            id=str(data["id"]),
            email=data.get("email") or "",
            user_metadata=data.get("user_metadata") or {},
        )


@dataclass
class Session:
    access_token: str
    refresh_token: str
    expires_at: int  # epoch seconds
    user: User

    @classmethod
    def from_api(cls, data: dict, now: int) -> "Session":
        expires_at = data.get("expires_at")
        if not expires_at:
            expires_at = now + int(data.get("expires_in") or 3600)
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token") or "",
            expires_at=int(expires_at),
            user=User.from_api(data["user"]),
        )
