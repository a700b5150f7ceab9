from typing import Optional

from auth.db import execute, fetch_one
from auth.models import Profile, ROLES


def get_profile(user_id: str) -> Optional[Profile]:
    row = fetch_one(
        "SELECT * FROM profiles WHERE id = %s LIMIT 1",
        (user_id,)
    )
    return Profile.from_row(row) if row else None


def update_profile_role(profile_id: str, role: str) -> None:
    if role not in ROLES:
        raise ValueError("Invalid role")

    execute(
        "UPDATE profiles SET role = %s WHERE id = %s",
        (role, profile_id)
    )
