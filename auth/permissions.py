# auth/permissions.py
"""
Feature gating for the current user.

Two independent axes are read from the profile:

- subscription_tier (free < team < business < enterprise) gates product
  features: exports, advanced analytics, custom dashboards and AI.
- role (basic_user / power_user / admin) gates the coarse premium flag and
  admin tooling.

Both evaluators are pure and memoised on (profile, loading), so the same
inputs always give back the same object.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from auth.models import Profile, TIERS


# =====================================================
# Tier axis
# =====================================================
TIER_HIERARCHY = TIERS

EXPORTS_TIER = "team"
ADVANCED_ANALYTICS_TIER = "business"
CUSTOM_DASHBOARDS_TIER = "business"
AI_TIER = "enterprise"


@dataclass(frozen=True)
class FeatureAccess:
    tier: Optional[str]
    can_access_exports: bool
    can_access_advanced_analytics: bool
    can_access_custom_dashboards: bool
    can_access_ai: bool
    is_loading: bool


def tier_rank(tier: Optional[str]) -> int:
    """
    Position in the hierarchy. Unknown or missing tiers rank as free.
    """
    if tier in TIER_HIERARCHY:
        return TIER_HIERARCHY.index(tier)
    return 0


def meets_minimum_tier(tier: Optional[str], required: str) -> bool:
    return tier_rank(tier) >= tier_rank(required)


_NO_ACCESS_LOADING = FeatureAccess(
    tier=None,
    can_access_exports=False,
    can_access_advanced_analytics=False,
    can_access_custom_dashboards=False,
    can_access_ai=False,
    is_loading=True,
)

_NO_ACCESS_ANONYMOUS = FeatureAccess(
    tier="free",
    can_access_exports=False,
    can_access_advanced_analytics=False,
    can_access_custom_dashboards=False,
    can_access_ai=False,
    is_loading=False,
)


@lru_cache(maxsize=64)
def resolve_feature_access(profile: Optional[Profile], loading: bool) -> FeatureAccess:
    if loading:
        return _NO_ACCESS_LOADING

    if profile is None:
        return _NO_ACCESS_ANONYMOUS

    tier = profile.subscription_tier if profile.subscription_tier in TIER_HIERARCHY else "free"

    return FeatureAccess(
        tier=tier,
        can_access_exports=meets_minimum_tier(tier, EXPORTS_TIER),
        can_access_advanced_analytics=meets_minimum_tier(tier, ADVANCED_ANALYTICS_TIER),
        can_access_custom_dashboards=meets_minimum_tier(tier, CUSTOM_DASHBOARDS_TIER),
        can_access_ai=meets_minimum_tier(tier, AI_TIER),
        is_loading=False,
    )


def tier_display_name(tier: Optional[str]) -> str:
    return {
        "free": "Free",
        "team": "Team",
        "business": "Business",
        "enterprise": "Enterprise",
    }.get(tier, "Free")


def tier_features(tier: Optional[str]) -> dict:
    """
    Plan limits shown on upgrade prompts. Enterprise has no numeric caps.
    """
    if tier == "team":
        return {
            "exports": True,
            "advanced_analytics": False,
            "custom_dashboards": False,
            "ai_features": False,
            "max_users": 10,
            "max_dashboards": 5,
        }

    if tier == "business":
        return {
            "exports": True,
            "advanced_analytics": True,
            "custom_dashboards": True,
            "ai_features": False,
            "max_users": 50,
            "max_dashboards": 25,
        }

    if tier == "enterprise":
        return {
            "exports": True,
            "advanced_analytics": True,
            "custom_dashboards": True,
            "ai_features": True,
        }

    return {
        "exports": False,
        "advanced_analytics": False,
        "custom_dashboards": False,
        "ai_features": False,
        "max_users": 1,
        "max_dashboards": 3,
    }


# =====================================================
# Role axis
# =====================================================
@dataclass(frozen=True)
class RolePermissions:
    tier: str  # free | paid | admin
    can_export: bool
    can_access_premium_features: bool
    is_loading: bool


@lru_cache(maxsize=64)
def resolve_role_permissions(profile: Optional[Profile], loading: bool) -> RolePermissions:
    if loading:
        return RolePermissions("free", False, False, is_loading=True)

    if profile is None:
        return RolePermissions("free", False, False, is_loading=False)

    if profile.role == "admin":
        return RolePermissions("admin", True, True, is_loading=False)

    if profile.role == "power_user":
        return RolePermissions("paid", True, True, is_loading=False)

    return RolePermissions("free", False, False, is_loading=False)


def role_tier_display_name(tier: str) -> str:
    return {"free": "Free", "paid": "Power User", "admin": "Admin"}.get(tier, "Free")


# =====================================================
# Both axes together
# =====================================================
@dataclass(frozen=True)
class Capabilities:
    features: FeatureAccess
    role: RolePermissions

    @property
    def is_loading(self) -> bool:
        return self.features.is_loading

    @property
    def is_admin(self) -> bool:
        return self.role.tier == "admin"


def resolve_capabilities(profile: Optional[Profile], loading: bool) -> Capabilities:
    return Capabilities(
        features=resolve_feature_access(profile, loading),
        role=resolve_role_permissions(profile, loading),
    )
