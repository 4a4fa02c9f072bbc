"""Subscription plan feature limits."""
from dataclasses import dataclass, replace
from typing import Dict, Optional
import logging

from waitify.core.exceptions import LimitExceededError

logger = logging.getLogger(__name__)

UNLIMITED = -1
NUMERIC_LIMITS = ("max_waitlists", "max_locations", "max_customers_per_day")


@dataclass(frozen=True)
class FeatureLimits:
    max_waitlists: int
    max_locations: int
    max_customers_per_day: int
    has_advanced_analytics: bool = False
    has_sms_notifications: bool = False
    has_email_notifications: bool = True
    has_whitelabel: bool = False
    has_custom_branding: bool = False
    has_api_access: bool = False
    has_priority_support: bool = False


FREE_TIER = FeatureLimits(max_waitlists=1, max_locations=1, max_customers_per_day=50)

PLAN_LIMITS: Dict[str, FeatureLimits] = {
    "basic": replace(FREE_TIER, max_waitlists=3, max_customers_per_day=100),
    "professional": FeatureLimits(
        max_waitlists=10,
        max_locations=3,
        max_customers_per_day=500,
        has_advanced_analytics=True,
        has_sms_notifications=True,
        has_custom_branding=True,
        has_priority_support=True,
    ),
    "enterprise": FeatureLimits(
        max_waitlists=UNLIMITED,
        max_locations=UNLIMITED,
        max_customers_per_day=UNLIMITED,
        has_advanced_analytics=True,
        has_sms_notifications=True,
        has_whitelabel=True,
        has_custom_branding=True,
        has_api_access=True,
        has_priority_support=True,
    ),
}


def get_feature_limits(plan_id: Optional[str]) -> FeatureLimits:
    """Limits for ``plan_id``; no plan or an unknown plan gets the free tier."""
    return PLAN_LIMITS.get(plan_id or "", FREE_TIER)


def has_feature_access(feature: str, plan_id: Optional[str]) -> bool:
    value = getattr(get_feature_limits(plan_id), feature)
    if isinstance(value, bool):
        return value
    return value == UNLIMITED or value > 0


def is_within_limits(feature: str, current_count: int, plan_id: Optional[str]) -> bool:
    if feature not in NUMERIC_LIMITS:
        raise ValueError(f"{feature} is not a numeric limit")
    limit = getattr(get_feature_limits(plan_id), feature)
    return limit == UNLIMITED or current_count < limit


def get_limit_description(feature: str, plan_id: Optional[str]) -> str:
    limit = getattr(get_feature_limits(plan_id), feature)
    return "Unlimited" if limit == UNLIMITED else str(limit)


def ensure_within_limits(feature: str, current_count: int, plan_id: Optional[str]) -> None:
    if not is_within_limits(feature, current_count, plan_id):
        logger.info(f"Plan {plan_id or 'free'} limit reached for {feature} ({current_count})")
        raise LimitExceededError(
            f"Your plan allows {get_limit_description(feature, plan_id)} "
            f"{feature.replace('max_', '').replace('_', ' ')}. Upgrade to add more."
        )


async def get_active_plan_id(supabase, user_id: str) -> Optional[str]:
    """Plan of the user's active subscription, if any."""
    try:
        response = (
            supabase.table("subscriptions")
            .select("plan_id")
            .eq("user_id", user_id)
            .eq("active", True)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.error(f"Failed to load subscription for {user_id}: {e}")
        return None
    rows = response.data or []
    return rows[0].get("plan_id") if rows else None
