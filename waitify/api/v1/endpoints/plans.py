"""Subscription plan limits."""
from dataclasses import asdict
from typing import Any, Dict

from fastapi import APIRouter, Depends

from waitify.config.database import get_supabase_client
from waitify.core.dependencies import get_current_user
from waitify.models.profile import Profile
from waitify.services import plans

router = APIRouter()


@router.get("/current")
async def get_current_plan(
    current_user: Profile = Depends(get_current_user),
    supabase=Depends(get_supabase_client),
) -> Dict[str, Any]:
    """The caller's active plan and its feature limits (-1 is unlimited)."""
    plan_id = await plans.get_active_plan_id(supabase, current_user.id)
    return {
        "plan_id": plan_id or "free",
        "limits": asdict(plans.get_feature_limits(plan_id)),
    }


@router.get("/{plan_id}")
async def get_plan_limits(plan_id: str) -> Dict[str, Any]:
    limits = plans.get_feature_limits(plan_id)
    return {
        "plan_id": plan_id if plan_id in plans.PLAN_LIMITS else "free",
        "limits": asdict(limits),
        "descriptions": {
            feature: plans.get_limit_description(feature, plan_id) for feature in plans.NUMERIC_LIMITS
        },
    }
