"""FastAPI dependencies: authenticated profile, business context, services."""
from functools import lru_cache
from typing import Optional
import logging

from fastapi import Depends, Header, HTTPException, status

from waitify.config.database import get_supabase_client, get_supabase_service_client
from waitify.core.exceptions import NotFoundError
from waitify.models.profile import Profile
from waitify.services.floor_plan.sessions import FloorPlanSessionRegistry, build_storage_factory
from waitify.services.notifications.notification_service import NotificationService
from waitify.services.waitlist.lifecycle import WaitlistLifecycleManager
from waitify.services.waitlist.waitlist_service import WaitlistService

logger = logging.getLogger(__name__)


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return authorization.split("Bearer ")[1]


async def get_current_user(
    authorization: Optional[str] = Header(None),
    supabase=Depends(get_supabase_client),
) -> Profile:
    """
    Resolve the caller's profile. Token verification is delegated to
    Supabase auth.
    """
    token = _bearer_token(authorization)

    try:
        user_response = supabase.auth.get_user(token)
    except Exception as e:
        logger.warning(f"Supabase auth failed: {e}")
        user_response = None

    user = getattr(user_response, "user", None)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        profile_response = supabase.table("profiles").select("*").eq("id", user.id).execute()
    except Exception as e:
        logger.error(f"Failed to load profile for {user.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to load profile",
        )

    profile_data = profile_response.data[0] if profile_response.data else {"id": user.id}
    profile_data.setdefault("email", getattr(user, "email", None))
    return Profile.from_dict(profile_data)


async def get_current_business(current_user: Profile = Depends(get_current_user)) -> Profile:
    """
    The caller as a business owner. The owner's profile id is the business id.
    """
    if not current_user.is_business:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is not associated with any business",
        )
    return current_user


def get_waitlist_service(supabase=Depends(get_supabase_client)) -> WaitlistService:
    return WaitlistService(supabase)


async def get_owned_waitlist_id(
    waitlist_id: str,
    business: Profile = Depends(get_current_business),
    service: WaitlistService = Depends(get_waitlist_service),
) -> str:
    waitlist = await service.get_waitlist(waitlist_id)
    if str(waitlist.business_id) != str(business.id):
        raise NotFoundError("Waitlist not found")
    return waitlist_id


async def get_lifecycle_manager(
    waitlist_id: str = Depends(get_owned_waitlist_id),
    supabase=Depends(get_supabase_client),
    service_client=Depends(get_supabase_service_client),
    service: WaitlistService = Depends(get_waitlist_service),
) -> WaitlistLifecycleManager:
    # In-app notifications are written for other users, which RLS only allows the service role
    manager = WaitlistLifecycleManager(
        supabase,
        waitlist_id,
        service=service,
        notifications=NotificationService(service_client or supabase),
    )
    await manager.load()
    return manager


@lru_cache()
def get_floor_plan_registry() -> FloorPlanSessionRegistry:
    return FloorPlanSessionRegistry(build_storage_factory())
