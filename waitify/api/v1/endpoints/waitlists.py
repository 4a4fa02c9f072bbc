"""Waitlist queue management endpoints."""
from typing import List

from fastapi import APIRouter, Depends

from waitify.config.database import get_supabase_client
from waitify.core.dependencies import (
    get_current_business,
    get_current_user,
    get_owned_waitlist_id,
    get_waitlist_service,
)
from waitify.models.profile import Profile
from waitify.schemas.base import Notice
from waitify.schemas.waitlist import (
    WaitlistCreate,
    WaitlistEntryResponse,
    WaitlistResponse,
    WaitlistUpdate,
)
from waitify.services import plans
from waitify.services.waitlist.waitlist_service import WaitlistService

router = APIRouter()


@router.post("/", response_model=WaitlistResponse)
async def create_waitlist(
    waitlist_data: WaitlistCreate,
    business: Profile = Depends(get_current_business),
    service: WaitlistService = Depends(get_waitlist_service),
    supabase=Depends(get_supabase_client),
):
    """Create a waitlist, within the business's plan limit."""
    plan_id = await plans.get_active_plan_id(supabase, business.id)
    waitlist = await service.create_waitlist(
        business_id=business.id,
        plan_id=plan_id,
        **waitlist_data.model_dump(),
    )
    return WaitlistResponse.model_validate(waitlist)


@router.get("/", response_model=List[WaitlistResponse])
async def get_business_waitlists(
    business: Profile = Depends(get_current_business),
    service: WaitlistService = Depends(get_waitlist_service),
):
    """Waitlists of the current business, newest first."""
    waitlists = await service.get_business_waitlists(business.id)
    return [WaitlistResponse.model_validate(w) for w in waitlists]


@router.get("/available", response_model=List[WaitlistResponse])
async def get_available_waitlists(
    current_user: Profile = Depends(get_current_user),
    service: WaitlistService = Depends(get_waitlist_service),
):
    """Active waitlists customers can join."""
    waitlists = await service.get_available_waitlists()
    return [WaitlistResponse.model_validate(w) for w in waitlists]


@router.get("/me/entries", response_model=List[WaitlistEntryResponse])
async def get_my_entries(
    current_user: Profile = Depends(get_current_user),
    service: WaitlistService = Depends(get_waitlist_service),
):
    """The caller's own waitlist entries, newest first."""
    entries = await service.get_user_waitlist_entries(current_user.id)
    return [WaitlistEntryResponse.from_entry(e) for e in entries]


@router.get("/{waitlist_id}", response_model=WaitlistResponse)
async def get_waitlist(
    waitlist_id: str = Depends(get_owned_waitlist_id),
    service: WaitlistService = Depends(get_waitlist_service),
):
    return WaitlistResponse.model_validate(await service.get_waitlist(waitlist_id))


@router.put("/{waitlist_id}", response_model=WaitlistResponse)
async def update_waitlist(
    update_data: WaitlistUpdate,
    waitlist_id: str = Depends(get_owned_waitlist_id),
    service: WaitlistService = Depends(get_waitlist_service),
):
    waitlist = await service.update_waitlist(waitlist_id, update_data.model_dump(exclude_unset=True))
    return WaitlistResponse.model_validate(waitlist)


@router.delete("/{waitlist_id}", response_model=Notice)
async def delete_waitlist(
    waitlist_id: str = Depends(get_owned_waitlist_id),
    service: WaitlistService = Depends(get_waitlist_service),
):
    await service.delete_waitlist(waitlist_id)
    return Notice(title="Deleted", description="Waitlist deleted")
