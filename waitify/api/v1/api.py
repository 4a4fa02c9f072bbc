"""Main API router."""
from fastapi import APIRouter

from waitify.api.v1.endpoints import floor_plan, notifications, plans, waitlist_entries, waitlists

api_router = APIRouter()

api_router.include_router(
    waitlists.router,
    prefix="/waitlists",
    tags=["Waitlists"]
)

api_router.include_router(
    waitlist_entries.router,
    prefix="/waitlists/{waitlist_id}/entries",
    tags=["Waitlist Entries"]
)

api_router.include_router(
    floor_plan.router,
    prefix="/floor-plans/{location}",
    tags=["Floor Plans"]
)

api_router.include_router(
    notifications.router,
    prefix="/notifications",
    tags=["Notifications"]
)

api_router.include_router(
    plans.router,
    prefix="/plans",
    tags=["Plans"]
)
