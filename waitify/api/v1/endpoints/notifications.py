"""In-app notification endpoints."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from waitify.config.database import get_supabase_client
from waitify.core.dependencies import get_current_user
from waitify.models.profile import Profile
from waitify.schemas.base import Notice
from waitify.schemas.notifications import NotificationCreate, NotificationResponse
from waitify.services.notifications.notification_service import NotificationService

router = APIRouter()


def get_notification_service(supabase=Depends(get_supabase_client)) -> NotificationService:
    return NotificationService(supabase)


@router.get("/", response_model=List[NotificationResponse])
async def get_my_notifications(
    current_user: Profile = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """Notifications of the current user, newest first."""
    notifications = await service.get_user_notifications(current_user.id)
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.post("/", response_model=NotificationResponse)
async def create_notification(
    notification: NotificationCreate,
    current_user: Profile = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """Businesses may notify anyone; customers only themselves."""
    if notification.user_id != current_user.id and not current_user.is_business:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to notify other users",
        )
    created = await service.create_notification(**notification.model_dump())
    return NotificationResponse.model_validate(created)


@router.post("/read-all", response_model=Notice)
async def mark_all_as_read(
    current_user: Profile = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    updated = await service.mark_all_as_read(current_user.id)
    return Notice(title="Notifications", description=f"{len(updated)} notifications marked as read")


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_as_read(
    notification_id: str,
    current_user: Profile = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    notification = await service.mark_as_read(notification_id, current_user.id)
    return NotificationResponse.model_validate(notification)


@router.delete("/{notification_id}", response_model=Notice)
async def delete_notification(
    notification_id: str,
    current_user: Profile = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    await service.delete_notification(notification_id, current_user.id)
    return Notice(title="Deleted", description="Notification deleted")
