"""Waitlist entry endpoints: queue listing, status changes, notifications, calls."""
from typing import List

from fastapi import APIRouter, Depends

from waitify.core.dependencies import (
    get_current_user,
    get_lifecycle_manager,
    get_waitlist_service,
)
from waitify.core.exceptions import InvalidInputError, TransitionNotAllowedError
from waitify.models.profile import Profile
from waitify.models.waitlist_entry import WaitlistEntry
from waitify.schemas.base import Notice
from waitify.schemas.waitlist import (
    CallResponse,
    EmailNotificationRequest,
    EntryActionResponse,
    NotificationRequest,
    SmsNotificationRequest,
    StatusUpdate,
    WaitlistEntryCreate,
    WaitlistEntryResponse,
    WaitlistEntryUpdate,
)
from waitify.services.waitlist.lifecycle import WaitlistLifecycleManager
from waitify.services.waitlist.transitions import can_transition
from waitify.services.waitlist.waitlist_service import WaitlistService

router = APIRouter()


def _action_response(entry: WaitlistEntry, title: str, description: str) -> EntryActionResponse:
    return EntryActionResponse(
        notice=Notice(title=title, description=description),
        entry=WaitlistEntryResponse.from_entry(entry),
    )


@router.get("/", response_model=List[WaitlistEntryResponse])
async def get_waitlist_entries(manager: WaitlistLifecycleManager = Depends(get_lifecycle_manager)):
    """Entries of the waitlist ordered by position, with customer profiles."""
    return [WaitlistEntryResponse.from_entry(e) for e in manager.entries]


@router.post("/", response_model=WaitlistEntryResponse)
async def check_in_customer(
    entry_data: WaitlistEntryCreate,
    manager: WaitlistLifecycleManager = Depends(get_lifecycle_manager),
):
    """Check a customer (or guest) in at the end of the queue."""
    entry = await manager.service.add_to_waitlist(manager.waitlist_id, **entry_data.model_dump())
    return WaitlistEntryResponse.from_entry(entry)


@router.post("/join", response_model=WaitlistEntryResponse)
async def join_waitlist(
    waitlist_id: str,
    current_user: Profile = Depends(get_current_user),
    service: WaitlistService = Depends(get_waitlist_service),
):
    """Join an active waitlist as the current user."""
    waitlist = await service.get_waitlist(waitlist_id)
    if waitlist.is_active is False:
        raise InvalidInputError("This waitlist is not accepting new customers", title="Waitlist Closed")
    entry = await service.add_to_waitlist(waitlist_id, user_id=current_user.id)
    return WaitlistEntryResponse.from_entry(entry)


@router.get("/{entry_id}", response_model=WaitlistEntryResponse)
async def get_entry(entry_id: str, manager: WaitlistLifecycleManager = Depends(get_lifecycle_manager)):
    return WaitlistEntryResponse.from_entry(await manager.get_entry(entry_id))


@router.patch("/{entry_id}", response_model=WaitlistEntryResponse)
async def update_entry(
    entry_id: str,
    update_data: WaitlistEntryUpdate,
    manager: WaitlistLifecycleManager = Depends(get_lifecycle_manager),
):
    """Update wait estimate or notes."""
    entry = await manager.get_entry(entry_id)
    changes = update_data.model_dump(exclude_unset=True)
    if changes:
        await manager.service.update_waitlist_entry(entry_id, changes)
        for key, value in changes.items():
            setattr(entry, key, value)
    return WaitlistEntryResponse.from_entry(entry)


@router.put("/{entry_id}/status", response_model=EntryActionResponse)
async def update_status(
    entry_id: str,
    status_update: StatusUpdate,
    manager: WaitlistLifecycleManager = Depends(get_lifecycle_manager),
):
    """Move an entry to a new status allowed by the transition table."""
    entry = await manager.get_entry(entry_id)
    if not can_transition(entry.status, status_update.status):
        raise TransitionNotAllowedError(
            f"Cannot change status from {entry.status.value} to {status_update.status.value}"
        )
    entry = await manager.update_status(entry_id, status_update.status)
    return _action_response(entry, "Status Updated", f"Customer status changed to {entry.status.value}")


@router.post("/{entry_id}/seat", response_model=EntryActionResponse)
async def mark_seated(entry_id: str, manager: WaitlistLifecycleManager = Depends(get_lifecycle_manager)):
    entry = await manager.mark_seated(entry_id)
    return _action_response(entry, "Status Updated", "Customer status changed to seated")


@router.post("/{entry_id}/cancel", response_model=EntryActionResponse)
async def cancel_entry(entry_id: str, manager: WaitlistLifecycleManager = Depends(get_lifecycle_manager)):
    entry = await manager.cancel(entry_id)
    return _action_response(entry, "Status Updated", "Customer status changed to cancelled")


@router.post("/{entry_id}/notify", response_model=EntryActionResponse)
async def send_sms_notification(
    entry_id: str,
    request: SmsNotificationRequest,
    manager: WaitlistLifecycleManager = Depends(get_lifecycle_manager),
):
    """Send an SMS to the customer."""
    entry = await manager.send_sms(entry_id, request.message)
    return _action_response(entry, "Notification Sent", f"Notification sent to {entry.customer_name}")


@router.post("/{entry_id}/email", response_model=EntryActionResponse)
async def email_customer(
    entry_id: str,
    request: EmailNotificationRequest,
    manager: WaitlistLifecycleManager = Depends(get_lifecycle_manager),
):
    """Email the customer; the entry becomes notified."""
    entry = await manager.send_email(entry_id, request.subject, request.message)
    return _action_response(entry, "Email Sent", f"Email sent to {entry.customer_name}")


@router.post("/{entry_id}/notifications", response_model=EntryActionResponse)
async def send_notification(
    entry_id: str,
    request: NotificationRequest,
    manager: WaitlistLifecycleManager = Depends(get_lifecycle_manager),
):
    """Notify over the requested channel, or the first contact method on file."""
    entry = await manager.send_notification(entry_id, request.message, request.channel, request.subject)
    return _action_response(entry, "Notification Sent", f"Notification sent to {entry.customer_name}")


@router.post("/{entry_id}/call", response_model=CallResponse)
async def call_customer(entry_id: str, manager: WaitlistLifecycleManager = Depends(get_lifecycle_manager)):
    """Log the call in the entry's notes and return the dial URI."""
    intent = await manager.call_customer(entry_id)
    entry = await manager.get_entry(entry_id)
    return CallResponse(
        notice=Notice(
            title="Calling Customer",
            description=f"Initiating call to {intent.customer_name} at {intent.phone_number}",
        ),
        dial_uri=intent.uri,
        entry=WaitlistEntryResponse.from_entry(entry),
    )


@router.delete("/{entry_id}", response_model=EntryActionResponse)
async def remove_from_waitlist(
    entry_id: str,
    manager: WaitlistLifecycleManager = Depends(get_lifecycle_manager),
):
    """Delete the entry regardless of status."""
    await manager.remove(entry_id)
    return EntryActionResponse(notice=Notice(title="Removed", description="Customer removed from waitlist"))
