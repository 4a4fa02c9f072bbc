"""Waitlist entry lifecycle: status changes, notifications, calls and removal.

``WaitlistLifecycleManager`` is the state holder for one waitlist screen. It
keeps the loaded entries and only touches them after the backend confirms a
write. Status writes and the notifications that follow them are independent
calls: when a notification fails after a successful write the new status is
kept and ``NotificationDispatchError`` is raised.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Union
import logging

from waitify.config.settings import settings
from waitify.core.exceptions import (
    InvalidInputError,
    MissingContactError,
    NotFoundError,
    NotificationDispatchError,
    RemoteOperationError,
)
from waitify.models.waitlist_entry import WaitlistEntry, WaitlistStatus
from waitify.services.notifications.dispatcher import NotificationChannel, NotificationDispatcher
from waitify.services.notifications.notification_service import NotificationService
from waitify.services.waitlist.transitions import EntryAction, can_transition, ensure_action_allowed
from waitify.services.waitlist.waitlist_service import WaitlistService

logger = logging.getLogger(__name__)

IN_APP_TYPE = "waitlist"


@dataclass
class DialIntent:
    """What the client should open to place a call."""
    phone_number: str
    customer_name: str

    @property
    def uri(self) -> str:
        return f"tel:{self.phone_number}"


def format_call_note(when: datetime) -> str:
    return f"[{when.strftime('%Y-%m-%d %H:%M')}] Called customer"


class WaitlistLifecycleManager:
    """Entry lifecycle for a single waitlist."""

    def __init__(
        self,
        supabase,
        waitlist_id: str,
        service: Optional[WaitlistService] = None,
        dispatcher: Optional[NotificationDispatcher] = None,
        notifications: Optional[NotificationService] = None,
        sms_marks_notified: Optional[bool] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.waitlist_id = waitlist_id
        self.service = service or WaitlistService(supabase)
        self.dispatcher = dispatcher or NotificationDispatcher(supabase)
        self.notifications = notifications or NotificationService(supabase)
        self.sms_marks_notified = (
            settings.SMS_MARKS_NOTIFIED if sms_marks_notified is None else sms_marks_notified
        )
        self.clock = clock
        self.entries: List[WaitlistEntry] = []

    # Local state

    async def load(self) -> List[WaitlistEntry]:
        self.entries = await self.service.get_waitlist_entries(self.waitlist_id)
        return self.entries

    refresh = load

    def _cached(self, entry_id: str) -> Optional[WaitlistEntry]:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    async def get_entry(self, entry_id: str) -> WaitlistEntry:
        entry = self._cached(entry_id)
        if entry is None:
            entry = await self.service.get_entry(entry_id)
            if entry.waitlist_id != self.waitlist_id:
                raise NotFoundError(f"Entry {entry_id} is not on this waitlist")
            self.entries.append(entry)
        return entry

    def _apply(self, entry_id: str, **changes) -> Optional[WaitlistEntry]:
        entry = self._cached(entry_id)
        if entry is not None:
            for key, value in changes.items():
                setattr(entry, key, value)
        return entry

    async def _notify_user(self, entry: WaitlistEntry, title: str, message: str) -> None:
        """In-app notification to the entry's user; guests get none."""
        if not entry.user_id:
            return
        try:
            await self.notifications.create_notification(
                user_id=entry.user_id, title=title, message=message, type=IN_APP_TYPE
            )
        except RemoteOperationError as e:
            logger.error(f"Failed to notify user {entry.user_id} about entry {entry.id}: {e.description}")
            raise NotificationDispatchError("Failed to send notification") from e

    # Status changes

    async def update_status(self, entry_id: str, new_status: Union[WaitlistStatus, str]) -> WaitlistEntry:
        """Persist ``new_status`` and tell the entry's user about it.

        Transition legality is not checked here; callers acting on behalf of a
        user go through ``mark_seated`` / ``cancel`` / the notify paths.
        """
        new_status = WaitlistStatus(new_status)
        entry = await self.get_entry(entry_id)

        await self.service.update_waitlist_entry(entry_id, {"status": new_status})
        self._apply(entry_id, status=new_status)
        logger.info(f"Entry {entry_id} status changed to {new_status.value}")

        await self._notify_user(
            entry,
            "Waitlist Update",
            f"Your waitlist status changed to {new_status.value}",
        )
        return entry

    async def mark_seated(self, entry_id: str) -> WaitlistEntry:
        entry = await self.get_entry(entry_id)
        ensure_action_allowed(entry.status, EntryAction.SEAT)
        return await self.update_status(entry_id, WaitlistStatus.SEATED)

    async def cancel(self, entry_id: str) -> WaitlistEntry:
        entry = await self.get_entry(entry_id)
        ensure_action_allowed(entry.status, EntryAction.CANCEL)
        return await self.update_status(entry_id, WaitlistStatus.CANCELLED)

    # Notifications

    async def send_sms(self, entry_id: str, message: str) -> WaitlistEntry:
        if not message or not message.strip():
            raise InvalidInputError("Please enter a message to send", title="Message Required")

        entry = await self.get_entry(entry_id)
        ensure_action_allowed(entry.status, EntryAction.NOTIFY)
        if not entry.phone_number:
            raise MissingContactError("This customer doesn't have a phone number", title="No Phone Number")

        await self.dispatcher.send_sms(
            user_id=entry.user_id,
            phone_number=entry.phone_number,
            message=message,
            waitlist_id=entry.waitlist_id,
            entry_id=entry.id,
        )

        if self.sms_marks_notified and can_transition(entry.status, WaitlistStatus.NOTIFIED):
            await self.update_status(entry_id, WaitlistStatus.NOTIFIED)
            return entry

        try:
            await self.refresh()
        except RemoteOperationError as e:
            logger.error(f"Error refreshing entries after SMS: {e.description}")
        return self._cached(entry_id) or entry

    async def resolve_email(self, entry: WaitlistEntry) -> Optional[str]:
        """Email from the expanded profile, else from the identity provider."""
        if entry.email:
            return entry.email
        if not entry.user_id:
            return None
        try:
            return await self.dispatcher.lookup_email(
                user_id=entry.user_id, waitlist_id=entry.waitlist_id, entry_id=entry.id
            )
        except NotificationDispatchError as e:
            logger.error(f"Error fetching user email for entry {entry.id}: {e}")
            return None

    async def send_email(self, entry_id: str, subject: str, message: str) -> WaitlistEntry:
        """Email the customer and mark the entry notified."""
        entry = await self.get_entry(entry_id)
        ensure_action_allowed(entry.status, EntryAction.EMAIL)

        email = await self.resolve_email(entry)
        if not email:
            raise MissingContactError(
                "Could not find an email address for this customer", title="No Email Address"
            )
        if not subject or not message:
            raise InvalidInputError("Please provide both subject and message")

        await self.dispatcher.send_email(
            user_id=entry.user_id,
            email=email,
            subject=subject,
            message=message,
            waitlist_id=entry.waitlist_id,
            entry_id=entry.id,
        )

        if can_transition(entry.status, WaitlistStatus.NOTIFIED):
            await self.update_status(entry_id, WaitlistStatus.NOTIFIED)
        return entry

    async def send_notification(
        self,
        entry_id: str,
        message: str,
        channel: Optional[Union[NotificationChannel, str]] = None,
        subject: Optional[str] = None,
    ) -> WaitlistEntry:
        """Send over ``channel``, or the first contact method on file."""
        if channel is None:
            entry = await self.get_entry(entry_id)
            if entry.phone_number:
                channel = NotificationChannel.SMS
            elif entry.email or entry.user_id:
                channel = NotificationChannel.EMAIL
            else:
                raise MissingContactError(
                    "This customer has no phone number or email address on file"
                )

        if NotificationChannel(channel) == NotificationChannel.SMS:
            return await self.send_sms(entry_id, message)
        return await self.send_email(entry_id, subject or "Waitlist update", message)

    # Calls and removal

    async def call_customer(self, entry_id: str) -> DialIntent:
        """Record the call in the entry's notes, then hand back the dial intent."""
        entry = await self.get_entry(entry_id)
        ensure_action_allowed(entry.status, EntryAction.CALL)
        if not entry.phone_number:
            raise MissingContactError("This customer doesn't have a phone number", title="No Phone Number")

        note = format_call_note(self.clock())
        notes = f"{note}\n{entry.notes}" if entry.notes else note
        await self.service.update_waitlist_entry(entry_id, {"notes": notes})
        self._apply(entry_id, notes=notes)

        logger.info(f"Calling customer for entry {entry_id}")
        return DialIntent(phone_number=entry.phone_number, customer_name=entry.customer_name)

    async def remove(self, entry_id: str) -> WaitlistEntry:
        """Hard-delete the entry whatever its status."""
        entry = await self.get_entry(entry_id)
        await self.service.remove_from_waitlist(entry_id)
        self.entries = [e for e in self.entries if e.id != entry_id]
        logger.info(f"Removed entry {entry_id} from waitlist {self.waitlist_id}")

        await self._notify_user(entry, "Removed from Waitlist", "You have been removed from the waitlist")
        return entry
