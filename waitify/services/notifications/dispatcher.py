"""Customer notification dispatch through the ``send-notification`` edge function."""
from enum import Enum
from typing import Any, Dict, Optional
import json
import logging

from waitify.config.settings import settings
from waitify.core.exceptions import NotificationDispatchError

logger = logging.getLogger(__name__)


class NotificationChannel(str, Enum):
    SMS = "sms"
    EMAIL = "email"


class DispatchType(str, Enum):
    """The ``type`` field understood by the edge function."""
    WAITLIST = "waitlist"  # SMS
    EMAIL = "email"


LOOKUP_EMAIL_ACTION = "get-user-email"


class NotificationDispatcher:
    """Thin client for the hosted notification function.

    The function sends SMS (``type = "waitlist"``) and email
    (``type = "email"``) and, with ``action = "get-user-email"``, looks a
    customer's email up in the identity provider.
    """

    def __init__(self, supabase, function_name: Optional[str] = None):
        self.supabase = supabase
        self.function_name = function_name or settings.NOTIFICATION_FUNCTION

    def _invoke(self, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.supabase.functions.invoke(
                self.function_name,
                invoke_options={"body": body, "responseType": "json"},
            )
        except Exception as e:
            logger.error(f"Notification function {self.function_name} failed: {e}")
            raise NotificationDispatchError("Failed to send notification") from e

        if isinstance(response, (bytes, str)):
            try:
                response = json.loads(response) if response else {}
            except ValueError:
                response = {}
        return response or {}

    async def send_sms(
        self,
        *,
        user_id: Optional[str],
        phone_number: str,
        message: str,
        waitlist_id: str,
        entry_id: str,
    ) -> Dict[str, Any]:
        logger.info(f"Sending SMS notification for entry {entry_id}")
        return self._invoke({
            "userId": user_id,
            "phoneNumber": phone_number,
            "message": message,
            "waitlistId": waitlist_id,
            "entryId": entry_id,
            "type": DispatchType.WAITLIST.value,
        })

    async def send_email(
        self,
        *,
        user_id: Optional[str],
        email: str,
        subject: str,
        message: str,
        waitlist_id: str,
        entry_id: str,
    ) -> Dict[str, Any]:
        logger.info(f"Sending email notification for entry {entry_id}")
        return self._invoke({
            "userId": user_id,
            "email": email,
            "subject": subject,
            "message": message,
            "waitlistId": waitlist_id,
            "entryId": entry_id,
            "type": DispatchType.EMAIL.value,
        })

    async def lookup_email(self, *, user_id: str, waitlist_id: str, entry_id: str) -> Optional[str]:
        """Resolve a customer's email from the identity provider."""
        result = self._invoke({
            "userId": user_id,
            "waitlistId": waitlist_id,
            "entryId": entry_id,
            "type": DispatchType.EMAIL.value,
            "action": LOOKUP_EMAIL_ACTION,
        })
        return result.get("email") or None
