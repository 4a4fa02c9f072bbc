"""In-app notifications stored in the ``notifications`` table."""
from typing import List
import logging

from waitify.core.exceptions import RemoteOperationError
from waitify.models.notification import Notification
from waitify.utils.supabase_helpers import (
    safe_supabase_delete,
    safe_supabase_insert,
    safe_supabase_select,
    safe_supabase_update,
)

logger = logging.getLogger(__name__)

TABLE = "notifications"


class NotificationService:
    """Create and read in-app notifications for a user."""

    def __init__(self, supabase):
        self.supabase = supabase

    async def create_notification(
        self,
        user_id: str,
        title: str,
        message: str,
        type: str,
        is_read: bool = False,
    ) -> Notification:
        row = await safe_supabase_insert(self.supabase, TABLE, {
            "user_id": user_id,
            "title": title,
            "message": message,
            "type": type,
            "is_read": is_read,
        })
        return Notification.from_dict(row)

    async def get_user_notifications(self, user_id: str) -> List[Notification]:
        rows = await safe_supabase_select(
            self.supabase, TABLE,
            filters={"user_id": user_id},
            order_by="created_at",
            ascending=False,
        )
        return [Notification.from_dict(row) for row in rows]

    async def mark_as_read(self, notification_id: str, user_id: str) -> Notification:
        """Mark one of ``user_id``'s notifications read; other users' rows are not found."""
        row = await safe_supabase_update(
            self.supabase, TABLE, {"is_read": True}, "id", notification_id,
            filters={"user_id": user_id},
        )
        return Notification.from_dict(row)

    async def mark_all_as_read(self, user_id: str) -> List[Notification]:
        try:
            response = (
                self.supabase.table(TABLE)
                .update({"is_read": True})
                .eq("user_id", user_id)
                .eq("is_read", False)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to mark notifications read for {user_id}: {e}")
            raise RemoteOperationError("Failed to update notifications") from e
        return [Notification.from_dict(row) for row in response.data or []]

    async def delete_notification(self, notification_id: str, user_id: str) -> bool:
        await safe_supabase_delete(self.supabase, TABLE, "id", notification_id, filters={"user_id": user_id})
        return True
