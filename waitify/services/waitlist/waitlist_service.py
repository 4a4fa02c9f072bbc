"""Waitlist and waitlist entry persistence."""
from typing import Any, Dict, List, Optional
import logging

from waitify.models.waitlist import Waitlist
from waitify.models.waitlist_entry import WaitlistEntry, WaitlistStatus
from waitify.services import plans
from waitify.utils.supabase_helpers import (
    safe_supabase_delete,
    safe_supabase_insert,
    safe_supabase_select,
    safe_supabase_update,
)

logger = logging.getLogger(__name__)

WAITLISTS = "waitlists"
ENTRIES = "waitlist_entries"

ENTRY_WITH_PROFILE = """
      *,
      profiles:user_id (
        username,
        first_name,
        last_name,
        phone_number,
        email
      )
    """

ENTRY_WITH_WAITLIST = """
      *,
      waitlists:waitlist_id (
        name,
        description,
        business_id,
        profiles:business_id (
          business_name
        )
      )
    """

WAITLIST_WITH_BUSINESS = """
      *,
      profiles:business_id (
        business_name,
        business_type
      )
    """


class WaitlistService:
    """CRUD over the ``waitlists`` and ``waitlist_entries`` tables."""

    def __init__(self, supabase):
        self.supabase = supabase

    # Waitlists (business owners)

    async def create_waitlist(
        self,
        business_id: str,
        name: str,
        description: Optional[str] = None,
        max_capacity: Optional[int] = None,
        is_active: bool = True,
        plan_id: Optional[str] = None,
    ) -> Waitlist:
        existing = await self.get_business_waitlists(business_id)
        plans.ensure_within_limits("max_waitlists", len(existing), plan_id)

        row = await safe_supabase_insert(self.supabase, WAITLISTS, {
            "business_id": business_id,
            "name": name,
            "description": description,
            "max_capacity": max_capacity,
            "is_active": is_active,
        })
        logger.info(f"Created waitlist {row.get('id')} for business {business_id}")
        return Waitlist.from_dict(row)

    async def get_waitlist(self, waitlist_id: str) -> Waitlist:
        rows = await safe_supabase_select(self.supabase, WAITLISTS, filters={"id": waitlist_id}, required=True)
        return Waitlist.from_dict(rows[0])

    async def update_waitlist(self, waitlist_id: str, changes: Dict[str, Any]) -> Waitlist:
        row = await safe_supabase_update(self.supabase, WAITLISTS, changes, "id", waitlist_id)
        return Waitlist.from_dict(row)

    async def delete_waitlist(self, waitlist_id: str) -> bool:
        await safe_supabase_delete(self.supabase, WAITLISTS, "id", waitlist_id)
        return True

    async def get_business_waitlists(self, business_id: str) -> List[Waitlist]:
        rows = await safe_supabase_select(
            self.supabase, WAITLISTS,
            filters={"business_id": business_id},
            order_by="created_at",
            ascending=False,
        )
        return [Waitlist.from_dict(row) for row in rows]

    async def get_available_waitlists(self) -> List[Waitlist]:
        """Active waitlists customers can join, newest first."""
        rows = await safe_supabase_select(
            self.supabase, WAITLISTS, WAITLIST_WITH_BUSINESS,
            filters={"is_active": True},
            order_by="created_at",
            ascending=False,
        )
        return [Waitlist.from_dict(row) for row in rows]

    # Entries

    async def next_position(self, waitlist_id: str) -> int:
        rows = await safe_supabase_select(
            self.supabase, ENTRIES, "position",
            filters={"waitlist_id": waitlist_id},
            order_by="position",
            ascending=False,
            limit=1,
        )
        if rows and rows[0].get("position") is not None:
            return rows[0]["position"] + 1
        return 1

    async def add_to_waitlist(
        self,
        waitlist_id: str,
        user_id: Optional[str] = None,
        notes: Optional[str] = None,
        estimated_wait_time: Optional[int] = None,
    ) -> WaitlistEntry:
        """Append an entry at the end of the queue in ``waiting`` status."""
        position = await self.next_position(waitlist_id)
        row = await safe_supabase_insert(self.supabase, ENTRIES, {
            "waitlist_id": waitlist_id,
            "user_id": user_id,
            "notes": notes,
            "estimated_wait_time": estimated_wait_time,
            "status": WaitlistStatus.WAITING.value,
            "position": position,
        })
        logger.info(f"Added entry {row.get('id')} to waitlist {waitlist_id} at position {position}")
        return WaitlistEntry.from_dict(row)

    async def get_entry(self, entry_id: str) -> WaitlistEntry:
        rows = await safe_supabase_select(
            self.supabase, ENTRIES, ENTRY_WITH_PROFILE, filters={"id": entry_id}, required=True
        )
        return WaitlistEntry.from_dict(rows[0])

    async def update_waitlist_entry(self, entry_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        payload = {k: (v.value if isinstance(v, WaitlistStatus) else v) for k, v in changes.items()}
        return await safe_supabase_update(self.supabase, ENTRIES, payload, "id", entry_id)

    async def remove_from_waitlist(self, entry_id: str) -> bool:
        await safe_supabase_delete(self.supabase, ENTRIES, "id", entry_id)
        return True

    async def get_waitlist_entries(self, waitlist_id: str) -> List[WaitlistEntry]:
        rows = await safe_supabase_select(
            self.supabase, ENTRIES, ENTRY_WITH_PROFILE,
            filters={"waitlist_id": waitlist_id},
            order_by="position",
        )
        return [WaitlistEntry.from_dict(row) for row in rows]

    async def get_user_waitlist_entries(self, user_id: str) -> List[WaitlistEntry]:
        rows = await safe_supabase_select(
            self.supabase, ENTRIES, ENTRY_WITH_WAITLIST,
            filters={"user_id": user_id},
            order_by="created_at",
            ascending=False,
        )
        return [WaitlistEntry.from_dict(row) for row in rows]
