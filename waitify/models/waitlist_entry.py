"""Waitlist entry model for business waitlists using Supabase."""
from enum import Enum
from typing import Optional, Dict, Any

from waitify.models.base import SupabaseModel
from waitify.models.profile import Profile


class WaitlistStatus(str, Enum):
    """Waitlist entry status enumeration."""
    WAITING = "waiting"
    NOTIFIED = "notified"
    SEATED = "seated"
    CANCELLED = "cancelled"


class WaitlistEntry(SupabaseModel):
    """A customer's place in a business's queue."""
    table_name = "waitlist_entries"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id = kwargs.get('id')
        self.waitlist_id = kwargs.get('waitlist_id')
        self.user_id = kwargs.get('user_id')  # None for guest entries
        self.position = kwargs.get('position')
        self.status = WaitlistStatus(kwargs.get('status') or WaitlistStatus.WAITING)
        self.estimated_wait_time = kwargs.get('estimated_wait_time')
        self.notes = kwargs.get('notes')
        self.created_at = kwargs.get('created_at')
        self.updated_at = kwargs.get('updated_at')
        # Expanded via the user_id foreign key; read-only from here
        self.profiles: Optional[Dict[str, Any]] = kwargs.get('profiles')
        # Expanded via waitlist_id on the customer's own entries
        self.waitlists: Optional[Dict[str, Any]] = kwargs.get('waitlists')

    @property
    def profile(self) -> Optional[Profile]:
        return Profile.from_dict(self.profiles) if self.profiles else None

    @property
    def customer_name(self) -> str:
        return self.profile.display_name if self.profile else "Customer"

    @property
    def phone_number(self) -> str:
        return (self.profiles or {}).get('phone_number') or ""

    @property
    def email(self) -> str:
        return (self.profiles or {}).get('email') or ""

    def __repr__(self):
        return f"<WaitlistEntry {self.id} #{self.position} {self.status.value}>"
