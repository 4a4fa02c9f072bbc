"""Profile model for Supabase operations."""
import enum
from typing import Optional

from waitify.models.base import SupabaseModel


class ProfileRole(str, enum.Enum):
    CUSTOMER = "customer"
    BUSINESS = "business"
    ADMIN = "admin"


class Profile(SupabaseModel):
    """
    A row of the ``profiles`` table.

    Business owners and customers share this table; for an owner the profile
    id doubles as the ``business_id`` of everything the business owns.
    """
    table_name = "profiles"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id = kwargs.get('id')
        self.username = kwargs.get('username')
        self.first_name = kwargs.get('first_name')
        self.last_name = kwargs.get('last_name')
        self.phone_number = kwargs.get('phone_number')
        self.email = kwargs.get('email')
        self.role = kwargs.get('role', ProfileRole.CUSTOMER.value)
        self.business_name = kwargs.get('business_name')
        self.business_type = kwargs.get('business_type')

    @property
    def display_name(self) -> str:
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or "Customer"

    @property
    def is_business(self) -> bool:
        return self.role in (ProfileRole.BUSINESS.value, ProfileRole.ADMIN.value)

    def __repr__(self):
        return f"<Profile {self.id} ({self.role})>"
