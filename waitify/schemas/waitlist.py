"""Waitlist schemas for API validation."""
from typing import List, Optional

from pydantic import ConfigDict, Field, field_validator

from waitify.models.waitlist_entry import WaitlistEntry, WaitlistStatus
from waitify.schemas.base import BaseSchema, IDSchema, Notice, TimestampSchema
from waitify.services.notifications.dispatcher import NotificationChannel
from waitify.services.waitlist.transitions import EntryAction, available_actions


class WaitlistBase(BaseSchema):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    max_capacity: Optional[int] = Field(None, ge=1)
    is_active: bool = True


class WaitlistCreate(WaitlistBase):
    """Create new waitlist."""
    pass


class WaitlistUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    max_capacity: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None


class WaitlistResponse(WaitlistBase, IDSchema, TimestampSchema):
    business_id: str
    is_active: Optional[bool] = True

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "4d1c0d3e-7d4f-4a43-9d4c-1f7f3c8e1a11",
                "business_id": "a3c2f9b0-0c5e-4f0b-8f7e-2d9c1b6e5a44",
                "name": "Dinner",
                "description": "Walk-in queue",
                "max_capacity": 40,
                "is_active": True,
            }
        },
    )


class CustomerProfile(BaseSchema):
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None


class WaitlistSummary(BaseSchema):
    """The waitlist an entry belongs to, with its business name."""
    name: Optional[str] = None
    description: Optional[str] = None
    business_id: Optional[str] = None
    business_name: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "WaitlistSummary":
        return cls(
            name=row.get("name"),
            description=row.get("description"),
            business_id=row.get("business_id"),
            business_name=(row.get("profiles") or {}).get("business_name"),
        )


class WaitlistEntryCreate(BaseSchema):
    """Join a waitlist. Guests omit ``user_id``."""
    user_id: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=2000)
    estimated_wait_time: Optional[int] = Field(None, ge=0)  # minutes


class WaitlistEntryUpdate(BaseSchema):
    estimated_wait_time: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = Field(None, max_length=2000)


class StatusUpdate(BaseSchema):
    status: WaitlistStatus


class SmsNotificationRequest(BaseSchema):
    message: str = Field(..., min_length=1, max_length=1600)


class EmailNotificationRequest(BaseSchema):
    subject: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)


class NotificationRequest(BaseSchema):
    message: str = Field(..., min_length=1)
    channel: Optional[NotificationChannel] = None
    subject: Optional[str] = None

    @field_validator('subject')
    @classmethod
    def strip_subject(cls, v):
        return v.strip() if v else v


class WaitlistEntryResponse(IDSchema, TimestampSchema):
    waitlist_id: str
    user_id: Optional[str] = None
    position: Optional[int] = None
    status: WaitlistStatus
    estimated_wait_time: Optional[int] = None
    notes: Optional[str] = None
    customer_name: str = "Customer"
    profiles: Optional[CustomerProfile] = None
    waitlists: Optional[WaitlistSummary] = None
    available_actions: List[EntryAction] = []

    @classmethod
    def from_entry(cls, entry: WaitlistEntry) -> "WaitlistEntryResponse":
        return cls(
            id=entry.id,
            waitlist_id=entry.waitlist_id,
            user_id=entry.user_id,
            position=entry.position,
            status=entry.status,
            estimated_wait_time=entry.estimated_wait_time,
            notes=entry.notes,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
            customer_name=entry.customer_name,
            profiles=CustomerProfile(**entry.profiles) if entry.profiles else None,
            waitlists=WaitlistSummary.from_row(entry.waitlists) if entry.waitlists else None,
            available_actions=sorted(
                available_actions(entry.status, has_phone=bool(entry.phone_number)),
                key=lambda action: action.value,
            ),
        )


class EntryActionResponse(BaseSchema):
    notice: Notice
    entry: Optional[WaitlistEntryResponse] = None


class CallResponse(BaseSchema):
    notice: Notice
    dial_uri: str
    entry: WaitlistEntryResponse
