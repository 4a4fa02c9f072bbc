"""In-app notification schemas."""
from datetime import datetime
from typing import Optional

from pydantic import Field

from waitify.schemas.base import BaseSchema, IDSchema


class NotificationCreate(BaseSchema):
    user_id: str
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    type: str = "general"
    is_read: bool = False


class NotificationResponse(IDSchema):
    user_id: str
    title: str
    message: str
    type: str
    is_read: bool = False
    created_at: Optional[datetime] = None
