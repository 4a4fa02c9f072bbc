"""Shared schema bases."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base for API schemas; accepts model objects as input."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class IDSchema(BaseSchema):
    id: str


class TimestampSchema(BaseSchema):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Notice(BaseModel):
    """Toast-style message returned by mutating endpoints."""
    title: str
    description: str
    variant: str = "default"
