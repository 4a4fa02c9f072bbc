"""Waitlist model for business queues using Supabase."""
from typing import Optional

from waitify.models.base import SupabaseModel


class Waitlist(SupabaseModel):
    """A named queue owned by a business."""
    table_name = "waitlists"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id = kwargs.get('id')
        self.business_id = kwargs.get('business_id')
        self.name = kwargs.get('name')
        self.description = kwargs.get('description')
        # Soft limit, informational only
        self.max_capacity = kwargs.get('max_capacity')
        self.is_active = kwargs.get('is_active', True)
        self.created_at = kwargs.get('created_at')
        self.updated_at = kwargs.get('updated_at')

    def __repr__(self):
        return f"<Waitlist {self.name} ({self.id})>"
