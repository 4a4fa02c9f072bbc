"""In-app notification model."""
from waitify.models.base import SupabaseModel


class Notification(SupabaseModel):
    table_name = "notifications"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id = kwargs.get('id')
        self.user_id = kwargs.get('user_id')
        self.title = kwargs.get('title')
        self.message = kwargs.get('message')
        self.type = kwargs.get('type')
        self.is_read = kwargs.get('is_read', False)
        self.created_at = kwargs.get('created_at')
