"""
Database models package.

This file makes it easy to import all models at once.
"""

from .base import SupabaseModel
from .profile import Profile, ProfileRole
from .waitlist import Waitlist
from .waitlist_entry import WaitlistEntry, WaitlistStatus
from .notification import Notification
from .floor_item import (
    FloorItem,
    FloorItemType,
    TableShape,
    TableStatus,
    TableType,
    TABLE_TYPES,
    TABLE_TYPES_BY_ID,
    DEFAULT_TABLE_TYPE,
)

__all__ = [
    "SupabaseModel",
    "Profile",
    "ProfileRole",
    "Waitlist",
    "WaitlistEntry",
    "WaitlistStatus",
    "Notification",
    "FloorItem",
    "FloorItemType",
    "TableShape",
    "TableStatus",
    "TableType",
    "TABLE_TYPES",
    "TABLE_TYPES_BY_ID",
    "DEFAULT_TABLE_TYPE",
]
