"""Waitlist queues and the entry lifecycle."""
from .lifecycle import DialIntent, WaitlistLifecycleManager
from .transitions import (
    ALLOWED_TRANSITIONS,
    EntryAction,
    available_actions,
    can_transition,
    ensure_action_allowed,
    is_terminal,
)
from .waitlist_service import WaitlistService

__all__ = [
    "DialIntent",
    "WaitlistLifecycleManager",
    "ALLOWED_TRANSITIONS",
    "EntryAction",
    "available_actions",
    "can_transition",
    "ensure_action_allowed",
    "is_terminal",
    "WaitlistService",
]
