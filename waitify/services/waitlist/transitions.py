"""Waitlist status transition table.

The single source of truth for which status changes and which entry actions
are legal. The API uses it both to tell clients which actions to enable and to
reject actions that are not available.
"""
from enum import Enum
from typing import Dict, FrozenSet, Optional, Set, Union

from waitify.core.exceptions import TransitionNotAllowedError
from waitify.models.waitlist_entry import WaitlistStatus


class EntryAction(str, Enum):
    NOTIFY = "notify"  # SMS notification
    EMAIL = "email"
    CALL = "call"
    SEAT = "seat"
    CANCEL = "cancel"
    REMOVE = "remove"


TERMINAL_STATUSES: FrozenSet[WaitlistStatus] = frozenset({WaitlistStatus.SEATED, WaitlistStatus.CANCELLED})

ALLOWED_TRANSITIONS: Dict[WaitlistStatus, FrozenSet[WaitlistStatus]] = {
    WaitlistStatus.WAITING: frozenset({WaitlistStatus.NOTIFIED, WaitlistStatus.SEATED, WaitlistStatus.CANCELLED}),
    WaitlistStatus.NOTIFIED: frozenset({WaitlistStatus.SEATED, WaitlistStatus.CANCELLED}),
    WaitlistStatus.SEATED: frozenset(),
    WaitlistStatus.CANCELLED: frozenset(),
}

# Status each status-changing action moves to
ACTION_TARGETS: Dict[EntryAction, WaitlistStatus] = {
    EntryAction.NOTIFY: WaitlistStatus.NOTIFIED,
    EntryAction.EMAIL: WaitlistStatus.NOTIFIED,
    EntryAction.SEAT: WaitlistStatus.SEATED,
    EntryAction.CANCEL: WaitlistStatus.CANCELLED,
}

StatusLike = Union[WaitlistStatus, str]


def is_terminal(status: StatusLike) -> bool:
    return WaitlistStatus(status) in TERMINAL_STATUSES


def can_transition(current: StatusLike, target: StatusLike) -> bool:
    return WaitlistStatus(target) in ALLOWED_TRANSITIONS[WaitlistStatus(current)]


def status_actions(status: StatusLike) -> Set[EntryAction]:
    """Actions the status alone permits, ignoring contact details."""
    actions = {EntryAction.REMOVE, EntryAction.CALL}
    if not is_terminal(status):
        actions |= {EntryAction.NOTIFY, EntryAction.EMAIL, EntryAction.SEAT, EntryAction.CANCEL}
    return actions


def available_actions(status: StatusLike, has_phone: bool = True) -> Set[EntryAction]:
    """Actions a client may enable for an entry in ``status``.

    Notifying an already-notified entry again is allowed (it re-sends the
    message without a status change). SMS and calls need a phone number;
    calling does not change status, so it stays available on closed
    entries. Removal is always available.
    """
    actions = status_actions(status)
    if not has_phone:
        actions -= {EntryAction.NOTIFY, EntryAction.CALL}
    return actions


def ensure_action_allowed(status: StatusLike, action: EntryAction) -> None:
    if action not in status_actions(status):
        raise TransitionNotAllowedError(
            f"Cannot {action.value} an entry that is {WaitlistStatus(status).value}"
        )


def target_status(action: EntryAction) -> Optional[WaitlistStatus]:
    return ACTION_TARGETS.get(action)
