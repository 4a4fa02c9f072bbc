"""Error taxonomy.

Every error carries a short ``title`` and a human readable ``description`` so
that the HTTP layer can render it the same way the dashboard renders toasts.
"""
from typing import Optional


class WaitifyError(Exception):
    """Base class for all application errors."""

    status_code: int = 500
    title: str = "Error"

    def __init__(self, description: str, title: Optional[str] = None):
        super().__init__(description)
        self.description = description
        if title is not None:
            self.title = title

    def to_dict(self):
        return {
            "title": self.title,
            "description": self.description,
            "variant": "destructive",
        }


class InvalidInputError(WaitifyError):
    """Missing or malformed input, detected before any remote call."""

    status_code = 400
    title = "Missing Information"


class MissingContactError(WaitifyError):
    """The customer has no usable contact method for the requested action."""

    status_code = 422
    title = "No Contact Method"


class TransitionNotAllowedError(WaitifyError):
    """The action is not available from the entry's current status."""

    status_code = 409
    title = "Action Not Allowed"


class NotFoundError(WaitifyError):
    status_code = 404
    title = "Not Found"


class LimitExceededError(WaitifyError):
    """A subscription plan limit would be exceeded."""

    status_code = 403
    title = "Plan Limit Reached"


class RemoteOperationError(WaitifyError):
    """The hosted backend (database or edge function) rejected or failed a call."""

    status_code = 502


class NotificationDispatchError(RemoteOperationError):
    """Sending a notification failed. Any status already written is kept."""
