"""Waitify backend: waitlist lifecycle and floor plan editor."""

__version__ = "1.0.0"
