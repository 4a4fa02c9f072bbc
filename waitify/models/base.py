"""Base model for Supabase rows."""
from typing import Dict, Any


class SupabaseModel:
    """
    Base model for Supabase operations.

    Rows come back from PostgREST as plain dictionaries; subclasses pick the
    columns they care about in ``__init__`` and keep anything else as-is.
    """

    table_name: str = ""

    def __init__(self, **kwargs):
        """Initialize model with data."""
        for key, value in kwargs.items():
            setattr(self, key, value)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SupabaseModel':
        """Create model instance from dictionary."""
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary."""
        return {key: value for key, value in self.__dict__.items() if not key.startswith('_')}

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.to_dict() == other.to_dict()
