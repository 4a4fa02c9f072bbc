"""Key-value storage for floor plans.

Floor plans live on the "device" rather than in Supabase: one serialized item
array per location, stored under ``floorPlan-<locationName>``.
"""
from abc import ABC, abstractmethod
from typing import Dict, Optional
import logging

import redis

from waitify.config.settings import settings

logger = logging.getLogger(__name__)


def storage_key(location_name: str, prefix: Optional[str] = None) -> str:
    return f"{prefix if prefix is not None else settings.FLOOR_PLAN_KEY_PREFIX}{location_name}"


class FloorPlanStorage(ABC):
    """Minimal localStorage-like interface."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        ...


class MemoryFloorPlanStorage(FloorPlanStorage):
    """Process-local storage, used in development and tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class RedisFloorPlanStorage(FloorPlanStorage):
    """Floor plan storage backed by redis string keys."""

    def __init__(self, client: redis.Redis, namespace: str = ""):
        self.client = client
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}{key}"

    def get_item(self, key: str) -> Optional[str]:
        value = self.client.get(self._key(key))
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def set_item(self, key: str, value: str) -> None:
        self.client.set(self._key(key), value)
        logger.debug("Stored floor plan under %s", self._key(key))

    def remove_item(self, key: str) -> None:
        self.client.delete(self._key(key))
