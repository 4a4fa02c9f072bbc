"""Per-location editor sessions."""
from collections import OrderedDict
from threading import Lock
from typing import Callable, Dict, Optional, Tuple
import logging

from waitify.config.settings import settings
from waitify.services.floor_plan.editor import FloorPlanEditor
from waitify.services.floor_plan.storage import (
    FloorPlanStorage,
    MemoryFloorPlanStorage,
    RedisFloorPlanStorage,
)

logger = logging.getLogger(__name__)


class FloorPlanSessionRegistry:
    """Keeps live editors per (business, location), least recently used first out.

    Editors are loaded from storage the first time they are requested; their
    in-memory changes only reach storage on an explicit save, so an evicted
    editor's unsaved changes are dropped.
    """

    def __init__(
        self,
        storage_factory: Callable[[str], FloorPlanStorage],
        max_sessions: Optional[int] = None,
    ):
        self._storage_factory = storage_factory
        self._max_sessions = max_sessions or settings.FLOOR_PLAN_MAX_SESSIONS
        self._editors: "OrderedDict[Tuple[str, str], FloorPlanEditor]" = OrderedDict()
        self._lock = Lock()

    def get(self, business_id: str, location_name: str) -> FloorPlanEditor:
        key = (str(business_id), location_name)
        with self._lock:
            editor = self._editors.get(key)
            if editor is not None:
                self._editors.move_to_end(key)
                return editor

            editor = FloorPlanEditor(self._storage_factory(str(business_id)), location_name)
            editor.load()
            self._editors[key] = editor
            logger.info(f"Opened floor plan session {location_name} for business {business_id}")

            while len(self._editors) > self._max_sessions:
                (evicted_business, evicted_location), _ = self._editors.popitem(last=False)
                logger.info(f"Evicted floor plan session {evicted_location} for business {evicted_business}")
            return editor

    def __len__(self) -> int:
        return len(self._editors)


def build_storage_factory(backend: Optional[str] = None) -> Callable[[str], FloorPlanStorage]:
    """Return a factory producing the configured storage for a business."""
    backend = (backend or settings.FLOOR_PLAN_STORAGE).lower()

    if backend == "memory":
        stores: Dict[str, MemoryFloorPlanStorage] = {}

        def memory_factory(business_id: str) -> FloorPlanStorage:
            return stores.setdefault(business_id, MemoryFloorPlanStorage())

        return memory_factory

    if backend == "redis":
        from waitify.config.database import get_redis_client

        def redis_factory(business_id: str) -> FloorPlanStorage:
            return RedisFloorPlanStorage(get_redis_client(), namespace=f"{business_id}:")

        return redis_factory

    raise ValueError(f"Unknown floor plan storage backend: {backend}")
