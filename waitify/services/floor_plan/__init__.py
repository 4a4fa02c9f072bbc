"""Floor plan editor."""
from .editor import (
    CLOCKWISE,
    COUNTERCLOCKWISE,
    EditorSettings,
    FloorPlanEditor,
    deserialize_items,
    serialize_items,
)
from .pointer import DragGesture, PointerEvents
from .sessions import FloorPlanSessionRegistry, build_storage_factory
from .storage import (
    FloorPlanStorage,
    MemoryFloorPlanStorage,
    RedisFloorPlanStorage,
    storage_key,
)

__all__ = [
    "CLOCKWISE",
    "COUNTERCLOCKWISE",
    "EditorSettings",
    "FloorPlanEditor",
    "deserialize_items",
    "serialize_items",
    "DragGesture",
    "PointerEvents",
    "FloorPlanSessionRegistry",
    "build_storage_factory",
    "FloorPlanStorage",
    "MemoryFloorPlanStorage",
    "RedisFloorPlanStorage",
    "storage_key",
]
