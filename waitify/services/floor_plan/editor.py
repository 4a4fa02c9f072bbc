"""Floor plan editor state holder.

One ``FloorPlanEditor`` per location owns the item collection, the current
selection, the active placement tool and the zoom level. Derived values such
as table numbers are recomputed from the raw collection on every mutation;
there is no separate counter, so numbers are reused after deletions.
"""
from dataclasses import dataclass
from typing import Callable, List, Optional, Union
import json
import logging
import math

from pydantic import ValidationError

from waitify.config.settings import settings
from waitify.core.exceptions import InvalidInputError, NotFoundError
from waitify.models.floor_item import (
    DEFAULT_TABLE_TYPE,
    DOOR_SIZE,
    TABLE_TYPES,
    TABLE_TYPES_BY_ID,
    WALL_SIZE,
    FloorItem,
    FloorItemType,
    TableStatus,
    TableType,
    new_item_id,
)
from waitify.services.floor_plan.pointer import DragGesture, PointerEvents
from waitify.services.floor_plan.storage import FloorPlanStorage, storage_key

logger = logging.getLogger(__name__)

ROTATION_STEP = 45
DUPLICATE_OFFSET = 20

CLOCKWISE = "clockwise"
COUNTERCLOCKWISE = "counterclockwise"


@dataclass
class EditorSettings:
    grid_size: int = 20
    snap_to_grid: bool = False
    show_labels: bool = True


def serialize_items(items: List[FloorItem]) -> str:
    return json.dumps([item.to_storage() for item in items])


def deserialize_items(raw: str) -> List[FloorItem]:
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("floor plan must be a JSON array")
    return [FloorItem.model_validate(entry) for entry in data]


def snap(value: float, grid_size: int) -> float:
    """Round half up to the nearest multiple of ``grid_size``."""
    return math.floor(value / grid_size + 0.5) * grid_size


class FloorPlanEditor:
    """Editable floor plan for a single location."""

    def __init__(
        self,
        storage: FloorPlanStorage,
        location_name: str = "default",
        editor_settings: Optional[EditorSettings] = None,
        events: Optional[PointerEvents] = None,
    ):
        self.storage = storage
        self.location_name = location_name
        self.settings = editor_settings or EditorSettings(grid_size=settings.FLOOR_PLAN_GRID_SIZE)
        self.events = events or PointerEvents()

        self.items: List[FloorItem] = []
        self.selected_item_id: Optional[str] = None
        self.active_tool: Optional[FloorItemType] = None
        self.active_table_type: str = DEFAULT_TABLE_TYPE
        self.zoom: float = 1.0
        self.is_dragging: bool = False
        self._drag: Optional[DragGesture] = None
        self._drag_just_ended: bool = False

    @property
    def storage_key(self) -> str:
        return storage_key(self.location_name)

    @property
    def table_types(self) -> List[TableType]:
        return TABLE_TYPES

    @property
    def table_count(self) -> int:
        return sum(1 for item in self.items if item.is_table)

    @property
    def selected_item(self) -> Optional[FloorItem]:
        if self.selected_item_id is None:
            return None
        return self.find_item(self.selected_item_id)

    def find_item(self, item_id: str) -> Optional[FloorItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def _require_item(self, item_id: str) -> FloorItem:
        item = self.find_item(item_id)
        if item is None:
            raise NotFoundError(f"Floor item {item_id} not found")
        return item

    # Persistence

    def load(self) -> List[FloorItem]:
        """Load the saved layout, starting empty if it cannot be read."""
        self.items = []
        self.selected_item_id = None
        try:
            raw = self.storage.get_item(self.storage_key)
            if raw:
                self.items = deserialize_items(raw)
        except (ValueError, ValidationError) as e:
            logger.error(f"Error loading saved floor plan for {self.location_name}: {e}")
            self.items = []
        except Exception as e:
            logger.error(f"Floor plan storage unavailable for {self.location_name}: {e}")
            self.items = []
        return self.items

    def save(self) -> None:
        """Overwrite the stored layout with the full current collection."""
        self.storage.set_item(self.storage_key, serialize_items(self.items))
        logger.info(f"Saved floor plan {self.location_name} ({len(self.items)} items)")

    def clear(self, confirm: Union[bool, Callable[[], bool]]) -> bool:
        """Empty the plan and drop the stored key once the user confirms."""
        if not self.items:
            return False
        confirmed = confirm() if callable(confirm) else bool(confirm)
        if not confirmed:
            return False
        self.items = []
        self.selected_item_id = None
        self.storage.remove_item(self.storage_key)
        logger.info(f"Cleared floor plan {self.location_name}")
        return True

    # Tools and settings

    def select_tool(self, tool: Optional[Union[FloorItemType, str]]) -> Optional[FloorItemType]:
        """Activate ``tool``; selecting the active tool again deselects it."""
        tool = FloorItemType(tool) if tool is not None else None
        self.active_tool = None if tool is None or tool == self.active_tool else tool
        return self.active_tool

    def set_table_type(self, table_type_id: str) -> None:
        if table_type_id not in TABLE_TYPES_BY_ID:
            raise InvalidInputError(f"Unknown table type '{table_type_id}'")
        self.active_table_type = table_type_id

    def update_settings(self, **changes) -> EditorSettings:
        for key, value in changes.items():
            if value is not None and hasattr(self.settings, key):
                setattr(self.settings, key, value)
        return self.settings

    def zoom_in(self) -> float:
        self.zoom = round(min(self.zoom + settings.FLOOR_PLAN_ZOOM_STEP, settings.FLOOR_PLAN_ZOOM_MAX), 2)
        return self.zoom

    def zoom_out(self) -> float:
        self.zoom = round(max(self.zoom - settings.FLOOR_PLAN_ZOOM_STEP, settings.FLOOR_PLAN_ZOOM_MIN), 2)
        return self.zoom

    # Adding items

    def _append(self, item: FloorItem) -> FloorItem:
        self.items = [*self.items, item]
        self.selected_item_id = item.id
        return item

    def add_table(self, x: float, y: float, table_type_id: str) -> Optional[FloorItem]:
        table_type = TABLE_TYPES_BY_ID.get(table_type_id)
        if table_type is None:
            return None
        return self._append(FloorItem(
            type=FloorItemType.TABLE,
            x=x,
            y=y,
            width=table_type.width,
            height=table_type.height,
            rotation=0,
            table_type=table_type.id,
            capacity=table_type.capacity,
            number=self.table_count + 1,
            shape=table_type.shape,
            status=TableStatus.AVAILABLE,
        ))

    def add_wall(self, x: float, y: float) -> FloorItem:
        width, height = WALL_SIZE
        return self._append(FloorItem(type=FloorItemType.WALL, x=x, y=y, width=width, height=height))

    def add_door(self, x: float, y: float) -> FloorItem:
        width, height = DOOR_SIZE
        return self._append(FloorItem(type=FloorItemType.DOOR, x=x, y=y, width=width, height=height))

    def place(
        self,
        item_type: Union[FloorItemType, str],
        x: float,
        y: float,
        table_type_id: Optional[str] = None,
    ) -> Optional[FloorItem]:
        """Add an item at layout coordinates, snapped to the grid when enabled."""
        item_type = FloorItemType(item_type)
        if self.settings.snap_to_grid:
            x = snap(x, self.settings.grid_size)
            y = snap(y, self.settings.grid_size)

        if item_type == FloorItemType.TABLE:
            return self.add_table(x, y, table_type_id or self.active_table_type)
        if item_type == FloorItemType.WALL:
            return self.add_wall(x, y)
        return self.add_door(x, y)

    def place_item(self, x: float, y: float) -> Optional[FloorItem]:
        """Place an item of the active tool, then drop the tool."""
        if self.active_tool is None:
            return None
        item = self.place(self.active_tool, x, y)
        self.active_tool = None
        return item

    # Clicks

    def item_at(self, x: float, y: float) -> Optional[FloorItem]:
        """Topmost item whose unrotated box contains the layout point."""
        for item in reversed(self.items):
            left, top, right, bottom = item.bounding_box()
            if left <= x <= right and top <= y <= bottom:
                return item
        return None

    def click_item(self, item_id: str) -> FloorItem:
        item = self._require_item(item_id)
        self.selected_item_id = item.id
        return item

    def click_canvas(
        self,
        client_x: float,
        client_y: float,
        origin_x: float = 0,
        origin_y: float = 0,
    ) -> Optional[FloorItem]:
        """Handle a click on the canvas, given client coordinates.

        A click landing on an item selects that item and goes no further.
        Otherwise the active tool places an item at the zoom-independent
        point, or, with no tool, the selection is cleared unless the click
        is the tail of a drag.
        """
        x = (client_x - origin_x) / self.zoom
        y = (client_y - origin_y) / self.zoom

        hit = self.item_at(x, y)
        if hit is not None:
            self._drag_just_ended = False
            return self.click_item(hit.id)

        if self.active_tool is not None:
            return self.place_item(x, y)

        if self.is_dragging or self._drag_just_ended:
            self._drag_just_ended = False
            return None
        self.selected_item_id = None
        return None

    # Mutations

    def update_item(self, updated: FloorItem) -> None:
        self.items = [updated if item.id == updated.id else item for item in self.items]

    def edit_item(self, item_id: str, **changes) -> FloorItem:
        """Apply field changes to an item; the whole item is revalidated first."""
        item = self._require_item(item_id)
        try:
            edited = FloorItem.model_validate({**item.model_dump(), **changes})
        except ValidationError as e:
            raise InvalidInputError(f"Invalid changes for floor item {item_id}") from e
        self.update_item(edited)
        return edited

    def move_item(self, item_id: str, x: float, y: float) -> FloorItem:
        item = self._require_item(item_id)
        moved = item.model_copy(update={"x": x, "y": y})
        self.update_item(moved)
        return moved

    def delete_item(self, item_id: str) -> None:
        self.items = [item for item in self.items if item.id != item_id]
        self.selected_item_id = None

    def rotate_item(self, item_id: str, direction: str) -> FloorItem:
        if direction not in (CLOCKWISE, COUNTERCLOCKWISE):
            raise InvalidInputError(f"Unknown rotation direction '{direction}'")
        item = self._require_item(item_id)
        delta = ROTATION_STEP if direction == CLOCKWISE else -ROTATION_STEP
        rotated = item.model_copy(update={"rotation": (item.rotation or 0) + delta})
        self.update_item(rotated)
        return rotated

    def duplicate_item(self, item_id: str) -> Optional[FloorItem]:
        source = self.find_item(item_id)
        if source is None:
            return None
        changes = {
            "id": new_item_id(),
            "x": source.x + DUPLICATE_OFFSET,
            "y": source.y + DUPLICATE_OFFSET,
        }
        if source.is_table:
            changes["number"] = self.table_count + 1
        return self._append(source.model_copy(update=changes))

    # Dragging

    def drag(self, item_id: str, client_x: float, client_y: float) -> DragGesture:
        """Start dragging ``item_id`` from the given pointer position.

        Use as a context manager so the gesture's global listeners are
        removed even if the drag is interrupted.
        """
        item = self._require_item(item_id)
        if self._drag is not None:
            self._drag.release()

        self.selected_item_id = item.id
        self.is_dragging = True
        self._drag_just_ended = False
        self._drag = DragGesture(
            self.events,
            item_id=item.id,
            start_x=client_x,
            start_y=client_y,
            initial_x=item.x,
            initial_y=item.y,
            on_move=self._apply_drag,
            on_end=self._end_drag,
        ).attach()
        return self._drag

    def _apply_drag(self, item_id: str, x: float, y: float) -> None:
        if self.find_item(item_id) is not None:
            self.move_item(item_id, x, y)

    def _end_drag(self, gesture: DragGesture) -> None:
        if self._drag is gesture:
            self._drag = None
        self.is_dragging = False
        self._drag_just_ended = True
