"""Floor plan schemas for API validation."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from waitify.models.floor_item import FloorItem, FloorItemType, TableStatus, TableType
from waitify.schemas.base import Notice
from waitify.services.floor_plan.editor import CLOCKWISE, COUNTERCLOCKWISE, FloorPlanEditor


class TableTypeResponse(BaseModel):
    id: str
    name: str
    capacity: int
    width: int
    height: int
    shape: str

    @classmethod
    def from_preset(cls, preset: TableType) -> "TableTypeResponse":
        return cls(
            id=preset.id,
            name=preset.name,
            capacity=preset.capacity,
            width=preset.width,
            height=preset.height,
            shape=preset.shape.value,
        )


class EditorSettingsSchema(BaseModel):
    grid_size: int = 20
    snap_to_grid: bool = False
    show_labels: bool = True


class EditorSettingsUpdate(BaseModel):
    grid_size: Optional[int] = Field(None, ge=1, le=200)
    snap_to_grid: Optional[bool] = None
    show_labels: Optional[bool] = None


class FloorPlanState(BaseModel):
    location_name: str
    items: List[FloorItem]
    selected_item_id: Optional[str] = None
    active_tool: Optional[FloorItemType] = None
    active_table_type: str
    zoom: float
    is_dragging: bool = False
    table_count: int
    settings: EditorSettingsSchema
    table_types: List[TableTypeResponse]

    @classmethod
    def from_editor(cls, editor: FloorPlanEditor) -> "FloorPlanState":
        return cls(
            location_name=editor.location_name,
            items=editor.items,
            selected_item_id=editor.selected_item_id,
            active_tool=editor.active_tool,
            active_table_type=editor.active_table_type,
            zoom=editor.zoom,
            is_dragging=editor.is_dragging,
            table_count=editor.table_count,
            settings=EditorSettingsSchema(
                grid_size=editor.settings.grid_size,
                snap_to_grid=editor.settings.snap_to_grid,
                show_labels=editor.settings.show_labels,
            ),
            table_types=[TableTypeResponse.from_preset(t) for t in editor.table_types],
        )


class FloorPlanResponse(BaseModel):
    state: FloorPlanState
    notice: Optional[Notice] = None


class ToolSelection(BaseModel):
    tool: Optional[FloorItemType] = None


class TableTypeSelection(BaseModel):
    table_type: str


class CanvasClick(BaseModel):
    """A click in client coordinates, relative to ``origin`` of the canvas."""
    client_x: float
    client_y: float
    origin_x: float = 0
    origin_y: float = 0
    item_id: Optional[str] = None


class DragRequest(BaseModel):
    """A complete drag: press at ``start``, pointer path, release."""
    start_x: float
    start_y: float
    path: List[List[float]] = Field(default_factory=list, description="[[client_x, client_y], ...]")


class PlaceItemRequest(BaseModel):
    """Place an item directly, without going through the active tool."""
    type: FloorItemType
    x: float
    y: float
    table_type: Optional[str] = None


class FloorItemUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    x: Optional[float] = None
    y: Optional[float] = None
    status: Optional[TableStatus] = None
    color: Optional[str] = None
    label: Optional[str] = None
    reservation_id: Optional[str] = None

    @field_validator("x", "y")
    @classmethod
    def coordinates_not_null(cls, v):
        if v is None:
            raise ValueError("coordinates cannot be null")
        return v


class RotateRequest(BaseModel):
    direction: str = Field(CLOCKWISE, pattern=f"^({CLOCKWISE}|{COUNTERCLOCKWISE})$")
