"""Floor plan items and table presets.

Floor plans are not stored in Supabase: the whole item list of a location is
serialized to one key of the floor plan storage, so these models are plain
pydantic models that keep the camelCase wire names used by the browser
client (``tableType``, ``reservationId``).
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field


class FloorItemType(str, Enum):
    TABLE = "table"
    WALL = "wall"
    DOOR = "door"


class TableShape(str, Enum):
    RECTANGLE = "rectangle"
    CIRCLE = "circle"


class TableStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"


@dataclass(frozen=True)
class TableType:
    """A table preset offered by the editor."""
    id: str
    name: str
    capacity: int
    width: int
    height: int
    shape: TableShape = TableShape.RECTANGLE


TABLE_TYPES: List[TableType] = [
    TableType("rectangle2", "2-Person Rectangle", 2, 60, 40),
    TableType("rectangle4", "4-Person Rectangle", 4, 80, 80),
    TableType("round2", "2-Person Round", 2, 50, 50, TableShape.CIRCLE),
    TableType("round4", "4-Person Round", 4, 80, 80, TableShape.CIRCLE),
    TableType("round6", "6-Person Round", 6, 100, 100, TableShape.CIRCLE),
    TableType("round8", "8-Person Round", 8, 120, 120, TableShape.CIRCLE),
]
TABLE_TYPES_BY_ID: Dict[str, TableType] = {t.id: t for t in TABLE_TYPES}
DEFAULT_TABLE_TYPE = "rectangle4"

# (width, height) of the fixed-size items
WALL_SIZE = (100, 10)
DOOR_SIZE = (60, 10)


def new_item_id() -> str:
    return str(uuid.uuid4())


class FloorItem(BaseModel):
    """A placed object on the floor plan, in layout-space pixels."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: str = Field(default_factory=new_item_id)
    type: FloorItemType
    x: float
    y: float
    width: float
    height: float
    # Degrees, stepped by 45 and never normalized
    rotation: float = 0
    table_type: Optional[str] = Field(None, alias="tableType")
    capacity: Optional[int] = None
    number: Optional[int] = None
    shape: Optional[TableShape] = None
    status: Optional[TableStatus] = None
    color: Optional[str] = None
    label: Optional[str] = None
    reservation_id: Optional[str] = Field(None, alias="reservationId")

    @property
    def is_table(self) -> bool:
        return self.type == FloorItemType.TABLE.value

    def bounding_box(self):
        """Axis-aligned (left, top, right, bottom) of the unrotated item."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def to_storage(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
