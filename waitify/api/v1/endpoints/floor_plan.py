"""Floor plan editor endpoints, one live editor per business location."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from waitify.core.dependencies import get_current_business, get_floor_plan_registry
from waitify.core.exceptions import InvalidInputError, NotFoundError
from waitify.models.profile import Profile
from waitify.schemas.base import Notice
from waitify.schemas.floor_plan import (
    CanvasClick,
    DragRequest,
    EditorSettingsUpdate,
    FloorItemUpdate,
    FloorPlanResponse,
    FloorPlanState,
    PlaceItemRequest,
    RotateRequest,
    TableTypeSelection,
    ToolSelection,
)
from waitify.services.floor_plan.editor import FloorPlanEditor
from waitify.services.floor_plan.sessions import FloorPlanSessionRegistry

router = APIRouter()


def get_editor(
    location: str,
    business: Profile = Depends(get_current_business),
    registry: FloorPlanSessionRegistry = Depends(get_floor_plan_registry),
) -> FloorPlanEditor:
    return registry.get(business.id, location)


def _response(editor: FloorPlanEditor, notice: Optional[Notice] = None) -> FloorPlanResponse:
    return FloorPlanResponse(state=FloorPlanState.from_editor(editor), notice=notice)


@router.get("/", response_model=FloorPlanResponse)
async def get_floor_plan(editor: FloorPlanEditor = Depends(get_editor)):
    """Current editor state for the location."""
    return _response(editor)


@router.post("/reload", response_model=FloorPlanResponse)
async def reload_floor_plan(editor: FloorPlanEditor = Depends(get_editor)):
    """Discard unsaved changes and reload the saved layout."""
    editor.load()
    return _response(editor)


@router.post("/tool", response_model=FloorPlanResponse)
async def select_tool(selection: ToolSelection, editor: FloorPlanEditor = Depends(get_editor)):
    """Activate a placement tool; the active tool again turns it off."""
    editor.select_tool(selection.tool)
    return _response(editor)


@router.post("/table-type", response_model=FloorPlanResponse)
async def select_table_type(selection: TableTypeSelection, editor: FloorPlanEditor = Depends(get_editor)):
    editor.set_table_type(selection.table_type)
    return _response(editor)


@router.patch("/settings", response_model=FloorPlanResponse)
async def update_settings(changes: EditorSettingsUpdate, editor: FloorPlanEditor = Depends(get_editor)):
    editor.update_settings(**changes.model_dump(exclude_unset=True))
    return _response(editor)


@router.post("/zoom/in", response_model=FloorPlanResponse)
async def zoom_in(editor: FloorPlanEditor = Depends(get_editor)):
    editor.zoom_in()
    return _response(editor)


@router.post("/zoom/out", response_model=FloorPlanResponse)
async def zoom_out(editor: FloorPlanEditor = Depends(get_editor)):
    editor.zoom_out()
    return _response(editor)


@router.post("/click", response_model=FloorPlanResponse)
async def click(event: CanvasClick, editor: FloorPlanEditor = Depends(get_editor)):
    """Click on an item (``item_id``) or on the canvas at client coordinates."""
    if event.item_id:
        editor.click_item(event.item_id)
    else:
        editor.click_canvas(event.client_x, event.client_y, event.origin_x, event.origin_y)
    return _response(editor)


@router.post("/items", response_model=FloorPlanResponse)
async def place_item(request: PlaceItemRequest, editor: FloorPlanEditor = Depends(get_editor)):
    """Place an item at layout coordinates."""
    if editor.place(request.type, request.x, request.y, request.table_type) is None:
        raise InvalidInputError(f"Unknown table type '{request.table_type}'")
    return _response(editor)


@router.patch("/items/{item_id}", response_model=FloorPlanResponse)
async def update_item(item_id: str, changes: FloorItemUpdate, editor: FloorPlanEditor = Depends(get_editor)):
    """Move an item or change its table status, color, label or reservation."""
    editor.edit_item(item_id, **changes.model_dump(exclude_unset=True))
    return _response(editor)


@router.post("/items/{item_id}/drag", response_model=FloorPlanResponse)
async def drag_item(item_id: str, request: DragRequest, editor: FloorPlanEditor = Depends(get_editor)):
    """Replay a pointer drag over the item, then release it."""
    for point in request.path:
        if len(point) != 2:
            raise InvalidInputError("Each drag path point must be [client_x, client_y]")

    with editor.drag(item_id, request.start_x, request.start_y) as gesture:
        for client_x, client_y in request.path:
            gesture.move(client_x, client_y)
    return _response(editor)


@router.post("/items/{item_id}/rotate", response_model=FloorPlanResponse)
async def rotate_item(item_id: str, request: RotateRequest, editor: FloorPlanEditor = Depends(get_editor)):
    editor.rotate_item(item_id, request.direction)
    return _response(editor)


@router.post("/items/{item_id}/duplicate", response_model=FloorPlanResponse)
async def duplicate_item(item_id: str, editor: FloorPlanEditor = Depends(get_editor)):
    copy = editor.duplicate_item(item_id)
    if copy is None:
        raise NotFoundError(f"Floor item {item_id} not found")
    return _response(editor, Notice(title="Item duplicated", description="A copy of the item has been added"))


@router.delete("/items/{item_id}", response_model=FloorPlanResponse)
async def delete_item(item_id: str, editor: FloorPlanEditor = Depends(get_editor)):
    editor.delete_item(item_id)
    return _response(editor, Notice(title="Item deleted", description="The item has been removed"))


@router.post("/save", response_model=FloorPlanResponse)
async def save_floor_plan(editor: FloorPlanEditor = Depends(get_editor)):
    """Persist the full layout, overwriting what was stored."""
    editor.save()
    return _response(
        editor,
        Notice(title="Floor plan saved", description="Your layout has been saved successfully"),
    )


@router.post("/clear", response_model=FloorPlanResponse)
async def clear_floor_plan(
    confirm: bool = Query(False, description="Must be true to clear the layout"),
    editor: FloorPlanEditor = Depends(get_editor),
):
    """Remove every item and the stored layout once confirmed."""
    if not editor.clear(confirm):
        return _response(editor)
    return _response(
        editor,
        Notice(title="Floor plan cleared", description="All items have been removed from the floor plan"),
    )
