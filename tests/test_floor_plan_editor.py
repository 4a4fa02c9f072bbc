"""Floor plan editor behaviour."""
import pytest

from waitify.core.exceptions import InvalidInputError, NotFoundError
from waitify.models.floor_item import FloorItemType, TableShape
from waitify.services.floor_plan.editor import (
    CLOCKWISE,
    COUNTERCLOCKWISE,
    FloorPlanEditor,
    snap,
)
from waitify.services.floor_plan.pointer import POINTER_MOVE, POINTER_UP
from waitify.services.floor_plan.sessions import FloorPlanSessionRegistry, build_storage_factory
from waitify.services.floor_plan.storage import RedisFloorPlanStorage, storage_key


class DictRedis:
    """Just enough of a redis client for string keys."""

    def __init__(self):
        self.data = {}

    def get(self, key):
        value = self.data.get(key)
        return value.encode() if value is not None else None

    def set(self, key, value):
        self.data[key] = value

    def delete(self, key):
        self.data.pop(key, None)


class TestPersistence:

    def test_save_and_reload_round_trip(self, editor, storage):
        editor.add_table(100, 120, "round6")
        editor.add_wall(0, 0)
        editor.add_door(300, 0)
        editor.rotate_item(editor.items[0].id, CLOCKWISE)
        editor.save()

        reloaded = FloorPlanEditor(storage, "main")
        reloaded.load()

        assert reloaded.items == editor.items
        assert storage_key("main") in storage

    def test_stored_items_use_client_field_names(self, editor, storage):
        editor.add_table(0, 0, "rectangle2")
        editor.save()

        raw = storage.get_item("floorPlan-main")
        assert '"tableType": "rectangle2"' in raw
        assert "table_type" not in raw

    def test_locations_are_independent(self, storage):
        patio = FloorPlanEditor(storage, "patio")
        patio.add_table(0, 0, "round2")
        patio.save()

        bar = FloorPlanEditor(storage, "bar")
        assert bar.load() == []

    @pytest.mark.parametrize("raw", ["{not json", '{"items": []}', '[{"type": "table"}]'])
    def test_unreadable_layout_starts_empty(self, storage, raw):
        storage.set_item("floorPlan-main", raw)
        editor = FloorPlanEditor(storage, "main")

        assert editor.load() == []

    def test_clear_requires_confirmation(self, editor, storage):
        editor.add_table(0, 0, "rectangle4")
        editor.save()

        assert editor.clear(False) is False
        assert len(editor.items) == 1

        assert editor.clear(lambda: True) is True
        assert editor.items == []
        assert editor.selected_item_id is None
        assert "floorPlan-main" not in storage

    def test_clear_on_empty_plan_does_not_ask(self, editor):
        asked = []
        assert editor.clear(lambda: asked.append(True) or True) is False
        assert asked == []

    def test_redis_storage_is_namespaced(self):
        client = DictRedis()
        storage = RedisFloorPlanStorage(client, namespace="biz-1:")
        editor = FloorPlanEditor(storage, "main")
        editor.add_table(10, 10, "round4")
        editor.save()

        assert "biz-1:floorPlan-main" in client.data
        assert FloorPlanEditor(storage, "main").load() == editor.items


class TestTables:

    def test_add_table_uses_preset(self, editor):
        table = editor.add_table(40, 60, "round8")

        assert table.width == 120 and table.height == 120
        assert table.capacity == 8
        assert table.shape == TableShape.CIRCLE.value
        assert table.status == "available"
        assert table.number == 1
        assert editor.selected_item is table

    def test_unknown_table_type_adds_nothing(self, editor):
        assert editor.add_table(0, 0, "banquet") is None
        assert editor.items == []

    def test_set_unknown_table_type_is_rejected(self, editor):
        with pytest.raises(InvalidInputError):
            editor.set_table_type("banquet")
        assert editor.active_table_type == "rectangle4"

    def test_walls_and_doors_do_not_count_as_tables(self, editor):
        editor.add_wall(0, 0)
        editor.add_door(0, 50)
        table = editor.add_table(100, 100, "rectangle4")

        assert table.number == 1
        assert editor.table_count == 1

    def test_numbers_recomputed_from_table_count(self, editor):
        first = editor.add_table(0, 0, "rectangle4")
        editor.add_table(100, 0, "rectangle4")
        editor.delete_item(first.id)

        # Numbers are not reserved: the next table takes count + 1 again
        assert editor.add_table(200, 0, "rectangle4").number == 2

    def test_numbering_restarts_after_deleting_everything(self, editor):
        for x in (0, 100, 200):
            editor.add_table(x, 0, "round4")
        for item in list(editor.items):
            editor.delete_item(item.id)

        assert editor.add_table(0, 0, "round4").number == 1

    def test_duplicate_offsets_and_renumbers(self, editor):
        source = editor.add_table(40, 40, "round4")
        editor.add_table(200, 40, "round4")

        copy = editor.duplicate_item(source.id)

        assert copy.id != source.id
        assert (copy.x, copy.y) == (60, 60)
        assert copy.number == 3
        assert copy.capacity == source.capacity
        assert editor.selected_item_id == copy.id

    def test_duplicate_wall_keeps_no_number(self, editor):
        wall = editor.add_wall(0, 0)
        copy = editor.duplicate_item(wall.id)

        assert copy.number is None
        assert copy.type == FloorItemType.WALL.value

    def test_duplicate_unknown_item(self, editor):
        assert editor.duplicate_item("missing") is None

    def test_edit_item_changes_fields(self, editor):
        table = editor.add_table(0, 0, "round4")

        edited = editor.edit_item(table.id, x=80, status="occupied", reservation_id="res-1")

        assert (edited.x, edited.y) == (80, 0)
        assert edited.status == "occupied"
        assert edited.reservation_id == "res-1"
        assert editor.find_item(table.id) == edited

    def test_invalid_edit_leaves_item_untouched(self, editor):
        wall = editor.add_wall(0, 0)

        with pytest.raises(InvalidInputError):
            editor.edit_item(wall.id, x=None)

        assert editor.find_item(wall.id).x == 0
        assert editor.item_at(5, 5) == wall

    def test_edit_unknown_item(self, editor):
        with pytest.raises(NotFoundError):
            editor.edit_item("missing", x=1)


class TestRotation:

    def test_clockwise_then_counterclockwise_restores_rotation(self, editor):
        table = editor.add_table(0, 0, "rectangle2")
        editor.rotate_item(table.id, CLOCKWISE)
        editor.rotate_item(table.id, COUNTERCLOCKWISE)

        assert editor.find_item(table.id).rotation == 0

    def test_rotation_is_not_normalized(self, editor):
        table = editor.add_table(0, 0, "rectangle2")
        for _ in range(9):
            editor.rotate_item(table.id, CLOCKWISE)

        assert editor.find_item(table.id).rotation == 405

    def test_bad_direction(self, editor):
        table = editor.add_table(0, 0, "rectangle2")
        with pytest.raises(InvalidInputError):
            editor.rotate_item(table.id, "sideways")

    def test_rotate_missing_item(self, editor):
        with pytest.raises(NotFoundError):
            editor.rotate_item("missing", CLOCKWISE)


class TestToolsAndZoom:

    def test_selecting_active_tool_again_deactivates_it(self, editor):
        assert editor.select_tool("table") == FloorItemType.TABLE
        assert editor.select_tool(FloorItemType.TABLE) is None
        assert editor.select_tool("door") == FloorItemType.DOOR
        assert editor.select_tool("wall") == FloorItemType.WALL

    def test_zoom_is_clamped(self, editor):
        for _ in range(20):
            editor.zoom_in()
        assert editor.zoom == 2.0

        for _ in range(30):
            editor.zoom_out()
        assert editor.zoom == 0.5

    def test_zoom_steps_by_a_tenth(self, editor):
        assert editor.zoom_in() == 1.1
        assert editor.zoom_out() == 1.0
        assert editor.zoom_out() == 0.9

    @pytest.mark.parametrize("value, expected", [(29, 20), (30, 40), (31, 40), (-10, 0), (0, 0)])
    def test_snap_rounds_half_up(self, value, expected):
        assert snap(value, 20) == expected


class TestClicks:

    def test_click_with_tool_places_item_and_drops_tool(self, editor):
        editor.select_tool("wall")
        wall = editor.click_canvas(250, 130, origin_x=50, origin_y=30)

        assert wall.type == "wall"
        assert (wall.x, wall.y) == (200, 100)
        assert editor.active_tool is None
        assert editor.selected_item_id == wall.id

    def test_click_position_is_zoom_independent(self, editor):
        editor.zoom_in()
        editor.zoom_out()
        for _ in range(10):
            editor.zoom_in()
        editor.select_tool("table")

        table = editor.click_canvas(400, 200)

        assert editor.zoom == 2.0
        assert (table.x, table.y) == (200, 100)

    def test_placement_snaps_when_enabled(self, editor):
        editor.update_settings(snap_to_grid=True)
        editor.select_tool("door")

        door = editor.click_canvas(29, 31)

        assert (door.x, door.y) == (20, 40)

    def test_direct_placement(self, editor):
        editor.update_settings(snap_to_grid=True, grid_size=25)

        table = editor.place("table", 37, 12, "round6")

        assert (table.x, table.y) == (25, 0)
        assert table.capacity == 6
        assert editor.place(FloorItemType.TABLE, 0, 0, "banquet") is None
        assert editor.place("wall", 0, 0).type == "wall"

    def test_click_on_item_selects_instead_of_placing(self, editor):
        table = editor.add_table(0, 0, "rectangle4")
        editor.selected_item_id = None
        editor.select_tool("wall")

        assert editor.click_canvas(10, 10).id == table.id
        assert len(editor.items) == 1
        assert editor.active_tool == FloorItemType.WALL

    def test_topmost_item_wins(self, editor):
        editor.add_table(0, 0, "rectangle4")
        top = editor.add_table(40, 40, "rectangle4")

        assert editor.item_at(50, 50).id == top.id

    def test_click_on_empty_canvas_deselects(self, editor):
        editor.add_table(0, 0, "rectangle4")

        editor.click_canvas(500, 500)

        assert editor.selected_item_id is None

    def test_click_item_unknown(self, editor):
        with pytest.raises(NotFoundError):
            editor.click_item("missing")


class TestDragging:

    def test_drag_moves_by_pointer_delta(self, editor):
        table = editor.add_table(100, 100, "rectangle4")

        with editor.drag(table.id, 110, 110) as gesture:
            assert editor.is_dragging
            gesture.move(130, 150)
            gesture.move(160, 170)

        moved = editor.find_item(table.id)
        assert (moved.x, moved.y) == (150, 160)
        assert editor.is_dragging is False
        assert editor.events.listener_count() == 0

    def test_canvas_click_ending_a_drag_keeps_selection(self, editor):
        table = editor.add_table(0, 0, "rectangle4")
        with editor.drag(table.id, 10, 10) as gesture:
            gesture.move(20, 20)

        editor.click_canvas(600, 600)
        assert editor.selected_item_id == table.id

        editor.click_canvas(600, 600)
        assert editor.selected_item_id is None

    def test_pointer_up_releases_listeners(self, editor):
        table = editor.add_table(0, 0, "rectangle4")
        editor.drag(table.id, 0, 0)
        assert editor.events.listener_count(POINTER_MOVE) == 1
        assert editor.events.listener_count(POINTER_UP) == 1

        editor.events.dispatch(POINTER_MOVE, 40, 20)
        editor.events.dispatch(POINTER_UP, 40, 20)
        editor.events.dispatch(POINTER_MOVE, 400, 400)

        assert editor.events.listener_count() == 0
        assert (editor.find_item(table.id).x, editor.find_item(table.id).y) == (40, 20)

    def test_listeners_released_when_drag_is_interrupted(self, editor):
        table = editor.add_table(0, 0, "rectangle4")

        with pytest.raises(RuntimeError):
            with editor.drag(table.id, 0, 0) as gesture:
                gesture.move(10, 10)
                raise RuntimeError("connection dropped")

        assert editor.events.listener_count() == 0
        assert editor.is_dragging is False

    def test_starting_a_new_drag_releases_the_previous_one(self, editor):
        first = editor.add_table(0, 0, "rectangle4")
        second = editor.add_table(200, 0, "rectangle4")

        editor.drag(first.id, 0, 0)
        with editor.drag(second.id, 0, 0):
            assert editor.events.listener_count() == 2

        assert editor.events.listener_count() == 0

    def test_item_deleted_mid_drag_is_ignored(self, editor):
        table = editor.add_table(0, 0, "rectangle4")
        with editor.drag(table.id, 0, 0) as gesture:
            editor.delete_item(table.id)
            gesture.move(50, 50)

        assert editor.items == []


class TestSessions:

    def test_registry_keeps_one_editor_per_location(self):
        registry = FloorPlanSessionRegistry(build_storage_factory("memory"))

        assert registry.get("biz-1", "main") is registry.get("biz-1", "main")
        assert registry.get("biz-1", "main") is not registry.get("biz-2", "main")
        assert len(registry) == 2

    def test_businesses_do_not_share_layouts(self):
        factory = build_storage_factory("memory")
        editor = FloorPlanSessionRegistry(factory).get("biz-1", "main")
        editor.add_table(0, 0, "round4")
        editor.save()

        registry = FloorPlanSessionRegistry(factory)
        assert len(registry.get("biz-1", "main").items) == 1
        assert registry.get("biz-2", "main").items == []

    def test_least_recently_used_editor_is_evicted(self):
        registry = FloorPlanSessionRegistry(build_storage_factory("memory"), max_sessions=2)
        first = registry.get("biz-1", "first")
        first.add_wall(0, 0)
        first.save()
        second = registry.get("biz-1", "second")

        assert registry.get("biz-1", "first") is first
        registry.get("biz-1", "third")

        assert len(registry) == 2
        assert registry.get("biz-1", "first") is first
        reopened = registry.get("biz-1", "second")
        assert reopened is not second
        assert len(registry) == 2

    def test_evicted_editor_reloads_saved_layout(self):
        registry = FloorPlanSessionRegistry(build_storage_factory("memory"), max_sessions=1)
        editor = registry.get("biz-1", "main")
        editor.add_table(0, 0, "round4")
        editor.save()

        registry.get("biz-1", "patio")
        reopened = registry.get("biz-1", "main")

        assert reopened is not editor
        assert len(reopened.items) == 1

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            build_storage_factory("filesystem")
