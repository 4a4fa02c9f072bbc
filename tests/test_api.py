"""HTTP API tests with the Supabase client and floor plan storage swapped out."""
import pytest
from fastapi.testclient import TestClient

from waitify.config.database import get_supabase_client, get_supabase_service_client
from waitify.core.dependencies import get_floor_plan_registry
from waitify.main import app
from waitify.services.floor_plan.sessions import FloorPlanSessionRegistry, build_storage_factory

BUSINESS = {"Authorization": "Bearer business-token"}
CUSTOMER = {"Authorization": "Bearer customer-token"}


@pytest.fixture
def client(supabase, business, customer, waitlist):
    registry = FloorPlanSessionRegistry(build_storage_factory("memory"))
    supabase.sign_in("business-token", business["id"], business["email"])
    supabase.sign_in("customer-token", customer["id"], customer["email"])

    app.dependency_overrides[get_supabase_client] = lambda: supabase
    app.dependency_overrides[get_supabase_service_client] = lambda: None
    app.dependency_overrides[get_floor_plan_registry] = lambda: registry
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def entries_url(entry_id=""):
    return f"/api/v1/waitlists/wl-1/entries/{entry_id}"


class TestService:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_missing_token(self, client):
        assert client.get("/api/v1/waitlists/").status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/api/v1/waitlists/", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_request_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"


class TestWaitlists:

    def test_customer_cannot_manage_waitlists(self, client):
        assert client.get("/api/v1/waitlists/", headers=CUSTOMER).status_code == 403

    def test_business_lists_its_waitlists(self, client):
        response = client.get("/api/v1/waitlists/", headers=BUSINESS)

        assert response.status_code == 200
        assert [w["name"] for w in response.json()] == ["Dinner"]

    def test_free_plan_allows_one_waitlist(self, client):
        response = client.post("/api/v1/waitlists/", json={"name": "Lunch"}, headers=BUSINESS)

        assert response.status_code == 403
        assert response.json()["title"] == "Plan Limit Reached"
        assert response.json()["variant"] == "destructive"

    def test_paid_plan_creates_waitlist(self, client, supabase):
        supabase.seed("subscriptions", user_id="biz-1", plan_id="basic", active=True)

        response = client.post("/api/v1/waitlists/", json={"name": "Lunch"}, headers=BUSINESS)

        assert response.status_code == 200
        assert response.json()["business_id"] == "biz-1"

    def test_other_business_waitlist_is_hidden(self, client, supabase):
        supabase.seed("waitlists", id="wl-9", business_id="biz-9", name="Elsewhere")

        assert client.get("/api/v1/waitlists/wl-9", headers=BUSINESS).status_code == 404
        assert client.get("/api/v1/waitlists/wl-9/entries/", headers=BUSINESS).status_code == 404

    def test_customer_joins_and_sees_entry(self, client):
        joined = client.post(entries_url("join"), headers=CUSTOMER)
        assert joined.status_code == 200
        assert joined.json()["position"] == 1
        assert joined.json()["status"] == "waiting"

        mine = client.get("/api/v1/waitlists/me/entries", headers=CUSTOMER)
        assert [e["id"] for e in mine.json()] == [joined.json()["id"]]
        assert mine.json()[0]["waitlists"] == {
            "name": "Dinner",
            "description": None,
            "business_id": "biz-1",
            "business_name": "Luigi's",
        }

    def test_closed_waitlist_rejects_joins(self, client, supabase):
        supabase.find("waitlists", "wl-1")["is_active"] = False

        response = client.post(entries_url("join"), headers=CUSTOMER)

        assert response.status_code == 400
        assert response.json()["title"] == "Waitlist Closed"


class TestEntries:

    def test_entries_carry_available_actions(self, client, make_entry, customer):
        make_entry(user_id=customer["id"])
        make_entry(status="seated")

        entries = client.get(entries_url(), headers=BUSINESS).json()

        assert entries[0]["customer_name"] == "Ada Lovelace"
        assert entries[0]["available_actions"] == ["call", "cancel", "email", "notify", "remove", "seat"]
        assert entries[1]["customer_name"] == "Customer"
        assert entries[1]["available_actions"] == ["remove"]

    def test_status_update_follows_transition_table(self, client, make_entry):
        entry = make_entry()

        seated = client.put(entries_url(f"{entry['id']}/status"), json={"status": "seated"}, headers=BUSINESS)
        assert seated.status_code == 200
        assert seated.json()["notice"]["description"] == "Customer status changed to seated"

        back = client.put(entries_url(f"{entry['id']}/status"), json={"status": "waiting"}, headers=BUSINESS)
        assert back.status_code == 409
        assert back.json()["title"] == "Action Not Allowed"

    def test_email_marks_notified(self, client, make_entry, customer):
        entry = make_entry(user_id=customer["id"])

        response = client.post(
            entries_url(f"{entry['id']}/email"),
            json={"subject": "Table ready", "message": "Please come to the host stand"},
            headers=BUSINESS,
        )

        assert response.status_code == 200
        assert response.json()["notice"]["title"] == "Email Sent"
        assert response.json()["entry"]["status"] == "notified"

    def test_sms_without_phone(self, client, make_entry):
        entry = make_entry()

        response = client.post(entries_url(f"{entry['id']}/notify"), json={"message": "Ready"}, headers=BUSINESS)

        assert response.status_code == 422
        assert response.json()["title"] == "No Phone Number"

    def test_call_returns_dial_uri(self, client, make_entry, customer):
        entry = make_entry(user_id=customer["id"])

        response = client.post(entries_url(f"{entry['id']}/call"), headers=BUSINESS)

        assert response.status_code == 200
        assert response.json()["dial_uri"] == "tel:+15550001111"
        assert response.json()["notice"]["title"] == "Calling Customer"
        assert response.json()["entry"]["notes"].endswith("] Called customer")

    def test_status_survives_failed_notification(self, client, supabase, make_entry, customer):
        entry = make_entry(user_id=customer["id"])
        supabase.fail("notifications", "insert")

        response = client.post(entries_url(f"{entry['id']}/seat"), headers=BUSINESS)

        assert response.status_code == 502
        assert supabase.find("waitlist_entries", entry["id"])["status"] == "seated"

    def test_remove(self, client, supabase, make_entry):
        entry = make_entry(status="cancelled")

        response = client.delete(entries_url(entry["id"]), headers=BUSINESS)

        assert response.status_code == 200
        assert response.json()["notice"] == {
            "title": "Removed",
            "description": "Customer removed from waitlist",
            "variant": "default",
        }
        assert supabase.find("waitlist_entries", entry["id"]) is None


class TestFloorPlan:
    url = "/api/v1/floor-plans/main"

    def test_place_drag_save_and_clear(self, client):
        client.post(f"{self.url}/tool", json={"tool": "table"}, headers=BUSINESS)
        placed = client.post(f"{self.url}/click", json={"client_x": 100, "client_y": 100}, headers=BUSINESS)

        items = placed.json()["state"]["items"]
        assert len(items) == 1
        assert items[0]["tableType"] == "rectangle4"
        assert items[0]["number"] == 1
        assert placed.json()["state"]["active_tool"] is None

        item_id = items[0]["id"]
        dragged = client.post(
            f"{self.url}/items/{item_id}/drag",
            json={"start_x": 100, "start_y": 100, "path": [[120, 110], [150, 130]]},
            headers=BUSINESS,
        )
        moved = dragged.json()["state"]["items"][0]
        assert (moved["x"], moved["y"]) == (150, 130)
        assert dragged.json()["state"]["is_dragging"] is False

        saved = client.post(f"{self.url}/save", headers=BUSINESS)
        assert saved.json()["notice"]["title"] == "Floor plan saved"

        unconfirmed = client.post(f"{self.url}/clear", headers=BUSINESS)
        assert len(unconfirmed.json()["state"]["items"]) == 1
        assert unconfirmed.json()["notice"] is None

        cleared = client.post(f"{self.url}/clear?confirm=true", headers=BUSINESS)
        assert cleared.json()["state"]["items"] == []
        assert cleared.json()["notice"]["title"] == "Floor plan cleared"

    def test_place_and_update_item(self, client):
        placed = client.post(
            f"{self.url}/items", json={"type": "table", "x": 40, "y": 60, "table_type": "round2"}, headers=BUSINESS
        )
        item = placed.json()["state"]["items"][0]
        assert item["shape"] == "circle"
        assert placed.json()["state"]["selected_item_id"] == item["id"]

        updated = client.patch(
            f"{self.url}/items/{item['id']}", json={"x": 200, "status": "occupied"}, headers=BUSINESS
        )
        item = updated.json()["state"]["items"][0]
        assert (item["x"], item["y"], item["status"]) == (200, 60, "occupied")

        missing = client.patch(f"{self.url}/items/nope", json={"x": 1}, headers=BUSINESS)
        assert missing.status_code == 404

    def test_zoom_and_table_types(self, client):
        state = client.get(f"{self.url}/", headers=BUSINESS).json()["state"]
        assert [t["id"] for t in state["table_types"]][:2] == ["rectangle2", "rectangle4"]

        for _ in range(15):
            response = client.post(f"{self.url}/zoom/in", headers=BUSINESS)
        assert response.json()["state"]["zoom"] == 2.0

    def test_unknown_table_type(self, client):
        response = client.post(f"{self.url}/table-type", json={"table_type": "banquet"}, headers=BUSINESS)
        assert response.status_code == 400

    def test_duplicate_missing_item(self, client):
        response = client.post(f"{self.url}/items/nope/duplicate", headers=BUSINESS)
        assert response.status_code == 404

    def test_customers_have_no_floor_plans(self, client):
        assert client.get(f"{self.url}/", headers=CUSTOMER).status_code == 403

    def test_null_coordinate_is_rejected(self, client):
        placed = client.post(f"{self.url}/items", json={"type": "wall", "x": 0, "y": 0}, headers=BUSINESS)
        wall = placed.json()["state"]["items"][0]
        client.post(f"{self.url}/items", json={"type": "door", "x": 300, "y": 0}, headers=BUSINESS)

        response = client.patch(f"{self.url}/items/{wall['id']}", json={"x": None}, headers=BUSINESS)
        assert response.status_code == 422

        clicked = client.post(f"{self.url}/click", json={"client_x": 500, "client_y": 500}, headers=BUSINESS)
        assert clicked.status_code == 200

        client.post(f"{self.url}/save", headers=BUSINESS)
        reloaded = client.post(f"{self.url}/reload", headers=BUSINESS)
        items = reloaded.json()["state"]["items"]
        assert len(items) == 2
        assert items[0]["x"] == 0


class TestNotifications:
    url = "/api/v1/notifications"

    @pytest.fixture
    def business_note(self, supabase, business):
        return supabase.seed(
            "notifications", user_id=business["id"], title="New guest", message="Ada joined", type="waitlist",
            is_read=False,
        )

    def test_owner_marks_read_and_deletes(self, client, supabase, business_note):
        read = client.post(f"{self.url}/{business_note['id']}/read", headers=BUSINESS)
        assert read.status_code == 200
        assert read.json()["is_read"] is True

        deleted = client.delete(f"{self.url}/{business_note['id']}", headers=BUSINESS)
        assert deleted.status_code == 200
        assert supabase.find("notifications", business_note["id"]) is None

    def test_other_users_notifications_are_not_found(self, client, supabase, business_note):
        read = client.post(f"{self.url}/{business_note['id']}/read", headers=CUSTOMER)
        deleted = client.delete(f"{self.url}/{business_note['id']}", headers=CUSTOMER)

        assert read.status_code == 404
        assert deleted.status_code == 404
        row = supabase.find("notifications", business_note["id"])
        assert row is not None
        assert row["is_read"] is False

    def test_lists_only_own_notifications(self, client, business_note):
        assert client.get(self.url + "/", headers=CUSTOMER).json() == []
        assert [n["id"] for n in client.get(self.url + "/", headers=BUSINESS).json()] == [business_note["id"]]
