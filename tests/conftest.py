"""Shared fixtures: an in-memory stand-in for the Supabase client."""
import os

os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("FLOOR_PLAN_STORAGE", "memory")

import copy
import itertools
import json
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from waitify.services.floor_plan.editor import FloorPlanEditor
from waitify.services.floor_plan.storage import MemoryFloorPlanStorage
from waitify.services.waitlist.lifecycle import WaitlistLifecycleManager

PROFILE_FIELDS = ("username", "first_name", "last_name", "phone_number", "email")


class FakeQuery:
    """Records a PostgREST-style query and runs it against ``FakeSupabase.tables``."""

    def __init__(self, db, table_name):
        self.db = db
        self.table_name = table_name
        self.operation = "select"
        self.fields = "*"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.limit_count = None

    def select(self, fields="*"):
        self.operation = "select"
        self.fields = fields
        return self

    def insert(self, data):
        self.operation = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.operation = "update"
        self.payload = data
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, field, value):
        self.filters.append((field, value))
        return self

    def order(self, field, desc=False):
        self.order_by = (field, desc)
        return self

    def limit(self, count):
        self.limit_count = count
        return self

    def _matches(self, row):
        return all(row.get(field) == value for field, value in self.filters)

    def _expand(self, row):
        row = copy.deepcopy(row)
        if "profiles:user_id" in self.fields:
            profile = self.db.find("profiles", row.get("user_id"))
            row["profiles"] = {k: profile.get(k) for k in PROFILE_FIELDS} if profile else None
        if "waitlists:waitlist_id" in self.fields:
            waitlist = self.db.find("waitlists", row.get("waitlist_id"))
            if waitlist:
                owner = self.db.find("profiles", waitlist.get("business_id")) or {}
                row["waitlists"] = {
                    "name": waitlist.get("name"),
                    "description": waitlist.get("description"),
                    "business_id": waitlist.get("business_id"),
                    "profiles": {"business_name": owner.get("business_name")},
                }
            else:
                row["waitlists"] = None
        return row

    def execute(self):
        if (self.table_name, self.operation) in self.db.failures:
            raise Exception(f"{self.operation} on {self.table_name} failed")
        self.db.calls.append((self.table_name, self.operation, self.payload, list(self.filters)))

        rows = self.db.tables.setdefault(self.table_name, [])

        if self.operation == "insert":
            row = {
                "id": f"{self.table_name}-{next(self.db.ids)}",
                "created_at": self.db.now(),
                "updated_at": self.db.now(),
                **self.payload,
            }
            rows.append(row)
            return SimpleNamespace(data=[copy.deepcopy(row)])

        matched = [row for row in rows if self._matches(row)]

        if self.operation == "update":
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=copy.deepcopy(matched))

        if self.operation == "delete":
            self.db.tables[self.table_name] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=copy.deepcopy(matched))

        if self.order_by:
            field, desc = self.order_by
            matched = sorted(matched, key=lambda r: (r.get(field) is None, r.get(field)), reverse=desc)
        if self.limit_count is not None:
            matched = matched[: self.limit_count]
        return SimpleNamespace(data=[self._expand(row) for row in matched])


class FakeFunctions:
    """Records edge function invocations."""

    def __init__(self):
        self.invocations = []
        self.fail = False
        self.email_lookup = None

    def invoke(self, function_name, invoke_options=None):
        body = (invoke_options or {}).get("body", {})
        self.invocations.append((function_name, body))
        if self.fail:
            raise Exception("edge function unavailable")
        if body.get("action") == "get-user-email":
            return json.dumps({"email": self.email_lookup}).encode()
        return {"success": True}


class FakeAuth:
    def __init__(self):
        self.users = {}

    def get_user(self, token):
        user = self.users.get(token)
        if user is None:
            raise Exception("invalid JWT")
        return SimpleNamespace(user=user)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.failures = set()
        self.calls = []
        self.ids = itertools.count(1)
        self.functions = FakeFunctions()
        self.auth = FakeAuth()

    @staticmethod
    def now():
        return datetime.now(timezone.utc).isoformat()

    def table(self, name):
        return FakeQuery(self, name)

    def find(self, table_name, row_id):
        for row in self.tables.get(table_name, []):
            if row.get("id") == row_id:
                return row
        return None

    def seed(self, table_name, **row):
        row.setdefault("id", f"{table_name}-{next(self.ids)}")
        row.setdefault("created_at", self.now())
        self.tables.setdefault(table_name, []).append(row)
        return row

    def fail(self, table_name, operation):
        self.failures.add((table_name, operation))

    def sign_in(self, token, user_id, email=None):
        self.auth.users[token] = SimpleNamespace(id=user_id, email=email)


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def business(supabase):
    return supabase.seed(
        "profiles", id="biz-1", role="business", business_name="Luigi's", email="owner@luigis.test"
    )


@pytest.fixture
def waitlist(supabase, business):
    return supabase.seed("waitlists", id="wl-1", business_id=business["id"], name="Dinner", is_active=True)


@pytest.fixture
def customer(supabase):
    return supabase.seed(
        "profiles",
        id="user-1",
        role="customer",
        first_name="Ada",
        last_name="Lovelace",
        phone_number="+15550001111",
        email="ada@example.test",
    )


@pytest.fixture
def make_entry(supabase, waitlist):
    positions = itertools.count(1)

    def _make(user_id=None, status="waiting", notes=None):
        return supabase.seed(
            "waitlist_entries",
            waitlist_id=waitlist["id"],
            user_id=user_id,
            status=status,
            position=next(positions),
            notes=notes,
        )

    return _make


@pytest.fixture
def manager_factory(supabase, waitlist):
    async def _build(**kwargs):
        kwargs.setdefault("clock", lambda: datetime(2024, 5, 1, 18, 30, tzinfo=timezone.utc))
        manager = WaitlistLifecycleManager(supabase, waitlist["id"], **kwargs)
        await manager.load()
        return manager

    return _build


@pytest.fixture
def storage():
    return MemoryFloorPlanStorage()


@pytest.fixture
def editor(storage):
    return FloorPlanEditor(storage, "main")
