"""
Shared fixtures: an in-memory stand-in for the Supabase client and sample
listing rows.
"""

import itertools
import os
from types import SimpleNamespace

import pytest
from postgrest.exceptions import APIError
from supabase_auth.errors import AuthError

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-at-least-32-bytes")

from babui.config import Settings  # noqa: E402
from babui.locations.resolver import get_location_resolver  # noqa: E402


# ══════════════════════════════════════════════════════════
# Fake Supabase client
# ══════════════════════════════════════════════════════════


class FakeQuery:
    """Chainable query builder evaluated against an in-memory table."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.action = "select"
        self.payload = None
        self.predicates = []
        self.ordering = None
        self.max_rows = None
        self.calls = []

    # Builders
    def select(self, *columns):
        self.calls.append(("select", columns))
        return self

    def insert(self, data):
        self.action, self.payload = "insert", data
        return self

    def update(self, data):
        self.action, self.payload = "update", data
        return self

    def delete(self):
        self.action = "delete"
        return self

    def _where(self, name, column, test):
        self.calls.append((name, column))
        self.predicates.append(lambda row: test(row.get(column)))
        return self

    def eq(self, column, value):
        return self._where("eq", column, lambda v: v == value or str(v) == str(value))

    def ilike(self, column, pattern):
        needle = pattern.strip("%").lower()
        return self._where("ilike", column, lambda v: needle in str(v or "").lower())

    def lte(self, column, value):
        return self._where("lte", column, lambda v: v is not None and float(v) <= value)

    def gte(self, column, value):
        return self._where("gte", column, lambda v: v is not None and float(v) >= value)

    def in_(self, column, values):
        wanted = {str(v) for v in values}
        return self._where("in_", column, lambda v: str(v) in wanted)

    def or_(self, expression):
        # "a.eq.x,b.eq.y"
        clauses = [c.split(".eq.") for c in expression.split(",")]
        self.calls.append(("or_", expression))
        self.predicates.append(lambda row: any(str(row.get(col)) == val for col, val in clauses))
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def limit(self, count):
        self.max_rows = count
        return self

    def execute(self):
        self.db.queries.append(self)
        if (self.table, self.action) in self.db.failures:
            raise APIError({"message": f"{self.action} on {self.table} failed", "code": "500"})

        rows = self.db.tables.setdefault(self.table, [])
        if self.action == "insert":
            new = [self.payload] if isinstance(self.payload, dict) else list(self.payload)
            created = []
            for item in new:
                row = dict(item)
                row.setdefault("id", str(next(self.db.ids)))
                rows.append(row)
                created.append(dict(row))
            return SimpleNamespace(data=created)

        selected = [r for r in rows if all(p(r) for p in self.predicates)]
        if self.action == "update":
            for row in selected:
                row.update(self.payload)
        elif self.action == "delete":
            self.db.tables[self.table] = [r for r in rows if r not in selected]

        if self.ordering:
            column, desc = self.ordering
            selected = sorted(selected, key=lambda r: str(r.get(column) or ""), reverse=desc)
        if self.max_rows is not None:
            selected = selected[: self.max_rows]
        return SimpleNamespace(data=[dict(r) for r in selected])


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    def upload(self, path, file, file_options=None):
        if self.storage.fail:
            raise RuntimeError("bucket unavailable")
        self.storage.objects[(self.name, path)] = (file, file_options)
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://cdn.example.test/{self.name}/{path}"


class FakeStorage:
    def __init__(self):
        self.objects = {}
        self.fail = False

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeAuthError(AuthError):
    def __init__(self, message):
        Exception.__init__(self, message)
        self.message = message


class FakeAuth:
    """Records auth calls; responses and errors are set by each test."""

    def __init__(self, client=None):
        self.client = client
        self.calls = []
        self.sign_up_response = None
        self.sign_in_response = None
        self.error = None
        self.listeners = []

    def _call(self, name, *args):
        self.calls.append((name, args))
        if self.error is not None:
            raise self.error

    def sign_up(self, credentials):
        self._call("sign_up", credentials)
        return self.sign_up_response

    def sign_in_with_password(self, credentials):
        self._call("sign_in_with_password", credentials)
        session = getattr(self.sign_in_response, "session", None)
        if self.client is not None and session is not None:
            # Like supabase-py, a signed-in session re-authenticates the client
            self.client.options.headers["Authorization"] = f"Bearer {session.access_token}"
        return self.sign_in_response

    def sign_out(self):
        self._call("sign_out")

    def reset_password_for_email(self, email):
        self._call("reset_password_for_email", email)

    def on_auth_state_change(self, callback):
        self.listeners.append(callback)
        return SimpleNamespace(unsubscribe=lambda: self.listeners.remove(callback))


class FakeSupabase:
    def __init__(self, tables=None):
        self.tables = {name: [dict(r) for r in rows] for name, rows in (tables or {}).items()}
        self.queries = []
        self.failures = set()
        self.ids = itertools.count(1000)
        self.auth = FakeAuth(self)
        self.options = SimpleNamespace(headers={"Authorization": "Bearer service-key"})
        self.storage = FakeStorage()

    def table(self, name):
        return FakeQuery(self, name)

    def fail(self, table, action):
        self.failures.add((table, action))


class FakeChannel:
    def __init__(self, name):
        self.name = name
        self.handlers = []
        self.subscribed = False

    def on_postgres_changes(self, event, callback, table=None, schema=None, filter=None):
        self.handlers.append({"event": event, "callback": callback, "table": table, "filter": filter})
        return self

    async def subscribe(self):
        self.subscribed = True
        return self

    def emit(self, record):
        for handler in self.handlers:
            handler["callback"]({"data": {"type": "INSERT", "record": record}})


class FakeRealtime:
    def __init__(self):
        self.channels = []
        self.removed = []

    def channel(self, name):
        channel = FakeChannel(name)
        self.channels.append(channel)
        return channel

    async def remove_channel(self, channel):
        self.removed.append(channel)
        self.channels.remove(channel)

    async def remove_all_channels(self):
        for channel in list(self.channels):
            await self.remove_channel(channel)


# ══════════════════════════════════════════════════════════
# Sample data
# ══════════════════════════════════════════════════════════


def property_row(**overrides):
    row = {
        "id": "1",
        "property_type": "apartment",
        "property_details": "Sunny 2-bed flat",
        "location_details": "Near Road 27",
        "price": 20000,
        "bedroom": 2,
        "bathroom": 2,
        "area_sqft": 950,
        "pictures": ["https://img.test/a.jpg", "https://img.test/b.jpg"],
        "address_division": "6",
        "address_district": "47",
        "address_thana": "601",
        "address_area": "Dhanmondi 27",
        "location_from_map": '{"lat": 23.7465, "lng": 90.3760}',
        "owner_id": "owner-1",
        "contact_name": "Rahim",
        "contact_phone": "01712345678",
        "contact_email": "rahim@example.com",
        "availability": "immediate",
        "gender_preference": "family",
        "furnish": "semi-furnished",
        "priority": "family",
        "amenities": ["wifi", "gas", "parking"],
        "created_at": "2024-05-01T10:00:00Z",
        "updated_at": "2024-05-01T10:00:00Z",
    }
    row.update(overrides)
    return row


SAMPLE_ROWS = [
    property_row(),
    property_row(
        id="2",
        property_type="room",
        property_details="Single room for student",
        price=6000,
        bedroom=1,
        bathroom=1,
        area_sqft=180,
        address_thana="603",
        address_area="Mirpur 10",
        location_from_map={"lat": "23.8069", "lng": "90.3687"},
        owner_id="owner-2",
        availability="within-week",
        gender_preference="male",
        furnish="furnished",
        priority="bachelor",
        amenities=["wifi"],
    ),
    property_row(
        id="3",
        property_type="shop",
        property_details="Corner shop",
        price=45000,
        bedroom=None,
        bathroom=1,
        area_sqft=300,
        address_division="1",
        address_district="8",
        address_thana="102",
        address_area="Agrabad",
        location_from_map=None,
        owner_id=None,
        contact_user_id="owner-3",
        contact_name=None,
        availability="within-month",
        gender_preference=None,
        furnish=None,
        priority=None,
        amenities=None,
        pictures=None,
    ),
]


@pytest.fixture
def settings():
    return Settings(
        supabase_url="http://localhost:54321",
        supabase_anon_key="test-anon-key",
        supabase_jwt_secret="test-jwt-secret-with-at-least-32-bytes",
        autocomplete_debounce_seconds=0.01,
    )


@pytest.fixture
def supabase():
    return FakeSupabase({"properties": SAMPLE_ROWS, "users": [], "chats": [], "messages": []})


@pytest.fixture
def realtime():
    return FakeRealtime()


@pytest.fixture
def resolver():
    return get_location_resolver()
