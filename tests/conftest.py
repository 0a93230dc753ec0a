"""
Shared fixtures: an in-memory stand-in for the Supabase client, the app wired
to it, and a controller talking to the app through TestClient.
"""

import copy
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from group_admin.client import GatewayClient, GroupListController
from group_admin.database.supabase_client import get_supabase
from group_admin.main import app, limiter


class FakeAPIError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FakeResult:
    def __init__(self, data: Any):
        self.data = data


class FakeQuery:
    def __init__(self, store: "FakeSupabase", table: str):
        self.store = store
        self.table = table
        self.columns: Optional[List[str]] = None
        self.filters: List[tuple] = []

    def select(self, columns: str) -> "FakeQuery":
        self.columns = [c.strip() for c in columns.split(",")]
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append((column, value))
        return self

    def execute(self) -> FakeResult:
        self.store.check()
        rows = [
            row for row in self.store.tables.get(self.table, [])
            if all(row.get(column) == value for column, value in self.filters)
        ]
        return FakeResult([
            {c: copy.deepcopy(row[c]) for c in self.columns if c in row} for row in rows
        ])


class FakeRpc:
    def __init__(self, store: "FakeSupabase", function: str, params: Dict[str, Any]):
        self.store = store
        self.function = function
        self.params = params

    def execute(self) -> FakeResult:
        self.store.check()
        self.store.rpc_calls.append((self.function, dict(self.params)))
        group_id = self.params["p_group_id"]
        field = self.params["p_field"]
        value = self.params["p_value"]
        if group_id is None:
            raise FakeAPIError("Group id is required")
        for row in self.store.tables.get(self.params["p_table"], []):
            if row.get("id") != group_id:
                continue
            current = row.get(field) if isinstance(row.get(field), list) else []
            if self.function == "group_array_union":
                row[field] = current if value in current else current + [value]
            elif self.function == "group_array_remove":
                row[field] = [item for item in current if item != value]
            else:
                raise FakeAPIError(f"Unknown function {self.function}")
        return FakeResult(None)


class FakeSupabase:
    """Just enough of supabase.Client for the gateway services."""

    def __init__(self, tables: Dict[str, List[Dict[str, Any]]]):
        self.tables = tables
        self.rpc_calls: List[tuple] = []
        self.fail_with: Optional[str] = None

    def check(self) -> None:
        if self.fail_with:
            raise FakeAPIError(self.fail_with)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, function: str, params: Dict[str, Any]) -> FakeRpc:
        return FakeRpc(self, function, params)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()


@pytest.fixture
def store() -> FakeSupabase:
    return FakeSupabase({
        "groups": [
            {"id": "g1", "name": "Eng", "users": [], "members": ["m1"], "created": None},
            {"id": "g2", "name": "Design", "members": ["m2"], "created": "2024-03-01T10:00:00Z"},
            {"id": "g3", "name": "Engagement", "users": ["u1"], "members": "m3", "created": None},
        ],
        "posts": [
            {"id": "p1", "categories": "news", "member": "m1"},
            {"id": "p2", "categories": ["release", "infra"], "member": "m1"},
            {"id": "p3", "categories": "design", "member": "m2"},
        ],
    })


@pytest.fixture
def client(store: FakeSupabase):
    app.dependency_overrides[get_supabase] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def gateway(client: TestClient) -> GatewayClient:
    return GatewayClient(http=client)


@pytest.fixture
def controller(gateway: GatewayClient) -> GroupListController:
    return GroupListController(gateway)
