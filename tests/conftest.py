import itertools

import pytest

from fastapi.testclient import TestClient

from gorevlerim.config import get_settings
from gorevlerim.exceptions import StoreError

USER_ID = "user-1"
API_KEY = "secret-key"
PERSONAL_GROUP_ID = "group-personal"

SINGLE_ROW_ERROR = "JSON object requested, multiple (or no) rows returned"

DEFAULTS = {
    "tasks": {"description": None, "block_reason": None, "updated_at": None},
    "subtasks": {"block_reason": None},
}


class FakeStore:
    """In-memory stand-in for gorevlerim.services.store with PostgREST semantics."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {"tasks": [], "subtasks": [], "groups": [], "api_keys": []}
        self.fail_titles: set[str] = set()
        self._ids = itertools.count(1)

    # --- helpers for tests ---

    def add(self, table: str, **row) -> dict:
        row = {**DEFAULTS.get(table, {}), **row}
        row.setdefault("id", f"{table}-{next(self._ids)}")
        self.tables[table].append(row)
        return row

    def rows(self, table: str, **filters) -> list[dict]:
        return [r for r in self.tables[table] if self._match(r, filters)]

    @staticmethod
    def _match(row: dict, filters: dict | None) -> bool:
        return all(row.get(k) == v for k, v in (filters or {}).items())

    # --- store interface ---

    def select(self, table, filters=None, columns="*", order=None, limit=None):
        rows = [dict(r) for r in self.rows(table, **(filters or {}))]
        if order:
            column, direction = order.rsplit(".", 1)
            rows.sort(key=lambda r: r[column], reverse=direction == "desc")
        if "subtasks(*)" in columns:
            for row in rows:
                row["subtasks"] = [dict(s) for s in self.rows("subtasks", task_id=row["id"])]
        if limit is not None:
            rows = rows[:limit]
        return rows

    def select_maybe_one(self, table, filters=None, columns="*"):
        rows = self.select(table, filters, columns=columns, limit=1)
        return rows[0] if rows else None

    def insert(self, table, rows):
        created = []
        for row in rows:
            if row.get("title") in self.fail_titles:
                raise StoreError(f'duplicate key value violates unique constraint for "{row["title"]}"')
            created.append(dict(self.add(table, **row)))
        return created

    def insert_one(self, table, row):
        return self.insert(table, [row])[0]

    def update(self, table, values, filters):
        matched = self.rows(table, **filters)
        for row in matched:
            row.update(values)
        return [dict(r) for r in matched]

    def update_one(self, table, values, filters):
        if len(self.rows(table, **filters)) != 1:
            raise StoreError(SINGLE_ROW_ERROR)
        return self.update(table, values, filters)[0]

    def delete_one(self, table, filters):
        matched = self.rows(table, **filters)
        if len(matched) != 1:
            raise StoreError(SINGLE_ROW_ERROR)
        row = matched[0]
        self.tables[table].remove(row)
        if table == "tasks":
            self.tables["subtasks"] = [s for s in self.tables["subtasks"] if s["task_id"] != row["id"]]
        return dict(row)


@pytest.fixture(autouse=True)
def settings(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "service-key")
    monkeypatch.setenv("TODO_USER_ID", USER_ID)
    monkeypatch.setenv("TODO_API_KEY", API_KEY)
    monkeypatch.setenv("CONSENT_PAGE_URL", "https://consent.example.com/app/")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def fake_store(mocker):
    """FakeStore patched in for every module that talks to the store."""
    fake = FakeStore()
    for target in (
        "gorevlerim.services.tasks.store",
        "gorevlerim.services.owners.store",
        "gorevlerim.services.api_keys.store",
    ):
        mocker.patch(target, fake)
    return fake


@pytest.fixture
def personal_group(fake_store):
    return fake_store.add("groups", id=PERSONAL_GROUP_ID, created_by=USER_ID, is_personal=True)


def add_task(store: FakeStore, title: str, date: str, sort_order: int,
             owner_id: str = USER_ID, owner_type: str = "user", status: str = "pending", **extra) -> dict:
    return store.add(
        "tasks",
        owner_id=owner_id,
        owner_type=owner_type,
        date=date,
        title=title,
        status=status,
        sort_order=sort_order,
        created_by=USER_ID,
        **extra,
    )


@pytest.fixture
def api_client():
    """TestClient for the task API, authenticated with the static key."""
    from gorevlerim.main import api
    return TestClient(api, headers={"x-api-key": API_KEY})


@pytest.fixture
def auth_client():
    """TestClient for the OAuth endpoints."""
    from gorevlerim.main import auth_api
    return TestClient(auth_api, follow_redirects=False)
