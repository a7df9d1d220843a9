from datetime import date

import pytest

from lumina.data import data_service
from lumina.data.local_store import LocalStore
from lumina.data.supabase_client import BackendError


class FakeClient:
    """In-memory stand-in for the PostgREST client module."""

    def __init__(self, configured=True):
        self.configured = configured
        self.fail = False
        self.tables = {}
        self.calls = []

    def is_configured(self):
        return self.configured

    def _check(self, method, table):
        self.calls.append((method, table))
        if self.fail:
            raise BackendError("Backend unreachable: boom")

    def _rows(self, table):
        return self.tables.setdefault(table, [])

    def select(self, table, filters=None, order=None, desc=False):
        self._check("select", table)
        rows = [
            dict(row)
            for row in self._rows(table)
            if all(str(row.get(key)) == str(value) for key, value in (filters or {}).items())
        ]
        if order:
            rows.sort(key=lambda row: str(row.get(order) or ""), reverse=desc)
        return rows

    def select_one(self, table, filters):
        rows = self.select(table, filters)
        return rows[0] if rows else None

    def insert(self, table, row):
        self._check("insert", table)
        self._rows(table).append(dict(row))
        return dict(row)

    def update(self, table, row_id, patch):
        self._check("update", table)
        for row in self._rows(table):
            if row.get("id") == row_id:
                row.update(patch)
                return dict(row)
        return None

    def delete(self, table, row_id):
        self._check("delete", table)
        self.tables[table] = [row for row in self._rows(table) if row.get("id") != row_id]

    def upsert(self, table, row, on_conflict):
        self._check("upsert", table)
        rows = self._rows(table)
        for existing in rows:
            if existing.get(on_conflict) == row.get(on_conflict):
                existing.update(row)
                return dict(existing)
        rows.append(dict(row))
        return dict(row)


@pytest.fixture
def store(tmp_path):
    return LocalStore(f"sqlite:///{tmp_path / 'lumina_test.db'}")


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def today():
    return date(2026, 3, 11)


@pytest.fixture
def service(fake_client, store, today):
    data_service.configure(fake_client, store, today_getter=lambda: today)
    yield data_service
    data_service.configure(None)
