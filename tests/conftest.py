# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# This file contains shared fixtures for all tests.
#
# FIXTURES:
# ---------
# - reset_process_state (autouse)
#     Clear the process-wide MemoryCache and default manager so
#     every test probes the schema afresh.
#
# - unified_db / split_db
#     In-memory FakeDatabase shaped like each Koha layout.
#
# - db / manager
#     Parametrized over both layouts for layout-independent tests.
#
# NOTES:
# ------
# - FakeDatabase implements the storage.Database protocol, so the
#   adapters and the probe run unchanged against it.
# - No MySQL server is needed.
# ==============================================

import copy
import time
from contextlib import contextmanager
from datetime import date

import pytest

from opac_pages.cache import MemoryCache
from opac_pages.errors import AlreadyExists
from opac_pages.pages import PageManager, set_default_manager

TODAY = date(2024, 5, 1)

UNIFIED_SCHEMA = {
    "additional_contents": {
        "idnew": "int", "category": "varchar", "code": "varchar", "location": "varchar",
        "branchcode": "varchar", "title": "text", "content": "mediumtext", "lang": "varchar",
        "published_on": "date", "number": "int",
    },
}

SPLIT_SCHEMA = {
    "additional_contents": {
        "id": "int", "category": "varchar", "code": "varchar", "location": "varchar",
        "branchcode": "varchar", "published_on": "date", "number": "int",
    },
    "additional_contents_localizations": {
        "id": "int", "additional_content_id": "int", "title": "text",
        "content": "mediumtext", "lang": "varchar",
    },
}

PRIMARY_KEYS = {
    ("legacy", "additional_contents"): "idnew",
    ("split", "additional_contents"): "id",
    ("split", "additional_contents_localizations"): "id",
}

UNIQUE_KEYS = {
    ("split", "additional_contents_localizations"): ("additional_content_id", "lang"),
}


class FakeDatabase:
    """In-memory stand-in for MySQLClient, shaped like one Koha layout."""

    def __init__(self, layout: str, introspection_delay: float = 0.0):
        self.layout = layout
        self.schema = copy.deepcopy(UNIFIED_SCHEMA if layout == "legacy" else SPLIT_SCHEMA)
        self.tables = {name: [] for name in self.schema}
        self._next_id = {name: 1 for name in self.schema}
        self.introspections = 0
        self.introspection_delay = introspection_delay
        self.insert_errors = {}
        self.update_errors = {}
        self.commits = 0
        self.rollbacks = 0
        self._in_transaction = False

    # --- introspection ---

    def get_current_columns(self, table_name):
        self.introspections += 1
        if self.introspection_delay:
            time.sleep(self.introspection_delay)
        return dict(self.schema.get(table_name, {}))

    def table_exists(self, table_name):
        return table_name in self.schema

    # --- reads ---

    @staticmethod
    def _matches(row, where):
        return all(row.get(column) == value for column, value in where.items())

    def select(self, table, where, order_by=None, limit=None):
        rows = [dict(row) for row in self.tables[table] if self._matches(row, where)]
        if order_by:
            rows.sort(key=lambda row: row[order_by])
        if limit is not None:
            rows = rows[:limit]
        return rows

    def count(self, table, where):
        return len(self.select(table, where))

    # --- writes ---

    def insert(self, table, values):
        if table in self.insert_errors:
            raise self.insert_errors[table]
        unique = UNIQUE_KEYS.get((self.layout, table))
        if unique:
            probe = {column: values.get(column) for column in unique}
            if self.count(table, probe):
                raise AlreadyExists(f"Duplicate entry in {table}")
        pk = PRIMARY_KEYS[(self.layout, table)]
        row = {column: None for column in self.schema[table]}
        row.update(values)
        row[pk] = self._next_id[table]
        self._next_id[table] += 1
        self.tables[table].append(row)
        return row[pk]

    def update(self, table, values, where):
        if table in self.update_errors:
            raise self.update_errors[table]
        updated = 0
        for row in self.tables[table]:
            if self._matches(row, where):
                row.update(values)
                updated += 1
        return updated

    def delete(self, table, where):
        before = len(self.tables[table])
        self.tables[table] = [row for row in self.tables[table] if not self._matches(row, where)]
        return before - len(self.tables[table])

    @contextmanager
    def transaction(self):
        if self._in_transaction:
            yield self
            return
        snapshot = (copy.deepcopy(self.tables), dict(self._next_id))
        self._in_transaction = True
        try:
            yield self
        except BaseException:
            self.tables, self._next_id = snapshot
            self.rollbacks += 1
            raise
        else:
            self.commits += 1
        finally:
            self._in_transaction = False

    # --- test helpers ---

    def rows(self, table):
        return [dict(row) for row in self.tables[table]]

    def snapshot(self):
        return copy.deepcopy(self.tables)


@pytest.fixture(autouse=True)
def reset_process_state():
    MemoryCache.get_instance().clear()
    yield
    MemoryCache.get_instance().clear()
    set_default_manager(None)


@pytest.fixture
def unified_db():
    return FakeDatabase("legacy")


@pytest.fixture
def split_db():
    return FakeDatabase("split")


@pytest.fixture(params=["legacy", "split"])
def db(request):
    return FakeDatabase(request.param)


@pytest.fixture
def manager(db):
    return PageManager(db, clock=lambda: TODAY)


@pytest.fixture
def unified_manager(unified_db):
    return PageManager(unified_db, clock=lambda: TODAY)


@pytest.fixture
def split_manager(split_db):
    return PageManager(split_db, clock=lambda: TODAY)
