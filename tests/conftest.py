"""
Shared fixtures: an in-memory sqlite database that honours the same
table_exists / count / query contract as ClickHouseDatabase.
"""

import re
import sqlite3

import pytest

_PARAM_RE = re.compile(r"%\((\w+)\)s")


class SqliteDatabase:
    def __init__(self):
        self.conn = sqlite3.connect(":memory:")
        self.conn.row_factory = sqlite3.Row
        self.statements = []

    def create_table(self, table, columns, rows=()):
        cols = ", ".join(f"{c} TEXT" for c in columns)
        self.conn.execute(f"CREATE TABLE {table} ({cols})")
        marks = ", ".join("?" for _ in columns)
        self.conn.executemany(
            f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({marks})",
            [tuple(row.get(c) for c in columns) for row in rows],
        )

    def _execute(self, sql, params):
        self.statements.append((sql, dict(params or {})))
        # clickhouse-driver style %(name)s -> sqlite :name
        return self.conn.execute(_PARAM_RE.sub(r":\1", sql), params or {})

    def table_exists(self, name):
        row = self.conn.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (name,)
        ).fetchone()
        return row is not None

    def count(self, sql, params=None):
        return int(self._execute(sql, params).fetchone()[0])

    def query(self, sql, params=None):
        return [dict(r) for r in self._execute(sql, params).fetchall()]


@pytest.fixture
def db():
    database = SqliteDatabase()
    yield database
    database.conn.close()
