from __future__ import annotations

from pathlib import Path

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.internship_tracker.internship_tracker.core.exceptions import ConflictError, UnavailableError, ValidationError
from src.internship_tracker.internship_tracker.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use
from src.internship_tracker.internship_tracker.database.mysql_base import db_cursor

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


class FakeCursor:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self):
        self.committed = False
        self.rolled_back = False
        self.closed = False
        self.cursor_obj = FakeCursor()

    def cursor(self, dictionary=True):
        return self.cursor_obj

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, conn=None, error=None):
        self.conn = conn or FakeConnection()
        self.error = error

    def connect(self, *, with_database=True):
        if self.error:
            raise self.error
        return self.conn


def test_commit_on_success():
    factory = FakeFactory()

    with db_cursor(factory) as (_, cur):
        assert cur is factory.conn.cursor_obj

    assert factory.conn.committed
    assert factory.conn.closed
    assert factory.conn.cursor_obj.closed


def test_duplicate_key_becomes_conflict():
    factory = FakeFactory()

    with pytest.raises(ConflictError):
        with db_cursor(factory):
            raise mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)

    assert factory.conn.rolled_back
    assert not factory.conn.committed


def test_driver_error_becomes_unavailable():
    factory = FakeFactory()

    with pytest.raises(UnavailableError):
        with db_cursor(factory):
            raise mysql.connector.OperationalError(msg="Lost connection", errno=2013)

    assert factory.conn.rolled_back


def test_domain_errors_roll_back_and_propagate():
    factory = FakeFactory()

    with pytest.raises(ValidationError):
        with db_cursor(factory):
            raise ValidationError("nope")

    assert factory.conn.rolled_back
    assert factory.conn.closed


def test_connect_failure_is_unavailable():
    factory = FakeFactory(error=mysql.connector.InterfaceError(msg="Can't connect", errno=2003))

    with pytest.raises(UnavailableError):
        with db_cursor(factory):
            pass


def test_schema_splits_into_create_table_statements():
    sql = _strip_create_db_and_use(SCHEMA_PATH.read_text(encoding="utf-8"))
    statements = list(_iter_sql_statements(sql))

    assert all(s.upper().startswith("CREATE TABLE") for s in statements)
    assert len(statements) == 5


def test_splitter_keeps_semicolons_inside_quotes():
    statements = list(_iter_sql_statements("INSERT INTO t VALUES ('a;b'); SELECT 1;"))

    assert statements == ["INSERT INTO t VALUES ('a;b')", "SELECT 1"]
