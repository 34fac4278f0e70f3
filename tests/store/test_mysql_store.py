from __future__ import annotations

from datetime import date

import mysql.connector
import pytest

from src.attendance_tracker.attendance_tracker.core.exceptions import StoreError, ValidationError
from src.attendance_tracker.attendance_tracker.store.mysql_entity_store import MySQLEntityStore
from src.attendance_tracker.attendance_tracker.store.schemas import ATTENDANCE, CLASSROOMS, STUDENTS


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.rowcount = 0

    def execute(self, sql, params=()):
        if self._conn.error is not None:
            raise self._conn.error
        if self._conn.fail:
            raise mysql.connector.Error("boom")
        self._conn.executed.append((" ".join(sql.split()), tuple(params)))
        self.rowcount = self._conn.rowcount

    def executemany(self, sql, seq):
        for params in seq:
            self.execute(sql, params)

    def fetchall(self):
        return list(self._conn.rows)

    def fetchone(self):
        return self._conn.rows[0] if self._conn.rows else None

    def close(self):
        pass


class FakeConnection:
    def __init__(self, *, rows=(), rowcount=1, fail=False, error=None):
        self.error = error
        self.rows = list(rows)
        self.rowcount = rowcount
        self.fail = fail
        self.executed: list[tuple[str, tuple]] = []
        self.committed = 0
        self.rolled_back = 0
        self.closed = False

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self.committed += 1

    def rollback(self):
        self.rolled_back += 1

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, conn: FakeConnection):
        self.conn = conn

    def connect(self):
        return self.conn


def test_filter_builds_parameterized_query():
    conn = FakeConnection(
        rows=[
            {
                "id": "r1",
                "classroom_id": "c1",
                "date": date(2024, 3, 1),
                "time": "09:00",
                "teacher_email": "t@x.com",
                "student_name": "Asha",
                "student_roll": "7",
                "student_email": None,
                "status": "present",
            }
        ]
    )
    store = MySQLEntityStore(FakeFactory(conn), ATTENDANCE)

    records = store.filter({"teacher_email": "t@x.com"}, sort="-date")

    sql, params = conn.executed[0]
    assert sql.endswith("FROM attendance WHERE teacher_email=%s ORDER BY date DESC")
    assert params == ("t@x.com",)
    assert records[0].student_roll == "7"
    assert conn.committed == 1 and conn.closed


def test_unknown_columns_never_reach_sql():
    conn = FakeConnection()
    store = MySQLEntityStore(FakeFactory(conn), CLASSROOMS)

    with pytest.raises(ValidationError):
        store.filter({"name; DROP TABLE classrooms": "x"})
    with pytest.raises(ValidationError):
        store.filter(sort="-1=1")
    assert conn.executed == []


def test_bulk_create_inserts_every_row():
    conn = FakeConnection()
    store = MySQLEntityStore(FakeFactory(conn), CLASSROOMS)

    created = store.bulk_create(
        [
            {"name": "Math A", "subject": "Math", "teacher_email": "t@x.com"},
            {"name": "Art B", "subject": "Art", "teacher_email": "t@x.com"},
        ]
    )

    assert len(created) == 2 and created[0].id != created[1].id
    assert [p[0] for _, p in conn.executed] == [c.id for c in created]
    assert all(sql.startswith("INSERT INTO classrooms(id, name, subject, description, teacher_email)") for sql, _ in conn.executed)


def test_delete_reports_rowcount():
    conn = FakeConnection(rowcount=0)
    store = MySQLEntityStore(FakeFactory(conn), CLASSROOMS)

    assert store.delete("c1") is False
    assert conn.executed == [("DELETE FROM classrooms WHERE id=%s", ("c1",))]


def test_driver_errors_become_store_errors():
    conn = FakeConnection(fail=True)
    store = MySQLEntityStore(FakeFactory(conn), CLASSROOMS)

    with pytest.raises(StoreError):
        store.delete("c1")
    assert conn.rolled_back == 1 and conn.closed


def test_duplicate_key_becomes_validation_error():
    conn = FakeConnection(
        error=mysql.connector.IntegrityError(msg="Duplicate entry 'c1-7' for key 'uq_students_roll'", errno=1062)
    )
    store = MySQLEntityStore(FakeFactory(conn), STUDENTS)

    with pytest.raises(ValidationError, match="already exists"):
        store.create({"classroom_id": "c1", "name": "Ravi", "roll": "7"})
    assert conn.rolled_back == 1 and conn.committed == 0 and conn.closed


def test_missing_parent_row_becomes_validation_error():
    conn = FakeConnection(error=mysql.connector.IntegrityError(msg="Cannot add or update a child row", errno=1452))
    store = MySQLEntityStore(FakeFactory(conn), STUDENTS)

    with pytest.raises(ValidationError, match="conflicts"):
        store.create({"classroom_id": "gone", "name": "Ravi", "roll": "7"})
