from __future__ import annotations

import uuid
from typing import Any, Mapping, Optional, Sequence, TypeVar

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .repository import Criteria, EntitySchema, EntityStore

T = TypeVar("T")


def new_id() -> str:
    return uuid.uuid4().hex


class MySQLEntityStore(EntityStore[T]):
    """Entity store over one MySQL table.

    Column names only ever come from the schema, values always go through
    driver placeholders.
    """

    def __init__(self, conn_factory: DatabaseConnection, schema: EntitySchema[T]):
        self._conn_factory = conn_factory
        self.schema = schema

    def _select(self) -> str:
        return f"SELECT {', '.join(self.schema.all_columns)} FROM {self.schema.table}"

    def filter(self, criteria: Optional[Criteria] = None, sort: Optional[str] = None) -> Sequence[T]:
        criteria = dict(criteria or {})
        self.schema.check_columns(criteria.keys())

        sql = self._select()
        params: list[object] = []
        if criteria:
            clauses = []
            for column, value in criteria.items():
                clauses.append(f"{column}=%s")
                params.append(value)
            sql += " WHERE " + " AND ".join(clauses)

        order = self.schema.parse_sort(sort)
        if order:
            sql += f" ORDER BY {order[0]} {order[1].value}"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [self.schema.from_row(r) for r in fetchall(cur)]

    def get(self, entity_id: str) -> Optional[T]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{self._select()} WHERE id=%s", (entity_id,))
            row = fetchone(cur)
            return self.schema.from_row(row) if row else None

    def create(self, data: Mapping[str, Any]) -> T:
        return self.bulk_create([data])[0]

    def bulk_create(self, rows: Sequence[Mapping[str, Any]]) -> list[T]:
        entities = [self.schema.build(new_id(), data) for data in rows]
        if not entities:
            return []

        columns = self.schema.all_columns
        placeholders = ",".join(["%s"] * len(columns))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                f"INSERT INTO {self.schema.table}({', '.join(columns)}) VALUES({placeholders})",
                [tuple(self.schema.to_row(e)[c] for c in columns) for e in entities],
            )
        return entities

    def update(self, entity_id: str, data: Mapping[str, Any]) -> bool:
        data = {k: v for k, v in data.items() if k != "id"}
        if not data:
            return False
        self.schema.check_columns(data.keys())

        current = self.get(entity_id)
        if current is None:
            return False
        # Validate the merged record before writing.
        self.schema.build(entity_id, {**self.schema.to_row(current), **data})

        assignments = ", ".join(f"{c}=%s" for c in data)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE {self.schema.table} SET {assignments} WHERE id=%s",
                tuple(data.values()) + (entity_id,),
            )
            return cur.rowcount > 0

    def delete(self, entity_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {self.schema.table} WHERE id=%s", (entity_id,))
            return cur.rowcount > 0
