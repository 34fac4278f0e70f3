from __future__ import annotations

import threading
import uuid
from datetime import date
from typing import Any, Mapping, Optional, Sequence, TypeVar

from ..common.datetime_utils import coerce_date
from ..core.enums import SortDirection
from ..core.exceptions import ValidationError
from .repository import Criteria, EntitySchema, EntityStore

T = TypeVar("T")


class InMemoryEntityStore(EntityStore[T]):
    """Process-local entity store used for development and tests.

    ``cascades`` lists ``(store, column)`` pairs whose rows are removed when a
    record of this store is deleted, the way the MySQL schema cascades.
    Writes check the schema's ``unique`` keys under the same lock as the
    insert, the way the MySQL unique indexes do.
    """

    def __init__(self, schema: EntitySchema[T], *, cascades: Sequence[tuple["InMemoryEntityStore", str]] = ()):
        self.schema = schema
        self._rows: dict[str, T] = {}
        self._lock = threading.Lock()
        self._cascades = list(cascades)

    def _check_unique(self, entities: Sequence[T], *, replacing: Optional[str] = None) -> None:
        # caller holds the lock
        for columns in self.schema.unique:
            taken = {self.schema.key_of(e, columns) for k, e in self._rows.items() if k != replacing}
            for entity in entities:
                key = self.schema.key_of(entity, columns)
                if key in taken:
                    raise ValidationError(self.schema.duplicate_message(columns))
                taken.add(key)

    @staticmethod
    def _matches(entity, column: str, expected: Any) -> bool:
        actual = getattr(entity, column)
        if isinstance(actual, date) and isinstance(expected, str):
            expected = coerce_date(expected)
        return actual == expected

    def filter(self, criteria: Optional[Criteria] = None, sort: Optional[str] = None) -> Sequence[T]:
        criteria = dict(criteria or {})
        self.schema.check_columns(criteria.keys())
        order = self.schema.parse_sort(sort)

        with self._lock:
            items = [e for e in self._rows.values() if all(self._matches(e, k, v) for k, v in criteria.items())]

        if order:
            column, direction = order
            items.sort(
                key=lambda e: (getattr(e, column) is None, getattr(e, column) or ""),
                reverse=direction == SortDirection.DESC,
            )
        return items

    def get(self, entity_id: str) -> Optional[T]:
        with self._lock:
            return self._rows.get(entity_id)

    def create(self, data: Mapping[str, Any]) -> T:
        return self.bulk_create([data])[0]

    def bulk_create(self, rows: Sequence[Mapping[str, Any]]) -> list[T]:
        entities = [self.schema.build(uuid.uuid4().hex, data) for data in rows]
        with self._lock:
            self._check_unique(entities)
            for entity in entities:
                self._rows[entity.id] = entity
        return entities

    def update(self, entity_id: str, data: Mapping[str, Any]) -> bool:
        data = {k: v for k, v in data.items() if k != "id"}
        self.schema.check_columns(data.keys())
        with self._lock:
            current = self._rows.get(entity_id)
            if current is None or not data:
                return False
            updated = self.schema.build(entity_id, {**self.schema.to_row(current), **data})
            self._check_unique([updated], replacing=entity_id)
            self._rows[entity_id] = updated
            return True

    def delete(self, entity_id: str) -> bool:
        with self._lock:
            removed = self._rows.pop(entity_id, None)
        if removed is None:
            return False
        for store, column in self._cascades:
            store.delete_where(column, entity_id)
        return True

    def delete_where(self, column: str, value: Any) -> int:
        self.schema.check_columns([column])
        with self._lock:
            doomed = [k for k, e in self._rows.items() if self._matches(e, column, value)]
            for k in doomed:
                del self._rows[k]
        return len(doomed)
