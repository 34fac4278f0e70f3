from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Mapping, Optional, Protocol, Sequence, TypeVar

from ..core.enums import SortDirection
from ..core.exceptions import ValidationError

T = TypeVar("T")

Criteria = Mapping[str, Any]


@dataclass(frozen=True)
class EntitySchema(Generic[T]):
    """Describes one entity table: its columns and how a row becomes a record.

    ``columns`` excludes the ``id`` primary key, which the store generates.
    ``unique`` lists column groups no two records may share.
    """

    name: str
    table: str
    columns: tuple[str, ...]
    from_row: Callable[[Mapping[str, Any]], T]
    unique: tuple[tuple[str, ...], ...] = ()

    @property
    def all_columns(self) -> tuple[str, ...]:
        return ("id",) + self.columns

    def check_columns(self, names) -> None:
        unknown = [n for n in names if n not in self.all_columns]
        if unknown:
            raise ValidationError(f"Unknown {self.name} field(s): {', '.join(sorted(unknown))}")

    def parse_sort(self, sort: Optional[str]) -> Optional[tuple[str, SortDirection]]:
        """``"-date"`` sorts by date descending, ``"roll"`` ascending."""

        if not sort:
            return None
        direction = SortDirection.DESC if sort.startswith("-") else SortDirection.ASC
        column = sort.lstrip("-+")
        self.check_columns([column])
        return column, direction

    def build(self, entity_id: str, data: Mapping[str, Any]) -> T:
        self.check_columns(data.keys())
        return self.from_row({**data, "id": entity_id})

    def to_row(self, entity: T) -> dict:
        return {c: getattr(entity, c) for c in self.all_columns}

    def key_of(self, entity: T, columns: Sequence[str]) -> tuple:
        return tuple(getattr(entity, c) for c in columns)

    def duplicate_message(self, columns: Sequence[str]) -> str:
        return f"Duplicate {self.name}: {', '.join(columns)} must be unique"


class EntityStore(Protocol[T]):
    """Generic CRUD over one entity type.

    Every method raises ``StoreError`` when the backing store is unreachable or
    rejects the request. A write that would break one of the schema's ``unique``
    keys raises ``ValidationError`` instead.
    """

    schema: EntitySchema[T]

    def filter(self, criteria: Optional[Criteria] = None, sort: Optional[str] = None) -> Sequence[T]:
        raise NotImplementedError

    def get(self, entity_id: str) -> Optional[T]:
        raise NotImplementedError

    def create(self, data: Mapping[str, Any]) -> T:
        raise NotImplementedError

    def bulk_create(self, rows: Sequence[Mapping[str, Any]]) -> list[T]:
        raise NotImplementedError

    def update(self, entity_id: str, data: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, entity_id: str) -> bool:
        raise NotImplementedError
