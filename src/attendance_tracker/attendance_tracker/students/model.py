from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..common.validators import optional_text, require_field


@dataclass(frozen=True)
class Student:
    id: str
    classroom_id: str
    name: str
    roll: str
    email: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Student":
        return cls(
            id=require_field(row, "id"),
            classroom_id=require_field(row, "classroom_id"),
            name=require_field(row, "name"),
            roll=require_field(row, "roll"),
            email=optional_text(row.get("email")),
        )

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "classroom_id": self.classroom_id,
            "name": self.name,
            "roll": self.roll,
            "email": self.email,
        }


def roll_sort_key(roll: str) -> tuple:
    """Numeric rolls in numeric order ("2" before "10"), then the rest by text."""

    text = roll.strip()
    if text.isdigit():
        return (0, int(text), text)
    return (1, 0, text)
