from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..common.validators import require_field


@dataclass(frozen=True)
class User:
    """Authenticated teacher as seen by the rest of the application."""

    email: str
    full_name: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "User":
        return cls(email=require_field(row, "email"), full_name=require_field(row, "full_name"))

    def as_dict(self) -> dict:
        return {"email": self.email, "full_name": self.full_name}


@dataclass(frozen=True)
class Credentials:
    """Login data kept beside the user row; never leaves the users package."""

    email: str
    password_hash: str
    is_active: bool = True
