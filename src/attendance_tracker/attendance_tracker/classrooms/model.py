from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..common.validators import optional_text, require_field


@dataclass(frozen=True)
class Classroom:
    id: str
    name: str
    subject: str
    teacher_email: str
    description: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Classroom":
        return cls(
            id=require_field(row, "id"),
            name=require_field(row, "name"),
            subject=require_field(row, "subject"),
            teacher_email=require_field(row, "teacher_email"),
            description=optional_text(row.get("description")),
        )

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "subject": self.subject,
            "description": self.description,
            "teacher_email": self.teacher_email,
        }


@dataclass(frozen=True)
class ClassroomSummary:
    """Dashboard card: a classroom plus its roster size."""

    classroom: Classroom
    student_count: int


@dataclass(frozen=True)
class DashboardView:
    classrooms: list[ClassroomSummary] = field(default_factory=list)

    @property
    def total_classrooms(self) -> int:
        return len(self.classrooms)

    @property
    def total_students(self) -> int:
        return sum(s.student_count for s in self.classrooms)

    @property
    def distinct_subjects(self) -> int:
        # Exact match: "Math" and "math" are two subjects.
        return len({s.classroom.subject for s in self.classrooms})
