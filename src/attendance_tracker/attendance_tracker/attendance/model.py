from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Optional

from ..classrooms.model import Classroom
from ..common.datetime_utils import coerce_date
from ..common.validators import optional_text, require_field
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One student's mark in one session.

    ``status`` stays a plain string: rows written by other clients may carry
    values outside ``AttendanceStatus`` and must still be listed and exported.
    """

    id: str
    classroom_id: str
    date: date
    time: str
    teacher_email: str
    student_name: str
    student_roll: str
    status: str
    student_email: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AttendanceRecord":
        return cls(
            id=require_field(row, "id"),
            classroom_id=require_field(row, "classroom_id"),
            date=coerce_date(row.get("date")),
            time=require_field(row, "time"),
            teacher_email=require_field(row, "teacher_email"),
            student_name=require_field(row, "student_name"),
            student_roll=require_field(row, "student_roll"),
            status=require_field(row, "status"),
            student_email=optional_text(row.get("student_email")),
        )

    @property
    def session_key(self) -> tuple[date, str, str]:
        return (self.date, self.time, self.classroom_id)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "classroom_id": self.classroom_id,
            "date": self.date.strftime("%Y-%m-%d"),
            "time": self.time,
            "teacher_email": self.teacher_email,
            "student_name": self.student_name,
            "student_roll": self.student_roll,
            "student_email": self.student_email,
            "status": self.status,
        }


@dataclass(frozen=True)
class SessionStats:
    present: int
    absent: int
    total: int


@dataclass(frozen=True)
class SessionSummary:
    """All records sharing one (date, time, classroom) key, in encounter order."""

    date: date
    time: str
    classroom_id: str
    classroom: Optional[Classroom]
    records: list[AttendanceRecord] = field(default_factory=list)

    @property
    def stats(self) -> SessionStats:
        present = sum(1 for r in self.records if r.status == AttendanceStatus.PRESENT.value)
        absent = sum(1 for r in self.records if r.status == AttendanceStatus.ABSENT.value)
        return SessionStats(present=present, absent=absent, total=len(self.records))


@dataclass(frozen=True)
class HistoryOverview:
    total_sessions: int
    total_present: int
    total_absent: int


@dataclass(frozen=True)
class HistoryView:
    selection: str
    classrooms: list[Classroom]
    records: list[AttendanceRecord]
    sessions: list[SessionSummary]
    overview: HistoryOverview


@dataclass(frozen=True)
class CsvExport:
    filename: str
    content: str
    mimetype: str
