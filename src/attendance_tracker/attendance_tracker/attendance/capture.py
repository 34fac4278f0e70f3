from __future__ import annotations

from datetime import date
from typing import Mapping, Sequence

from ..classrooms.model import Classroom
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..students.model import Student


def parse_status(value) -> AttendanceStatus:
    try:
        return AttendanceStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"status must be 'present' or 'absent', got {value!r}")


class MarkingSheet:
    """Present/absent marks for one classroom roster, keyed by roll number.

    Marking the same roll twice keeps the last mark, and a roster that repeats
    a roll is refused up front, so a session can never hold two rows for one
    roll.
    """

    def __init__(self, classroom: Classroom, students: Sequence[Student]):
        self.classroom = classroom
        self.students = list(students)
        self._by_roll: dict[str, Student] = {}
        for s in self.students:
            if s.roll in self._by_roll:
                raise ValidationError(f"Roll {s.roll} appears more than once in {classroom.name}")
            self._by_roll[s.roll] = s
        self._marks: dict[str, AttendanceStatus] = {}

    def mark(self, roll: str, status) -> None:
        roll = str(roll).strip()
        if roll not in self._by_roll:
            raise ValidationError(f"No student with roll {roll} in {self.classroom.name}")
        self._marks[roll] = parse_status(status)

    def mark_many(self, marks: Mapping[str, str]) -> None:
        for roll, status in marks.items():
            self.mark(roll, status)

    def mark_all(self, status) -> None:
        parsed = parse_status(status)
        for roll in self._by_roll:
            self._marks[roll] = parsed

    def unmarked(self) -> list[Student]:
        return [s for s in self.students if s.roll not in self._marks]

    def counts(self) -> dict[str, int]:
        present = sum(1 for v in self._marks.values() if v == AttendanceStatus.PRESENT)
        return {"present": present, "absent": len(self._marks) - present, "unmarked": len(self.unmarked())}

    def require_complete(self) -> None:
        if not self.students:
            raise ValidationError("This classroom has no students yet")
        missing = self.unmarked()
        if missing:
            rolls = ", ".join(s.roll for s in missing)
            raise ValidationError(f"Mark every student before submitting (unmarked rolls: {rolls})")

    def to_rows(self, *, session_date: date, session_time: str, teacher_email: str) -> list[dict]:
        return [
            {
                "classroom_id": self.classroom.id,
                "date": session_date,
                "time": session_time,
                "teacher_email": teacher_email,
                "student_name": s.name,
                "student_roll": s.roll,
                "student_email": s.email,
                "status": self._marks[s.roll].value,
            }
            for s in self.students
            if s.roll in self._marks
        ]
