from __future__ import annotations

import csv
import io
import logging
from typing import Optional

from ..classrooms.model import Classroom
from ..classrooms.service import require_owned_classroom
from ..common.validators import optional_text, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..store.repository import EntityStore
from ..users.model import User
from .model import Student, roll_sort_key

logger = logging.getLogger(__name__)

ROSTER_COLUMNS = ("name", "roll", "email")


class StudentService:
    """Use case: manage the roster of one classroom."""

    def __init__(self, classrooms: EntityStore[Classroom], students: EntityStore[Student]):
        self._classrooms = classrooms
        self._students = students

    def list_for_classroom(self, teacher: User, classroom_id: str) -> list[Student]:
        require_owned_classroom(self._classrooms, classroom_id, teacher)
        students = self._students.filter({"classroom_id": classroom_id})
        return sorted(students, key=lambda s: roll_sort_key(s.roll))

    def add_student(
        self,
        teacher: User,
        classroom_id: str,
        *,
        name: str,
        roll: str,
        email: Optional[str] = None,
    ) -> Student:
        existing = self.list_for_classroom(teacher, classroom_id)
        row = self._clean_row(name=name, roll=roll, email=email)
        if any(s.roll == row["roll"] for s in existing):
            raise ValidationError(f"Roll {row['roll']} is already used in this classroom")
        return self._students.create({**row, "classroom_id": classroom_id})

    def delete_student(self, teacher: User, student_id: str) -> None:
        student = self._students.get(student_id)
        if student is None:
            raise NotFoundError("Student not found")
        require_owned_classroom(self._classrooms, student.classroom_id, teacher)
        if not self._students.delete(student_id):
            raise NotFoundError("Student not found")

    def import_roster(self, teacher: User, classroom_id: str, csv_text: str) -> list[Student]:
        """Add every student listed in a ``name,roll,email`` CSV.

        All-or-nothing: any bad line rejects the whole file, with line numbers
        in the message.
        """

        existing = {s.roll for s in self.list_for_classroom(teacher, classroom_id)}

        reader = csv.DictReader(io.StringIO((csv_text or "").lstrip("\ufeff")))
        headers = [h.strip().lower() for h in (reader.fieldnames or [])]
        missing = [c for c in ("name", "roll") if c not in headers]
        if missing:
            raise ValidationError(f"Roster file is missing column(s): {', '.join(missing)}")
        reader.fieldnames = headers

        rows: list[dict] = []
        errors: list[str] = []
        seen = set(existing)
        for raw in reader:
            line_no = reader.line_num
            if not any((v or "").strip() for v in raw.values() if isinstance(v, str)):
                continue
            try:
                row = self._clean_row(name=raw.get("name"), roll=raw.get("roll"), email=raw.get("email"))
            except ValidationError as e:
                errors.append(f"line {line_no}: {e}")
                continue
            if row["roll"] in seen:
                errors.append(f"line {line_no}: roll {row['roll']} is duplicated")
                continue
            seen.add(row["roll"])
            rows.append({**row, "classroom_id": classroom_id})

        if errors:
            raise ValidationError("; ".join(errors))
        if not rows:
            raise ValidationError("Roster file has no students")

        created = self._students.bulk_create(rows)
        logger.info("Imported %d students into classroom %s", len(created), classroom_id)
        return created

    @staticmethod
    def _clean_row(*, name, roll, email) -> dict:
        return {
            "name": require_non_empty(name, "name"),
            "roll": require_non_empty(roll, "roll"),
            "email": optional_text(email),
        }
