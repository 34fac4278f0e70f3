from __future__ import annotations

import logging
from datetime import date
from typing import Mapping, Optional

from ..classrooms.model import Classroom
from ..classrooms.service import require_owned_classroom
from ..common.datetime_utils import coerce_date, normalize_session_time, now_local
from ..core.constants import ALL_CLASSROOMS
from ..core.exceptions import ValidationError
from ..store.repository import EntityStore
from ..students.model import Student, roll_sort_key
from ..users.model import User
from .capture import MarkingSheet
from .export import build_csv_export
from .grouping import filter_by_classroom, group_sessions, history_overview, is_all_classrooms
from .model import AttendanceRecord, CsvExport, HistoryView

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        classrooms: EntityStore[Classroom],
        students: EntityStore[Student],
        attendance: EntityStore[AttendanceRecord],
    ):
        self._classrooms = classrooms
        self._students = students
        self._attendance = attendance

    # ----- capture flow -----

    def marking_sheet(self, teacher: User, classroom_id: str) -> MarkingSheet:
        classroom = require_owned_classroom(self._classrooms, classroom_id, teacher)
        students = self._students.filter({"classroom_id": classroom.id})
        return MarkingSheet(classroom, sorted(students, key=lambda s: roll_sort_key(s.roll)))

    def submit_session(
        self,
        teacher: User,
        classroom_id: str,
        *,
        session_date,
        session_time: str,
        marks: Mapping[str, str],
    ) -> list[AttendanceRecord]:
        """Record one session: one row per roster student, written in one batch.

        Refuses a session key that already has rows so a roll never appears
        twice for the same (date, time, classroom).
        """

        session_date = coerce_date(session_date, "date")
        session_time = normalize_session_time(session_time)

        sheet = self.marking_sheet(teacher, classroom_id)
        sheet.mark_many(marks or {})
        sheet.require_complete()

        existing = self._attendance.filter(
            {"classroom_id": classroom_id, "date": session_date, "time": session_time}
        )
        if existing:
            raise ValidationError(
                f"Attendance for {sheet.classroom.name} on {session_date:%Y-%m-%d} at {session_time} is already recorded"
            )

        rows = sheet.to_rows(session_date=session_date, session_time=session_time, teacher_email=teacher.email)
        created = self._attendance.bulk_create(rows)
        logger.info(
            "Recorded %d attendance rows for classroom %s (%s %s)",
            len(created),
            classroom_id,
            session_date.isoformat(),
            session_time,
        )
        return created

    # ----- history & export -----

    def _load(self, teacher: User) -> tuple[list[Classroom], list[AttendanceRecord]]:
        classrooms = list(self._classrooms.filter({"teacher_email": teacher.email}))
        records = list(self._attendance.filter({"teacher_email": teacher.email}, sort="-date"))
        return classrooms, records

    def history(self, teacher: User, *, selection: Optional[str] = None) -> HistoryView:
        classrooms, records = self._load(teacher)
        filtered = filter_by_classroom(records, selection)
        sessions = group_sessions(filtered, classrooms)
        return HistoryView(
            selection=ALL_CLASSROOMS if is_all_classrooms(selection) else selection,
            classrooms=classrooms,
            records=filtered,
            sessions=sessions,
            overview=history_overview(filtered, sessions),
        )

    def export_csv(self, teacher: User, *, selection: Optional[str] = None, today: Optional[date] = None) -> CsvExport:
        classrooms, records = self._load(teacher)
        filtered = filter_by_classroom(records, selection)
        export = build_csv_export(
            filtered,
            classrooms,
            selection=selection,
            today=today or now_local().date(),
        )
        logger.info("Exported %d attendance rows as %s", len(filtered), export.filename)
        return export
