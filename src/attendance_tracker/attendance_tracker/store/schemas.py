from __future__ import annotations

from ..attendance.model import AttendanceRecord
from ..classrooms.model import Classroom
from ..students.model import Student
from .repository import EntitySchema

CLASSROOMS: EntitySchema[Classroom] = EntitySchema(
    name="classroom",
    table="classrooms",
    columns=("name", "subject", "description", "teacher_email"),
    from_row=Classroom.from_row,
)

STUDENTS: EntitySchema[Student] = EntitySchema(
    name="student",
    table="students",
    columns=("classroom_id", "name", "roll", "email"),
    from_row=Student.from_row,
    unique=(("classroom_id", "roll"),),
)

ATTENDANCE: EntitySchema[AttendanceRecord] = EntitySchema(
    name="attendance",
    table="attendance",
    columns=(
        "classroom_id",
        "date",
        "time",
        "teacher_email",
        "student_name",
        "student_roll",
        "student_email",
        "status",
    ),
    from_row=AttendanceRecord.from_row,
    unique=(("classroom_id", "date", "time", "student_roll"),),
)
