from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Recognized attendance marks for one student in one session."""

    PRESENT = "present"
    ABSENT = "absent"


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"
