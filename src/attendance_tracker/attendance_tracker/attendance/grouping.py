"""Session grouping and classroom filtering for the history view.

Pure functions over already-fetched records; nothing here talks to a store.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, TypeVar

from ..classrooms.model import Classroom
from ..core.constants import ALL_CLASSROOMS
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, HistoryOverview, SessionSummary

T = TypeVar("T")


def is_all_classrooms(selection: Optional[str]) -> bool:
    return not selection or selection == ALL_CLASSROOMS


def filter_by_classroom(items: Iterable[T], selection: Optional[str]) -> list[T]:
    """Keep items whose ``classroom_id`` equals ``selection``.

    ``None``, ``""`` and ``"all"`` keep everything. Works for records and for
    session summaries.
    """

    items = list(items)
    if is_all_classrooms(selection):
        return items
    return [item for item in items if item.classroom_id == selection]


def group_sessions(records: Iterable[AttendanceRecord], classrooms: Sequence[Classroom]) -> list[SessionSummary]:
    """Partition records by (date, time, classroom), newest session first.

    Members keep their encounter order. Ties on date are broken by comparing
    the time labels as strings, which is only chronological for zero-padded
    24-hour labels.
    """

    by_id = {c.id: c for c in classrooms}
    groups: dict[tuple, SessionSummary] = {}
    for record in records:
        group = groups.get(record.session_key)
        if group is None:
            group = SessionSummary(
                date=record.date,
                time=record.time,
                classroom_id=record.classroom_id,
                classroom=by_id.get(record.classroom_id),
            )
            groups[record.session_key] = group
        group.records.append(record)

    # Two stable passes: time first, then date, both newest first.
    sessions = sorted(groups.values(), key=lambda s: s.time, reverse=True)
    sessions.sort(key=lambda s: s.date, reverse=True)
    return sessions


def history_overview(records: Sequence[AttendanceRecord], sessions: Sequence[SessionSummary]) -> HistoryOverview:
    return HistoryOverview(
        total_sessions=len(sessions),
        total_present=sum(1 for r in records if r.status == AttendanceStatus.PRESENT.value),
        total_absent=sum(1 for r in records if r.status == AttendanceStatus.ABSENT.value),
    )
