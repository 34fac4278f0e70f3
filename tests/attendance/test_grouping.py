from __future__ import annotations

from collections import Counter
from datetime import date

from src.attendance_tracker.attendance_tracker.attendance.grouping import (
    filter_by_classroom,
    group_sessions,
    history_overview,
)
from src.attendance_tracker.attendance_tracker.attendance.model import AttendanceRecord
from src.attendance_tracker.attendance_tracker.classrooms.model import Classroom

MATH = Classroom(id="c1", name="Math A", subject="Math", teacher_email="t@x.com")
ART = Classroom(id="c2", name="Art B", subject="Art", teacher_email="t@x.com")

_seq = 0


def rec(day: str, time: str, classroom_id: str, roll: str, status: str = "present") -> AttendanceRecord:
    global _seq
    _seq += 1
    return AttendanceRecord(
        id=f"r{_seq}",
        classroom_id=classroom_id,
        date=date.fromisoformat(day),
        time=time,
        teacher_email="t@x.com",
        student_name=f"Student {roll}",
        student_roll=roll,
        status=status,
    )


def sample_records():
    return [
        rec("2024-03-01", "09:00", "c1", "1"),
        rec("2024-03-02", "09:00", "c1", "1", "absent"),
        rec("2024-03-01", "09:00", "c1", "2", "absent"),
        rec("2024-03-01", "14:30", "c2", "1"),
        rec("2024-03-02", "09:00", "c1", "2"),
        rec("2024-03-01", "09:00", "c9", "5"),
    ]


def test_grouping_is_lossless_partition():
    records = sample_records()
    sessions = group_sessions(records, [MATH, ART])

    flattened = [r for s in sessions for r in s.records]
    assert Counter(r.id for r in flattened) == Counter(r.id for r in records)
    for s in sessions:
        assert {r.session_key for r in s.records} == {(s.date, s.time, s.classroom_id)}


def test_members_keep_encounter_order():
    records = sample_records()
    sessions = group_sessions(records, [MATH, ART])

    march_first_math = next(s for s in sessions if s.date == date(2024, 3, 1) and s.classroom_id == "c1")
    assert [r.student_roll for r in march_first_math.records] == ["1", "2"]


def test_sessions_newest_date_then_latest_time_first():
    sessions = group_sessions(sample_records(), [MATH, ART])

    keys = [(s.date.isoformat(), s.time) for s in sessions]
    assert keys[0] == ("2024-03-02", "09:00")
    assert keys[1] == ("2024-03-01", "14:30")
    for a, b in zip(sessions, sessions[1:]):
        assert a.date > b.date or (a.date == b.date and a.time >= b.time)


def test_unknown_classroom_resolves_to_none():
    sessions = group_sessions(sample_records(), [MATH, ART])

    orphan = next(s for s in sessions if s.classroom_id == "c9")
    assert orphan.classroom is None
    known = next(s for s in sessions if s.classroom_id == "c2")
    assert known.classroom == ART


def test_stats_count_only_recognized_statuses():
    records = [
        rec("2024-03-01", "09:00", "c1", "1", "present"),
        rec("2024-03-01", "09:00", "c1", "2", "absent"),
        rec("2024-03-01", "09:00", "c1", "3", "late"),
    ]
    (session,) = group_sessions(records, [MATH])

    stats = session.stats
    assert (stats.present, stats.absent, stats.total) == (1, 1, 3)
    assert stats.present + stats.absent < stats.total


def test_stats_sum_to_total_when_all_recognized():
    (session,) = group_sessions(
        [rec("2024-03-01", "09:00", "c1", "1", "present"), rec("2024-03-01", "09:00", "c1", "2", "absent")],
        [MATH],
    )
    assert session.stats.present + session.stats.absent == session.stats.total == 2


def test_filter_sentinels_return_everything():
    records = sample_records()

    assert filter_by_classroom(records, "all") == records
    assert filter_by_classroom(records, "") == records
    assert filter_by_classroom(records, None) == records


def test_filter_by_id_is_exact_and_idempotent():
    records = sample_records()

    once = filter_by_classroom(records, "c1")
    assert once and all(r.classroom_id == "c1" for r in once)
    assert filter_by_classroom(once, "c1") == once
    assert filter_by_classroom(records, "C1") == []


def test_filter_works_on_sessions():
    sessions = group_sessions(sample_records(), [MATH, ART])

    assert [s.classroom_id for s in filter_by_classroom(sessions, "c2")] == ["c2"]


def test_history_overview_totals():
    records = sample_records()
    sessions = group_sessions(records, [MATH, ART])

    overview = history_overview(records, sessions)
    assert overview.total_sessions == 4
    assert overview.total_present == 4
    assert overview.total_absent == 2
