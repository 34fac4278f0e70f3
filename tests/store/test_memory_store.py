from __future__ import annotations

from datetime import date

import pytest

from src.attendance_tracker.attendance_tracker.core.exceptions import ValidationError
from src.attendance_tracker.attendance_tracker.store.memory_entity_store import InMemoryEntityStore
from src.attendance_tracker.attendance_tracker.store.schemas import ATTENDANCE, STUDENTS


def row(day: str, roll: str, **extra) -> dict:
    data = {
        "classroom_id": "c1",
        "date": day,
        "time": "09:00",
        "teacher_email": "t@x.com",
        "student_name": f"S{roll}",
        "student_roll": roll,
        "status": "present",
    }
    data.update(extra)
    return data


def test_create_validates_shape():
    store = InMemoryEntityStore(ATTENDANCE)

    with pytest.raises(ValidationError):
        store.create(row("2024-03-01", "1", student_name=""))
    with pytest.raises(ValidationError):
        store.create(row("not-a-date", "1"))
    with pytest.raises(ValidationError):
        store.create({**row("2024-03-01", "1"), "colour": "red"})


def test_filter_and_descending_sort():
    store = InMemoryEntityStore(ATTENDANCE)
    store.bulk_create([row("2024-03-01", "1"), row("2024-03-03", "2"), row("2024-03-02", "3", teacher_email="o@x.com")])

    mine = store.filter({"teacher_email": "t@x.com"}, sort="-date")
    assert [r.date for r in mine] == [date(2024, 3, 3), date(2024, 3, 1)]
    assert len(store.filter({"date": "2024-03-02"})) == 1

    with pytest.raises(ValidationError):
        store.filter({"nope": 1})
    with pytest.raises(ValidationError):
        store.filter(sort="-nope")


def test_update_merges_and_revalidates():
    store = InMemoryEntityStore(STUDENTS)
    s = store.create({"classroom_id": "c1", "name": "Ravi", "roll": "1"})

    assert store.update(s.id, {"email": "ravi@x.com"}) is True
    assert store.get(s.id).email == "ravi@x.com"
    with pytest.raises(ValidationError):
        store.update(s.id, {"name": ""})
    assert store.update("missing", {"name": "X"}) is False


def test_delete_cascades():
    students = InMemoryEntityStore(STUDENTS)
    parent = InMemoryEntityStore(STUDENTS, cascades=[(students, "classroom_id")])
    p = parent.create({"classroom_id": "root", "name": "Parent", "roll": "0"})
    students.create({"classroom_id": p.id, "name": "Child", "roll": "1"})
    students.create({"classroom_id": "other", "name": "Kept", "roll": "2"})

    assert parent.delete(p.id) is True
    assert [s.name for s in students.filter()] == ["Kept"]
    assert parent.delete(p.id) is False


def test_unique_keys_reject_whole_batch():
    store = InMemoryEntityStore(ATTENDANCE)
    store.create(row("2024-03-01", "1"))

    with pytest.raises(ValidationError):
        store.bulk_create([row("2024-03-01", "2"), row("2024-03-01", "1")])
    with pytest.raises(ValidationError):
        store.bulk_create([row("2024-03-02", "5"), row("2024-03-02", "5")])
    assert len(store.filter()) == 1

    # Same roll in a different session is fine.
    store.create(row("2024-03-01", "1", time="13:00"))
    assert len(store.filter()) == 2


def test_update_cannot_take_another_records_key():
    store = InMemoryEntityStore(STUDENTS)
    store.create({"classroom_id": "c1", "name": "Ravi", "roll": "1"})
    meera = store.create({"classroom_id": "c1", "name": "Meera", "roll": "2"})

    with pytest.raises(ValidationError):
        store.update(meera.id, {"roll": "1"})
    assert store.update(meera.id, {"roll": "2", "name": "Meera S"}) is True
    assert store.get(meera.id).roll == "2"
