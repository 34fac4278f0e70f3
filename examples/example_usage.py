"""Example: drive the service layer without Flask.

Uses the in-memory stores, so no database is needed.
"""

from datetime import date

from src.attendance_tracker.attendance_tracker.container import build_memory_container


def main():
    container = build_memory_container()
    teacher = container.user_service.create_teacher(email="asha@example.com", full_name="Asha Rao", password="secret123")

    classroom = container.classroom_service.create_classroom(teacher, name="Math A", subject="Math")
    container.student_service.import_roster(
        teacher,
        classroom.id,
        "name,roll,email\nRavi,1,ravi@example.com\nMeera,2,\n",
    )
    container.attendance_service.submit_session(
        teacher,
        classroom.id,
        session_date=date(2024, 3, 1),
        session_time="09:00",
        marks={"1": "present", "2": "absent"},
    )

    print(container.attendance_service.export_csv(teacher, today=date(2024, 3, 1)).content)


if __name__ == "__main__":
    main()
