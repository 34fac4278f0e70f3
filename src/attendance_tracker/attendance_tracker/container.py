from __future__ import annotations

from dataclasses import dataclass

from .attendance.model import AttendanceRecord
from .attendance.service import AttendanceService
from .classrooms.model import Classroom
from .classrooms.service import ClassroomService
from .core.constants import DEFAULT_STUDENT_COUNT_WORKERS
from .database.connection import DBConfig, DatabaseConnection
from .store.memory_entity_store import InMemoryEntityStore
from .store.mysql_entity_store import MySQLEntityStore
from .store.repository import EntityStore
from .store.schemas import ATTENDANCE, CLASSROOMS, STUDENTS
from .students.model import Student
from .students.service import StudentService
from .users.identity import SessionIdentityProvider
from .users.memory_user_repository import InMemoryUserRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    classrooms: EntityStore[Classroom]
    students: EntityStore[Student]
    attendance: EntityStore[AttendanceRecord]

    identity: SessionIdentityProvider
    auth_service: AuthService
    user_service: UserService
    classroom_service: ClassroomService
    student_service: StudentService
    attendance_service: AttendanceService


def assemble_container(
    *,
    users_repo: UserRepository,
    classrooms: EntityStore[Classroom],
    students: EntityStore[Student],
    attendance: EntityStore[AttendanceRecord],
    student_count_workers: int = DEFAULT_STUDENT_COUNT_WORKERS,
) -> Container:
    return Container(
        users_repo=users_repo,
        classrooms=classrooms,
        students=students,
        attendance=attendance,
        identity=SessionIdentityProvider(users_repo),
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        classroom_service=ClassroomService(classrooms, students, max_workers=student_count_workers),
        student_service=StudentService(classrooms, students),
        attendance_service=AttendanceService(classrooms, students, attendance),
    )


def build_memory_container(*, student_count_workers: int = DEFAULT_STUDENT_COUNT_WORKERS) -> Container:
    students = InMemoryEntityStore(STUDENTS)
    attendance = InMemoryEntityStore(ATTENDANCE)
    classrooms = InMemoryEntityStore(CLASSROOMS, cascades=[(students, "classroom_id"), (attendance, "classroom_id")])
    return assemble_container(
        users_repo=InMemoryUserRepository(),
        classrooms=classrooms,
        students=students,
        attendance=attendance,
        student_count_workers=student_count_workers,
    )


def build_container(
    *,
    db_config: dict,
    backend: str = "mysql",
    student_count_workers: int = DEFAULT_STUDENT_COUNT_WORKERS,
) -> Container:
    if backend == "memory":
        return build_memory_container(student_count_workers=student_count_workers)
    if backend != "mysql":
        raise ValueError(f"Unknown store backend: {backend!r}")

    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return assemble_container(
        users_repo=MySQLUserRepository(conn),
        classrooms=MySQLEntityStore(conn, CLASSROOMS),
        students=MySQLEntityStore(conn, STUDENTS),
        attendance=MySQLEntityStore(conn, ATTENDANCE),
        student_count_workers=student_count_workers,
    )
