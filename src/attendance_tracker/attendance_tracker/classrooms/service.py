from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_STUDENT_COUNT_WORKERS
from ..core.exceptions import AuthorizationError, NotFoundError
from ..store.repository import EntityStore
from ..students.model import Student
from ..users.model import User
from .model import Classroom, ClassroomSummary, DashboardView

logger = logging.getLogger(__name__)


def require_owned_classroom(classrooms: EntityStore[Classroom], classroom_id: str, teacher: User) -> Classroom:
    classroom = classrooms.get(classroom_id)
    if classroom is None:
        raise NotFoundError("Classroom not found")
    if classroom.teacher_email != teacher.email:
        raise AuthorizationError("This classroom belongs to another teacher")
    return classroom


class ClassroomService:
    def __init__(
        self,
        classrooms: EntityStore[Classroom],
        students: EntityStore[Student],
        *,
        max_workers: int = DEFAULT_STUDENT_COUNT_WORKERS,
    ):
        self._classrooms = classrooms
        self._students = students
        self._max_workers = max(1, int(max_workers))

    def list_for_teacher(self, teacher: User) -> list[Classroom]:
        return list(self._classrooms.filter({"teacher_email": teacher.email}))

    def _student_count(self, classroom_id: str) -> int:
        return len(self._students.filter({"classroom_id": classroom_id}))

    def dashboard(self, teacher: User) -> DashboardView:
        """Teacher's classrooms with roster sizes.

        One student lookup per classroom, run concurrently; counts are joined by
        classroom id so completion order does not matter. Any failed lookup
        fails the whole view.
        """

        classrooms = self.list_for_teacher(teacher)
        if not classrooms:
            return DashboardView(classrooms=[])

        workers = min(self._max_workers, len(classrooms))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="student-count") as pool:
            futures = {c.id: pool.submit(self._student_count, c.id) for c in classrooms}
            counts = {classroom_id: f.result() for classroom_id, f in futures.items()}

        return DashboardView(
            classrooms=[ClassroomSummary(classroom=c, student_count=counts[c.id]) for c in classrooms]
        )

    def create_classroom(
        self,
        teacher: User,
        *,
        name: str,
        subject: str,
        description: Optional[str] = None,
    ) -> Classroom:
        classroom = self._classrooms.create(
            {
                "name": require_non_empty(name, "name"),
                "subject": require_non_empty(subject, "subject"),
                "description": optional_text(description),
                "teacher_email": teacher.email,
            }
        )
        logger.info("Teacher %s created classroom %s (%s)", teacher.email, classroom.id, classroom.name)
        return classroom

    def get_owned(self, teacher: User, classroom_id: str) -> Classroom:
        return require_owned_classroom(self._classrooms, classroom_id, teacher)

    def delete_classroom(self, teacher: User, classroom_id: str) -> DashboardView:
        """Delete one classroom and return the refreshed dashboard.

        The store cascades to the classroom's students and attendance rows;
        nothing is removed here beforehand. A ``StoreError`` from the delete
        propagates before any refresh.
        """

        self.get_owned(teacher, classroom_id)
        if not self._classrooms.delete(classroom_id):
            raise NotFoundError("Classroom not found")
        logger.info("Teacher %s deleted classroom %s", teacher.email, classroom_id)
        return self.dashboard(teacher)
