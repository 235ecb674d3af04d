from datetime import datetime, timezone

import structlog

from ...domain.entities import Enrollment
from ...domain.errors import AlreadyEnrolled, CourseNotFound, UserNotFound
from ..interfaces import (
    ICourseRepository,
    IEnrollmentRepository,
    IProgressRepository,
    ITransaction,
    IUserRepository,
)

logger = structlog.get_logger()


class EnrollInCourse:
    """Записывает пользователя на курс.

    Все три записи (Enrollment, счётчик students, Progress) идут в одной
    транзакции. Первой вставляется строка Enrollment с уникальным ключом
    (user_id, course_id): если параллельный запрос успел раньше, вставка
    падает, транзакция откатывается и счётчик не трогается.
    """

    def __init__(
        self,
        users: IUserRepository,
        courses: ICourseRepository,
        enrollments: IEnrollmentRepository,
        progress: IProgressRepository,
        tx: ITransaction,
    ):
        self.users = users
        self.courses = courses
        self.enrollments = enrollments
        self.progress = progress
        self.tx = tx

    def execute(self, user_id: int, course_id: int) -> Enrollment:
        if self.courses.get(course_id, published_only=True) is None:
            raise CourseNotFound()
        if self.users.get_by_id(user_id) is None:
            raise UserNotFound()
        # быстрый путь; гарантию даёт уникальный ключ ниже
        if self.enrollments.exists(user_id, course_id):
            raise AlreadyEnrolled()

        try:
            enrollment = self.enrollments.add(user_id, course_id, enrolled_at=datetime.now(timezone.utc))
            self.courses.increment_students(course_id, 1)
            self.progress.ensure(user_id, course_id)
            self.tx.commit()
        except AlreadyEnrolled:
            self.tx.rollback()
            logger.info("enrollment_conflict", user_id=user_id, course_id=course_id)
            raise
        except Exception:
            self.tx.rollback()
            raise

        logger.info("course_enrolled", user_id=user_id, course_id=course_id)
        return enrollment
