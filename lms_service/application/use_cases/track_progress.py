from datetime import datetime, timezone

import structlog

from ...domain.entities import Progress
from ...domain.errors import CourseNotFound, LessonNotFound, NotEnrolled
from ...domain.rating import percent
from ..interfaces import ICourseRepository, IEnrollmentRepository, IProgressRepository, ITransaction

logger = structlog.get_logger()


class GetProgress:
    def __init__(self, progress: IProgressRepository):
        self.progress = progress

    def execute(self, user_id: int, course_id: int) -> Progress:
        row = self.progress.get(user_id, course_id)
        if row is None:
            raise NotEnrolled()
        return row


class CompleteLesson:
    """Отмечает урок пройденным и пересчитывает общий прогресс.

    Повторная отметка того же урока ничего не меняет.
    """

    def __init__(
        self,
        courses: ICourseRepository,
        enrollments: IEnrollmentRepository,
        progress: IProgressRepository,
        tx: ITransaction,
    ):
        self.courses = courses
        self.enrollments = enrollments
        self.progress = progress
        self.tx = tx

    def execute(self, user_id: int, course_id: int, lesson_id: int) -> Progress:
        course = self.courses.get(course_id, published_only=False)
        if course is None:
            raise CourseNotFound()
        if lesson_id not in {lesson.id for lesson in course.lessons}:
            raise LessonNotFound()
        if not self.enrollments.exists(user_id, course_id):
            raise NotEnrolled()

        try:
            self.progress.ensure(user_id, course_id)
            changed = self.progress.mark_lesson_completed(
                user_id, course_id, lesson_id, completed_at=datetime.now(timezone.utc)
            )
            if changed:
                # считаем по таблице, а не по загруженному в сессию снимку
                done = self.progress.completed_count(user_id, course_id)
                overall = percent(done, len(course.lessons))
                self.progress.set_overall(user_id, course_id, overall)
                self.enrollments.set_progress(user_id, course_id, overall)
            self.tx.commit()
        except Exception:
            self.tx.rollback()
            raise

        if changed:
            logger.info("lesson_completed", user_id=user_id, course_id=course_id, lesson_id=lesson_id)
        return self.progress.get(user_id, course_id)
