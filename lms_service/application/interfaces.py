from datetime import datetime

from ..domain.entities import Course, Enrollment, Progress, Review, User
from .dto import CourseFilter, EnrolledCourse, NewCourse, ReviewView


class ITransaction:
    def commit(self) -> None: ...
    def rollback(self) -> None: ...


class IPasswordHasher:
    def hash(self, plain: str) -> str: ...
    def verify(self, plain: str, hashed: str) -> bool: ...


class IUserRepository:
    def get_by_id(self, user_id: int) -> User | None: ...
    def get_by_email(self, email: str) -> User | None: ...
    def get_password_hash(self, email: str) -> str | None: ...
    def create(self, name: str, email: str, password_hash: str, role: str = "student") -> User: ...
    def update(self, user_id: int, name: str | None, profile: dict) -> User | None: ...


class ICourseRepository:
    def find(self, flt: CourseFilter) -> list[Course]: ...
    def get(self, course_id: int, published_only: bool = True) -> Course | None: ...
    def create(self, data: NewCourse) -> Course: ...
    def increment_students(self, course_id: int, delta: int = 1) -> None: ...
    def apply_rating(self, course_id: int, rating: float, count: int) -> bool: ...


class IEnrollmentRepository:
    def exists(self, user_id: int, course_id: int) -> bool: ...
    def add(self, user_id: int, course_id: int, enrolled_at: datetime) -> Enrollment: ...
    def list_for_user(self, user_id: int, with_lessons: bool = True) -> list[EnrolledCourse]: ...
    def set_progress(self, user_id: int, course_id: int, progress: int) -> None: ...


class IProgressRepository:
    def get(self, user_id: int, course_id: int) -> Progress | None: ...
    def ensure(self, user_id: int, course_id: int) -> Progress: ...
    def mark_lesson_completed(self, user_id: int, course_id: int, lesson_id: int, completed_at: datetime) -> bool: ...
    def set_overall(self, user_id: int, course_id: int, value: int) -> None: ...
    def completed_count(self, user_id: int, course_id: int) -> int: ...


class IReviewRepository:
    def exists(self, user_id: int, course_id: int) -> bool: ...
    def add(self, user_id: int, course_id: int, rating: int, comment: str) -> Review: ...
    def stats(self, course_id: int) -> tuple[int, int]: ...
    def list_for_course(self, course_id: int) -> list[ReviewView]: ...
