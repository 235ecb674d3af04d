from datetime import datetime

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..application.dto import CourseFilter, EnrolledCourse, NewCourse, ReviewView
from ..application.interfaces import (
    ICourseRepository,
    IEnrollmentRepository,
    IProgressRepository,
    IReviewRepository,
    IUserRepository,
)
from ..domain.entities import Course, Enrollment, Lesson, LessonProgress, Profile, Progress, Review, User
from ..domain.errors import AlreadyEnrolled, DuplicateReview, EmailAlreadyRegistered
from .models import (
    CourseORM,
    EnrollmentORM,
    LessonORM,
    LessonProgressORM,
    ProgressORM,
    ReviewORM,
    UserORM,
)


def user_to_domain(u: UserORM) -> User:
    profile = Profile(
        bio=u.bio,
        avatar=u.avatar,
        phone=u.phone,
        date_of_birth=u.date_of_birth,
        location=u.location,
    )
    return User(id=u.id, name=u.name, email=u.email, role=u.role, profile=profile, created_at=u.created_at)


def course_to_domain(c: CourseORM, with_lessons: bool = True) -> Course:
    lessons = []
    if with_lessons:
        lessons = [
            Lesson(id=l.id, title=l.title, duration=l.duration, content=l.content,
                   video_url=l.video_url, order=l.order)
            for l in c.lessons
        ]
    return Course(
        id=c.id,
        title=c.title,
        description=c.description,
        instructor=c.instructor,
        category=c.category,
        level=c.level,
        price=c.price,
        original_price=c.original_price,
        duration=c.duration,
        image=c.image,
        rating=c.rating,
        reviews=c.reviews,
        students=c.students,
        requirements=list(c.requirements or []),
        what_you_will_learn=list(c.what_you_will_learn or []),
        is_published=c.is_published,
        lessons=lessons,
        created_at=c.created_at,
        updated_at=c.updated_at,
    )


def enrollment_to_domain(e: EnrollmentORM) -> Enrollment:
    return Enrollment(id=e.id, user_id=e.user_id, course_id=e.course_id,
                      enrolled_at=e.enrolled_at, progress=e.progress)


def progress_to_domain(p: ProgressORM) -> Progress:
    return Progress(
        id=p.id,
        user_id=p.user_id,
        course_id=p.course_id,
        lesson_progress=[
            LessonProgress(lesson_id=lp.lesson_id, completed=lp.completed, completed_at=lp.completed_at)
            for lp in p.lessons
        ],
        overall_progress=p.overall_progress,
    )


def review_to_domain(r: ReviewORM) -> Review:
    return Review(id=r.id, user_id=r.user_id, course_id=r.course_id, rating=r.rating,
                  comment=r.comment, created_at=r.created_at)


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class UserRepository(IUserRepository):
    def __init__(self, db: Session): self.db = db

    def get_by_id(self, user_id: int) -> User | None:
        row = self.db.get(UserORM, user_id)
        return user_to_domain(row) if row else None

    def get_by_email(self, email: str) -> User | None:
        row = self.db.query(UserORM).filter(UserORM.email == email).first()
        return user_to_domain(row) if row else None

    def get_password_hash(self, email: str) -> str | None:
        return self.db.query(UserORM.password_hash).filter(UserORM.email == email).scalar()

    def create(self, name: str, email: str, password_hash: str, role: str = "student") -> User:
        row = UserORM(name=name, email=email, password_hash=password_hash, role=role)
        self.db.add(row)
        try:
            self.db.flush()
        except IntegrityError:
            raise EmailAlreadyRegistered() from None
        return user_to_domain(row)

    def update(self, user_id: int, name: str | None, profile: dict) -> User | None:
        row = self.db.get(UserORM, user_id)
        if not row:
            return None
        if name:
            row.name = name
        for key, value in profile.items():
            setattr(row, key, value)
        self.db.flush()
        return user_to_domain(row)


class CourseRepository(ICourseRepository):
    def __init__(self, db: Session): self.db = db

    def find(self, flt: CourseFilter) -> list[Course]:
        q = self.db.query(CourseORM).filter(CourseORM.is_published.is_(True))
        if flt.category:
            q = q.filter(CourseORM.category == flt.category)
        if flt.search:
            pattern = _like_pattern(flt.search.strip())
            q = q.filter(or_(
                CourseORM.title.ilike(pattern, escape="\\"),
                CourseORM.description.ilike(pattern, escape="\\"),
                CourseORM.instructor.ilike(pattern, escape="\\"),
            ))
        if flt.level:
            q = q.filter(CourseORM.level == flt.level)
        if flt.min_price is not None:
            q = q.filter(CourseORM.price >= flt.min_price)
        if flt.max_price is not None:
            q = q.filter(CourseORM.price <= flt.max_price)
        rows = q.order_by(CourseORM.created_at.desc(), CourseORM.id.desc()).all()
        # уроки в листинг не попадают
        return [course_to_domain(row, with_lessons=False) for row in rows]

    def get(self, course_id: int, published_only: bool = True) -> Course | None:
        row = self.db.get(CourseORM, course_id)
        if row is None or (published_only and not row.is_published):
            return None
        return course_to_domain(row)

    def create(self, data: NewCourse) -> Course:
        row = CourseORM(
            title=data.title,
            description=data.description,
            instructor=data.instructor,
            category=data.category,
            level=data.level,
            price=data.price,
            original_price=data.original_price,
            duration=data.duration,
            image=data.image,
            requirements=list(data.requirements),
            what_you_will_learn=list(data.what_you_will_learn),
            is_published=data.is_published,
            lessons=[
                LessonORM(title=l.title, duration=l.duration, content=l.content,
                          video_url=l.video_url, order=l.order)
                for l in data.lessons
            ],
        )
        self.db.add(row)
        self.db.flush()
        return course_to_domain(row)

    def increment_students(self, course_id: int, delta: int = 1) -> None:
        # атомарный UPDATE students = students + delta, без чтения в приложение
        stmt = (update(CourseORM)
                .where(CourseORM.id == course_id)
                .values(students=CourseORM.students + delta)
                .execution_options(synchronize_session=False))
        self.db.execute(stmt)

    def apply_rating(self, course_id: int, rating: float, count: int) -> bool:
        stmt = (update(CourseORM)
                .where(CourseORM.id == course_id, CourseORM.reviews <= count)
                .values(rating=rating, reviews=count)
                .execution_options(synchronize_session=False))
        return self.db.execute(stmt).rowcount > 0


class EnrollmentRepository(IEnrollmentRepository):
    def __init__(self, db: Session): self.db = db

    def exists(self, user_id: int, course_id: int) -> bool:
        q = (self.db.query(EnrollmentORM.id)
             .filter(EnrollmentORM.user_id == user_id, EnrollmentORM.course_id == course_id))
        return q.first() is not None

    def add(self, user_id: int, course_id: int, enrolled_at: datetime) -> Enrollment:
        row = EnrollmentORM(user_id=user_id, course_id=course_id, enrolled_at=enrolled_at, progress=0)
        self.db.add(row)
        try:
            self.db.flush()
        except IntegrityError:
            raise AlreadyEnrolled() from None
        return enrollment_to_domain(row)

    def list_for_user(self, user_id: int, with_lessons: bool = True) -> list[EnrolledCourse]:
        rows = (self.db.query(EnrollmentORM, CourseORM)
                .outerjoin(CourseORM, CourseORM.id == EnrollmentORM.course_id)
                .filter(EnrollmentORM.user_id == user_id)
                .order_by(EnrollmentORM.enrolled_at, EnrollmentORM.id)
                .all())
        return [
            EnrolledCourse(
                course=course_to_domain(c, with_lessons=with_lessons) if c is not None else None,
                enrolled_at=e.enrolled_at,
                progress=e.progress,
            )
            for e, c in rows
        ]

    def set_progress(self, user_id: int, course_id: int, progress: int) -> None:
        stmt = (update(EnrollmentORM)
                .where(EnrollmentORM.user_id == user_id, EnrollmentORM.course_id == course_id)
                .values(progress=progress)
                .execution_options(synchronize_session=False))
        self.db.execute(stmt)


class ProgressRepository(IProgressRepository):
    def __init__(self, db: Session): self.db = db

    def _row(self, user_id: int, course_id: int) -> ProgressORM | None:
        return (self.db.query(ProgressORM)
                .filter(ProgressORM.user_id == user_id, ProgressORM.course_id == course_id)
                .first())

    def get(self, user_id: int, course_id: int) -> Progress | None:
        row = self._row(user_id, course_id)
        return progress_to_domain(row) if row else None

    def ensure(self, user_id: int, course_id: int) -> Progress:
        row = self._row(user_id, course_id)
        if row is None:
            row = ProgressORM(user_id=user_id, course_id=course_id, overall_progress=0, lessons=[])
            self.db.add(row)
            self.db.flush()
        return progress_to_domain(row)

    def mark_lesson_completed(self, user_id: int, course_id: int, lesson_id: int, completed_at: datetime) -> bool:
        row = self._row(user_id, course_id)
        # строка прогресса заблокирована до конца транзакции, коллекция уроков перечитана
        self.db.refresh(row, with_for_update=True)
        entry = next((lp for lp in row.lessons if lp.lesson_id == lesson_id), None)
        if entry is not None and entry.completed:
            return False
        if entry is None:
            entry = LessonProgressORM(lesson_id=lesson_id)
            row.lessons.append(entry)
        entry.completed = True
        entry.completed_at = completed_at
        self.db.flush()
        return True

    def set_overall(self, user_id: int, course_id: int, value: int) -> None:
        row = self._row(user_id, course_id)
        row.overall_progress = value
        self.db.flush()

    def completed_count(self, user_id: int, course_id: int) -> int:
        q = (select(func.count(LessonProgressORM.id))
             .join(ProgressORM, ProgressORM.id == LessonProgressORM.progress_id)
             .where(ProgressORM.user_id == user_id, ProgressORM.course_id == course_id,
                    LessonProgressORM.completed.is_(True)))
        return int(self.db.execute(q).scalar_one())


class ReviewRepository(IReviewRepository):
    def __init__(self, db: Session): self.db = db

    def exists(self, user_id: int, course_id: int) -> bool:
        q = (self.db.query(ReviewORM.id)
             .filter(ReviewORM.user_id == user_id, ReviewORM.course_id == course_id))
        return q.first() is not None

    def add(self, user_id: int, course_id: int, rating: int, comment: str) -> Review:
        row = ReviewORM(user_id=user_id, course_id=course_id, rating=rating, comment=comment)
        self.db.add(row)
        try:
            self.db.flush()
        except IntegrityError:
            raise DuplicateReview() from None
        return review_to_domain(row)

    def stats(self, course_id: int) -> tuple[int, int]:
        q = (select(func.count(ReviewORM.id), func.coalesce(func.sum(ReviewORM.rating), 0))
             .where(ReviewORM.course_id == course_id))
        count, total = self.db.execute(q).one()
        return int(count), int(total)

    def list_for_course(self, course_id: int) -> list[ReviewView]:
        rows = (self.db.query(ReviewORM, UserORM.name, UserORM.avatar)
                .outerjoin(UserORM, UserORM.id == ReviewORM.user_id)
                .filter(ReviewORM.course_id == course_id)
                .order_by(ReviewORM.created_at.desc(), ReviewORM.id.desc())
                .all())
        return [
            ReviewView(review=review_to_domain(r), user_name=name or "", user_avatar=avatar or "")
            for r, name, avatar in rows
        ]
