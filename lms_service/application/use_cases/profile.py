from ...domain.errors import UserNotFound
from ..dto import EnrolledCourse, ProfileView
from ..interfaces import IEnrollmentRepository, ITransaction, IUserRepository

PROFILE_FIELDS = ("bio", "avatar", "phone", "date_of_birth", "location")


class GetEnrolledCourses:
    def __init__(self, enrollments: IEnrollmentRepository):
        self.enrollments = enrollments

    def execute(self, user_id: int) -> list[EnrolledCourse]:
        # курсы, которые больше не находятся, молча пропускаем
        return [e for e in self.enrollments.list_for_user(user_id) if e.course is not None]


class GetProfile:
    def __init__(self, users: IUserRepository, enrollments: IEnrollmentRepository):
        self.users = users
        self.enrollments = enrollments

    def execute(self, user_id: int) -> ProfileView:
        user = self.users.get_by_id(user_id)
        if user is None:
            raise UserNotFound()
        rows = self.enrollments.list_for_user(user_id, with_lessons=False)
        return ProfileView(user=user, enrollments=[e for e in rows if e.course is not None])


class UpdateProfile:
    def __init__(self, users: IUserRepository, tx: ITransaction):
        self.users = users
        self.tx = tx

    def execute(self, user_id: int, name: str | None = None, profile: dict | None = None):
        changes = {k: v for k, v in (profile or {}).items() if k in PROFILE_FIELDS}
        name = name.strip() if name else None
        try:
            user = self.users.update(user_id, name or None, changes)
            if user is None:
                raise UserNotFound()
            self.tx.commit()
        except Exception:
            self.tx.rollback()
            raise
        return user
