"""Ошибки предметной области.

Каждая ошибка несёт HTTP-статус своего вида, транспортный слой
переводит их в ответ единообразно (см. interfaces/http/errors.py).
"""


class DomainError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(DomainError):
    status_code = 400
    message = "Invalid input"


class AuthError(DomainError):
    status_code = 401
    message = "Not authenticated"


class PermissionDenied(DomainError):
    status_code = 403
    message = "Not enough permissions"


class NotFoundError(DomainError):
    status_code = 404
    message = "Not found"


class ConflictError(DomainError):
    status_code = 409
    message = "Conflict"


class InvalidCredentials(AuthError):
    message = "Invalid email or password"


class InvalidRating(ValidationError):
    message = "Rating must be an integer between 1 and 5"


class EmptyComment(ValidationError):
    message = "Comment is required"


class CourseNotFound(NotFoundError):
    message = "Course not found"


class UserNotFound(NotFoundError):
    message = "User not found"


class LessonNotFound(NotFoundError):
    message = "Lesson not found"


class NotEnrolled(NotFoundError):
    message = "Not enrolled in this course"


class EmailAlreadyRegistered(ConflictError):
    message = "User already exists with this email"


class AlreadyEnrolled(ConflictError):
    message = "Already enrolled in this course"


class DuplicateReview(ConflictError):
    message = "You have already reviewed this course"
