from dataclasses import dataclass, field
from datetime import datetime

from ..domain.entities import Course, Review, User


@dataclass
class CourseFilter:
    category: str | None = None
    search: str | None = None
    level: str | None = None
    min_price: float | None = None
    max_price: float | None = None


@dataclass
class NewLesson:
    title: str
    duration: str | None = None
    content: str | None = None
    video_url: str | None = None
    order: int = 0


@dataclass
class NewCourse:
    title: str
    description: str
    instructor: str
    category: str
    price: float
    duration: str
    image: str
    level: str = "beginner"
    original_price: float | None = None
    requirements: list[str] = field(default_factory=list)
    what_you_will_learn: list[str] = field(default_factory=list)
    lessons: list[NewLesson] = field(default_factory=list)
    is_published: bool = True


@dataclass
class EnrolledCourse:
    course: Course
    enrolled_at: datetime
    progress: int


@dataclass
class ProfileView:
    user: User
    enrollments: list[EnrolledCourse]


@dataclass
class ReviewView:
    review: Review
    user_name: str
    user_avatar: str = ""
