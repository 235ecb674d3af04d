from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class Role(str, Enum):
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


class Category(str, Enum):
    PROGRAMMING = "programming"
    DESIGN = "design"
    BUSINESS = "business"
    MARKETING = "marketing"
    DATA_SCIENCE = "data-science"
    OTHER = "other"


class Level(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


@dataclass(frozen=True)
class Profile:
    bio: str | None = None
    avatar: str | None = None
    phone: str | None = None
    date_of_birth: date | None = None
    location: str | None = None


@dataclass(frozen=True)
class User:
    id: int | None
    name: str
    email: str
    role: str = Role.STUDENT.value
    profile: Profile = field(default_factory=Profile)
    created_at: datetime | None = None


@dataclass(frozen=True)
class Lesson:
    id: int | None
    title: str
    duration: str | None = None
    content: str | None = None
    video_url: str | None = None
    order: int = 0


@dataclass(frozen=True)
class Course:
    id: int | None
    title: str
    description: str
    instructor: str
    category: str
    level: str
    price: float
    duration: str
    image: str
    original_price: float | None = None
    rating: float = 0.0
    reviews: int = 0
    students: int = 0
    requirements: list[str] = field(default_factory=list)
    what_you_will_learn: list[str] = field(default_factory=list)
    is_published: bool = True
    lessons: list[Lesson] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Enrollment:
    user_id: int
    course_id: int
    enrolled_at: datetime
    progress: int = 0
    id: int | None = None


@dataclass(frozen=True)
class LessonProgress:
    lesson_id: int
    completed: bool
    completed_at: datetime | None = None


@dataclass(frozen=True)
class Progress:
    user_id: int
    course_id: int
    lesson_progress: list[LessonProgress] = field(default_factory=list)
    overall_progress: int = 0
    id: int | None = None


@dataclass(frozen=True)
class Review:
    user_id: int
    course_id: int
    rating: int
    comment: str
    id: int | None = None
    created_at: datetime | None = None
