from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel

from ...domain.entities import Category, Level


class ApiModel(BaseModel):
    # наружу отдаём camelCase, на вход принимаем оба варианта
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class MessageResp(ApiModel):
    message: str


# --- Auth:

class SignupReq(ApiModel):
    name: str
    email: EmailStr
    password: str

class LoginReq(ApiModel):
    email: EmailStr
    password: str

class UserSummary(ApiModel):
    id: int
    name: str
    email: EmailStr
    role: str

class SignupResp(ApiModel):
    message: str
    user: UserSummary

class LoginResp(ApiModel):
    message: str
    token: str
    token_type: str = "bearer"
    user: UserSummary


# --- Profile:

class ProfileFields(ApiModel):
    bio: str | None = None
    avatar: str | None = None
    phone: str | None = None
    date_of_birth: date | None = None
    location: str | None = None

class UserOut(ApiModel):
    id: int
    name: str
    email: EmailStr
    role: str
    profile: ProfileFields
    created_at: datetime | None = None

class ProfileUpdate(ApiModel):
    name: str | None = None
    profile: ProfileFields | None = None

class UpdateProfileResp(ApiModel):
    message: str
    user: UserOut

class CourseBrief(ApiModel):
    id: int
    title: str
    instructor: str
    image: str
    rating: float

class EnrollmentBrief(ApiModel):
    course: CourseBrief
    enrolled_at: datetime
    progress: int

class ProfileResp(UserOut):
    enrolled_courses: list[EnrollmentBrief] = []


# --- Courses:

class LessonCreate(ApiModel):
    title: str
    duration: str | None = None
    content: str | None = None
    video_url: str | None = None
    order: int = 0

class LessonOut(ApiModel):
    id: int
    title: str
    duration: str | None = None
    content: str | None = None
    video_url: str | None = None
    order: int

class CourseCreate(ApiModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    instructor: str = Field(min_length=1)
    category: Category
    level: Level = Level.BEGINNER
    price: float = Field(ge=0)
    original_price: float | None = Field(default=None, ge=0)
    duration: str
    image: str
    requirements: list[str] = []
    what_you_will_learn: list[str] = []
    lessons: list[LessonCreate] = []
    is_published: bool = True

class CourseSummaryOut(ApiModel):
    id: int
    title: str
    description: str
    instructor: str
    category: str
    level: str
    price: float
    original_price: float | None = None
    duration: str
    image: str
    rating: float
    reviews: int
    students: int
    requirements: list[str] = []
    what_you_will_learn: list[str] = []
    is_published: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

class CourseOut(CourseSummaryOut):
    lessons: list[LessonOut] = []

class EnrolledCourseOut(CourseOut):
    enrolled_at: datetime
    progress: int


# --- Reviews:

class ReviewCreate(ApiModel):
    # strict: true и "5" не должны приводиться к числу; диапазон проверяет SubmitReview
    rating: StrictInt | StrictFloat | None = None
    comment: str | None = None

class ReviewerOut(ApiModel):
    id: int
    name: str
    avatar: str = ""

class ReviewOut(ApiModel):
    id: int
    course_id: int
    rating: int
    comment: str
    created_at: datetime | None = None
    user: ReviewerOut


# --- Progress:

class LessonProgressOut(ApiModel):
    lesson_id: int
    completed: bool
    completed_at: datetime | None = None

class ProgressOut(ApiModel):
    course_id: int
    overall_progress: int
    lesson_progress: list[LessonProgressOut] = []
