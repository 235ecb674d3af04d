from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ....application.dto import CourseFilter, NewCourse, NewLesson
from ....application.use_cases.browse_catalog import CreateCourse, FindCourses, GetCourse
from ....application.use_cases.enroll_in_course import EnrollInCourse
from ....domain.entities import User
from ....infrastructure.cache import (
    COURSES_LIST_PATTERN,
    course_key,
    courses_list_key,
    delete_cache_pattern,
    get_cache,
    invalidate_course,
    set_cache,
)
from ....infrastructure.db import get_db
from ....infrastructure.metrics import enrollments_total
from ....infrastructure.repositories import (
    CourseRepository,
    EnrollmentRepository,
    ProgressRepository,
    UserRepository,
)
from ..authz import get_current_user, require_instructor
from ..schemas import CourseCreate, CourseOut, CourseSummaryOut, MessageResp

router = APIRouter(prefix="/api/courses", tags=["courses"])


@router.get("", response_model=list[CourseSummaryOut])
def list_courses(db: Session = Depends(get_db),
                 category: str | None = Query(None),
                 search: str | None = Query(None),
                 level: str | None = Query(None),
                 min_price: float | None = Query(None, alias="minPrice", ge=0),
                 max_price: float | None = Query(None, alias="maxPrice", ge=0)):
    flt = CourseFilter(category=category, search=search, level=level, min_price=min_price, max_price=max_price)
    # Кэширование списка курсов
    cache_key = courses_list_key(vars(flt))
    cached = get_cache(cache_key)
    if cached is not None:
        return cached

    rows = FindCourses(CourseRepository(db)).execute(flt)
    result = [CourseSummaryOut.model_validate(row) for row in rows]
    set_cache(cache_key, [r.model_dump(mode="json", by_alias=True) for r in result])
    return result


@router.get("/{course_id}", response_model=CourseOut)
def get_course(course_id: int, db: Session = Depends(get_db)):
    cached = get_cache(course_key(course_id))
    if cached is not None:
        return cached

    course = GetCourse(CourseRepository(db)).execute(course_id)
    result = CourseOut.model_validate(course)
    set_cache(course_key(course_id), result.model_dump(mode="json", by_alias=True))
    return result


@router.post("", response_model=CourseOut, status_code=status.HTTP_201_CREATED)
def create_course(payload: CourseCreate, db: Session = Depends(get_db),
                  user: User = Depends(require_instructor)):
    data = NewCourse(
        title=payload.title,
        description=payload.description,
        instructor=payload.instructor,
        category=payload.category.value,
        level=payload.level.value,
        price=payload.price,
        original_price=payload.original_price,
        duration=payload.duration,
        image=payload.image,
        requirements=payload.requirements,
        what_you_will_learn=payload.what_you_will_learn,
        lessons=[NewLesson(**lesson.model_dump()) for lesson in payload.lessons],
        is_published=payload.is_published,
    )
    course = CreateCourse(CourseRepository(db), tx=db).execute(data)
    # Инвалидируем кэш списка курсов
    delete_cache_pattern(COURSES_LIST_PATTERN)
    return course


@router.post("/{course_id}/enroll", response_model=MessageResp)
def enroll(course_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    uc = EnrollInCourse(
        users=UserRepository(db),
        courses=CourseRepository(db),
        enrollments=EnrollmentRepository(db),
        progress=ProgressRepository(db),
        tx=db,
    )
    uc.execute(user.id, course_id)
    enrollments_total.inc()
    # students изменился
    invalidate_course(course_id)
    return MessageResp(message="Successfully enrolled in course")
