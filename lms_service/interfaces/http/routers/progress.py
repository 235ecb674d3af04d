from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ....application.use_cases.track_progress import CompleteLesson, GetProgress
from ....domain.entities import User
from ....infrastructure.db import get_db
from ....infrastructure.repositories import CourseRepository, EnrollmentRepository, ProgressRepository
from ..authz import get_current_user
from ..schemas import ProgressOut

router = APIRouter(prefix="/api/courses", tags=["progress"])


@router.get("/{course_id}/progress", response_model=ProgressOut)
def my_progress(course_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return GetProgress(ProgressRepository(db)).execute(user.id, course_id)


@router.post("/{course_id}/lessons/{lesson_id}/complete", response_model=ProgressOut)
def complete_lesson(course_id: int, lesson_id: int,
                    db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    # идемпотентно: повторное завершение урока ничего не меняет
    uc = CompleteLesson(
        courses=CourseRepository(db),
        enrollments=EnrollmentRepository(db),
        progress=ProgressRepository(db),
        tx=db,
    )
    return uc.execute(user.id, course_id, lesson_id)
