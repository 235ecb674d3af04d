from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ....application.use_cases.profile import GetEnrolledCourses, GetProfile, UpdateProfile
from ....domain.entities import User
from ....infrastructure.db import get_db
from ....infrastructure.repositories import EnrollmentRepository, UserRepository
from ..authz import get_current_user
from ..schemas import (
    CourseBrief,
    CourseOut,
    EnrolledCourseOut,
    EnrollmentBrief,
    ProfileResp,
    ProfileUpdate,
    UpdateProfileResp,
    UserOut,
)

router = APIRouter(prefix="/api", tags=["profile"])


@router.get("/profile", response_model=ProfileResp)
def get_profile(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    view = GetProfile(UserRepository(db), EnrollmentRepository(db)).execute(user.id)
    base = UserOut.model_validate(view.user).model_dump()
    return ProfileResp(
        **base,
        enrolled_courses=[
            EnrollmentBrief(
                course=CourseBrief.model_validate(e.course),
                enrolled_at=e.enrolled_at,
                progress=e.progress,
            )
            for e in view.enrollments
        ],
    )


@router.put("/profile", response_model=UpdateProfileResp)
def update_profile(payload: ProfileUpdate, db: Session = Depends(get_db),
                   user: User = Depends(get_current_user)):
    changes = payload.profile.model_dump(exclude_unset=True) if payload.profile else {}
    updated = UpdateProfile(UserRepository(db), tx=db).execute(user.id, name=payload.name, profile=changes)
    return UpdateProfileResp(message="Profile updated successfully", user=UserOut.model_validate(updated))


@router.get("/enrolled-courses", response_model=list[EnrolledCourseOut])
def enrolled_courses(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    rows = GetEnrolledCourses(EnrollmentRepository(db)).execute(user.id)
    return [
        EnrolledCourseOut(
            **CourseOut.model_validate(e.course).model_dump(),
            enrolled_at=e.enrolled_at,
            progress=e.progress,
        )
        for e in rows
    ]
