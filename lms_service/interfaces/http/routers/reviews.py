from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ....application.use_cases.submit_review import ListReviews, SubmitReview
from ....domain.entities import User
from ....domain.errors import DuplicateReview
from ....infrastructure.cache import invalidate_course
from ....infrastructure.db import get_db
from ....infrastructure.metrics import reviews_total
from ....infrastructure.repositories import CourseRepository, ReviewRepository
from ..authz import get_current_user
from ..schemas import MessageResp, ReviewCreate, ReviewerOut, ReviewOut

router = APIRouter(prefix="/api/courses", tags=["reviews"])


@router.post("/{course_id}/reviews", response_model=MessageResp, status_code=status.HTTP_201_CREATED)
def submit_review(course_id: int, payload: ReviewCreate,
                  db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    uc = SubmitReview(courses=CourseRepository(db), reviews=ReviewRepository(db), tx=db)
    try:
        uc.execute(user.id, course_id, payload.rating, payload.comment)
    except DuplicateReview:
        # повтор тоже пересчитывает агрегат
        invalidate_course(course_id)
        raise
    reviews_total.inc()
    # rating/reviews курса пересчитаны
    invalidate_course(course_id)
    return MessageResp(message="Review submitted successfully")


@router.get("/{course_id}/reviews", response_model=list[ReviewOut])
def list_reviews(course_id: int, db: Session = Depends(get_db)):
    rows = ListReviews(ReviewRepository(db)).execute(course_id)
    return [
        ReviewOut(
            id=v.review.id,
            course_id=v.review.course_id,
            rating=v.review.rating,
            comment=v.review.comment,
            created_at=v.review.created_at,
            user=ReviewerOut(id=v.review.user_id, name=v.user_name, avatar=v.user_avatar),
        )
        for v in rows
    ]
