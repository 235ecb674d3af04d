import structlog

from ...domain.entities import Review
from ...domain.errors import CourseNotFound, DuplicateReview, EmptyComment, InvalidRating
from ...domain.rating import average_rating
from ..dto import ReviewView
from ..interfaces import ICourseRepository, IReviewRepository, ITransaction

logger = structlog.get_logger()


def _validate_rating(rating) -> int:
    # bool — подкласс int, True не должен проходить как оценка 1
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidRating()
    if rating < 1 or rating > 5:
        raise InvalidRating()
    return rating


class SubmitReview:
    def __init__(self, courses: ICourseRepository, reviews: IReviewRepository, tx: ITransaction):
        self.courses = courses
        self.reviews = reviews
        self.tx = tx

    def execute(self, user_id: int, course_id: int, rating, comment: str | None) -> Review:
        rating = _validate_rating(rating)
        comment = (comment or "").strip()
        if not comment:
            raise EmptyComment()

        if self.courses.get(course_id, published_only=False) is None:
            raise CourseNotFound()
        if self.reviews.exists(user_id, course_id):
            # прошлая попытка могла упасть между вставкой и пересчётом
            self._refresh(course_id)
            raise DuplicateReview()

        try:
            review = self.reviews.add(user_id, course_id, rating, comment)
            self.tx.commit()
        except DuplicateReview:
            self.tx.rollback()
            self._refresh(course_id)
            raise
        except Exception:
            self.tx.rollback()
            raise
        logger.info("review_submitted", user_id=user_id, course_id=course_id, rating=rating)

        # агрегат пересчитываем только после того, как отзыв закоммичен
        self._refresh(course_id)
        return review

    def _refresh(self, course_id: int) -> None:
        RefreshCourseRating(self.courses, self.reviews, self.tx).execute(course_id)


class RefreshCourseRating:
    """Пересчёт rating/reviews курса по полному набору отзывов.

    Запись условная (reviews <= count), поэтому устаревший пересчёт
    не перезапишет более свежий.
    """

    def __init__(self, courses: ICourseRepository, reviews: IReviewRepository, tx: ITransaction):
        self.courses = courses
        self.reviews = reviews
        self.tx = tx

    def execute(self, course_id: int) -> tuple[float, int]:
        try:
            count, total = self.reviews.stats(course_id)
            rating = average_rating(total, count)
            applied = self.courses.apply_rating(course_id, rating, count)
            self.tx.commit()
        except Exception:
            self.tx.rollback()
            raise
        logger.info("rating_refreshed", course_id=course_id, rating=rating, reviews=count, applied=applied)
        return rating, count


class ListReviews:
    def __init__(self, reviews: IReviewRepository):
        self.reviews = reviews

    def execute(self, course_id: int) -> list[ReviewView]:
        return self.reviews.list_for_course(course_id)
