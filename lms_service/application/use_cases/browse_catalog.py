from ...domain.entities import Course
from ...domain.errors import CourseNotFound
from ..dto import CourseFilter, NewCourse
from ..interfaces import ICourseRepository, ITransaction


class FindCourses:
    def __init__(self, courses: ICourseRepository):
        self.courses = courses

    def execute(self, flt: CourseFilter) -> list[Course]:
        if flt.category == "all":
            flt.category = None
        if flt.search is not None and not flt.search.strip():
            flt.search = None
        return self.courses.find(flt)


class GetCourse:
    def __init__(self, courses: ICourseRepository):
        self.courses = courses

    def execute(self, course_id: int) -> Course:
        course = self.courses.get(course_id, published_only=True)
        if course is None:
            raise CourseNotFound()
        return course


class CreateCourse:
    def __init__(self, courses: ICourseRepository, tx: ITransaction):
        self.courses = courses
        self.tx = tx

    def execute(self, data: NewCourse) -> Course:
        try:
            course = self.courses.create(data)
            self.tx.commit()
        except Exception:
            self.tx.rollback()
            raise
        return course
