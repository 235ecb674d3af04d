from conftest import count_rows
from lms_service.application.use_cases.track_progress import CompleteLesson
from lms_service.infrastructure.db import SessionLocal
from lms_service.infrastructure.models import CourseORM, EnrollmentORM, LessonProgressORM
from lms_service.infrastructure.repositories import CourseRepository, EnrollmentRepository, ProgressRepository


def lesson_ids(course_id):
    with SessionLocal() as session:
        return [l.id for l in session.get(CourseORM, course_id).lessons]


def build_complete(session):
    return CompleteLesson(
        courses=CourseRepository(session),
        enrollments=EnrollmentRepository(session),
        progress=ProgressRepository(session),
        tx=session,
    )


def test_progress_created_on_enroll(client, make_user, make_course, auth_headers):
    user_id = make_user()
    course_id = make_course(lessons=2)
    client.post(f"/api/courses/{course_id}/enroll", headers=auth_headers(user_id))
    response = client.get(f"/api/courses/{course_id}/progress", headers=auth_headers(user_id))
    assert response.status_code == 200
    assert response.json() == {"courseId": course_id, "overallProgress": 0, "lessonProgress": []}


def test_progress_not_enrolled(client, make_user, make_course, auth_headers):
    user_id = make_user()
    course_id = make_course()
    response = client.get(f"/api/courses/{course_id}/progress", headers=auth_headers(user_id))
    assert response.status_code == 404


def test_complete_lesson_updates_progress(client, make_user, make_course, auth_headers):
    """Урок отмечается пройденным, прогресс дублируется в Enrollment"""
    user_id = make_user()
    course_id = make_course(lessons=2)
    headers = auth_headers(user_id)
    client.post(f"/api/courses/{course_id}/enroll", headers=headers)
    first, second = lesson_ids(course_id)

    response = client.post(f"/api/courses/{course_id}/lessons/{first}/complete", headers=headers)
    assert response.status_code == 200
    data = response.json()
    assert data["overallProgress"] == 50
    assert data["lessonProgress"][0]["lessonId"] == first
    assert data["lessonProgress"][0]["completed"] is True

    enrolled = client.get("/api/enrolled-courses", headers=headers).json()
    assert enrolled[0]["progress"] == 50

    response = client.post(f"/api/courses/{course_id}/lessons/{second}/complete", headers=headers)
    assert response.json()["overallProgress"] == 100


def test_complete_lesson_idempotent(client, make_user, make_course, auth_headers):
    """Тест идемпотентности завершения урока"""
    user_id = make_user()
    course_id = make_course(lessons=3)
    headers = auth_headers(user_id)
    client.post(f"/api/courses/{course_id}/enroll", headers=headers)
    lesson_id = lesson_ids(course_id)[0]

    response1 = client.post(f"/api/courses/{course_id}/lessons/{lesson_id}/complete", headers=headers)
    response2 = client.post(f"/api/courses/{course_id}/lessons/{lesson_id}/complete", headers=headers)
    assert response1.status_code == 200
    assert response1.json() == response2.json()
    assert response2.json()["overallProgress"] == 33
    assert count_rows(LessonProgressORM) == 1


def test_overall_counts_completions_committed_by_other_session(client, make_user, make_course, auth_headers):
    """Сессия держит старый снимок прогресса, пока другая отмечает первый урок"""
    user_id = make_user()
    course_id = make_course(lessons=2)
    client.post(f"/api/courses/{course_id}/enroll", headers=auth_headers(user_id))
    first, second = lesson_ids(course_id)

    with SessionLocal() as session:
        progress = ProgressRepository(session)
        assert progress.get(user_id, course_id).lesson_progress == []

        with SessionLocal() as other:
            build_complete(other).execute(user_id, course_id, first)

        result = build_complete(session).execute(user_id, course_id, second)
    assert result.overall_progress == 100
    assert {lp.lesson_id for lp in result.lesson_progress} == {first, second}
    with SessionLocal() as session:
        assert session.query(EnrollmentORM).filter_by(user_id=user_id).one().progress == 100


def test_complete_unknown_lesson(client, make_user, make_course, auth_headers):
    user_id = make_user()
    course_id = make_course(lessons=1)
    headers = auth_headers(user_id)
    client.post(f"/api/courses/{course_id}/enroll", headers=headers)
    response = client.post(f"/api/courses/{course_id}/lessons/999/complete", headers=headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Lesson not found"


def test_complete_lesson_not_enrolled(client, make_user, make_course, auth_headers):
    user_id = make_user()
    course_id = make_course(lessons=1)
    lesson_id = lesson_ids(course_id)[0]
    response = client.post(f"/api/courses/{course_id}/lessons/{lesson_id}/complete", headers=auth_headers(user_id))
    assert response.status_code == 404
    assert count_rows(EnrollmentORM) == 0


def test_complete_lesson_requires_token(client):
    assert client.post("/api/courses/1/lessons/1/complete").status_code == 401
