from lms_service.infrastructure.db import SessionLocal
from lms_service.infrastructure.models import CourseORM


def enroll(client, course_id, headers):
    assert client.post(f"/api/courses/{course_id}/enroll", headers=headers).status_code == 200


def test_profile_requires_token(client):
    assert client.get("/api/profile").status_code == 401
    assert client.get("/api/enrolled-courses").status_code == 401


def test_profile_without_enrollments(client, make_user, auth_headers):
    user_id = make_user(name="Alice", email="alice@example.com")
    response = client.get("/api/profile", headers=auth_headers(user_id))
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == user_id
    assert data["name"] == "Alice"
    assert data["enrolledCourses"] == []
    assert "passwordHash" not in data
    assert data["profile"]["avatar"] is None


def test_profile_populates_enrolled_courses(client, make_user, make_course, auth_headers):
    user_id = make_user()
    course_id = make_course(title="Complete JavaScript Bootcamp", instructor="John Smith", rating=4.8)
    enroll(client, course_id, auth_headers(user_id))

    data = client.get("/api/profile", headers=auth_headers(user_id)).json()
    assert len(data["enrolledCourses"]) == 1
    entry = data["enrolledCourses"][0]
    assert entry["course"] == {
        "id": course_id,
        "title": "Complete JavaScript Bootcamp",
        "instructor": "John Smith",
        "image": "https://example.com/image.jpg",
        "rating": 4.8,
    }
    assert entry["progress"] == 0
    assert "enrolledAt" in entry


def test_enrolled_courses_full_records(client, make_user, make_course, auth_headers):
    user_id = make_user()
    first = make_course(lessons=2)
    second = make_course()
    enroll(client, first, auth_headers(user_id))
    enroll(client, second, auth_headers(user_id))

    response = client.get("/api/enrolled-courses", headers=auth_headers(user_id))
    assert response.status_code == 200
    data = response.json()
    assert [c["id"] for c in data] == [first, second]
    assert len(data[0]["lessons"]) == 2
    assert data[0]["progress"] == 0
    assert data[0]["students"] == 1
    assert "enrolledAt" in data[0]


def test_enrolled_courses_drop_deleted_course(client, make_user, make_course, auth_headers):
    """Ссылка на удалённый курс пропускается, а не валит весь ответ"""
    user_id = make_user()
    kept = make_course()
    gone = make_course()
    enroll(client, kept, auth_headers(user_id))
    enroll(client, gone, auth_headers(user_id))
    with SessionLocal() as session:
        session.delete(session.get(CourseORM, gone))
        session.commit()

    data = client.get("/api/enrolled-courses", headers=auth_headers(user_id)).json()
    assert [c["id"] for c in data] == [kept]
    profile = client.get("/api/profile", headers=auth_headers(user_id)).json()
    assert [e["course"]["id"] for e in profile["enrolledCourses"]] == [kept]


def test_enrolled_courses_only_own(client, make_user, make_course, auth_headers):
    alice = make_user(email="alice@example.com")
    bob = make_user(email="bob@example.com")
    course_id = make_course()
    enroll(client, course_id, auth_headers(alice))
    assert client.get("/api/enrolled-courses", headers=auth_headers(bob)).json() == []


def test_update_profile_merges_fields(client, make_user, auth_headers):
    user_id = make_user(name="Alice")
    headers = auth_headers(user_id)
    response = client.put(
        "/api/profile",
        json={"profile": {"bio": "Hello", "location": "Berlin"}},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Profile updated successfully"

    response = client.put(
        "/api/profile",
        json={"name": "Alice Smith", "profile": {"avatar": "https://example.com/a.png", "dateOfBirth": "1990-05-01"}},
        headers=headers,
    )
    user = response.json()["user"]
    assert user["name"] == "Alice Smith"
    assert user["profile"] == {
        "bio": "Hello",
        "avatar": "https://example.com/a.png",
        "phone": None,
        "dateOfBirth": "1990-05-01",
        "location": "Berlin",
    }


def test_update_profile_empty_body_keeps_user(client, make_user, auth_headers):
    user_id = make_user(name="Alice")
    response = client.put("/api/profile", json={}, headers=auth_headers(user_id))
    assert response.status_code == 200
    assert response.json()["user"]["name"] == "Alice"
