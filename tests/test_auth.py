from conftest import PASSWORD, count_rows
from lms_service.infrastructure.models import UserORM
from lms_service.infrastructure.security import decode_token


def test_signup_success(client):
    """Тест успешной регистрации пользователя"""
    response = client.post(
        "/api/signup",
        json={"name": "Alice", "email": "alice@example.com", "password": "password123"}
    )
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "User created successfully"
    assert data["user"]["email"] == "alice@example.com"
    assert data["user"]["role"] == "student"
    assert "id" in data["user"]
    assert "password" not in data["user"]


def test_signup_normalizes_email(client):
    """Email хранится в нижнем регистре без пробелов"""
    response = client.post(
        "/api/signup",
        json={"name": "Bob", "email": "Bob@Example.com", "password": "password123"}
    )
    assert response.status_code == 201
    assert response.json()["user"]["email"] == "bob@example.com"


def test_signup_duplicate_email(client, make_user):
    """Тест регистрации с существующим email"""
    make_user(email="taken@example.com")
    response = client.post(
        "/api/signup",
        json={"name": "Other", "email": "TAKEN@example.com", "password": "password123"}
    )
    assert response.status_code == 409
    assert count_rows(UserORM, email="taken@example.com") == 1


def test_signup_missing_fields(client):
    """Не все поля переданы"""
    response = client.post("/api/signup", json={"email": "a@example.com", "password": "password123"})
    assert response.status_code == 400

    response = client.post("/api/signup", json={"name": "  ", "email": "a@example.com", "password": "password123"})
    assert response.status_code == 400


def test_signup_short_password(client):
    """Тест регистрации с коротким паролем"""
    response = client.post(
        "/api/signup",
        json={"name": "Alice", "email": "alice@example.com", "password": "123"}
    )
    assert response.status_code == 400
    assert "at least 6" in response.json()["detail"]


def test_signup_invalid_email(client):
    """Тест регистрации с невалидным email"""
    response = client.post(
        "/api/signup",
        json={"name": "Alice", "email": "invalid-email", "password": "password123"}
    )
    assert response.status_code == 400


def test_login_success(client, make_user):
    """Тест успешного входа"""
    user_id = make_user(email="student@example.com")
    response = client.post(
        "/api/login",
        json={"email": "student@example.com", "password": PASSWORD}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["id"] == user_id
    assert data["tokenType"] == "bearer"
    claims = decode_token(data["token"])
    assert claims["sub"] == str(user_id)
    assert claims["role"] == "student"


def test_login_invalid_password(client, make_user):
    """Тест входа с неверным паролем"""
    make_user(email="student@example.com")
    response = client.post(
        "/api/login",
        json={"email": "student@example.com", "password": "wrongpassword"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_login_nonexistent_user(client):
    """Тест входа несуществующего пользователя"""
    response = client.post(
        "/api/login",
        json={"email": "nobody@example.com", "password": "password123"}
    )
    assert response.status_code == 401


def test_login_missing_fields(client):
    response = client.post("/api/login", json={"email": "student@example.com"})
    assert response.status_code == 400


def test_signup_then_login(client):
    """Полный поток: регистрация и вход с тем же паролем"""
    client.post("/api/signup", json={"name": "Carol", "email": "carol@example.com", "password": "secret42"})
    response = client.post("/api/login", json={"email": "carol@example.com", "password": "secret42"})
    assert response.status_code == 200
    assert response.json()["user"]["name"] == "Carol"


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "OK"
