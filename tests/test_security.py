import pytest
from jose import JWTError, jwt

from lms_service.infrastructure.security import PasswordHasher, create_access_token, decode_token


def test_password_hasher_verifies_own_hash():
    hasher = PasswordHasher()
    hashed = hasher.hash("password123")
    assert hashed != "password123"
    assert hasher.verify("password123", hashed)
    assert not hasher.verify("password124", hashed)


def test_token_carries_subject_and_role():
    claims = decode_token(create_access_token(sub="42", email="a@example.com", role="admin"))
    assert claims["sub"] == "42"
    assert claims["email"] == "a@example.com"
    assert claims["role"] == "admin"
    assert "exp" in claims


def test_expired_token_rejected():
    token = create_access_token(sub="42", minutes=-1)
    with pytest.raises(JWTError):
        decode_token(token)


def test_token_signed_with_other_secret_rejected():
    token = jwt.encode({"sub": "42"}, "other-secret", algorithm="HS256")
    with pytest.raises(JWTError):
        decode_token(token)
