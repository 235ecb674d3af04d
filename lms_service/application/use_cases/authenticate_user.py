from ...domain.entities import User
from ...domain.errors import InvalidCredentials, ValidationError
from ..interfaces import IPasswordHasher, IUserRepository


class AuthenticateUser:
    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher):
        self.repo = repo
        self.hasher = hasher

    def execute(self, email: str, password: str) -> User:
        email = (email or "").strip().lower()
        if not email or not password:
            raise ValidationError("Email and password are required")
        pwd_hash = self.repo.get_password_hash(email)
        if pwd_hash is None or not self.hasher.verify(password, pwd_hash):
            raise InvalidCredentials()
        return self.repo.get_by_email(email)
