import structlog

from ...domain.entities import User
from ...domain.errors import EmailAlreadyRegistered, ValidationError
from ..interfaces import IPasswordHasher, ITransaction, IUserRepository

MIN_PASSWORD_LENGTH = 6

logger = structlog.get_logger()


class RegisterUser:
    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher, tx: ITransaction):
        self.repo = repo
        self.hasher = hasher
        self.tx = tx

    def execute(self, name: str, email: str, password: str) -> User:
        name = (name or "").strip()
        email = (email or "").strip().lower()
        if not name or not email or not password:
            raise ValidationError("All fields are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        if self.repo.get_by_email(email):
            raise EmailAlreadyRegistered()
        pwd_hash = self.hasher.hash(password)
        try:
            # уникальный индекс по email закрывает гонку двух одновременных регистраций
            user = self.repo.create(name, email, pwd_hash)
            self.tx.commit()
        except Exception:
            self.tx.rollback()
            raise
        logger.info("user_registered", user_id=user.id)
        return user
