from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from ..config import settings
from .models import Base


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        # in-memory база живёт в одном соединении, его и отдаём всем потокам
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options
    options = {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
        "pool_recycle": 3600,
    }
    # Добавляем параметры кодировки для PostgreSQL
    if url.startswith("postgresql"):
        options["connect_args"] = {"client_encoding": "utf8"}
    return options


engine = create_engine(settings.DATABASE_URL, echo=False, **_engine_options(settings.DATABASE_URL))
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db():
    db = SessionLocal()
    try: yield db
    finally: db.close()


def init_db() -> None:
    Base.metadata.create_all(bind=engine)


def close_db() -> None:
    engine.dispose()
