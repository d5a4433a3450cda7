from typing import Generator

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="TODOAY_"
    )

    database_url: str = "sqlite:///./todoay.db"
    secret_key: SecretStr = SecretStr("todoay-local-signing-key-replace-me-in-every-deployment")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    refresh_token_expire_days: int = 14
    log_level: str = "INFO"
    app_name: str = "Todoay API"
    debug: bool = False


settings = Settings()

_connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(
    settings.database_url,
    connect_args=_connect_args,
    echo=settings.debug,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield one session per request; the caller commits."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
