from functools import lru_cache
from typing import Optional

from fastapi.security import OAuth2PasswordBearer
from passlib.context import CryptContext
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite:///./storefront.db"
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 30
    token_url: str = "api/auth/login"
    bcrypt_rounds: int = 10
    allowed_origins: list[str] = ["*"]
    allowed_methods: list[str] = ["GET", "POST", "PUT", "PATCH", "DELETE"]
    allow_credentials: bool = True
    log_file: Optional[str] = "app.log"
    log_level: str = "INFO"
    default_page_size: int = 10
    max_page_size: int = 100
    admin_email: str = "admin@example.com"
    admin_password: str = "admin123"
    admin_first_name: str = "Admin"
    admin_last_name: str = "User"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Get the settings instance"""
    return Settings()


settings = get_settings()

# Password hashing
password_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds
)

# OAuth2 scheme
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=settings.token_url)
