"""Application configuration module."""
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_env: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    pg_host: str = Field(..., alias="PGHOST")
    pg_port: int = Field(default=5432, alias="PGPORT")
    pg_user: str = Field(..., alias="PGUSER")
    pg_password: str = Field(default="", alias="PGPASSWORD")
    pg_database: str = Field(..., alias="PGDATABASE")

    jwt_secret: str = Field(..., alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_issuer: str = Field(default="bookstore", alias="JWT_ISSUER")
    # five days
    access_token_expire_minutes: int = Field(default=7200, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    smtp_enabled: bool = Field(default=False, alias="SMTP_ENABLED")
    smtp_host: str = Field(default="smtp.gmail.com", alias="SMTP_HOST")
    smtp_port: int = Field(default=587, alias="SMTP_PORT")
    smtp_username: str = Field(default="", alias="SMTP_USERNAME")
    smtp_password: str = Field(default="", alias="SMTP_PASSWORD")
    mail_from: str = Field(default="bookstore@localhost", alias="MAIL_FROM")
    mail_cc: Optional[str] = Field(default=None, alias="MAIL_CC")
    app_base_link: str = Field(default="http://localhost:8000", alias="APP_BASE_LINK")

    default_page_size: int = Field(default=24, alias="DEFAULT_PAGE_SIZE")
    comments_page_size: int = Field(default=10, alias="COMMENTS_PAGE_SIZE")
    orders_page_size: int = Field(default=20, alias="ORDERS_PAGE_SIZE")
    users_page_size: int = Field(default=25, alias="USERS_PAGE_SIZE")

    login_attempt_max: int = Field(default=5, alias="LOGIN_ATTEMPT_MAX")
    login_attempt_cache_size: int = Field(default=100, alias="LOGIN_ATTEMPT_CACHE_SIZE")
    login_attempt_ttl_seconds: int = Field(default=900, alias="LOGIN_ATTEMPT_TTL_SECONDS")

    cors_origins: List[str] = Field(
        default=[
            "http://127.0.0.1:4200",
            "http://localhost:4200",
            "http://127.0.0.1:3000",
            "http://localhost:3000",
        ],
        alias="CORS_ORIGINS",
    )

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "populate_by_name": True,
    }


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
