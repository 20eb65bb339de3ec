# backend/stocktrail/core/config.py

from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_env: str = "dev"

    database_url: str = "sqlite:///./inventory.db"

    # JWT
    jwt_secret_key: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440

    # comma-separated allowlist, e.g. "https://inventory.example.com,http://localhost:3000"
    cors_origins: str = "http://localhost:3000"

    log_level: str = "INFO"

    # listing
    default_page_size: int = 10
    max_page_size: int = 100

    # CSV import
    max_upload_bytes: int = 5 * 1024 * 1024

    # seed credentials, only used when the users table is empty
    admin_username: str = "admin"
    admin_password: str = "admin123"
    viewer_username: str = "viewer"
    viewer_password: str = "viewer123"

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def allow_origins(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
