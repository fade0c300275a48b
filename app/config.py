from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./app.db"

    # JWT (tokens are issued by the auth provider; we only verify them)
    secret_key: str = "your-secret-key-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days

    # Frontend URL for CORS
    frontend_url: str = "http://localhost:3000"

    # Media upload: absolute path to upload folder (empty = backend/uploads/media)
    media_upload_dir: str = ""
    media_public_prefix: str = "/media"

    # Vlogger post screenshot limit (bytes)
    screenshot_max_bytes: int = 5 * 1024 * 1024

    # Promotion expiry sweeper interval in seconds (0 = disabled, expiry is applied at read time)
    promotion_sweep_interval_seconds: int = 0

    log_level: str = "INFO"

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
