from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    app_name: str = "Sortex API"
    environment: Literal["dev", "test", "prod"] = "dev"
    debug: bool = False

    database_url: str = "sqlite:///./sortex.db"

    identity_jwt_secret: str = "change-me"
    identity_jwt_algorithm: str = "HS256"
    identity_issuer: str | None = None
    identity_audience: str | None = None
    identity_token_expire_minutes: int = 60

    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"])
    upload_dir: str = "data/uploads"
    public_base_url: str = "http://localhost:8000/files"
    max_upload_size_mb: int = 10
    rate_limit_per_minute: int = 60
    leaderboard_limit: int = 50
    recent_uploads_limit: int = 4
    auto_create_tables: bool = True

    bin_source: Literal["overpass", "static"] = "overpass"
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    overpass_timeout_seconds: float = 25.0
    default_map_lat: float = 42.698334
    default_map_lng: float = 23.319941
    default_map_radius_m: int = 2000

    celery_broker_url: str | None = None
    celery_result_backend: str | None = None
    redis_url: str = "redis://localhost:6379/0"
    celery_task_always_eager: bool = False
    orphan_grace_minutes: int = 60

    def get_celery_broker_url(self) -> str:
        return self.celery_broker_url or self.redis_url

    def get_celery_result_backend(self) -> str:
        return self.celery_result_backend or self.redis_url


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
