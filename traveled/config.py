"""Traveled application configuration settings."""

import os

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings

# .env 파일 로드
load_dotenv()


class Settings(BaseSettings):
    """Traveled settings configuration."""

    # 기본 설정
    app_name: str = "Traveled API"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # 서버 설정
    host: str = "127.0.0.1"
    port: int = 8000
    public_base_url: str = os.getenv("PUBLIC_BASE_URL", "https://traveled.app")

    # CORS 설정
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # 인증 (호스팅 ID 제공자가 발급한 JWT 검증용)
    supabase_jwt_secret: str = os.getenv("SUPABASE_JWT_SECRET", "")
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"

    # 데이터베이스 설정
    database_url: str = os.getenv("DATABASE_URL", "")

    # 스토리지 설정 (supabase | local)
    storage_backend: str = os.getenv("STORAGE_BACKEND", "local")
    supabase_url: str = os.getenv("SUPABASE_URL", "")
    supabase_service_key: str = os.getenv("SUPABASE_SERVICE_KEY", "")
    storage_bucket: str = "shared-maps"
    storage_timeout: int = 30
    media_dir: str = os.getenv("MEDIA_DIR", "media")
    media_url_prefix: str = "/media"

    # Redis / Rate limit 설정
    redis_url: str = os.getenv("REDIS_URL", "")
    rate_limit_backend: str = os.getenv("RATE_LIMIT_BACKEND", "memory")
    api_rate_limit_enabled: bool = True

    # 이미지 내보내기 설정
    export_default_theme: str = "classic"
    export_scale: float = 2.0

    # 로깅 설정
    log_dir: str = "logs"
    log_level: str = "INFO"

    @field_validator("supabase_jwt_secret")
    @classmethod
    def jwt_secret_must_be_set(cls, v: str) -> str:
        """Validate that the identity provider secret is set."""
        if not v:
            raise ValueError("SUPABASE_JWT_SECRET must be set")
        return v

    @field_validator("database_url")
    @classmethod
    def database_url_must_be_set(cls, v: str) -> str:
        """Validate that database URL is set."""
        if not v:
            raise ValueError("DATABASE_URL must be set")
        return v

    @field_validator("storage_backend", "rate_limit_backend")
    @classmethod
    def normalize_backend(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as list."""
        if self.is_production:
            return [self.public_base_url]
        return self.cors_origins

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # 추가 필드 무시


# 설정 인스턴스 생성
settings = Settings()
