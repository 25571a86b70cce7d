from pydantic_settings import BaseSettings, SettingsConfigDict

from functools import lru_cache
from typing import Optional
from pathlib import Path


class Settings(BaseSettings):
    PROJECT_NAME: str = "MedGram API"
    ENV: str = "dev"
    DEBUG: bool = False

    # Database: DATABASE_URL wins, otherwise built from the POSTGRES_* parts
    DATABASE_URL: Optional[str] = None
    POSTGRES_USER: str = "medgram_admin"
    POSTGRES_PASSWORD: str = "secure_password_change_me"
    POSTGRES_HOST: str = "medgram_db"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "medgram_db"

    # JWT settings
    JWT_SECRET_KEY: str = "dev-secret"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # bcrypt cost factor
    BCRYPT_ROUNDS: int = 10

    # Object storage (MinIO / S3 compatible)
    MINIO_ENDPOINT: str = "medgram_storage"
    MINIO_PORT: int = 9000
    MINIO_USE_SSL: bool = False
    MINIO_ROOT_USER: str = "minio_admin"
    MINIO_ROOT_PASSWORD: str = "secure_minio_password_change_me"
    MINIO_REGION: str = "us-east-1"
    MINIO_BUCKET: str = "videos"
    # address browsers use to read uploaded objects
    MINIO_PUBLIC_URL: str = "http://localhost:9000"
    UPLOAD_URL_EXPIRE_SECONDS: int = 15 * 60

    FEED_LIMIT: int = 50

    # CORS origins: comma-separated string (e.g., "http://localhost:3000,http://example.com" or "*")
    CORS_ORIGINS: str = "*"

    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True

    model_config = SettingsConfigDict(env_file=str(Path(__file__).parent.parent.parent / ".env"), extra="ignore")

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def storage_endpoint_url(self) -> str:
        """Internal address of the object store, as seen from this process."""
        scheme = "https" if self.MINIO_USE_SSL else "http"
        return f"{scheme}://{self.MINIO_ENDPOINT}:{self.MINIO_PORT}"

    @property
    def cors_origins_list(self) -> list[str]:
        """Convert comma-separated CORS_ORIGINS string to a list."""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
