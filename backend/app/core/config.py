from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Yugt Job Portal"
    DEBUG: bool = False
    FRONTEND_URL: str = "http://localhost:3000"
    BACKEND_CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Database
    DATABASE_URL: str = "sqlite:///./jobportal.db"

    # JWT Authentication
    SECRET_KEY: str = Field(..., min_length=1)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Password hashing (bcrypt cost factor)
    BCRYPT_ROUNDS: int = Field(12, ge=10, le=31)
    TEMP_PASSWORD_LENGTH: int = Field(10, ge=8)

    # Referral codes
    REFERRAL_CODE_LENGTH: int = Field(8, ge=6)
    REFERRAL_CODE_VALID_DAYS: int = Field(60, ge=1)

    # SMTP
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 1025
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_TIMEOUT: int = 10
    EMAIL_FROM: str = "Job Portal <no-reply@jobportal.local>"

    # Resume storage
    RESUME_UPLOAD_DIR: str = "./uploads/resumes"
    RESUME_PUBLIC_PREFIX: str = "/resumes"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    @field_validator("SECRET_KEY")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Refuse to start with a blank signing secret."""
        if not v.strip():
            raise ValueError("SECRET_KEY must be set to sign access tokens")
        return v

    @property
    def cors_origins(self) -> list[str]:
        return [
            origin.strip()
            for origin in self.BACKEND_CORS_ORIGINS.split(",")
            if origin.strip()
        ]

    @property
    def email_sender_name(self) -> str:
        return self.EMAIL_FROM.split("<")[0].strip() or "Job Portal"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
