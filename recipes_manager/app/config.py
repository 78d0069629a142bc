from __future__ import annotations

from typing import Literal, Optional

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    APP_ENV: str = "local"
    LOG_LEVEL: str = "INFO"
    FRONTEND_CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])

    RECIPES_BACKEND: Literal["memory", "supabase"] = "memory"
    SUPABASE_URL: Optional[AnyUrl] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None
    SUPABASE_RECIPES_TABLE: str = "recipes"

    PICTURES_BACKEND: Literal["memory", "r2"] = "memory"
    R2_ACCOUNT_ID: Optional[str] = None
    R2_ACCESS_KEY_ID: Optional[str] = None
    R2_SECRET_ACCESS_KEY: Optional[str] = None
    R2_BUCKET_NAME: Optional[str] = None

    RECIPES_SEED_FILE: Optional[str] = None

    def validate_backends(self) -> list[str]:
        """Validate backend selection and return list of errors."""
        errors = []

        if self.RECIPES_BACKEND == "supabase":
            if not self.SUPABASE_URL:
                errors.append("SUPABASE_URL is required")
            if not self.SUPABASE_SERVICE_ROLE_KEY:
                errors.append("SUPABASE_SERVICE_ROLE_KEY is required")

        if self.PICTURES_BACKEND == "r2":
            if not self.R2_ACCOUNT_ID:
                errors.append("R2_ACCOUNT_ID is required")
            if not self.R2_ACCESS_KEY_ID:
                errors.append("R2_ACCESS_KEY_ID is required")
            if not self.R2_SECRET_ACCESS_KEY:
                errors.append("R2_SECRET_ACCESS_KEY is required")
            if not self.R2_BUCKET_NAME:
                errors.append("R2_BUCKET_NAME is required")

        return errors


settings = Settings()
