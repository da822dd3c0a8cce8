"""
Configuration for the CodeTube backend.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read once at startup and never mutated."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Server
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    # Gemini
    GEMINI_API_KEY: str = Field(default="")
    GEMINI_MODEL: str = Field(default="gemini-1.5-flash")
    TEMPERATURE: Optional[float] = Field(default=None)

    # YouTube Data API
    YOUTUBE_API_KEY: str = Field(default="")
    YOUTUBE_SEARCH_URL: str = Field(default="https://www.googleapis.com/youtube/v3/search")
    YOUTUBE_MAX_RESULTS: int = Field(default=5, ge=1, le=50)

    # Applies to each outbound call separately
    REQUEST_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)

    # When true a failed video search fails the whole request
    VIDEO_ERRORS_FATAL: bool = Field(default=False)

    # CORS
    ALLOWED_ORIGINS: str = Field(default="*")

    # Prebuilt client bundle
    STATIC_DIR: str = Field(default="frontend/build")

    @property
    def cors_origins(self) -> list[str]:
        origins = [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]
        if "*" in origins:
            return ["*"]
        return origins

    @property
    def gemini_configured(self) -> bool:
        return bool(self.GEMINI_API_KEY)

    @property
    def youtube_configured(self) -> bool:
        return bool(self.YOUTUBE_API_KEY)


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


# Logging setup
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("google").setLevel(logging.WARNING)

logger = logging.getLogger("codetube")
