# src/ps_app/core/config.py
from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from ps_app.core.media_types import IMAGE_EXTS, VIDEO_EXTS


class Settings(BaseSettings):
    """
    App settings (12-factor). Override via env vars, e.g.
      PS_DATE_FORMAT=%Y-%m-%d  PS_THREADS=8
    """

    # App
    VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_JSON: bool = False

    # Naming
    DATE_FORMAT: str = "%Y%m%d-%H%M%S"
    FILE_FORMAT: str = "{type}{_:date}{-:name}{-:dup}.{ext}"

    # Classification (comma separated in env, without dots)
    IMAGE_EXTENSIONS: Annotated[list[str], NoDecode] = list(IMAGE_EXTS)
    VIDEO_EXTENSIONS: Annotated[list[str], NoDecode] = list(VIDEO_EXTS)

    # Execution
    THREADS: int | None = None  # None -> sequential
    DRAIN_TIMEOUT: float | None = None  # seconds per completion wait
    FFPROBE_TIMEOUT: int = 30

    model_config = SettingsConfigDict(
        env_prefix="PS_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("IMAGE_EXTENSIONS", "VIDEO_EXTENSIONS", mode="before")
    @classmethod
    def _split_exts(cls, v):
        if isinstance(v, str):
            v = v.split(",")
        return [str(e).strip().lstrip(".").lower() for e in v if str(e).strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    FastAPI-friendly cached getter. Use Depends(get_settings) where needed.
    """
    return Settings()
