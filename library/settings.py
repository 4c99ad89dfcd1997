"""
Application settings read from the environment.

Environment variables:
    GEMINI_API_KEY / GOOGLE_API_KEY: API key for google-genai (GEMINI_API_KEY wins)
    VISMESH_MODEL_BACKEND, VISMESH_ANIMATION_BACKEND: backend names
    VISMESH_MESH_MODEL, VISMESH_IMAGE_MODEL, VISMESH_VIDEO_MODEL: model ids
    VISMESH_POLL_MAX_ATTEMPTS, VISMESH_POLL_TIMEOUT, VISMESH_DOWNLOAD_TIMEOUT
    VISMESH_VALIDATE_MESH, VISMESH_LOG_LEVEL
"""

import logging
from typing import ClassVar, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from library.backends import BACKEND_NAMES
from library.operation_poller import POLL_INTERVAL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppSettings(BaseSettings):
    """Runtime configuration for the generation pipeline."""

    api_key: Optional[str] = Field(None, validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"))
    model_backend: str = "gemini"
    animation_backend: str = "veo"
    mesh_model: str = "gemini-2.5-flash"
    image_model: str = "gemini-2.5-flash-image"
    video_model: str = "veo-2.0-generate-001"
    poll_max_attempts: int = Field(120, gt=0)
    poll_timeout: float = Field(600.0, gt=0)
    download_timeout: float = Field(120.0, gt=0)
    validate_mesh: bool = True
    log_level: str = "INFO"

    # Fixed; not read from the environment
    poll_interval: ClassVar[float] = POLL_INTERVAL

    model_config = SettingsConfigDict(env_prefix="VISMESH_", case_sensitive=False, populate_by_name=True,
                                      extra="ignore", protected_namespaces=("settings_",))

    @field_validator("model_backend", "animation_backend")
    @classmethod
    def known_backend(cls, v: str) -> str:
        name = v.strip().lower()
        if name not in BACKEND_NAMES:
            raise ValueError(f"expected one of {', '.join(BACKEND_NAMES)}")
        return name

    @field_validator("log_level")
    @classmethod
    def known_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"expected one of {', '.join(LOG_LEVELS)}")
        return level


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once per process."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    # httpx logs full request URLs, which carry the API key
    logging.getLogger("httpx").setLevel(logging.WARNING)
