"""Pydantic models for config validation.

Opt-in schema validation for ``Config.config_data``. Call
``Config.validated()`` to obtain a typed, validated ``AppConfig``
instance. Dict-based access keeps working unchanged.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PathsConfig(BaseModel):
    """File-system paths used by the application."""

    data_dir: Path
    storage_dir: Path | None = None
    log_dir: Path | None = None

    @field_validator("data_dir", "storage_dir", "log_dir", mode="before")
    @classmethod
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v


class StorageConfig(BaseModel):
    """Local key-value store settings."""

    namespace: str = "sticker_journal"
    quota_bytes: int = Field(default=5 * 1024 * 1024, ge=0)


class OCRConfig(BaseModel):
    """Vision model settings for text extraction."""

    models: list[str] = Field(min_length=1)
    api_key: str = ""
    timeout: int = 60

    @field_validator("models", mode="before")
    @classmethod
    def _split_csv(cls, v: Any) -> Any:
        # Env overrides arrive as "a,b,c"
        if isinstance(v, str):
            return [m.strip() for m in v.split(",") if m.strip()]
        return v


class WeatherConfig(BaseModel):
    """Weather provider settings."""

    base_url: str = "https://api.open-meteo.com/v1/forecast"
    default_latitude: float = 40.7128
    default_longitude: float = -74.006
    timeout: int = 5


class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 5000


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    file: str = ""


class AppConfig(BaseModel):
    """Root configuration model.

    Uses ``extra="allow"`` so deployments can bolt on custom sections
    without touching this schema.
    """

    model_config = ConfigDict(extra="allow")

    paths: PathsConfig = PathsConfig(data_dir=Path("~/.stickerjournal-data"))
    storage: StorageConfig = StorageConfig()
    ocr: OCRConfig
    weather: WeatherConfig = WeatherConfig()
    server: ServerConfig = ServerConfig()
    logging: LoggingConfig = LoggingConfig()
