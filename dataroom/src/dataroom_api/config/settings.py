"""Data room configuration using pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from typing import ClassVar, Literal, Optional

from pydantic import Field, NonNegativeInt, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class DataRoomApiSettings(BaseSettings):
    """Process/runtime settings for the data room API server."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="DATAROOM_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="127.0.0.1", description="Bind address for the data room API.")
    port: PositiveInt = Field(default=8090, description="Port for the data room API.")
    reload: bool = Field(default=False, description="Enable uvicorn auto-reload (dev only).")
    log_level: Literal["critical", "error", "warning", "info", "debug", "trace"] = Field(
        default="info",
        description="Log level for data room API / uvicorn.",
    )


class DataRoomSettings(BaseSettings):
    """Validated settings for access control and room lifecycle policy."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="DATAROOM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    jwt_secret: str = Field(
        default="dev-secret",
        description="Secret used to sign/verify bearer tokens.",
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm.")
    jwt_access_minutes: PositiveInt = Field(
        default=60,
        description="Lifetime of issued access tokens (minutes).",
    )
    expiring_window_days: PositiveInt = Field(
        default=7,
        description="Rooms expiring within this many days are reported as EXPIRING.",
    )
    archive_grace_days: Optional[NonNegativeInt] = Field(
        default=None,
        description="Days an EXPIRED room stays readable before the sweep archives it. Unset disables the sweep.",
    )
    sweep_interval_seconds: NonNegativeInt = Field(
        default=0,
        description="Interval of the background archive sweep (0 disables the periodic task).",
    )
    expired_blocks_downloads: bool = Field(
        default=False,
        description="Deny DOWNLOAD to non-owners while a room is EXPIRED.",
    )
    expired_blocks_access_requests: bool = Field(
        default=False,
        description="Reject new access requests and approvals while a room is EXPIRED.",
    )
    activity_default_limit: PositiveInt = Field(default=20, description="Default recent activity page size.")
    activity_max_limit: PositiveInt = Field(default=50, description="Upper bound for recent activity page size.")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Origins allowed by the CORS middleware.",
    )


@lru_cache()
def get_settings() -> DataRoomSettings:
    """Return memoized data room settings."""

    return DataRoomSettings()


@lru_cache()
def get_api_settings() -> DataRoomApiSettings:
    """Return memoized API process settings."""

    return DataRoomApiSettings()
