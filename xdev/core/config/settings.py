"""Application settings using Pydantic Settings.

Every environment variable xdev honours is declared here and read exactly
once, when the settings object is built. Pipelines receive the resolved
values and never consult the environment themselves.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LINT_IMAGE = "xuper/xlinter-cpp:latest"


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="XDEV_LOGGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = Field(
        default="INFO",
        description="Log level",
    )
    format: str = Field(
        default="[%(name)s] %(message)s",
        description="Log format string",
    )
    file: Path | None = Field(
        default=None,
        description="Log file path",
    )
    use_rich: bool = Field(
        default=True,
        description="Use Rich console for output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("file", mode="before")
    @classmethod
    def validate_file(cls, v: str | None) -> Path | None:
        """Validate and convert file to Path."""
        if v is None or v == "":
            return None
        return Path(v)


class Settings(BaseSettings):
    """Main application settings.

    Environment variables:
        XDEV_ROOT: Source SDK root, required when not using the precompiled SDK.
        XDEV_CACHE: Build cache directory (default ``~/.xdev-cache``).
        XDEV_CC_IMAGE: Toolchain image, overrides the build-mode default.
        XDEV_LINT_IMAGE: Image running the static analyzer.
        XDEV_TIMEOUT: Seconds to wait for a container or process (0 = no limit).
    """

    model_config = SettingsConfigDict(
        env_prefix="XDEV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    root: str = Field(
        default="",
        description="xdev source root used when building the SDK from source",
    )
    cache: Path | None = Field(
        default=None,
        description="Build cache directory",
    )
    cc_image: str = Field(
        default="",
        description="Toolchain image override",
    )
    lint_image: str = Field(
        default=DEFAULT_LINT_IMAGE,
        description="Static analyzer image",
    )
    timeout: int = Field(
        default=0,
        ge=0,
        description="Container/process wait timeout in seconds (0 = unlimited)",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("cache", mode="before")
    @classmethod
    def validate_cache(cls, v: str | None) -> Path | None:
        """Validate and convert cache to Path."""
        if v is None or v == "":
            return None
        return Path(v)

    @field_validator("root", "cc_image", mode="before")
    @classmethod
    def strip_value(cls, v: str | None) -> str:
        """Treat unset and blank values alike."""
        return (v or "").strip()

    @property
    def wait_timeout(self) -> float | None:
        """Timeout as passed to executors, ``None`` meaning unlimited."""
        return float(self.timeout) if self.timeout else None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings singleton.
    """
    return Settings()
