"""Settings for notice_tracker.

Uses pydantic-settings so every value can be provided through environment
variables prefixed with NOTICE_TRACKER_ or a .env file.

Configuration sources (in order of precedence):
1. Explicit keyword arguments (the CLI passes its options this way)
2. Environment variables (NOTICE_TRACKER_*)
3. .env file
4. Default values

Example:
    export NOTICE_TRACKER_ACQUISITION_MODE=fallback-only
    export NOTICE_TRACKER_HTTP_TIMEOUT=30
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from notice_tracker.models import AcquisitionMode

DEFAULT_DOWNLOAD_URL_TEMPLATE = "https://www.nuget.org/api/v2/package/{name}/{version}"
DEFAULT_PACKAGE_LINK_TEMPLATE = "https://www.nuget.org/packages/{name}/{version}"


class NoticeTrackerSettings(BaseSettings):
    """Runtime settings for acquisition, staging and rendering."""

    model_config = SettingsConfigDict(
        env_prefix="NOTICE_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    acquisition_mode: AcquisitionMode = Field(
        default=AcquisitionMode.PREFER_PRIMARY,
        description="Acquisition channel selection",
    )
    nuget_executable: str = Field(
        default="nuget",
        description="Package manager CLI used by the primary channel",
    )
    download_url_template: str = Field(
        default=DEFAULT_DOWNLOAD_URL_TEMPLATE,
        description="Fallback download URL, formatted with name and version",
    )
    package_link_template: str = Field(
        default=DEFAULT_PACKAGE_LINK_TEMPLATE,
        description="Source link used when a dependency declares none",
    )
    packages_dir: Path = Field(
        default=Path("nuget_packages"),
        description="Artifact directory, relative paths resolve against the workspace",
    )
    staging_dirname: str = Field(
        default="third_party",
        description="Per-unit directory receiving distributed files",
    )
    target: Optional[str] = Field(
        default=None,
        description="Target triple passed to the binding generator",
    )
    skip_existing: bool = Field(
        default=False,
        description="Reuse an already extracted artifact instead of acquiring it again",
    )
    http_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Total download timeout in seconds (None keeps the aiohttp default)",
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level of the notice_tracker logger",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept log levels in any case."""
        return v.upper()

    def resolve_packages_dir(self, workspace_root: Path) -> Path:
        """Return the absolute artifact directory for a workspace."""
        if self.packages_dir.is_absolute():
            return self.packages_dir
        return (workspace_root / self.packages_dir).resolve()


def get_settings(**overrides) -> NoticeTrackerSettings:
    """Build settings, letting non-None keyword arguments win.

    Args:
        **overrides: Explicit values, typically CLI options. None values are
            ignored so unset options fall back to the environment.

    Returns:
        A new NoticeTrackerSettings instance.
    """
    return NoticeTrackerSettings(**{k: v for k, v in overrides.items() if v is not None})
