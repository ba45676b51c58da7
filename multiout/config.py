"""Process settings — env-driven, read once per invocation.

Centralized settings using pydantic-settings for environment variable
support.  Reads from a .env file and MULTIOUT_* environment variables.
The routing configuration document itself is loaded separately by
``multiout.core.config_loader``; these settings only say where it lives
and how the process behaves.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Handler settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export CONFIG_FILE=multi-output-config
        export MULTIOUT_LOG_LEVEL=DEBUG
        export MULTIOUT_MAX_UPLOAD_WORKERS=4

    Or via .env file::

        MULTIOUT_SECRETS_DIR=/run/secrets
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MULTIOUT_",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Routing configuration location; the hosting runtime sets CONFIG_FILE
    config_file: str = Field(
        default="config",
        validation_alias=AliasChoices("MULTIOUT_CONFIG_FILE", "CONFIG_FILE"),
    )
    secrets_dir: Path = Path("/var/openfaas/secrets")

    # Logging
    log_level: str = "INFO"
    debug: bool = False

    # Transfers
    work_dir: Path | None = None
    max_upload_workers: int = Field(default=1, ge=1)
    minio_region: str = "us-east-1"

    @property
    def config_path(self) -> Path:
        """Full path of the routing configuration document."""
        return self.secrets_dir / self.config_file
