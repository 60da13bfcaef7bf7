"""Defaults shared by the CLI and the ingestor.

Where build files live, which size metric to report and which artifacts
to leave out of totals.  Every value can come from a ``BUILD_TRACKER_*``
variable or a local ``.env`` file.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class TrackerConfig(BaseSettings):
    """Settings for comparing builds.

    Command-line options win over these values; they only fill in what a
    command was not told explicitly.

    Examples
    --------
    Override via environment::

        export BUILD_TRACKER_LOG_LEVEL=DEBUG
        export BUILD_TRACKER_DEFAULT_SIZE_KEY=stat
        export BUILD_TRACKER_ARTIFACT_FILTERS='["^vendor", "\\.map$"]'

    Or via .env file::

        BUILD_TRACKER_BUILDS_DIR=/data/builds
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BUILD_TRACKER_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Build input
    builds_dir: Path = Path("builds")

    # Comparison defaults
    default_size_key: str = "gzip"
    artifact_filters: list[str] = []

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"


# Module-level singleton — import as `from build_tracker.config import config`
config = TrackerConfig()
