from pathlib import Path
from typing import Any, Optional

from pydantic import Field, NonNegativeInt, PositiveInt, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import (
    DotEnvSettingsSource,
    EnvSettingsSource,
    JsonConfigSettingsSource,
)

DEFAULT_TRACKER_DIR = Path(".expiry_tracker")
CONFIG_FILE_NAME = "config.json"
DEFAULT_CONFIG_PATH = DEFAULT_TRACKER_DIR / CONFIG_FILE_NAME


class Config(BaseSettings):
    """
    Application configuration loaded from environment variables, .env, and JSON.
    """

    tracker_dir: Path = Field(
        default=DEFAULT_TRACKER_DIR, description="Root directory for tracker data."
    )
    store_dir: Optional[Path] = Field(
        default=None, description="Directory of the JSON key-value store."
    )
    status_threshold_days: NonNegativeInt = Field(
        default=30, description="Days before expiry an item counts as expiring-soon."
    )
    renewed_window_days: NonNegativeInt = Field(
        default=30, description="Days after a renewal an item counts as renewed."
    )
    timeline_days: PositiveInt = Field(
        default=90, description="Length of the computed expiry timeline."
    )
    timeline_visible_days: PositiveInt = Field(
        default=30, description="Timeline days exposed to the chart."
    )
    retention_cap: PositiveInt = Field(
        default=100, description="Maximum items kept after a merge-by-id import."
    )
    activity_limit: PositiveInt = Field(
        default=50, description="Maximum entries kept in the activity log."
    )
    log_level: str = Field(default="INFO", description="Root logging level.")

    model_config = SettingsConfigDict(
        env_prefix="EXPIRY_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="forbid",
    )

    @staticmethod
    def _resolve_relative_path(path: Path, tracker_dir: Path) -> Path:
        """
        Resolves a relative path by anchoring it under the tracker directory.

        Args:
            path: The input path to resolve.
            tracker_dir: The root directory for tracker data.

        Returns:
            A resolved path under the tracker directory when relative.
        """
        if path.is_absolute():
            return path

        tracker_parts = tracker_dir.parts
        if path.parts[: len(tracker_parts)] == tracker_parts:
            return path
        return tracker_dir / path

    @model_validator(mode="after")
    def _apply_defaults(self) -> "Config":
        """
        Derives the store directory and checks the timeline window.

        Returns:
            The validated configuration instance.
        """
        if self.store_dir is None:
            self.store_dir = self.tracker_dir / "store"
        else:
            self.store_dir = self._resolve_relative_path(
                self.store_dir, self.tracker_dir
            )
        if self.timeline_visible_days > self.timeline_days:
            raise ValueError(
                "timeline_visible_days cannot exceed timeline_days."
            )
        return self

    @classmethod
    def load(cls, path: Optional[Path] = None, **overrides: Any) -> "Config":
        """
        Loads configuration from a JSON file when present.

        Args:
            path: Optional override path for the JSON config file.
            overrides: Field values that win over every other source.

        Returns:
            A validated configuration object.
        """
        config_path = path or DEFAULT_CONFIG_PATH
        if not config_path.exists():
            return cls(**overrides)

        json_source = JsonConfigSettingsSource(cls, json_file=config_path)
        dotenv_source = DotEnvSettingsSource(cls)
        env_source = EnvSettingsSource(cls)
        merged: dict[str, object] = {}
        merged.update(json_source())
        merged.update(dotenv_source())
        merged.update(env_source())
        merged.update(overrides)
        return cls.model_validate(merged)

    def get_tracker_dir(self) -> Path:
        """Returns the root directory for tracker data."""

        return self.tracker_dir

    def get_store_dir(self) -> Path:
        """
        Returns the directory of the JSON key-value store.

        Returns:
            The store directory path.
        """
        if self.store_dir is None:
            raise ValueError("Store directory is not configured.")
        return self.store_dir

    def get_export_path(self, stamp: str, full: bool = False) -> Path:
        """
        Returns the default export file path for a date stamp.

        Args:
            stamp: ISO date used in the file name.
            full: Whether the export includes the activity log.

        Returns:
            The export file path under the tracker directory.
        """
        prefix = "knowledge-tracker-full-export" if full else "knowledge-tracker-export"
        return self.tracker_dir / "exports" / f"{prefix}-{stamp}.json"
