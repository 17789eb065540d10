"""Helpers for constructing configuration instances."""

from pathlib import Path
from typing import Any, Dict, Optional

from expiry_tracker.config import CONFIG_FILE_NAME, Config


class ConfigProvider:
    """
    Provides configuration instances without import-time side effects.

    A tracker directory override reads ``config.json`` from that directory
    and relocates every derived path (store, exports) under it.

    Args:
        tracker_dir: Optional tracker directory overriding the configured one.
        path: Optional explicit path for the JSON config file.
    """

    def __init__(
        self, tracker_dir: Optional[Path] = None, path: Optional[Path] = None
    ) -> None:
        self._tracker_dir = tracker_dir
        self._path = path

    def config_path(self) -> Optional[Path]:
        """
        Returns the config file to read, or None for the default location.
        """
        if self._path is not None:
            return self._path
        if self._tracker_dir is not None:
            return self._tracker_dir / CONFIG_FILE_NAME
        return None

    def load(self) -> Config:
        """
        Loads a configuration instance, applying the tracker directory override.

        Returns:
            A validated configuration object.
        """
        overrides: Dict[str, Any] = {}
        if self._tracker_dir is not None:
            overrides["tracker_dir"] = self._tracker_dir
        return Config.load(self.config_path(), **overrides)
