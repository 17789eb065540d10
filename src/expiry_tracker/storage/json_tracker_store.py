import logging
import os
import re
from pathlib import Path
from typing import Optional

from expiry_tracker.storage.tracker_store import TrackerStore

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonTrackerStore(TrackerStore):
    """Directory-backed store keeping one JSON file per key."""

    SUFFIX = ".json"

    def __init__(self, directory: Path) -> None:
        """Initialize the store with a directory path.

        Args:
            directory: Directory holding one ``<key>.json`` file per key.
        """

        self._directory = directory

    def load(self, key: str) -> Optional[str]:
        """Read the blob for a key.

        Unreadable files are logged and reported as absent.
        """

        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError:
            logger.warning(
                "Failed to read tracker store file; treating as empty",
                extra={"path": str(path)},
            )
            return None

    def save(self, key: str, blob: str) -> None:
        """Write the blob for a key and restrict file permissions."""

        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            handle.write(blob)
        os.replace(tmp_path, path)
        self._apply_permissions(path)

    def remove(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return

    def clear(self) -> None:
        if not self._directory.exists():
            return
        for path in self._directory.glob(f"*{self.SUFFIX}"):
            path.unlink()

    def _path_for(self, key: str) -> Path:
        """Map a key to its file, rejecting keys that could escape the directory."""

        if not _KEY_PATTERN.match(key) or key in {".", ".."}:
            raise ValueError(f"Invalid store key: {key!r}")
        return self._directory / f"{key}{self.SUFFIX}"

    @staticmethod
    def _apply_permissions(path: Path) -> None:
        """Restrict store file permissions."""

        try:
            os.chmod(path, 0o600)
        except OSError:
            return
