from typing import Dict, Optional

from expiry_tracker.storage.tracker_store import TrackerStore


class InMemoryTrackerStore(TrackerStore):
    """In-memory key-value store, mainly for tests and dry runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        """Initialize the store.

        Args:
            initial: Optional blobs to seed the store with.
        """

        self._blobs: Dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    def save(self, key: str, blob: str) -> None:
        self._blobs[key] = blob

    def remove(self, key: str) -> None:
        self._blobs.pop(key, None)

    def clear(self) -> None:
        self._blobs.clear()

    def keys(self) -> list[str]:
        """Return the stored keys in insertion order."""

        return list(self._blobs)
