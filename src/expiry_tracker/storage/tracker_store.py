from abc import ABC, abstractmethod
from typing import Optional


class TrackerStore(ABC):
    """Interface for the key-value store holding serialized tracker state."""

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        """Return the blob stored under a key.

        Args:
            key: Storage key.
        Returns:
            The stored text, or None when the key is absent.
        """

    @abstractmethod
    def save(self, key: str, blob: str) -> None:
        """Store a blob under a key, replacing any previous value.

        Args:
            key: Storage key.
            blob: Serialized text to store.
        """

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove a key if present."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every key owned by the store."""
