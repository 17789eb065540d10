"""Tests for the directory-backed JSON tracker store."""

from pathlib import Path

import pytest

from expiry_tracker.storage.in_memory_tracker_store import InMemoryTrackerStore
from expiry_tracker.storage.json_tracker_store import JsonTrackerStore


def test_json_store_round_trips_blobs(tmp_path: Path) -> None:
    """Saved blobs are read back unchanged."""
    store = JsonTrackerStore(tmp_path / "store")

    store.save("knowledge-items", "[]")

    assert store.load("knowledge-items") == "[]"
    assert (tmp_path / "store" / "knowledge-items.json").exists()


def test_json_store_missing_key_is_none(tmp_path: Path) -> None:
    """Absent keys load as None."""
    store = JsonTrackerStore(tmp_path)

    assert store.load("knowledge-items") is None


def test_json_store_remove_and_clear(tmp_path: Path) -> None:
    """Remove drops one key; clear drops every key."""
    store = JsonTrackerStore(tmp_path)
    store.save("a", "1")
    store.save("b", "2")

    store.remove("a")
    store.remove("a")
    assert store.load("a") is None
    assert store.load("b") == "2"

    store.clear()
    assert store.load("b") is None


def test_json_store_clear_missing_directory(tmp_path: Path) -> None:
    """Clearing a store whose directory does not exist is a no-op."""
    JsonTrackerStore(tmp_path / "missing").clear()


def test_json_store_rejects_path_like_keys(tmp_path: Path) -> None:
    """Keys cannot escape the store directory."""
    store = JsonTrackerStore(tmp_path)

    with pytest.raises(ValueError):
        store.save("../outside", "x")


def test_json_store_read_failure_is_absent(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Unreadable files are reported as absent."""
    store = JsonTrackerStore(tmp_path)
    store.save("a", "1")

    def raise_os_error(self, encoding=None) -> str:
        raise OSError("unreadable")

    monkeypatch.setattr(Path, "read_text", raise_os_error)

    assert store.load("a") is None


def test_json_store_chmod_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """chmod errors are swallowed during save."""
    store = JsonTrackerStore(tmp_path)

    def raise_os_error(_: Path, __: int) -> None:
        raise OSError("no perms")

    monkeypatch.setattr("expiry_tracker.storage.json_tracker_store.os.chmod", raise_os_error)

    store.save("a", "1")
    assert store.load("a") == "1"


def test_in_memory_store() -> None:
    """The in-memory store behaves like the JSON store."""
    store = InMemoryTrackerStore({"a": "1"})
    store.save("b", "2")

    assert store.keys() == ["a", "b"]
    store.remove("a")
    assert store.load("a") is None
    store.clear()
    assert store.keys() == []
