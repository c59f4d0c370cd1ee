"""Tests for FileKeyValueStore."""

from pathlib import Path

import pytest

from farmstead.cache.stores import FileKeyValueStore
from farmstead.exceptions import KeyValueStoreError


@pytest.fixture
def store(tmp_path: Path) -> FileKeyValueStore:
    return FileKeyValueStore(tmp_path / "cache")


class TestFileKeyValueStore:
    """Tests for file-backed persistence."""

    def test_get_missing_returns_none(self, store) -> None:
        assert store.get("products_all") is None

    def test_set_creates_directory(self, store) -> None:
        store.set("products_all", '[{"id": 1}]')
        assert store.directory.is_dir()
        assert store.get("products_all") == '[{"id": 1}]'

    def test_survives_new_instance(self, tmp_path: Path) -> None:
        """Values persist across store instances (process restarts)."""
        FileKeyValueStore(tmp_path / "cache").set("products_all", "[1]")

        reopened = FileKeyValueStore(tmp_path / "cache")
        assert reopened.get("products_all") == "[1]"

    def test_keys_with_path_characters(self, store) -> None:
        key = "orders_2025/07/01_../etc"
        store.set(key, "x")
        assert store.get(key) == "x"
        assert len(list(store.directory.iterdir())) == 1

    def test_overwrite_leaves_no_temp_files(self, store) -> None:
        store.set("k", "1")
        store.set("k", "2")
        assert store.get("k") == "2"
        assert [p.suffix for p in store.directory.iterdir()] == [".json"]

    def test_remove(self, store) -> None:
        store.set("k", "1")
        store.remove("k")
        assert store.get("k") is None
        store.remove("k")

    def test_unwritable_location_raises_store_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = FileKeyValueStore(blocker / "cache")

        with pytest.raises(KeyValueStoreError) as exc_info:
            store.set("k", "1")
        assert exc_info.value.operation == "set"

    def test_unreadable_entry_raises_store_error(self, store) -> None:
        store.set("k", "1")
        path = next(store.directory.iterdir())
        path.unlink()
        path.mkdir()

        with pytest.raises(KeyValueStoreError):
            store.get("k")
