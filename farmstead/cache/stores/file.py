"""Directory-backed implementation of KeyValueStore.

Each key maps to one file under the store directory, so entries survive
process restarts the way browser local storage does.
"""

import hashlib
import os
import tempfile
from pathlib import Path

from farmstead.cache.store import KeyValueStore
from farmstead.exceptions import KeyValueStoreError


class FileKeyValueStore(KeyValueStore):
    """KeyValueStore persisting one UTF-8 file per key.

    File names are the SHA-256 of the key, which keeps arbitrary filter
    values (slashes, dates, spaces) out of the filesystem namespace.
    Writes go through a temp file and an atomic rename, so a reader never
    sees a half-written value.
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self._directory / f"{digest}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise KeyValueStoreError(
                f"Failed to read cache file {path}: {e}", operation="get", key=key
            ) from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise KeyValueStoreError(
                f"Failed to write cache file {path}: {e}", operation="set", key=key
            ) from e

    def remove(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise KeyValueStoreError(
                f"Failed to remove cache file {path}: {e}", operation="remove", key=key
            ) from e
