"""
Local key-value storage.

Stands in for browser local storage: synchronous get/set/remove by key, with
every value kept as its own JSON file under a data directory.
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Protocol

from ..errors import StorageError

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...


class JsonFileStorage:
    """
    One JSON document per key.

    get() returns None for a missing key and raises StorageError for a file
    that exists but can't be read back. set() writes to a temp file and
    renames it into place so a crash never leaves half a value.
    """

    _SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{self._SAFE_KEY.sub('_', key)}.json"

    def get(self, key: str) -> Any:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Could not read '{key}': {exc}") from exc

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(value, f, indent=2)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(f"Could not save '{key}': {exc}") from exc

    def remove(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not remove '{key}': {exc}") from exc


def read_or_default(storage: KeyValueStorage, key: str, default: Any = None) -> Any:
    """get() that logs unreadable values and falls back to default."""
    try:
        value = storage.get(key)
    except StorageError as exc:
        logger.error("Error reading %s from storage: %s", key, exc)
        return default
    return default if value is None else value


def write_quietly(storage: KeyValueStorage, key: str, value: Any) -> bool:
    """set() that logs failures instead of raising. Returns True on success."""
    try:
        storage.set(key, value)
    except StorageError as exc:
        logger.error("Error saving %s to storage: %s", key, exc)
        return False
    return True


def remove_quietly(storage: KeyValueStorage, key: str) -> None:
    try:
        storage.remove(key)
    except StorageError as exc:
        logger.error("Error removing %s from storage: %s", key, exc)
