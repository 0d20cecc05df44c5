"""
Key-value storage backends.

'KeyValueStorage' is the persistence primitive under the conversation store:
string keys mapped to string values, read and written synchronously, the same
contract as a browser's local storage. Serialization of structured data is the
caller's concern.

Concrete implementations:
    'InMemoryKeyValueStorage'  - a plain dict, used by tests and throwaway sessions.
    'JSONFileKeyValueStorage'  - one JSON object on disk, rewritten atomically.
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from loguru import logger


class KeyValueStorage(ABC):
    """Abstract string-to-string storage."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the value stored under 'key', or None if it does not exist."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        pass


class InMemoryKeyValueStorage(KeyValueStorage):
    def __init__(self, items: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class JSONFileKeyValueStorage(KeyValueStorage):
    """
    Key-value storage kept in a single JSON file.

    The whole file is read on every 'get_item' and rewritten on every
    'set_item'. Writes go to a temporary file in the same directory that is
    then renamed over the target, so a crash mid-write never leaves a
    truncated file behind. A missing file reads as empty storage. A file that
    is not a JSON object raises 'ValueError' on 'get_item'; writes replace it
    with a fresh object so the storage recovers.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Storage file {self.path} does not contain a JSON object")
        return data

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                json.dump(data, tmp_file)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> str | None:
        value = self._read().get(key)
        if value is not None and not isinstance(value, str):
            raise ValueError(f"Value stored under {key!r} is not a string")
        return value

    def _read_for_write(self) -> dict[str, str]:
        try:
            return self._read()
        except ValueError as exc:
            logger.warning(f"Discarding unreadable storage file {self.path}: {exc}")
            return {}

    def set_item(self, key: str, value: str) -> None:
        data = self._read_for_write()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read_for_write()
        if key in data:
            del data[key]
            self._write(data)
