"""
Module: connectors.storage

Durable key/value string storage used by the catalog store, modelled on the
browser's localStorage: one string value per key, synchronous reads and
writes. Failures surface as PersistenceFailure.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from models.errors import PersistenceFailure

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class InMemoryStorage:
    """Storage kept in a dict; used in tests and when no file is configured."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class JsonFileStorage:
    """
    Storage persisted as a single JSON object (key -> string) in a file.

    Writes go to a temporary file that is then renamed over the target so a
    crash mid-write never leaves a truncated file behind.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise PersistenceFailure(f"Cannot read storage file {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceFailure(f"Storage file {self.path} does not hold a JSON object")
        return data

    def _write_all(self, items: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".storage-", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(items, handle, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            raise PersistenceFailure(f"Cannot write storage file {self.path}: {exc}") from exc
        logger.debug(f"Wrote {len(items)} key(s) to {self.path}")

    def get_item(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items)
