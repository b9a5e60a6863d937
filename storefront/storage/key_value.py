"""
Key-Value Storage

Durable client storage for cart contents and the session token.
Values are JSON documents. A missing, unreadable or undecodable entry
reads as None so callers can fall back to an empty/unauthenticated state.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class KeyValueStore:
    """
    Base class for string-keyed JSON storage.

    Subclasses implement _read_raw/_write_raw/_delete_raw. get() never
    raises on bad stored data; set() propagates write failures to the
    caller, which decides whether they are fatal.
    """

    def _read_raw(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def _write_raw(self, key: str, value: str) -> None:
        raise NotImplementedError

    def _delete_raw(self, key: str) -> None:
        raise NotImplementedError

    def get(self, key: str) -> Optional[Any]:
        """Return the decoded value for key, or None if missing or corrupt."""
        try:
            raw = self._read_raw(key)
        except OSError as e:
            logger.warning("Could not read '%s' from storage: %s", key, e)
            return None

        if raw is None:
            return None

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Discarding corrupt '%s' entry: %s", key, e)
            return None

    def set(self, key: str, value: Any) -> None:
        self._write_raw(key, json.dumps(value, ensure_ascii=False))

    def delete(self, key: str) -> None:
        self._delete_raw(key)


class MemoryStore(KeyValueStore):
    """In-memory store; holds raw strings so corrupt entries can be simulated."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def _read_raw(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def _write_raw(self, key: str, value: str) -> None:
        self.data[key] = value

    def _delete_raw(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """
    One file per key under a data directory.

    Usage:
        store = JsonFileStore("~/.storefront")
        store.set("hardware-store-cart", [...])
        lines = store.get("hardware-store-cart")
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory).expanduser()

    def _path(self, key: str) -> Path:
        safe = "".join(c if c.isalnum() or c in "-_" else "_" for c in key)
        return self.directory / f"{safe}.json"

    def _read_raw(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def _write_raw(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    def _delete_raw(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
