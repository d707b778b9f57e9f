"""
Base object store.

Shared key validation and JSON encoding for object store backends.
"""

import json
from abc import abstractmethod
from pathlib import Path
from typing import Any, ClassVar

from ...core.exceptions import CorruptObjectError, StoreError
from ...core.interfaces.store import IObjectStore


class BaseObjectStore(IObjectStore):
    """
    Abstract base class for object stores.

    Subclasses implement raw byte access; JSON encoding, decoding and key
    validation live here so every backend rejects the same bad input.
    """

    backend_name: ClassVar[str] = ""

    @property
    def name(self) -> str:
        return self.backend_name

    @staticmethod
    def normalize_key(key: str) -> str:
        """
        Validate and normalize an object key.

        Raises:
            StoreError: If the key is empty, absolute or escapes the store
        """
        parts = [p for p in key.strip().split("/") if p]
        if not parts or key.startswith("/") or any(p in (".", "..") for p in parts):
            raise StoreError("Invalid object key", key=key)
        return "/".join(parts)

    @abstractmethod
    def _read_bytes(self, key: str) -> bytes | None:
        """Return the stored bytes, or None when the key does not exist."""
        pass

    @abstractmethod
    def _write_bytes(self, key: str, data: bytes, tags: dict[str, str]) -> None:
        """Store bytes under key, replacing any prior object and its tags."""
        pass

    def read_json(self, key: str, default: Any = None) -> Any:
        key = self.normalize_key(key)
        raw = self._read_bytes(key)
        if raw is None:
            return default
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorruptObjectError("Stored object is not valid JSON", key=key, cause=e) from e

    def write_json(self, key: str, value: Any, tags: dict[str, str] | None = None) -> None:
        key = self.normalize_key(key)
        try:
            data = json.dumps(value, indent=2).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise StoreError("Value is not JSON serializable", key=key, cause=e) from e
        self._write_bytes(key, data, dict(tags or {}))

    def write_file(self, key: str, path: Path, tags: dict[str, str] | None = None) -> None:
        key = self.normalize_key(key)
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise StoreError(f"Cannot read file for upload: {path}", key=key, cause=e) from e
        self._write_bytes(key, data, dict(tags or {}))
