"""
Local directory object store.

Objects are files under a root directory; tags live in a parallel
``.tags/`` tree as JSON. Writes go through a temporary file and
``os.replace`` so readers never observe a half-written object.
"""

import json
import os
import tempfile
from pathlib import Path

from ...core.exceptions import CorruptObjectError, StoreError
from ...core.models.config import StoreConfig
from .base import BaseObjectStore

TAGS_DIR = ".tags"


class LocalObjectStore(BaseObjectStore):
    """Object store backed by a local directory tree."""

    backend_name = "local"

    def __init__(self, root: Path):
        self.root = Path(root)

    @classmethod
    def from_config(cls, config: StoreConfig, ci_root: Path) -> "LocalObjectStore":
        root = Path(config.path).expanduser() if config.path else ci_root / "store"
        return cls(root)

    def _object_path(self, key: str) -> Path:
        return self.root / key

    def _tags_path(self, key: str) -> Path:
        return self.root / TAGS_DIR / f"{key}.json"

    def exists(self, key: str) -> bool:
        return self._object_path(self.normalize_key(key)).is_file()

    def _read_bytes(self, key: str) -> bytes | None:
        path = self._object_path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreError(f"Cannot read {path}", key=key, cause=e) from e

    def _write_bytes(self, key: str, data: bytes, tags: dict[str, str]) -> None:
        self._atomic_write(key, self._object_path(key), data)
        tags_path = self._tags_path(key)
        if tags:
            self._atomic_write(key, tags_path, json.dumps(tags, sort_keys=True).encode("utf-8"))
        else:
            tags_path.unlink(missing_ok=True)

    def _atomic_write(self, key: str, path: Path, data: bytes) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp, path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StoreError(f"Cannot write {path}", key=key, cause=e) from e

    def get_tags(self, key: str) -> dict[str, str]:
        key = self.normalize_key(key)
        path = self._tags_path(key)
        try:
            tags = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as e:
            raise CorruptObjectError("Unreadable object tags", key=key, cause=e) from e
        if not isinstance(tags, dict):
            raise CorruptObjectError("Object tags must be a JSON object", key=key)
        return {str(k): str(v) for k, v in tags.items()}
