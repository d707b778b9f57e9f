"""
Object store interface definitions.

The history store only needs existence checks, JSON reads and writes, and
file uploads. Backends (local directory, SQL database, a cloud bucket) plug
in behind this interface.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..models.config import StoreConfig


class IObjectStore(ABC):
    """
    Interface for key/object stores.

    Keys are ``/``-separated paths such as ``dev/my-plugin/index.json``.
    Implementations raise ``StoreError`` for backend failures.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Backend identifier.

        Examples: 'local', 'sql'
        """
        pass

    @classmethod
    @abstractmethod
    def from_config(cls, config: "StoreConfig", ci_root: Path) -> "IObjectStore":
        """
        Build a store from the ``[store]`` configuration section.

        Args:
            config: Store configuration
            ci_root: CI root directory, used for default locations
        """
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Return True if an object is stored under ``key``."""
        pass

    @abstractmethod
    def read_json(self, key: str, default: Any = None) -> Any:
        """
        Read and decode a JSON object.

        Args:
            key: Object key
            default: Returned when no object exists under ``key``

        Returns:
            Decoded JSON value, or ``default``

        Raises:
            CorruptObjectError: If the stored bytes are not valid JSON
        """
        pass

    @abstractmethod
    def write_json(self, key: str, value: Any, tags: dict[str, str] | None = None) -> None:
        """
        Encode ``value`` as JSON and store it under ``key``, replacing any prior object.

        Args:
            key: Object key
            value: JSON-serializable value
            tags: Optional key/value tags stored with the object
        """
        pass

    @abstractmethod
    def write_file(self, key: str, path: Path, tags: dict[str, str] | None = None) -> None:
        """Store the bytes of a local file under ``key``."""
        pass

    @abstractmethod
    def get_tags(self, key: str) -> dict[str, str]:
        """Return the tags stored with ``key`` (empty if none)."""
        pass
