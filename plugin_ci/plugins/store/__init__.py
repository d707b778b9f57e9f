"""Object store backends."""

from .base import BaseObjectStore
from .local import LocalObjectStore
from .sql import SqlObjectStore

__all__ = ["BaseObjectStore", "LocalObjectStore", "SqlObjectStore"]
