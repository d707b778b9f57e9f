"""
SQL object store.

Stores objects as rows of a single ``objects`` table through SQLAlchemy,
so history can live in SQLite locally or in any database SQLAlchemy
supports.
"""

import json
import time
from pathlib import Path

from sqlalchemy import Float, LargeBinary, String, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from ...core.exceptions import CorruptObjectError, StoreError
from ...core.models.config import StoreConfig
from .base import BaseObjectStore


class Base(DeclarativeBase):
    """Base class for object store ORM models."""

    pass


class StoredObject(Base):
    """One stored object and its tags."""

    __tablename__ = "objects"

    key: Mapped[str] = mapped_column(String(1024), primary_key=True)
    body: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    tags: Mapped[str | None] = mapped_column(Text)  # JSON object
    updated_at: Mapped[float] = mapped_column(Float, nullable=False)


class SqlObjectStore(BaseObjectStore):
    """Object store backed by a SQLAlchemy database."""

    backend_name = "sql"

    def __init__(self, url: str, engine: Engine | None = None):
        self.url = url
        try:
            self._engine = engine or create_engine(url, echo=False)
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            raise StoreError(f"Cannot open object store database: {url}", cause=e) from e
        self._session_factory: sessionmaker[Session] = sessionmaker(
            bind=self._engine, expire_on_commit=False
        )

    @classmethod
    def from_config(cls, config: StoreConfig, ci_root: Path) -> "SqlObjectStore":
        if config.url:
            return cls(config.url)
        db_path = Path(config.path).expanduser() if config.path else ci_root / "store.db"
        db_path.parent.mkdir(parents=True, exist_ok=True)
        return cls(f"sqlite:///{db_path}")

    def _get(self, key: str) -> StoredObject | None:
        try:
            with self._session_factory() as session:
                return session.get(StoredObject, key)
        except SQLAlchemyError as e:
            raise StoreError("Object store query failed", key=key, cause=e) from e

    def exists(self, key: str) -> bool:
        return self._get(self.normalize_key(key)) is not None

    def _read_bytes(self, key: str) -> bytes | None:
        row = self._get(key)
        return row.body if row is not None else None

    def _write_bytes(self, key: str, data: bytes, tags: dict[str, str]) -> None:
        row = StoredObject(
            key=key,
            body=data,
            tags=json.dumps(tags, sort_keys=True) if tags else None,
            updated_at=time.time(),
        )
        try:
            with self._session_factory() as session, session.begin():
                session.merge(row)
        except SQLAlchemyError as e:
            raise StoreError("Object store write failed", key=key, cause=e) from e

    def get_tags(self, key: str) -> dict[str, str]:
        row = self._get(self.normalize_key(key))
        if row is None or not row.tags:
            return {}
        try:
            tags = json.loads(row.tags)
        except json.JSONDecodeError as e:
            raise CorruptObjectError("Unreadable object tags", key=key, cause=e) from e
        return {str(k): str(v) for k, v in tags.items()}

    def close(self) -> None:
        self._engine.dispose()
