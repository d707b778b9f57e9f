"""Integration test fixtures: a CI workspace driven through every stage."""

from pathlib import Path

import pytest

from plugin_ci.plugins.store.local import LocalObjectStore


@pytest.fixture
def object_store(tmp_path: Path) -> LocalObjectStore:
    return LocalObjectStore(tmp_path / "bucket")
