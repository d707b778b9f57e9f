"""
plugin-ci settings.

Settings come from, highest priority first:

1. Keyword overrides passed to ``load_settings``
2. Environment variables ``PLUGIN_CI_<SECTION>__<FIELD>``
3. ``.plugin-ci/config.toml``, or ``[tool.plugin-ci]`` in ``pyproject.toml``,
   in the project directory or the nearest parent that has one
4. Model defaults
"""

from __future__ import annotations

import os
import tomllib
from contextvars import ContextVar
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from .models.config import (
    BuildConfig,
    CIConfig,
    LoggingConfig,
    PackagingConfig,
    StoreConfig,
    TestingConfig,
)

CONFIG_DIR = ".plugin-ci"
CONFIG_FILENAME = "config.toml"
PYPROJECT_TOOL_KEY = "plugin-ci"
LEGACY_BASE_URL_VAR = "BASE_URL"


def _get_logger():
    from ..services.logging import NullLogger
    from .container import resolve_or_default
    from .interfaces.logger import ILogger

    return resolve_or_default(ILogger, NullLogger)


@dataclass
class ConfigFile:
    """The TOML data found for a project, and where it came from."""

    path: Path | None = None
    data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        data = tomllib.load(f)
    if path.name == "pyproject.toml":
        return data.get("tool", {}).get(PYPROJECT_TOOL_KEY, {})
    return data


def _has_tool_section(pyproject: Path) -> bool:
    try:
        with open(pyproject, "rb") as f:
            return PYPROJECT_TOOL_KEY in tomllib.load(f).get("tool", {})
    except (OSError, tomllib.TOMLDecodeError) as e:
        _get_logger().debug("Ignoring unreadable %s: %s", pyproject, e)
        return False


def find_config_file(start_dir: str | None = None) -> Path | None:
    """Walk up from ``start_dir`` (or cwd) to the nearest plugin-ci config."""
    start = Path(start_dir) if start_dir else Path.cwd()
    for folder in (start, *start.parents):
        candidate = folder / CONFIG_DIR / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        pyproject = folder / "pyproject.toml"
        if pyproject.exists() and _has_tool_section(pyproject):
            return pyproject
    return None


def read_config_file(config_path: Path | None = None, start_dir: str | None = None) -> ConfigFile:
    """
    Locate and parse the config file.

    Parse and read failures are reported in ``ConfigFile.error``; settings
    then fall back to the environment and defaults.
    """
    path = config_path or find_config_file(start_dir)
    if path is None:
        return ConfigFile()
    try:
        return ConfigFile(path=path, data=_read_toml(path))
    except tomllib.TOMLDecodeError as e:
        _get_logger().warning("Failed to parse config file %s: %s", path, e)
        return ConfigFile(path=path, error=f"Failed to parse config file: {e}")
    except OSError as e:
        _get_logger().warning("Failed to read config file %s: %s", path, e)
        return ConfigFile(path=path, error=f"Failed to read config file: {e}")


# The config file for the load in progress; settings sources are built by
# pydantic-settings and cannot take arguments.
_active_config: ContextVar[ConfigFile | None] = ContextVar("plugin_ci_config", default=None)


class TomlConfigSource(PydanticBaseSettingsSource):
    """Settings source backed by an already-parsed ``ConfigFile``."""

    def __init__(self, settings_cls: type[BaseSettings], config: ConfigFile | None):
        super().__init__(settings_cls)
        self._data = config.data if config else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


class PluginCISettings(BaseSettings):
    """Validated settings for one pipeline run."""

    model_config = {
        "env_prefix": "PLUGIN_CI_",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }

    ci: CIConfig = CIConfig()
    build: BuildConfig = BuildConfig()
    packaging: PackagingConfig = PackagingConfig()
    testing: TestingConfig = TestingConfig()
    store: StoreConfig = StoreConfig()
    logging: LoggingConfig = LoggingConfig()

    _config_file: str | None = None
    _config_error: str | None = None

    @model_validator(mode="before")
    @classmethod
    def apply_base_url_alias(cls, data: Any) -> Any:
        """``BASE_URL`` sets ``testing.base_url`` unless it is set explicitly."""
        base_url = os.environ.get(LEGACY_BASE_URL_VAR)
        if base_url and isinstance(data, dict):
            testing = data.get("testing")
            if testing is None:
                data["testing"] = {"base_url": base_url}
            elif isinstance(testing, dict):
                testing.setdefault("base_url", base_url)
        return data

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlConfigSource(settings_cls, _active_config.get()),
        )

    def ci_root(self, cwd: Path | None = None) -> Path:
        """The CI root, ``ci.root`` relative to ``cwd`` (default ``<cwd>/ci``)."""
        base = cwd or Path.cwd()
        return (base / Path(self.ci.root or "ci").expanduser()).resolve()

    def to_dict(self) -> dict[str, Any]:
        """Every section as plain data, plus the config file and any read error."""
        result: dict[str, Any] = {
            name: getattr(self, name).model_dump()
            for name in ("ci", "build", "packaging", "testing", "store", "logging")
        }
        if self._config_file:
            result["_config_file"] = self._config_file
        if self._config_error:
            result["_config_error"] = self._config_error
        return result


def load_settings(
    config_path: Path | None = None,
    start_dir: str | None = None,
    **overrides: Any,
) -> PluginCISettings:
    """
    Load settings for a project.

    Args:
        config_path: Explicit config file (skips the directory walk)
        start_dir: Directory to start the config search from
        overrides: Section values that win over every other source
    """
    config = read_config_file(config_path, start_dir)
    token = _active_config.set(config)
    try:
        settings = PluginCISettings(**overrides)
    finally:
        _active_config.reset(token)

    if config.path is not None and config.error is None:
        settings._config_file = str(config.path)
    settings._config_error = config.error
    return settings
