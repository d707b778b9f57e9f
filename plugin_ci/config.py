"""Configuration loading helpers for plugin-ci."""

from pathlib import Path
from typing import Any

from .core.settings import find_config_file, load_settings


def _get_nested(d: dict, key: str, default=None):
    """Get a nested key like 'testing.base_url'."""
    parts = key.split(".")
    for part in parts:
        if isinstance(d, dict) and part in d:
            d = d[part]
        else:
            return default
    return d


def load_config(config_path: Path | None = None, start_dir: str | None = None) -> dict:
    """
    Load configuration from file and environment.

    Args:
        config_path: Explicit path to config file
        start_dir: Directory to start searching from (if config_path not given)

    Returns:
        Configuration dict with defaults applied
    """
    settings = load_settings(config_path=config_path, start_dir=start_dir)
    return settings.to_dict()


def config_get(key: str, start_dir: str | None = None, config_path: Path | None = None) -> Any:
    """
    Get a single config value by dot-notation key.

    Returns None if the key is unknown.
    """
    config = load_config(config_path=config_path, start_dir=start_dir)
    return _get_nested(config, key)


def config_source(start_dir: str | None = None) -> Path | None:
    """Return the config file that would be loaded, if any."""
    return find_config_file(start_dir)
