"""
Application bootstrap for plugin-ci.

Wires the logger from settings and registers the store and VCS backends.
Called once per CLI invocation, before the first stage runs.
"""

from pathlib import Path

from .container import ServiceContainer, get_container
from .interfaces.logger import ILogger
from .registry import discover_plugins
from .settings import PluginCISettings, load_settings

_initialized = False


def bootstrap(
    settings: PluginCISettings | None = None,
    start_dir: Path | None = None,
) -> ServiceContainer:
    """
    Initialize the global container once; later calls return it unchanged.

    Args:
        settings: Pre-loaded settings (loaded from start_dir if omitted)
        start_dir: Directory to search for configuration
    """
    global _initialized

    container = get_container()
    if _initialized:
        return container

    if settings is None:
        settings = load_settings(start_dir=str(start_dir) if start_dir else None)

    from ..services.ci_env import CIEnvironment
    from ..services.logging import PluginCILogger

    logging_config = settings.logging
    log_dir = settings.ci_root(Path(start_dir) if start_dir else None) / "logs"
    container.provide(
        ILogger,  # type: ignore[type-abstract]
        factory=lambda: PluginCILogger(
            level=logging_config.level,
            console_enabled=logging_config.console,
            file_enabled=logging_config.file,
            log_dir=log_dir,
            job=CIEnvironment.from_env().job_name,
        ),
    )
    discover_plugins()

    _initialized = True
    return container


def reset() -> None:
    """Forget the container and the initialized flag (for testing)."""
    global _initialized
    ServiceContainer.reset()
    _initialized = False


def is_initialized() -> bool:
    return _initialized
