"""
Logger implementation for pipeline diagnostics.

Wraps stdlib logging. Records go to stderr when console output is enabled
and to ``<ci>/logs/plugin-ci.log`` so the CI provider can keep the log as
a build artifact. Every record carries the CI job name, because several
jobs of one workflow usually share a log collector.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, ClassVar

from ..core.interfaces.logger import ILogger

LOG_FILENAME = "plugin-ci.log"


class PluginCILogger(ILogger):
    """Stdlib-backed logger with optional stderr and rotating file output."""

    MAX_FILE_SIZE = 5 * 1024 * 1024
    BACKUP_COUNT = 2
    FORMAT = "%(asctime)s [%(levelname)s] %(job)s: %(message)s"

    LEVEL_MAP: ClassVar[dict[str, int]] = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warning": logging.WARNING,
        "error": logging.ERROR,
    }

    def __init__(
        self,
        name: str = "plugin_ci",
        level: str = "warning",
        console_enabled: bool = False,
        file_enabled: bool = True,
        log_dir: Path | None = None,
        job: str | None = None,
    ) -> None:
        """
        Args:
            name: stdlib logger name
            level: debug, info, warning or error
            console_enabled: Write to stderr
            file_enabled: Write to ``log_dir/plugin-ci.log``
            log_dir: Log directory (default ``./ci/logs``)
            job: CI job name shown on every record
        """
        base = logging.getLogger(name)
        base.setLevel(self.LEVEL_MAP.get(level.lower(), logging.WARNING))
        base.propagate = False
        for handler in list(base.handlers):
            base.removeHandler(handler)
            handler.close()

        formatter = logging.Formatter(self.FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        self.log_file: Path | None = None

        if console_enabled:
            console = logging.StreamHandler(sys.stderr)
            console.setFormatter(formatter)
            base.addHandler(console)

        file_error: OSError | None = None
        if file_enabled:
            path = (log_dir or Path("ci") / "logs") / LOG_FILENAME
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                handler = RotatingFileHandler(
                    path, maxBytes=self.MAX_FILE_SIZE, backupCount=self.BACKUP_COUNT
                )
            except OSError as e:
                file_error = e
            else:
                handler.setFormatter(formatter)
                base.addHandler(handler)
                self.log_file = path

        self._logger = logging.LoggerAdapter(base, {"job": job or "local"})
        if file_error is not None:
            self._logger.warning("File logging disabled: %s", file_error)

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.error(message, *args, **kwargs)


class NullLogger(ILogger):
    """Discards everything; used when nothing has been bootstrapped."""

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass


def get_logger() -> ILogger:
    """Resolve the configured logger, or a NullLogger when none is registered."""
    from ..core.container import resolve_or_default

    return resolve_or_default(ILogger, NullLogger)  # type: ignore[type-abstract]
