"""
Logger interface for pipeline diagnostics.

Stage progress and warnings that help debug a CI run go through ILogger.
What the user must see (stage outcome, package names, errors) is printed
by the CLI with click.echo.
"""

from abc import ABC, abstractmethod
from typing import Any


class ILogger(ABC):
    """%-style diagnostic logger; arguments are formatted lazily."""

    @abstractmethod
    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass
