"""
Click command implementations for plugin-ci CLI.

Each module corresponds to a plugin-ci command (e.g., package.py
implements 'plugin-ci package').
"""

from .build import build
from .config import config
from .docs import docs
from .package import package
from .report import report
from .test import test

COMMANDS = [
    build,
    config,
    docs,
    package,
    report,
    test,
]

__all__ = [
    "COMMANDS",
    "build",
    "config",
    "docs",
    "package",
    "report",
    "test",
]
