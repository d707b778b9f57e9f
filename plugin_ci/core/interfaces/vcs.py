"""
Version control provider interface.

The package stage stamps commit, branch and repository into plugin.json.
CI providers usually export all three; a local run falls back to asking
the working copy.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class VCSInfo:
    """Commit, branch and origin of a working copy; unknown parts are None."""

    commit: str | None = None
    branch: str | None = None
    remote_url: str | None = None


class IVCSProvider(ABC):
    """Reads build metadata from a working copy."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry name, e.g. ``git``."""

    @abstractmethod
    def get_repo_root(self, path: str | None = None) -> str | None:
        """Top of the working copy containing ``path`` (default cwd), or None."""

    @abstractmethod
    def get_info(self, repo_root: str) -> VCSInfo:
        """Commit, branch and origin URL; a detached HEAD has no branch."""
