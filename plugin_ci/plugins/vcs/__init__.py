"""Version control providers."""

from .git import GitVCSProvider

__all__ = ["GitVCSProvider"]
