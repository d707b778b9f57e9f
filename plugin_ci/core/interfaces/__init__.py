"""
Interface definitions for plugin-ci services.

Each interface describes a narrow contract to an external collaborator
(object store, VCS, end-to-end runner, deployed instance) or to an
internal service (logging).
"""

from .logger import ILogger
from .store import IObjectStore
from .testing import IDeployedInstance, IEndToEndRunner, RunnerOutcome
from .vcs import IVCSProvider, VCSInfo

__all__ = [
    "IDeployedInstance",
    "IEndToEndRunner",
    "ILogger",
    "IObjectStore",
    "IVCSProvider",
    "RunnerOutcome",
    "VCSInfo",
]
