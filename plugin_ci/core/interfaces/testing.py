"""
End-to-end test runner and deployed-instance interfaces.

The browser automation that actually exercises a deployed plugin is an
external collaborator; the pipeline only needs pass/fail counts from it
and the deployed plugin's settings to confirm the right build is live.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable


@dataclass
class RunnerOutcome:
    """Pass/fail counts reported by an end-to-end runner."""

    passed: int = 0
    failed: int = 0


@runtime_checkable
class IEndToEndRunner(Protocol):
    """Protocol for end-to-end test runners."""

    def run(self, output_dir: Path) -> RunnerOutcome:
        """
        Run the end-to-end suite, writing screenshots and logs to output_dir.

        Args:
            output_dir: Folder the runner may write artifacts into

        Returns:
            RunnerOutcome with pass/fail counts
        """
        ...


@runtime_checkable
class IDeployedInstance(Protocol):
    """Protocol for querying a running instance that has the plugin deployed."""

    def get_build_info(self) -> dict[str, Any]:
        """Return the instance's own build information."""
        ...

    def get_plugin_settings(self, plugin_id: str) -> dict[str, Any]:
        """Return the deployed plugin's settings, including its manifest info."""
        ...
