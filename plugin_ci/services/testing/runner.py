"""
Subprocess-backed end-to-end runner.

The browser suite itself is an external command. It receives the output
folder in ``E2E_OUTPUT_DIR`` and the instance URL in ``E2E_BASE_URL`` and
may write ``summary.json`` (``{"passed": n, "failed": m}``) there.
"""

from __future__ import annotations

import json
import os
import subprocess
from pathlib import Path

from ...core.exceptions import EndToEndRunnerError
from ...core.interfaces.logger import ILogger
from ...core.interfaces.testing import RunnerOutcome
from ..logging import get_logger

SUMMARY_FILENAME = "summary.json"


class SubprocessEndToEndRunner:
    """Runs the configured end-to-end command and reads its summary."""

    def __init__(
        self,
        command: list[str] | None,
        base_url: str,
        cwd: Path | None = None,
        logger: ILogger | None = None,
    ):
        self.command = command
        self.base_url = base_url
        self.cwd = cwd
        self._logger = logger or get_logger()

    def run(self, output_dir: Path) -> RunnerOutcome:
        if not self.command:
            raise EndToEndRunnerError("No end-to-end test command configured")

        env = {
            **os.environ,
            "E2E_OUTPUT_DIR": str(output_dir),
            "E2E_BASE_URL": self.base_url,
        }
        self._logger.info("Running end-to-end suite: %s", " ".join(self.command))
        try:
            proc = subprocess.run(self.command, cwd=self.cwd, env=env, check=False)
        except OSError as e:
            raise EndToEndRunnerError(
                "Could not start end-to-end runner", command=self.command, cause=e
            ) from e

        outcome = self._read_summary(output_dir)
        if outcome is not None:
            return outcome
        if proc.returncode != 0:
            raise EndToEndRunnerError(
                "End-to-end runner failed without a summary",
                command=self.command,
                returncode=proc.returncode,
            )
        return RunnerOutcome()

    def _read_summary(self, output_dir: Path) -> RunnerOutcome | None:
        path = output_dir / SUMMARY_FILENAME
        if not path.is_file():
            return None
        try:
            data = json.loads(path.read_text())
            return RunnerOutcome(passed=int(data.get("passed", 0)), failed=int(data.get("failed", 0)))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            raise EndToEndRunnerError(
                "Unreadable end-to-end summary", context={"path": str(path)}, cause=e
            ) from e
