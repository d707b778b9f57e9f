"""
CI provider environment.

Reads job, build, workflow and pull request identity from the CI
provider's environment variables (CircleCI or Drone), falling back to
git for source metadata on local runs.
"""

from __future__ import annotations

import os
import time
from collections.abc import Mapping
from dataclasses import dataclass

from ..core.interfaces.vcs import IVCSProvider
from ..core.models.manifest import PluginBuildInfo


def now_ms() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def _parse_int(value: str | None) -> int | None:
    if not value:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def parse_pull_request_number(url: str | None) -> int | None:
    """Extract the PR number from a pull request URL (its last path segment)."""
    if not url:
        return None
    return _parse_int(url.rstrip("/").rsplit("/", 1)[-1])


@dataclass(frozen=True)
class CIEnvironment:
    """Identity of the current CI job, as reported by the CI provider."""

    job_name: str | None = None
    build_number: int | None = None
    pull_request: int | None = None
    workflow_id: str | None = None
    branch: str | None = None
    commit: str | None = None
    repo_url: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CIEnvironment:
        env = os.environ if environ is None else environ
        return cls(
            job_name=env.get("DRONE_STEP_NAME") or env.get("CIRCLE_JOB") or None,
            build_number=_parse_int(env.get("CIRCLE_BUILD_NUM") or env.get("DRONE_BUILD_NUMBER")),
            pull_request=(
                parse_pull_request_number(env.get("CIRCLE_PULL_REQUEST"))
                or _parse_int(env.get("DRONE_PULL_REQUEST"))
            ),
            workflow_id=env.get("CIRCLE_WORKFLOW_ID") or None,
            branch=env.get("CIRCLE_BRANCH") or env.get("DRONE_BRANCH") or None,
            commit=env.get("CIRCLE_SHA1") or env.get("DRONE_COMMIT_SHA") or None,
            repo_url=env.get("CIRCLE_REPOSITORY_URL") or env.get("DRONE_REPO_LINK") or None,
        )

    @property
    def is_pull_request(self) -> bool:
        return self.pull_request is not None


def get_plugin_build_info(
    env: CIEnvironment,
    vcs: IVCSProvider | None = None,
    project_dir: str | None = None,
    time_ms: int | None = None,
) -> PluginBuildInfo:
    """
    Build metadata to stamp into the plugin manifest.

    CI-provided values win; commit and branch fall back to the VCS provider
    when the CI provider does not supply them.
    """
    commit = env.commit
    branch = env.branch
    repo = env.repo_url
    if vcs is not None and (commit is None or branch is None):
        root = vcs.get_repo_root(project_dir)
        if root:
            info = vcs.get_info(root)
            commit = commit or info.commit
            branch = branch or info.branch
            repo = repo or info.remote_url

    return PluginBuildInfo(
        time=time_ms if time_ms is not None else now_ms(),
        repo=repo,
        branch=branch,
        hash=commit,
        build=env.build_number,
        pr=env.pull_request,
    )
