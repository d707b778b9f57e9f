"""
Shared pytest fixtures for plugin-ci tests.

- clean_env: strips CI provider and plugin-ci variables from the environment
- plugin_project: a plugin project directory with a built dist/
- settings / stage_ctx: settings and stage context rooted in tmp_path
- fake_instance / fake_runner: stand-ins for the deployed instance and e2e runner
"""

import json
from pathlib import Path
from typing import Any

import pytest

from plugin_ci.core.bootstrap import reset
from plugin_ci.core.interfaces.testing import RunnerOutcome
from plugin_ci.core.models.config import LoggingConfig
from plugin_ci.core.settings import load_settings
from plugin_ci.services.ci_env import CIEnvironment
from plugin_ci.services.logging import NullLogger
from plugin_ci.services.stages import StageContext

CI_VARIABLES = (
    "CIRCLE_JOB",
    "CIRCLE_BUILD_NUM",
    "CIRCLE_PULL_REQUEST",
    "CIRCLE_WORKFLOW_ID",
    "CIRCLE_BRANCH",
    "CIRCLE_SHA1",
    "CIRCLE_REPOSITORY_URL",
    "DRONE_STEP_NAME",
    "DRONE_BUILD_NUMBER",
    "DRONE_PULL_REQUEST",
    "DRONE_BRANCH",
    "DRONE_COMMIT_SHA",
    "DRONE_REPO_LINK",
    "BASE_URL",
)

MANIFEST = {
    "id": "acme-clock-panel",
    "type": "panel",
    "name": "Clock",
    "info": {
        "version": "1.2.0",
        "updated": "2024-01-01",
        "author": {"name": "Acme"},
    },
    "dependencies": {"grafanaVersion": "7.x"},
}


def write_manifest(folder: Path, manifest: dict[str, Any] | None = None) -> Path:
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / "plugin.json"
    path.write_text(json.dumps(manifest or MANIFEST, indent=2))
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove CI and plugin-ci variables so tests see a plain local run."""
    import os

    for name in CI_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    for name in list(os.environ):
        if name.startswith("PLUGIN_CI_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PLUGIN_CI_LOGGING__FILE", "false")


@pytest.fixture(autouse=True)
def reset_container():
    """Give every test a fresh service container."""
    reset()
    yield
    reset()


@pytest.fixture
def manifest_data() -> dict[str, Any]:
    return json.loads(json.dumps(MANIFEST))


@pytest.fixture
def plugin_project(tmp_path: Path) -> Path:
    """A plugin project whose frontend build already produced dist/."""
    project = tmp_path / "project"
    dist = project / "dist"
    write_manifest(dist)
    (dist / "module.js").write_text("define([], function () { return {}; });\n" * 20)
    (dist / "img").mkdir()
    (dist / "img" / "logo.svg").write_text("<svg></svg>\n")
    return project


@pytest.fixture
def settings(tmp_path: Path):
    return load_settings(start_dir=str(tmp_path), logging=LoggingConfig(file=False))


@pytest.fixture
def ci_env() -> CIEnvironment:
    return CIEnvironment(
        job_name=None,
        build_number=42,
        branch="main",
        commit="abc123",
        repo_url="https://github.com/acme/clock-panel",
        workflow_id="wf-1",
    )


@pytest.fixture
def stage_ctx(plugin_project: Path, settings, ci_env: CIEnvironment) -> StageContext:
    return StageContext(
        settings=settings,
        project_dir=plugin_project,
        env=ci_env,
        logger=NullLogger(),
    )


class FakeInstance:
    """Deployed instance reporting a fixed plugin build hash."""

    def __init__(self, build_hash: str | None = "abc123", error: Exception | None = None):
        self.build_hash = build_hash
        self.error = error
        self.requested: list[str] = []

    def get_build_info(self) -> dict[str, Any]:
        if self.error:
            raise self.error
        return {"version": "7.0.0", "commit": "deadbeef"}

    def get_plugin_settings(self, plugin_id: str) -> dict[str, Any]:
        self.requested.append(plugin_id)
        info: dict[str, Any] = {"version": "1.2.0"}
        if self.build_hash is not None:
            info["build"] = {"hash": self.build_hash}
        return {"id": plugin_id, "info": info}


class FakeRunner:
    """End-to-end runner that writes a screenshot and reports fixed counts."""

    def __init__(self, passed: int = 3, failed: int = 0, screenshot: str | None = "panel.png"):
        self.passed = passed
        self.failed = failed
        self.screenshot = screenshot
        self.calls = 0

    def run(self, output_dir: Path) -> RunnerOutcome:
        self.calls += 1
        if self.screenshot:
            (output_dir / self.screenshot).write_bytes(b"\x89PNG\r\n")
        return RunnerOutcome(passed=self.passed, failed=self.failed)


@pytest.fixture
def fake_instance() -> FakeInstance:
    return FakeInstance()


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def instance_factory():
    return FakeInstance


@pytest.fixture
def runner_factory():
    return FakeRunner
