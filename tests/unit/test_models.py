"""
Unit tests for plugin-ci domain models.

Tests verify:
- Manifest stamping keeps unknown plugin.json fields
- Job stats derive elapsed time and status
- Index scope validation and the stored index layout
- History entries are derived from reports and appended in order
"""

import pytest
from pydantic import ValidationError

from plugin_ci.core.models import (
    PR_INDEX_KEY,
    BuildReport,
    CapturedError,
    CoverageDetails,
    HistoryEntry,
    IndexEntry,
    IndexScope,
    JobStats,
    PackageDescriptor,
    PluginBuildInfo,
    PluginHistory,
    PluginIndex,
    PluginManifest,
    PluginPackages,
    TestResultsInfo,
    WorkflowInfo,
)
from plugin_ci.core.exceptions import VersionMismatchError


def _report(manifest_data, pull_request=None, passed=2, failed=1) -> BuildReport:
    manifest = PluginManifest.model_validate(manifest_data).with_build_info(
        PluginBuildInfo(time=1000, branch="main", hash="abc123", build=42)
    )
    return BuildReport(
        plugin=manifest,
        packages=PluginPackages(
            plugin=PackageDescriptor(name="acme-clock-panel-1.2.0.zip", size=2048, checksum="d41d8")
        ),
        workflow=WorkflowInfo(job_name="report", start_time=1000, end_time=5000, elapsed=4000),
        coverage=[
            CoverageDetails.model_validate(
                {"job": "build_plugin", "summary": {"lines": {"total": 10, "covered": 8, "pct": 80}}}
            )
        ],
        tests=[TestResultsInfo(job="test", passed=passed, failed=failed)],
        pull_request=pull_request,
    )


class TestPluginManifest:
    """Tests for PluginManifest."""

    def test_with_build_info_keeps_unknown_fields(self, manifest_data):
        """Stamping build info does not drop fields the model does not declare."""
        manifest = PluginManifest.model_validate(manifest_data)
        stamped = manifest.with_build_info(PluginBuildInfo(time=1, hash="abc"))

        data = stamped.to_json_dict()
        assert data["dependencies"] == {"grafanaVersion": "7.x"}
        assert data["info"]["author"] == {"name": "Acme"}
        assert data["info"]["build"] == {"time": 1, "hash": "abc"}

    def test_with_build_info_returns_new_manifest(self, manifest_data):
        """The original manifest is unchanged."""
        manifest = PluginManifest.model_validate(manifest_data)
        stamped = manifest.with_build_info(PluginBuildInfo(hash="abc"))
        assert manifest.build is None
        assert stamped.build.hash == "abc"

    def test_package_basename(self, manifest_data):
        manifest = PluginManifest.model_validate(manifest_data)
        assert manifest.package_basename() == "acme-clock-panel-1.2.0"

    def test_rejects_unknown_type(self, manifest_data):
        manifest_data["type"] = "widget"
        with pytest.raises(ValidationError):
            PluginManifest.model_validate(manifest_data)


class TestJobStats:
    """Tests for JobStats.create."""

    def test_success(self):
        stats = JobStats.create("build_plugin", 1000, 4500, stage="build")
        assert stats.elapsed == 3500
        assert stats.status == "success"
        assert stats.error is None

    def test_failure_records_error(self):
        stats = JobStats.create("package", 1000, 1200, error="Merge collision")
        assert stats.status == "failed"
        assert stats.error == "Merge collision"

    def test_clock_skew_never_negative(self):
        assert JobStats.create("x", 2000, 1000).elapsed == 0


class TestCapturedError:
    """Tests for CapturedError.from_exception."""

    def test_keeps_context(self):
        err = VersionMismatchError("Wrong build", expected="abc", actual="def")
        captured = CapturedError.from_exception(err)
        assert captured.type == "VersionMismatchError"
        assert captured.message == "Wrong build"
        assert captured.context == {"expected": "abc", "actual": "def"}

    def test_plain_exception(self):
        captured = CapturedError.from_exception(RuntimeError("boom"))
        assert captured.type == "RuntimeError"
        assert captured.message == "boom"
        assert captured.context == {}


class TestIndexScope:
    """Tests for IndexScope validation."""

    def test_needs_exactly_one(self):
        with pytest.raises(ValueError):
            IndexScope()
        with pytest.raises(ValueError):
            IndexScope(branch="main", pull_request=7)

    def test_reserved_branch_name(self):
        with pytest.raises(ValueError, match="reserved"):
            IndexScope.for_branch(PR_INDEX_KEY)

    def test_pull_request_scope(self):
        scope = IndexScope.for_pull_request(7)
        assert scope.is_pull_request
        assert scope.branch is None


class TestPluginIndex:
    """Tests for PluginIndex."""

    def test_branch_and_pr_layout(self):
        """Branches sit at the top level and PRs under the PR key."""
        index = (
            PluginIndex()
            .with_entry(IndexScope.for_branch("main"), IndexEntry(time=1, version="1.0", last="branch/main/42"))
            .with_entry(IndexScope.for_pull_request(7), IndexEntry(time=2, version="1.1", last="pr/7"))
        )
        assert index.to_json_dict() == {
            "main": {"time": 1, "version": "1.0", "last": "branch/main/42"},
            "PR": {"7": {"time": 2, "version": "1.1", "last": "pr/7"}},
        }

    def test_with_entry_replaces(self):
        scope = IndexScope.for_branch("main")
        index = PluginIndex().with_entry(scope, IndexEntry(version="1.0", last="branch/main/1"))
        index = index.with_entry(scope, IndexEntry(version="1.1", last="branch/main/2"))
        assert index.get(scope).last == "branch/main/2"
        assert len(index.branches) == 1

    def test_from_stored_layout(self):
        index = PluginIndex.from_json_dict(
            {
                "main": {"time": 5, "version": "2.0", "last": "branch/main/9"},
                "PR": {"3": {"time": 6, "version": "2.1", "last": "pr/3"}},
            }
        )
        assert index.get(IndexScope.for_branch("main")).version == "2.0"
        assert index.get(IndexScope.for_pull_request(3)).last == "pr/3"

    def test_from_non_object(self):
        with pytest.raises(ValueError):
            PluginIndex.from_json_dict(["main"])


class TestHistory:
    """Tests for HistoryEntry and PluginHistory."""

    def test_entry_from_report(self, manifest_data):
        entry = HistoryEntry.from_report("branch/main/42", _report(manifest_data))
        assert entry.ref == "branch/main/42"
        assert entry.version == "1.2.0"
        assert entry.hash == "abc123"
        assert entry.package_size == 2048
        assert entry.coverage == 80.0
        assert (entry.passed, entry.failed) == (2, 1)
        assert entry.elapsed == 4000

    def test_append_keeps_order(self, manifest_data):
        report = _report(manifest_data)
        history = PluginHistory()
        for n in (1, 2, 3):
            history = history.append(HistoryEntry.from_report(f"branch/main/{n}", report))
        assert history.refs() == ["branch/main/1", "branch/main/2", "branch/main/3"]
        assert history.last.ref == "branch/main/3"
        assert len(history) == 3


class TestBuildReport:
    """Tests for BuildReport serialization."""

    def test_pull_request_omitted_for_branch_runs(self, manifest_data):
        assert "pull_request" not in _report(manifest_data).to_json_dict()

    def test_pull_request_present_for_pr_runs(self, manifest_data):
        assert _report(manifest_data, pull_request=7).to_json_dict()["pull_request"] == 7

    def test_test_results_ok(self):
        assert TestResultsInfo(job="t", passed=1).ok
        assert not TestResultsInfo(job="t", failed=1).ok
