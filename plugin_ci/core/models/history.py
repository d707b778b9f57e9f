"""
History and index models.

``PluginHistory`` is the append-only per-branch ledger of builds.
``PluginIndex`` holds last-write-wins pointers from each branch, and from
each pull request, to its most recent build reference.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import Field

from .base import ImmutableModel
from .report import BuildReport

PR_INDEX_KEY = "PR"


class HistoryEntry(ImmutableModel):
    """One recorded build, derived from its report."""

    ref: Annotated[str, Field(min_length=1)]
    time: int | None = None
    version: str
    hash: str | None = None
    package_size: Annotated[int, Field(ge=0)]
    coverage: float | None = None
    passed: Annotated[int, Field(ge=0)] = 0
    failed: Annotated[int, Field(ge=0)] = 0
    elapsed: Annotated[int, Field(ge=0)] | None = None

    @classmethod
    def from_report(cls, ref: str, report: BuildReport) -> HistoryEntry:
        build = report.plugin.build
        line_coverage = [c.line_coverage() for c in report.coverage]
        line_coverage = [c for c in line_coverage if c is not None]
        return cls(
            ref=ref,
            time=build.time if build else None,
            version=report.plugin.version,
            hash=build.hash if build else None,
            package_size=report.packages.plugin.size,
            coverage=line_coverage[0] if line_coverage else None,
            passed=sum(t.passed for t in report.tests),
            failed=sum(t.failed for t in report.tests),
            elapsed=report.workflow.elapsed,
        )


class PluginHistory(ImmutableModel):
    """Ordered-by-append ledger of builds for one branch."""

    entries: list[HistoryEntry] = Field(default_factory=list)
    last: HistoryEntry | None = None

    def append(self, entry: HistoryEntry) -> PluginHistory:
        """Return a new history with ``entry`` appended."""
        return PluginHistory(entries=[*self.entries, entry], last=entry)

    def refs(self) -> list[str]:
        return [e.ref for e in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


class IndexEntry(ImmutableModel):
    """Pointer to the most recent build of a branch or pull request."""

    time: int | None = None
    version: str
    last: Annotated[str, Field(min_length=1)]


@dataclass(frozen=True)
class IndexScope:
    """Either a branch name or a pull request number."""

    branch: str | None = None
    pull_request: int | None = None

    def __post_init__(self) -> None:
        if (self.branch is None) == (self.pull_request is None):
            raise ValueError("IndexScope needs exactly one of branch or pull_request")
        if self.branch == PR_INDEX_KEY:
            raise ValueError(f"Branch name {PR_INDEX_KEY!r} is reserved for the PR index")

    @classmethod
    def for_branch(cls, branch: str) -> IndexScope:
        return cls(branch=branch)

    @classmethod
    def for_pull_request(cls, number: int) -> IndexScope:
        return cls(pull_request=number)

    @property
    def is_pull_request(self) -> bool:
        return self.pull_request is not None


class PluginIndex(ImmutableModel):
    """Latest-build pointers for every branch and pull request of a plugin."""

    branches: dict[str, IndexEntry] = Field(default_factory=dict)
    pull_requests: dict[str, IndexEntry] = Field(default_factory=dict)

    @classmethod
    def from_json_dict(cls, data: dict[str, Any]) -> PluginIndex:
        """Parse the stored ``{branch: entry, "PR": {pr: entry}}`` layout."""
        if not isinstance(data, dict):
            raise ValueError(f"index must be an object, got {type(data).__name__}")
        branches = {k: v for k, v in data.items() if k != PR_INDEX_KEY}
        pull_requests = data.get(PR_INDEX_KEY, {})
        return cls.model_validate({"branches": branches, "pull_requests": pull_requests})

    def to_json_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            name: entry.model_dump(mode="json") for name, entry in self.branches.items()
        }
        if self.pull_requests:
            result[PR_INDEX_KEY] = {
                pr: entry.model_dump(mode="json") for pr, entry in self.pull_requests.items()
            }
        return result

    def with_entry(self, scope: IndexScope, entry: IndexEntry) -> PluginIndex:
        """Return a new index where ``scope`` points at ``entry`` (full replace)."""
        if scope.is_pull_request:
            prs = {**self.pull_requests, str(scope.pull_request): entry}
            return PluginIndex(branches=dict(self.branches), pull_requests=prs)
        branches = {**self.branches, str(scope.branch): entry}
        return PluginIndex(branches=branches, pull_requests=dict(self.pull_requests))

    def get(self, scope: IndexScope) -> IndexEntry | None:
        if scope.is_pull_request:
            return self.pull_requests.get(str(scope.pull_request))
        return self.branches.get(str(scope.branch))
