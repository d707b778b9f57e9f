"""
Build report models.

A ``BuildReport`` combines the stamped manifest, package descriptors,
workflow timing, coverage and end-to-end test results of one build. It is
immutable once written to the store.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar

from pydantic import ConfigDict, Field

from .base import ImmutableModel, PluginCIBaseModel
from .job import JobStats
from .manifest import PluginManifest
from .package import PluginPackages


class CapturedError(ImmutableModel):
    """An error recorded in-band instead of being raised."""

    type: Annotated[str, Field(min_length=1)]
    message: str
    context: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: BaseException) -> CapturedError:
        context = getattr(exc, "context", None)
        return cls(
            type=type(exc).__name__,
            message=getattr(exc, "message", None) or str(exc),
            context={k: _jsonable(v) for k, v in (context or {}).items()},
        )


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class TestResultsInfo(PluginCIBaseModel):
    """End-to-end results of one test job, written as ``results.json``."""

    __test__: ClassVar[bool] = False

    job: Annotated[str, Field(min_length=1)]
    passed: Annotated[int, Field(ge=0)] = 0
    failed: Annotated[int, Field(ge=0)] = 0
    screenshots: list[str] = Field(default_factory=list)
    deployment: dict[str, Any] | None = None
    error: CapturedError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.failed == 0


class CoverageMetric(ImmutableModel):
    """One metric from a coverage summary (lines, statements, ...)."""

    model_config = ConfigDict(frozen=True, strict=False, extra="ignore")

    total: int = 0
    covered: int = 0
    skipped: int = 0
    pct: float | str = 0


class CoverageDetails(ImmutableModel):
    """The ``total`` block of one job's coverage summary."""

    job: Annotated[str, Field(min_length=1)]
    summary: dict[str, CoverageMetric] = Field(default_factory=dict)

    def line_coverage(self) -> float | None:
        lines = self.summary.get("lines")
        if lines is None or isinstance(lines.pct, str):
            return None
        return float(lines.pct)


class WorkflowInfo(ImmutableModel):
    """CI workflow identity plus the stats of every job that ran."""

    workflow_id: str | None = None
    build_number: int | None = None
    job_name: Annotated[str, Field(min_length=1)]
    start_time: Annotated[int, Field(ge=0)]
    end_time: Annotated[int, Field(ge=0)]
    elapsed: Annotated[int, Field(ge=0)]
    jobs: list[JobStats] = Field(default_factory=list)


class BuildReport(ImmutableModel):
    """Everything known about one packaged build."""

    plugin: PluginManifest
    packages: PluginPackages
    workflow: WorkflowInfo
    coverage: list[CoverageDetails] = Field(default_factory=list)
    tests: list[TestResultsInfo] = Field(default_factory=list)
    pull_request: Annotated[int, Field(gt=0)] | None = None

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
