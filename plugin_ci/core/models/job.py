"""
Job statistics models.

Each stage invocation writes one ``JobStats`` record into its job folder.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

from .base import ImmutableModel

JobStatus = Literal["success", "failed"]


class JobStats(ImmutableModel):
    """Timing and exit status for one stage invocation (times in ms)."""

    job: Annotated[str, Field(min_length=1)]
    stage: str | None = None
    start_time: Annotated[int, Field(ge=0)]
    end_time: Annotated[int, Field(ge=0)]
    elapsed: Annotated[int, Field(ge=0)]
    status: JobStatus = "success"
    error: str | None = None

    @classmethod
    def create(
        cls,
        job: str,
        start_time: int,
        end_time: int,
        *,
        stage: str | None = None,
        error: str | None = None,
    ) -> JobStats:
        """Build stats, deriving ``elapsed`` and ``status`` from the inputs."""
        return cls(
            job=job,
            stage=stage,
            start_time=start_time,
            end_time=end_time,
            elapsed=max(end_time - start_time, 0),
            status="failed" if error else "success",
            error=error,
        )
