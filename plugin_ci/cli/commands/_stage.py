"""Shared handling of stage results for CLI commands."""

from __future__ import annotations

import click

from ...services.stages import StageResult


def finish(result: StageResult) -> None:
    """Print the stage outcome and exit non-zero if it aborted."""
    if result.success:
        job = result.job.job_id if result.job else "-"
        click.echo(f"{result.stage}: ok (job {job})")
        return

    click.echo(f"Error: {result.stage} failed: {result.error}", err=True)
    raise SystemExit(result.exit_code)
