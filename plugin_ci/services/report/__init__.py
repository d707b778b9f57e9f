"""Build report assembly."""

from .aggregate import (
    COVERAGE_SUMMARY_PATH,
    RESULTS_FILENAME,
    aggregate_coverage_info,
    aggregate_test_info,
    aggregate_workflow_info,
)
from .builder import REPORT_FILENAME, ReportBuilder, load_packages, write_report

__all__ = [
    "COVERAGE_SUMMARY_PATH",
    "REPORT_FILENAME",
    "RESULTS_FILENAME",
    "ReportBuilder",
    "aggregate_coverage_info",
    "aggregate_test_info",
    "aggregate_workflow_info",
    "load_packages",
    "write_report",
]
