"""
The fixed pipeline stages.

Each stage owns one job folder and returns a StageResult. Stats are
recorded once per invocation, whether the stage succeeds or aborts.
"""

from .base import StageContext, StageResult, run_command, run_stage
from .build import run_build_stage
from .docs import run_docs_stage
from .e2e import run_test_stage
from .package import run_package_stage
from .report import run_report_stage

__all__ = [
    "StageContext",
    "StageResult",
    "run_build_stage",
    "run_command",
    "run_docs_stage",
    "run_package_stage",
    "run_report_stage",
    "run_stage",
    "run_test_stage",
]
