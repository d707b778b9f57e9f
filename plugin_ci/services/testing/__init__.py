"""End-to-end testing against a deployed instance."""

from .aggregator import IMAGE_EXTENSIONS, TestResultAggregator, find_images
from .client import DeployedInstanceClient
from .runner import SubprocessEndToEndRunner

__all__ = [
    "IMAGE_EXTENSIONS",
    "DeployedInstanceClient",
    "SubprocessEndToEndRunner",
    "TestResultAggregator",
    "find_images",
]
