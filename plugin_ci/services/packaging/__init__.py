"""Dist tree merging, manifest stamping and archive assembly."""

from .assembler import PackageAssembler, run_in_directory, working_directory
from .manifest import MANIFEST_FILENAME, load_manifest, save_manifest
from .merge import ArtifactMerger, MergeResult

__all__ = [
    "MANIFEST_FILENAME",
    "ArtifactMerger",
    "MergeResult",
    "PackageAssembler",
    "load_manifest",
    "run_in_directory",
    "save_manifest",
    "working_directory",
]
