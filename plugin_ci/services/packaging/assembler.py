"""
Package assembly.

Stamps build metadata into the canonical manifest, zips the distribution
tree into ``<id>-<version>.zip`` and describes the archive with its size,
checksum and a content hash of the tree it was built from.
"""

from __future__ import annotations

import os
import zipfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TypeVar

from ...core.exceptions import PackageTooSmallError, PackagingError
from ...core.interfaces.logger import ILogger
from ...core.models.config import PackagingConfig
from ...core.models.manifest import PluginBuildInfo, PluginManifest
from ...core.models.package import PackageDescriptor
from ...hashing import HashAlgorithmRegistry
from ..logging import get_logger
from .manifest import MANIFEST_FILENAME, load_manifest, save_manifest

T = TypeVar("T")


@contextmanager
def working_directory(path: Path) -> Iterator[Path]:
    """
    Run the enclosed block with ``path`` as the process working directory.

    The previous working directory is restored on every exit path. The
    working directory is process-wide, so this must not be used from
    concurrent threads.
    """
    previous = os.getcwd()
    os.chdir(path)
    try:
        yield path
    finally:
        os.chdir(previous)


def run_in_directory(target: Path, work: Callable[[], T]) -> T:
    """Call ``work()`` inside ``target`` and return its result."""
    with working_directory(target):
        return work()


def _zip_cwd(dest: Path) -> None:
    """Zip the current directory's files into ``dest`` using relative names."""
    with zipfile.ZipFile(dest, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for path in sorted(Path(".").rglob("*")):
            if path.is_file() and path.resolve() != dest:
                archive.write(path, arcname=path.as_posix())


class PackageAssembler:
    """Builds and validates the distributable archives."""

    def __init__(
        self,
        config: PackagingConfig | None = None,
        hashes: HashAlgorithmRegistry | None = None,
        logger: ILogger | None = None,
    ):
        self.config = config or PackagingConfig()
        self.hashes = hashes or HashAlgorithmRegistry()
        self._logger = logger or get_logger()

    def stamp_manifest(self, dist_dir: Path, build_info: PluginBuildInfo) -> PluginManifest:
        """
        Set ``info.build`` in ``<dist_dir>/plugin.json`` and write it back.

        Raises:
            ManifestError: If the manifest is missing or malformed
        """
        manifest_path = dist_dir / MANIFEST_FILENAME
        manifest = load_manifest(manifest_path).with_build_info(build_info)
        save_manifest(manifest_path, manifest)
        self._logger.info("Stamped %s with build %s", manifest_path, build_info.hash)
        return manifest

    def build_archive(self, source_dir: Path, dest_path: Path) -> PackageDescriptor:
        """
        Zip ``source_dir`` into ``dest_path`` and describe the result.

        Archive entry names are relative to ``source_dir``: the archive is
        written with the working directory scoped to it.

        Raises:
            PackagingError: If source_dir does not exist
            PackageTooSmallError: If the archive is not larger than the minimum size
        """
        if not source_dir.is_dir():
            raise PackagingError(
                "Package source directory does not exist",
                context={"source_dir": str(source_dir)},
            )
        dest = dest_path.resolve()
        dest.parent.mkdir(parents=True, exist_ok=True)
        if dest.exists():
            dest.unlink()

        run_in_directory(source_dir, lambda: _zip_cwd(dest))

        size = dest.stat().st_size
        if size <= self.config.min_package_size:
            raise PackageTooSmallError(
                "Package archive is too small, the dist tree is probably empty",
                archive_path=str(dest),
                size=size,
                minimum=self.config.min_package_size,
            )

        descriptor = PackageDescriptor(
            name=dest.name,
            size=size,
            checksum=self.hashes.hash_file(self.config.checksum, dest),
            checksum_algorithm=self.config.checksum,
            content_hash=self.hashes.hash_tree(self.config.content_hash, source_dir),
        )
        if self.config.write_checksum_file:
            self._write_checksum_file(dest, descriptor)

        self._logger.info("Built %s (%d bytes)", dest, size)
        return descriptor

    def build_docs_archive(self, docs_dir: Path, dest_path: Path) -> PackageDescriptor | None:
        """Like build_archive, but a missing docs tree yields None."""
        if not docs_dir.is_dir():
            self._logger.debug("No docs at %s, skipping docs package", docs_dir)
            return None
        return self.build_archive(docs_dir, dest_path)

    def extract(self, archive_path: Path, dest_dir: Path) -> None:
        """Unpack an archive into ``dest_dir``."""
        dest_dir.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive_path) as archive:
            archive.extractall(dest_dir)

    def _write_checksum_file(self, archive: Path, descriptor: PackageDescriptor) -> Path:
        sidecar = archive.with_name(f"{archive.name}.{descriptor.checksum_algorithm}")
        sidecar.write_text(f"{descriptor.checksum}  {archive.name}\n")
        return sidecar
