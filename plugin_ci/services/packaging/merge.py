"""
Merge per-job dist trees into the canonical distribution directory.

The local ``dist/`` is copied first and may overwrite. Every job's
``dist/`` is then copied without overwrite: two jobs contributing the same
relative path is a collision and aborts the merge. Paths that came from the
local pass win over job copies and are kept silently.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from ...core.exceptions import CollisionError
from ...core.interfaces.logger import ILogger
from ..logging import get_logger


@dataclass
class MergeResult:
    """What one merge copied and which job files lost to the local pass."""

    local: list[str] = field(default_factory=list)
    copied: list[str] = field(default_factory=list)
    kept_local: list[str] = field(default_factory=list)
    skipped_sources: list[Path] = field(default_factory=list)

    @property
    def files(self) -> list[str]:
        return sorted({*self.local, *self.copied})


def _iter_files(root: Path) -> Iterator[tuple[str, Path]]:
    """Yield ``(relative posix path, absolute path)`` for files under root, sorted."""
    for path in sorted(root.rglob("*")):
        if path.is_file():
            yield path.relative_to(root).as_posix(), path


def _parents(rel: str) -> list[str]:
    return [p.as_posix() for p in PurePosixPath(rel).parents if str(p) != "."]


class ArtifactMerger:
    """Combines the local dist tree and job dist trees into one directory."""

    def __init__(self, logger: ILogger | None = None):
        self._logger = logger or get_logger()

    def merge_dist_trees(
        self,
        canonical_dir: Path,
        local_dir: Path | None,
        job_dirs: Iterable[Path],
    ) -> MergeResult:
        """
        Merge ``local_dir`` and then each of ``job_dirs`` into ``canonical_dir``.

        All job sources are checked for collisions before anything is copied
        from them, so a failed merge only ever leaves the local pass behind.

        Args:
            canonical_dir: Destination, created if missing
            local_dir: The project's own dist tree (overwrite allowed)
            job_dirs: Job dist trees in merge order (no overwrite)

        Returns:
            MergeResult describing the copied files

        Raises:
            CollisionError: If a job file's target path already exists
        """
        canonical_dir.mkdir(parents=True, exist_ok=True)
        result = MergeResult()

        if local_dir is not None and local_dir.is_dir():
            for rel, src in _iter_files(local_dir):
                target = canonical_dir / rel
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(src, target)
                result.local.append(rel)
            self._logger.debug("Copied %d local files from %s", len(result.local), local_dir)
        elif local_dir is not None:
            result.skipped_sources.append(local_dir)

        plan = self._plan_job_copies(canonical_dir, set(result.local), job_dirs, result)

        for rel, src in plan:
            target = canonical_dir / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, target)
            result.copied.append(rel)

        self._logger.info(
            "Merged %d job files into %s (%d kept from local)",
            len(result.copied),
            canonical_dir,
            len(result.kept_local),
        )
        return result

    def _plan_job_copies(
        self,
        canonical_dir: Path,
        local_files: set[str],
        job_dirs: Iterable[Path],
        result: MergeResult,
    ) -> list[tuple[str, Path]]:
        planned: dict[str, Path] = {}
        planned_dirs: set[str] = set()

        for source in job_dirs:
            if not source.is_dir():
                self._logger.debug("Skipping missing dist directory %s", source)
                result.skipped_sources.append(source)
                continue

            for rel, src in _iter_files(source):
                if rel in local_files:
                    result.kept_local.append(rel)
                    continue

                target = canonical_dir / rel
                owner = planned.get(rel)
                if owner is not None or target.exists() or rel in planned_dirs:
                    raise CollisionError(
                        f"Merge collision at {rel}",
                        path=rel,
                        source=str(source),
                        context={"previous": str(owner)} if owner else None,
                    )
                for parent in _parents(rel):
                    if parent in planned or (canonical_dir / parent).is_file():
                        raise CollisionError(
                            f"Merge collision at {parent}",
                            path=parent,
                            source=str(source),
                        )
                    planned_dirs.add(parent)

                planned[rel] = src

        return list(planned.items())
