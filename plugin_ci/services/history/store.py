"""
Build history on top of an object store.

Layout, relative to ``<root>/<plugin-id>``::

    branch/<branch>/<build-number>/build.json   one report per branch build
    pr/<pr-number>/build.json                   one report per pull request
    branch/<branch>/history.json                append-only branch ledger
    index.json                                  latest build per branch / PR

Reports are written once. History is only kept for branch builds. The
index is last-write-wins per branch or PR. Writers are not serialized:
two concurrent report stages for the same branch can lose a history
entry, and two for the same job key can both pass the duplicate check.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from ...core.exceptions import CorruptObjectError, DuplicateJobError, ReportError, StoreError
from ...core.interfaces.logger import ILogger
from ...core.interfaces.store import IObjectStore
from ...core.models.config import StoreConfig
from ...core.models.history import (
    PR_INDEX_KEY,
    HistoryEntry,
    IndexEntry,
    IndexScope,
    PluginHistory,
    PluginIndex,
)
from ...core.models.package import PackageDescriptor
from ...core.models.report import BuildReport
from ..logging import get_logger

REPORT_OBJECT = "build.json"
HISTORY_OBJECT = "history.json"
INDEX_OBJECT = "index.json"


@dataclass(frozen=True)
class JobKey:
    """Where one build's report lives in the store."""

    root: str
    plugin_id: str
    branch: str | None = None
    build_number: int | None = None
    pull_request: int | None = None

    def __post_init__(self) -> None:
        if self.pull_request is None and (self.branch is None or self.build_number is None):
            raise ReportError(
                "Branch builds need a branch and a build number",
                context={"branch": self.branch, "build_number": self.build_number},
            )
        if self.branch == PR_INDEX_KEY:
            raise ReportError(f"Branch name {PR_INDEX_KEY!r} is reserved", context={"branch": self.branch})

    @property
    def is_pull_request(self) -> bool:
        return self.pull_request is not None

    @property
    def prefix(self) -> str:
        return f"{self.root}/{self.plugin_id}"

    @property
    def ref(self) -> str:
        """Build reference stored in history and index entries."""
        if self.is_pull_request:
            return f"pr/{self.pull_request}"
        return f"branch/{self.branch}/{self.build_number}"

    @property
    def report_key(self) -> str:
        return f"{self.prefix}/{self.ref}/{REPORT_OBJECT}"

    def package_key(self, filename: str) -> str:
        return f"{self.prefix}/{self.ref}/{filename}"

    @property
    def scope(self) -> IndexScope:
        if self.is_pull_request:
            return IndexScope.for_pull_request(self.pull_request)
        return IndexScope.for_branch(self.branch)


@dataclass
class RecordResult:
    """What ``HistoryStore.record`` wrote."""

    key: JobKey
    history: PluginHistory | None = None
    index: PluginIndex | None = None
    uploaded: list[str] = field(default_factory=list)


class HistoryStore:
    """
    Records build reports with branch history and a latest-build index.

    Example:
        store = HistoryStore(LocalObjectStore(Path("ci/store")))
        store.record(report, branch="main", build_number=42)
    """

    def __init__(self, store: IObjectStore, root: str = "dev", logger: ILogger | None = None):
        self.store = store
        self.root = root.strip("/")
        self._logger = logger or get_logger()

    def job_key(
        self,
        plugin_id: str,
        branch: str | None = None,
        build_number: int | None = None,
        pull_request: int | None = None,
    ) -> JobKey:
        """Compute the report location for a branch build or a pull request."""
        return JobKey(
            root=self.root,
            plugin_id=plugin_id,
            branch=None if pull_request is not None else branch,
            build_number=None if pull_request is not None else build_number,
            pull_request=pull_request,
        )

    def history_key(self, plugin_id: str, branch: str) -> str:
        return f"{self.root}/{plugin_id}/branch/{branch}/{HISTORY_OBJECT}"

    def index_key(self, plugin_id: str) -> str:
        return f"{self.root}/{plugin_id}/{INDEX_OBJECT}"

    def register(self, key: JobKey, report: BuildReport) -> None:
        """
        Write a report under its job key.

        Raises:
            DuplicateJobError: If a report already exists under the key
        """
        if self.store.exists(key.report_key):
            raise DuplicateJobError("Build report already registered", key=key.report_key)
        tags = {"version": report.plugin.version, "type": report.plugin.type}
        self.store.write_json(key.report_key, report.to_json_dict(), tags=tags)
        self._logger.info("Registered report %s", key.report_key)

    def read_history(self, plugin_id: str, branch: str) -> PluginHistory:
        key = self.history_key(plugin_id, branch)
        data = self.store.read_json(key, default=None)
        if data is None:
            return PluginHistory()
        try:
            return PluginHistory.model_validate(data)
        except ValidationError as e:
            raise CorruptObjectError("Stored history is malformed", key=key, cause=e) from e

    def append_history(
        self, plugin_id: str, branch: str, ref: str, report: BuildReport
    ) -> PluginHistory:
        """Read the branch ledger, append one entry for ``report`` and write it back."""
        history = self.read_history(plugin_id, branch).append(HistoryEntry.from_report(ref, report))
        self.store.write_json(
            self.history_key(plugin_id, branch), history.model_dump(mode="json")
        )
        self._logger.debug("History for %s/%s now has %d entries", plugin_id, branch, len(history))
        return history

    def read_index(self, plugin_id: str) -> PluginIndex:
        key = self.index_key(plugin_id)
        data = self.store.read_json(key, default=None)
        if data is None:
            return PluginIndex()
        try:
            return PluginIndex.from_json_dict(data)
        except (ValueError, ValidationError) as e:
            raise CorruptObjectError("Stored index is malformed", key=key, cause=e) from e

    def update_index(self, plugin_id: str, scope: IndexScope, entry: IndexEntry) -> PluginIndex:
        """Point ``scope`` at ``entry``, replacing whatever was there."""
        index = self.read_index(plugin_id).with_entry(scope, entry)
        self.store.write_json(self.index_key(plugin_id), index.to_json_dict())
        return index

    def record(
        self,
        report: BuildReport,
        branch: str | None = None,
        build_number: int | None = None,
    ) -> RecordResult:
        """
        Register a report, extend branch history and update the index.

        Steps run in order with no retry and no rollback: a failure after
        the report is written leaves it in place.

        Raises:
            DuplicateJobError: If the job key is already registered
            CorruptObjectError: If stored history or index cannot be parsed
        """
        plugin_id = report.plugin.id
        key = self.job_key(plugin_id, branch, build_number, report.pull_request)
        self.register(key, report)

        result = RecordResult(key=key)
        if not key.is_pull_request:
            result.history = self.append_history(plugin_id, key.branch, key.ref, report)

        build = report.plugin.build
        entry = IndexEntry(
            time=build.time if build else None,
            version=report.plugin.version,
            last=key.ref,
        )
        result.index = self.update_index(plugin_id, key.scope, entry)
        return result

    def upload_packages(
        self, key: JobKey, packages_dir: Path, descriptors: dict[str, PackageDescriptor]
    ) -> list[str]:
        """Store each package archive next to the build report."""
        uploaded = []
        for kind, descriptor in descriptors.items():
            archive = packages_dir / descriptor.name
            object_key = key.package_key(descriptor.name)
            self.store.write_file(object_key, archive, tags={"kind": kind, descriptor.checksum_algorithm: descriptor.checksum})
            uploaded.append(object_key)
            self._logger.info("Uploaded %s", object_key)
        return uploaded


def create_object_store(config: StoreConfig, ci_root: Path) -> IObjectStore:
    """
    Build the object store backend named by ``config.backend``.

    Raises:
        StoreError: If no backend is registered under that name
    """
    from ...core.container import get_container

    try:
        store_class = get_container().get_store_backend(config.backend)
    except KeyError as e:
        raise StoreError(
            "Unknown object store backend", context={"backend": config.backend}, cause=e
        ) from e
    return store_class.from_config(config, ci_root)
