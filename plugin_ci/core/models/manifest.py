"""
Plugin manifest models.

Mirrors the parts of ``plugin.json`` the pipeline reads or writes. Unknown
manifest fields are kept so that stamping build info never drops data.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import ConfigDict, Field

from .base import ImmutableModel

PluginType = Literal["panel", "datasource", "app", "renderer", "secretsmanager"]


class ManifestBaseModel(ImmutableModel):
    """Base model for manifest sections with relaxed strict mode for JSON loading."""

    model_config = ConfigDict(
        frozen=True,
        strict=False,
        extra="allow",
        populate_by_name=True,
        use_enum_values=True,
        revalidate_instances="never",
    )


class PluginBuildInfo(ManifestBaseModel):
    """Source and CI metadata stamped into ``info.build`` before packaging.

    ``time`` is milliseconds since the epoch. A build block already present
    in ``plugin.json`` may carry other keys; they load but are replaced on
    stamping.
    """

    time: Annotated[int, Field(ge=0)] | None = None
    repo: str | None = None
    branch: str | None = None
    hash: str | None = None
    build: int | None = None
    pr: int | None = None


class PluginInfo(ManifestBaseModel):
    """The ``info`` block of a plugin manifest."""

    version: Annotated[str, Field(min_length=1)]
    updated: str | None = None
    build: PluginBuildInfo | None = None


class PluginManifest(ManifestBaseModel):
    """A plugin's declared identity plus its build metadata."""

    id: Annotated[str, Field(min_length=1)]
    type: PluginType
    name: Annotated[str, Field(min_length=1)]
    info: PluginInfo

    @property
    def version(self) -> str:
        return self.info.version

    @property
    def build(self) -> PluginBuildInfo | None:
        return self.info.build

    def with_build_info(self, build: PluginBuildInfo) -> PluginManifest:
        """Return a copy of this manifest with ``info.build`` replaced."""
        info = self.info.model_copy(update={"build": build})
        return self.model_copy(update={"info": info})

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)

    def package_basename(self) -> str:
        """Archive base name, e.g. ``my-plugin-1.2.0``."""
        return f"{self.id}-{self.info.version}"
