"""
Package descriptor models.

A descriptor is computed once for each produced archive and never mutated.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

from .base import ImmutableModel


class PackageDescriptor(ImmutableModel):
    """Name, size and checksums of one produced archive."""

    name: Annotated[str, Field(min_length=1)]
    size: Annotated[int, Field(ge=0)]
    checksum: Annotated[str, Field(min_length=1)]
    checksum_algorithm: str = "md5"
    content_hash: str | None = None


class PluginPackages(ImmutableModel):
    """The ``packages/info.json`` map: the plugin archive and optional docs."""

    plugin: PackageDescriptor
    docs: PackageDescriptor | None = None

    def descriptors(self) -> dict[str, PackageDescriptor]:
        """Return the present descriptors keyed by package kind."""
        found = {"plugin": self.plugin}
        if self.docs is not None:
            found["docs"] = self.docs
        return found
