"""
Base Pydantic models shared by every plugin-ci record.

Pipeline records (job stats, descriptors, reports, history) are strict and
reject unknown fields so that a malformed object in the store fails
loudly. Records that are written once and then only read are frozen.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

_COMMON = ConfigDict(
    strict=True,
    extra="forbid",
    populate_by_name=True,
    use_enum_values=True,
    revalidate_instances="never",
)


class PluginCIBaseModel(BaseModel):
    """Mutable record, revalidated on every assignment."""

    model_config = ConfigDict(**_COMMON, validate_assignment=True)


class ImmutableModel(PluginCIBaseModel):
    """Frozen record: reports, descriptors and history entries."""

    model_config = ConfigDict(**_COMMON, frozen=True)
