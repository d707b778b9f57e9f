"""
Configuration models.

Provides Pydantic models for plugin-ci configuration with validation.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import ConfigDict, Field, field_validator

from .base import PluginCIBaseModel

# Type aliases
HashAlgorithm = Literal["blake3", "sha256", "sha512", "md5"]
LogLevel = Literal["debug", "info", "warning", "error"]
StoreBackend = Literal["local", "sql"]


class ConfigBaseModel(PluginCIBaseModel):
    """Base model for config sections with relaxed strict mode for TOML loading."""

    model_config = ConfigDict(
        strict=False,  # Allow coercion from TOML and env types
        validate_assignment=True,
        extra="ignore",  # Ignore unknown fields in config files
        populate_by_name=True,
        use_enum_values=True,
        revalidate_instances="never",
    )


class CIConfig(ConfigBaseModel):
    """CI workspace configuration section."""

    root: str | None = None  # defaults to <cwd>/ci
    job: str | None = None  # overrides the CI provider's job name


class BuildConfig(ConfigBaseModel):
    """Frontend/backend build command configuration section."""

    command: list[str] = Field(default_factory=lambda: ["npm", "run", "build"])
    backend_command: list[str] | None = None

    @field_validator("command", "backend_command", mode="before")
    @classmethod
    def parse_command(cls, v: Any) -> Any:
        """Split a whitespace-separated command string into argv."""
        if isinstance(v, str):
            return v.split()
        return v


class PackagingConfig(ConfigBaseModel):
    """Packaging configuration section."""

    min_package_size: Annotated[int, Field(ge=0)] = 100
    checksum: HashAlgorithm = "md5"
    content_hash: HashAlgorithm = "sha256"
    write_checksum_file: bool = True


class TestingConfig(ConfigBaseModel):
    """End-to-end test configuration section."""

    base_url: Annotated[str, Field(max_length=2048)] = "http://localhost:3000/"
    username: str = "admin"
    password: str = "admin"
    command: list[str] | None = None
    output_dir: str = "e2e-results"
    timeout: Annotated[float, Field(gt=0)] = 30.0

    @field_validator("command", mode="before")
    @classmethod
    def parse_command(cls, v: Any) -> Any:
        """Split a whitespace-separated command string into argv."""
        if isinstance(v, str):
            return v.split()
        return v

    @field_validator("base_url", mode="before")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate and normalize the deployed instance URL."""
        if not isinstance(v, str) or not v.startswith(("http://", "https://")):
            raise ValueError("Test base URL must start with http:// or https://")
        return v if v.endswith("/") else v + "/"


class StoreConfig(ConfigBaseModel):
    """History object store configuration section."""

    backend: StoreBackend = "local"
    path: str | None = None  # local backend directory, defaults to <ci>/store
    url: str | None = None  # SQLAlchemy URL for the sql backend
    root: str = "dev"


class LoggingConfig(ConfigBaseModel):
    """Logging configuration section."""

    level: LogLevel = "warning"
    console: bool = False
    file: bool = True
