"""
Custom exception hierarchy for plugin-ci.

Structural errors (collisions, manifest problems, truncated packages,
duplicate registrations, store failures) abort the running stage. Errors
raised while testing a deployed plugin are captured into the test results
instead of being raised to the caller.
"""

from __future__ import annotations


class PluginCIException(Exception):
    """
    Base exception for all plugin-ci errors.

    Attributes:
        message: Human-readable error description
        context: Additional debugging context (paths, keys, etc.)
        exit_code: Suggested exit code for CLI (default: 1)
        recoverable: Whether retry/recovery may be possible
    """

    exit_code: int = 1
    recoverable: bool = True

    def __init__(
        self,
        message: str,
        *,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message = message
        self.context = context or {}
        if cause is not None:
            self.__cause__ = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigFileError(PluginCIException):
    """
    Error reading or parsing a configuration file.

    Raised for TOML parsing errors, permission errors, etc.
    """

    def __init__(
        self,
        message: str,
        *,
        file_path: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if file_path:
            ctx["file_path"] = file_path
        super().__init__(message, context=ctx, cause=cause)


# =============================================================================
# Job Folder Errors
# =============================================================================


class JobFolderError(PluginCIException, OSError):
    """
    The CI root or a job folder could not be created or written.

    Inherits from OSError so callers that handle filesystem failures
    generically still catch it.
    """

    recoverable: bool = False

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if path:
            ctx["path"] = path
        super().__init__(message, context=ctx, cause=cause)


class BuildCommandError(PluginCIException):
    """The external build command exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        returncode: int | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if command:
            ctx["command"] = " ".join(command)
        if returncode is not None:
            ctx["returncode"] = returncode
        super().__init__(message, context=ctx, cause=cause)


# =============================================================================
# Packaging Errors
# =============================================================================


class PackagingError(PluginCIException):
    """Base class for errors that prevent a distributable package."""

    recoverable: bool = False


class CollisionError(PackagingError):
    """
    Two job folders contributed a file at the same relative path.

    Parallel builds must never silently overwrite each other's output.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str,
        source: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.path = path
        ctx = context or {}
        ctx["path"] = path
        if source:
            ctx["source"] = source
        super().__init__(message, context=ctx, cause=cause)


class ManifestError(PackagingError):
    """The plugin manifest is missing or malformed."""

    def __init__(
        self,
        message: str,
        *,
        manifest_path: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if manifest_path:
            ctx["manifest_path"] = manifest_path
        super().__init__(message, context=ctx, cause=cause)


class PackageTooSmallError(PackagingError):
    """
    The produced archive is not larger than the minimum valid size.

    This usually means the packaging run was truncated or the dist
    tree was empty.
    """

    def __init__(
        self,
        message: str,
        *,
        archive_path: str,
        size: int,
        minimum: int,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.size = size
        self.minimum = minimum
        ctx = context or {}
        ctx["archive_path"] = archive_path
        ctx["size"] = size
        ctx["minimum"] = minimum
        super().__init__(message, context=ctx, cause=cause)


# =============================================================================
# Testing Errors
# =============================================================================


class VersionMismatchError(PluginCIException):
    """
    The deployed plugin is not the build that is being tested.

    Recorded into the test results rather than raised out of the stage.
    """

    def __init__(
        self,
        message: str,
        *,
        expected: str | None,
        actual: str | None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.expected = expected
        self.actual = actual
        ctx = context or {}
        ctx["expected"] = expected
        ctx["actual"] = actual
        super().__init__(message, context=ctx, cause=cause)


class EndToEndRunnerError(PluginCIException):
    """The end-to-end runner could not be started or did not report results."""

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        returncode: int | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if command:
            ctx["command"] = " ".join(command)
        if returncode is not None:
            ctx["returncode"] = returncode
        super().__init__(message, context=ctx, cause=cause)


class DeploymentUnreachableError(PluginCIException):
    """The deployed test instance could not be reached or queried."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if url:
            ctx["url"] = url
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message, context=ctx, cause=cause)


# =============================================================================
# Report / History Errors
# =============================================================================


class ReportError(PluginCIException):
    """The build report cannot be assembled from the available inputs."""

    recoverable: bool = False


class DuplicateJobError(PluginCIException):
    """A report is already registered under this job key."""

    recoverable: bool = False

    def __init__(
        self,
        message: str,
        *,
        key: str,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.key = key
        ctx = context or {}
        ctx["key"] = key
        super().__init__(message, context=ctx, cause=cause)


class StoreError(PluginCIException):
    """Reading from or writing to the object store failed."""

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.key = key
        ctx = context or {}
        if key:
            ctx["key"] = key
        super().__init__(message, context=ctx, cause=cause)


class CorruptObjectError(StoreError):
    """A stored object exists but does not parse into the expected record."""

    recoverable: bool = False
