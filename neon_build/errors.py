"""Error definitions for the native build pipeline.

Every error carries a stable ``code`` for programmatic handling and is
terminal for the current invocation; nothing in the pipeline retries.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

# Stable error codes
MANIFEST_UNREADABLE = "manifest_unreadable"
MANIFEST_MISSING_FIELD = "manifest_missing_field"
NATIVE_PROJECT_NOT_FOUND = "native_project_not_found"
UNSUPPORTED_PLATFORM = "unsupported_platform"
TOOLCHAIN_NOT_FOUND = "toolchain_not_found"
BUILD_FAILED = "build_failed"
ARTIFACT_NOT_FOUND = "artifact_not_found"
PUBLISH_IO_FAILURE = "publish_io_failure"


class NeonBuildError(Exception):
    """Base error for build pipeline failures."""

    def __init__(self, message: str, code: str = "neon_build_error") -> None:
        super().__init__(message)
        self.code = code

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"code": self.code, "message": str(self)}


class ManifestReadError(NeonBuildError):
    """Raised when the build manifest is missing or not valid TOML."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(
            f"Cannot read {path}: {reason}",
            code=MANIFEST_UNREADABLE,
        )
        self.path = path


class ManifestMissingField(NeonBuildError):
    """Raised when the manifest lacks the ``[lib] name`` field."""

    def __init__(self, path: Path) -> None:
        super().__init__(
            f"{path.name} does not contain a [lib] section with a 'name' field",
            code=MANIFEST_MISSING_FIELD,
        )
        self.path = path


class NativeProjectNotFound(NeonBuildError):
    """Raised when the project has no native crate directory."""

    def __init__(self, native_dir: Path) -> None:
        super().__init__(
            f"Native project directory not found: {native_dir}",
            code=NATIVE_PROJECT_NOT_FOUND,
        )
        self.native_dir = native_dir


class UnsupportedPlatform(NeonBuildError):
    """Raised when no shared-library naming convention exists for a platform."""

    def __init__(self, platform: str) -> None:
        super().__init__(
            f"Unsupported platform: {platform}",
            code=UNSUPPORTED_PLATFORM,
        )
        self.platform = platform


class ToolchainNotFound(NeonBuildError):
    """Raised when the toolchain executable cannot be started."""

    def __init__(self, executable: str, reason: str) -> None:
        super().__init__(
            f"Failed to run {executable}: {reason}",
            code=TOOLCHAIN_NOT_FOUND,
        )
        self.executable = executable


class BuildFailed(NeonBuildError):
    """Raised when the toolchain exits with a non-zero status."""

    def __init__(self, exit_code: int, command: str) -> None:
        super().__init__(
            f"cargo build failed with exit code {exit_code}",
            code=BUILD_FAILED,
        )
        self.exit_code = exit_code
        self.command = command

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["exit_code"] = self.exit_code
        result["command"] = self.command
        return result


class ArtifactNotFound(NeonBuildError):
    """Raised when the build succeeded but the expected library is absent."""

    def __init__(self, expected_path: Path) -> None:
        super().__init__(
            f"Build succeeded but no artifact was found at {expected_path}",
            code=ARTIFACT_NOT_FOUND,
        )
        self.expected_path = expected_path


class PublishIOFailure(NeonBuildError):
    """Raised when removing or copying the published artifact fails."""

    def __init__(self, publish_path: Path, reason: str) -> None:
        super().__init__(
            f"Failed to publish {publish_path}: {reason}",
            code=PUBLISH_IO_FAILURE,
        )
        self.publish_path = publish_path


__all__ = [
    "ARTIFACT_NOT_FOUND",
    "BUILD_FAILED",
    "MANIFEST_MISSING_FIELD",
    "MANIFEST_UNREADABLE",
    "NATIVE_PROJECT_NOT_FOUND",
    "PUBLISH_IO_FAILURE",
    "TOOLCHAIN_NOT_FOUND",
    "UNSUPPORTED_PLATFORM",
    "ArtifactNotFound",
    "BuildFailed",
    "ManifestMissingField",
    "ManifestReadError",
    "NativeProjectNotFound",
    "NeonBuildError",
    "PublishIOFailure",
    "ToolchainNotFound",
    "UnsupportedPlatform",
]
