"""Build service module.

This module provides the high-level build API:
- plan_build(): read the manifest and resolve the command and paths
- build(): plan, run cargo, and publish the artifact

The pipeline is linear (manifest, target, cargo, publish) and every
failure is terminal.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

from neon_build.builds.artifacts import (
    ArtifactPaths,
    PublishedArtifact,
    compute_artifact_paths,
    publish_artifact,
)
from neon_build.builds.platform import BuildEnvironment, resolve_target
from neon_build.builds.runner import compose_cargo_command, run_toolchain
from neon_build.config import get_settings
from neon_build.errors import BuildFailed, NativeProjectNotFound
from neon_build.manifest import BuildManifest, load_manifest
from neon_build.types import BuildRequest, Configuration

if TYPE_CHECKING:
    from neon_build.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildPlan:
    """Everything decided before cargo runs.

    Attributes:
        request: The build request, with its resolved target.
        native_dir: Root directory of the native crate.
        manifest: Parsed build manifest.
        command: Cargo command line.
        paths: Built and published artifact paths.
    """

    request: BuildRequest
    native_dir: Path
    manifest: BuildManifest
    command: list[str]
    paths: ArtifactPaths

    @property
    def command_line(self) -> str:
        return shlex.join(self.command)

    def to_dict(self) -> dict[str, Any]:
        return {
            "toolchain": self.request.toolchain,
            "configuration": self.request.configuration.value,
            "target": self.request.target,
            "library_name": self.manifest.library_name,
            "native_dir": str(self.native_dir),
            "command": self.command,
            "built_path": str(self.paths.built_path),
            "publish_path": str(self.paths.publish_path),
        }


@dataclass
class BuildOutcome:
    """Result of a successful build."""

    plan: BuildPlan
    exit_code: int
    artifact: PublishedArtifact
    started_at: datetime
    finished_at: datetime

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        result = self.plan.to_dict()
        result.update(
            {
                "exit_code": self.exit_code,
                "size_bytes": self.artifact.size_bytes,
                "sha256": self.artifact.sha256,
                "started_at": self.started_at.isoformat(),
                "finished_at": self.finished_at.isoformat(),
                "duration_seconds": self.duration_seconds,
            }
        )
        return result


def find_native_dir(project_root: Path, native_dir_name: str = "native") -> Path:
    """Return the native crate directory of a project.

    Raises:
        NativeProjectNotFound: If the directory does not exist.
    """
    native_dir = project_root / native_dir_name
    if not native_dir.is_dir():
        raise NativeProjectNotFound(native_dir)
    return native_dir


def plan_build(
    toolchain: str,
    configuration: Configuration | str,
    *,
    environment: BuildEnvironment | None = None,
    settings: Settings | None = None,
) -> BuildPlan:
    """Resolve a build without running it.

    Args:
        toolchain: Toolchain name, or "default".
        configuration: "debug" or "release".
        environment: Build environment; captured from the process if None.
        settings: Settings; loaded from the environment if None.

    Returns:
        BuildPlan for the build.

    Raises:
        NativeProjectNotFound: If the project has no native directory.
        ManifestReadError: If the manifest cannot be read.
        ManifestMissingField: If the manifest has no library name.
        UnsupportedPlatform: If the host platform is unknown.
        ValueError: If configuration is not "debug" or "release".
    """
    if settings is None:
        settings = get_settings()
    if environment is None:
        environment = BuildEnvironment.from_process(arch_env_var=settings.arch_env_var)
    configuration = Configuration(configuration)

    native_dir = find_native_dir(environment.project_root, settings.native_dir)
    manifest = load_manifest(native_dir, settings.manifest_name)

    request = BuildRequest(
        toolchain=toolchain,
        configuration=configuration,
        target=resolve_target(environment),
    )
    command = compose_cargo_command(
        request, environment.platform, wrapper=settings.toolchain_wrapper
    )
    paths = compute_artifact_paths(
        native_dir=native_dir,
        library_name=manifest.library_name,
        configuration=configuration,
        platform=environment.platform,
        target=request.target,
        publish_name=settings.publish_name,
        cargo_target_dir=environment.cargo_target_dir,
    )
    return BuildPlan(
        request=request,
        native_dir=native_dir,
        manifest=manifest,
        command=command,
        paths=paths,
    )


def build(
    toolchain: str = "default",
    configuration: Configuration | str = Configuration.DEBUG,
    *,
    environment: BuildEnvironment | None = None,
    settings: Settings | None = None,
) -> BuildOutcome:
    """Build the native crate and publish it as the project's native module.

    Args:
        toolchain: Toolchain name, or "default".
        configuration: "debug" or "release".
        environment: Build environment; captured from the process if None.
        settings: Settings; loaded from the environment if None.

    Returns:
        BuildOutcome describing the published artifact.

    Raises:
        NeonBuildError: Any pipeline failure. BuildFailed and
            ArtifactNotFound leave the published artifact untouched.
    """
    plan = plan_build(
        toolchain,
        configuration,
        environment=environment,
        settings=settings,
    )

    started_at = datetime.now(timezone.utc)
    exit_code = run_toolchain(plan.command, cwd=plan.native_dir)
    if exit_code != 0:
        raise BuildFailed(exit_code, plan.command_line)

    artifact = publish_artifact(plan.paths)
    finished_at = datetime.now(timezone.utc)

    logger.info(
        "Published %s (%d bytes, sha256 %s)",
        artifact.path,
        artifact.size_bytes,
        artifact.sha256[:16],
    )
    return BuildOutcome(
        plan=plan,
        exit_code=exit_code,
        artifact=artifact,
        started_at=started_at,
        finished_at=finished_at,
    )


__all__ = [
    "BuildOutcome",
    "BuildPlan",
    "build",
    "find_native_dir",
    "plan_build",
]
