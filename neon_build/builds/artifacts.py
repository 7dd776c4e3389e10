"""Artifact location and publishing.

This module handles:
- Computing where cargo writes the compiled library
- Computing the canonical path the Node.js runtime loads from
- Replacing the published artifact with a fresh build
- Computing checksums of the published artifact
"""

from __future__ import annotations

import contextlib
import hashlib
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from neon_build.builds.platform import get_convention
from neon_build.errors import ArtifactNotFound, PublishIOFailure
from neon_build.types import Configuration, Platform

logger = logging.getLogger(__name__)

# Default chunk size for hashing
HASH_CHUNK_SIZE = 64 * 1024  # 64KB


@dataclass(frozen=True)
class ArtifactPaths:
    """Where the compiled library is and where it gets published.

    Attributes:
        built_path: Library as written by cargo.
        publish_path: Canonical location loaded by the Node.js runtime.
    """

    built_path: Path
    publish_path: Path


@dataclass(frozen=True)
class PublishedArtifact:
    """The artifact at the publish path after a successful publish."""

    path: Path
    size_bytes: int
    sha256: str


def output_root(native_dir: Path, cargo_target_dir: str | None = None) -> Path:
    """Return cargo's target directory for a crate.

    A relative ``CARGO_TARGET_DIR`` is resolved against the crate root,
    since that is cargo's working directory.
    """
    if cargo_target_dir:
        return native_dir / cargo_target_dir
    return native_dir / "target"


def compute_artifact_paths(
    native_dir: Path,
    library_name: str,
    configuration: Configuration,
    platform: Platform,
    target: str | None = None,
    publish_name: str = "index.node",
    cargo_target_dir: str | None = None,
) -> ArtifactPaths:
    """Compute the built and published artifact paths.

    Args:
        native_dir: Root directory of the native crate.
        library_name: Library name from the manifest.
        configuration: Build profile.
        platform: Host platform.
        target: Explicit target triple, if one was passed to cargo.
        publish_name: Filename of the published artifact.
        cargo_target_dir: Override of cargo's target directory.

    Returns:
        ArtifactPaths for the build.
    """
    output_dir = output_root(native_dir, cargo_target_dir)
    if target:
        output_dir = output_dir / target
    output_dir = output_dir / configuration.value

    filename = get_convention(platform).library_filename(library_name)
    paths = ArtifactPaths(
        built_path=output_dir / filename,
        publish_path=native_dir / publish_name,
    )
    logger.debug("Expected artifact: %s", paths.built_path)
    return paths


def compute_file_hash(
    file_path: Path,
    chunk_size: int = HASH_CHUNK_SIZE,
) -> str:
    """Compute SHA-256 hash of a file.

    Args:
        file_path: Path to the file.
        chunk_size: Size of chunks for streaming hash.

    Returns:
        SHA-256 hex digest.
    """
    sha256 = hashlib.sha256()
    with file_path.open("rb") as f:
        while chunk := f.read(chunk_size):
            sha256.update(chunk)
    return sha256.hexdigest()


def _temporary_path(publish_path: Path) -> Path:
    return publish_path.with_name(f".{publish_path.name}.tmp")


def publish_artifact(paths: ArtifactPaths) -> PublishedArtifact:
    """Replace the published artifact with the freshly built one.

    The library is copied next to the publish path first and renamed into
    place, so the publish path only ever holds a complete file.

    Args:
        paths: Artifact paths for the build.

    Returns:
        PublishedArtifact describing the new file.

    Raises:
        ArtifactNotFound: If cargo produced no file at the expected path.
            The publish path is left untouched.
        PublishIOFailure: If removing or copying fails.
    """
    if not paths.built_path.is_file():
        logger.error("Artifact not found: %s", paths.built_path)
        raise ArtifactNotFound(paths.built_path)

    publish_path = paths.publish_path
    logger.info("Generating %s", publish_path)

    tmp_path = _temporary_path(publish_path)
    try:
        shutil.copyfile(paths.built_path, tmp_path)
        publish_path.unlink(missing_ok=True)
        os.replace(tmp_path, publish_path)
    except OSError as e:
        with contextlib.suppress(OSError):
            tmp_path.unlink(missing_ok=True)
        logger.error("Failed to publish %s: %s", publish_path, e)
        raise PublishIOFailure(publish_path, e.strerror or str(e)) from e

    return PublishedArtifact(
        path=publish_path,
        size_bytes=publish_path.stat().st_size,
        sha256=compute_file_hash(publish_path),
    )


__all__ = [
    "ArtifactPaths",
    "PublishedArtifact",
    "compute_artifact_paths",
    "compute_file_hash",
    "output_root",
    "publish_artifact",
]
