"""Cargo manifest reader.

Reads the native crate's ``Cargo.toml`` and extracts the library name the
compiled artifact is named after. The manifest is read fresh for every
build; nothing here is cached.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from neon_build.errors import ManifestMissingField, ManifestReadError

logger = logging.getLogger(__name__)


class BuildManifest(BaseModel):
    """Parsed subset of a Cargo manifest.

    Attributes:
        library_name: The ``[lib] name`` field; names the compiled library.
        package_name: The ``[package] name`` field, if present.
    """

    model_config = ConfigDict(frozen=True)

    library_name: str = Field(min_length=1, description="Cargo [lib] name")
    package_name: str | None = Field(default=None, description="Cargo [package] name")


def load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dict.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed TOML document.

    Raises:
        ManifestReadError: If the file is missing, unreadable or not valid TOML.
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except OSError as e:
        raise ManifestReadError(path, e.strerror or str(e)) from e
    except tomllib.TOMLDecodeError as e:
        raise ManifestReadError(path, f"invalid TOML ({e})") from e


def parse_manifest_data(data: dict[str, Any], path: Path) -> BuildManifest:
    """Extract the build manifest fields from parsed TOML.

    Args:
        data: Parsed Cargo.toml content.
        path: Manifest path, used in error messages.

    Returns:
        BuildManifest instance.

    Raises:
        ManifestMissingField: If ``[lib] name`` is absent, empty or not a string.
    """
    lib = data.get("lib")
    name = lib.get("name") if isinstance(lib, dict) else None
    if not isinstance(name, str) or not name:
        raise ManifestMissingField(path)

    package = data.get("package")
    package_name = package.get("name") if isinstance(package, dict) else None
    if not isinstance(package_name, str):
        package_name = None

    return BuildManifest(library_name=name, package_name=package_name)


def load_manifest(native_dir: Path, manifest_name: str = "Cargo.toml") -> BuildManifest:
    """Read the build manifest of a native crate.

    Args:
        native_dir: Root directory of the native crate.
        manifest_name: Manifest filename inside native_dir.

    Returns:
        BuildManifest for the crate.

    Raises:
        ManifestReadError: If the manifest cannot be read or parsed.
        ManifestMissingField: If the manifest has no library name.
    """
    path = native_dir / manifest_name
    logger.debug("Reading manifest: %s", path)
    manifest = parse_manifest_data(load_toml(path), path)
    logger.debug("Library name: %s", manifest.library_name)
    return manifest


__all__ = ["BuildManifest", "load_manifest", "load_toml", "parse_manifest_data"]
