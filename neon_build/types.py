"""Shared type definitions for neon_build.

This module contains enums and dataclasses shared across subpackages to
avoid circular imports.
"""

from dataclasses import dataclass
from enum import Enum


class Configuration(str, Enum):
    """Cargo build profile."""

    DEBUG = "debug"
    RELEASE = "release"


class Platform(str, Enum):
    """Host platform identifiers with a known shared-library convention."""

    DARWIN = "darwin"
    FREEBSD = "freebsd"
    LINUX = "linux"
    SUNOS = "sunos"
    WIN32 = "win32"


DEFAULT_TOOLCHAIN = "default"


@dataclass(frozen=True)
class BuildRequest:
    """One build attempt.

    Attributes:
        toolchain: Toolchain name, or "default" to invoke cargo directly.
        configuration: Debug or release profile.
        target: Explicit target triple, or None for the host default.
    """

    toolchain: str
    configuration: Configuration
    target: str | None = None


__all__ = [
    "DEFAULT_TOOLCHAIN",
    "BuildRequest",
    "Configuration",
    "Platform",
]
