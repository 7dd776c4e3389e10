"""Platform conventions and target resolution.

This module handles:
- Shared-library naming conventions per platform
- Capturing the process environment as an explicit BuildEnvironment
- Resolving an explicit cargo target triple where the platform needs one

Everything except BuildEnvironment.from_process() is a pure function of
its arguments.
"""

from __future__ import annotations

import os
import platform as platform_module
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from neon_build.errors import UnsupportedPlatform
from neon_build.types import Platform

# Architectures that select the 32-bit MSVC toolchain on Windows
WINDOWS_32BIT_ARCHES = frozenset({"ia32", "x86", "i386", "i686"})
WINDOWS_32BIT_TARGET = "i686-pc-windows-msvc"
WINDOWS_64BIT_TARGET = "x86_64-pc-windows-msvc"


@dataclass(frozen=True)
class PlatformConvention:
    """Filename prefix and suffix of a shared library on one platform."""

    prefix: str
    suffix: str

    def library_filename(self, library_name: str) -> str:
        """Return the filename cargo produces for a library."""
        return f"{self.prefix}{library_name}{self.suffix}"


PLATFORM_CONVENTIONS: Mapping[Platform, PlatformConvention] = MappingProxyType(
    {
        Platform.DARWIN: PlatformConvention(prefix="lib", suffix=".dylib"),
        Platform.FREEBSD: PlatformConvention(prefix="lib", suffix=".so"),
        Platform.LINUX: PlatformConvention(prefix="lib", suffix=".so"),
        Platform.SUNOS: PlatformConvention(prefix="lib", suffix=".so"),
        Platform.WIN32: PlatformConvention(prefix="", suffix=".dll"),
    }
)


def normalize_platform(name: str) -> Platform:
    """Map a ``sys.platform`` style identifier to a known Platform.

    Versioned identifiers such as ``freebsd14`` or ``sunos5`` match their
    family.

    Raises:
        UnsupportedPlatform: If the identifier matches no known platform.
    """
    for candidate in Platform:
        if name.startswith(candidate.value):
            return candidate
    raise UnsupportedPlatform(name)


def get_convention(platform: Platform) -> PlatformConvention:
    """Return the shared-library naming convention for a platform."""
    return PLATFORM_CONVENTIONS[platform]


@dataclass(frozen=True)
class BuildEnvironment:
    """Process-level inputs to a build, captured once.

    Attributes:
        platform: Host platform.
        machine: Native machine architecture (e.g. ``AMD64``, ``x86_64``).
        project_root: Root of the hybrid project.
        arch_override: Value of the architecture override variable, if set.
        cargo_target_dir: Value of ``CARGO_TARGET_DIR``, if set.
    """

    platform: Platform
    machine: str
    project_root: Path
    arch_override: str | None = None
    cargo_target_dir: str | None = None

    @classmethod
    def from_process(
        cls,
        project_root: Path | None = None,
        arch_env_var: str = "npm_config_arch",
        environ: Mapping[str, str] | None = None,
    ) -> BuildEnvironment:
        """Capture the current process environment.

        Args:
            project_root: Project root; defaults to the working directory.
            arch_env_var: Name of the architecture override variable.
            environ: Environment mapping; defaults to ``os.environ``.

        Raises:
            UnsupportedPlatform: If the host platform is not supported.
        """
        if environ is None:
            environ = os.environ
        return cls(
            platform=normalize_platform(sys.platform),
            machine=platform_module.machine(),
            project_root=(project_root or Path.cwd()).resolve(),
            arch_override=environ.get(arch_env_var) or None,
            cargo_target_dir=environ.get("CARGO_TARGET_DIR") or None,
        )


def needs_explicit_target(platform: Platform) -> bool:
    """Whether the platform requires choosing between 32/64-bit toolchains."""
    return platform is Platform.WIN32


def resolve_target(env: BuildEnvironment) -> str | None:
    """Resolve the cargo target triple for a build.

    Args:
        env: Build environment.

    Returns:
        Target triple on Windows, None elsewhere (toolchain host default).
    """
    if not needs_explicit_target(env.platform):
        return None
    arch = (env.arch_override or env.machine).lower()
    if arch in WINDOWS_32BIT_ARCHES:
        return WINDOWS_32BIT_TARGET
    return WINDOWS_64BIT_TARGET


__all__ = [
    "PLATFORM_CONVENTIONS",
    "BuildEnvironment",
    "PlatformConvention",
    "get_convention",
    "needs_explicit_target",
    "normalize_platform",
    "resolve_target",
]
