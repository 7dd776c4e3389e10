"""Build runner for invoking cargo.

This module handles:
- Composing the cargo command line for a build request
- Executing cargo with the caller's stdin/stdout/stderr
- Reporting the exit code

Toolchain output is streamed straight to the terminal and never parsed;
the exit code is the only signal consumed.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path

from neon_build.errors import ToolchainNotFound
from neon_build.types import DEFAULT_TOOLCHAIN, BuildRequest, Configuration, Platform

logger = logging.getLogger(__name__)

CARGO = "cargo"

# Lets the host process resolve Node symbols when it loads the module
DARWIN_LINKER_ARGS = ("-C", "link-args=-Wl,-undefined,dynamic_lookup")


def compose_toolchain_prefix(toolchain: str, wrapper: str = "rustup") -> list[str]:
    """Compose the executable part of the cargo command.

    Args:
        toolchain: Toolchain name, or "default".
        wrapper: Toolchain multiplexer used for named toolchains.

    Returns:
        ``["cargo"]`` for the default toolchain, otherwise
        ``[wrapper, "run", toolchain, "cargo"]``.
    """
    if toolchain == DEFAULT_TOOLCHAIN:
        return [CARGO]
    return [wrapper, "run", toolchain, CARGO]


def compose_cargo_command(
    request: BuildRequest,
    platform: Platform,
    wrapper: str = "rustup",
) -> list[str]:
    """Compose the cargo command for a build request.

    Args:
        request: Build request.
        platform: Host platform.
        wrapper: Toolchain multiplexer used for named toolchains.

    Returns:
        Command as list of strings suitable for subprocess.
    """
    macos = platform is Platform.DARWIN
    cmd = compose_toolchain_prefix(request.toolchain, wrapper)

    # `cargo rustc` is the only subcommand that forwards raw linker flags
    cmd.append("rustc" if macos else "build")

    if request.configuration is Configuration.RELEASE:
        cmd.append("--release")

    if request.target:
        cmd.append(f"--target={request.target}")

    # Everything after `--` goes to rustc, so these must come last
    if macos:
        cmd.append("--")
        cmd.extend(DARWIN_LINKER_ARGS)

    return cmd


def run_toolchain(command: list[str], cwd: Path) -> int:
    """Run a toolchain command to completion.

    The child inherits this process's standard streams. If this process is
    interrupted while waiting, the child is killed before the interrupt
    propagates.

    Args:
        command: Command to run.
        cwd: Working directory (the native crate root).

    Returns:
        The process exit code.

    Raises:
        ToolchainNotFound: If the executable cannot be started.
    """
    logger.info("Running %s", command[0])
    logger.info("%s", shlex.join(command))
    logger.debug("Working directory: %s", cwd)

    try:
        result = subprocess.run(command, cwd=cwd, check=False)
    except OSError as e:
        logger.error("Failed to execute %s: %s", command[0], e)
        raise ToolchainNotFound(command[0], e.strerror or str(e)) from e

    if result.returncode != 0:
        logger.error("%s exited with code %d", command[0], result.returncode)
    return result.returncode


__all__ = [
    "DARWIN_LINKER_ARGS",
    "compose_cargo_command",
    "compose_toolchain_prefix",
    "run_toolchain",
]
