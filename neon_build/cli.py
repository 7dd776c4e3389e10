"""Thin CLI wrapper for neon_build.

This module provides the command-line interface using Typer.
All business logic is delegated to core modules.
"""

import json
import logging
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from neon_build import __version__
from neon_build.builds.platform import BuildEnvironment
from neon_build.config import Settings, get_settings, print_settings_json
from neon_build.errors import NeonBuildError
from neon_build.types import Configuration

app = typer.Typer(
    name="neon-build",
    help="Neon Build - compile the native module of a Node.js + Rust project",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"neon-build version {__version__}")
        raise typer.Exit()


def configure_logging(level: str) -> None:
    """Send log records to stderr through Rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Neon Build - compile the native module of a Node.js + Rust project."""
    configure_logging(get_settings().log_level)


def _echo_json(data: object) -> None:
    # Plain echo: Rich would wrap long paths and break the JSON
    typer.echo(json.dumps(data, indent=2))


def _fail(error: NeonBuildError, json_output: bool) -> NoReturn:
    if json_output:
        _echo_json({"success": False, "error": error.to_dict()})
    else:
        err_console.print(f"[red]Error: {escape(str(error))}[/red]")
    raise typer.Exit(code=1) from error


ToolchainOption = Annotated[
    str | None,
    typer.Option(
        "--toolchain",
        "-t",
        help="Toolchain name ('default' runs cargo directly)",
    ),
]
ReleaseOption = Annotated[
    bool,
    typer.Option("--release/--debug", help="Build profile"),
]
ProjectRootOption = Annotated[
    Path | None,
    typer.Option(
        "--project-root",
        "-C",
        help="Project root (defaults to the current directory)",
        file_okay=False,
    ),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Output as JSON"),
]


def _environment(settings: Settings, project_root: Path | None) -> BuildEnvironment:
    return BuildEnvironment.from_process(
        project_root=project_root,
        arch_env_var=settings.arch_env_var,
    )


@app.command("build")
def build_cmd(
    toolchain: ToolchainOption = None,
    release: ReleaseOption = False,
    project_root: ProjectRootOption = None,
    json_output: JsonOption = False,
) -> None:
    """Build the native crate and publish it as native/index.node."""
    from neon_build.builds.service import build

    settings = get_settings()
    configuration = Configuration.RELEASE if release else Configuration.DEBUG

    try:
        outcome = build(
            toolchain or settings.toolchain,
            configuration,
            environment=_environment(settings, project_root),
            settings=settings,
        )
    except NeonBuildError as e:
        _fail(e, json_output)

    if json_output:
        _echo_json({"success": True, **outcome.to_dict()})
    else:
        published = escape(str(outcome.artifact.path))
        console.print(f"[green]Published {published}[/green]")
        console.print(f"  Built from: {outcome.plan.paths.built_path}")
        console.print(f"  SHA-256:    {outcome.artifact.sha256}")
        console.print(f"  Duration:   {outcome.duration_seconds:.1f}s")


@app.command("paths")
def paths_cmd(
    toolchain: ToolchainOption = None,
    release: ReleaseOption = False,
    project_root: ProjectRootOption = None,
    json_output: JsonOption = False,
) -> None:
    """Show the cargo command and artifact paths without building."""
    from neon_build.builds.service import plan_build

    settings = get_settings()
    configuration = Configuration.RELEASE if release else Configuration.DEBUG

    try:
        plan = plan_build(
            toolchain or settings.toolchain,
            configuration,
            environment=_environment(settings, project_root),
            settings=settings,
        )
    except NeonBuildError as e:
        _fail(e, json_output)

    if json_output:
        _echo_json(plan.to_dict())
    else:
        console.print("[bold]Build Plan:[/bold]")
        console.print(f"  Library:       {plan.manifest.library_name}")
        console.print(f"  Configuration: {plan.request.configuration.value}")
        console.print(f"  Target:        {plan.request.target or '(host default)'}")
        console.print(f"  Command:       {escape(plan.command_line)}")
        console.print(f"  Built path:    {plan.paths.built_path}")
        console.print(f"  Publish path:  {plan.paths.publish_path}")


@app.command()
def config(
    json_output: JsonOption = False,
) -> None:
    """Show effective configuration."""
    settings = get_settings()
    if json_output:
        typer.echo(print_settings_json(settings))
    else:
        console.print("[bold]Effective Configuration:[/bold]")
        console.print()
        console.print("[bold]Project layout:[/bold]")
        console.print(f"  Native directory:    {settings.native_dir}")
        console.print(f"  Manifest:            {settings.manifest_name}")
        console.print(f"  Publish name:        {settings.publish_name}")
        console.print()
        console.print("[bold]Toolchain:[/bold]")
        console.print(f"  Toolchain:           {settings.toolchain}")
        console.print(f"  Toolchain wrapper:   {settings.toolchain_wrapper}")
        console.print(f"  Arch override var:   {settings.arch_env_var}")
        console.print()
        console.print("[bold]Operational:[/bold]")
        console.print(f"  Log level:           {settings.log_level}")


if __name__ == "__main__":
    app()
