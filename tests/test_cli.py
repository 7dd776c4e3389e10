"""Smoke tests for the CLI.

These tests verify CLI behaviour with a mocked cargo; no Rust toolchain
is needed.
"""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from neon_build import __version__
from neon_build.builds.platform import BuildEnvironment
from neon_build.builds.service import plan_build
from neon_build.cli import app
from neon_build.config import Settings

runner = CliRunner()

CARGO_TOML = '[package]\nname = "addon"\n\n[lib]\nname = "addon"\n'


@pytest.fixture
def project(tmp_path) -> Path:
    """Create a project with a native crate."""
    native = tmp_path / "native"
    native.mkdir()
    (native / "Cargo.toml").write_text(CARGO_TOML, encoding="utf-8")
    return tmp_path


def host_built_path(project: Path, configuration: str) -> Path:
    """Where cargo would write the library on this host."""
    settings = Settings()
    env = BuildEnvironment.from_process(
        project_root=project, arch_env_var=settings.arch_env_var
    )
    plan = plan_build("default", configuration, environment=env, settings=settings)
    return plan.paths.built_path


def fake_cargo(built_path: Path, returncode: int = 0):
    """Return a subprocess.run side effect that writes the library."""

    def run(cmd, cwd, check):
        if returncode == 0:
            built_path.parent.mkdir(parents=True, exist_ok=True)
            built_path.write_bytes(b"compiled")
        return MagicMock(returncode=returncode)

    return run


class TestCLIHelp:
    """Test CLI help and version commands."""

    def test_help_returns_zero(self) -> None:
        """CLI --help should return exit code 0."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Neon Build" in result.stdout

    def test_version_flag(self) -> None:
        """CLI --version should print version and exit 0."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_short_version_flag(self) -> None:
        """CLI -V should print version and exit 0."""
        result = runner.invoke(app, ["-V"])
        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestCLIConfig:
    """Test CLI config command."""

    def test_config_command(self) -> None:
        """CLI config should show configuration."""
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "Native directory" in result.stdout
        assert "Toolchain wrapper" in result.stdout

    def test_config_json(self) -> None:
        """CLI config --json should print valid JSON."""
        result = runner.invoke(app, ["config", "--json"])
        assert result.exit_code == 0
        assert "publish_name" in json.loads(result.stdout)


class TestCLIBuild:
    """Test CLI build command."""

    def test_build_success(self, project) -> None:
        """Should publish index.node and exit 0."""
        built = host_built_path(project, "debug")

        with patch("neon_build.builds.runner.subprocess.run") as mock_run:
            mock_run.side_effect = fake_cargo(built)
            result = runner.invoke(app, ["build", "--project-root", str(project)])

        assert result.exit_code == 0, result.output
        assert "Published" in result.stdout
        assert (project / "native" / "index.node").read_bytes() == b"compiled"

    def test_build_release_json(self, project) -> None:
        """--release --json should report the outcome as JSON."""
        built = host_built_path(project, "release")

        with patch("neon_build.builds.runner.subprocess.run") as mock_run:
            mock_run.side_effect = fake_cargo(built)
            result = runner.invoke(
                app,
                ["build", "--release", "--json", "--project-root", str(project)],
            )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["success"] is True
        assert data["configuration"] == "release"
        assert "--release" in data["command"]
        assert data["exit_code"] == 0

    def test_build_named_toolchain(self, project) -> None:
        """--toolchain should run cargo through the wrapper."""
        built = host_built_path(project, "debug")

        with patch("neon_build.builds.runner.subprocess.run") as mock_run:
            mock_run.side_effect = fake_cargo(built)
            result = runner.invoke(
                app,
                ["build", "-t", "nightly", "--project-root", str(project)],
            )

        assert result.exit_code == 0, result.output
        assert mock_run.call_args.args[0][:4] == ["rustup", "run", "nightly", "cargo"]

    def test_build_failure_exits_nonzero(self, project) -> None:
        """A failed cargo build should exit 1 and publish nothing."""
        with patch("neon_build.builds.runner.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=101)
            result = runner.invoke(
                app, ["build", "--json", "--project-root", str(project)]
            )

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["success"] is False
        assert data["error"]["code"] == "build_failed"
        assert data["error"]["exit_code"] == 101
        assert not (project / "native" / "index.node").exists()

    def test_build_missing_manifest_field(self, project) -> None:
        """Manifest errors should exit 1 without running cargo."""
        (project / "native" / "Cargo.toml").write_text('[package]\nname = "x"\n')

        with patch("neon_build.builds.runner.subprocess.run") as mock_run:
            result = runner.invoke(app, ["build", "--project-root", str(project)])

        assert result.exit_code == 1
        mock_run.assert_not_called()

    def test_build_without_native_dir(self, tmp_path) -> None:
        """A project without native/ should exit 1."""
        result = runner.invoke(
            app, ["build", "--json", "--project-root", str(tmp_path)]
        )
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["error"]["code"] == "native_project_not_found"


class TestCLIPaths:
    """Test CLI paths command."""

    def test_paths_json(self, project) -> None:
        """Should report the plan without running cargo."""
        with patch("neon_build.builds.runner.subprocess.run") as mock_run:
            result = runner.invoke(
                app, ["paths", "--json", "--project-root", str(project)]
            )

        assert result.exit_code == 0, result.output
        mock_run.assert_not_called()
        data = json.loads(result.stdout)
        assert data["library_name"] == "addon"
        assert data["publish_path"] == str(project.resolve() / "native" / "index.node")

    def test_paths_human(self, project) -> None:
        """Should print a readable plan."""
        result = runner.invoke(app, ["paths", "--project-root", str(project)])
        assert result.exit_code == 0, result.output
        assert "Build Plan" in result.stdout
        assert "addon" in result.stdout
