"""Tests for shared types module."""

import dataclasses

import pytest

from neon_build.types import DEFAULT_TOOLCHAIN, BuildRequest, Configuration, Platform


class TestEnums:
    """Test enum definitions."""

    def test_configuration_values(self) -> None:
        """Configuration should match cargo's profile directories."""
        assert Configuration.DEBUG.value == "debug"
        assert Configuration.RELEASE.value == "release"

    def test_configuration_from_string(self) -> None:
        """Configuration should be constructible from its value."""
        assert Configuration("release") is Configuration.RELEASE

    def test_platform_values(self) -> None:
        """Platform should use sys.platform style identifiers."""
        assert {p.value for p in Platform} == {
            "darwin",
            "freebsd",
            "linux",
            "sunos",
            "win32",
        }


class TestBuildRequest:
    """Test BuildRequest dataclass."""

    def test_defaults(self) -> None:
        """Target should default to the host."""
        request = BuildRequest(DEFAULT_TOOLCHAIN, Configuration.DEBUG)
        assert request.toolchain == "default"
        assert request.target is None

    def test_immutable(self) -> None:
        """BuildRequest should be frozen."""
        request = BuildRequest("default", Configuration.DEBUG)
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.toolchain = "nightly"  # type: ignore[misc]
