"""Configuration settings for neon_build.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: CLI flags > env vars > defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the NEON_BUILD_
    prefix. CLI flags can override these at runtime.
    """

    model_config = SettingsConfigDict(
        env_prefix="NEON_BUILD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Project layout
    native_dir: str = Field(
        default="native",
        min_length=1,
        description="Native crate directory, relative to the project root",
    )
    manifest_name: str = Field(
        default="Cargo.toml",
        min_length=1,
        description="Build manifest filename inside the native directory",
    )
    publish_name: str = Field(
        default="index.node",
        min_length=1,
        description="Filename the Node.js runtime loads the native module from",
    )

    # Toolchain
    toolchain: str = Field(
        default="default",
        min_length=1,
        description="Toolchain name ('default' invokes cargo directly)",
    )
    toolchain_wrapper: str = Field(
        default="rustup",
        min_length=1,
        description="Multiplexer used to run a named toolchain",
    )
    arch_env_var: str = Field(
        default="npm_config_arch",
        min_length=1,
        description="Environment variable overriding the target arch on Windows",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )


def get_settings() -> Settings:
    """Get the application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    return settings.model_dump_json(indent=2)


__all__ = ["Settings", "get_settings", "print_settings_json"]
