"""Pydantic models for plugdeps.yaml configuration."""

from typing import Literal

from pydantic import BaseModel, Field


class PluginsConfig(BaseModel):
    """Where installed plugins and their activation state live."""

    directory: str = Field(
        default="~/.plugdeps/plugins",
        description="Plugins directory (single files and one-level subdirectories)",
    )
    state_file: str = Field(
        default="~/.plugdeps/state.yaml",
        description="YAML file listing active plugin ids",
    )
    blocked: list[str] = Field(
        default_factory=list,
        description="Plugin ids to ignore during discovery",
    )


class ForcedConfig(BaseModel):
    """Forced dependency table source."""

    path: str | None = Field(
        default=None,
        description="Local JSON forced dependency table (built-in defaults if unset)",
    )
    url: str | None = Field(
        default=None,
        description="Remote JSON forced dependency table, takes precedence over path",
    )
    cache_path: str = Field(
        default="~/.plugdeps/forced.json",
        description="Where the remote table is cached for offline use",
    )
    timeout: float = Field(default=10.0, description="Fetch timeout in seconds", gt=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Log level for plugdeps loggers",
    )


class PlugdepsConfig(BaseModel):
    """Root configuration model."""

    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    forced: ForcedConfig = Field(default_factory=ForcedConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
