"""Unified configuration management for figma-mcp."""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from figma_mcp.logic.mcp.protocol.capabilities import (
    DEFAULT_PROTOCOL_VERSION,
    CapabilitiesBuilder,
    ServerCapabilities,
)
from figma_mcp.version import __version__

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class McpSettings(BaseSettings):
    """figma-mcp configuration with environment variable support."""

    # Server identity
    server_name: str = Field(default="figma-mcp", min_length=1)
    server_version: str = Field(default=__version__, min_length=1)
    protocol_version: str = Field(default=DEFAULT_PROTOCOL_VERSION)

    # Capability switches
    enable_tools: bool = Field(default=True)
    enable_resources: bool = Field(default=True)
    enable_resource_subscribe: bool = Field(default=False)
    enable_prompts: bool = Field(default=True)
    enable_logging: bool = Field(default=False)
    enable_completion: bool = Field(default=True)

    # Logging configuration
    debug: bool = Field(default=False)
    log_level: str = Field(default="WARNING")
    log_file: Optional[Path] = Field(default=None)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="FIGMA_MCP_",
        extra="ignore",
        validate_assignment=True
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level name."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {', '.join(LOG_LEVELS)}")
        return level

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level

    def build_capabilities(self) -> ServerCapabilities:
        """Turn the capability switches into an advertised capability set."""
        builder = CapabilitiesBuilder()
        if self.enable_tools:
            builder.enable_tools()
        if self.enable_resources:
            builder.enable_resources(subscribe=self.enable_resource_subscribe)
        if self.enable_prompts:
            builder.enable_prompts()
        if self.enable_logging:
            builder.enable_logging()
        if self.enable_completion:
            builder.enable_completion()
        return builder.build()


# Global configuration instance
_config: Optional[McpSettings] = None


def get_config() -> McpSettings:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = McpSettings()
    return _config


def reload_config() -> McpSettings:
    """Reload configuration from environment and files."""
    global _config
    _config = McpSettings()
    return _config
