"""Application wiring shared by the CLI commands."""

from typing import Optional

import click
from rich.console import Console

from figma_mcp.core.config import McpSettings
from figma_mcp.core.lib_logger import get_component_logger, setup_logging
from figma_mcp.logic.mcp.core.server import McpServer
from figma_mcp.logic.mcp.services.builtin import register_builtin_capabilities


class McpApp:
    """Main figma-mcp application."""

    def __init__(self, config: Optional[McpSettings] = None):
        """Initialize figma-mcp application."""
        self.config = config or McpSettings()
        self.console = Console()
        self.logger = None
        self._server: Optional[McpServer] = None

    def initialize(self, debug: bool = False, log_level: Optional[str] = None) -> None:
        """Apply command line overrides and set up logging."""
        if debug:
            self.config.debug = True
        if log_level:
            self.config.log_level = log_level
        setup_logging(self.config)
        self.logger = get_component_logger("cli")

    @property
    def server(self) -> McpServer:
        """Server with the configured capabilities and built-ins registered."""
        if self._server is None:
            self._server = build_server(self.config)
        return self._server


def build_server(config: McpSettings) -> McpServer:
    """Create a server from settings and register the built-in collaborators."""
    server = McpServer(
        name=config.server_name,
        version=config.server_version,
        capabilities=config.build_capabilities(),
        protocol_version=config.protocol_version,
    )
    register_builtin_capabilities(server)
    return server


def get_app(ctx: click.Context) -> McpApp:
    """Get the application stored on the click context."""
    return ctx.ensure_object(dict)["app"]
