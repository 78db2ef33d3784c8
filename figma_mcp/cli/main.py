"""Main CLI entry point for figma-mcp."""

import click
from pydantic import ValidationError

from figma_mcp.cli.app import McpApp
from figma_mcp.cli.commands.describe import capabilities, tools
from figma_mcp.cli.commands.serve import serve
from figma_mcp.core.config import LOG_LEVELS, McpSettings
from figma_mcp.version import __version__


@click.group()
@click.version_option(__version__, "--version", "-v", help="Show version and exit")
@click.option("--debug", is_flag=True, help="Enable debug output")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level (overrides FIGMA_MCP_LOG_LEVEL)",
)
@click.pass_context
def main(ctx: click.Context, debug: bool, log_level: str | None):
    """figma-mcp - Model Context Protocol server over stdio.

    \b
    QUICK START:
      figma-mcp serve              # Serve MCP over stdin/stdout
      figma-mcp capabilities       # Show the advertised capability set
      figma-mcp tools              # List registered tools, resources and prompts

    \b
    CONFIGURATION:
      Settings are read from FIGMA_MCP_* environment variables or a .env
      file, e.g. FIGMA_MCP_ENABLE_PROMPTS=false or FIGMA_MCP_LOG_FILE=mcp.log.
    """
    try:
        config = McpSettings()
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    app = McpApp(config)
    app.initialize(debug=debug, log_level=log_level)

    ctx.ensure_object(dict)
    ctx.obj["app"] = app


main.add_command(serve)
main.add_command(capabilities)
main.add_command(tools)


if __name__ == "__main__":
    main()
