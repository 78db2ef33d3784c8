"""Serve command for figma-mcp CLI."""

import asyncio
import contextlib
import signal
import sys

import click

from figma_mcp.cli.app import McpApp, get_app
from figma_mcp.lib.exceptions import ConfigurationError, MessageDecodeError


async def _serve_stdio(app: McpApp) -> str:
    cancel_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not available on Windows event loops
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, cancel_event.set)

    reason = await app.server.serve_stdio(cancel_event)
    return reason.value


@click.command(name="serve")
@click.pass_context
def serve(ctx: click.Context):
    """Serve the Model Context Protocol over stdin/stdout.

    Requests are read from stdin and responses written to stdout; logs go
    to stderr. The server stops at end of input or on SIGINT/SIGTERM.

    \b
    CLIENT SETUP:
      {"command": "figma-mcp", "args": ["serve"]}
    """
    app = get_app(ctx)

    try:
        app.logger.info(f"Serving {app.config.server_name} over stdio")
        reason = asyncio.run(_serve_stdio(app))
        app.logger.info(f"Server stopped: {reason}")

    except ConfigurationError as e:
        app.logger.error(f"Server setup failed: {e.message}", extra={"details": e.details})
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    except MessageDecodeError as e:
        app.logger.error(f"Malformed input, stopping: {e.message}", extra={"details": e.details})
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)
