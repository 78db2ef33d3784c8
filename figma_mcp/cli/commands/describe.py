"""Inspection commands for figma-mcp CLI."""

import json

import click
from rich.table import Table

from figma_mcp.cli.app import get_app


@click.command(name="capabilities")
@click.pass_context
def capabilities(ctx: click.Context):
    """Print the configured capability set as JSON."""
    app = get_app(ctx)
    caps = app.config.build_capabilities()
    payload = {
        "protocolVersion": app.config.protocol_version,
        "serverInfo": {"name": app.config.server_name, "version": app.config.server_version},
        "capabilities": caps.to_wire(),
    }
    click.echo(json.dumps(payload, indent=2))


@click.command(name="tools")
@click.pass_context
def tools(ctx: click.Context):
    """List the registered tools, resources and prompts."""
    app = get_app(ctx)
    server = app.server

    table = Table(title=f"{server.name} v{server.version}")
    table.add_column("Kind", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Description")
    table.add_column("Required", style="yellow")

    for tool in server.tools.list():
        table.add_row("tool", tool.name, tool.description, ", ".join(tool.required_arguments))
    for resource in server.resources.list():
        table.add_row("resource", resource.uri, resource.description or resource.name, "")
    for prompt in server.prompts.list():
        table.add_row("prompt", prompt.name, prompt.description or "", ", ".join(prompt.required_arguments))

    app.console.print(table)

    disabled = [
        name for name in ("tools", "resources", "prompts")
        if not server.capabilities.is_enabled(name)
    ]
    if disabled:
        app.console.print(f"[yellow]Not advertised (disabled):[/yellow] {', '.join(disabled)}")
