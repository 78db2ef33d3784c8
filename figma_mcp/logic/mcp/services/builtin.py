"""
Built-in tools, resources and prompts.

A small default set registered by the command line so a freshly started
server has something to list, call and read.
"""

import json
import logging
import platform
from typing import Any

from figma_mcp.logic.mcp.core.context import RequestContext
from figma_mcp.logic.mcp.core.server import McpServer
from figma_mcp.logic.mcp.models.builders import PromptBuilder, ResourceBuilder, ToolBuilder
from figma_mcp.logic.mcp.models.mcp_types import CompletionArgument, CompletionRef, PromptMessage
from figma_mcp.logic.mcp.utils.arguments import (
    optional_bool,
    optional_string,
    require_number,
    require_string,
)

logger = logging.getLogger(__name__)

SERVER_INFO_URI = "server://info"

REVIEW_LANGUAGES = (
    "c", "cpp", "csharp", "css", "go", "html", "java", "javascript", "kotlin",
    "python", "ruby", "rust", "scala", "sql", "swift", "typescript",
)


def echo_tool(ctx: RequestContext, arguments: dict[str, Any]) -> str:
    """Return the message unchanged, or upper-cased when asked."""
    message = require_string(arguments, "msg", allow_empty=True)
    if optional_bool(arguments, "uppercase", default=False):
        return message.upper()
    return message


def add_tool(ctx: RequestContext, arguments: dict[str, Any]) -> str:
    """Add two numbers."""
    total = require_number(arguments, "a") + require_number(arguments, "b")
    if total.is_integer():
        return str(int(total))
    return repr(total)


def review_prompt(arguments: dict[str, Any]) -> list[PromptMessage]:
    code = require_string(arguments, "code")
    language = optional_string(arguments, "language")

    intro = f"Please review the following {language} code" if language else "Please review the following code"
    fence = language or ""
    return [
        PromptMessage.text("user", f"{intro} for bugs, readability and style:\n\n```{fence}\n{code}\n```"),
    ]


def complete_argument(ref: CompletionRef, argument: CompletionArgument) -> list[str]:
    """Complete the ``language`` argument of the review prompt by prefix."""
    if ref.type != "ref/prompt" or ref.name != "review" or argument.name != "language":
        return []
    prefix = argument.value.lower()
    return [language for language in REVIEW_LANGUAGES if language.startswith(prefix)]


def register_builtin_capabilities(server: McpServer) -> None:
    """
    Register the built-in tools, resource, prompt and completion handler.

    Args:
        server: Server to register on; must not be serving yet
    """
    server.register_tool(
        ToolBuilder("echo", "Echo a message back to the caller")
        .add_string_property("msg", "Message to echo", required=True)
        .add_boolean_property("uppercase", "Upper-case the message before echoing")
        .set_handler(echo_tool)
        .build()
    )
    server.register_tool(
        ToolBuilder("add", "Add two numbers")
        .add_number_property("a", "First operand", required=True)
        .add_number_property("b", "Second operand", required=True)
        .set_handler(add_tool)
        .build()
    )

    def server_info(ctx: RequestContext, uri: str) -> str:
        info = {
            "name": server.name,
            "version": server.version,
            "protocolVersion": server.protocol.protocol_version,
            "capabilities": server.capabilities.enabled_names(),
            "tools": [tool.name for tool in server.tools.list()],
            "resources": [resource.uri for resource in server.resources.list()],
            "prompts": [prompt.name for prompt in server.prompts.list()],
            "python": platform.python_version(),
        }
        return json.dumps(info, indent=2)

    server.register_resource(
        ResourceBuilder(SERVER_INFO_URI, "Server information")
        .set_description("Name, version and registered capabilities of this server")
        .set_mime_type("application/json")
        .set_handler(server_info)
        .build()
    )
    server.register_prompt(
        PromptBuilder("review")
        .set_description("Ask for a code review")
        .add_argument("code", "Code to review", required=True)
        .add_argument("language", "Programming language of the code")
        .set_handler(review_prompt)
        .build()
    )
    server.set_completion_handler(complete_argument)

    logger.debug(
        f"Registered built-ins: {len(server.tools)} tools, "
        f"{len(server.resources)} resources, {len(server.prompts)} prompts"
    )
