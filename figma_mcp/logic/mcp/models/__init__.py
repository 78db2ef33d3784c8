"""MCP data models, schemas and descriptor builders."""

from .builders import PromptBuilder, ResourceBuilder, ToolBuilder
from .mcp_types import (
    Prompt,
    PromptArgument,
    PromptMessage,
    PromptResult,
    Resource,
    ResourceContents,
    TextContent,
    Tool,
)

__all__ = [
    "Tool",
    "ToolBuilder",
    "Resource",
    "ResourceBuilder",
    "ResourceContents",
    "Prompt",
    "PromptArgument",
    "PromptBuilder",
    "PromptMessage",
    "PromptResult",
    "TextContent",
]
