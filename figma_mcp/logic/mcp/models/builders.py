"""Fluent builders for tool, resource and prompt descriptors.

Builders accumulate private state and only hand out frozen descriptors from
``build()``. A descriptor always has a handler; building without one raises
:class:`MissingHandlerError`.
"""

import json
from typing import Any, Callable, Optional

from figma_mcp.lib.exceptions import DescriptorBuildError, MissingHandlerError
from figma_mcp.logic.mcp.models.mcp_types import (
    DEFAULT_RESOURCE_MIME_TYPE,
    Prompt,
    PromptArgument,
    Resource,
    Tool,
)


def _json_copy(value: Any, what: str) -> Any:
    """Deep-copy ``value`` through JSON, failing if it is not representable."""
    try:
        return json.loads(json.dumps(value, allow_nan=False))
    except (TypeError, ValueError) as e:
        raise DescriptorBuildError(f"{what} is not JSON serializable: {e}") from e


class ToolBuilder:
    """Builds a :class:`Tool` with an object-typed JSON input schema.

    Example:
        tool = (
            ToolBuilder("echo", "Echo a message back")
            .add_string_property("msg", "Message to echo", required=True)
            .set_handler(echo)
            .build()
        )
    """

    def __init__(self, name: str, description: str):
        self._name = name
        self._description = description
        self._properties: dict[str, dict[str, Any]] = {}
        self._required: list[str] = []
        self._handler: Optional[Callable[..., Any]] = None

    def add_property(
        self,
        name: str,
        prop_type: str,
        description: str,
        required: bool = False,
        **schema: Any,
    ) -> "ToolBuilder":
        """Add a property to the input schema.

        Re-adding a name replaces the earlier definition, including whether
        it is required. Extra keyword arguments are merged into the property
        schema (``enum``, ``default``, ``items``...).
        """
        self._properties[name] = {"type": prop_type, "description": description, **schema}
        if required:
            if name not in self._required:
                self._required.append(name)
        elif name in self._required:
            self._required.remove(name)
        return self

    def add_string_property(self, name: str, description: str, required: bool = False) -> "ToolBuilder":
        return self.add_property(name, "string", description, required)

    def add_number_property(self, name: str, description: str, required: bool = False) -> "ToolBuilder":
        return self.add_property(name, "number", description, required)

    def add_integer_property(self, name: str, description: str, required: bool = False) -> "ToolBuilder":
        return self.add_property(name, "integer", description, required)

    def add_boolean_property(self, name: str, description: str, required: bool = False) -> "ToolBuilder":
        return self.add_property(name, "boolean", description, required)

    def add_array_property(
        self,
        name: str,
        item_type: str,
        description: str,
        required: bool = False,
    ) -> "ToolBuilder":
        return self.add_property(name, "array", description, required, items={"type": item_type})

    def add_object_property(
        self,
        name: str,
        description: str,
        properties: Optional[dict[str, Any]] = None,
        required: bool = False,
    ) -> "ToolBuilder":
        return self.add_property(name, "object", description, required, properties=properties or {})

    def set_handler(self, handler: Callable[..., Any]) -> "ToolBuilder":
        """Bind the tool handler: ``handler(ctx, arguments) -> str``."""
        self._handler = handler
        return self

    def build(self) -> Tool:
        """Create the final Tool instance.

        Raises:
            MissingHandlerError: No handler was bound
            DescriptorBuildError: The schema cannot be represented as JSON
        """
        if self._handler is None:
            raise MissingHandlerError("tool", self._name)

        schema = _json_copy(
            {
                "type": "object",
                "properties": self._properties,
                "required": self._required,
            },
            f"input schema of tool {self._name}",
        )
        return Tool(
            name=self._name,
            description=self._description,
            input_schema=schema,
            handler=self._handler,
        )


class ResourceBuilder:
    """Builds a :class:`Resource`; MIME type defaults to ``text/plain``."""

    def __init__(self, uri: str, name: str):
        self._uri = uri
        self._name = name
        self._description: Optional[str] = None
        self._mime_type = DEFAULT_RESOURCE_MIME_TYPE
        self._handler: Optional[Callable[..., Any]] = None

    def set_description(self, description: str) -> "ResourceBuilder":
        self._description = description
        return self

    def set_mime_type(self, mime_type: str) -> "ResourceBuilder":
        self._mime_type = mime_type
        return self

    def set_handler(self, handler: Callable[..., Any]) -> "ResourceBuilder":
        """Bind the resource handler: ``handler(ctx, uri) -> str``."""
        self._handler = handler
        return self

    def build(self) -> Resource:
        if self._handler is None:
            raise MissingHandlerError("resource", self._uri)
        return Resource(
            uri=self._uri,
            name=self._name,
            description=self._description,
            mime_type=self._mime_type,
            handler=self._handler,
        )


class PromptBuilder:
    """Builds a :class:`Prompt` with ordered arguments."""

    def __init__(self, name: str):
        self._name = name
        self._description: Optional[str] = None
        self._arguments: list[PromptArgument] = []
        self._handler: Optional[Callable[..., Any]] = None

    def set_description(self, description: str) -> "PromptBuilder":
        self._description = description
        return self

    def add_argument(self, name: str, description: Optional[str] = None, required: bool = False) -> "PromptBuilder":
        """Append an argument; re-adding a name replaces it in its original position."""
        argument = PromptArgument(name=name, description=description, required=required)
        for index, existing in enumerate(self._arguments):
            if existing.name == name:
                self._arguments[index] = argument
                return self
        self._arguments.append(argument)
        return self

    def set_handler(self, handler: Callable[..., Any]) -> "PromptBuilder":
        """Bind the prompt handler: ``handler(arguments) -> list of messages``."""
        self._handler = handler
        return self

    def build(self) -> Prompt:
        if self._handler is None:
            raise MissingHandlerError("prompt", self._name)
        return Prompt(
            name=self._name,
            description=self._description,
            arguments=tuple(self._arguments),
            handler=self._handler,
        )
