"""
MCP Core Types

Models for MCP tools, resources, prompts and the request/result payloads
https://modelcontextprotocol.io/

Descriptors (Tool, Resource, Prompt) are frozen and carry their bound
handler, which is excluded from serialization.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Callable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, JsonValue, field_serializer, field_validator

Arguments = dict[str, JsonValue]

DEFAULT_RESOURCE_MIME_TYPE = "text/plain"


def _freeze(value: Any) -> Any:
    """Return a read-only view of a JSON value: mappings become proxies, lists tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    """Return a fresh mutable copy of a value produced by :func:`_freeze`."""
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


class Tool(BaseModel):
    """
    MCP Tool definition.

    Tools represent callable functions/commands that can be invoked by clients.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1, description="Unique tool identifier")
    description: str = Field(..., description="Human-readable tool description")
    input_schema: Mapping[str, Any] = Field(
        ...,
        alias="inputSchema",
        description="JSON Schema for tool parameters",
    )
    handler: Callable[..., Any] = Field(..., exclude=True, repr=False)

    @field_validator("input_schema")
    @classmethod
    def freeze_schema(cls, v: Mapping[str, Any]) -> Mapping[str, Any]:
        """Store the schema as a read-only view."""
        return _freeze(v)

    @field_serializer("input_schema")
    def serialize_schema(self, v: Mapping[str, Any]) -> dict[str, Any]:
        return _thaw(v)

    @property
    def key(self) -> str:
        return self.name

    @property
    def required_arguments(self) -> list[str]:
        return list(self.input_schema.get("required", ()))

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class Resource(BaseModel):
    """
    MCP Resource definition.

    Resources represent data that can be read by clients (files, documents, etc).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    uri: str = Field(..., min_length=1, description="Unique resource URI")
    name: str = Field(..., description="Human-readable resource name")
    description: Optional[str] = Field(
        None,
        description="Optional resource description",
    )
    mime_type: str = Field(
        DEFAULT_RESOURCE_MIME_TYPE,
        alias="mimeType",
        description="MIME type of the resource content",
    )
    handler: Callable[..., Any] = Field(..., exclude=True, repr=False)

    @property
    def key(self) -> str:
        return self.uri

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class PromptArgument(BaseModel):
    """Named argument accepted by a prompt template."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Argument name")
    description: Optional[str] = Field(None, description="Argument description")
    required: bool = Field(False, description="Whether the argument must be supplied")


class Prompt(BaseModel):
    """
    MCP Prompt template.

    Prompts are reusable message templates that clients can use.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1, description="Unique prompt identifier")
    description: Optional[str] = Field(
        None,
        description="Prompt description",
    )
    arguments: tuple[PromptArgument, ...] = Field(
        default=(),
        description="Ordered prompt arguments",
    )
    handler: Callable[..., Any] = Field(..., exclude=True, repr=False)

    @property
    def key(self) -> str:
        return self.name

    @property
    def required_arguments(self) -> list[str]:
        return [argument.name for argument in self.arguments if argument.required]

    def to_wire(self) -> dict[str, Any]:
        data = self.model_dump(exclude_none=True)
        if not data["arguments"]:
            del data["arguments"]
        else:
            data["arguments"] = list(data["arguments"])
        return data


Descriptor = Union[Tool, Resource, Prompt]


class TextContent(BaseModel):
    """Text content block."""

    type: Literal["text"] = "text"
    text: str


class ResourceContents(BaseModel):
    """
    MCP Resource contents returned when reading a resource.
    """

    model_config = ConfigDict(populate_by_name=True)

    uri: str = Field(..., description="Resource URI")
    mime_type: Optional[str] = Field(
        None,
        alias="mimeType",
        description="MIME type of the content",
    )
    text: Optional[str] = Field(
        None,
        description="Text content (for text-based resources)",
    )
    blob: Optional[str] = Field(
        None,
        description="Base64-encoded binary content",
    )


class PromptMessage(BaseModel):
    """
    Message within a prompt template.
    """

    role: str = Field(..., min_length=1, description="Message role (user/assistant)")
    content: list[TextContent] = Field(..., description="Message content")

    @classmethod
    def text(cls, role: str, text: str) -> "PromptMessage":
        return cls(role=role, content=[TextContent(text=text)])

    @classmethod
    def coerce(cls, value: Any) -> "PromptMessage":
        """Accept a PromptMessage or a ``{"role", "content"}`` mapping.

        A plain string ``content`` is wrapped into a single text block.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, dict) and isinstance(value.get("content"), str):
            return cls.text(value.get("role", ""), value["content"])
        return cls.model_validate(value)


# Request params


class ToolCallParams(BaseModel):
    """Params for tools/call."""

    name: str
    arguments: Arguments = Field(default_factory=dict)


class ResourceReadParams(BaseModel):
    """Params for resources/read."""

    uri: str


class PromptGetParams(BaseModel):
    """Params for prompts/get."""

    name: str
    arguments: Optional[Arguments] = None


class CompletionRef(BaseModel):
    """What is being completed: a prompt (by name) or a resource (by uri)."""

    type: str = Field(..., description="ref/prompt or ref/resource")
    name: Optional[str] = None
    uri: Optional[str] = None


class CompletionArgument(BaseModel):
    """The argument being completed and its current partial value."""

    name: str
    value: str = ""


class CompletionParams(BaseModel):
    """Params for completion/complete."""

    ref: CompletionRef
    argument: CompletionArgument


# Results


class ToolCallResult(BaseModel):
    """Response for tools/call method."""

    content: list[TextContent]


class ResourceReadResult(BaseModel):
    """Response for resources/read method."""

    contents: list[ResourceContents]


class PromptResult(BaseModel):
    """
    Result when retrieving a prompt.
    """

    description: Optional[str] = Field(None, description="Prompt description")
    messages: list[PromptMessage] = Field(..., description="Prompt messages")


class CompletionValues(BaseModel):
    """Completion candidates for a single argument."""

    model_config = ConfigDict(populate_by_name=True)

    values: list[str] = Field(default_factory=list)
    total: int = 0
    has_more: bool = Field(False, alias="hasMore")


class CompletionResult(BaseModel):
    """Response for completion/complete method."""

    completion: CompletionValues
