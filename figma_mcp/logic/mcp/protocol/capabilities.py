"""
MCP Capability Negotiation Models

Implements server and client capability models for the MCP protocol.
Used during initialization handshake to declare supported features.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PROTOCOL_VERSION = "2024-11-05"

CAPABILITY_NAMES = ("tools", "resources", "prompts", "logging", "completion")


class ToolsCapability(BaseModel):
    """Tools capability configuration."""

    model_config = ConfigDict(frozen=True)

    provider: bool = Field(default=False, description="Server can provide tools")


class ResourcesCapability(BaseModel):
    """Resources capability configuration."""

    model_config = ConfigDict(frozen=True)

    provider: bool = Field(default=False, description="Server can provide resources")
    subscribe: bool = Field(
        default=False,
        description="Server supports resource subscriptions for real-time updates",
    )


class PromptsCapability(BaseModel):
    """Prompts capability configuration."""

    model_config = ConfigDict(frozen=True)

    provider: bool = Field(default=False, description="Server can provide prompts")


class LoggingCapability(BaseModel):
    """Logging capability configuration."""

    model_config = ConfigDict(frozen=True)

    provider: bool = Field(default=False, description="Server can provide logging")


class CompletionCapability(BaseModel):
    """Completion capability configuration."""

    model_config = ConfigDict(frozen=True)

    provider: bool = Field(default=False, description="Server can provide argument completion")


class ServerCapabilities(BaseModel):
    """Server capabilities exposed during initialization.

    A capability left as ``None`` is absent; that matters for :meth:`merge`,
    where only capabilities present in the other set override this one.
    """

    model_config = ConfigDict(frozen=True)

    tools: Optional[ToolsCapability] = Field(
        default=None,
        description="Tools capability (function calling)",
    )
    resources: Optional[ResourcesCapability] = Field(
        default=None,
        description="Resources capability (data access)",
    )
    prompts: Optional[PromptsCapability] = Field(
        default=None,
        description="Prompts capability (prompt templates)",
    )
    logging: Optional[LoggingCapability] = Field(
        default=None,
        description="Logging capability",
    )
    completion: Optional[CompletionCapability] = Field(
        default=None,
        description="Completion capability",
    )

    @classmethod
    def default(cls) -> "ServerCapabilities":
        """Every capability present, every capability disabled."""
        return cls(
            tools=ToolsCapability(),
            resources=ResourcesCapability(),
            prompts=PromptsCapability(),
            logging=LoggingCapability(),
            completion=CompletionCapability(),
        )

    @classmethod
    def all_enabled(cls) -> "ServerCapabilities":
        """Every capability enabled, including resource subscriptions."""
        return cls(
            tools=ToolsCapability(provider=True),
            resources=ResourcesCapability(provider=True, subscribe=True),
            prompts=PromptsCapability(provider=True),
            logging=LoggingCapability(provider=True),
            completion=CompletionCapability(provider=True),
        )

    @classmethod
    def with_tools(cls) -> "ServerCapabilities":
        return CapabilitiesBuilder().enable_tools().build()

    @classmethod
    def with_resources(cls, subscribe: bool = False) -> "ServerCapabilities":
        return CapabilitiesBuilder().enable_resources(subscribe).build()

    @classmethod
    def with_prompts(cls) -> "ServerCapabilities":
        return CapabilitiesBuilder().enable_prompts().build()

    @classmethod
    def with_logging(cls) -> "ServerCapabilities":
        return CapabilitiesBuilder().enable_logging().build()

    @classmethod
    def with_completion(cls) -> "ServerCapabilities":
        return CapabilitiesBuilder().enable_completion().build()

    def merge(self, other: "ServerCapabilities") -> "ServerCapabilities":
        """Combine two capability sets, with ``other`` taking precedence.

        A capability present in ``other`` replaces the whole field here,
        sub-options included. Capabilities absent from ``other`` are kept.
        """
        overrides = {
            name: getattr(other, name)
            for name in CAPABILITY_NAMES
            if getattr(other, name) is not None
        }
        return self.model_copy(update=overrides)

    def is_enabled(self, name: str) -> bool:
        """Check whether a single capability is present and enabled."""
        if name not in CAPABILITY_NAMES:
            raise KeyError(f"Unknown capability: {name}")
        capability = getattr(self, name)
        return capability is not None and capability.provider

    def has_any_capability(self) -> bool:
        """Return True if any capability is enabled."""
        return any(self.is_enabled(name) for name in CAPABILITY_NAMES)

    def enabled_names(self) -> list[str]:
        return [name for name in CAPABILITY_NAMES if self.is_enabled(name)]

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class CapabilitiesBuilder:
    """Accumulates enabled features and materializes a frozen ServerCapabilities.

    Every ``enable_*`` call only turns features on, so calling one twice has
    no further effect. ``build`` may be called repeatedly; each call returns
    an independent snapshot.

    Example:
        capabilities = (
            CapabilitiesBuilder()
            .enable_tools()
            .enable_resources(subscribe=False)
            .build()
        )
    """

    def __init__(self) -> None:
        self._tools = False
        self._resources = False
        self._subscribe = False
        self._prompts = False
        self._logging = False
        self._completion = False

    def enable_tools(self) -> "CapabilitiesBuilder":
        self._tools = True
        return self

    def enable_resources(self, subscribe: bool = False) -> "CapabilitiesBuilder":
        self._resources = True
        self._subscribe = self._subscribe or subscribe
        return self

    def enable_prompts(self) -> "CapabilitiesBuilder":
        self._prompts = True
        return self

    def enable_logging(self) -> "CapabilitiesBuilder":
        self._logging = True
        return self

    def enable_completion(self) -> "CapabilitiesBuilder":
        self._completion = True
        return self

    def build(self) -> ServerCapabilities:
        """Return the constructed capabilities."""
        return ServerCapabilities(
            tools=ToolsCapability(provider=self._tools),
            resources=ResourcesCapability(provider=self._resources, subscribe=self._subscribe),
            prompts=PromptsCapability(provider=self._prompts),
            logging=LoggingCapability(provider=self._logging),
            completion=CompletionCapability(provider=self._completion),
        )


class ClientCapabilities(BaseModel):
    """Client capabilities received during initialization."""

    experimental: Optional[dict] = Field(
        default=None,
        description="Experimental capabilities (client-specific)",
    )
    roots: Optional[dict] = Field(
        default=None,
        description="Root paths for file access",
    )
    sampling: Optional[dict] = Field(
        default=None,
        description="Client supports sampling requests",
    )


class ServerInfo(BaseModel):
    """Server information exposed during initialization."""

    name: str = Field(..., description="Server name")
    version: str = Field(..., description="Server version")


class ClientInfo(BaseModel):
    """Client information sent during initialization."""

    name: str = Field(..., description="Client name")
    version: Optional[str] = Field(None, description="Client version")


class InitializeRequest(BaseModel):
    """MCP initialize request parameters.

    All fields are optional; a bare ``initialize`` is accepted.
    """

    model_config = ConfigDict(populate_by_name=True)

    protocol_version: Optional[str] = Field(
        None,
        alias="protocolVersion",
        description="MCP protocol version",
    )
    capabilities: ClientCapabilities = Field(
        default_factory=ClientCapabilities,
        description="Client capabilities",
    )
    client_info: Optional[ClientInfo] = Field(
        None,
        alias="clientInfo",
        description="Client information",
    )


class InitializeResponse(BaseModel):
    """MCP initialize response result."""

    model_config = ConfigDict(populate_by_name=True)

    protocol_version: str = Field(
        alias="protocolVersion",
        description="MCP protocol version",
    )
    capabilities: ServerCapabilities = Field(
        ...,
        description="Server capabilities",
    )
    server_info: ServerInfo = Field(
        alias="serverInfo",
        description="Server information",
    )

    @classmethod
    def create(
        cls,
        server_name: str,
        server_version: str,
        capabilities: ServerCapabilities,
        protocol_version: str = DEFAULT_PROTOCOL_VERSION,
    ) -> "InitializeResponse":
        """Create an initialize response."""
        return cls(
            protocol_version=protocol_version,
            capabilities=capabilities,
            server_info=ServerInfo(name=server_name, version=server_version),
        )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
