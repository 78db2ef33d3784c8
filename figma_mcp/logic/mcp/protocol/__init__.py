"""
MCP Protocol Layer

Implements the Model Context Protocol (MCP) JSON-RPC envelope, capability
negotiation, method routing and stream framing.
https://modelcontextprotocol.io/
"""

from .message import (
    JsonRpcRequest,
    JsonRpcResponse,
    JsonRpcError,
    JsonRpcNotification,
    McpErrorCode,
    parse_message,
)
from .capabilities import (
    CapabilitiesBuilder,
    ServerCapabilities,
    ClientCapabilities,
    ToolsCapability,
    ResourcesCapability,
    PromptsCapability,
    LoggingCapability,
    CompletionCapability,
    ServerInfo,
)
from .handler import ProtocolHandler, SessionState
from .transport import IncrementalJsonDecoder, StreamTransport, open_stdio_transport

__all__ = [
    # Message types
    "JsonRpcRequest",
    "JsonRpcResponse",
    "JsonRpcError",
    "JsonRpcNotification",
    "McpErrorCode",
    "parse_message",
    # Capabilities
    "CapabilitiesBuilder",
    "ServerCapabilities",
    "ClientCapabilities",
    "ToolsCapability",
    "ResourcesCapability",
    "PromptsCapability",
    "LoggingCapability",
    "CompletionCapability",
    "ServerInfo",
    # Protocol handling
    "ProtocolHandler",
    "SessionState",
    # Transport
    "IncrementalJsonDecoder",
    "StreamTransport",
    "open_stdio_transport",
]
