"""
MCP Server

Owns the registries, the capability set and the protocol handler, and runs
the sequential decode, route, invoke, encode loop over a stream transport.
"""

import asyncio
import contextlib
import logging
from enum import Enum
from typing import Any, Optional

from figma_mcp.lib.exceptions import MessageDecodeError, ServerStateError
from figma_mcp.logic.mcp.core.context import RequestContext
from figma_mcp.logic.mcp.core.registry import PromptRegistry, ResourceRegistry, ToolRegistry
from figma_mcp.logic.mcp.models.mcp_types import Prompt, Resource, Tool
from figma_mcp.logic.mcp.protocol.capabilities import DEFAULT_PROTOCOL_VERSION, ServerCapabilities
from figma_mcp.logic.mcp.protocol.handler import CompletionHandler, ProtocolHandler, SessionState
from figma_mcp.logic.mcp.protocol.message import (
    InvalidEnvelope,
    JsonRpcNotification,
    JsonRpcResponse,
    McpErrorCode,
    parse_message,
)
from figma_mcp.logic.mcp.protocol.transport import StreamTransport, open_stdio_transport

logger = logging.getLogger(__name__)

_CANCELLED = object()


class StopReason(str, Enum):
    """Why a serve loop ended normally."""

    END_OF_STREAM = "end_of_stream"
    CANCELLED = "cancelled"


class McpServer:
    """
    MCP protocol server.

    Register tools, resources and prompts, then call :meth:`serve` once.
    Requests are handled one at a time and responses are written in request
    order.
    """

    def __init__(
        self,
        name: str,
        version: str,
        capabilities: Optional[ServerCapabilities] = None,
        protocol_version: str = DEFAULT_PROTOCOL_VERSION,
    ):
        """
        Initialize MCP server.

        Args:
            name: Server name reported by initialize
            version: Server version reported by initialize
            capabilities: Capabilities to advertise (all disabled if omitted)
            protocol_version: Protocol version reported by initialize
        """
        self.name = name
        self.version = version
        self.capabilities = capabilities or ServerCapabilities.default()

        self.tools = ToolRegistry()
        self.resources = ResourceRegistry()
        self.prompts = PromptRegistry()

        self.protocol = ProtocolHandler(
            server_name=name,
            server_version=version,
            capabilities=self.capabilities,
            tools=self.tools,
            resources=self.resources,
            prompts=self.prompts,
            protocol_version=protocol_version,
        )
        self._started = False

    @property
    def state(self) -> SessionState:
        return self.protocol.state

    def register_tool(self, tool: Tool) -> None:
        self.tools.register(tool)

    def register_resource(self, resource: Resource) -> None:
        self.resources.register(resource)

    def register_prompt(self, prompt: Prompt) -> None:
        self.prompts.register(prompt)

    def set_completion_handler(self, handler: Optional[CompletionHandler]) -> None:
        """Bind the collaborator answering completion/complete requests."""
        if self._started:
            raise ServerStateError("Cannot set completion handler after the server has started")
        self.protocol.completion_handler = handler

    async def handle_message(
        self, payload: Any, cancel_event: Optional[asyncio.Event] = None
    ) -> Optional[dict[str, Any]]:
        """
        Handle one decoded JSON value.

        Args:
            payload: Decoded JSON value read from the transport
            cancel_event: Session cancellation signal exposed to handlers

        Returns:
            Response payload to send, or None for notifications
        """
        try:
            message = parse_message(payload)
        except InvalidEnvelope as e:
            logger.warning(f"Invalid request envelope: {e.reason}")
            data = {"validation_errors": e.errors} if e.errors else None
            response = JsonRpcResponse.error_response(
                request_id=e.request_id,
                code=McpErrorCode.INVALID_REQUEST,
                message=f"Invalid request: {e.reason}",
                data=data,
            )
            return response.to_wire()

        if isinstance(message, JsonRpcNotification):
            await self.protocol.handle_notification(message)
            return None

        logger.debug(f"Handling request {message.id}: {message.method}")
        context = RequestContext(
            request_id=message.id,
            method=message.method,
            cancel_event=cancel_event if cancel_event is not None else asyncio.Event(),
        )
        response = await self.protocol.handle_request(message, context)
        return response.to_wire()

    async def serve(self, transport: StreamTransport, cancel_event: Optional[asyncio.Event] = None) -> StopReason:
        """
        Run the serve loop until end of stream or cancellation.

        Args:
            transport: Stream transport to read requests from and write responses to
            cancel_event: Setting this event stops the loop before the next message

        Returns:
            The reason the loop stopped

        Raises:
            ServerStateError: If serve has already been called on this server
            MessageDecodeError: If the input stream is malformed
        """
        if self._started:
            raise ServerStateError("Server has already been started")
        self._started = True
        self.tools.seal()
        self.resources.seal()
        self.prompts.seal()

        if cancel_event is None:
            cancel_event = asyncio.Event()

        logger.info(
            f"Starting MCP server: {self.name} v{self.version} "
            f"(capabilities: {', '.join(self.capabilities.enabled_names()) or 'none'})"
        )

        try:
            while True:
                payload = await self._next_message(transport, cancel_event)
                if payload is _CANCELLED:
                    logger.info("Serve loop cancelled")
                    return StopReason.CANCELLED
                if payload is None:
                    logger.info("Input stream closed")
                    return StopReason.END_OF_STREAM

                response = await self.handle_message(payload, cancel_event)
                if response is not None:
                    await transport.send(response)

        except MessageDecodeError as e:
            logger.error(f"Failed to decode message: {e.message}")
            await self._send_parse_error(transport, e)
            raise

        finally:
            self.protocol.terminate()

    async def serve_stdio(self, cancel_event: Optional[asyncio.Event] = None) -> StopReason:
        """Serve over the process stdin/stdout."""
        transport = await open_stdio_transport()
        return await self.serve(transport, cancel_event)

    @staticmethod
    async def _next_message(transport: StreamTransport, cancel_event: asyncio.Event) -> Any:
        """Wait for the next message or for cancellation, whichever comes first."""
        if cancel_event.is_set():
            return _CANCELLED

        read_task = asyncio.ensure_future(transport.read_message())
        cancel_task = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait({read_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancel_task.cancel()
            if not read_task.done():
                read_task.cancel()

        if read_task in done:
            return read_task.result()

        with contextlib.suppress(asyncio.CancelledError):
            await read_task
        return _CANCELLED

    @staticmethod
    async def _send_parse_error(transport: StreamTransport, error: MessageDecodeError) -> None:
        response = JsonRpcResponse.error_response(
            request_id=None,
            code=McpErrorCode.PARSE_ERROR,
            message=f"Parse error: {error.message}",
        )
        try:
            await transport.send(response.to_wire())
        except (ConnectionError, OSError) as e:
            logger.warning(f"Could not report parse error to client: {e}")
