"""
MCP Protocol Handler

Routes JSON-RPC requests to the MCP method implementations.
Manages initialization state, capability gating and method dispatch.
"""

import inspect
import json
import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel, ValidationError

from figma_mcp.lib.exceptions import ArgumentValidationError, McpRequestError
from figma_mcp.logic.mcp.core.context import RequestContext
from figma_mcp.logic.mcp.core.registry import PromptRegistry, ResourceRegistry, ToolRegistry
from figma_mcp.logic.mcp.models.mcp_types import (
    CompletionParams,
    CompletionResult,
    CompletionValues,
    PromptGetParams,
    PromptMessage,
    PromptResult,
    ResourceContents,
    ResourceReadParams,
    ResourceReadResult,
    TextContent,
    ToolCallParams,
    ToolCallResult,
)
from figma_mcp.logic.mcp.protocol.capabilities import (
    DEFAULT_PROTOCOL_VERSION,
    InitializeRequest,
    InitializeResponse,
    ServerCapabilities,
)
from figma_mcp.logic.mcp.protocol.message import (
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    McpErrorCode,
)
from figma_mcp.logic.mcp.utils.arguments import missing_required

logger = logging.getLogger(__name__)

MAX_COMPLETION_VALUES = 100

CompletionHandler = Callable[..., Any]


class SessionState(str, Enum):
    """Lifecycle of one protocol session."""

    UNINITIALIZED = "uninitialized"
    NEGOTIATED = "negotiated"
    RUNNING = "running"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class MethodRoute:
    """One entry of the routing table."""

    handler: Callable[[Any, RequestContext], Awaitable[Any]]
    capability: Optional[str] = None
    params_model: Optional[type[BaseModel]] = None


class ProtocolHandler:
    """
    MCP protocol handler for routing requests to method implementations.

    The routing table is fixed at construction. Gated methods are refused
    until ``initialize`` has negotiated a capability set that enables them.
    """

    def __init__(
        self,
        server_name: str,
        server_version: str,
        capabilities: ServerCapabilities,
        tools: ToolRegistry,
        resources: ResourceRegistry,
        prompts: PromptRegistry,
        protocol_version: str = DEFAULT_PROTOCOL_VERSION,
    ):
        """
        Initialize protocol handler.

        Args:
            server_name: Name of the MCP server
            server_version: Version of the MCP server
            capabilities: Server capabilities to advertise
            tools: Tool registry to serve from
            resources: Resource registry to serve from
            prompts: Prompt registry to serve from
            protocol_version: Protocol version reported by initialize
        """
        self.server_name = server_name
        self.server_version = server_version
        self.capabilities = capabilities
        self.protocol_version = protocol_version
        self.tools = tools
        self.resources = resources
        self.prompts = prompts
        self.completion_handler: Optional[CompletionHandler] = None

        self.state = SessionState.UNINITIALIZED
        self.negotiated: Optional[ServerCapabilities] = None

        self._routes = MappingProxyType({
            "initialize": MethodRoute(self._handle_initialize, params_model=InitializeRequest),
            "ping": MethodRoute(self._handle_ping),
            "tools/list": MethodRoute(self._handle_tools_list, capability="tools"),
            "tools/call": MethodRoute(self._handle_tools_call, capability="tools", params_model=ToolCallParams),
            "resources/list": MethodRoute(self._handle_resources_list, capability="resources"),
            "resources/read": MethodRoute(
                self._handle_resources_read, capability="resources", params_model=ResourceReadParams
            ),
            "prompts/list": MethodRoute(self._handle_prompts_list, capability="prompts"),
            "prompts/get": MethodRoute(self._handle_prompts_get, capability="prompts", params_model=PromptGetParams),
            "completion/complete": MethodRoute(
                self._handle_completion, capability="completion", params_model=CompletionParams
            ),
        })

    @property
    def is_initialized(self) -> bool:
        return self.negotiated is not None

    async def handle_request(self, request: JsonRpcRequest, context: RequestContext) -> JsonRpcResponse:
        """
        Handle an incoming JSON-RPC request.

        Protocol and application failures are turned into error responses
        carrying the request id; nothing raised here ends the session.

        Args:
            request: The JSON-RPC request to handle
            context: Execution context passed through to handlers

        Returns:
            JsonRpcResponse with result or error
        """
        method = request.method
        route = self._routes.get(method)
        if route is None:
            logger.info(f"Method not found: {method}")
            return JsonRpcResponse.error_response(
                request_id=request.id,
                code=McpErrorCode.METHOD_NOT_FOUND,
                message=f"Method not found: {method}",
            )

        if self.state == SessionState.NEGOTIATED and method != "initialize":
            self.state = SessionState.RUNNING

        try:
            self._check_capability(method, route)
            params = self._parse_params(method, route, request.params)
            result = await route.handler(params, context)
            return JsonRpcResponse.success(request.id, result)

        except McpRequestError as e:
            logger.warning(f"Request {request.id} ({method}) failed: {e.message}")
            return JsonRpcResponse.error_response(
                request_id=request.id,
                code=e.code,
                message=e.message,
                data=e.data,
            )

        except Exception as e:
            # Internal error
            logger.exception(f"Error handling {method}: {e}")
            return JsonRpcResponse.error_response(
                request_id=request.id,
                code=McpErrorCode.INTERNAL_ERROR,
                message=f"Internal error: {e}",
            )

    async def handle_notification(self, notification: JsonRpcNotification) -> None:
        """Handle a notification; notifications never produce a response."""
        if notification.method == "notifications/initialized":
            if self.state == SessionState.NEGOTIATED:
                self.state = SessionState.RUNNING
            logger.info("Client confirmed initialization")
        else:
            logger.debug(f"Ignoring notification: {notification.method}")

    def terminate(self) -> None:
        self.state = SessionState.TERMINATED

    def _check_capability(self, method: str, route: MethodRoute) -> None:
        if route.capability is None:
            return
        if self.negotiated is None:
            raise McpRequestError(
                McpErrorCode.CAPABILITY_NOT_NEGOTIATED,
                f"Server must be initialized before calling {method}",
                data={"capability": route.capability},
            )
        if not self.negotiated.is_enabled(route.capability):
            raise McpRequestError(
                McpErrorCode.CAPABILITY_NOT_NEGOTIATED,
                f"Capability '{route.capability}' was not negotiated",
                data={"capability": route.capability},
            )

    @staticmethod
    def _parse_params(method: str, route: MethodRoute, raw: Optional[dict[str, Any]]) -> Any:
        if route.params_model is None:
            return raw or {}
        try:
            return route.params_model.model_validate(raw or {})
        except ValidationError as e:
            raise McpRequestError(
                McpErrorCode.INVALID_PARAMS,
                f"Invalid params for {method}",
                data={"validation_errors": e.errors(include_url=False, include_context=False)},
            ) from e

    @staticmethod
    async def _invoke(what: str, func: Callable[..., Any], *args: Any) -> Any:
        """Call a collaborator handler, sync or async, mapping its failures."""
        try:
            result = func(*args)
            if inspect.isawaitable(result):
                result = await result
            return result
        except ArgumentValidationError as e:
            raise McpRequestError(McpErrorCode.INVALID_PARAMS, e.message) from e
        except Exception as e:
            logger.warning(f"{what} failed: {e!r}")
            raise McpRequestError(McpErrorCode.INTERNAL_ERROR, str(e) or e.__class__.__name__) from e

    async def _handle_initialize(self, params: InitializeRequest, context: RequestContext) -> dict:
        """
        Handle initialize request.

        Performs MCP handshake and exchanges capabilities. The negotiated set
        is fixed for the rest of the session.
        """
        if self.negotiated is not None:
            raise McpRequestError(McpErrorCode.INVALID_REQUEST, "Server already initialized")

        self.negotiated = self.capabilities
        self.state = SessionState.NEGOTIATED

        client = params.client_info.name if params.client_info else "unknown"
        logger.info(
            f"Server initialized: {self.server_name} v{self.server_version} "
            f"(client {client}, protocol {params.protocol_version or 'unspecified'})"
        )

        response = InitializeResponse.create(
            server_name=self.server_name,
            server_version=self.server_version,
            capabilities=self.negotiated,
            protocol_version=self.protocol_version,
        )
        return response.to_wire()

    async def _handle_ping(self, params: dict, context: RequestContext) -> dict:
        """
        Handle ping request.

        Simple keep-alive check.
        """
        return {}

    async def _handle_tools_list(self, params: dict, context: RequestContext) -> dict:
        return {"tools": [tool.to_wire() for tool in self.tools.list()]}

    async def _handle_tools_call(self, params: ToolCallParams, context: RequestContext) -> dict:
        tool = self.tools.get(params.name)
        if tool is None:
            raise McpRequestError(McpErrorCode.NOT_FOUND, f"Tool not found: {params.name}", data={"name": params.name})

        missing = missing_required(params.arguments, tool.required_arguments)
        if missing:
            raise McpRequestError(
                McpErrorCode.INVALID_PARAMS,
                f"Missing required argument(s) for tool {tool.name}: {', '.join(missing)}",
                data={"missing": missing},
            )

        output = await self._invoke(f"Tool {tool.name}", tool.handler, context, dict(params.arguments))
        result = ToolCallResult(content=[TextContent(text=_as_text(output))])
        return result.model_dump()

    async def _handle_resources_list(self, params: dict, context: RequestContext) -> dict:
        return {"resources": [resource.to_wire() for resource in self.resources.list()]}

    async def _handle_resources_read(self, params: ResourceReadParams, context: RequestContext) -> dict:
        resource = self.resources.get(params.uri)
        if resource is None:
            raise McpRequestError(McpErrorCode.NOT_FOUND, f"Resource not found: {params.uri}", data={"uri": params.uri})

        output = await self._invoke(f"Resource {resource.uri}", resource.handler, context, params.uri)
        result = ResourceReadResult(
            contents=[ResourceContents(uri=params.uri, mime_type=resource.mime_type, text=_as_text(output))]
        )
        return result.model_dump(by_alias=True, exclude_none=True)

    async def _handle_prompts_list(self, params: dict, context: RequestContext) -> dict:
        return {"prompts": [prompt.to_wire() for prompt in self.prompts.list()]}

    async def _handle_prompts_get(self, params: PromptGetParams, context: RequestContext) -> dict:
        prompt = self.prompts.get(params.name)
        if prompt is None:
            raise McpRequestError(McpErrorCode.NOT_FOUND, f"Prompt not found: {params.name}", data={"name": params.name})

        arguments = dict(params.arguments or {})
        missing = missing_required(arguments, prompt.required_arguments)
        if missing:
            raise McpRequestError(
                McpErrorCode.INVALID_PARAMS,
                f"Missing required argument(s) for prompt {prompt.name}: {', '.join(missing)}",
                data={"missing": missing},
            )

        output = await self._invoke(f"Prompt {prompt.name}", prompt.handler, arguments)
        if isinstance(output, (str, bytes, dict)) or not hasattr(output, "__iter__"):
            raise McpRequestError(
                McpErrorCode.INTERNAL_ERROR,
                f"Prompt {prompt.name} must return a sequence of messages",
            )
        try:
            messages = [PromptMessage.coerce(message) for message in output]
        except ValidationError as e:
            raise McpRequestError(
                McpErrorCode.INTERNAL_ERROR,
                f"Prompt {prompt.name} returned an invalid message",
                data={"validation_errors": e.errors(include_url=False, include_context=False)},
            ) from e

        return PromptResult(description=prompt.description, messages=messages).model_dump(exclude_none=True)

    async def _handle_completion(self, params: CompletionParams, context: RequestContext) -> dict:
        values: list[str] = []
        if self.completion_handler is not None:
            output = await self._invoke("Completion", self.completion_handler, params.ref, params.argument)
            if output is not None and (isinstance(output, (str, bytes, dict)) or not hasattr(output, "__iter__")):
                raise McpRequestError(
                    McpErrorCode.INTERNAL_ERROR,
                    "Completion handler must return a sequence of values",
                )
            values = [str(value) for value in (output or [])]

        total = len(values)
        completion = CompletionValues(
            values=values[:MAX_COMPLETION_VALUES],
            total=total,
            has_more=total > MAX_COMPLETION_VALUES,
        )
        return CompletionResult(completion=completion).model_dump(by_alias=True)


def _as_text(output: Any) -> str:
    """Render handler output as the text of a content block."""
    if isinstance(output, str):
        return output
    if isinstance(output, (dict, list)):
        return json.dumps(output, indent=2)
    if output is None:
        return ""
    return str(output)
