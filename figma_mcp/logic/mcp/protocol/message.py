"""
JSON-RPC 2.0 Message Models for MCP Protocol

Implements message structures according to JSON-RPC 2.0 specification.
https://www.jsonrpc.org/specification
"""

from enum import IntEnum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, StrictInt, StrictStr, ValidationError, field_validator, model_validator


class McpErrorCode(IntEnum):
    """Standard JSON-RPC 2.0 error codes plus MCP-specific codes."""

    # Standard JSON-RPC 2.0 errors
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # Application-level errors
    NOT_FOUND = -32001
    CAPABILITY_NOT_NEGOTIATED = -32002


DEFAULT_ERROR_MESSAGES = {
    McpErrorCode.PARSE_ERROR: "Parse error",
    McpErrorCode.INVALID_REQUEST: "Invalid request",
    McpErrorCode.METHOD_NOT_FOUND: "Method not found",
    McpErrorCode.INVALID_PARAMS: "Invalid params",
    McpErrorCode.INTERNAL_ERROR: "Internal error",
    McpErrorCode.NOT_FOUND: "Not found",
    McpErrorCode.CAPABILITY_NOT_NEGOTIATED: "Capability not negotiated",
}

# Booleans and floats are not valid ids
RequestId = Union[StrictStr, StrictInt]


def _check_version(v: str) -> str:
    if v != "2.0":
        raise ValueError("jsonrpc version must be '2.0'")
    return v


class JsonRpcError(BaseModel):
    """JSON-RPC 2.0 error object."""

    code: int = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    data: Optional[Any] = Field(None, description="Additional error data")

    @classmethod
    def from_code(cls, code: McpErrorCode, message: Optional[str] = None, data: Optional[Any] = None) -> "JsonRpcError":
        """Create error from standard code."""
        return cls(
            code=code,
            message=message or DEFAULT_ERROR_MESSAGES.get(code, "Unknown error"),
            data=data,
        )

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the wire shape, omitting empty data."""
        error = {"code": int(self.code), "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


class JsonRpcRequest(BaseModel):
    """JSON-RPC 2.0 request message."""

    jsonrpc: str = Field("2.0", description="JSON-RPC version")
    id: RequestId = Field(..., description="Request ID")
    method: str = Field(..., description="Method name")
    params: Optional[dict[str, Any]] = Field(None, description="Method parameters")

    @field_validator("jsonrpc")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Ensure JSON-RPC version is 2.0."""
        return _check_version(v)


class JsonRpcNotification(BaseModel):
    """JSON-RPC 2.0 notification message (no response expected)."""

    jsonrpc: str = Field("2.0", description="JSON-RPC version")
    method: str = Field(..., description="Method name")
    params: Optional[dict[str, Any]] = Field(None, description="Method parameters")

    @field_validator("jsonrpc")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Ensure JSON-RPC version is 2.0."""
        return _check_version(v)


class JsonRpcResponse(BaseModel):
    """JSON-RPC 2.0 response message.

    ``id`` is only ``None`` when the request id could not be determined
    (parse errors and unreadable envelopes).
    """

    jsonrpc: str = Field("2.0", description="JSON-RPC version")
    id: Optional[RequestId] = Field(..., description="Request ID")
    result: Optional[Any] = Field(None, description="Result data")
    error: Optional[JsonRpcError] = Field(None, description="Error object")

    @field_validator("jsonrpc")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Ensure JSON-RPC version is 2.0."""
        return _check_version(v)

    @model_validator(mode="after")
    def check_result_or_error(self) -> "JsonRpcResponse":
        """Validate that either result or error is set, but not both."""
        if self.result is not None and self.error is not None:
            raise ValueError("Response must have either result or error, not both")
        if self.result is None and self.error is None:
            raise ValueError("Response must have either result or error")
        return self

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def success(cls, request_id: Optional[RequestId], result: Any) -> "JsonRpcResponse":
        """Create a success response."""
        return cls(id=request_id, result=result)

    @classmethod
    def error_response(
        cls,
        request_id: Optional[RequestId],
        code: McpErrorCode,
        message: Optional[str] = None,
        data: Optional[Any] = None,
    ) -> "JsonRpcResponse":
        """Create an error response."""
        return cls(
            id=request_id,
            error=JsonRpcError.from_code(code, message, data),
        )

    def to_wire(self) -> dict[str, Any]:
        """Serialize to a plain dict carrying exactly one of result/error."""
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.to_wire()
        else:
            payload["result"] = self.result
        return payload


class InvalidEnvelope(Exception):
    """A decoded value that is valid JSON but not a JSON-RPC request."""

    def __init__(self, reason: str, request_id: Optional[RequestId] = None, errors: Optional[list] = None):
        super().__init__(reason)
        self.reason = reason
        self.request_id = request_id
        self.errors = errors


def parse_message(payload: Any) -> Union[JsonRpcRequest, JsonRpcNotification]:
    """Classify a decoded JSON value as a request or a notification.

    Raises:
        InvalidEnvelope: If the value is not a well-formed request envelope
    """
    if isinstance(payload, list):
        raise InvalidEnvelope("Batch requests are not supported")
    if not isinstance(payload, dict):
        raise InvalidEnvelope("Request must be a JSON object")

    raw_id = payload.get("id")
    request_id = raw_id if isinstance(raw_id, (str, int)) and not isinstance(raw_id, bool) else None

    if "result" in payload or "error" in payload:
        raise InvalidEnvelope("Responses are not accepted by the server", request_id)

    try:
        if "id" in payload:
            return JsonRpcRequest(**payload)
        return JsonRpcNotification(**payload)
    except (ValidationError, TypeError) as e:
        errors = e.errors(include_url=False, include_context=False) if isinstance(e, ValidationError) else None
        raise InvalidEnvelope("Invalid JSON-RPC request format", request_id, errors) from e
