"""Exception hierarchy for the figma-mcp server."""

from typing import Any, Dict, Optional


class McpError(Exception):
    """Base exception for all figma-mcp errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize figma-mcp error."""
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logs and error payloads."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


class ConfigurationError(McpError):
    """Raised during server setup; fatal to startup."""


class DuplicateRegistrationError(ConfigurationError):
    """Raised when a tool, resource or prompt key is registered twice."""

    def __init__(self, kind: str, key: str):
        """Initialize duplicate registration error."""
        super().__init__(
            f"{kind} {key} already registered",
            details={"kind": kind, "key": key}
        )
        self.kind = kind
        self.key = key


class MissingHandlerError(ConfigurationError):
    """Raised when a descriptor is built without a bound handler."""

    def __init__(self, kind: str, key: str):
        """Initialize missing handler error."""
        super().__init__(
            f"{kind} {key} has no handler",
            details={"kind": kind, "key": key}
        )
        self.kind = kind
        self.key = key


class RegistryClosedError(ConfigurationError):
    """Raised when registering after the serve loop has started."""

    def __init__(self, kind: str, key: str):
        """Initialize registry closed error."""
        super().__init__(
            f"cannot register {kind} {key}: server is already serving",
            details={"kind": kind, "key": key}
        )


class ServerStateError(McpError):
    """Raised when the server is driven through an invalid lifecycle transition."""


class DescriptorBuildError(McpError):
    """Raised when a descriptor cannot be materialized (schema not serializable)."""


class MessageDecodeError(McpError):
    """Raised when the input stream does not contain a well-formed message.

    Stream framing cannot be resynchronized after this, so the serve loop
    terminates and re-raises it to its caller.
    """

    def __init__(self, message: str, fragment: Optional[str] = None):
        """Initialize decode error with an optional excerpt of the bad input."""
        details = {}
        if fragment is not None:
            details["fragment"] = fragment[:200]
        super().__init__(message, details)


class ArgumentValidationError(McpError):
    """Raised when a handler argument is missing or has the wrong type."""

    def __init__(self, field: str, message: str):
        """Initialize argument validation error."""
        super().__init__(
            f"validation error for field '{field}': {message}",
            details={"field": field}
        )
        self.field = field


class McpRequestError(McpError):
    """Per-request failure that is turned into a JSON-RPC error response."""

    def __init__(self, code: int, message: str, data: Optional[Any] = None):
        """Initialize request error with a JSON-RPC error code."""
        super().__init__(message, details={"code": int(code)})
        self.code = code
        self.data = data
