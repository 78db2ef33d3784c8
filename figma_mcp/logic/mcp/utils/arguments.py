"""Argument extraction helpers for tool and prompt handlers.

Policy: a missing optional argument yields the default, but an argument that
is present with the wrong type is always an error. Values are never silently
replaced by the default. Integers are accepted where a number is expected;
booleans are not numbers.
"""

from typing import Any, Mapping, Optional

from figma_mcp.lib.exceptions import ArgumentValidationError

_MISSING = object()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def require_string(args: Mapping[str, Any], key: str, allow_empty: bool = False) -> str:
    """Return a required, non-empty string argument."""
    value = args.get(key, _MISSING)
    if value is _MISSING:
        raise ArgumentValidationError(key, "required field missing")
    if not isinstance(value, str):
        raise ArgumentValidationError(key, "must be a string")
    if not allow_empty and value == "":
        raise ArgumentValidationError(key, "cannot be empty")
    return value


def optional_string(args: Mapping[str, Any], key: str, default: Optional[str] = None) -> Optional[str]:
    value = args.get(key, _MISSING)
    if value is _MISSING or value is None:
        return default
    if not isinstance(value, str):
        raise ArgumentValidationError(key, "must be a string")
    return value


def require_number(args: Mapping[str, Any], key: str) -> float:
    """Return a required numeric argument as float."""
    value = args.get(key, _MISSING)
    if value is _MISSING:
        raise ArgumentValidationError(key, "required field missing")
    if not _is_number(value):
        raise ArgumentValidationError(key, "must be a number")
    return float(value)


def optional_number(args: Mapping[str, Any], key: str, default: Optional[float] = None) -> Optional[float]:
    value = args.get(key, _MISSING)
    if value is _MISSING or value is None:
        return default
    if not _is_number(value):
        raise ArgumentValidationError(key, "must be a number")
    return float(value)


def require_bool(args: Mapping[str, Any], key: str) -> bool:
    value = args.get(key, _MISSING)
    if value is _MISSING:
        raise ArgumentValidationError(key, "required field missing")
    if not isinstance(value, bool):
        raise ArgumentValidationError(key, "must be a boolean")
    return value


def optional_bool(args: Mapping[str, Any], key: str, default: Optional[bool] = None) -> Optional[bool]:
    value = args.get(key, _MISSING)
    if value is _MISSING or value is None:
        return default
    if not isinstance(value, bool):
        raise ArgumentValidationError(key, "must be a boolean")
    return value


def missing_required(args: Mapping[str, Any], required: list[str]) -> list[str]:
    """Names from ``required`` that are absent from ``args``, in order."""
    return [name for name in required if name not in args]
