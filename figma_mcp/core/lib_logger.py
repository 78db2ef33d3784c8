"""Structured logging configuration for figma-mcp.

stdout carries protocol traffic, so console logging always goes to stderr.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import McpSettings

_RESERVED_RECORD_FIELDS = frozenset({
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
    "module", "lineno", "funcName", "created", "msecs", "relativeCreated",
    "thread", "threadName", "processName", "process", "getMessage", "exc_info",
    "exc_text", "stack_info", "taskName", "message", "asctime",
})


class StructuredFormatter(logging.Formatter):
    """Custom formatter that outputs structured JSON logs."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Add extra fields from the log record
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_FIELDS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


class McpLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds component context to every record."""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        """Process log message and add extra context."""
        extra = dict(kwargs.get("extra") or {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **context) -> "McpLoggerAdapter":
        """Create new adapter with additional context."""
        new_extra = dict(self.extra)
        new_extra.update(context)
        return McpLoggerAdapter(self.logger, new_extra)


class LoggingManager:
    """Manage logging configuration for figma-mcp."""

    def __init__(self, config: McpSettings, console: Optional[Console] = None):
        """Initialize logging manager with configuration."""
        self.config = config
        self.console = console or Console(stderr=True)
        self._configured = False

    def setup_logging(self) -> None:
        """Set up logging configuration based on settings."""
        if self._configured:
            return

        level = self.config.effective_log_level

        # Configure root logger
        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        # Remove existing handlers
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        # Set up console handler with Rich formatting
        console_handler = RichHandler(
            console=self.console,
            show_time=True,
            show_path=self.config.debug,
            rich_tracebacks=True,
            tracebacks_show_locals=self.config.debug
        )
        console_handler.setLevel(level)
        root_logger.addHandler(console_handler)

        # Set up file handler with structured logging
        if self.config.log_file:
            self.config.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.config.log_file, mode="a", encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_handler.setFormatter(StructuredFormatter())
            root_logger.addHandler(file_handler)

        # Third-party noise
        logging.getLogger("asyncio").setLevel(logging.WARNING)

        self._configured = True

    def get_logger(self, name: str, **context) -> McpLoggerAdapter:
        """Get a logger with figma-mcp context."""
        if not self._configured:
            self.setup_logging()

        return McpLoggerAdapter(logging.getLogger(name), context)

    def get_component_logger(self, component: str, **context) -> McpLoggerAdapter:
        """Get a logger for a specific figma-mcp component."""
        context["component"] = component
        return self.get_logger(f"figma_mcp.{component}", **context)


# Global logging manager instance
_logging_manager: Optional[LoggingManager] = None


def setup_logging(config: McpSettings, console: Optional[Console] = None) -> LoggingManager:
    """Set up global logging configuration."""
    global _logging_manager
    _logging_manager = LoggingManager(config, console)
    _logging_manager.setup_logging()
    return _logging_manager


def get_component_logger(component: str, **context) -> McpLoggerAdapter:
    """Get a component-specific logger."""
    if _logging_manager is None:
        from .config import get_config
        setup_logging(get_config())

    return _logging_manager.get_component_logger(component, **context)
