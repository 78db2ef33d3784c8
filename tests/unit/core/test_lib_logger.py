"""Unit tests for logging setup."""

import io
import json
import logging

from rich.console import Console

from figma_mcp.core.config import McpSettings
from figma_mcp.core.lib_logger import LoggingManager, StructuredFormatter


class TestStructuredFormatter:
    def test_formats_json_with_extra_fields(self):
        record = logging.LogRecord("figma_mcp.test", logging.INFO, __file__, 10, "hello %s", ("world",), None)
        record.component = "server"

        entry = json.loads(StructuredFormatter().format(record))

        assert entry["message"] == "hello world"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "figma_mcp.test"
        assert entry["component"] == "server"


class TestLoggingManager:
    def test_console_logs_go_to_the_given_console(self, restore_root_logger):
        stream = io.StringIO()
        manager = LoggingManager(McpSettings(_env_file=None, log_level="INFO"), Console(file=stream, width=200))
        manager.setup_logging()

        logging.getLogger("figma_mcp.test").info("server ready")

        assert "server ready" in stream.getvalue()

    def test_file_handler_writes_structured_logs(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "mcp.log"
        settings = McpSettings(_env_file=None, log_file=log_file)
        manager = LoggingManager(settings, Console(file=io.StringIO()))
        manager.setup_logging()

        manager.get_component_logger("server", session="s1").warning("decode failed")
        for handler in logging.getLogger().handlers:
            handler.flush()

        entries = [json.loads(line) for line in log_file.read_text().splitlines()]
        assert entries[-1]["message"] == "decode failed"
        assert entries[-1]["component"] == "server"
        assert entries[-1]["session"] == "s1"
        assert entries[-1]["logger"] == "figma_mcp.server"

    def test_adapter_with_context(self, restore_root_logger):
        manager = LoggingManager(McpSettings(_env_file=None), Console(file=io.StringIO()))
        adapter = manager.get_component_logger("cli").with_context(request_id=3)

        assert adapter.extra == {"component": "cli", "request_id": 3}
