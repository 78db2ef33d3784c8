"""Test configuration and fixtures for figma-mcp tests."""

import logging

import pytest
from click.testing import CliRunner

from figma_mcp.logic.mcp.core.server import McpServer
from figma_mcp.logic.mcp.protocol.capabilities import ServerCapabilities
from figma_mcp.logic.mcp.protocol.transport import StreamTransport
from figma_mcp.logic.mcp.services.builtin import register_builtin_capabilities
from tests.helpers import MemoryWriter, make_reader


@pytest.fixture
def memory_writer() -> MemoryWriter:
    return MemoryWriter()


@pytest.fixture
def transport_factory(memory_writer: MemoryWriter):
    """Build a StreamTransport over the given input bytes and the memory writer."""

    def factory(*chunks: bytes, eof: bool = True) -> StreamTransport:
        return StreamTransport(make_reader(chunks, eof=eof), memory_writer)

    return factory


@pytest.fixture
def server() -> McpServer:
    """Server with every capability enabled and the built-ins registered."""
    server = McpServer("test-server", "1.0.0", capabilities=ServerCapabilities.all_enabled())
    register_builtin_capabilities(server)
    return server


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create CLI runner for testing Click commands."""
    return CliRunner()


@pytest.fixture
def restore_root_logger():
    """Undo handler changes made by setup_logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
