"""Unit tests for settings."""

import os

import pytest
from pydantic import ValidationError

from figma_mcp.core import config as config_module
from figma_mcp.core.config import McpSettings, get_config, reload_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate settings from the developer's environment."""
    for name in list(os.environ):
        if name.startswith("FIGMA_MCP_"):
            monkeypatch.delenv(name)
    monkeypatch.setattr(config_module, "_config", None)


class TestMcpSettings:
    """Test settings defaults and environment overrides."""

    def test_defaults(self):
        settings = McpSettings(_env_file=None)

        assert settings.server_name == "figma-mcp"
        assert settings.protocol_version == "2024-11-05"
        assert settings.log_level == "WARNING"
        assert settings.log_file is None

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("FIGMA_MCP_SERVER_NAME", "design-bridge")
        monkeypatch.setenv("FIGMA_MCP_ENABLE_PROMPTS", "false")
        monkeypatch.setenv("FIGMA_MCP_LOG_LEVEL", "info")

        settings = McpSettings(_env_file=None)

        assert settings.server_name == "design-bridge"
        assert settings.enable_prompts is False
        assert settings.log_level == "INFO"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            McpSettings(_env_file=None, log_level="LOUD")

    def test_debug_forces_debug_level(self):
        settings = McpSettings(_env_file=None, debug=True, log_level="ERROR")
        assert settings.effective_log_level == "DEBUG"

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("FIGMA_MCP_SERVER_VERSION=9.9.9\n")

        assert McpSettings(_env_file=env_file).server_version == "9.9.9"


class TestBuildCapabilities:
    """Test translation of switches into capabilities."""

    def test_default_switches(self):
        capabilities = McpSettings(_env_file=None).build_capabilities()
        assert capabilities.enabled_names() == ["tools", "resources", "prompts", "completion"]
        assert capabilities.resources.subscribe is False

    def test_everything_off(self):
        settings = McpSettings(
            _env_file=None,
            enable_tools=False,
            enable_resources=False,
            enable_prompts=False,
            enable_completion=False,
        )
        assert settings.build_capabilities().has_any_capability() is False

    def test_subscribe_and_logging(self):
        settings = McpSettings(_env_file=None, enable_resource_subscribe=True, enable_logging=True)
        capabilities = settings.build_capabilities()

        assert capabilities.resources.subscribe is True
        assert capabilities.is_enabled("logging") is True


class TestGlobalConfig:
    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_reload_config_replaces_instance(self, monkeypatch):
        first = get_config()
        monkeypatch.setenv("FIGMA_MCP_SERVER_NAME", "reloaded")
        second = reload_config()

        assert second is not first
        assert get_config().server_name == "reloaded"
