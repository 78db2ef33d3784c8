"""Unit tests for MCP capability negotiation."""

import pytest
from pydantic import ValidationError

from figma_mcp.logic.mcp.protocol.capabilities import (
    CapabilitiesBuilder,
    InitializeRequest,
    InitializeResponse,
    ResourcesCapability,
    ServerCapabilities,
    ToolsCapability,
)


class TestServerCapabilities:
    """Test server capabilities."""

    def test_default_has_everything_disabled(self):
        capabilities = ServerCapabilities.default()

        assert capabilities.tools is not None
        assert capabilities.completion is not None
        assert capabilities.has_any_capability() is False
        assert capabilities.enabled_names() == []

    def test_all_enabled(self):
        capabilities = ServerCapabilities.all_enabled()

        assert capabilities.enabled_names() == ["tools", "resources", "prompts", "logging", "completion"]
        assert capabilities.resources.subscribe is True

    def test_named_constructors_enable_one_feature(self):
        assert ServerCapabilities.with_tools().enabled_names() == ["tools"]
        assert ServerCapabilities.with_prompts().enabled_names() == ["prompts"]
        assert ServerCapabilities.with_logging().enabled_names() == ["logging"]
        assert ServerCapabilities.with_completion().enabled_names() == ["completion"]

        resources = ServerCapabilities.with_resources(subscribe=True)
        assert resources.enabled_names() == ["resources"]
        assert resources.resources.subscribe is True

    def test_unknown_capability_name(self):
        with pytest.raises(KeyError):
            ServerCapabilities.default().is_enabled("sampling")

    def test_absent_capability_is_not_enabled(self):
        capabilities = ServerCapabilities(tools=ToolsCapability(provider=True))
        assert capabilities.is_enabled("resources") is False
        assert capabilities.has_any_capability() is True

    def test_capabilities_are_immutable(self):
        capabilities = ServerCapabilities.with_tools()
        with pytest.raises(ValidationError):
            capabilities.tools = None

    def test_wire_shape(self):
        wire = ServerCapabilities.with_resources().to_wire()
        assert wire["tools"] == {"provider": False}
        assert wire["resources"] == {"provider": True, "subscribe": False}

    def test_wire_shape_omits_absent_capabilities(self):
        wire = ServerCapabilities(tools=ToolsCapability(provider=True)).to_wire()
        assert wire == {"tools": {"provider": True}}


class TestMerge:
    """Test field-wise capability merge."""

    def test_merge_tools_and_resources(self):
        merged = ServerCapabilities.with_tools().merge(ServerCapabilities(resources=ResourcesCapability(provider=True)))

        assert merged.tools.provider is True
        assert merged.resources.provider is True

    def test_present_field_replaces_whole_capability(self):
        base = ServerCapabilities(resources=ResourcesCapability(provider=True, subscribe=True))
        merged = base.merge(ServerCapabilities(resources=ResourcesCapability(provider=True, subscribe=False)))

        assert merged.resources.subscribe is False

    def test_present_but_disabled_field_overrides(self):
        merged = ServerCapabilities.with_tools().merge(ServerCapabilities.default())
        assert merged.has_any_capability() is False

    def test_merge_with_empty_set_is_identity(self):
        base = ServerCapabilities.all_enabled()
        assert base.merge(ServerCapabilities()) == base

    def test_merge_does_not_modify_operands(self):
        base = ServerCapabilities.with_tools()
        other = ServerCapabilities(prompts=ServerCapabilities.with_prompts().prompts)
        base.merge(other)

        assert base.is_enabled("prompts") is False
        assert other.tools is None


class TestCapabilitiesBuilder:
    """Test the fluent capabilities builder."""

    def test_empty_builder_matches_default(self):
        assert CapabilitiesBuilder().build() == ServerCapabilities.default()

    def test_chained_enables(self):
        capabilities = CapabilitiesBuilder().enable_tools().enable_prompts().enable_completion().build()
        assert capabilities.enabled_names() == ["tools", "prompts", "completion"]

    def test_enable_is_idempotent(self):
        once = CapabilitiesBuilder().enable_tools().build()
        twice = CapabilitiesBuilder().enable_tools().enable_tools().build()
        assert once == twice

    def test_subscribe_is_never_turned_off(self):
        capabilities = CapabilitiesBuilder().enable_resources(subscribe=True).enable_resources().build()
        assert capabilities.resources.subscribe is True

    def test_snapshots_are_independent(self):
        builder = CapabilitiesBuilder().enable_tools()
        first = builder.build()
        builder.enable_prompts()
        second = builder.build()

        assert first.is_enabled("prompts") is False
        assert second.is_enabled("prompts") is True


class TestInitializeModels:
    """Test initialize request and response models."""

    def test_initialize_params_are_optional(self):
        request = InitializeRequest.model_validate({})
        assert request.protocol_version is None
        assert request.client_info is None

    def test_initialize_params_use_camel_case(self):
        request = InitializeRequest.model_validate(
            {"protocolVersion": "2024-11-05", "clientInfo": {"name": "client", "version": "1.0"}}
        )
        assert request.protocol_version == "2024-11-05"
        assert request.client_info.name == "client"

    def test_initialize_response_wire_shape(self):
        response = InitializeResponse.create("srv", "1.2.3", ServerCapabilities.with_tools())
        wire = response.to_wire()

        assert wire["protocolVersion"] == "2024-11-05"
        assert wire["serverInfo"] == {"name": "srv", "version": "1.2.3"}
        assert wire["capabilities"]["tools"] == {"provider": True}
