"""Unit tests for descriptor builders."""

import pytest

from figma_mcp.lib.exceptions import DescriptorBuildError, MissingHandlerError
from figma_mcp.logic.mcp.models.builders import PromptBuilder, ResourceBuilder, ToolBuilder


def _handler(*args):
    return "ok"


class TestToolBuilder:
    """Test ToolBuilder."""

    def test_object_schema_shape(self):
        tool = (
            ToolBuilder("search", "Search docs")
            .add_string_property("q", "Query", required=True)
            .add_integer_property("limit", "Max results")
            .set_handler(_handler)
            .build()
        )

        assert tool.to_wire()["inputSchema"] == {
            "type": "object",
            "properties": {
                "q": {"type": "string", "description": "Query"},
                "limit": {"type": "integer", "description": "Max results"},
            },
            "required": ["q"],
        }

    def test_schema_without_properties_has_empty_required_list(self):
        tool = ToolBuilder("noop", "Nothing").set_handler(_handler).build()
        assert tool.to_wire()["inputSchema"] == {"type": "object", "properties": {}, "required": []}

    def test_required_is_deduplicated(self):
        tool = (
            ToolBuilder("t", "")
            .add_string_property("a", "first", required=True)
            .add_string_property("a", "second", required=True)
            .set_handler(_handler)
            .build()
        )

        assert tool.required_arguments == ["a"]
        assert tool.input_schema["properties"]["a"]["description"] == "second"

    def test_required_follows_last_write(self):
        tool = (
            ToolBuilder("t", "")
            .add_string_property("a", "first", required=True)
            .add_number_property("a", "now optional")
            .set_handler(_handler)
            .build()
        )

        assert tool.required_arguments == []
        assert tool.input_schema["properties"]["a"]["type"] == "number"

    def test_array_and_object_properties(self):
        tool = (
            ToolBuilder("t", "")
            .add_array_property("ids", "string", "Node ids")
            .add_object_property("opts", "Options", properties={"depth": {"type": "integer"}})
            .add_boolean_property("flag", "A flag")
            .set_handler(_handler)
            .build()
        )
        properties = tool.input_schema["properties"]

        assert properties["ids"]["items"] == {"type": "string"}
        assert properties["opts"]["properties"] == {"depth": {"type": "integer"}}
        assert properties["flag"]["type"] == "boolean"

    def test_extra_schema_keywords(self):
        tool = (
            ToolBuilder("t", "")
            .add_property("format", "string", "Export format", enum=["png", "svg"])
            .set_handler(_handler)
            .build()
        )
        assert tool.input_schema["properties"]["format"]["enum"] == ("png", "svg")

    def test_build_without_handler(self):
        with pytest.raises(MissingHandlerError, match="tool t has no handler"):
            ToolBuilder("t", "").build()

    def test_unserializable_schema(self):
        builder = ToolBuilder("t", "").add_property("x", "string", "bad", default=object()).set_handler(_handler)
        with pytest.raises(DescriptorBuildError):
            builder.build()

    def test_build_is_idempotent(self):
        builder = ToolBuilder("t", "desc").add_string_property("a", "A", required=True).set_handler(_handler)
        assert builder.build() == builder.build()

    def test_built_schema_is_a_deep_copy(self):
        nested = {"depth": {"type": "integer"}}
        builder = ToolBuilder("t", "").add_object_property("opts", "Options", properties=nested)
        first = builder.set_handler(_handler).build()
        nested["depth"]["type"] = "string"
        builder.add_string_property("later", "Added after build")

        assert first.input_schema["properties"]["opts"]["properties"]["depth"]["type"] == "integer"
        assert "later" not in first.input_schema["properties"]

    def test_built_schema_is_read_only(self):
        tool = ToolBuilder("t", "").add_string_property("a", "A", required=True).set_handler(_handler).build()

        with pytest.raises(TypeError):
            tool.input_schema["properties"]["b"] = {"type": "string"}
        with pytest.raises(AttributeError):
            tool.input_schema["required"].append("b")

        wire = tool.to_wire()
        wire["inputSchema"]["required"].append("b")
        assert tool.required_arguments == ["a"]
        assert tool.to_wire()["inputSchema"]["required"] == ["a"]


class TestResourceBuilder:
    """Test ResourceBuilder."""

    def test_default_mime_type(self):
        resource = ResourceBuilder("file://a.txt", "A").set_handler(_handler).build()
        assert resource.mime_type == "text/plain"
        assert resource.description is None

    def test_all_fields(self):
        resource = (
            ResourceBuilder("figma://file/123", "Design file")
            .set_description("A Figma file")
            .set_mime_type("application/json")
            .set_handler(_handler)
            .build()
        )
        assert resource.to_wire() == {
            "uri": "figma://file/123",
            "name": "Design file",
            "description": "A Figma file",
            "mimeType": "application/json",
        }

    def test_build_without_handler(self):
        with pytest.raises(MissingHandlerError):
            ResourceBuilder("file://a", "A").build()


class TestPromptBuilder:
    """Test PromptBuilder."""

    def test_arguments_keep_insertion_order(self):
        prompt = (
            PromptBuilder("review")
            .set_description("Review code")
            .add_argument("code", "Code", required=True)
            .add_argument("language")
            .set_handler(_handler)
            .build()
        )

        assert [argument.name for argument in prompt.arguments] == ["code", "language"]
        assert prompt.required_arguments == ["code"]
        assert prompt.description == "Review code"

    def test_readded_argument_replaces_earlier_entry(self):
        prompt = (
            PromptBuilder("review")
            .add_argument("code", "Code", required=True)
            .add_argument("language")
            .add_argument("code", "Source text")
            .set_handler(_handler)
            .build()
        )

        assert [argument.name for argument in prompt.arguments] == ["code", "language"]
        assert prompt.arguments[0].description == "Source text"
        assert prompt.required_arguments == []

    def test_build_without_handler(self):
        with pytest.raises(MissingHandlerError):
            PromptBuilder("p").build()
