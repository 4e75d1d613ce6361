"""Tests for the shared tool registry: routing, argument validation and error results."""

import pytest

from mcp_server_common import (
    ToolInputError,
    ToolRegistry,
    ToolRoute,
    name_contains,
    name_in,
    validate_arguments,
)

ECHO_TOOLS = [
    {
        "name": "echo_text",
        "description": "Echo",
        "inputSchema": {
            "type": "object",
            "properties": {
                "text": {"type": "string"},
                "count": {"type": "number"},
                "mode": {"type": "string", "enum": ["loud", "quiet"]},
                "tags": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["text"],
        },
    },
    {
        "name": "echo_fail",
        "description": "Always fails",
        "inputSchema": {"type": "object", "properties": {}, "required": []},
    },
]

EXACT_TOOLS = [
    {"name": "ping", "description": "Ping", "inputSchema": {"type": "object", "properties": {}}},
]


async def echo_handler(name, args):
    if name == "echo_fail":
        raise RuntimeError("boom")
    return f"{name}:{args['text']}"


async def ping_handler(name, args):
    return "pong"


@pytest.fixture
def registry():
    return ToolRegistry(
        [
            ToolRoute(name_in(EXACT_TOOLS), EXACT_TOOLS, ping_handler),
            ToolRoute(name_contains("echo"), ECHO_TOOLS, echo_handler),
        ],
        log_prefix="Test",
    )


class TestPredicates:
    """Name predicates used to build routes."""

    def test_name_contains_any_fragment(self):
        matches = name_contains("usage", "quota")
        assert matches("get_data_usage")
        assert matches("get_current_quota")
        assert not matches("list_alerts")

    def test_name_in_exact_match_only(self):
        matches = name_in(EXACT_TOOLS)
        assert matches("ping")
        assert not matches("ping_all")


class TestValidateArguments:
    """Schema checks applied before a handler runs."""

    def test_none_arguments_become_empty_dict(self):
        assert validate_arguments({"type": "object", "properties": {}}, None) == {}

    def test_missing_required_lists_every_name(self):
        schema = {"type": "object", "properties": {}, "required": ["origin", "destination"]}
        with pytest.raises(ToolInputError, match="Missing required parameter\\(s\\): origin, destination"):
            validate_arguments(schema, {})

    def test_blank_string_counts_as_missing(self):
        schema = {"type": "object", "properties": {"q": {"type": "string"}}, "required": ["q"]}
        with pytest.raises(ToolInputError, match="q"):
            validate_arguments(schema, {"q": "  "})

    def test_wrong_type(self):
        with pytest.raises(ToolInputError, match="Parameter 'count' must be of type number"):
            validate_arguments(ECHO_TOOLS[0]["inputSchema"], {"text": "hi", "count": "3"})

    def test_boolean_is_not_a_number(self):
        with pytest.raises(ToolInputError, match="must be of type number"):
            validate_arguments(ECHO_TOOLS[0]["inputSchema"], {"text": "hi", "count": True})

    def test_enum_violation(self):
        with pytest.raises(ToolInputError, match="must be one of: loud, quiet"):
            validate_arguments(ECHO_TOOLS[0]["inputSchema"], {"text": "hi", "mode": "whisper"})

    def test_array_items_checked(self):
        with pytest.raises(ToolInputError, match="tags\\[\\]"):
            validate_arguments(ECHO_TOOLS[0]["inputSchema"], {"text": "hi", "tags": ["a", 1]})

    def test_any_of_requires_one_complete_group(self):
        schema = {
            "type": "object",
            "properties": {},
            "anyOf": [{"required": ["cityCode"]}, {"required": ["latitude", "longitude"]}],
        }
        assert validate_arguments(schema, {"latitude": 1.0, "longitude": 2.0})
        with pytest.raises(ToolInputError, match="One of the following parameter sets is required"):
            validate_arguments(schema, {"latitude": 1.0})

    def test_unknown_properties_pass_through(self):
        args = validate_arguments(ECHO_TOOLS[0]["inputSchema"], {"text": "hi", "extra": 1})
        assert args["extra"] == 1

    def test_empty_array_or_object_counts_as_missing(self):
        schema = {
            "type": "object",
            "properties": {"ids": {"type": "array"}, "filter": {"type": "object"}},
            "required": ["ids", "filter"],
        }
        with pytest.raises(ToolInputError, match="Missing required parameter\\(s\\): ids, filter"):
            validate_arguments(schema, {"ids": [], "filter": {}})

    def test_none_values_are_treated_as_absent(self):
        args = validate_arguments(ECHO_TOOLS[0]["inputSchema"], {"text": "hi", "count": None})
        assert args == {"text": "hi", "count": None}

    def test_missing_reported_before_wrong_type(self):
        with pytest.raises(ToolInputError, match="Missing required parameter"):
            validate_arguments(ECHO_TOOLS[0]["inputSchema"], {"count": "3"})

    def test_other_keywords_name_the_parameter(self):
        schema = {"type": "object", "properties": {"limit": {"type": "integer", "minimum": 1}}}
        with pytest.raises(ToolInputError, match="Invalid parameter 'limit': 0 is less than the minimum of 1"):
            validate_arguments(schema, {"limit": 0})

    def test_arguments_must_be_an_object(self):
        with pytest.raises(ToolInputError, match="Tool arguments must be an object"):
            validate_arguments(ECHO_TOOLS[0]["inputSchema"], ["hi"])


class TestToolRegistry:
    """Dispatch through the registry."""

    def test_tool_definitions_in_route_order(self, registry):
        names = [tool["name"] for tool in registry.get_tool_definitions()]
        assert names == ["ping", "echo_text", "echo_fail"]

    @pytest.mark.asyncio
    async def test_successful_call(self, registry):
        result = await registry.handle_tool_call("echo_text", {"text": "hello"})
        assert not result.is_error
        assert result.text == "echo_text:hello"

    @pytest.mark.asyncio
    async def test_first_matching_route_wins(self, registry):
        result = await registry.handle_tool_call("ping", None)
        assert result.text == "pong"

    @pytest.mark.asyncio
    async def test_unknown_tool(self, registry):
        result = await registry.handle_tool_call("does_not_exist", {})
        assert result.is_error
        assert result.text == "Error: Unknown tool: does_not_exist"

    @pytest.mark.asyncio
    async def test_validation_error_is_reported(self, registry):
        result = await registry.handle_tool_call("echo_text", {})
        assert result.is_error
        assert result.text == "Error: Missing required parameter(s): text"

    @pytest.mark.asyncio
    async def test_handler_exception_is_reported(self, registry):
        result = await registry.handle_tool_call("echo_fail", {})
        assert result.is_error
        assert result.text == "Error: boom"
