"""Tests for the server entry points and the MCP wiring."""

import pytest
from unittest.mock import patch

from mcp import types

from mcp_server_amadeus import server as amadeus_server
from mcp_server_common.registry import ToolRegistry, ToolRoute, name_in
from mcp_server_common.server import create_server
from mcp_server_coralogix import server as coralogix_server


class TestHelp:
    """--help prints usage and does not start a server."""

    def test_amadeus_help(self, capsys):
        with patch.object(amadeus_server, "run_stdio") as run_stdio:
            amadeus_server.main(["--help"])
        out = capsys.readouterr().out
        assert "Usage: mcp-server-amadeus" in out
        assert "AMADEUS_CLIENT_ID" in out
        run_stdio.assert_not_called()

    def test_coralogix_help(self, capsys):
        with patch.object(coralogix_server, "run_stdio") as run_stdio:
            coralogix_server.main(["-h"])
        out = capsys.readouterr().out
        assert "Usage: mcp-server-coralogix" in out
        assert "CORALOGIX_DOMAIN" in out
        run_stdio.assert_not_called()


class TestCoralogixStartup:
    """The Coralogix server refuses to start without usable credentials."""

    def test_missing_credentials_exit(self, monkeypatch, capsys):
        monkeypatch.delenv("CORALOGIX_API_KEY", raising=False)
        monkeypatch.delenv("CORALOGIX_DOMAIN", raising=False)

        with patch.object(coralogix_server, "load_dotenv"):
            with pytest.raises(SystemExit) as exc_info:
                coralogix_server.main([])

        assert exc_info.value.code == 1
        assert "CORALOGIX_API_KEY and CORALOGIX_DOMAIN" in capsys.readouterr().err

    def test_unsupported_domain_exit(self, monkeypatch, capsys):
        monkeypatch.setenv("CORALOGIX_API_KEY", "key")
        monkeypatch.setenv("CORALOGIX_DOMAIN", "coralogix.example")

        with patch.object(coralogix_server, "load_dotenv"):
            with pytest.raises(SystemExit) as exc_info:
                coralogix_server.main([])

        assert exc_info.value.code == 1
        assert "Unsupported Coralogix domain: coralogix.example" in capsys.readouterr().err


class TestAmadeusStartup:
    """The Amadeus server starts even without credentials."""

    def test_banner_without_credentials(self, monkeypatch, capsys):
        monkeypatch.delenv("AMADEUS_CLIENT_ID", raising=False)
        monkeypatch.delenv("AMADEUS_CLIENT_SECRET", raising=False)

        amadeus_server.print_banner()

        err = capsys.readouterr().err
        assert "CONFIGURATION REQUIRED" in err

    def test_banner_truncates_client_id(self, amadeus_env, capsys):
        amadeus_server.print_banner()

        err = capsys.readouterr().err
        assert "Client ID: test-cli..." in err
        assert "Environment: test" in err


class TestMcpWiring:
    """Tools from a registry are served through the MCP low-level server."""

    TOOLS = [
        {
            "name": "ping",
            "description": "Ping",
            "inputSchema": {"type": "object", "properties": {}, "required": []},
        },
        {
            "name": "ping_echo",
            "description": "Echo",
            "inputSchema": {
                "type": "object",
                "properties": {"text": {"type": "string"}},
                "required": ["text"],
            },
        },
    ]

    def make_server(self):
        async def handler(name, args):
            return "pong"

        registry = ToolRegistry([ToolRoute(name_in(self.TOOLS), self.TOOLS, handler)], log_prefix="Test")
        return create_server("test-server", "0.0.1", registry)

    @pytest.mark.asyncio
    async def test_list_tools(self):
        server = self.make_server()
        handler = server.request_handlers[types.ListToolsRequest]

        result = await handler(types.ListToolsRequest(method="tools/list"))

        tools = result.root.tools
        assert [tool.name for tool in tools] == ["ping", "ping_echo"]
        assert tools[0].inputSchema["type"] == "object"

    @pytest.mark.asyncio
    async def test_call_unknown_tool_is_error_result(self):
        server = self.make_server()
        handler = server.request_handlers[types.CallToolRequest]

        result = await handler(
            types.CallToolRequest(
                method="tools/call",
                params=types.CallToolRequestParams(name="pong", arguments={}),
            )
        )

        assert result.root.isError
        assert "Unknown tool: pong" in result.root.content[0].text

    @pytest.mark.asyncio
    async def test_invalid_arguments_use_registry_wording(self):
        server = self.make_server()
        await server.request_handlers[types.ListToolsRequest](types.ListToolsRequest(method="tools/list"))
        handler = server.request_handlers[types.CallToolRequest]

        result = await handler(
            types.CallToolRequest(
                method="tools/call",
                params=types.CallToolRequestParams(name="ping_echo", arguments={}),
            )
        )

        assert result.root.isError
        assert result.root.content[0].text == "Error: Missing required parameter(s): text"


class TestToolDefinitions:
    """Every served tool carries a usable definition."""

    @pytest.mark.parametrize("server_module", [amadeus_server, coralogix_server], ids=["amadeus", "coralogix"])
    def test_definitions_are_complete(self, server_module):
        tools = server_module.registry.get_tool_definitions()
        assert tools
        for tool in tools:
            assert tool["name"]
            assert tool["description"]
            assert tool["inputSchema"]["type"] == "object"
            assert isinstance(tool["inputSchema"]["required"], list)

    def test_tool_counts(self):
        assert len(amadeus_server.registry.get_tool_definitions()) == 20
        assert len(coralogix_server.registry.get_tool_definitions()) == 54
