"""Tests for the MCP server handlers and the SSE app."""

from __future__ import annotations

import json

import pytest
from mcp import types
from starlette.testclient import TestClient

from conftest import build_test_context
from smartlead_mcp.server import create_server, create_sse_app, format_payload


async def _list_tools(server) -> list[types.Tool]:
    handler = server.request_handlers[types.ListToolsRequest]
    result = await handler(types.ListToolsRequest(method="tools/list"))
    return result.root.tools


async def _call_tool(server, name: str, arguments: dict | None = None) -> types.CallToolResult:
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )
    result = await handler(request)
    return result.root


class TestMcpHandlers:
    """Tests for tools/list and tools/call."""

    @pytest.mark.asyncio
    async def test_list_tools_is_license_gated(self, license_server):
        context = build_test_context(license_server)
        tools = await _list_tools(create_server(context))

        names = {tool.name for tool in tools}
        assert "smartlead_get_campaign" in names
        assert "smartlead_get_vendors" not in names
        await context.aclose()

    @pytest.mark.asyncio
    async def test_list_tools_respects_overrides(self, license_server):
        context = build_test_context(
            license_server, enabled_tools={"smartlead_get_vendors": True}
        )
        tools = await _list_tools(create_server(context))

        assert "smartlead_get_vendors" in {tool.name for tool in tools}
        await context.aclose()

    @pytest.mark.asyncio
    async def test_call_tool_success(self, license_server):
        context = build_test_context(license_server)
        result = await _call_tool(
            create_server(context), "smartlead_get_campaign", {"campaign_id": 7}
        )

        assert result.isError is False
        assert json.loads(result.content[0].text) == {"id": 7, "name": "Q1 Outreach"}
        await context.aclose()

    @pytest.mark.asyncio
    async def test_call_tool_failure_is_tool_error(self, license_server):
        context = build_test_context(license_server)
        result = await _call_tool(create_server(context), "smartlead_list_clients", {})

        assert result.isError is True
        assert "clientManagement" in result.content[0].text
        await context.aclose()

    @pytest.mark.asyncio
    async def test_call_unknown_tool(self, license_server):
        context = build_test_context(license_server)
        result = await _call_tool(create_server(context), "nope")

        assert result.isError is True
        assert result.content[0].text == "Unknown tool: nope"
        await context.aclose()


class TestFormatPayload:
    """Tests for format_payload."""

    def test_text_is_passed_through(self):
        assert format_payload("email,name") == "email,name"

    def test_json_is_indented(self):
        assert format_payload({"a": 1}) == '{\n  "a": 1\n}'


class TestSseApp:
    """Tests for the SSE Starlette app."""

    def test_health(self, license_server):
        with TestClient(create_sse_app(build_test_context(license_server))) as client:
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["service"] == "smartlead-mcp-sse"
