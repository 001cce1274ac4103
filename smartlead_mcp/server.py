"""MCP server exposing the license-gated Smartlead tools.

The tool list is computed per request from the enablement filter, so a
license change is reflected on the next ``tools/list`` without a restart.
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import httpx
import structlog
from mcp import types
from mcp.server import Server
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route

from . import __version__
from .config import SmartleadConfig
from .dispatch import DispatchRouter
from .licensing.evaluator import LicenseEvaluator
from .n8n import N8nClient
from .registry.catalog import CapabilityCatalog
from .registry.enablement import EnablementFilter
from .registry.models import ToolCategory
from .smartlead.adapter import SmartleadAdapter
from .smartlead.client import SmartleadClient
from .tools import build_catalog, smartlead_routes

logger = structlog.get_logger(__name__)

INSTRUCTIONS = (
    "Smartlead tools for campaigns, leads, email accounts, statistics, Smart Delivery, "
    "webhooks, clients and Smart Senders. Available tools depend on your license tier."
)


@dataclass
class ServerContext:
    """Everything a transport needs to serve tool calls."""

    config: SmartleadConfig
    catalog: CapabilityCatalog
    evaluator: LicenseEvaluator
    enablement: EnablementFilter
    adapter: SmartleadAdapter
    router: DispatchRouter
    n8n: N8nClient

    async def aclose(self) -> None:
        await self.adapter.close()
        await self.n8n.close()
        await self.evaluator.aclose()


def build_context(
    config: SmartleadConfig,
    smartlead_transport: httpx.AsyncBaseTransport | None = None,
    license_transport: httpx.AsyncBaseTransport | None = None,
    n8n_transport: httpx.AsyncBaseTransport | None = None,
) -> ServerContext:
    """Wire catalog, evaluator, enablement filter, adapter, router and n8n client.

    Args:
        config: Validated configuration
        smartlead_transport: Optional transport for Smartlead API calls
        license_transport: Optional transport for license server calls
        n8n_transport: Optional transport for n8n calls
    """
    catalog = build_catalog()
    evaluator = LicenseEvaluator(config.license, transport=license_transport)
    enablement_filter = EnablementFilter(
        catalog,
        evaluator,
        enabled_categories=config.features.enabled_categories,
        tool_overrides=config.features.enabled_tools,
    )
    adapter = SmartleadAdapter(
        SmartleadClient(config.api, transport=smartlead_transport), smartlead_routes()
    )
    router = DispatchRouter(
        catalog,
        evaluator,
        enablement_filter,
        adapters={category: adapter for category in ToolCategory},
    )
    return ServerContext(
        config=config,
        catalog=catalog,
        evaluator=evaluator,
        enablement=enablement_filter,
        adapter=adapter,
        router=router,
        n8n=N8nClient(config.n8n, config.license, evaluator, transport=n8n_transport),
    )


def format_payload(payload: Any) -> str:
    """Render an upstream payload as tool text content."""
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, indent=2, default=str)


def create_server(context: ServerContext) -> Server:
    """Create the low-level MCP server bound to ``context``."""
    server: Server = Server(
        context.config.server.name,
        version=__version__,
        instructions=INSTRUCTIONS,
    )

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        operations = await context.router.list_operations()
        return [op.to_tool() for op in operations]

    # Arguments are validated by the dispatch router
    @server.call_tool(validate_input=False)
    async def call_tool(
        name: str, arguments: dict[str, Any] | None
    ) -> list[types.TextContent] | types.CallToolResult:
        result = await context.router.dispatch(name, arguments)
        if result.succeeded:
            return [types.TextContent(type="text", text=format_payload(result.payload))]
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=result.error_message or "Tool failed")],
            isError=True,
        )

    return server


# =============================================================================
# Transports
# =============================================================================


async def run_stdio(context: ServerContext) -> None:
    """Serve MCP over stdin/stdout until the client disconnects."""
    server = create_server(context)
    logger.info("mcp_server_started", transport="stdio")
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await context.aclose()


def create_sse_app(context: ServerContext) -> Starlette:
    """Create a Starlette app serving MCP over SSE (for n8n and remote clients)."""
    server = create_server(context)
    sse = SseServerTransport("/messages/")

    async def handle_sse(request: Request) -> Response:
        logger.info("sse_client_connected", client=request.client.host if request.client else None)
        async with sse.connect_sse(request.scope, request.receive, request._send) as (
            read_stream,
            write_stream,
        ):
            await server.run(read_stream, write_stream, server.create_initialization_options())
        return Response()

    async def health(request: Request) -> JSONResponse:
        return JSONResponse(
            {"status": "healthy", "service": "smartlead-mcp-sse", "version": __version__}
        )

    @asynccontextmanager
    async def lifespan(app: Starlette):
        yield
        await context.aclose()

    return Starlette(
        routes=[
            Route("/health", endpoint=health, methods=["GET"]),
            Route("/sse", endpoint=handle_sse, methods=["GET"]),
            Mount("/messages/", app=sse.handle_post_message),
        ],
        lifespan=lifespan,
    )
