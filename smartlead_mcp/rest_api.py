"""REST API wrapper for the Smartlead tools.

Exposes the same license-gated dispatch path as the MCP server over plain
HTTP, for agents and workflow tools (n8n) that do not speak MCP.

Endpoints:
    POST /tools/{tool_name} - Call a tool with JSON body as arguments
    GET /tools - List tools enabled for the current license
    GET /license - Current license decision
    POST /license/token - Feature token for premium integrations
    GET /n8n/workflows - List n8n workflows (premium)
    POST /n8n/workflows/{workflow_id}/execute - Run an n8n workflow (premium)
    GET /health - Health check endpoint
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from typing import Any

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .errors import ErrorKind
from .n8n import N8nError
from .server import ServerContext

logger = structlog.get_logger(__name__)

ERROR_STATUS = {
    ErrorKind.UNKNOWN_OPERATION: 404,
    ErrorKind.INVALID_ARGUMENTS: 400,
    ErrorKind.NOT_LICENSED: 403,
    ErrorKind.QUOTA_EXCEEDED: 429,
    ErrorKind.UPSTREAM_FAILURE: 502,
}


def _serialize_for_json(value: Any) -> Any:
    """Recursively convert a tool payload into JSON-compatible values."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if hasattr(value, "model_dump"):
        return _serialize_for_json(value.model_dump(mode="json"))
    if isinstance(value, dict):
        return {str(k): _serialize_for_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_serialize_for_json(item) for item in value]
    return str(value)


async def _json_body(request: Request) -> dict[str, Any]:
    """Parse a JSON object body; an empty body is an empty object."""
    try:
        body = await request.body()
        data = json.loads(body) if body else {}
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=400, detail=f"Invalid JSON: {e}")
    if not isinstance(data, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")
    return data


def create_rest_app(context: ServerContext) -> FastAPI:
    """Create the FastAPI REST wrapper application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await context.aclose()

    app = FastAPI(
        title="Smartlead MCP REST API",
        description="REST API wrapper for the license-gated Smartlead tools",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "smartlead-mcp-rest",
            "version": __version__,
        }

    @app.get("/tools")
    async def list_tools():
        """List the tools enabled for the current license."""
        operations = await context.router.list_operations()
        return {
            "tools": [
                {
                    "name": op.name,
                    "category": op.category.value,
                    "description": op.description,
                    "input_schema": op.input_schema,
                }
                for op in operations
            ],
            "count": len(operations),
        }

    @app.get("/license")
    async def license_status():
        """Current license tier, entitlements and usage."""
        decision = await context.evaluator.resolve()
        return decision.summary()

    @app.post("/license/token")
    async def feature_token():
        """Issue a feature token; premium licenses only."""
        token = await context.evaluator.feature_token()
        if token is None:
            raise HTTPException(
                status_code=403,
                detail="Feature tokens require a valid premium license",
            )
        return {"token": token.token, "expires_at": token.expires_at.isoformat()}

    @app.get("/n8n/workflows")
    async def n8n_workflows():
        """List n8n workflows; premium licenses only."""
        try:
            workflows = await context.n8n.get_workflows()
        except N8nError as e:
            return JSONResponse(
                content={"success": False, "error": str(e)}, status_code=e.status_code
            )
        return {"success": True, "result": _serialize_for_json(workflows)}

    @app.post("/n8n/workflows/{workflow_id}/execute")
    async def n8n_execute(workflow_id: str, request: Request):
        """Execute an n8n workflow with the JSON body as input."""
        data = await _json_body(request)
        logger.info("rest_n8n_execute", workflow_id=workflow_id)
        try:
            result = await context.n8n.execute_workflow(workflow_id, data)
        except N8nError as e:
            return JSONResponse(
                content={"success": False, "error": str(e)}, status_code=e.status_code
            )
        return {"success": True, "result": _serialize_for_json(result)}

    @app.post("/tools/{tool_name}")
    async def call_tool(tool_name: str, request: Request):
        """Call a tool by name with JSON arguments.

        Args:
            tool_name: Name of the tool to call
            request: Request whose JSON body holds the tool arguments

        Returns:
            ``{"success": true, "result": ...}`` or
            ``{"success": false, "error": ..., "error_kind": ...}``
        """
        arguments = await _json_body(request)

        logger.info(
            "rest_tool_call",
            tool=tool_name,
            arguments_keys=list(arguments.keys()),
        )

        result = await context.router.dispatch(tool_name, arguments)
        if result.succeeded:
            return JSONResponse(
                content={"success": True, "result": _serialize_for_json(result.payload)}
            )

        return JSONResponse(
            content=result.to_dict(),
            status_code=ERROR_STATUS.get(result.error_kind, 500),
        )

    return app

