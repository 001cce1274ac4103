"""Client management tools (2 tools)."""

from __future__ import annotations

from ..registry.models import ToolCategory
from ..smartlead.adapter import Route
from .base import array, define_tool, string

CATEGORY = ToolCategory.CLIENT_MANAGEMENT

CLIENT_TOOLS = [
    define_tool(
        "add_client",
        "Add a new client to the system, optionally with white-label settings.",
        CATEGORY,
        Route("POST", "/client/save"),
        properties={
            "name": string("Name of the client"),
            "email": string("Email address of the client"),
            "permission": array(
                {"type": "string"},
                'Array of permissions to grant to the client. Use ["full_access"] for full '
                "permissions.",
            ),
            "logo": string("Logo text or identifier"),
            "logo_url": {
                "type": ["string", "null"],
                "description": "URL to the client's logo image",
            },
            "password": string("Password for the client's account"),
        },
        required=["name", "email", "permission", "password"],
    ),
    define_tool(
        "fetch_all_clients",
        "Retrieve a list of all clients in the system.",
        CATEGORY,
        Route("GET", "/client/"),
    ),
]
