"""Building blocks for Smartlead tool definitions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..registry.models import OperationDescriptor, ToolCategory
from ..smartlead.adapter import Route


@dataclass(frozen=True)
class SmartleadTool:
    """A catalog descriptor paired with its upstream route."""

    descriptor: OperationDescriptor
    route: Route

    @property
    def name(self) -> str:
        return self.descriptor.name


def define_tool(
    name: str,
    description: str,
    category: ToolCategory,
    route: Route,
    properties: dict[str, Any] | None = None,
    required: list[str] | None = None,
) -> SmartleadTool:
    """Declare one tool; ``name`` is prefixed with ``smartlead_``."""
    schema: dict[str, Any] = {"type": "object", "properties": properties or {}}
    if required:
        schema["required"] = required
    descriptor = OperationDescriptor(
        name=f"smartlead_{name}",
        description=description,
        category=category,
        input_schema=schema,
    )
    return SmartleadTool(descriptor=descriptor, route=route)


# =============================================================================
# Schema Helpers
# =============================================================================


def string(description: str, **extra: Any) -> dict[str, Any]:
    return {"type": "string", "description": description, **extra}


def number(description: str) -> dict[str, Any]:
    return {"type": "number", "description": description}


def integer(description: str) -> dict[str, Any]:
    return {"type": "integer", "description": description}


def boolean(description: str) -> dict[str, Any]:
    return {"type": "boolean", "description": description}


def array(items: dict[str, Any], description: str) -> dict[str, Any]:
    return {"type": "array", "items": items, "description": description}


def obj(
    description: str,
    properties: dict[str, Any] | None = None,
    required: list[str] | None = None,
) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "description": description}
    if properties:
        schema["properties"] = properties
    if required:
        schema["required"] = required
    return schema


def enum(values: list[str], description: str) -> dict[str, Any]:
    return {"type": "string", "enum": values, "description": description}


# Shared pagination arguments
PAGINATION = {
    "limit": number("Maximum number of results to return"),
    "offset": number("Offset for pagination"),
}
