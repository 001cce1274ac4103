"""Registry data models and argument validation.

Provides:
- Tool category enum
- OperationDescriptor, the immutable catalog entry
- JSON Schema validation for tool arguments (jsonschema)
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from jsonschema import Draft202012Validator, SchemaError, ValidationError
from mcp import types
from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# Tool Categories
# =============================================================================


class ToolCategory(str, Enum):
    """Functional groups of Smartlead operations."""

    CAMPAIGN_MANAGEMENT = "campaignManagement"
    EMAIL_ACCOUNT_MANAGEMENT = "emailAccountManagement"
    LEAD_MANAGEMENT = "leadManagement"
    CAMPAIGN_STATISTICS = "campaignStatistics"
    SMART_DELIVERY = "smartDelivery"
    WEBHOOKS = "webhooks"
    CLIENT_MANAGEMENT = "clientManagement"
    SMART_SENDERS = "smartSenders"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid category values."""
        return [category.value for category in cls]

    @classmethod
    def validate(cls, category: str) -> bool:
        """Check if a category name is valid."""
        return category in cls.values()


# =============================================================================
# Operation Descriptor
# =============================================================================


class OperationDescriptor(BaseModel):
    """A named, categorized operation with an input schema."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Unique, stable operation name")
    category: ToolCategory
    description: str = ""
    input_schema: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    @field_validator("input_schema")
    @classmethod
    def validate_object_schema(cls, v: dict[str, Any]) -> dict[str, Any]:
        if v.get("type") != "object":
            raise ValueError("input_schema must describe an object")
        try:
            Draft202012Validator.check_schema(v)
        except SchemaError as e:
            raise ValueError(f"input_schema is not a valid JSON Schema: {e.message}") from e
        return v

    def to_tool(self) -> types.Tool:
        """Convert to the MCP tool listing shape."""
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema,
        )


# =============================================================================
# Argument Validation
# =============================================================================


def _format_error(error: ValidationError) -> str:
    location = ""
    for part in error.absolute_path:
        location += f"[{part}]" if isinstance(part, int) else (f".{part}" if location else str(part))
    return f"{location}: {error.message}" if location else error.message


def validate_arguments(schema: dict[str, Any], arguments: dict[str, Any]) -> list[str]:
    """Validate tool arguments against an input schema.

    Top-level arguments set to None are treated as omitted, so an explicit
    null for a required property reports it as missing.

    Args:
        schema: Object schema from an OperationDescriptor
        arguments: Arguments supplied by the caller

    Returns:
        List of validation error messages (empty when valid)
    """
    if not isinstance(arguments, dict):
        return ["arguments must be an object"]
    present = {key: value for key, value in arguments.items() if value is not None}
    errors = sorted(
        Draft202012Validator(schema).iter_errors(present),
        key=lambda e: [str(part) for part in e.absolute_path],
    )
    return [_format_error(error) for error in errors]
