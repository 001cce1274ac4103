"""Smartlead tool definitions.

76 tools across 8 categories (Campaigns, Email Accounts, Leads, Statistics,
Smart Delivery, Webhooks, Clients, Smart Senders). Each tool pairs an
OperationDescriptor for the catalog with the Route the adapter executes.
"""

from __future__ import annotations

from ..registry.catalog import CapabilityCatalog
from ..smartlead.adapter import Route
from .base import SmartleadTool
from .campaign import CAMPAIGN_TOOLS
from .clients import CLIENT_TOOLS
from .email_accounts import EMAIL_ACCOUNT_TOOLS
from .leads import LEAD_TOOLS
from .smart_delivery import SMART_DELIVERY_TOOLS
from .smart_senders import SMART_SENDERS_TOOLS
from .statistics import STATISTICS_TOOLS
from .webhooks import WEBHOOK_TOOLS

ALL_TOOLS: list[SmartleadTool] = [
    *CAMPAIGN_TOOLS,
    *EMAIL_ACCOUNT_TOOLS,
    *LEAD_TOOLS,
    *STATISTICS_TOOLS,
    *SMART_DELIVERY_TOOLS,
    *WEBHOOK_TOOLS,
    *CLIENT_TOOLS,
    *SMART_SENDERS_TOOLS,
]


def register_smartlead_tools(catalog: CapabilityCatalog) -> None:
    """Register every Smartlead operation in ``catalog``."""
    catalog.register_many(tool.descriptor for tool in ALL_TOOLS)


def smartlead_routes() -> dict[str, Route]:
    """Route table keyed by operation name."""
    return {tool.name: tool.route for tool in ALL_TOOLS}


def build_catalog() -> CapabilityCatalog:
    catalog = CapabilityCatalog()
    register_smartlead_tools(catalog)
    return catalog


__all__ = [
    "ALL_TOOLS",
    "SmartleadTool",
    "build_catalog",
    "register_smartlead_tools",
    "smartlead_routes",
]
