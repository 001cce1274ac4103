"""Lead management tools (7 tools)."""

from __future__ import annotations

from ..registry.models import ToolCategory
from ..smartlead.adapter import Route
from .base import PAGINATION, array, define_tool, number, obj, string

CATEGORY = ToolCategory.LEAD_MANAGEMENT

_LEAD_FIELDS = {
    "email": string("Email address of the lead"),
    "first_name": string("First name of the lead"),
    "last_name": string("Last name of the lead"),
    "company": string("Company of the lead"),
    "title": string("Job title of the lead"),
    "phone": string("Phone number of the lead"),
    "custom_fields": obj("Custom fields for the lead"),
}

LEAD_TOOLS = [
    define_tool(
        "list_leads",
        "List leads with optional filtering by campaign or status.",
        CATEGORY,
        Route("GET", "/leads"),
        properties={
            "campaign_id": number("Filter leads by campaign ID"),
            "status": string('Filter leads by status (e.g., "active", "unsubscribed", "bounced")'),
            **PAGINATION,
            "search": string("Search term to filter leads"),
            "start_date": string("Filter leads created after this date (YYYY-MM-DD format)"),
            "end_date": string("Filter leads created before this date (YYYY-MM-DD format)"),
        },
    ),
    define_tool(
        "get_lead",
        "Get details of a specific lead by ID.",
        CATEGORY,
        Route("GET", "/leads/{lead_id}"),
        properties={"lead_id": number("ID of the lead to retrieve")},
        required=["lead_id"],
    ),
    define_tool(
        "add_lead_to_campaign",
        "Add a new lead to a campaign.",
        CATEGORY,
        Route("POST", "/campaigns/{campaign_id}/leads"),
        properties={
            "campaign_id": number("ID of the campaign to add the lead to"),
            **_LEAD_FIELDS,
        },
        required=["campaign_id", "email"],
    ),
    define_tool(
        "update_lead",
        "Update an existing lead's information.",
        CATEGORY,
        Route("PUT", "/leads/{lead_id}"),
        properties={"lead_id": number("ID of the lead to update"), **_LEAD_FIELDS},
        required=["lead_id"],
    ),
    define_tool(
        "update_lead_status",
        "Update a lead's status.",
        CATEGORY,
        Route("PUT", "/leads/{lead_id}/status"),
        properties={
            "lead_id": number("ID of the lead to update"),
            "status": string("New status for the lead"),
        },
        required=["lead_id", "status"],
    ),
    define_tool(
        "bulk_import_leads",
        "Import multiple leads into a campaign at once.",
        CATEGORY,
        Route("POST", "/campaigns/{campaign_id}/leads/bulk"),
        properties={
            "campaign_id": number("ID of the campaign to add the leads to"),
            "leads": array(
                obj("A lead to import", properties=dict(_LEAD_FIELDS), required=["email"]),
                "Array of leads to import",
            ),
        },
        required=["campaign_id", "leads"],
    ),
    define_tool(
        "delete_lead",
        "Delete a lead permanently.",
        CATEGORY,
        Route("DELETE", "/leads/{lead_id}"),
        properties={"lead_id": number("ID of the lead to delete")},
        required=["lead_id"],
    ),
]
