"""Campaign management tools (13 tools)."""

from __future__ import annotations

from ..registry.models import ToolCategory
from ..smartlead.adapter import Route
from .base import PAGINATION, array, define_tool, enum, number, obj, string

CATEGORY = ToolCategory.CAMPAIGN_MANAGEMENT

_CAMPAIGN_ID = "ID of the campaign"

_SEQUENCE_VARIANT = obj(
    "Variant of the email in this sequence step",
    properties={
        "subject": string("Email subject line"),
        "email_body": string("Email body content in HTML"),
        "variant_label": string("Label for this variant (A, B, C, etc.)"),
        "variant_distribution_percentage": number(
            "Percentage of leads to receive this variant (for MANUAL_PERCENTAGE)"
        ),
    },
    required=["subject", "email_body", "variant_label"],
)

_SEQUENCE_STEP = obj(
    "One email in the sequence",
    properties={
        "seq_number": number("The sequence number (order) of this email"),
        "seq_delay_details": obj(
            "Delay details for this sequence",
            properties={"delay_in_days": number("Days to wait before sending this email")},
        ),
        "variant_distribution_type": enum(
            ["MANUAL_EQUAL", "MANUAL_PERCENTAGE", "AI_EQUAL"], "How to distribute variants"
        ),
        "lead_distribution_percentage": number(
            "What sample % size of the lead pool to use to find the winner (for AI_EQUAL)"
        ),
        "winning_metric_property": enum(
            ["OPEN_RATE", "CLICK_RATE", "REPLY_RATE", "POSITIVE_REPLY_RATE"],
            "Metric to use for determining the winning variant (for AI_EQUAL)",
        ),
        "seq_variants": array(_SEQUENCE_VARIANT, "Variants of the email in this sequence"),
    },
    required=["seq_number", "seq_delay_details", "variant_distribution_type", "seq_variants"],
)

CAMPAIGN_TOOLS = [
    define_tool(
        "create_campaign",
        "Create a new campaign in Smartlead.",
        CATEGORY,
        Route("POST", "/campaigns/create"),
        properties={
            "name": string("Name of the campaign"),
            "client_id": number("Client ID for the campaign"),
        },
        required=["name"],
    ),
    define_tool(
        "update_campaign_schedule",
        "Update a campaign's schedule settings.",
        CATEGORY,
        Route("POST", "/campaigns/{campaign_id}/schedule"),
        properties={
            "campaign_id": number("ID of the campaign to update"),
            "timezone": string('Timezone for the campaign (e.g., "America/Los_Angeles")'),
            "days_of_the_week": array(
                {"type": "number"}, "Days of the week to send emails (1-7, where 1 is Monday)"
            ),
            "start_hour": string('Start hour in 24-hour format (e.g., "09:00")'),
            "end_hour": string('End hour in 24-hour format (e.g., "17:00")'),
            "min_time_btw_emails": number("Minimum time between emails in minutes"),
            "max_new_leads_per_day": number("Maximum number of new leads per day"),
            "schedule_start_time": string("Schedule start time in ISO format"),
        },
        required=["campaign_id"],
    ),
    define_tool(
        "update_campaign_settings",
        "Update a campaign's general settings.",
        CATEGORY,
        Route("POST", "/campaigns/{campaign_id}/settings"),
        properties={
            "campaign_id": number("ID of the campaign to update"),
            "name": string("New name for the campaign"),
            "status": enum(["active", "paused", "completed"], "Status of the campaign"),
            "settings": obj("Additional campaign settings"),
        },
        required=["campaign_id"],
    ),
    define_tool(
        "update_campaign_status",
        "Update the status of a campaign. Use this specifically for changing a "
        "campaign's status.",
        CATEGORY,
        Route("POST", "/campaigns/{campaign_id}/status"),
        properties={
            "campaign_id": number("ID of the campaign to update the status for"),
            "status": enum(
                ["PAUSED", "STOPPED", "START"],
                "New status for the campaign (must be in uppercase)",
            ),
        },
        required=["campaign_id", "status"],
    ),
    define_tool(
        "get_campaign",
        "Get details of a specific campaign by ID.",
        CATEGORY,
        Route("GET", "/campaigns/{campaign_id}"),
        properties={"campaign_id": number("ID of the campaign to retrieve")},
        required=["campaign_id"],
    ),
    define_tool(
        "list_campaigns",
        "List all campaigns with optional pagination.",
        CATEGORY,
        Route("GET", "/campaigns"),
        properties=dict(PAGINATION),
    ),
    define_tool(
        "save_campaign_sequence",
        "Save a sequence of emails for a campaign.",
        CATEGORY,
        Route("POST", "/campaigns/{campaign_id}/sequences"),
        properties={
            "campaign_id": number(_CAMPAIGN_ID),
            "sequence": array(_SEQUENCE_STEP, "Sequence of emails to send"),
        },
        required=["campaign_id", "sequence"],
    ),
    define_tool(
        "get_campaign_sequence",
        "Fetch a campaign's sequence data.",
        CATEGORY,
        Route("GET", "/campaigns/{campaign_id}/sequences"),
        properties={"campaign_id": number("ID of the campaign to fetch sequences for")},
        required=["campaign_id"],
    ),
    define_tool(
        "get_campaigns_by_lead",
        "Fetch all campaigns that a lead belongs to.",
        CATEGORY,
        Route("GET", "/leads/{lead_id}/campaigns"),
        properties={"lead_id": number("ID of the lead to fetch campaigns for")},
        required=["lead_id"],
    ),
    define_tool(
        "export_campaign_leads",
        "Export all leads data from a campaign as CSV.",
        CATEGORY,
        Route("GET", "/campaigns/{campaign_id}/leads-export"),
        properties={"campaign_id": number("ID of the campaign to export leads from")},
        required=["campaign_id"],
    ),
    define_tool(
        "delete_campaign",
        "Delete a campaign permanently.",
        CATEGORY,
        Route("DELETE", "/campaigns/{campaign_id}"),
        properties={"campaign_id": number("ID of the campaign to delete")},
        required=["campaign_id"],
    ),
    define_tool(
        "get_campaign_analytics_by_date",
        "Fetch campaign analytics for a specific date range.",
        CATEGORY,
        Route("GET", "/campaigns/{campaign_id}/analytics-by-date"),
        properties={
            "campaign_id": number("ID of the campaign to fetch analytics for"),
            "start_date": string("Start date in YYYY-MM-DD format", format="date"),
            "end_date": string("End date in YYYY-MM-DD format", format="date"),
        },
        required=["campaign_id", "start_date", "end_date"],
    ),
    define_tool(
        "get_campaign_sequence_analytics",
        "Fetch analytics data for a specific email campaign sequence.",
        CATEGORY,
        Route("GET", "/campaigns/{campaign_id}/sequence-analytics"),
        properties={
            "campaign_id": number("ID of the campaign to fetch sequence analytics for"),
            "start_date": string("Start date in YYYY-MM-DD HH:MM:SS format"),
            "end_date": string("End date in YYYY-MM-DD HH:MM:SS format"),
            "time_zone": string('Timezone for the analytics data (e.g., "Europe/London")'),
        },
        required=["campaign_id", "start_date", "end_date"],
    ),
]
