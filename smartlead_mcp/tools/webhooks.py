"""Campaign webhook tools (5 tools)."""

from __future__ import annotations

from enum import Enum

from ..registry.models import ToolCategory
from ..smartlead.adapter import Route
from .base import array, define_tool, string

CATEGORY = ToolCategory.WEBHOOKS


class WebhookEventType(str, Enum):
    """Events a Smartlead campaign webhook can subscribe to."""

    EMAIL_SENT = "EMAIL_SENT"
    EMAIL_OPEN = "EMAIL_OPEN"
    EMAIL_LINK_CLICK = "EMAIL_LINK_CLICK"
    EMAIL_REPLY = "EMAIL_REPLY"
    LEAD_UNSUBSCRIBED = "LEAD_UNSUBSCRIBED"
    LEAD_CATEGORY_UPDATED = "LEAD_CATEGORY_UPDATED"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid event type values."""
        return [event.value for event in cls]


_TIME_RANGE = {
    "fromTime": string("Start date/time in ISO 8601 format (e.g. 2025-03-21T00:00:00Z)"),
    "toTime": string("End date/time in ISO 8601 format (e.g. 2025-04-04T23:59:59Z)"),
}

WEBHOOK_TOOLS = [
    define_tool(
        "fetch_webhooks_by_campaign",
        "Fetch all the webhooks associated with a campaign using the campaign ID.",
        CATEGORY,
        Route("GET", "/campaigns/{campaign_id}/webhooks"),
        properties={"campaign_id": string("ID of the campaign to fetch webhooks for")},
        required=["campaign_id"],
    ),
    define_tool(
        "upsert_campaign_webhook",
        "Add or update a webhook for a specific campaign.",
        CATEGORY,
        Route("POST", "/campaigns/{campaign_id}/webhooks"),
        properties={
            "campaign_id": string("ID of the campaign to add/update webhook for"),
            "id": {
                "type": ["integer", "null"],
                "description": "ID of the webhook to update. Set to null to create a new webhook.",
            },
            "name": string("Name for the webhook"),
            "webhook_url": string("URL to call when the webhook event occurs"),
            "event_types": array(
                {"type": "string", "enum": WebhookEventType.values()},
                "Types of events to trigger the webhook. Options: "
                + ", ".join(WebhookEventType.values()),
            ),
            "categories": array(
                {"type": "string"},
                'Categories for filtering webhook events (e.g. ["Interested", "NotInterested"])',
            ),
        },
        required=["campaign_id", "name", "webhook_url", "event_types"],
    ),
    define_tool(
        "delete_campaign_webhook",
        "Delete a specific webhook from a campaign.",
        CATEGORY,
        Route("DELETE", "/campaigns/{campaign_id}/webhooks", delete_body=True),
        properties={
            "campaign_id": string("ID of the campaign containing the webhook"),
            "id": {"type": "integer", "description": "ID of the webhook to delete"},
        },
        required=["campaign_id", "id"],
    ),
    define_tool(
        "get_webhooks_publish_summary",
        "Get a summary of webhook publish events (Private Beta feature).",
        CATEGORY,
        Route("GET", "/campaigns/{campaign_id}/webhooks/summary"),
        properties={
            "campaign_id": string("ID of the campaign to get webhook publish summary for"),
            **_TIME_RANGE,
        },
        required=["campaign_id"],
    ),
    define_tool(
        "retrigger_failed_events",
        "Retrigger failed webhook events (Private Beta feature).",
        CATEGORY,
        Route("POST", "/campaigns/{campaign_id}/webhooks/retrigger-failed-events"),
        properties={
            "campaign_id": string("ID of the campaign to retrigger failed webhook events for"),
            **_TIME_RANGE,
        },
        required=["campaign_id", "fromTime", "toTime"],
    ),
]
