"""Campaign statistics tools (7 tools)."""

from __future__ import annotations

from ..registry.models import ToolCategory
from ..smartlead.adapter import Route
from .base import define_tool, number, string

CATEGORY = ToolCategory.CAMPAIGN_STATISTICS

_DATE_RANGE = {
    "start_date": string("Start date in YYYY-MM-DD format"),
    "end_date": string("End date in YYYY-MM-DD format"),
}

STATISTICS_TOOLS = [
    define_tool(
        "get_campaign_statistics",
        "Fetch campaign statistics using the campaign's ID.",
        CATEGORY,
        Route("GET", "/campaigns/{campaign_id}/statistics"),
        properties={
            "campaign_id": number("ID of the campaign to fetch statistics for"),
            "offset": number("Offset for pagination"),
            "limit": number("Maximum number of statistics to return"),
            "email_sequence_number": string(
                'Email sequence number to filter by (e.g., "1,2,3,4")'
            ),
            "email_status": string(
                'Email status to filter by (e.g., "opened", "clicked", "replied", '
                '"unsubscribed", "bounced")'
            ),
            "sent_time_start_date": string(
                'Filter by sent time greater than this date (e.g., "2023-10-16 10:33:02.000Z")'
            ),
            "sent_time_end_date": string(
                'Filter by sent time less than this date (e.g., "2023-10-16 10:33:02.000Z")'
            ),
        },
        required=["campaign_id"],
    ),
    define_tool(
        "get_campaign_statistics_by_date",
        "Fetch campaign statistics for a specific date range.",
        CATEGORY,
        Route("GET", "/campaigns/{campaign_id}/analytics-by-date"),
        properties={
            "campaign_id": number("ID of the campaign to fetch statistics for"),
            **_DATE_RANGE,
        },
        required=["campaign_id", "start_date", "end_date"],
    ),
    define_tool(
        "get_warmup_stats_by_email",
        "Fetch warmup stats for the last 7 days for a specific email account.",
        CATEGORY,
        Route("GET", "/email-accounts/{email_account_id}/warmup-stats"),
        properties={
            "email_account_id": number("ID of the email account to fetch warmup stats for"),
        },
        required=["email_account_id"],
    ),
    define_tool(
        "get_campaign_top_level_analytics",
        "Fetch top level analytics for a campaign.",
        CATEGORY,
        Route("GET", "/campaigns/{campaign_id}/analytics"),
        properties={"campaign_id": number("ID of the campaign to fetch analytics for")},
        required=["campaign_id"],
    ),
    define_tool(
        "get_campaign_top_level_analytics_by_date",
        "Fetch campaign top level analytics for a specific date range.",
        CATEGORY,
        Route("GET", "/campaigns/{campaign_id}/top-level-analytics-by-date"),
        properties={
            "campaign_id": number("ID of the campaign to fetch analytics for"),
            **_DATE_RANGE,
        },
        required=["campaign_id", "start_date", "end_date"],
    ),
    define_tool(
        "get_campaign_lead_statistics",
        "Fetch lead statistics for a campaign.",
        CATEGORY,
        Route("GET", "/campaigns/{campaign_id}/lead-statistics"),
        properties={
            "campaign_id": number("ID of the campaign to fetch lead statistics for"),
            "limit": number("Maximum number of leads to return (max 100)"),
            "created_at_gt": string("Filter by leads created after this date (YYYY-MM-DD format)"),
            "event_time_gt": string("Filter by events after this date (YYYY-MM-DD format)"),
            "offset": number("Offset for pagination"),
        },
        required=["campaign_id"],
    ),
    define_tool(
        "get_campaign_mailbox_statistics",
        "Fetch mailbox statistics for a campaign.",
        CATEGORY,
        Route("GET", "/campaigns/{campaign_id}/mailbox-statistics"),
        properties={
            "campaign_id": number("ID of the campaign to fetch mailbox statistics for"),
            "client_id": string("Client ID if the campaign is client-specific"),
            "offset": number("Offset for pagination"),
            "limit": number("Maximum number of results to return (min 1, max 20)"),
            "start_date": string("Start date (must be used with end_date)"),
            "end_date": string("End date (must be used with start_date)"),
            "timezone": string('Timezone for the data (e.g., "America/Los_Angeles")'),
        },
        required=["campaign_id"],
    ),
]
