"""Email account management tools (10 tools)."""

from __future__ import annotations

from ..registry.models import ToolCategory
from ..smartlead.adapter import Route
from .base import PAGINATION, array, boolean, define_tool, enum, number, obj, string

CATEGORY = ToolCategory.EMAIL_ACCOUNT_MANAGEMENT

_STATUS_FILTER = enum(["active", "disconnected", "pending"], "Filter email accounts by status")

_CONNECTION_FIELDS = {
    "smtp_host": string("SMTP server hostname"),
    "smtp_port": number("SMTP server port"),
    "smtp_username": string("SMTP username"),
    "smtp_password": string("SMTP password"),
    "imap_host": string("IMAP server hostname"),
    "imap_port": number("IMAP server port"),
    "imap_username": string("IMAP username"),
    "imap_password": string("IMAP password"),
    "oauth_token": string("OAuth token"),
}

EMAIL_ACCOUNT_TOOLS = [
    define_tool(
        "list_email_accounts_campaign",
        "List all email accounts associated with a specific campaign.",
        CATEGORY,
        Route("GET", "/campaigns/{campaign_id}/email-accounts"),
        properties={
            "campaign_id": number("ID of the campaign to get email accounts for"),
            "status": _STATUS_FILTER,
            **PAGINATION,
        },
        required=["campaign_id"],
    ),
    define_tool(
        "add_email_to_campaign",
        "Add an email account to a campaign.",
        CATEGORY,
        Route(
            "POST",
            "/campaigns/{campaign_id}/email-accounts",
            body=lambda args: {"email_account_ids": [args["email_account_id"]]},
        ),
        properties={
            "campaign_id": number("ID of the campaign to add the email account to"),
            "email_account_id": number("ID of the email account to add to the campaign"),
        },
        required=["campaign_id", "email_account_id"],
    ),
    define_tool(
        "remove_email_from_campaign",
        "Remove an email account from a campaign.",
        CATEGORY,
        Route(
            "DELETE",
            "/campaigns/{campaign_id}/email-accounts",
            body=lambda args: {"email_accounts_ids": [args["email_account_id"]]},
        ),
        properties={
            "campaign_id": number("ID of the campaign to remove the email account from"),
            "email_account_id": number("ID of the email account to remove from the campaign"),
        },
        required=["campaign_id", "email_account_id"],
    ),
    define_tool(
        "fetch_email_accounts",
        "Fetch all email accounts associated with the user.",
        CATEGORY,
        Route("GET", "/email-accounts/"),
        properties={"status": _STATUS_FILTER, **PAGINATION},
    ),
    define_tool(
        "create_email_account",
        "Create a new email account.",
        CATEGORY,
        # id=None tells Smartlead to create rather than update
        Route("POST", "/email-accounts/save", body=lambda args: {"id": None, **args}),
        properties={
            "email": string("Email address"),
            "provider": string('Email provider (e.g., "gmail", "outlook", "custom")'),
            "name": string("Display name for the email account"),
            **_CONNECTION_FIELDS,
            "tags": array({"type": "string"}, "Tags to assign to the email account"),
        },
        required=["email", "provider"],
    ),
    define_tool(
        "update_email_account",
        "Update an existing email account.",
        CATEGORY,
        Route("POST", "/email-accounts/{email_account_id}"),
        properties={
            "email_account_id": number("ID of the email account to update"),
            "name": string("Display name for the email account"),
            **_CONNECTION_FIELDS,
            "status": enum(["active", "paused", "disconnected"], "Status of the email account"),
        },
        required=["email_account_id"],
    ),
    define_tool(
        "fetch_email_account_by_id",
        "Fetch a specific email account by ID.",
        CATEGORY,
        Route("GET", "/email-accounts/{email_account_id}/"),
        properties={"email_account_id": number("ID of the email account to fetch")},
        required=["email_account_id"],
    ),
    define_tool(
        "update_email_warmup",
        "Add or update warmup settings for an email account.",
        CATEGORY,
        Route("POST", "/email-accounts/{email_account_id}/warmup"),
        properties={
            "email_account_id": number("ID of the email account to update warmup settings for"),
            "enabled": boolean("Whether warmup is enabled for this email account"),
            "daily_limit": number("Daily limit for warmup emails"),
            "warmup_settings": obj(
                "Additional warmup settings",
                properties={
                    "start_time": string("Start time for warmup in HH:MM format"),
                    "end_time": string("End time for warmup in HH:MM format"),
                    "days_of_week": array(
                        {"type": "number"}, "Days of the week for warmup (1-7, where 1 is Monday)"
                    ),
                },
            ),
        },
        required=["email_account_id", "enabled"],
    ),
    define_tool(
        "reconnect_email_account",
        "Reconnect a failed email account.",
        CATEGORY,
        # The endpoint retries every failed account; it takes no parameters
        Route(
            "POST",
            "/email-accounts/reconnect-failed-email-accounts",
            body=lambda args: {},
        ),
        properties={
            "email_account_id": number("ID of the email account to reconnect"),
            "connection_details": obj(
                "Connection details for reconnecting the email account",
                properties=dict(_CONNECTION_FIELDS),
            ),
        },
        required=["email_account_id"],
    ),
    define_tool(
        "update_email_account_tag",
        "Update tags for an email account.",
        CATEGORY,
        Route("POST", "/email-accounts/tag-manager"),
        properties={
            "email_account_id": number("ID of the email account to update tags for"),
            "tags": array({"type": "string"}, "Tags to assign to the email account"),
        },
        required=["email_account_id", "tags"],
    ),
]
