"""Smart Delivery placement test tools (27 tools)."""

from __future__ import annotations

from ..registry.models import ToolCategory
from ..smartlead.adapter import Route
from ..smartlead.models import SmartleadService
from .base import array, boolean, define_tool, enum, integer, string

CATEGORY = ToolCategory.SMART_DELIVERY
SERVICE = SmartleadService.SMART_DELIVERY

_PLACEMENT_TEST_FIELDS = {
    "test_name": string("Name of your test"),
    "description": string("Description for your test to reference later"),
    "spam_filters": array(
        {"type": "string"}, 'Array of spam filters to test across, e.g. ["spam_assassin"]'
    ),
    "link_checker": boolean("Enable to check if domains for links in email body are blacklisted"),
    "campaign_id": integer("Campaign ID for which you want to select the sequence to test"),
    "sequence_mapping_id": integer("The ID of the sequence or variant you would like to test"),
    "provider_ids": array({"type": "integer"}, "Array of provider IDs to send test emails to"),
    "sender_accounts": array({"type": "string"}, "Array of email addresses to use as senders"),
    "all_email_sent_without_time_gap": boolean("Set true to send all emails simultaneously"),
    "min_time_btwn_emails": integer(
        "Time gap between each email from each mailbox (if time gap enabled)"
    ),
    "min_time_unit": string("Time unit for the time gap (minutes, hours, days)"),
    "is_warmup": boolean(
        "Set true to receive positive intent responses and move emails from spam to inbox"
    ),
}

_PLACEMENT_TEST_REQUIRED = [
    "test_name",
    "spam_filters",
    "link_checker",
    "campaign_id",
    "sequence_mapping_id",
    "provider_ids",
    "sender_accounts",
    "all_email_sent_without_time_gap",
    "min_time_btwn_emails",
    "min_time_unit",
    "is_warmup",
]

_LIST_PAGINATION = {
    "limit": integer("Number of tests to retrieve (default: 10)"),
    "offset": integer("Offset for pagination (default: 0)"),
}


def _delivery(method: str, path: str, **kwargs) -> Route:
    return Route(method, path, service=SERVICE, **kwargs)


def _spam_test_report(name: str, description: str, suffix: str, subject: str):
    """GET /spam-test/report/{spam_test_id}/<suffix> tools."""
    return define_tool(
        name,
        description,
        CATEGORY,
        _delivery("GET", f"/spam-test/report/{{spam_test_id}}/{suffix}"),
        properties={"spam_test_id": integer(f"ID of the spam test to get the {subject} for")},
        required=["spam_test_id"],
    )


def _seed_email_report(name: str, description: str, suffix: str):
    """Reports about one email received by a seed account."""
    return define_tool(
        name,
        description,
        CATEGORY,
        _delivery(
            "GET", f"/spam-test/report/{{spam_test_id}}/sender-account-wise/{{reply_id}}/{suffix}"
        ),
        properties={
            "spam_test_id": integer("ID of the spam test"),
            "reply_id": integer("ID of the email received by the seed account"),
        },
        required=["spam_test_id", "reply_id"],
    )


SMART_DELIVERY_TOOLS = [
    define_tool(
        "get_region_wise_providers",
        "Retrieve the list of all Email Providers for spam testing classified by "
        "region/country. These provider IDs are required to create manual or automated "
        "spam tests.",
        CATEGORY,
        _delivery("GET", "/spam-test/seed/providers"),
    ),
    define_tool(
        "create_manual_placement_test",
        "Create a manual placement test using Smartlead mailboxes to test email "
        "deliverability across various email providers.",
        CATEGORY,
        _delivery("POST", "/spam-test/manual"),
        properties=dict(_PLACEMENT_TEST_FIELDS),
        required=list(_PLACEMENT_TEST_REQUIRED),
    ),
    define_tool(
        "create_automated_placement_test",
        "Create an automated placement test that runs on a schedule using Smart Delivery.",
        CATEGORY,
        _delivery("POST", "/spam-test/schedule"),
        properties={
            **_PLACEMENT_TEST_FIELDS,
            "schedule_start_time": string(
                "Start date and time to schedule or run the test (ISO format)"
            ),
            "test_end_date": string("End date to stop running your test (YYYY-MM-DD format)"),
            "every_days": integer("Frequency of how often to run a new test"),
            "tz": string("Timezone for scheduling"),
            "days": array(
                {"type": "integer"}, "Days of the week to run the test (1-7, where 1 is Monday)"
            ),
            "starHour": string("Test start time"),
            "folder_id": integer("Folder ID to assign the test to"),
        },
        required=[
            *_PLACEMENT_TEST_REQUIRED,
            "schedule_start_time",
            "test_end_date",
            "every_days",
            "tz",
            "days",
        ],
    ),
    define_tool(
        "get_spam_test_details",
        "Retrieve details of a specific spam test by ID.",
        CATEGORY,
        _delivery("GET", "/spam-test/{spam_test_id}"),
        properties={"spam_test_id": integer("ID of the spam test to retrieve details for")},
        required=["spam_test_id"],
    ),
    define_tool(
        "delete_smart_delivery_tests",
        "Delete multiple Smart Delivery tests in bulk.",
        CATEGORY,
        _delivery("POST", "/spam-test/delete"),
        properties={
            "spamTestIds": array({"type": "integer"}, "Array of spam test IDs to delete"),
        },
        required=["spamTestIds"],
    ),
    define_tool(
        "stop_automated_test",
        "Stop an active automated test before its end date.",
        CATEGORY,
        _delivery("PUT", "/spam-test/{spam_test_id}/stop"),
        properties={"spam_test_id": integer("ID of the automated test to stop")},
        required=["spam_test_id"],
    ),
    define_tool(
        "list_all_tests",
        "List all Smart Delivery tests, either manual or automated.",
        CATEGORY,
        _delivery(
            "POST",
            "/spam-test/report",
            query=("testType",),
            defaults={"limit": 10, "offset": 0},
        ),
        properties={
            "testType": enum(["manual", "auto"], "Type of tests to list (manual or auto)"),
            **_LIST_PAGINATION,
        },
        required=["testType"],
    ),
    define_tool(
        "get_provider_wise_report",
        "Get detailed report of a spam test sorted by email providers.",
        CATEGORY,
        _delivery("POST", "/spam-test/report/{spam_test_id}/providerwise"),
        properties={
            "spam_test_id": integer("ID of the spam test to get the provider-wise report for"),
        },
        required=["spam_test_id"],
    ),
    define_tool(
        "get_group_wise_report",
        "Get detailed report of a spam test sorted by location (region/country).",
        CATEGORY,
        _delivery("POST", "/spam-test/report/{spam_test_id}/groupwise"),
        properties={
            "spam_test_id": integer("ID of the spam test to get the group-wise report for"),
        },
        required=["spam_test_id"],
    ),
    _spam_test_report(
        "get_sender_account_wise_report",
        "Get detailed report of a spam test sorted by sender accounts with details of each "
        "email from each mailbox.",
        "sender-account-wise",
        "sender account-wise report",
    ),
    _spam_test_report(
        "get_spam_filter_details",
        "Get spam filter report per sender mailbox showing each spam score with details "
        "leading to the score.",
        "spam-filter-details",
        "spam filter details",
    ),
    _spam_test_report(
        "get_dkim_details",
        "Check if DKIM authentication passed or failed for each sender mailbox and receiver "
        "account.",
        "dkim-details",
        "DKIM details",
    ),
    _spam_test_report(
        "get_spf_details",
        "Check if SPF authentication passed or failed for the test.",
        "spf-details",
        "SPF details",
    ),
    _spam_test_report(
        "get_rdns_details",
        "Check if rDNS was correct for an IP sending the email.",
        "rdns-details",
        "rDNS details",
    ),
    _spam_test_report(
        "get_sender_accounts",
        "Get the list of all sender accounts selected for a specific spam test.",
        "sender-accounts",
        "sender accounts",
    ),
    _spam_test_report(
        "get_blacklist",
        "Get the list of all blacklists per IP per email sent.",
        "blacklist",
        "blacklist information",
    ),
    _spam_test_report(
        "get_email_content",
        "Get details for the email content (raw, HTML) along with campaign and sequence "
        "details.",
        "email-content",
        "email content",
    ),
    _spam_test_report(
        "get_ip_analytics",
        "Get total blacklist count identified in the test.",
        "ip-analytics",
        "IP analytics",
    ),
    _seed_email_report(
        "get_email_headers",
        "Get details of the email headers for a specific email.",
        "email-headers",
    ),
    _spam_test_report(
        "get_schedule_history",
        "Get the list and summary of all tests that ran for a particular automated test.",
        "schedule-history",
        "schedule history",
    ),
    _seed_email_report(
        "get_ip_details",
        "Get the list of all blacklists per IP for a specific email.",
        "ip-details",
    ),
    define_tool(
        "get_mailbox_summary",
        "Get the list of mailboxes used for any Smart Delivery test with overall performance "
        "across all tests.",
        CATEGORY,
        _delivery("GET", "/spam-test/report/mailboxes-summary"),
        properties=dict(_LIST_PAGINATION),
    ),
    define_tool(
        "get_mailbox_count",
        "Get the count of all mailboxes used for any spam test.",
        CATEGORY,
        _delivery("GET", "/spam-test/report/mailboxes-count"),
    ),
    define_tool(
        "get_all_folders",
        "Get the list and details of all folders created in Smart Delivery along with tests "
        "inside each folder.",
        CATEGORY,
        _delivery("GET", "/spam-test/folder"),
        properties={
            "limit": integer("Number of folders to retrieve (default: 10)"),
            "offset": integer("Offset for pagination (default: 0)"),
            "name": string("Filter folders by name"),
        },
    ),
    define_tool(
        "create_folder",
        "Create a folder in Smart Delivery to organize tests.",
        CATEGORY,
        _delivery("POST", "/spam-test/folder"),
        properties={"name": string("Name of the folder to create")},
        required=["name"],
    ),
    define_tool(
        "get_folder_by_id",
        "Get details of a specific folder by ID.",
        CATEGORY,
        _delivery("GET", "/spam-test/folder/{folder_id}"),
        properties={"folder_id": integer("ID of the folder to retrieve")},
        required=["folder_id"],
    ),
    define_tool(
        "delete_folder",
        "Delete a folder from Smart Delivery.",
        CATEGORY,
        _delivery("DELETE", "/spam-test/folder/{folder_id}"),
        properties={"folder_id": integer("ID of the folder to delete")},
        required=["folder_id"],
    ),
]
