"""Smart Senders domain and mailbox provisioning tools (5 tools)."""

from __future__ import annotations

from ..registry.models import ToolCategory
from ..smartlead.adapter import Route
from ..smartlead.models import SmartleadService
from .base import array, define_tool, integer, obj, string

CATEGORY = ToolCategory.SMART_SENDERS
SERVICE = SmartleadService.SMART_SENDERS

_VENDOR_ID = integer(
    "ID of the vendor from whom you want to purchase the domains and mailboxes"
)
_PROFILE_PIC = string("URL or identifier for profile picture (optional)")

_GENERATED_MAILBOX = obj(
    "Mailbox owner details",
    properties={
        "first_name": string(
            "First name for the mailbox owner (should be more than 2 characters and without spaces)"
        ),
        "last_name": string(
            "Last name for the mailbox owner (should be more than 2 characters and without spaces)"
        ),
        "profile_pic": _PROFILE_PIC,
    },
    required=["first_name", "last_name"],
)

_ORDERED_MAILBOX = obj(
    "Mailbox to purchase",
    properties={
        "mailbox": string("The complete mailbox address (e.g., john@example.com)"),
        "first_name": string("First name for the mailbox owner"),
        "last_name": string("Last name for the mailbox owner"),
        "profile_pic": _PROFILE_PIC,
    },
    required=["mailbox", "first_name", "last_name"],
)

SMART_SENDERS_TOOLS = [
    define_tool(
        "get_vendors",
        "Retrieve all active domain vendors with their corresponding IDs.",
        CATEGORY,
        Route("GET", "/smart-senders/get-vendors", service=SERVICE),
    ),
    define_tool(
        "search_domain",
        "Search for available domains under $15 that match a given domain name pattern.",
        CATEGORY,
        Route("GET", "/smart-senders/search-domain", service=SERVICE),
        properties={
            "domain_name": string("The domain name pattern you want to search for"),
            "vendor_id": integer(
                "ID of the vendor from whom you want to purchase the domain "
                "(use Get Vendors API to retrieve this ID)"
            ),
        },
        required=["domain_name", "vendor_id"],
    ),
    define_tool(
        "auto_generate_mailboxes",
        "Auto-generate mailboxes based on the domain name and personal details provided.",
        CATEGORY,
        Route("POST", "/smart-senders/auto-generate-mailboxes", service=SERVICE),
        properties={
            "vendor_id": _VENDOR_ID,
            "domains": array(
                obj(
                    "Domain to generate mailboxes for",
                    properties={
                        "domain_name": string(
                            "The domain name for which you want to generate mailboxes "
                            "(e.g., example.com)"
                        ),
                        "mailbox_details": array(
                            _GENERATED_MAILBOX, "Details for each mailbox you want to generate"
                        ),
                    },
                    required=["domain_name", "mailbox_details"],
                ),
                "List of domains and associated mailbox details",
            ),
        },
        required=["vendor_id", "domains"],
    ),
    define_tool(
        "place_order_mailboxes",
        "Confirm and place order for domains and mailboxes to be purchased.",
        CATEGORY,
        Route("POST", "/smart-senders/place-order", service=SERVICE),
        properties={
            "vendor_id": _VENDOR_ID,
            "forwarding_domain": string(
                "The domain to forward to when users access purchased domains"
            ),
            "domains": array(
                obj(
                    "Domain to purchase",
                    properties={
                        "domain_name": string("The domain name you want to purchase"),
                        "mailbox_details": array(
                            _ORDERED_MAILBOX, "Details for each mailbox you want to purchase"
                        ),
                    },
                    required=["domain_name", "mailbox_details"],
                ),
                "List of domains and associated mailbox details for purchase",
            ),
        },
        required=["vendor_id", "forwarding_domain", "domains"],
    ),
    define_tool(
        "get_domain_list",
        "Retrieve a list of all domains purchased through SmartSenders.",
        CATEGORY,
        Route("GET", "/smart-senders/get-domain-list", service=SERVICE),
    ),
]
