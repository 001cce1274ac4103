"""Smartlead MCP server.

Exposes the Smartlead REST API (campaigns, leads, email accounts, statistics,
Smart Delivery, webhooks, clients, Smart Senders) as MCP tools, gated by a
remote license service:
- Capability catalog of every Smartlead operation
- License evaluator with TTL cache, offline fallback and usage metering
- Enablement filter deriving the live tool list from the license tier
- Dispatch router returning a uniform result envelope
"""

__version__ = "0.1.0"
