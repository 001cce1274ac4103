"""Tests for the dispatch router.

Every invocation must end in a DispatchResult: unknown names, bad
arguments, licensing, quota and upstream failures are classified, never
raised.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import StubEvaluator, make_decision, make_descriptor
from smartlead_mcp.dispatch import DispatchResult, DispatchRouter
from smartlead_mcp.errors import ErrorKind, QuotaExceeded
from smartlead_mcp.licensing.models import LicenseTier
from smartlead_mcp.registry import CapabilityCatalog, EnablementFilter, ToolCategory
from smartlead_mcp.smartlead.client import SmartleadNonRetriableError
from smartlead_mcp.smartlead.models import SmartleadErrorType

# =============================================================================
# Helpers
# =============================================================================


def create_mock_adapter(return_value=None, side_effect: Exception | None = None):
    """Create a mock upstream adapter."""
    adapter = MagicMock()
    if side_effect:
        adapter.call = AsyncMock(side_effect=side_effect)
    else:
        adapter.call = AsyncMock(return_value=return_value)
    return adapter


def _catalog() -> CapabilityCatalog:
    return CapabilityCatalog(
        [
            make_descriptor(
                "smartlead_get_campaign",
                ToolCategory.CAMPAIGN_MANAGEMENT,
                properties={"campaign_id": {"type": "integer"}},
                required=["campaign_id"],
            ),
            make_descriptor("smartlead_list_clients", ToolCategory.CLIENT_MANAGEMENT),
        ]
    )


def build_router(
    evaluator: StubEvaluator,
    adapter=None,
    catalog: CapabilityCatalog | None = None,
    **filter_kwargs,
) -> DispatchRouter:
    catalog = catalog or _catalog()
    adapter = adapter or create_mock_adapter(return_value={"ok": True})
    return DispatchRouter(
        catalog,
        evaluator,
        EnablementFilter(catalog, evaluator, **filter_kwargs),
        adapters={category: adapter for category in ToolCategory},
    )


# =============================================================================
# Success Path
# =============================================================================


class TestDispatchSuccess:
    """Tests for successful dispatch."""

    @pytest.mark.asyncio
    async def test_forwards_to_adapter(self, premium_evaluator):
        adapter = create_mock_adapter(return_value={"id": 42, "name": "Q1 Outreach"})
        router = build_router(premium_evaluator, adapter)

        result = await router.dispatch("smartlead_get_campaign", {"campaign_id": 42})

        assert result.succeeded is True
        assert result.payload == {"id": 42, "name": "Q1 Outreach"}
        descriptor, arguments = adapter.call.call_args.args
        assert descriptor.name == "smartlead_get_campaign"
        assert arguments == {"campaign_id": 42}
        assert adapter.call.call_args.kwargs["correlation_id"]

    @pytest.mark.asyncio
    async def test_meters_each_success(self, premium_evaluator):
        router = build_router(premium_evaluator)

        await router.dispatch("smartlead_list_clients")
        await router.dispatch("smartlead_list_clients", None)

        assert premium_evaluator.tracked == ["smartlead_list_clients"] * 2

    @pytest.mark.asyncio
    async def test_list_operations_uses_enablement(self):
        evaluator = StubEvaluator(make_decision(LicenseTier.FREE))
        router = build_router(evaluator)

        names = [op.name for op in await router.list_operations()]

        assert names == ["smartlead_get_campaign"]


# =============================================================================
# Classified Failures
# =============================================================================


class TestDispatchFailures:
    """Tests for each ErrorKind."""

    @pytest.mark.asyncio
    async def test_unknown_operation_never_resolves_license(self, premium_evaluator):
        adapter = create_mock_adapter()
        router = build_router(premium_evaluator, adapter)

        result = await router.dispatch("nonexistent", {})

        assert result.succeeded is False
        assert result.error_kind is ErrorKind.UNKNOWN_OPERATION
        assert result.error_message == "Unknown tool: nonexistent"
        assert premium_evaluator.resolve_calls == 0
        adapter.call.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_arguments(self, premium_evaluator):
        adapter = create_mock_adapter()
        router = build_router(premium_evaluator, adapter)

        result = await router.dispatch("smartlead_get_campaign", {"campaign_id": "abc"})

        assert result.error_kind is ErrorKind.INVALID_ARGUMENTS
        assert "campaign_id: 'abc' is not of type 'integer'" in result.error_message
        assert premium_evaluator.tracked == []
        adapter.call.assert_not_called()

    @pytest.mark.asyncio
    async def test_not_licensed(self):
        evaluator = StubEvaluator(make_decision(LicenseTier.FREE))
        adapter = create_mock_adapter()
        router = build_router(evaluator, adapter)

        result = await router.dispatch("smartlead_list_clients")

        assert result.error_kind is ErrorKind.NOT_LICENSED
        assert "clientManagement" in result.error_message
        assert "requires the premium tier or higher" in result.error_message
        assert "current tier is free" in result.error_message
        assert evaluator.tracked == []
        adapter.call.assert_not_called()

    @pytest.mark.asyncio
    async def test_disabled_by_override(self, premium_evaluator):
        router = build_router(
            premium_evaluator, tool_overrides={"smartlead_list_clients": False}
        )

        result = await router.dispatch("smartlead_list_clients")

        assert result.error_kind is ErrorKind.NOT_LICENSED
        assert "disabled by configuration" in result.error_message

    @pytest.mark.asyncio
    async def test_quota_exceeded_after_two_calls(self):
        """With a quota of 2 the third call is refused before reaching upstream."""
        evaluator = StubEvaluator(make_decision(LicenseTier.FREE, request_quota=2))
        adapter = create_mock_adapter(return_value={"ok": True})
        router = build_router(evaluator, adapter)

        await evaluator.track_usage("smartlead_get_campaign")
        await evaluator.track_usage("smartlead_get_campaign")
        result = await router.dispatch("smartlead_get_campaign", {"campaign_id": 1})

        assert result.error_kind is ErrorKind.QUOTA_EXCEEDED
        assert evaluator.usage == 2
        adapter.call.assert_not_called()

    @pytest.mark.asyncio
    async def test_upstream_api_error(self, premium_evaluator):
        adapter = create_mock_adapter(
            side_effect=SmartleadNonRetriableError(
                "Campaign not found", SmartleadErrorType.NOT_FOUND, 404
            )
        )
        router = build_router(premium_evaluator, adapter)

        result = await router.dispatch("smartlead_get_campaign", {"campaign_id": 9})

        assert result.error_kind is ErrorKind.UPSTREAM_FAILURE
        assert result.error_message == "API Error: Campaign not found"

    @pytest.mark.asyncio
    async def test_unexpected_adapter_exception(self, premium_evaluator):
        router = build_router(
            premium_evaluator, create_mock_adapter(side_effect=RuntimeError("boom"))
        )

        result = await router.dispatch("smartlead_list_clients")

        assert result.error_kind is ErrorKind.UPSTREAM_FAILURE
        assert result.error_message == "Upstream call failed (RuntimeError)"

    @pytest.mark.asyncio
    async def test_missing_adapter(self, premium_evaluator):
        catalog = _catalog()
        router = DispatchRouter(
            catalog,
            premium_evaluator,
            EnablementFilter(catalog, premium_evaluator),
            adapters={},
        )

        result = await router.dispatch("smartlead_list_clients")

        assert result.error_kind is ErrorKind.UPSTREAM_FAILURE
        assert "clientManagement" in result.error_message


# =============================================================================
# Result Envelope
# =============================================================================


class TestDispatchResult:
    """Tests for DispatchResult."""

    def test_success_dict(self):
        assert DispatchResult.success("op", [1, 2]).to_dict() == {
            "success": True,
            "result": [1, 2],
        }

    def test_failure_dict(self):
        result = DispatchResult.failure("op", QuotaExceeded("Quota reached", "op"))
        assert result.to_dict() == {
            "success": False,
            "error": "Quota reached",
            "error_kind": "quota_exceeded",
        }
