"""Tests for the enablement filter."""

from __future__ import annotations

import random

import pytest

from conftest import StubEvaluator, make_decision, make_descriptor
from smartlead_mcp.licensing.models import LicenseTier
from smartlead_mcp.registry import CapabilityCatalog, EnablementFilter, ToolCategory
from smartlead_mcp.registry import enablement


def _catalog() -> CapabilityCatalog:
    return CapabilityCatalog(
        [
            make_descriptor("opA", ToolCategory.CAMPAIGN_MANAGEMENT),
            make_descriptor("opB", ToolCategory.CAMPAIGN_STATISTICS),
            make_descriptor("opC", ToolCategory.LEAD_MANAGEMENT),
        ]
    )


# =============================================================================
# Enabled Set
# =============================================================================


class TestEnabledOperations:
    """Tests for deriving the enabled set from a license decision."""

    @pytest.mark.asyncio
    async def test_only_allowed_categories_are_enabled(self):
        """opA in an allowed category is enabled, opB is not."""
        catalog = CapabilityCatalog(
            [
                make_descriptor("opA", ToolCategory.CAMPAIGN_MANAGEMENT),
                make_descriptor("opB", ToolCategory.CAMPAIGN_STATISTICS),
            ]
        )
        decision = make_decision(
            LicenseTier.FREE, allowed_categories=frozenset({ToolCategory.CAMPAIGN_MANAGEMENT})
        )
        flt = EnablementFilter(catalog, StubEvaluator(decision))

        enabled = await flt.enabled_operations()

        assert [op.name for op in enabled] == ["opA"]

    @pytest.mark.asyncio
    async def test_catalog_order_is_preserved(self):
        flt = EnablementFilter(_catalog(), StubEvaluator(make_decision(LicenseTier.PREMIUM)))
        assert [op.name for op in await flt.enabled_operations()] == ["opA", "opB", "opC"]

    @pytest.mark.asyncio
    async def test_free_tier_entitlements(self):
        flt = EnablementFilter(_catalog(), StubEvaluator(make_decision(LicenseTier.FREE)))
        assert [op.name for op in await flt.enabled_operations()] == ["opA", "opC"]

    @pytest.mark.asyncio
    async def test_category_switch_disables_licensed_category(self):
        flt = EnablementFilter(
            _catalog(),
            StubEvaluator(make_decision(LicenseTier.PREMIUM)),
            enabled_categories={"leadManagement": False},
        )
        assert [op.name for op in await flt.enabled_operations()] == ["opA", "opB"]

    @pytest.mark.asyncio
    async def test_is_enabled_unknown_name(self):
        flt = EnablementFilter(_catalog(), StubEvaluator(make_decision(LicenseTier.PREMIUM)))
        assert await flt.is_enabled("nope") is False
        assert await flt.is_enabled("opB") is True


# =============================================================================
# Overrides
# =============================================================================


class TestToolOverrides:
    """Tests for per-operation overrides."""

    @pytest.mark.asyncio
    async def test_override_enables_unlicensed_operation(self):
        flt = EnablementFilter(
            _catalog(),
            StubEvaluator(make_decision(LicenseTier.FREE)),
            tool_overrides={"opB": True},
        )
        assert "opB" in [op.name for op in await flt.enabled_operations()]

    @pytest.mark.asyncio
    async def test_override_disables_licensed_operation(self):
        flt = EnablementFilter(
            _catalog(),
            StubEvaluator(make_decision(LicenseTier.PREMIUM)),
            tool_overrides={"opA": False},
        )
        assert "opA" not in [op.name for op in await flt.enabled_operations()]

    @pytest.mark.asyncio
    async def test_override_beats_category_switch(self):
        flt = EnablementFilter(
            _catalog(),
            StubEvaluator(make_decision(LicenseTier.PREMIUM)),
            enabled_categories={"leadManagement": False},
            tool_overrides={"opC": True},
        )
        assert await flt.is_enabled("opC") is True

    @pytest.mark.asyncio
    async def test_set_tool_override_invalidates_cache(self):
        flt = EnablementFilter(_catalog(), StubEvaluator(make_decision(LicenseTier.PREMIUM)))
        assert len(await flt.enabled_operations()) == 3

        flt.set_tool_override("opB", False)
        assert [op.name for op in await flt.enabled_operations()] == ["opA", "opC"]

        flt.set_tool_override("opB", None)
        assert len(await flt.enabled_operations()) == 3


# =============================================================================
# Explain & Caching
# =============================================================================


class TestExplain:
    """Tests for EnablementFilter.explain."""

    def test_reasons(self):
        flt = EnablementFilter(
            _catalog(),
            StubEvaluator(make_decision(LicenseTier.FREE)),
            enabled_categories={"leadManagement": False},
            tool_overrides={"opA": False},
        )
        decision = make_decision(LicenseTier.FREE)

        assert flt.explain("missing", decision) == enablement.UNKNOWN
        assert flt.explain("opA", decision) == enablement.DISABLED_BY_OVERRIDE
        assert flt.explain("opB", decision) == enablement.NOT_LICENSED
        assert flt.explain("opC", decision) == enablement.CATEGORY_DISABLED

    def test_enabled_returns_none(self):
        flt = EnablementFilter(_catalog(), StubEvaluator(make_decision(LicenseTier.FREE)))
        assert flt.explain("opA", make_decision(LicenseTier.FREE)) is None


class TestEnablementCache:
    """Tests for enabled-set caching."""

    def test_recomputes_on_catalog_change(self):
        catalog = _catalog()
        flt = EnablementFilter(catalog, StubEvaluator(make_decision(LicenseTier.PREMIUM)))
        decision = make_decision(LicenseTier.PREMIUM)
        assert len(flt.enabled_for(decision)) == 3

        catalog.register(make_descriptor("opD", ToolCategory.WEBHOOKS))
        assert [op.name for op in flt.enabled_for(decision)][-1] == "opD"

    def test_recomputes_on_tier_change(self):
        flt = EnablementFilter(_catalog(), StubEvaluator(make_decision(LicenseTier.PREMIUM)))
        assert len(flt.enabled_for(make_decision(LicenseTier.PREMIUM))) == 3
        assert len(flt.enabled_for(make_decision(LicenseTier.FREE))) == 2


# =============================================================================
# Randomized Property
# =============================================================================


class TestEnablementProperty:
    """Enabled set equals catalog filtered by allowed categories, flipped by overrides."""

    def test_enabled_set_matches_allowed_categories(self):
        rng = random.Random(20250115)
        categories = list(ToolCategory)

        for _ in range(200):
            catalog = CapabilityCatalog(
                make_descriptor(f"op{i}", rng.choice(categories))
                for i in range(rng.randint(0, 25))
            )
            allowed = frozenset(rng.sample(categories, rng.randint(0, len(categories))))
            overrides = {
                op.name: rng.choice([True, False])
                for op in catalog.all()
                if rng.random() < 0.3
            }
            decision = make_decision(LicenseTier.BASIC, allowed_categories=allowed)
            flt = EnablementFilter(catalog, StubEvaluator(decision), tool_overrides=overrides)

            enabled = flt.enabled_for(decision)

            def expected_enabled(op):
                return overrides.get(op.name, op.category in allowed)

            assert enabled == [op for op in catalog.all() if expected_enabled(op)]
            for op in catalog.all():
                reason = flt.explain(op.name, decision)
                assert (reason is None) == expected_enabled(op)
                if overrides.get(op.name) is False:
                    assert reason == enablement.DISABLED_BY_OVERRIDE

    @pytest.mark.asyncio
    async def test_is_enabled_agrees_with_overrides(self):
        rng = random.Random(7)
        categories = list(ToolCategory)

        for _ in range(50):
            catalog = CapabilityCatalog(
                make_descriptor(f"op{i}", rng.choice(categories)) for i in range(10)
            )
            allowed = frozenset(rng.sample(categories, rng.randint(0, len(categories))))
            overrides = {f"op{i}": rng.choice([True, False]) for i in rng.sample(range(10), 4)}
            decision = make_decision(LicenseTier.BASIC, allowed_categories=allowed)
            flt = EnablementFilter(catalog, StubEvaluator(decision), tool_overrides=overrides)

            for op in catalog.all():
                licensed = op.category in allowed
                override = overrides.get(op.name)
                # An override only matters when it disagrees with the license
                flipped = override is not None and override != licensed
                assert await flt.is_enabled(op.name) is (licensed != flipped)
