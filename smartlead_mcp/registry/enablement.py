"""Enablement filter: which catalog operations are live for a license.

An operation is enabled when its category is allowed by the license tier and
switched on by the operator. A per-operation override, when present, is
applied last and wins in either direction.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

from .catalog import CapabilityCatalog
from .models import OperationDescriptor

if TYPE_CHECKING:
    from ..licensing.models import LicenseDecision, LicenseTier


class LicenseResolver(Protocol):
    async def resolve(self) -> LicenseDecision: ...


# Reasons reported by EnablementFilter.explain
UNKNOWN = "unknown"
DISABLED_BY_OVERRIDE = "disabled_by_override"
NOT_LICENSED = "not_licensed"
CATEGORY_DISABLED = "category_disabled"


class EnablementFilter:
    """Derives the enabled operation set from catalog and license decision.

    The result is cached and recomputed only when the catalog generation, the
    decision's resolution time or its tier changes.
    """

    def __init__(
        self,
        catalog: CapabilityCatalog,
        evaluator: LicenseResolver,
        enabled_categories: Mapping[str, bool] | None = None,
        tool_overrides: Mapping[str, bool] | None = None,
    ):
        self.catalog = catalog
        self.evaluator = evaluator
        self._enabled_categories = dict(enabled_categories or {})
        self._tool_overrides = dict(tool_overrides or {})
        self._cache_key: tuple[int, datetime, LicenseTier] | None = None
        self._cached: list[OperationDescriptor] = []

    def set_tool_override(self, name: str, enabled: bool | None) -> None:
        """Force an operation on or off; None removes the override."""
        if enabled is None:
            self._tool_overrides.pop(name, None)
        else:
            self._tool_overrides[name] = enabled
        self._cache_key = None

    def _category_switched_on(self, descriptor: OperationDescriptor) -> bool:
        return self._enabled_categories.get(descriptor.category.value, True)

    def _allows(self, descriptor: OperationDescriptor, decision: LicenseDecision) -> bool:
        override = self._tool_overrides.get(descriptor.name)
        if override is not None:
            return override
        return descriptor.category in decision.allowed_categories and self._category_switched_on(
            descriptor
        )

    def enabled_for(self, decision: LicenseDecision) -> list[OperationDescriptor]:
        """Enabled operations for an already resolved decision, in catalog order."""
        key = (self.catalog.generation, decision.resolved_at, decision.tier)
        if key != self._cache_key:
            self._cached = [op for op in self.catalog.all() if self._allows(op, decision)]
            self._cache_key = key
        return list(self._cached)

    async def enabled_operations(self) -> list[OperationDescriptor]:
        decision = await self.evaluator.resolve()
        return self.enabled_for(decision)

    async def is_enabled(self, name: str) -> bool:
        """True if ``name`` is in the enabled set; False for unknown names."""
        descriptor = self.catalog.get_by_name(name)
        if descriptor is None:
            return False
        decision = await self.evaluator.resolve()
        return self._allows(descriptor, decision)

    def explain(self, name: str, decision: LicenseDecision) -> str | None:
        """Why ``name`` is not enabled under ``decision``, or None if it is."""
        descriptor = self.catalog.get_by_name(name)
        if descriptor is None:
            return UNKNOWN
        override = self._tool_overrides.get(name)
        if override is not None:
            return None if override else DISABLED_BY_OVERRIDE
        if descriptor.category not in decision.allowed_categories:
            return NOT_LICENSED
        if not self._category_switched_on(descriptor):
            return CATEGORY_DISABLED
        return None
