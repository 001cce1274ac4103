"""Dispatch router: validate, gate, meter and forward tool invocations.

Every invocation ends in a DispatchResult. Expected failures (unknown
operation, bad arguments, licensing, quota, upstream errors) never escape
as exceptions.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import structlog

from .errors import (
    DispatchError,
    ErrorKind,
    InvalidArguments,
    NotLicensed,
    QuotaExceeded,
    UnknownOperation,
    UpstreamFailure,
)
from .licensing.models import LicenseDecision, minimum_tier_for
from .logging import generate_correlation_id, log_tool_error, log_tool_result, log_tool_start
from .registry import enablement
from .registry.catalog import CapabilityCatalog
from .registry.enablement import EnablementFilter
from .registry.models import OperationDescriptor, ToolCategory, validate_arguments
from .smartlead.client import SmartleadAPIError

logger = structlog.get_logger(__name__)


class UpstreamAdapter(Protocol):
    async def call(
        self,
        descriptor: OperationDescriptor,
        arguments: Mapping[str, Any],
        correlation_id: str | None = None,
    ) -> Any: ...


class UsageMeter(Protocol):
    async def resolve(self) -> LicenseDecision: ...

    def check_quota(self, decision: LicenseDecision) -> bool: ...

    async def track_usage(self, operation_name: str) -> int: ...


@dataclass(frozen=True)
class DispatchResult:
    """Uniform outcome of a tool invocation."""

    operation: str
    succeeded: bool
    payload: Any = None
    error_message: str | None = None
    error_kind: ErrorKind | None = None

    @classmethod
    def success(cls, operation: str, payload: Any) -> DispatchResult:
        return cls(operation=operation, succeeded=True, payload=payload)

    @classmethod
    def failure(cls, operation: str, error: DispatchError) -> DispatchResult:
        return cls(
            operation=operation,
            succeeded=False,
            error_message=str(error),
            error_kind=error.kind,
        )

    def to_dict(self) -> dict[str, Any]:
        if self.succeeded:
            return {"success": True, "result": self.payload}
        return {
            "success": False,
            "error": self.error_message,
            "error_kind": self.error_kind.value if self.error_kind else None,
        }


class DispatchRouter:
    """Routes tool invocations through license checks to upstream adapters."""

    def __init__(
        self,
        catalog: CapabilityCatalog,
        evaluator: UsageMeter,
        enablement_filter: EnablementFilter,
        adapters: Mapping[ToolCategory, UpstreamAdapter],
    ):
        self.catalog = catalog
        self.evaluator = evaluator
        self.enablement = enablement_filter
        self.adapters = dict(adapters)

    async def list_operations(self) -> list[OperationDescriptor]:
        """Operations currently enabled for the caller."""
        return await self.enablement.enabled_operations()

    async def dispatch(self, name: str, arguments: Mapping[str, Any] | None = None) -> DispatchResult:
        """Invoke operation ``name`` with ``arguments``.

        Args:
            name: Operation name
            arguments: Tool arguments (None is treated as empty)

        Returns:
            DispatchResult with the upstream payload or a classified failure
        """
        params = dict(arguments or {})
        start_time = time.perf_counter()
        correlation_id = generate_correlation_id()
        log_tool_start(name, params, correlation_id)

        try:
            payload = await self._dispatch(name, params, correlation_id)
        except DispatchError as e:
            log_tool_error(name, params, e, start_time, correlation_id)
            return DispatchResult.failure(name, e)

        log_tool_result(name, params, payload, start_time, correlation_id)
        return DispatchResult.success(name, payload)

    async def _dispatch(self, name: str, params: dict[str, Any], correlation_id: str) -> Any:
        descriptor = self.catalog.get_by_name(name)
        if descriptor is None:
            raise UnknownOperation(f"Unknown tool: {name}", name)

        errors = validate_arguments(descriptor.input_schema, params)
        if errors:
            raise InvalidArguments(f"Invalid arguments for {name}: {'; '.join(errors)}", name)

        decision = await self.evaluator.resolve()
        reason = self.enablement.explain(name, decision)
        if reason is not None:
            raise NotLicensed(_not_licensed_message(descriptor, decision, reason), name)
        if not self.evaluator.check_quota(decision):
            raise QuotaExceeded(
                f"Request quota of {decision.request_quota} reached for the "
                f"{decision.tier.value} tier. Upgrade your license for more requests.",
                name,
            )

        await self.evaluator.track_usage(name)

        adapter = self.adapters.get(descriptor.category)
        if adapter is None:
            raise UpstreamFailure(f"No adapter handles category {descriptor.category.value}", name)

        try:
            return await adapter.call(descriptor, params, correlation_id=correlation_id)
        except SmartleadAPIError as e:
            raise UpstreamFailure(f"API Error: {e}", name) from e
        except LookupError as e:
            raise UpstreamFailure(str(e), name) from e
        except Exception as e:
            logger.exception("upstream_call_crashed", tool=name, correlation_id=correlation_id)
            raise UpstreamFailure(f"Upstream call failed ({type(e).__name__})", name) from e


def _not_licensed_message(
    descriptor: OperationDescriptor, decision: LicenseDecision, reason: str
) -> str:
    if reason == enablement.DISABLED_BY_OVERRIDE:
        return f"Tool {descriptor.name} is disabled by configuration."
    if reason == enablement.CATEGORY_DISABLED:
        return (
            f"Tool {descriptor.name} is unavailable: category "
            f"{descriptor.category.value} is disabled by configuration."
        )
    required = minimum_tier_for(descriptor.category)
    needed = f"the {required.value} tier or higher" if required else "a license"
    return (
        f"Tool {descriptor.name} requires {needed} for {descriptor.category.value}; "
        f"current tier is {decision.tier.value}."
    )
