"""Structured logging for the Smartlead MCP server.

Every tool invocation is logged with:
- tool: Operation name
- params: Arguments (sanitized)
- result_count: Number of results returned
- latency_ms: Execution time in milliseconds
- error_kind: Failure category if applicable
- correlation_id: For request tracing

Output always goes to stderr because stdout carries the MCP stdio channel.
"""

from __future__ import annotations

import logging
import os
import sys
import time
import uuid
from typing import Any

import structlog


def configure_logging(json_output: bool | None = None, log_level: str | None = None) -> None:
    """Configure structlog for stderr output.

    Args:
        json_output: Force JSON output. If None, auto-detect (JSON if not a TTY).
        log_level: Logging level (default: INFO).
    """
    if json_output is None:
        json_output = os.getenv("LOG_JSON", "").lower() in ("1", "true", "yes")
        if not json_output:
            json_output = not sys.stderr.isatty()

    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.contextvars.merge_contextvars,
    ]

    if json_output:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# Initialize logging on module import
configure_logging()

log = structlog.get_logger()


# Fields that should not be logged (sensitive data)
SENSITIVE_FIELDS = frozenset(
    {
        "api_key",
        "password",
        "secret",
        "token",
        "credential",
        "authorization",
        "license_key",
        "email_body",
    }
)


def _sanitize_params(params: dict[str, Any]) -> dict[str, Any]:
    """Remove sensitive data from parameters before logging.

    Args:
        params: Tool parameters to sanitize.

    Returns:
        Sanitized parameters with sensitive values redacted.
    """
    sanitized = {}
    for key, value in params.items():
        lower_key = key.lower()
        if any(sensitive in lower_key for sensitive in SENSITIVE_FIELDS):
            if isinstance(value, str) and len(value) > 50:
                sanitized[key] = f"[REDACTED:{len(value)} chars]"
            else:
                sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = _sanitize_params(value)
        elif isinstance(value, list):
            sanitized[key] = [
                _sanitize_params(item) if isinstance(item, dict) else item for item in value
            ]
        elif isinstance(value, str) and len(value) > 500:
            sanitized[key] = f"{value[:500]}... [truncated {len(value)} chars]"
        else:
            sanitized[key] = value
    return sanitized


def _count_results(result: Any) -> int:
    """Count the number of results for logging."""
    if result is None:
        return 0
    if isinstance(result, list):
        return len(result)
    if isinstance(result, dict):
        if "data" in result and isinstance(result["data"], list):
            return len(result["data"])
        return 1
    return 1


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracing."""
    return str(uuid.uuid4())[:8]


def log_tool_start(tool_name: str, params: dict[str, Any], correlation_id: str) -> None:
    """Log the start of a tool invocation."""
    log.info(
        "tool_start",
        tool=tool_name,
        params=_sanitize_params(params),
        correlation_id=correlation_id,
    )


def log_tool_result(
    tool_name: str,
    params: dict[str, Any],
    result: Any,
    start_time: float,
    correlation_id: str | None = None,
) -> None:
    """Log successful tool invocation.

    Args:
        tool_name: Name of the tool.
        params: Tool parameters (will be sanitized).
        result: Tool result.
        start_time: Start time from time.perf_counter().
        correlation_id: Optional correlation ID for tracing.
    """
    latency_ms = (time.perf_counter() - start_time) * 1000

    log.info(
        "tool_success",
        tool=tool_name,
        params=_sanitize_params(params),
        result_count=_count_results(result),
        latency_ms=round(latency_ms, 2),
        correlation_id=correlation_id,
    )


def log_tool_error(
    tool_name: str,
    params: dict[str, Any],
    error: Exception,
    start_time: float,
    correlation_id: str | None = None,
) -> None:
    """Log failed tool invocation.

    Args:
        tool_name: Name of the tool.
        params: Tool parameters (will be sanitized).
        error: The exception that occurred.
        start_time: Start time from time.perf_counter().
        correlation_id: Optional correlation ID for tracing.
    """
    latency_ms = (time.perf_counter() - start_time) * 1000
    kind = getattr(error, "kind", None)

    log.error(
        "tool_error",
        tool=tool_name,
        params=_sanitize_params(params),
        latency_ms=round(latency_ms, 2),
        error_type=type(error).__name__,
        error_kind=kind.value if kind is not None else None,
        error_message=str(error)[:200],
        correlation_id=correlation_id,
    )


def log_api_call(
    method: str,
    path: str,
    status_code: int | None = None,
    latency_ms: float | None = None,
    error: str | None = None,
    retry_attempt: int = 0,
    correlation_id: str | None = None,
    retry_after: float | None = None,
) -> None:
    """Log Smartlead API calls for debugging.

    Args:
        method: HTTP method (GET, POST, PUT, DELETE)
        path: API endpoint path
        status_code: HTTP status code (if available)
        latency_ms: Request latency in milliseconds
        error: Error message if failed
        retry_attempt: Which retry attempt (0 = first try)
        correlation_id: Request correlation ID
        retry_after: Retry-After header value in seconds (for 429 responses)
    """
    log_data: dict[str, Any] = {
        "method": method,
        "path": path,
        "correlation_id": correlation_id,
    }

    if status_code is not None:
        log_data["status_code"] = status_code
    if latency_ms is not None:
        log_data["latency_ms"] = round(latency_ms, 2)
    if retry_attempt > 0:
        log_data["retry_attempt"] = retry_attempt
    if retry_after is not None:
        log_data["retry_after"] = retry_after

    if error:
        log_data["error"] = error[:200]
        log.warning("smartlead_api_call", **log_data)
    else:
        log.debug("smartlead_api_call", **log_data)
