"""Error taxonomy for the Smartlead MCP server.

Configuration errors are fatal at startup. License errors are recovered
inside the evaluator. Dispatch errors carry an ErrorKind and are always
converted into a failed DispatchResult by the router.
"""

from __future__ import annotations

from enum import Enum


class ConfigurationError(Exception):
    """Required configuration is missing or malformed."""

    pass


class LicenseUnavailable(Exception):
    """The license server could not be reached or answered unusably."""

    pass


# =============================================================================
# Dispatch Errors
# =============================================================================


class ErrorKind(str, Enum):
    """Failure categories reported in a DispatchResult."""

    UNKNOWN_OPERATION = "unknown_operation"
    INVALID_ARGUMENTS = "invalid_arguments"
    NOT_LICENSED = "not_licensed"
    QUOTA_EXCEEDED = "quota_exceeded"
    UPSTREAM_FAILURE = "upstream_failure"


class DispatchError(Exception):
    """Base exception for failures surfaced through a DispatchResult."""

    kind: ErrorKind = ErrorKind.UPSTREAM_FAILURE

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.operation = operation


class UnknownOperation(DispatchError):
    """The requested operation name is not in the catalog."""

    kind = ErrorKind.UNKNOWN_OPERATION


class InvalidArguments(DispatchError):
    """Arguments do not satisfy the operation's input schema."""

    kind = ErrorKind.INVALID_ARGUMENTS


class NotLicensed(DispatchError):
    """The operation is outside the enabled set for the current license."""

    kind = ErrorKind.NOT_LICENSED


class QuotaExceeded(DispatchError):
    """The license's request quota has been used up."""

    kind = ErrorKind.QUOTA_EXCEEDED


class UpstreamFailure(DispatchError):
    """The upstream adapter failed or no adapter handles the category."""

    kind = ErrorKind.UPSTREAM_FAILURE
