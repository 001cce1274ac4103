"""Smartlead API enums and error classification."""

from __future__ import annotations

from enum import Enum

# =============================================================================
# Services
# =============================================================================


class SmartleadService(str, Enum):
    """Smartlead hosts operations can be routed to."""

    CORE = "core"
    SMART_DELIVERY = "smart_delivery"
    SMART_SENDERS = "smart_senders"


# =============================================================================
# Error Types for Classification
# =============================================================================


class SmartleadErrorType(str, Enum):
    """Classification of Smartlead errors for handling strategy."""

    # Retriable errors
    RATE_LIMITED = "rate_limited"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    SERVICE_UNAVAILABLE = "service_unavailable"

    # Non-retriable errors
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    BAD_REQUEST = "bad_request"
    UNKNOWN = "unknown"

    @classmethod
    def is_retriable(cls, error_type: SmartleadErrorType) -> bool:
        """Check if an error type should be retried."""
        return error_type in {
            cls.RATE_LIMITED,
            cls.NETWORK_ERROR,
            cls.TIMEOUT,
            cls.SERVICE_UNAVAILABLE,
        }


def classify_http_error(status_code: int, error_message: str = "") -> SmartleadErrorType:
    """Classify HTTP status code into error type.

    Args:
        status_code: HTTP response status code
        error_message: Optional error message for more specific classification

    Returns:
        SmartleadErrorType classification
    """
    error_lower = error_message.lower()

    if status_code == 401:
        return SmartleadErrorType.AUTHENTICATION
    elif status_code == 403:
        return SmartleadErrorType.PERMISSION_DENIED
    elif status_code == 404:
        return SmartleadErrorType.NOT_FOUND
    elif status_code == 429:
        return SmartleadErrorType.RATE_LIMITED
    elif status_code == 422:
        return SmartleadErrorType.VALIDATION
    elif 400 <= status_code < 500:
        # Smartlead sometimes reports throttling as a 400 with a message
        if "rate limit" in error_lower or "too many requests" in error_lower:
            return SmartleadErrorType.RATE_LIMITED
        return SmartleadErrorType.BAD_REQUEST
    elif 500 <= status_code < 600:
        return SmartleadErrorType.SERVICE_UNAVAILABLE
    else:
        return SmartleadErrorType.UNKNOWN
