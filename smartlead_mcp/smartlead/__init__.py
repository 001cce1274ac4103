"""Smartlead REST API access: HTTP client, route table execution, errors."""

from .adapter import Route, SmartleadAdapter
from .client import (
    SmartleadAPIError,
    SmartleadClient,
    SmartleadNonRetriableError,
    SmartleadRetriableError,
)
from .models import SmartleadErrorType, SmartleadService, classify_http_error

__all__ = [
    "Route",
    "SmartleadAPIError",
    "SmartleadAdapter",
    "SmartleadClient",
    "SmartleadErrorType",
    "SmartleadNonRetriableError",
    "SmartleadRetriableError",
    "SmartleadService",
    "classify_http_error",
]
