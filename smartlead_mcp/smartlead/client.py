"""Smartlead API client with retry logic.

Production-quality HTTP client implementing:
- api_key query parameter authentication
- Three service hosts (core API, Smart Delivery, Smart Senders)
- Retry with exponential backoff for rate limits, 5xx, timeouts and network errors
- Configurable timeout (default 30s)
- Structured logging with correlation IDs
"""

from __future__ import annotations

import re
import time
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..config import ApiConfig, RetrySettings
from ..logging import generate_correlation_id, log_api_call
from .models import SmartleadErrorType, SmartleadService, classify_http_error

# =============================================================================
# Custom Exceptions
# =============================================================================


class SmartleadAPIError(Exception):
    """Base exception for Smartlead API errors."""

    def __init__(
        self,
        message: str,
        error_type: SmartleadErrorType = SmartleadErrorType.UNKNOWN,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.error_type = error_type
        self.status_code = status_code


class SmartleadRetriableError(SmartleadAPIError):
    """Error that should be retried (rate limit, network, timeout)."""

    def __init__(
        self,
        message: str,
        error_type: SmartleadErrorType = SmartleadErrorType.UNKNOWN,
        status_code: int | None = None,
        retry_after: float | None = None,
    ):
        super().__init__(message, error_type, status_code)
        self.retry_after = retry_after


class SmartleadNonRetriableError(SmartleadAPIError):
    """Error that should not be retried (validation, auth, not found)."""

    pass


def _retry_wait(settings: RetrySettings):
    """Build a wait strategy that honors Retry-After.

    Backoff is ``initial * factor ** (attempt - 1)`` capped at the max delay.
    """
    max_seconds = settings.max_delay_ms / 1000
    exp_wait = wait_exponential(
        multiplier=settings.initial_delay_ms / 1000,
        exp_base=settings.backoff_factor,
        max=max_seconds,
    )

    def wait(retry_state: RetryCallState) -> float:
        exception = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(exception, SmartleadRetriableError) and exception.retry_after:
            return min(exception.retry_after, max_seconds)
        return exp_wait(retry_state)

    return wait


# =============================================================================
# Smartlead API Client
# =============================================================================


class SmartleadClient:
    """Smartlead API client with retry and structured logging.

    Args:
        config: API settings (key, service URLs, timeout, retry)
        transport: Optional httpx transport (tests inject MockTransport)

    Raises:
        ValueError: If API key is not configured.
    """

    def __init__(self, config: ApiConfig, transport: httpx.AsyncBaseTransport | None = None):
        if not config.api_key:
            raise ValueError(
                "Smartlead API key not configured. Set SMARTLEAD_API_KEY environment variable."
            )
        self.config = config
        self.api_key = config.api_key
        self._transport = transport
        self._clients: dict[SmartleadService, httpx.AsyncClient] = {}
        self._base_urls = {
            SmartleadService.CORE: config.api_url,
            SmartleadService.SMART_DELIVERY: config.delivery_api_url,
            SmartleadService.SMART_SENDERS: config.senders_api_url,
        }

    async def _get_client(self, service: SmartleadService) -> httpx.AsyncClient:
        """Get or create the HTTP client for a service host."""
        client = self._clients.get(service)
        if client is None or client.is_closed:
            client = httpx.AsyncClient(
                base_url=self._base_urls[service].rstrip("/"),
                headers={"Content-Type": "application/json"},
                timeout=self.config.timeout_seconds,
                transport=self._transport,
            )
            self._clients[service] = client
        return client

    async def close(self) -> None:
        """Close all HTTP clients."""
        for client in self._clients.values():
            if not client.is_closed:
                await client.aclose()
        self._clients.clear()

    def _handle_response_error(self, response: httpx.Response, correlation_id: str) -> None:
        """Handle HTTP error responses.

        Raises:
            SmartleadRetriableError: For retriable errors (429, 5xx)
            SmartleadNonRetriableError: For non-retriable errors (4xx)
        """
        status_code = response.status_code

        try:
            error_body = response.json()
            error_content = error_body.get("message") or error_body.get("error")
            if isinstance(error_content, dict):
                error_message = error_content.get("message", str(error_content))
            elif error_content:
                error_message = str(error_content)
            else:
                error_message = str(response.text)
        except (ValueError, AttributeError):
            error_message = response.text[:200] if response.text else f"HTTP {status_code}"

        error_type = classify_http_error(status_code, error_message)

        retry_after: float | None = None
        if status_code == 429:
            retry_after_header = response.headers.get("Retry-After")
            if retry_after_header:
                try:
                    retry_after = float(retry_after_header)
                except ValueError:
                    retry_after = None

        sanitized_message = self._sanitize_error_message(error_message)

        log_api_call(
            method=response.request.method,
            path=str(response.request.url.path),
            status_code=status_code,
            error=sanitized_message,
            correlation_id=correlation_id,
            retry_after=retry_after,
        )

        if SmartleadErrorType.is_retriable(error_type):
            raise SmartleadRetriableError(sanitized_message, error_type, status_code, retry_after)
        raise SmartleadNonRetriableError(sanitized_message, error_type, status_code)

    def _sanitize_error_message(self, message: str) -> str:
        """Truncate and strip credentials from upstream error text."""
        sanitized = message[:200]
        sanitized = sanitized.replace(self.api_key, "[REDACTED]")
        sanitized = re.sub(r"api[_-]?key[=:]\s*[^\s&]+", "api_key=[REDACTED]", sanitized, flags=re.I)
        return sanitized

    async def _send(
        self,
        method: str,
        path: str,
        correlation_id: str,
        service: SmartleadService,
        json: Any = None,
        params: dict[str, Any] | None = None,
        retry_attempt: int = 0,
    ) -> Any:
        client = await self._get_client(service)
        query = {**(params or {}), "api_key": self.api_key}
        start_time = time.perf_counter()

        try:
            response = await client.request(method, path, json=json, params=query)
        except httpx.TimeoutException as e:
            log_api_call(
                method=method,
                path=path,
                latency_ms=(time.perf_counter() - start_time) * 1000,
                error="Request timeout",
                retry_attempt=retry_attempt,
                correlation_id=correlation_id,
            )
            raise SmartleadRetriableError(
                "Request timed out. Please retry.", SmartleadErrorType.TIMEOUT
            ) from e
        except httpx.NetworkError as e:
            log_api_call(
                method=method,
                path=path,
                latency_ms=(time.perf_counter() - start_time) * 1000,
                error="Network error",
                retry_attempt=retry_attempt,
                correlation_id=correlation_id,
            )
            raise SmartleadRetriableError(
                "Network error connecting to Smartlead. Please retry.",
                SmartleadErrorType.NETWORK_ERROR,
            ) from e

        if response.status_code >= 400:
            self._handle_response_error(response, correlation_id)

        log_api_call(
            method=method,
            path=path,
            status_code=response.status_code,
            latency_ms=(time.perf_counter() - start_time) * 1000,
            retry_attempt=retry_attempt,
            correlation_id=correlation_id,
        )

        if response.status_code == 204 or not response.content:
            return {}
        if "json" in response.headers.get("content-type", ""):
            return response.json()
        # CSV exports and other plain bodies
        return response.text

    async def request(
        self,
        method: str,
        path: str,
        service: SmartleadService = SmartleadService.CORE,
        json: Any = None,
        params: dict[str, Any] | None = None,
        correlation_id: str | None = None,
    ) -> Any:
        """Execute an HTTP request with retry logic.

        Args:
            method: HTTP method
            path: API endpoint path
            service: Which Smartlead host to call
            json: JSON body
            params: Query parameters (api_key is added automatically)
            correlation_id: Request correlation ID

        Returns:
            Parsed JSON response, or text for non-JSON bodies

        Raises:
            SmartleadRetriableError: When retries are exhausted
            SmartleadNonRetriableError: For non-retriable errors
        """
        corr_id = correlation_id or generate_correlation_id()
        retry = self.config.retry
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(SmartleadRetriableError),
            stop=stop_after_attempt(max(retry.max_attempts, 1)),
            wait=_retry_wait(retry),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._send(
                    method,
                    path,
                    corr_id,
                    service,
                    json=json,
                    params=params,
                    retry_attempt=attempt.retry_state.attempt_number - 1,
                )
        raise AssertionError("unreachable")  # pragma: no cover

    async def get(self, path: str, **kwargs: Any) -> Any:
        """Execute GET request."""
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        """Execute POST request."""
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        """Execute PUT request."""
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        """Execute DELETE request."""
        return await self.request("DELETE", path, **kwargs)
