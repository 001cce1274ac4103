"""Premium n8n workflow integration.

Workflow listing and execution require a license whose tier includes the n8n
integration. Every request carries the license key as a bearer token and a
short-lived feature token from the license server in ``X-Feature-Token``, which
n8n validates server-side.
"""

from __future__ import annotations

from typing import Any, Protocol
from urllib.parse import quote

import httpx
import structlog

from .config import LicenseConfig, N8nConfig
from .licensing.models import FeatureToken, LicenseDecision

logger = structlog.get_logger(__name__)


class N8nError(Exception):
    """An n8n request failed."""

    status_code = 502


class N8nNotConfigured(N8nError):
    """No n8n API URL is configured."""

    status_code = 503


class N8nAccessDenied(N8nError):
    """The license does not grant n8n access, or n8n rejected the feature token."""

    status_code = 403


class FeatureTokenSource(Protocol):
    async def resolve(self) -> LicenseDecision: ...

    async def feature_token(self) -> FeatureToken | None: ...


class N8nClient:
    """Client for the n8n workflow API, gated on the license.

    Args:
        config: n8n endpoint settings
        license_config: License settings; the key authenticates requests
        evaluator: Resolves the license and issues feature tokens
        transport: Optional httpx transport (tests inject MockTransport)
    """

    def __init__(
        self,
        config: N8nConfig,
        license_config: LicenseConfig,
        evaluator: FeatureTokenSource,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.license_config = license_config
        self.evaluator = evaluator
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.api_url or "",
                timeout=self.config.timeout_seconds,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _authorize(self) -> FeatureToken:
        if not self.config.api_url:
            raise N8nNotConfigured("n8n integration is not configured (set N8N_API_URL)")

        decision = await self.evaluator.resolve()
        if not (decision.valid and decision.n8n_integration):
            raise N8nAccessDenied(
                "N8n integration requires a Premium license. Your current license level "
                f"is {decision.tier.value}. Please upgrade to access this feature."
            )

        token = await self.evaluator.feature_token()
        if token is None:
            raise N8nAccessDenied(
                "Unable to validate premium feature access. Please try again later."
            )
        return token

    async def _request(
        self, method: str, path: str, action: str, json: Any = None
    ) -> Any:
        token = await self._authorize()
        headers = {
            "Authorization": f"Bearer {self.license_config.license_key}",
            "X-Feature-Token": token.token,
        }

        try:
            client = await self._get_client()
            response = await client.request(method, path, headers=headers, json=json)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("n8n_request_failed", path=path, error=str(e)[:200])
            raise N8nError(f"Error accessing n8n integration: {e}") from e

        if response.status_code == 403:
            raise N8nAccessDenied("Premium feature access denied. Please check your license status.")
        if response.is_error:
            raise N8nError(f"Failed to {action}: {_error_message(response)}")

        logger.info("n8n_request", method=method, path=path, status_code=response.status_code)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return response.text

    async def get_workflows(self) -> Any:
        """List the workflows available to this license."""
        return await self._request("GET", "/workflows", "fetch n8n workflows")

    async def execute_workflow(self, workflow_id: str, data: Any = None) -> Any:
        """Run a workflow with ``data`` as its JSON input."""
        path = f"/workflows/{quote(str(workflow_id), safe='')}/execute"
        return await self._request(
            "POST", path, "execute n8n workflow", json=data if data is not None else {}
        )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP {response.status_code}"
