"""Pytest fixtures for Smartlead MCP tests.

Provides:
- Environment variable management
- A controllable clock and a scripted fake license server (httpx MockTransport)
- A stub evaluator for router and enablement tests
- A fake n8n workflow API
- Descriptor and decision factories
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any
from unittest.mock import patch

import httpx
import pytest

from smartlead_mcp.config import ApiConfig, LicenseConfig, N8nConfig, RetrySettings
from smartlead_mcp.licensing.models import DecisionSource, LicenseDecision, LicenseTier
from smartlead_mcp.registry.models import OperationDescriptor, ToolCategory

if TYPE_CHECKING:
    from collections.abc import Generator

LICENSE_SERVER_URL = "https://license.test"
TEST_LICENSE_KEY = "lic_test_0123456789abcdef"
TEST_API_KEY = "test_smartlead_api_key_12345"
N8N_API_URL = "https://n8n.test/api/v1"


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture
def env_api_key() -> Generator[str, None, None]:
    """Provide a test API key via environment variable."""
    with patch.dict(os.environ, {"SMARTLEAD_API_KEY": TEST_API_KEY}):
        yield TEST_API_KEY


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove every variable the server reads so tests start from defaults."""
    prefixes = ("SMARTLEAD_", "LICENSE_", "N8N_", "SSE_PORT", "REST_PORT", "EXTENDED_LOGGING")
    cleared = {k: v for k, v in os.environ.items() if k.startswith(prefixes)}
    with patch.dict(os.environ, {}, clear=False):
        for key in cleared:
            del os.environ[key]
        yield


@pytest.fixture
def isolated(clean_env, tmp_path, monkeypatch):
    """Empty environment, empty working directory, no .env loading."""
    monkeypatch.chdir(tmp_path)
    with patch("smartlead_mcp.config.load_dotenv"):
        yield tmp_path


# =============================================================================
# Clock
# =============================================================================


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# =============================================================================
# Fake License Server
# =============================================================================


class FakeLicenseServer:
    """Scripted license server backing an httpx.MockTransport.

    Set ``validate_response`` to a dict (JSON body), an int (status code with
    empty body) or an exception instance (raised as a transport failure).
    """

    def __init__(self):
        self.validate_response: dict[str, Any] | int | Exception = {
            "valid": True,
            "level": "basic",
            "usage": 0,
        }
        self.token_response: dict[str, Any] | int = {
            "token": "ft_premium_token",
            "expires": "2030-01-01T00:00:00Z",
        }
        self.requests: list[httpx.Request] = []

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def track_bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.calls("/track")]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/validate":
            return self._respond(self.validate_response, request)
        if request.url.path == "/token":
            return self._respond(self.token_response, request)
        if request.url.path == "/track":
            return httpx.Response(200, json={"ok": True})
        return httpx.Response(404, json={"error": "not found"})

    @staticmethod
    def _respond(reply: Any, request: httpx.Request) -> httpx.Response:
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, int):
            return httpx.Response(reply, request=request)
        return httpx.Response(200, json=reply)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def license_server() -> FakeLicenseServer:
    return FakeLicenseServer()


def make_license_config(**overrides: Any) -> LicenseConfig:
    """LicenseConfig with every field set explicitly (no env leakage)."""
    values: dict[str, Any] = {
        "license_key": TEST_LICENSE_KEY,
        "server_url": LICENSE_SERVER_URL,
        "cache_ttl_seconds": 3600.0,
        "timeout_seconds": 5.0,
        "usage_report_interval": 10,
        "operator_tier": None,
        "operator_token": None,
        "operator_token_digest": None,
    }
    values.update(overrides)
    return LicenseConfig(**values)


def make_api_config(**overrides: Any) -> ApiConfig:
    """ApiConfig pointing at test hosts with near-zero retry delays."""
    values: dict[str, Any] = {
        "api_key": TEST_API_KEY,
        "api_url": "https://api.smartlead.test/api/v1",
        "delivery_api_url": "https://delivery.smartlead.test/api/v1",
        "senders_api_url": "https://senders.smartlead.test/api/v1",
        "timeout_seconds": 5.0,
        "retry": RetrySettings(
            max_attempts=3, initial_delay_ms=1, max_delay_ms=5, backoff_factor=2.0
        ),
    }
    values.update(overrides)
    return ApiConfig(**values)


# =============================================================================
# Registry & Decision Factories
# =============================================================================


def make_descriptor(
    name: str,
    category: ToolCategory,
    properties: dict[str, Any] | None = None,
    required: list[str] | None = None,
) -> OperationDescriptor:
    schema: dict[str, Any] = {"type": "object", "properties": properties or {}}
    if required:
        schema["required"] = required
    return OperationDescriptor(name=name, category=category, input_schema=schema)


def make_decision(
    tier: LicenseTier = LicenseTier.PREMIUM,
    *,
    valid: bool = True,
    source: DecisionSource = DecisionSource.FRESH,
    usage_count: int = 0,
    resolved_at: datetime | None = None,
    **update: Any,
) -> LicenseDecision:
    """Decision for ``tier``; ``update`` overrides fields such as allowed_categories."""
    decision = LicenseDecision.for_tier(
        tier,
        valid=valid,
        resolved_at=resolved_at or datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc),
        source=source,
        usage_count=usage_count,
    )
    return decision.model_copy(update=update) if update else decision


class StubEvaluator:
    """In-memory evaluator: fixed decision, local usage counter."""

    def __init__(self, decision: LicenseDecision):
        self.decision = decision
        self.usage = decision.usage_count
        self.resolve_calls = 0
        self.tracked: list[str] = []

    async def resolve(self) -> LicenseDecision:
        self.resolve_calls += 1
        return self.decision.model_copy(update={"usage_count": self.usage})

    def check_quota(self, decision: LicenseDecision) -> bool:
        return not decision.quota_exhausted

    async def track_usage(self, operation_name: str) -> int:
        self.usage += 1
        self.tracked.append(operation_name)
        return self.usage


@pytest.fixture
def premium_evaluator() -> StubEvaluator:
    return StubEvaluator(make_decision(LicenseTier.PREMIUM))


# =============================================================================
# Server Context
# =============================================================================


def smartlead_upstream(request: httpx.Request) -> httpx.Response:
    """Minimal Smartlead API: campaign lookups succeed, id 404 is missing."""
    path = request.url.path.removeprefix("/api/v1")
    if path == "/campaigns/404":
        return httpx.Response(404, json={"message": "Campaign not found"})
    if path.startswith("/campaigns/"):
        campaign_id = int(path.split("/")[2])
        return httpx.Response(200, json={"id": campaign_id, "name": "Q1 Outreach"})
    if path == "/campaigns":
        return httpx.Response(200, json=[{"id": 1}, {"id": 2}])
    return httpx.Response(200, json={})


class FakeN8n:
    """Minimal n8n workflow API backing an httpx.MockTransport."""

    def __init__(self):
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/v1")
        if path == "/workflows" and request.method == "GET":
            return httpx.Response(200, json=[{"id": "wf1", "name": "Sync leads"}])
        if path == "/workflows/forbidden/execute":
            return httpx.Response(403, json={"message": "Invalid feature token"})
        if path == "/workflows/wf1/execute":
            body = json.loads(request.content)
            return httpx.Response(200, json={"executionId": "ex1", "input": body})
        return httpx.Response(404, json={"message": "Workflow not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def n8n() -> FakeN8n:
    return FakeN8n()


def make_n8n_config(**overrides: Any) -> N8nConfig:
    values: dict[str, Any] = {"api_url": N8N_API_URL, "timeout_seconds": 5.0}
    values.update(overrides)
    return N8nConfig(**values)


def build_test_context(
    license_server: FakeLicenseServer, n8n: FakeN8n | None = None, **feature_overrides: Any
):
    """ServerContext wired to the fake license server and fake Smartlead API."""
    from smartlead_mcp.config import FeatureConfig, ServerConfig, SmartleadConfig
    from smartlead_mcp.server import build_context

    features = FeatureConfig(
        enabled_categories={c: True for c in ToolCategory.values()},
        enabled_tools={},
        extended_logging=False,
    )
    for key, value in feature_overrides.items():
        setattr(features, key, value)
    config = SmartleadConfig(
        api=make_api_config(),
        license=make_license_config(),
        features=features,
        server=ServerConfig(name="smartlead-mcp", host="127.0.0.1", sse_port=3001, rest_port=8100),
        n8n=make_n8n_config(),
    )
    return build_context(
        config,
        smartlead_transport=httpx.MockTransport(smartlead_upstream),
        license_transport=license_server.transport,
        n8n_transport=(n8n or FakeN8n()).transport,
    )
