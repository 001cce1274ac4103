"""License evaluator backed by the remote license server.

Resolves the current LicenseDecision with:
- 1h TTL cache (configurable); no network call while the cache is fresh
- Single-flight refresh so concurrent callers share one validation request
- Offline fallback: last good decision, else the free tier marked invalid
- Local usage metering with batched, fire-and-forget reports to /track
- Feature tokens for premium integrations via /token
"""

from __future__ import annotations

import asyncio
import getpass
import hashlib
import hmac
import os
import platform
import socket
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import httpx
import structlog
from pydantic import ValidationError

from ..config import LicenseConfig
from ..errors import LicenseUnavailable
from .models import (
    DecisionSource,
    FeatureToken,
    LicenseDecision,
    LicenseTier,
    TokenResponse,
    ValidateResponse,
)

logger = structlog.get_logger(__name__)

# Seconds to keep serving a fallback decision before retrying the server
FAILURE_RETRY_SECONDS = 30.0

# Default feature token lifetime when the server omits one
DEFAULT_TOKEN_LIFETIME_SECONDS = 3600.0

OFFLINE_MESSAGE = "Using cached license information (offline mode)"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_machine_id() -> str:
    """Return a stable, anonymous identifier for this host.

    Hashes platform, CPU count, user name and host name. It is a weak
    anti-sharing signal, not a secret.
    """
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        user = "unknown"
    raw = "-".join(
        [platform.system(), str(os.cpu_count() or 0), user, socket.gethostname()]
    )
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def _verified_operator_tier(config: LicenseConfig) -> LicenseTier | None:
    """Return the operator tier override if its token matches the digest."""
    if not (config.operator_tier and config.operator_token and config.operator_token_digest):
        return None
    tier = LicenseTier.parse(config.operator_tier)
    if tier is None:
        return None
    digest = hashlib.sha256(config.operator_token.encode("utf-8")).hexdigest()
    if not hmac.compare_digest(digest, config.operator_token_digest.strip().lower()):
        logger.warning("operator_override_rejected")
        return None
    return tier


class LicenseEvaluator:
    """Resolves and caches the license tier; meters usage.

    Args:
        config: License settings
        transport: Optional httpx transport (tests inject MockTransport)
        clock: Returns the current UTC time
        machine_id: Overrides the computed host identifier
    """

    def __init__(
        self,
        config: LicenseConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], datetime] = _utcnow,
        machine_id: str | None = None,
    ):
        self.config = config
        self.machine_id = machine_id or get_machine_id()
        self._transport = transport
        self._clock = clock
        self._client: httpx.AsyncClient | None = None

        self._cached: LicenseDecision | None = None
        self._fallback: LicenseDecision | None = None
        self._fallback_until: datetime | None = None
        self._refresh_lock = asyncio.Lock()

        self._usage = 0
        self._local_counts: dict[str, int] = {}
        self._pending_reports: set[asyncio.Task[None]] = set()
        self._feature_token: FeatureToken | None = None

        self._operator_tier = _verified_operator_tier(config)
        self._started_at = clock()

    # =========================================================================
    # HTTP
    # =========================================================================

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the license server client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.server_url or "",
                timeout=self.config.timeout_seconds,
                transport=self._transport,
            )
        return self._client

    def _auth_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.license_key}",
            "X-Client-Id": self.machine_id,
        }

    async def aclose(self) -> None:
        """Wait for pending usage reports and close the HTTP client."""
        if self._pending_reports:
            await asyncio.gather(*self._pending_reports, return_exceptions=True)
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    # =========================================================================
    # Resolution
    # =========================================================================

    @property
    def caller_key(self) -> str:
        """Identifier used for local usage counters."""
        key = self.config.license_key
        return key[:8] if key else "anonymous"

    @property
    def usage_count(self) -> int:
        return self._usage

    def _with_usage(self, decision: LicenseDecision, **update: object) -> LicenseDecision:
        return decision.model_copy(update={"usage_count": self._usage, **update})

    async def resolve(self) -> LicenseDecision:
        """Return the current license decision.

        Never raises on license server problems; see the fallback ladder in
        ``_fall_back``.
        """
        if self._operator_tier is not None:
            return LicenseDecision.for_tier(
                self._operator_tier,
                valid=True,
                resolved_at=self._started_at,
                source=DecisionSource.OVERRIDE,
                usage_count=self._usage,
                message=f"Operator override: {self._operator_tier.value} tier",
            )

        decision = self._from_cache()
        if decision is not None:
            return decision

        async with self._refresh_lock:
            # Another caller may have refreshed while we waited
            decision = self._from_cache()
            if decision is not None:
                return decision
            return await self._refresh()

    def _from_cache(self) -> LicenseDecision | None:
        now = self._clock()
        if self._cached is not None:
            age = (now - self._cached.resolved_at).total_seconds()
            if age < self.config.cache_ttl_seconds:
                source = self._cached.source
                if source is DecisionSource.FRESH:
                    source = DecisionSource.CACHED
                return self._with_usage(self._cached, source=source)
        if self._fallback is not None and self._fallback_until and now < self._fallback_until:
            return self._with_usage(self._fallback)
        return None

    async def _refresh(self) -> LicenseDecision:
        now = self._clock()
        try:
            response = await self._validate()
        except LicenseUnavailable as e:
            return self._fall_back(str(e), now)

        if response.valid:
            tier = LicenseTier.parse(response.level)
            if tier is None:
                return self._fall_back(f"Unknown license level {response.level!r}", now)
            self._usage = max(self._usage, response.usage)
            decision = LicenseDecision.for_tier(
                tier,
                valid=True,
                resolved_at=now,
                source=DecisionSource.FRESH,
                usage_count=self._usage,
                message=response.message or f"License validated: {tier.value} tier",
            )
            if response.feature_token:
                lifetime = response.token_expires_in or DEFAULT_TOKEN_LIFETIME_SECONDS
                self._feature_token = FeatureToken(
                    token=response.feature_token,
                    expires_at=now + timedelta(seconds=lifetime),
                )
        else:
            decision = LicenseDecision.for_tier(
                LicenseTier.FREE,
                valid=False,
                resolved_at=now,
                source=DecisionSource.REJECTED,
                usage_count=self._usage,
                message=response.message or "License key is invalid",
            )

        self._cached = decision
        self._fallback = None
        self._fallback_until = None
        logger.info(
            "license_resolved",
            tier=decision.tier.value,
            valid=decision.valid,
            source=decision.source.value,
        )
        return decision

    async def _validate(self) -> ValidateResponse:
        """Call POST /validate.

        Raises:
            LicenseUnavailable: If unconfigured, unreachable, non-2xx or malformed
        """
        if not self.config.server_url:
            raise LicenseUnavailable("Licensing service is not configured")
        if not self.config.license_key:
            raise LicenseUnavailable("No license key provided")

        try:
            client = await self._get_client()
            response = await client.post("/validate", headers=self._auth_headers())
            response.raise_for_status()
            return ValidateResponse.model_validate(response.json())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise LicenseUnavailable(f"License server request failed: {e}") from e
        except (ValueError, ValidationError) as e:
            raise LicenseUnavailable(f"Malformed license server response: {e}") from e

    def _fall_back(self, reason: str, now: datetime) -> LicenseDecision:
        """Last good decision if any, else the free tier marked invalid."""
        logger.warning(
            "license_fallback",
            reason=reason[:200],
            has_cached_decision=self._cached is not None,
        )
        if self._cached is not None:
            decision = self._with_usage(
                self._cached,
                source=DecisionSource.CACHED_STALE,
                message=OFFLINE_MESSAGE,
            )
        else:
            decision = LicenseDecision.for_tier(
                LicenseTier.FREE,
                valid=False,
                resolved_at=now,
                source=DecisionSource.DEFAULT_FALLBACK,
                usage_count=self._usage,
                message=f"{reason}. Running in free mode with limited features.",
            )
        self._fallback = decision
        self._fallback_until = now + timedelta(seconds=FAILURE_RETRY_SECONDS)
        return decision

    # =========================================================================
    # Quota & Usage
    # =========================================================================

    def check_quota(self, decision: LicenseDecision) -> bool:
        """Return True if the decision still has request quota left."""
        return not decision.quota_exhausted

    async def track_usage(self, operation_name: str) -> int:
        """Count one invocation of ``operation_name``.

        The counter update contains no await, so concurrent calls never lose
        increments. Every ``usage_report_interval`` calls a batched report is
        sent in the background.

        Returns:
            The effective usage count after this call
        """
        key = self.caller_key
        count = self._local_counts.get(key, 0) + 1
        self._local_counts[key] = count
        self._usage += 1

        interval = self.config.usage_report_interval
        if interval > 0 and count % interval == 0:
            task = asyncio.create_task(self._report_usage(operation_name, interval))
            self._pending_reports.add(task)
            task.add_done_callback(self._pending_reports.discard)
        return self._usage

    async def _report_usage(self, operation_name: str, count: int) -> None:
        if not (self.config.server_url and self.config.license_key):
            return
        try:
            client = await self._get_client()
            response = await client.post(
                "/track",
                headers=self._auth_headers(),
                json={
                    "key": self.config.license_key,
                    "tool": operation_name,
                    "count": count,
                    "machineId": self.machine_id,
                },
            )
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("usage_report_failed", tool=operation_name, error=str(e)[:200])

    # =========================================================================
    # Feature Tokens
    # =========================================================================

    async def feature_token(self) -> FeatureToken | None:
        """Return a valid feature token when the license includes n8n, else None."""
        decision = await self.resolve()
        if not (decision.valid and decision.n8n_integration):
            return None

        now = self._clock()
        if self._feature_token is not None and not self._feature_token.is_expired(now):
            return self._feature_token
        if not (self.config.server_url and self.config.license_key):
            return None

        try:
            client = await self._get_client()
            response = await client.post("/token", headers=self._auth_headers())
            response.raise_for_status()
            body = TokenResponse.model_validate(response.json())
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.warning("feature_token_failed", error=str(e)[:200])
            return None

        self._feature_token = FeatureToken(token=body.token, expires_at=body.expires)
        return self._feature_token
