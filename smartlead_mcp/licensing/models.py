"""License data models.

Provides:
- LicenseTier ordering and the tier entitlement table
- LicenseDecision, the evaluator's resolved view of the current license
- FeatureToken for the premium-only n8n integration
- Response model for the license server's /validate endpoint
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..registry.models import ToolCategory

# =============================================================================
# License Tier
# =============================================================================


class LicenseTier(str, Enum):
    """License levels, ordered free < basic < premium."""

    FREE = "free"
    BASIC = "basic"
    PREMIUM = "premium"

    # Compare by rank, not by the underlying string value
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, LicenseTier):
            return NotImplemented
        return _TIER_RANK[self] < _TIER_RANK[other]

    def __le__(self, other: object) -> bool:
        if not isinstance(other, LicenseTier):
            return NotImplemented
        return _TIER_RANK[self] <= _TIER_RANK[other]

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, LicenseTier):
            return NotImplemented
        return _TIER_RANK[self] > _TIER_RANK[other]

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, LicenseTier):
            return NotImplemented
        return _TIER_RANK[self] >= _TIER_RANK[other]

    @classmethod
    def parse(cls, value: str | None) -> LicenseTier | None:
        """Parse a tier name case-insensitively; None if unknown."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_TIER_RANK = {LicenseTier.FREE: 0, LicenseTier.BASIC: 1, LicenseTier.PREMIUM: 2}


@dataclass(frozen=True)
class TierEntitlements:
    """What a tier unlocks."""

    categories: frozenset[ToolCategory]
    request_quota: int | None
    n8n_integration: bool = False


_FREE_CATEGORIES = frozenset(
    {ToolCategory.CAMPAIGN_MANAGEMENT, ToolCategory.LEAD_MANAGEMENT}
)
_BASIC_CATEGORIES = _FREE_CATEGORIES | {
    ToolCategory.CAMPAIGN_STATISTICS,
    ToolCategory.SMART_DELIVERY,
}

TIER_ENTITLEMENTS: dict[LicenseTier, TierEntitlements] = {
    LicenseTier.FREE: TierEntitlements(categories=_FREE_CATEGORIES, request_quota=100),
    LicenseTier.BASIC: TierEntitlements(categories=_BASIC_CATEGORIES, request_quota=1000),
    # Top tier is unbounded
    LicenseTier.PREMIUM: TierEntitlements(
        categories=frozenset(ToolCategory),
        request_quota=None,
        n8n_integration=True,
    ),
}


def minimum_tier_for(category: ToolCategory) -> LicenseTier | None:
    """Lowest tier whose entitlements include ``category``."""
    tiers = [tier for tier, ent in TIER_ENTITLEMENTS.items() if category in ent.categories]
    return min(tiers) if tiers else None


# =============================================================================
# License Decision
# =============================================================================


class DecisionSource(str, Enum):
    """How a LicenseDecision was produced."""

    FRESH = "fresh"
    CACHED = "cached"
    CACHED_STALE = "cached_stale"
    REJECTED = "rejected"
    DEFAULT_FALLBACK = "default_fallback"
    OVERRIDE = "override"


class LicenseDecision(BaseModel):
    """Resolved license state used for enablement and quota checks."""

    model_config = ConfigDict(frozen=True)

    tier: LicenseTier
    allowed_categories: frozenset[ToolCategory]
    request_quota: int | None
    n8n_integration: bool = False
    usage_count: int = 0
    valid: bool
    resolved_at: datetime
    source: DecisionSource
    message: str = ""

    @classmethod
    def for_tier(
        cls,
        tier: LicenseTier,
        *,
        valid: bool,
        resolved_at: datetime,
        source: DecisionSource,
        usage_count: int = 0,
        message: str = "",
    ) -> LicenseDecision:
        """Build a decision with the entitlements of ``tier``."""
        entitlements = TIER_ENTITLEMENTS[tier]
        return cls(
            tier=tier,
            allowed_categories=entitlements.categories,
            request_quota=entitlements.request_quota,
            n8n_integration=entitlements.n8n_integration,
            usage_count=usage_count,
            valid=valid,
            resolved_at=resolved_at,
            source=source,
            message=message,
        )

    @property
    def quota_exhausted(self) -> bool:
        return self.request_quota is not None and self.usage_count >= self.request_quota

    def summary(self) -> dict:
        """JSON-friendly view for transports."""
        return {
            "tier": self.tier.value,
            "valid": self.valid,
            "source": self.source.value,
            "allowed_categories": sorted(c.value for c in self.allowed_categories),
            "request_quota": self.request_quota,
            "n8n_integration": self.n8n_integration,
            "usage_count": self.usage_count,
            "resolved_at": self.resolved_at.isoformat(),
            "message": self.message,
        }


class FeatureToken(BaseModel):
    """Short-lived credential for premium integrations."""

    model_config = ConfigDict(frozen=True)

    token: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


# =============================================================================
# License Server Responses
# =============================================================================


class ValidateResponse(BaseModel):
    """Body returned by POST /validate."""

    valid: bool
    level: str = LicenseTier.FREE.value
    usage: int = Field(0, ge=0)
    message: str | None = None
    feature_token: str | None = Field(None, alias="featureToken")
    # Lifetime of feature_token in seconds
    token_expires_in: float | None = Field(None, alias="tokenExpires", gt=0)


class TokenResponse(BaseModel):
    """Body returned by POST /token."""

    token: str
    expires: datetime
