"""License evaluation: tier resolution, caching and usage metering."""

from .evaluator import LicenseEvaluator, get_machine_id
from .models import (
    TIER_ENTITLEMENTS,
    DecisionSource,
    FeatureToken,
    LicenseDecision,
    LicenseTier,
)

__all__ = [
    "TIER_ENTITLEMENTS",
    "DecisionSource",
    "FeatureToken",
    "LicenseDecision",
    "LicenseEvaluator",
    "LicenseTier",
    "get_machine_id",
]
