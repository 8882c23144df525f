"""Provider routing, cost estimation and usage tracking."""

from .analytics import UsageReport, build_recommendations, summarize_usage
from .cost_model import CostBreakdown, CostModel, estimate_tokens
from .ledger import UsageLedger
from .registry import ProviderRegistry, coerce_provider_id
from .router import DEFAULT_AFFINITY, DEFAULT_CHEAP_PROVIDER_THRESHOLD, ProviderRouter

__all__ = [
    "CostBreakdown",
    "CostModel",
    "estimate_tokens",
    "UsageLedger",
    "ProviderRegistry",
    "coerce_provider_id",
    "ProviderRouter",
    "DEFAULT_AFFINITY",
    "DEFAULT_CHEAP_PROVIDER_THRESHOLD",
    "UsageReport",
    "build_recommendations",
    "summarize_usage",
]
