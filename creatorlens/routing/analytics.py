"""Analytics helpers for evaluating provider usage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..core import HealthStatus, Recommendation, RecommendationType, SavingsEstimate, UsageSnapshot
from .ledger import UsageLedger
from .registry import ProviderRegistry


@dataclass
class UsageReport:
    snapshot: UsageSnapshot
    savings: SavingsEstimate
    recommendations: List[Recommendation]


def build_recommendations(
    snapshot: UsageSnapshot,
    registry: ProviderRegistry,
    *,
    budget_alert_usd: float = 1.0,
) -> List[Recommendation]:
    recommendations: List[Recommendation] = []
    if not len(registry):
        return recommendations

    cheapest = registry.cheapest()
    premium = registry.most_expensive()
    premium_requests = snapshot.for_provider(premium).requests
    cheap_requests = snapshot.for_provider(cheapest).requests

    if premium != cheapest and premium_requests > cheap_requests * 2:
        premium_rate = registry.rate(premium)
        cheap_rate = registry.rate(cheapest)
        saving = (1 - cheap_rate / premium_rate) * 100 if premium_rate else 0.0
        recommendations.append(
            Recommendation(
                type=RecommendationType.COST_OPTIMIZATION,
                message=f"Consider routing creative tasks to {cheapest.value} to reduce costs",
                impact=f"Could save up to {saving:.0f}% on creative content generation",
            )
        )

    if snapshot.total_cost > budget_alert_usd:
        recommendations.append(
            Recommendation(
                type=RecommendationType.BUDGET_ALERT,
                message="High usage detected - consider setting budget limits",
                impact=f"Current spending: ${snapshot.total_cost:.2f}",
            )
        )

    for profile in registry.profiles():
        if profile.status != HealthStatus.ONLINE:
            latency = f"{profile.latency_ms:.0f} ms" if profile.latency_ms is not None else "unknown latency"
            recommendations.append(
                Recommendation(
                    type=RecommendationType.PERFORMANCE,
                    message=f"{profile.display_name} is {profile.status.value}",
                    impact=f"Last probe: {latency}; explicit overrides to it may fail over",
                )
            )

    return recommendations


def summarize_usage(
    ledger: UsageLedger,
    registry: ProviderRegistry,
    *,
    budget_alert_usd: float = 1.0,
) -> UsageReport:
    snapshot = ledger.snapshot()
    return UsageReport(
        snapshot=snapshot,
        savings=ledger.estimate_savings(),
        recommendations=build_recommendations(snapshot, registry, budget_alert_usd=budget_alert_usd),
    )


__all__ = ["UsageReport", "build_recommendations", "summarize_usage"]
