"""Process-wide usage accounting for generation providers."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict

from ..core import (
    ProviderId,
    SavingsEstimate,
    UnknownProviderError,
    UsageRecord,
    UsageSnapshot,
    ValidationError,
)
from .registry import ProviderRegistry, coerce_provider_id

LOGGER = logging.getLogger(__name__)

SAVINGS_BASELINE_FLOOR = 0.001
MAX_SAVINGS_PERCENT = 99.0


@dataclass
class _ProviderUsage:
    requests: int = 0
    cost: float = 0.0

    def record(self, cost: float) -> None:
        self.requests += 1
        self.cost += cost


class UsageLedger:
    """Track requests and spend per provider.

    Counters only ever grow. ``record_usage`` holds the lock for the whole
    read-modify-write so concurrent callers never lose an increment.
    """

    def __init__(self, registry: ProviderRegistry) -> None:
        self._registry = registry
        self._lock = threading.Lock()
        self._usage: Dict[ProviderId, _ProviderUsage] = {}

    def record_usage(self, provider: ProviderId | str, cost: float) -> None:
        provider_id = coerce_provider_id(provider)
        if not self._registry.is_registered(provider_id):
            raise UnknownProviderError(
                f"Cannot record usage for unregistered provider {provider_id.value}",
                provider=provider_id.value,
            )
        if cost < 0:
            raise ValidationError("Usage cost cannot be negative", field="cost", value=cost)

        with self._lock:
            self._usage.setdefault(provider_id, _ProviderUsage()).record(cost)

        LOGGER.debug("Recorded provider usage", extra={"provider": provider_id.value, "cost_usd": cost})

    def snapshot(self) -> UsageSnapshot:
        with self._lock:
            copied = {provider: (usage.requests, usage.cost) for provider, usage in self._usage.items()}

        records = []
        for provider in self._registry.ids():
            requests, cost = copied.get(provider, (0, 0.0))
            records.append(UsageRecord(provider=provider, requests=requests, cost=cost))

        return UsageSnapshot(
            per_provider=records,
            total_cost=sum(record.cost for record in records),
            total_requests=sum(record.requests for record in records),
        )

    def estimate_savings(self) -> SavingsEstimate:
        """Compare actual spend with sending the same requests to the priciest provider."""

        snapshot = self.snapshot()
        if not snapshot.total_requests:
            return SavingsEstimate()

        premium_rate = self._registry.rate(self._registry.most_expensive())
        baseline = 0.0
        for record in snapshot.per_provider:
            rate = self._registry.rate(record.provider)
            if rate <= 0:
                continue
            baseline += record.cost * (premium_rate / rate)

        absolute = max(baseline - snapshot.total_cost, 0.0)
        percent = absolute / max(baseline, SAVINGS_BASELINE_FLOOR) * 100
        return SavingsEstimate(
            absolute=round(absolute, 6),
            percent=round(min(percent, MAX_SAVINGS_PERCENT), 2),
            baseline_cost=round(baseline, 6),
            actual_cost=round(snapshot.total_cost, 6),
        )


__all__ = ["UsageLedger", "SAVINGS_BASELINE_FLOOR", "MAX_SAVINGS_PERCENT"]
