"""
Provider cost estimation.

Token counts use the four-characters-per-token estimate for every provider.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..core import ProviderId, ValidationError
from .registry import ProviderRegistry, coerce_provider_id

CHARS_PER_TOKEN = 4


@dataclass(frozen=True)
class CostBreakdown:
    """Detailed cost estimate for one request."""

    provider: ProviderId
    input_tokens: int
    output_tokens: int
    cost_per_token: float
    total_cost_usd: float

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


def estimate_tokens(text: str) -> int:
    """Estimate prompt tokens as ``ceil(characters / 4)``."""

    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)


class CostModel:
    """Estimate request costs from the registry's per-token rates."""

    def __init__(self, registry: ProviderRegistry) -> None:
        self._registry = registry

    def breakdown(self, provider: ProviderId | str, prompt_text: str, max_output_tokens: int) -> CostBreakdown:
        if max_output_tokens < 0:
            raise ValidationError(
                "max_output_tokens cannot be negative",
                field="max_output_tokens",
                value=max_output_tokens,
            )
        provider_id = coerce_provider_id(provider)
        rate = self._registry.rate(provider_id)
        input_tokens = estimate_tokens(prompt_text)
        return CostBreakdown(
            provider=provider_id,
            input_tokens=input_tokens,
            output_tokens=max_output_tokens,
            cost_per_token=rate,
            total_cost_usd=(input_tokens + max_output_tokens) * rate,
        )

    def estimate_cost(self, provider: ProviderId | str, prompt_text: str, max_output_tokens: int) -> float:
        """Cost of sending ``prompt_text`` and receiving up to ``max_output_tokens``.

        Raises:
            UnknownProviderError: the provider is not registered.
            ValidationError: ``max_output_tokens`` is negative.
        """

        return self.breakdown(provider, prompt_text, max_output_tokens).total_cost_usd

    def cost_for_tokens(self, provider: ProviderId | str, total_tokens: int) -> float:
        """Price a token count reported back by a provider."""

        if total_tokens < 0:
            raise ValidationError("total_tokens cannot be negative", field="total_tokens", value=total_tokens)
        return total_tokens * self._registry.rate(provider)


__all__ = ["CHARS_PER_TOKEN", "CostBreakdown", "CostModel", "estimate_tokens"]
