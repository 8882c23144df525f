"""Tests for the provider registry and routing decisions."""

import pytest

from creatorlens.core import (
    HealthStatus,
    NoProvidersRegisteredError,
    ProviderId,
    ProviderProfile,
    Task,
    TaskType,
    UnknownProviderError,
)
from creatorlens.routing import ProviderRegistry, ProviderRouter, coerce_provider_id


def _task(**kwargs):
    kwargs.setdefault("prompt", "Write something useful")
    return Task(**kwargs)


class TestProviderRegistry:

    def test_orders_by_cost(self, registry):
        assert registry.ordered_by_cost() == [ProviderId.GEMINI, ProviderId.OPENAI]
        assert registry.cheapest() == ProviderId.GEMINI
        assert registry.most_expensive() == ProviderId.OPENAI

    def test_get_returns_a_copy(self, registry):
        profile = registry.get(ProviderId.OPENAI)
        profile.status = HealthStatus.OFFLINE

        assert registry.get(ProviderId.OPENAI).status == HealthStatus.ONLINE

    def test_update_health_stamps_profile(self, registry):
        updated = registry.update_health(ProviderId.GEMINI, HealthStatus.DEGRADED, 420.0)

        assert updated.status == HealthStatus.DEGRADED
        assert updated.latency_ms == 420.0
        assert updated.last_checked is not None

    def test_unknown_provider_lookups_fail(self):
        registry = ProviderRegistry()

        with pytest.raises(UnknownProviderError):
            registry.get(ProviderId.OPENAI)
        with pytest.raises(UnknownProviderError):
            coerce_provider_id("anthropic")
        assert registry.is_registered("anthropic") is False

    def test_empty_registry_has_no_cheapest(self):
        with pytest.raises(NoProvidersRegisteredError):
            ProviderRegistry().cheapest()

    def test_cost_ties_keep_registration_order(self):
        registry = ProviderRegistry(
            [
                ProviderProfile(id=ProviderId.OPENAI, display_name="OpenAI", cost_per_token=0.00001),
                ProviderProfile(id=ProviderId.GEMINI, display_name="Gemini", cost_per_token=0.00001),
            ]
        )
        assert registry.cheapest() == ProviderId.OPENAI
        assert registry.most_expensive() == ProviderId.OPENAI


class TestProviderRouter:

    def test_coding_goes_to_reasoning_provider(self, router):
        assert router.select_provider(_task(task_type=TaskType.CODING)) == ProviderId.OPENAI

    def test_creative_goes_to_creative_provider(self, router):
        assert router.select_provider(_task(task_type=TaskType.VIDEO_SCRIPT)) == ProviderId.GEMINI

    def test_unspecified_goes_to_cheapest(self, router):
        assert router.select_provider(_task()) == ProviderId.GEMINI

    def test_override_wins_over_everything(self, router):
        task = _task(task_type=TaskType.CREATIVE, override=ProviderId.OPENAI, cost_ceiling=0.0)
        assert router.select_provider(task) == ProviderId.OPENAI

    def test_override_wins_even_when_unhealthy(self, router, registry):
        registry.update_health(ProviderId.OPENAI, HealthStatus.OFFLINE)
        assert router.select_provider(_task(override=ProviderId.OPENAI)) == ProviderId.OPENAI

    def test_unregistered_override_falls_through(self, router):
        task = _task(task_type=TaskType.CODING, override=ProviderId.MOCK)
        assert router.select_provider(task) == ProviderId.OPENAI

    def test_low_cost_ceiling_routes_to_cheapest(self, router):
        task = _task(task_type=TaskType.ANALYSIS, cost_ceiling=0.0005)
        assert router.select_provider(task) == ProviderId.GEMINI

    def test_zero_cost_ceiling_counts_as_set(self, router):
        task = _task(task_type=TaskType.CODING, cost_ceiling=0.0)
        assert router.select_provider(task) == ProviderId.GEMINI

    def test_generous_cost_ceiling_keeps_affinity(self, router):
        task = _task(task_type=TaskType.CODING, cost_ceiling=5.0)
        assert router.select_provider(task) == ProviderId.OPENAI

    def test_affinity_to_missing_provider_falls_back_to_cheapest(self):
        registry = ProviderRegistry(
            [ProviderProfile(id=ProviderId.MOCK, display_name="Template mock", cost_per_token=0.0)]
        )
        router = ProviderRouter(registry)
        assert router.select_provider(_task(task_type=TaskType.CODING)) == ProviderId.MOCK

    def test_health_does_not_change_decisions(self, router, registry):
        task = _task(task_type=TaskType.CODING)
        before = router.select_provider(task)
        registry.update_health(ProviderId.OPENAI, HealthStatus.OFFLINE)

        assert router.select_provider(task) == before

    def test_decision_is_deterministic(self, router):
        task = _task(task_type=TaskType.SOCIAL)
        assert len({router.select_provider(task) for _ in range(20)}) == 1

    def test_empty_registry_raises(self):
        router = ProviderRouter(ProviderRegistry())
        with pytest.raises(NoProvidersRegisteredError):
            router.select_provider(_task())

    def test_failover_walks_cost_order_and_wraps(self, router):
        assert router.select_failover(ProviderId.GEMINI) == ProviderId.OPENAI
        assert router.select_failover(ProviderId.OPENAI) == ProviderId.GEMINI

    def test_no_failover_with_single_provider(self):
        registry = ProviderRegistry(
            [ProviderProfile(id=ProviderId.GEMINI, display_name="Gemini", cost_per_token=0.000001)]
        )
        assert ProviderRouter(registry).select_failover(ProviderId.GEMINI) is None
