"""Tests for usage accounting, savings and recommendations."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from creatorlens.core import (
    ProviderId,
    ProviderProfile,
    RecommendationType,
    UnknownProviderError,
    ValidationError,
)
from creatorlens.routing import ProviderRegistry, UsageLedger, build_recommendations, summarize_usage


class TestUsageLedger:

    def test_snapshot_lists_every_registered_provider(self, ledger):
        snapshot = ledger.snapshot()

        assert {record.provider for record in snapshot.per_provider} == {ProviderId.OPENAI, ProviderId.GEMINI}
        assert snapshot.total_requests == 0
        assert snapshot.total_cost == 0.0
        assert snapshot.average_cost_per_request == 0.0

    def test_record_usage_accumulates(self, ledger):
        ledger.record_usage(ProviderId.GEMINI, 0.002)
        ledger.record_usage("gemini", 0.003)
        ledger.record_usage(ProviderId.OPENAI, 0.0)

        snapshot = ledger.snapshot()
        gemini = snapshot.for_provider(ProviderId.GEMINI)
        assert gemini.requests == 2
        assert gemini.cost == pytest.approx(0.005)
        assert snapshot.for_provider(ProviderId.OPENAI).requests == 1
        assert snapshot.total_requests == 3
        assert snapshot.total_cost == pytest.approx(0.005)

    def test_unknown_provider_rejected(self, ledger):
        with pytest.raises(UnknownProviderError):
            ledger.record_usage(ProviderId.MOCK, 0.01)
        assert ledger.snapshot().total_requests == 0

    def test_negative_cost_rejected(self, ledger):
        with pytest.raises(ValidationError):
            ledger.record_usage(ProviderId.OPENAI, -0.01)
        assert ledger.snapshot().total_requests == 0

    def test_concurrent_records_are_not_lost(self, ledger):
        """Eight threads recording in parallel must add up exactly."""

        def record_many(_):
            for _ in range(250):
                ledger.record_usage(ProviderId.GEMINI, 0.001)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(record_many, range(8)))

        snapshot = ledger.snapshot()
        assert snapshot.for_provider(ProviderId.GEMINI).requests == 2000
        assert snapshot.total_cost == pytest.approx(2.0)


class TestSavingsEstimate:

    def test_no_usage_means_no_savings(self, ledger):
        savings = ledger.estimate_savings()

        assert savings.absolute == 0.0
        assert savings.percent == 0.0

    def test_cheap_usage_saved_against_premium_baseline(self, ledger):
        # gemini is 30x cheaper than openai in the fixture registry
        ledger.record_usage(ProviderId.GEMINI, 0.001)

        savings = ledger.estimate_savings()
        assert savings.baseline_cost == pytest.approx(0.03)
        assert savings.absolute == pytest.approx(0.029)
        assert savings.percent == pytest.approx(96.67, abs=0.01)

    def test_premium_only_usage_saves_nothing(self, ledger):
        ledger.record_usage(ProviderId.OPENAI, 0.05)

        savings = ledger.estimate_savings()
        assert savings.absolute == 0.0
        assert savings.percent == 0.0

    def test_percent_capped_at_99(self):
        registry = ProviderRegistry(
            [
                ProviderProfile(id=ProviderId.OPENAI, display_name="OpenAI", cost_per_token=0.00003),
                ProviderProfile(id=ProviderId.GEMINI, display_name="Gemini", cost_per_token=0.00000001),
            ]
        )
        ledger = UsageLedger(registry)
        ledger.record_usage(ProviderId.GEMINI, 0.01)

        assert ledger.estimate_savings().percent == 99.0

    def test_savings_between_zero_and_cap(self, ledger):
        ledger.record_usage(ProviderId.GEMINI, 0.0004)
        ledger.record_usage(ProviderId.OPENAI, 0.002)

        savings = ledger.estimate_savings()
        assert 0.0 <= savings.percent <= 99.0
        assert savings.absolute >= 0.0


class TestRecommendations:

    def test_heavy_premium_usage_suggests_cheaper_routing(self, ledger, registry):
        for _ in range(3):
            ledger.record_usage(ProviderId.OPENAI, 0.01)

        recommendations = build_recommendations(ledger.snapshot(), registry)
        types = [item.type for item in recommendations]
        assert RecommendationType.COST_OPTIMIZATION in types

    def test_budget_alert_above_threshold(self, ledger, registry):
        ledger.record_usage(ProviderId.OPENAI, 0.6)

        report = summarize_usage(ledger, registry, budget_alert_usd=0.5)
        assert RecommendationType.BUDGET_ALERT in [item.type for item in report.recommendations]

    def test_balanced_usage_has_no_recommendations(self, ledger, registry):
        ledger.record_usage(ProviderId.GEMINI, 0.001)
        ledger.record_usage(ProviderId.OPENAI, 0.001)

        assert build_recommendations(ledger.snapshot(), registry) == []
