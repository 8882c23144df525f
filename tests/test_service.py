"""Tests for service wiring, output formatting and logging helpers."""

import io
import json
import logging

import pytest
from rich.console import Console

from creatorlens.core import AppConfig, MockConfig, ProviderId, ScoreBreakdown
from creatorlens.llm import MockProvider
from creatorlens.scoring import ScriptScorer
from creatorlens.service import build_service
from creatorlens.utils import ExtraFieldsFormatter, RichFormatter, extract_extra_fields, format_json


class TestBuildService:

    def test_mock_only_service(self):
        service = build_service(AppConfig(mock=MockConfig()))

        assert service.registry.ids() == [ProviderId.MOCK]
        assert isinstance(service.providers[ProviderId.MOCK], MockProvider)
        assert service.usage_report().snapshot.total_requests == 0

    def test_lexicon_file_loaded(self, tmp_path):
        path = tmp_path / "lexicon.json"
        path.write_text(json.dumps({"script": {"hook_base": 40}}), encoding="utf-8")

        service = build_service(AppConfig(mock=MockConfig(), scoring_lexicon_file=str(path)))

        assert service.scorer.hook_strength("Plain line.") == 40
        assert service.hook_generator.rank(["Plain line."], "youtube", 1)[0].viral_score == 40

    def test_profiles_sorted_by_cost(self, service):
        assert service.registry.cheapest() == ProviderId.GEMINI
        assert service.registry.get(ProviderId.GEMINI).display_name == "Google Gemini"


class TestFormatters:

    @pytest.fixture
    def formatter(self):
        return RichFormatter(Console(file=io.StringIO(), width=120))

    def test_format_json_round_trips_breakdown(self):
        breakdown = ScriptScorer().analyze("What if I told you this works?")
        assert ScoreBreakdown.model_validate(json.loads(format_json(breakdown))) == breakdown

    @pytest.mark.asyncio
    async def test_displays_render(self, formatter, service, guidelines):
        optimization = await service.optimizer.optimize("Our cheap espresso is fine.", guidelines=guidelines)
        hooks = await service.optimizer.generate_hooks("espresso", count=3)

        formatter.display_optimization(optimization, show_diff=True)
        formatter.display_hooks(hooks)
        formatter.display_brand_check(optimization.brand_check)
        formatter.display_usage(service.usage_report())
        output = formatter.console.file.getvalue()

        assert "Hooks" in output
        assert "gemini" in output


class TestLogging:

    def test_extra_fields_appended(self):
        record = logging.LogRecord("creatorlens.test", logging.INFO, __file__, 1, "Routed task", None, None)
        record.provider = "gemini"
        record.cost_usd = 0.002

        assert extract_extra_fields(record) == {"provider": "gemini", "cost_usd": 0.002}
        rendered = ExtraFieldsFormatter("%(message)s").format(record)
        assert rendered == "Routed task [cost_usd=0.002 provider=gemini]"

    def test_plain_record_unchanged(self):
        record = logging.LogRecord("creatorlens.test", logging.INFO, __file__, 1, "Plain", None, None)
        assert ExtraFieldsFormatter("%(message)s").format(record) == "Plain"
