"""Service wiring for CreatorLens.

``build_service`` constructs every component from an ``AppConfig``; nothing
in the package is a module-level singleton.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from .core import AppConfig, ProviderId, ProviderProfile
from .llm import ContentProvider, GeminiProvider, MockProvider, OpenAIChatProvider
from .optimizer import ContentOptimizer
from .routing import CostModel, ProviderRegistry, ProviderRouter, UsageLedger, UsageReport, summarize_usage
from .scoring import DEFAULT_LEXICON, BrandAlignmentScorer, HookGenerator, ScoringLexicon, ScriptScorer

LOGGER = logging.getLogger(__name__)


@dataclass
class CreatorLensService:
    """All wired components of one CreatorLens instance."""

    config: AppConfig
    registry: ProviderRegistry
    cost_model: CostModel
    ledger: UsageLedger
    router: ProviderRouter
    lexicon: ScoringLexicon
    scorer: ScriptScorer
    hook_generator: HookGenerator
    brand_scorer: BrandAlignmentScorer
    providers: Dict[ProviderId, ContentProvider]
    optimizer: ContentOptimizer

    def usage_report(self) -> UsageReport:
        return summarize_usage(
            self.ledger,
            self.registry,
            budget_alert_usd=self.config.routing.budget_alert_usd,
        )

    async def aclose(self) -> None:
        await self.optimizer.aclose()


def build_profiles(config: AppConfig) -> List[ProviderProfile]:
    """Registry profiles for every provider present in ``config``."""

    profiles: List[ProviderProfile] = []
    if config.openai is not None:
        profiles.append(
            ProviderProfile(
                id=ProviderId.OPENAI,
                display_name="OpenAI",
                model=config.openai.model,
                cost_per_token=config.openai.cost_per_token,
                strengths=["analysis", "complex reasoning", "coding"],
            )
        )
    if config.gemini is not None:
        profiles.append(
            ProviderProfile(
                id=ProviderId.GEMINI,
                display_name="Google Gemini",
                model=config.gemini.model,
                cost_per_token=config.gemini.cost_per_token,
                strengths=["creative writing", "content generation", "social media"],
            )
        )
    if config.mock is not None:
        profiles.append(
            ProviderProfile(
                id=ProviderId.MOCK,
                display_name="Template mock",
                model="template",
                cost_per_token=config.mock.cost_per_token,
                strengths=["offline development", "tests"],
            )
        )
    return profiles


def build_providers(config: AppConfig) -> Dict[ProviderId, ContentProvider]:
    providers: Dict[ProviderId, ContentProvider] = {}
    if config.openai is not None:
        providers[ProviderId.OPENAI] = OpenAIChatProvider.from_config(config.openai)
    if config.gemini is not None:
        providers[ProviderId.GEMINI] = GeminiProvider.from_config(config.gemini)
    if config.mock is not None:
        providers[ProviderId.MOCK] = MockProvider.from_config(config.mock)
    return providers


def build_service(
    config: AppConfig,
    *,
    providers: Optional[Mapping[ProviderId, ContentProvider]] = None,
    lexicon: Optional[ScoringLexicon] = None,
) -> CreatorLensService:
    """Wire registry, ledger, router, scorers, providers and optimizer.

    ``providers`` replaces the clients built from ``config``, which keeps
    tests off the network. ``lexicon`` takes precedence over
    ``config.scoring_lexicon_file``.
    """

    registry = ProviderRegistry(build_profiles(config))
    cost_model = CostModel(registry)
    ledger = UsageLedger(registry)
    router = ProviderRouter(registry, cheap_provider_threshold=config.routing.cheap_provider_threshold)

    if lexicon is None:
        lexicon = (
            ScoringLexicon.from_file(config.scoring_lexicon_file)
            if config.scoring_lexicon_file
            else DEFAULT_LEXICON
        )
    scorer = ScriptScorer(lexicon)
    hook_generator = HookGenerator(scorer, lexicon)
    brand_scorer = BrandAlignmentScorer(lexicon)

    clients = dict(providers) if providers is not None else build_providers(config)
    missing = [provider.value for provider in registry.ids() if provider not in clients]
    if missing:
        LOGGER.warning("Registered providers without a client", extra={"providers": missing})

    optimizer = ContentOptimizer(
        registry=registry,
        router=router,
        ledger=ledger,
        cost_model=cost_model,
        providers=clients,
        scorer=scorer,
        hook_generator=hook_generator,
        brand_scorer=brand_scorer,
        default_platform=config.default_platform,
        default_timeout=config.routing.provider_timeout_seconds,
    )
    LOGGER.info(
        "CreatorLens service ready",
        extra={"providers": [provider.value for provider in registry.ids()]},
    )
    return CreatorLensService(
        config=config,
        registry=registry,
        cost_model=cost_model,
        ledger=ledger,
        router=router,
        lexicon=lexicon,
        scorer=scorer,
        hook_generator=hook_generator,
        brand_scorer=brand_scorer,
        providers=clients,
        optimizer=optimizer,
    )


__all__ = ["CreatorLensService", "build_service", "build_profiles", "build_providers"]
