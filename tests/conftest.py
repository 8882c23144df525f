"""
Shared fixtures for the CreatorLens test suite.

Providers are always MockProvider instances posing as the real provider ids,
so no test touches the network.
"""

import pytest

from creatorlens.core import (
    AppConfig,
    BrandGuidelines,
    BrandMessaging,
    BrandVoice,
    ContentRules,
    GeminiConfig,
    OpenAIConfig,
    ProviderId,
    ProviderProfile,
)
from creatorlens.llm import MockProvider
from creatorlens.routing import CostModel, ProviderRegistry, ProviderRouter, UsageLedger
from creatorlens.service import build_service

OPENAI_RATE = 0.00003
GEMINI_RATE = 0.000001


@pytest.fixture
def profiles():
    """A cheap creative provider and an expensive reasoning provider."""
    return [
        ProviderProfile(
            id=ProviderId.OPENAI,
            display_name="OpenAI",
            model="gpt-4o",
            cost_per_token=OPENAI_RATE,
            strengths=["analysis", "coding"],
        ),
        ProviderProfile(
            id=ProviderId.GEMINI,
            display_name="Google Gemini",
            model="gemini-2.0-flash",
            cost_per_token=GEMINI_RATE,
            strengths=["creative writing"],
        ),
    ]


@pytest.fixture
def registry(profiles):
    return ProviderRegistry(profiles)


@pytest.fixture
def cost_model(registry):
    return CostModel(registry)


@pytest.fixture
def ledger(registry):
    return UsageLedger(registry)


@pytest.fixture
def router(registry):
    return ProviderRouter(registry)


@pytest.fixture
def app_config():
    return AppConfig(
        openai=OpenAIConfig(api_key="sk-test"),
        gemini=GeminiConfig(api_key="gm-test"),
    )


@pytest.fixture
def fake_providers():
    return {
        ProviderId.OPENAI: MockProvider(provider_id=ProviderId.OPENAI, cost_per_token=OPENAI_RATE),
        ProviderId.GEMINI: MockProvider(provider_id=ProviderId.GEMINI, cost_per_token=GEMINI_RATE),
    }


@pytest.fixture
def service(app_config, fake_providers):
    """Fully wired service whose providers are local templates."""
    return build_service(app_config, providers=fake_providers)


@pytest.fixture
def guidelines():
    return BrandGuidelines(
        brand_name="Brewly",
        voice=BrandVoice(tone="friendly", avoid_words=["cheap"], preferred_words=["affordable"]),
        messaging=BrandMessaging(
            key_messages=["great coffee at home"],
            value_proposition="cafe quality for less",
        ),
        content_rules=ContentRules(
            content_pillars=["espresso"],
            forbidden_topics=["politics"],
        ),
    )
