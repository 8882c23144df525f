"""
CreatorLens Core Data Models

This module defines the Pydantic v2 models shared by the CreatorLens routing
and scoring engine. Everything a caller receives back from the engine is one
of these models, so results serialize to plain JSON with ``model_dump``.

Key Features:
- Closed enums for providers, task types, platforms and tags
- Immutable per-call objects (tasks, score breakdowns)
- Model validators enforcing the score invariants
- Configuration models consumed by ``creatorlens.config``
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

SCORE_MIN = 0
SCORE_MAX = 100


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> float:
    """Clamp a raw score into the [0, 100] range."""
    return max(SCORE_MIN, min(SCORE_MAX, value))


def mean_score(values: Sequence[float]) -> int:
    """Unweighted, half-up rounded mean of sub-scores."""
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


class ProviderId(str, Enum):
    """Registered generation providers."""

    OPENAI = "openai"
    GEMINI = "gemini"
    MOCK = "mock"


class TaskType(str, Enum):
    """Kinds of work a task can ask a provider to do."""

    CREATIVE = "creative"
    ANALYSIS = "analysis"
    SOCIAL = "social"
    VIDEO_SCRIPT = "video_script"
    ARTICLE = "article"
    AD_COPY = "ad_copy"
    COMPLEX = "complex"
    CODING = "coding"
    UNSPECIFIED = "unspecified"


class HealthStatus(str, Enum):
    """Last measured provider health."""

    ONLINE = "online"
    DEGRADED = "degraded"
    OFFLINE = "offline"


class Platform(str, Enum):
    """Target publishing platforms."""

    YOUTUBE = "youtube"
    TIKTOK = "tiktok"
    INSTAGRAM = "instagram"


class GenerationIntent(str, Enum):
    """What a task expects back from the provider."""

    FREEFORM = "freeform"
    REWRITE = "rewrite"
    HOOKS = "hooks"
    TITLE = "title"


class ContentKind(str, Enum):
    """Artifact being optimized."""

    SCRIPT = "script"
    TITLE = "title"


class HookType(str, Enum):
    """Rhetorical shape of a hook."""

    QUESTION = "question"
    STATEMENT = "statement"
    STATISTIC = "statistic"
    STORY = "story"
    CONTROVERSY = "controversy"


class Impact(str, Enum):
    """Severity / impact levels shared by issues and improvements."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ImprovementCategory(str, Enum):
    """Areas a script improvement targets."""

    HOOK = "hook"
    ENGAGEMENT = "engagement"
    CLARITY = "clarity"
    EMOTION = "emotion"
    CTA = "cta"
    LENGTH = "length"


class IssueCategory(str, Enum):
    """Brand check issue categories."""

    VOICE = "voice"
    MESSAGING = "messaging"
    GUIDELINES = "guidelines"


class BrandTone(str, Enum):
    """Declared brand voice tone."""

    PROFESSIONAL = "professional"
    CASUAL = "casual"
    FRIENDLY = "friendly"
    AUTHORITATIVE = "authoritative"
    PLAYFUL = "playful"


class OptimizationState(str, Enum):
    """Lifecycle of an optimization request."""

    PENDING = "pending"
    ROUTING = "routing"
    GENERATING = "generating"
    SCORING = "scoring"
    DONE = "done"
    FAILED = "failed"


class RecommendationType(str, Enum):
    """Usage recommendation kinds."""

    COST_OPTIMIZATION = "cost_optimization"
    BUDGET_ALERT = "budget_alert"
    PERFORMANCE = "performance"


# Provider and Task Models
class ProviderProfile(BaseModel):
    """
    Static description plus mutable health of a generation provider.

    Profiles are registered once at startup. Only the health fields change
    afterwards, and only through ``ProviderRegistry.update_health``.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
    )

    id: ProviderId = Field(..., description="Provider identifier")
    display_name: str = Field(..., min_length=1)
    model: Optional[str] = Field(default=None, description="Upstream model name")
    cost_per_token: float = Field(..., ge=0.0, description="USD per token")
    strengths: List[str] = Field(default_factory=list)
    status: HealthStatus = Field(default=HealthStatus.ONLINE)
    latency_ms: Optional[float] = Field(default=None, ge=0.0)
    last_checked: Optional[datetime] = Field(default=None)


class ProviderHealth(BaseModel):
    """Result of a single provider health probe."""

    model_config = ConfigDict(extra="forbid")

    provider: ProviderId
    status: HealthStatus
    latency_ms: Optional[float] = Field(default=None, ge=0.0)
    checked_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    detail: Optional[str] = None


class Task(BaseModel):
    """
    A unit of generation work.

    Tasks are created per call and never mutated; the router reads them and
    the provider executes them.
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        extra="forbid",
    )

    prompt: str = Field(..., min_length=1, description="Prompt text sent to the provider")
    task_type: TaskType = Field(default=TaskType.UNSPECIFIED)
    override: Optional[ProviderId] = Field(
        default=None,
        description="Explicit provider choice; always wins when registered",
    )
    cost_ceiling: Optional[float] = Field(default=None, ge=0.0, description="Maximum USD the caller will spend")
    max_output_tokens: int = Field(default=1000, gt=0)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    system_instruction: Optional[str] = Field(default=None)
    intent: GenerationIntent = Field(default=GenerationIntent.FREEFORM)
    topic: Optional[str] = Field(default=None, description="Subject of the content, used by templates and logs")


class GenerationResult(BaseModel):
    """Output of one successful provider call."""

    model_config = ConfigDict(extra="forbid")

    text: str
    provider: ProviderId
    model: Optional[str] = None
    actual_cost: Optional[float] = Field(default=None, ge=0.0, description="Cost reported by the provider, if known")
    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)
    latency_ms: float = Field(default=0.0, ge=0.0)


# Usage Models
class UsageRecord(BaseModel):
    """Cumulative usage for one provider."""

    model_config = ConfigDict(extra="forbid")

    provider: ProviderId
    requests: int = Field(default=0, ge=0)
    cost: float = Field(default=0.0, ge=0.0)


class UsageSnapshot(BaseModel):
    """Point-in-time copy of the usage ledger."""

    model_config = ConfigDict(extra="forbid")

    per_provider: List[UsageRecord] = Field(default_factory=list)
    total_cost: float = Field(default=0.0, ge=0.0)
    total_requests: int = Field(default=0, ge=0)
    taken_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @computed_field
    @property
    def average_cost_per_request(self) -> float:
        """Average spend per request; zero when nothing was recorded."""
        return self.total_cost / max(self.total_requests, 1)

    def for_provider(self, provider: ProviderId) -> UsageRecord:
        for record in self.per_provider:
            if record.provider == provider:
                return record
        return UsageRecord(provider=provider)


class SavingsEstimate(BaseModel):
    """Savings of actual routing versus an all-premium baseline."""

    model_config = ConfigDict(extra="forbid")

    absolute: float = Field(default=0.0, ge=0.0)
    percent: float = Field(default=0.0, ge=0.0, le=99.0)
    baseline_cost: float = Field(default=0.0, ge=0.0)
    actual_cost: float = Field(default=0.0, ge=0.0)


class Recommendation(BaseModel):
    """Actionable advice derived from usage."""

    model_config = ConfigDict(extra="forbid")

    type: RecommendationType
    message: str
    impact: str


# Script Scoring Models
class LengthFit(BaseModel):
    """How the word count sits against the platform band."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    current_length: int = Field(..., ge=0)
    recommended_length: int = Field(..., gt=0)
    min_length: int = Field(..., ge=0)
    max_length: int = Field(..., gt=0)
    within_band: bool


class ScriptImprovement(BaseModel):
    """A suggestion raised by a weak sub-score."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    category: ImprovementCategory
    suggestion: str
    impact: Impact


class ScoreBreakdown(BaseModel):
    """
    Heuristic quality breakdown of a script or title.

    Created fresh by every scoring call. The validator guarantees that
    ``overall`` is the half-up rounded mean of the five sub-scores.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    platform: Platform
    hook_strength: int = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    engagement_potential: int = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    clarity: int = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    emotional_impact: int = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    call_to_action_strength: int = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    overall: int = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    length_fit: LengthFit
    improvements: List[ScriptImprovement] = Field(default_factory=list)

    @property
    def sub_scores(self) -> List[int]:
        return [
            self.hook_strength,
            self.engagement_potential,
            self.clarity,
            self.emotional_impact,
            self.call_to_action_strength,
        ]

    @model_validator(mode="after")
    def validate_overall(self) -> ScoreBreakdown:
        """Ensure the overall score is the mean of the sub-scores."""
        expected = mean_score(self.sub_scores)
        if self.overall != expected:
            raise ValueError(f"overall must equal rounded mean of sub-scores ({expected})")
        return self


class Hook(BaseModel):
    """A ranked hook or title candidate."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    text: str = Field(..., min_length=1)
    type: HookType
    viral_score: int = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    platform: Platform


# Brand Models
class BrandVoice(BaseModel):
    """How the brand sounds."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    tone: BrandTone = Field(default=BrandTone.FRIENDLY)
    personality: List[str] = Field(default_factory=list)
    avoid_words: List[str] = Field(default_factory=list)
    preferred_words: List[str] = Field(default_factory=list)

    @field_validator("avoid_words", "preferred_words", "personality")
    @classmethod
    def drop_blank_entries(cls, v: List[str]) -> List[str]:
        """Remove empty strings so they never match everything."""
        return [item.strip() for item in v if item and item.strip()]


class BrandMessaging(BaseModel):
    """What the brand says."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    tagline: str = Field(default="")
    key_messages: List[str] = Field(default_factory=list)
    value_proposition: str = Field(default="")
    target_audience: str = Field(default="")

    @field_validator("key_messages")
    @classmethod
    def drop_blank_messages(cls, v: List[str]) -> List[str]:
        return [item.strip() for item in v if item and item.strip()]


class ContentRules(BaseModel):
    """What the brand publishes and avoids."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    content_pillars: List[str] = Field(default_factory=list)
    forbidden_topics: List[str] = Field(default_factory=list)
    required_elements: List[str] = Field(default_factory=list)

    @field_validator("content_pillars", "forbidden_topics", "required_elements")
    @classmethod
    def drop_blank_rules(cls, v: List[str]) -> List[str]:
        return [item.strip() for item in v if item and item.strip()]


class BrandGuidelines(BaseModel):
    """Caller-supplied brand guideline object; read-only to the scorer."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    brand_name: Optional[str] = Field(default=None)
    voice: BrandVoice = Field(default_factory=BrandVoice)
    messaging: BrandMessaging = Field(default_factory=BrandMessaging)
    content_rules: ContentRules = Field(default_factory=ContentRules)


class BrandIssue(BaseModel):
    """A single brand alignment problem and its fix."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    category: IssueCategory
    severity: Impact
    description: str
    suggested_fix: str


class BrandRewrite(BaseModel):
    """Mechanical rewrite produced by the brand scorer."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    text: str
    changes: List[str] = Field(default_factory=list)


class BrandCheckResult(BaseModel):
    """Brand alignment scores, issues and an optional rewrite."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    voice: float = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    messaging: float = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    guidelines: float = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    overall: int = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    issues: List[BrandIssue] = Field(default_factory=list)
    rewrite: Optional[BrandRewrite] = None

    @model_validator(mode="after")
    def validate_overall(self) -> BrandCheckResult:
        """Ensure the overall score is the mean of the category scores."""
        expected = mean_score([self.voice, self.messaging, self.guidelines])
        if self.overall != expected:
            raise ValueError(f"overall must equal rounded mean of category scores ({expected})")
        return self



class BrandSample(BaseModel):
    """One piece of content checked as part of a consistency batch."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    content: str
    title: Optional[str] = None


class CategoryConsistency(BaseModel):
    """Averaged score and distinct issues for one brand category across samples."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    score: float = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    issues: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class BrandConsistencyResult(BaseModel):
    """Brand alignment averaged over a batch of content samples."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    sample_count: int = Field(..., ge=1)
    voice: CategoryConsistency
    messaging: CategoryConsistency
    guidelines: CategoryConsistency
    overall: int = Field(..., ge=SCORE_MIN, le=SCORE_MAX)

    @model_validator(mode="after")
    def validate_overall(self) -> BrandConsistencyResult:
        expected = mean_score([self.voice.score, self.messaging.score, self.guidelines.score])
        if self.overall != expected:
            raise ValueError(f"overall must equal rounded mean of category scores ({expected})")
        return self


# Orchestration Models
class ErrorDetail(BaseModel):
    """Structured failure information for the presentation layer."""

    model_config = ConfigDict(extra="forbid")

    kind: str
    provider: Optional[str] = None
    message: str
    status_code: Optional[int] = None
    user_message: Optional[str] = None


class OptimizationResult(BaseModel):
    """Outcome of ``ContentOptimizer.optimize``."""

    model_config = ConfigDict(extra="forbid")

    state: OptimizationState
    kind: ContentKind = ContentKind.SCRIPT
    provider: Optional[ProviderId] = None
    attempted_providers: List[ProviderId] = Field(default_factory=list)
    original_text: str
    optimized_text: Optional[str] = None
    original_score: Optional[ScoreBreakdown] = None
    score: Optional[ScoreBreakdown] = None
    brand_check: Optional[BrandCheckResult] = None
    changes_applied: List[str] = Field(default_factory=list)
    diff: List[str] = Field(default_factory=list)
    error: Optional[ErrorDetail] = None

    @computed_field
    @property
    def improvement_score(self) -> int:
        """Overall score gained by the optimization."""
        if self.score is None or self.original_score is None:
            return 0
        return self.score.overall - self.original_score.overall


class HookGenerationResult(BaseModel):
    """Outcome of ``ContentOptimizer.generate_hooks``."""

    model_config = ConfigDict(extra="forbid")

    state: OptimizationState
    topic: str
    provider: Optional[ProviderId] = None
    attempted_providers: List[ProviderId] = Field(default_factory=list)
    hooks: List[Hook] = Field(default_factory=list)
    error: Optional[ErrorDetail] = None


# Configuration Models
class OpenAIConfig(BaseModel):
    """Settings for the chat-completion provider."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    api_key: str = Field(..., min_length=1)
    model: str = Field(default="gpt-4o")
    base_url: str = Field(default="https://api.openai.com/v1")
    cost_per_token: float = Field(default=0.00003, ge=0.0)


class GeminiConfig(BaseModel):
    """Settings for the generative-language provider."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    api_key: str = Field(..., min_length=1)
    model: str = Field(default="gemini-2.0-flash")
    cost_per_token: float = Field(default=0.000001, ge=0.0)


class MockConfig(BaseModel):
    """Settings for the deterministic template provider."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    cost_per_token: float = Field(default=0.0, ge=0.0)
    latency_seconds: float = Field(default=0.0, ge=0.0)


class RoutingConfig(BaseModel):
    """Routing and spending knobs."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    cheap_provider_threshold: float = Field(
        default=0.001,
        ge=0.0,
        description="Cost ceilings below this always route to the cheapest provider",
    )
    provider_timeout_seconds: float = Field(default=30.0, gt=0.0)
    budget_alert_usd: float = Field(default=1.0, ge=0.0)


class AppConfig(BaseModel):
    """Main application configuration."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    openai: Optional[OpenAIConfig] = None
    gemini: Optional[GeminiConfig] = None
    mock: Optional[MockConfig] = None
    routing: RoutingConfig = Field(default_factory=RoutingConfig)

    default_platform: Platform = Field(default=Platform.YOUTUBE)
    scoring_lexicon_file: Optional[str] = Field(default=None)

    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)

    @computed_field
    @property
    def configured_providers(self) -> List[ProviderId]:
        providers = []
        if self.openai is not None:
            providers.append(ProviderId.OPENAI)
        if self.gemini is not None:
            providers.append(ProviderId.GEMINI)
        if self.mock is not None:
            providers.append(ProviderId.MOCK)
        return providers

    def redacted(self) -> Dict[str, Any]:
        """Configuration summary with secrets removed."""
        data = self.model_dump(mode="json")
        for section in ("openai", "gemini"):
            if data.get(section):
                data[section]["api_key"] = "***"
        return data


__all__ = [
    "SCORE_MIN",
    "SCORE_MAX",
    "round_half_up",
    "clamp_score",
    "mean_score",
    # Enums
    "ProviderId",
    "TaskType",
    "HealthStatus",
    "Platform",
    "GenerationIntent",
    "ContentKind",
    "HookType",
    "Impact",
    "ImprovementCategory",
    "IssueCategory",
    "BrandTone",
    "OptimizationState",
    "RecommendationType",
    # Provider models
    "ProviderProfile",
    "ProviderHealth",
    "Task",
    "GenerationResult",
    # Usage models
    "UsageRecord",
    "UsageSnapshot",
    "SavingsEstimate",
    "Recommendation",
    # Scoring models
    "LengthFit",
    "ScriptImprovement",
    "ScoreBreakdown",
    "Hook",
    # Brand models
    "BrandVoice",
    "BrandMessaging",
    "ContentRules",
    "BrandGuidelines",
    "BrandIssue",
    "BrandRewrite",
    "BrandCheckResult",
    "BrandSample",
    "CategoryConsistency",
    "BrandConsistencyResult",
    # Orchestration models
    "ErrorDetail",
    "OptimizationResult",
    "HookGenerationResult",
    # Configuration models
    "OpenAIConfig",
    "GeminiConfig",
    "MockConfig",
    "RoutingConfig",
    "AppConfig",
]
