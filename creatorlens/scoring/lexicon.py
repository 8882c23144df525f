"""
Tunable scoring constants.

Every keyword list and point value used by the scorers lives here as a named
field. The defaults are heuristics, not values fitted to labeled data; load a
JSON override file with ``ScoringLexicon.from_file`` to tune them without
touching the scoring code.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, model_validator

from ..core import BrandTone, ConfigurationError, Platform


class PlatformBand(BaseModel):
    """Recommended word-count band for a platform."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    min_words: int = Field(..., ge=0)
    max_words: int = Field(..., gt=0)
    optimal_words: int = Field(..., gt=0)

    @model_validator(mode="after")
    def validate_band(self) -> PlatformBand:
        if not self.min_words <= self.optimal_words <= self.max_words:
            raise ValueError("optimal_words must sit inside [min_words, max_words]")
        return self


class ScriptLexicon(BaseModel):
    """Word lists and points for the five script sub-scores."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Hook strength (first sentence)
    hook_base: int = 50
    hook_question_points: int = 15
    hook_digit_points: int = 10
    hook_power_word_points: int = 5
    hook_urgency_word_points: int = 5
    power_words: List[str] = Field(
        default_factory=lambda: ["secret", "amazing", "shocking", "incredible", "ultimate", "proven", "guaranteed"]
    )
    urgency_words: List[str] = Field(default_factory=lambda: ["now", "today", "immediately", "urgent", "limited"])

    # Engagement potential (whole text)
    engagement_base: int = 50
    engagement_question_points: int = 5
    engagement_question_cap: int = 20
    engagement_emotional_points: int = 2
    engagement_pronoun_cap: int = 10
    emotional_words: List[str] = Field(
        default_factory=lambda: ["love", "hate", "amazing", "terrible", "incredible", "shocking", "beautiful", "awful"]
    )
    pronouns: List[str] = Field(default_factory=lambda: ["you", "your", "we", "us", "our"])

    # Clarity
    clarity_base: int = 100
    clarity_long_sentence_words: float = 20
    clarity_very_long_sentence_words: float = 30
    clarity_sentence_penalty: int = 20
    clarity_long_word_chars: int = 10
    clarity_long_word_ratio: float = 0.1
    clarity_long_word_penalty: int = 15

    # Emotional impact
    emotion_base: int = 30
    emotion_word_points: int = 5
    story_word_points: int = 8
    positive_words: List[str] = Field(
        default_factory=lambda: ["amazing", "incredible", "fantastic", "wonderful", "excellent", "outstanding"]
    )
    negative_words: List[str] = Field(
        default_factory=lambda: ["terrible", "awful", "shocking", "devastating", "horrible"]
    )
    story_words: List[str] = Field(
        default_factory=lambda: ["story", "happened", "experience", "journey", "adventure"]
    )

    # Call to action
    cta_base: int = 20
    cta_verb_points: int = 10
    action_verb_points: int = 5
    cta_verbs: List[str] = Field(
        default_factory=lambda: ["subscribe", "like", "comment", "share", "follow", "click", "visit", "download"]
    )
    action_verbs: List[str] = Field(
        default_factory=lambda: ["try", "start", "begin", "join", "discover", "learn", "get"]
    )

    # Improvement thresholds
    hook_improvement_below: int = 70
    engagement_improvement_below: int = 60
    clarity_improvement_below: int = 70
    cta_improvement_below: int = 50


class HookLexicon(BaseModel):
    """Cue words used to tag the rhetorical type of a hook."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    story_cues: List[str] = Field(
        default_factory=lambda: ["i", "my", "me", "when", "story", "happened", "journey", "once", "experience"]
    )
    controversy_cues: List[str] = Field(
        default_factory=lambda: [
            "nobody", "wrong", "lie", "lies", "myth", "stop", "unpopular", "overrated", "truth", "worst", "never",
        ]
    )


class BrandLexicon(BaseModel):
    """Points for the brand alignment categories plus the tone vocabulary."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    voice_base: int = 50
    preferred_word_points: int = 5
    avoided_word_penalty: int = 10
    tone_word_points: int = 3

    messaging_base: int = 50
    key_message_points: float = 10
    value_proposition_points: float = 15

    guidelines_base: int = 50
    required_element_points: int = 10
    forbidden_topic_penalty: int = 15
    pillar_points: int = 8

    tone_words: Dict[BrandTone, List[str]] = Field(
        default_factory=lambda: {
            BrandTone.PROFESSIONAL: ["expertise", "professional", "quality", "reliable"],
            BrandTone.CASUAL: ["hey", "guys", "awesome", "cool"],
            BrandTone.FRIENDLY: ["welcome", "help", "together", "community"],
            BrandTone.AUTHORITATIVE: ["proven", "expert", "definitive", "comprehensive"],
            BrandTone.PLAYFUL: ["fun", "exciting", "amazing", "fantastic"],
        }
    )


def _default_bands() -> Dict[Platform, PlatformBand]:
    return {
        Platform.YOUTUBE: PlatformBand(min_words=150, max_words=300, optimal_words=200),
        Platform.TIKTOK: PlatformBand(min_words=50, max_words=150, optimal_words=100),
        Platform.INSTAGRAM: PlatformBand(min_words=80, max_words=200, optimal_words=120),
    }


def _default_ctas() -> Dict[Platform, str]:
    return {
        Platform.YOUTUBE: "Don't forget to like this video and subscribe for more content!",
        Platform.TIKTOK: "Follow for more tips like this!",
        Platform.INSTAGRAM: "Save this post and share it with someone who needs to see this!",
    }


class ScoringLexicon(BaseModel):
    """All scoring configuration handed to the scorers."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    script: ScriptLexicon = Field(default_factory=ScriptLexicon)
    hooks: HookLexicon = Field(default_factory=HookLexicon)
    brand: BrandLexicon = Field(default_factory=BrandLexicon)
    platform_bands: Dict[Platform, PlatformBand] = Field(default_factory=_default_bands)
    platform_ctas: Dict[Platform, str] = Field(default_factory=_default_ctas)

    @model_validator(mode="after")
    def validate_platforms(self) -> ScoringLexicon:
        missing = [platform.value for platform in Platform if platform not in self.platform_bands]
        if missing:
            raise ValueError(f"platform_bands is missing: {', '.join(missing)}")
        return self

    def band_for(self, platform: Platform) -> PlatformBand:
        return self.platform_bands[platform]

    def cta_for(self, platform: Platform) -> str:
        return self.platform_ctas.get(platform) or _default_ctas()[platform]

    def merged(self, overrides: Mapping[str, Any]) -> ScoringLexicon:
        """Return a new lexicon with ``overrides`` deep-merged over this one."""

        data = _deep_merge(self.model_dump(mode="json"), overrides)
        return ScoringLexicon.model_validate(data)

    @classmethod
    def from_file(cls, path: str | Path) -> ScoringLexicon:
        """Load JSON overrides and merge them over the defaults."""

        file_path = Path(path)
        try:
            overrides = json.loads(file_path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise ConfigurationError(
                "Scoring lexicon file not found",
                config_key="SCORING_LEXICON_FILE",
                config_file=str(file_path),
            ) from exc
        except json.JSONDecodeError as exc:
            raise ConfigurationError(
                "Scoring lexicon file is not valid JSON",
                config_key="SCORING_LEXICON_FILE",
                config_file=str(file_path),
                expected_type="json object",
            ) from exc

        if not isinstance(overrides, dict):
            raise ConfigurationError(
                "Scoring lexicon file must contain a JSON object",
                config_key="SCORING_LEXICON_FILE",
                config_file=str(file_path),
                expected_type="json object",
            )
        try:
            return DEFAULT_LEXICON.merged(overrides)
        except PydanticValidationError as exc:
            raise ConfigurationError(
                "Scoring lexicon file contains invalid values",
                config_key="SCORING_LEXICON_FILE",
                config_file=str(file_path),
                cause=exc,
            ) from exc


def _deep_merge(base: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


DEFAULT_LEXICON = ScoringLexicon()


__all__ = [
    "PlatformBand",
    "ScriptLexicon",
    "HookLexicon",
    "BrandLexicon",
    "ScoringLexicon",
    "DEFAULT_LEXICON",
]
