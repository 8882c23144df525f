"""Heuristic quality scoring for scripts and titles."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..core import (
    Impact,
    ImprovementCategory,
    LengthFit,
    Platform,
    ScoreBreakdown,
    ScriptImprovement,
    clamp_score,
    mean_score,
    round_half_up,
)
from .lexicon import DEFAULT_LEXICON, ScoringLexicon
from .text_utils import count_occurrences, count_phrase, distinct_present, split_sentences, split_words

LOGGER = logging.getLogger(__name__)

_IMPROVEMENT_SUGGESTIONS = {
    ImprovementCategory.HOOK: "Strengthen your opening hook with a question, statistic, or bold statement",
    ImprovementCategory.ENGAGEMENT: "Add more questions and direct audience address to increase engagement",
    ImprovementCategory.CLARITY: "Shorten long sentences and swap long words for simpler ones",
    ImprovementCategory.CTA: "Include a clear call-to-action to guide viewer behavior",
}


def _as_platform(platform: Platform | str) -> Platform:
    return platform if isinstance(platform, Platform) else Platform(str(platform).lower())


class ScriptScorer:
    """Score scripts on five 0-100 sub-scores plus a platform length fit.

    Scoring is pure: the same text, platform and lexicon always produce an
    equal breakdown.
    """

    def __init__(self, lexicon: Optional[ScoringLexicon] = None) -> None:
        self._lexicon = lexicon or DEFAULT_LEXICON

    @property
    def lexicon(self) -> ScoringLexicon:
        return self._lexicon

    def analyze(self, text: str, platform: Platform | str = Platform.YOUTUBE) -> ScoreBreakdown:
        platform_id = _as_platform(platform)
        hook = self.hook_strength(text)
        engagement = self.engagement_potential(text)
        clarity = self.clarity(text)
        emotion = self.emotional_impact(text)
        cta = self.call_to_action_strength(text)
        length_fit = self.length_fit(text, platform_id)

        breakdown = ScoreBreakdown(
            platform=platform_id,
            hook_strength=hook,
            engagement_potential=engagement,
            clarity=clarity,
            emotional_impact=emotion,
            call_to_action_strength=cta,
            overall=mean_score([hook, engagement, clarity, emotion, cta]),
            length_fit=length_fit,
            improvements=self._improvements(hook, engagement, clarity, cta, length_fit),
        )
        LOGGER.debug(
            "Scored script",
            extra={"platform": platform_id.value, "overall": breakdown.overall, "words": length_fit.current_length},
        )
        return breakdown

    def hook_strength(self, text: str) -> int:
        """Score the first sentence as an opening hook."""

        rules = self._lexicon.script
        sentences = split_sentences(text)
        first = sentences[0] if sentences else ""

        score = rules.hook_base
        if "?" in first:
            score += rules.hook_question_points
        if any(char.isdigit() for char in first):
            score += rules.hook_digit_points
        score += rules.hook_power_word_points * count_occurrences(first, rules.power_words)
        score += rules.hook_urgency_word_points * count_occurrences(first, rules.urgency_words)
        return round_half_up(clamp_score(score))

    def engagement_potential(self, text: str) -> int:
        rules = self._lexicon.script
        score = rules.engagement_base
        score += min(text.count("?") * rules.engagement_question_points, rules.engagement_question_cap)
        score += rules.engagement_emotional_points * count_occurrences(text, rules.emotional_words)
        for pronoun in rules.pronouns:
            score += min(count_phrase(text, pronoun), rules.engagement_pronoun_cap)
        return round_half_up(clamp_score(score))

    def clarity(self, text: str) -> int:
        rules = self._lexicon.script
        words = split_words(text)
        sentences = split_sentences(text)
        if not words or not sentences:
            return round_half_up(clamp_score(rules.clarity_base))

        score = rules.clarity_base
        average_sentence = len(words) / len(sentences)
        if average_sentence > rules.clarity_long_sentence_words:
            score -= rules.clarity_sentence_penalty
        if average_sentence > rules.clarity_very_long_sentence_words:
            score -= rules.clarity_sentence_penalty

        long_words = sum(1 for word in words if len(word) > rules.clarity_long_word_chars)
        if long_words / len(words) > rules.clarity_long_word_ratio:
            score -= rules.clarity_long_word_penalty
        return round_half_up(clamp_score(score))

    def emotional_impact(self, text: str) -> int:
        rules = self._lexicon.script
        score = rules.emotion_base
        score += rules.emotion_word_points * len(distinct_present(text, rules.positive_words))
        score += rules.emotion_word_points * len(distinct_present(text, rules.negative_words))
        score += rules.story_word_points * len(distinct_present(text, rules.story_words))
        return round_half_up(clamp_score(score))

    def call_to_action_strength(self, text: str) -> int:
        rules = self._lexicon.script
        score = rules.cta_base
        score += rules.cta_verb_points * len(distinct_present(text, rules.cta_verbs))
        score += rules.action_verb_points * len(distinct_present(text, rules.action_verbs))
        return round_half_up(clamp_score(score))

    def length_fit(self, text: str, platform: Platform | str) -> LengthFit:
        band = self._lexicon.band_for(_as_platform(platform))
        count = len(split_words(text))
        return LengthFit(
            current_length=count,
            recommended_length=band.optimal_words,
            min_length=band.min_words,
            max_length=band.max_words,
            within_band=band.min_words <= count <= band.max_words,
        )

    def needs_call_to_action(self, text: str) -> bool:
        return self.call_to_action_strength(text) < self._lexicon.script.cta_improvement_below

    def _improvements(
        self,
        hook: int,
        engagement: int,
        clarity: int,
        cta: int,
        length_fit: LengthFit,
    ) -> List[ScriptImprovement]:
        rules = self._lexicon.script
        improvements: List[ScriptImprovement] = []

        if hook < rules.hook_improvement_below:
            improvements.append(self._improvement(ImprovementCategory.HOOK, Impact.HIGH))
        if engagement < rules.engagement_improvement_below:
            improvements.append(self._improvement(ImprovementCategory.ENGAGEMENT, Impact.HIGH))
        if clarity < rules.clarity_improvement_below:
            improvements.append(self._improvement(ImprovementCategory.CLARITY, Impact.MEDIUM))
        if cta < rules.cta_improvement_below:
            improvements.append(self._improvement(ImprovementCategory.CTA, Impact.MEDIUM))
        if not length_fit.within_band:
            direction = "Shorten" if length_fit.current_length > length_fit.max_length else "Expand"
            improvements.append(
                ScriptImprovement(
                    category=ImprovementCategory.LENGTH,
                    suggestion=(
                        f"{direction} to about {length_fit.recommended_length} words "
                        f"({length_fit.min_length}-{length_fit.max_length} recommended)"
                    ),
                    impact=Impact.LOW,
                )
            )
        return improvements

    @staticmethod
    def _improvement(category: ImprovementCategory, impact: Impact) -> ScriptImprovement:
        return ScriptImprovement(category=category, suggestion=_IMPROVEMENT_SUGGESTIONS[category], impact=impact)


__all__ = ["ScriptScorer"]
