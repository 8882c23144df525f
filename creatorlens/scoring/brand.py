"""Brand guideline alignment scoring."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Union

from ..core import (
    BrandCheckResult,
    BrandConsistencyResult,
    BrandGuidelines,
    BrandIssue,
    BrandRewrite,
    BrandSample,
    CategoryConsistency,
    Impact,
    IssueCategory,
    ValidationError,
    clamp_score,
    mean_score,
)
from .lexicon import DEFAULT_LEXICON, ScoringLexicon
from .text_utils import contains_phrase, distinct_present, replace_phrase, word_fraction, word_set

LOGGER = logging.getLogger(__name__)


class BrandAlignmentScorer:
    """Check content against caller-supplied brand guidelines.

    Produces voice, messaging and guideline scores, a list of concrete
    issues and, on request, a mechanical rewrite. The rewrite is a word
    substitution pass and makes no attempt to preserve meaning.
    """

    def __init__(self, lexicon: Optional[ScoringLexicon] = None) -> None:
        self._lexicon = lexicon or DEFAULT_LEXICON

    def check_alignment(
        self,
        content: str,
        guidelines: BrandGuidelines,
        *,
        title: Optional[str] = None,
        include_rewrite: bool = False,
    ) -> BrandCheckResult:
        full_text = f"{title}\n{content}" if title else content

        voice = self._voice_score(full_text, guidelines)
        messaging = self._messaging_score(full_text, guidelines)
        rules = self._guidelines_score(full_text, guidelines)

        result = BrandCheckResult(
            voice=voice,
            messaging=messaging,
            guidelines=rules,
            overall=mean_score([voice, messaging, rules]),
            issues=self._issues(full_text, guidelines),
            rewrite=self.rewrite(content, guidelines) if include_rewrite else None,
        )
        LOGGER.debug(
            "Checked brand alignment",
            extra={
                "brand": guidelines.brand_name,
                "overall": result.overall,
                "issues": len(result.issues),
            },
        )
        return result

    def check_consistency(
        self,
        samples: Sequence[Union[BrandSample, str]],
        guidelines: BrandGuidelines,
    ) -> BrandConsistencyResult:
        """Score a batch of content against one guideline set.

        Category scores are the mean of the per-sample scores. Issues and
        suggestions are collected per category, keeping the first occurrence
        of each description.
        """

        if not samples:
            raise ValidationError("At least one content sample is required", field="samples")

        checks = []
        for sample in samples:
            if isinstance(sample, str):
                sample = BrandSample(content=sample)
            checks.append(self.check_alignment(sample.content, guidelines, title=sample.title))

        categories: Dict[IssueCategory, CategoryConsistency] = {}
        for category in (IssueCategory.VOICE, IssueCategory.MESSAGING, IssueCategory.GUIDELINES):
            scores = [getattr(check, category.value) for check in checks]
            issues = [issue for check in checks for issue in check.issues if issue.category == category]
            categories[category] = CategoryConsistency(
                score=round(sum(scores) / len(scores), 2),
                issues=list(dict.fromkeys(issue.description for issue in issues)),
                suggestions=list(dict.fromkeys(issue.suggested_fix for issue in issues)),
            )

        voice = categories[IssueCategory.VOICE]
        messaging = categories[IssueCategory.MESSAGING]
        rules = categories[IssueCategory.GUIDELINES]
        result = BrandConsistencyResult(
            sample_count=len(checks),
            voice=voice,
            messaging=messaging,
            guidelines=rules,
            overall=mean_score([voice.score, messaging.score, rules.score]),
        )
        LOGGER.debug(
            "Checked brand consistency",
            extra={"brand": guidelines.brand_name, "samples": len(checks), "overall": result.overall},
        )
        return result

    def rewrite(
        self,
        content: str,
        guidelines: BrandGuidelines,
        *,
        append_key_message: bool = True,
    ) -> BrandRewrite:
        """Swap avoided words for the first preferred word and add a key message."""

        text = content
        changes: List[str] = []
        preferred = guidelines.voice.preferred_words

        if preferred:
            replacement = preferred[0]
            for word in distinct_present(text, guidelines.voice.avoid_words):
                text, replaced = replace_phrase(text, word, replacement)
                if replaced:
                    changes.append(f'Replaced "{word}" with "{replacement}"')

        key_messages = guidelines.messaging.key_messages
        missing = not any(contains_phrase(text, message) for message in key_messages)
        if append_key_message and key_messages and missing:
            text = f"{text.rstrip()}\n\n{key_messages[0]}"
            changes.append("Added key brand message")

        return BrandRewrite(text=text, changes=changes)

    def _voice_score(self, text: str, guidelines: BrandGuidelines) -> float:
        rules = self._lexicon.brand
        voice = guidelines.voice
        tone_words = rules.tone_words.get(voice.tone, [])

        score = rules.voice_base
        score += rules.preferred_word_points * len(distinct_present(text, voice.preferred_words))
        score -= rules.avoided_word_penalty * len(distinct_present(text, voice.avoid_words))
        score += rules.tone_word_points * len(distinct_present(text, tone_words))
        return float(clamp_score(score))

    def _messaging_score(self, text: str, guidelines: BrandGuidelines) -> float:
        rules = self._lexicon.brand
        messaging = guidelines.messaging
        words = word_set(text)

        score = float(rules.messaging_base)
        for message in messaging.key_messages:
            score += rules.key_message_points * word_fraction(message, words)
        if messaging.value_proposition:
            score += rules.value_proposition_points * word_fraction(messaging.value_proposition, words)
        return round(clamp_score(score), 2)

    def _guidelines_score(self, text: str, guidelines: BrandGuidelines) -> float:
        rules = self._lexicon.brand
        content_rules = guidelines.content_rules

        score = rules.guidelines_base
        score += rules.required_element_points * len(distinct_present(text, content_rules.required_elements))
        score -= rules.forbidden_topic_penalty * len(distinct_present(text, content_rules.forbidden_topics))
        score += rules.pillar_points * len(distinct_present(text, content_rules.content_pillars))
        return float(clamp_score(score))

    def _issues(self, text: str, guidelines: BrandGuidelines) -> List[BrandIssue]:
        issues: List[BrandIssue] = []
        preferred = guidelines.voice.preferred_words

        for word in distinct_present(text, guidelines.voice.avoid_words):
            fix = f'Replace "{word}" with "{preferred[0]}"' if preferred else f'Remove "{word}"'
            issues.append(
                BrandIssue(
                    category=IssueCategory.VOICE,
                    severity=Impact.MEDIUM,
                    description=f'Uses avoided word "{word}"',
                    suggested_fix=fix,
                )
            )

        key_messages = guidelines.messaging.key_messages
        if key_messages and not any(contains_phrase(text, message) for message in key_messages):
            issues.append(
                BrandIssue(
                    category=IssueCategory.MESSAGING,
                    severity=Impact.MEDIUM,
                    description="None of the key brand messages appear in the content",
                    suggested_fix=f'Work in a key message such as "{key_messages[0]}"',
                )
            )

        for topic in distinct_present(text, guidelines.content_rules.forbidden_topics):
            issues.append(
                BrandIssue(
                    category=IssueCategory.GUIDELINES,
                    severity=Impact.HIGH,
                    description=f'Mentions forbidden topic "{topic}"',
                    suggested_fix=f'Remove references to "{topic}"',
                )
            )

        return issues


__all__ = ["BrandAlignmentScorer"]
