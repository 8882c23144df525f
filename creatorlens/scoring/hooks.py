"""Hook and title candidate classification and ranking."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..core import Hook, HookType, NoCandidatesGeneratedError, Platform, ValidationError
from .lexicon import ScoringLexicon
from .script_scorer import ScriptScorer
from .text_utils import tokenize

LOGGER = logging.getLogger(__name__)


class HookGenerator:
    """Rank provider-generated hook candidates with the script hook score."""

    def __init__(self, scorer: Optional[ScriptScorer] = None, lexicon: Optional[ScoringLexicon] = None) -> None:
        self._scorer = scorer or ScriptScorer(lexicon)
        self._lexicon = lexicon or self._scorer.lexicon

    def classify(self, text: str) -> HookType:
        """Tag a candidate; the first matching rule wins."""

        if "?" in text:
            return HookType.QUESTION
        if "%" in text or any(char.isdigit() for char in text):
            return HookType.STATISTIC

        tokens = set(tokenize(text))
        cues = self._lexicon.hooks
        if tokens & {cue.lower() for cue in cues.story_cues}:
            return HookType.STORY
        if tokens & {cue.lower() for cue in cues.controversy_cues}:
            return HookType.CONTROVERSY
        return HookType.STATEMENT

    def rank(self, candidates: Iterable[str], platform: Platform | str, count: int) -> List[Hook]:
        """Score, de-duplicate and order candidates, best first.

        Raises:
            ValidationError: ``count`` is below one.
            NoCandidatesGeneratedError: nothing usable survived cleaning.
        """

        if count < 1:
            raise ValidationError("Hook count must be at least 1", field="count", value=count)

        platform_id = platform if isinstance(platform, Platform) else Platform(str(platform).lower())
        unique: List[str] = []
        seen = set()
        for candidate in candidates:
            cleaned = (candidate or "").strip()
            key = cleaned.lower()
            if not cleaned or key in seen:
                continue
            seen.add(key)
            unique.append(cleaned)

        if not unique:
            raise NoCandidatesGeneratedError("No usable hook candidates")

        hooks = [
            Hook(
                text=text,
                type=self.classify(text),
                viral_score=self._scorer.hook_strength(text),
                platform=platform_id,
            )
            for text in unique
        ]
        # sorted() is stable, so equal scores keep their input order
        hooks = sorted(hooks, key=lambda hook: hook.viral_score, reverse=True)
        return hooks[:count]

    def generate_hooks(
        self,
        topic: str,
        platform: Platform | str,
        count: int,
        candidates: Iterable[str],
    ) -> List[Hook]:
        try:
            hooks = self.rank(candidates, platform, count)
        except NoCandidatesGeneratedError as exc:
            exc.topic = topic
            exc.context["topic"] = topic
            raise
        LOGGER.info(
            "Ranked hook candidates",
            extra={"topic": topic, "returned": len(hooks), "top_score": hooks[0].viral_score},
        )
        return hooks


__all__ = ["HookGenerator"]
