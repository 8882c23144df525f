"""Prompt building utilities for CreatorLens content generation."""

from __future__ import annotations

import textwrap
from dataclasses import dataclass
from typing import List, Optional

from ..core import BrandGuidelines, ContentKind, Platform, ScoreBreakdown

CONTENT_START = "<<<CONTENT>>>"
CONTENT_END = "<<<END CONTENT>>>"


@dataclass
class PromptPayload:
    """Container holding the built prompt components."""

    system_instruction: str
    user_prompt: str


class PromptBuilder:
    """Build provider prompts for rewrites, hooks and titles."""

    _SYSTEM_PROMPT = textwrap.dedent(
        """
        You are a senior editor for short-form and long-form video creators.

        ### Core Rules
        - Keep the creator's topic, facts and point of view
        - Write in plain spoken language that sounds natural when read aloud
        - Never invent statistics, quotes or claims that are not in the source
        - Return only the requested content, with no commentary or preamble
        """
    ).strip()

    _PLATFORM_NOTES = {
        Platform.YOUTUBE: "YouTube: open with a strong hook, keep a clear structure, ask viewers to like and subscribe.",
        Platform.TIKTOK: "TikTok: hook in the first three seconds, short punchy lines, one idea only.",
        Platform.INSTAGRAM: "Instagram: conversational caption voice, invite saves and shares.",
    }

    def build_rewrite_prompt(
        self,
        text: str,
        *,
        kind: ContentKind,
        platform: Platform,
        breakdown: Optional[ScoreBreakdown] = None,
        guidelines: Optional[BrandGuidelines] = None,
    ) -> PromptPayload:
        noun = "title" if kind == ContentKind.TITLE else "script"
        lines: List[str] = [
            f"Rewrite the {noun} below for {platform.value}.",
            self._PLATFORM_NOTES[platform],
        ]

        if breakdown is not None and breakdown.improvements:
            lines.append("")
            lines.append("### Weak Areas")
            for improvement in breakdown.improvements:
                lines.append(f"- {improvement.category.value}: {improvement.suggestion}")

        brand_summary = self.summarize_brand(guidelines) if guidelines is not None else []
        if brand_summary:
            lines.append("")
            lines.append("### Brand Guidelines")
            lines.extend(f"- {item}" for item in brand_summary)

        lines.append("")
        if kind == ContentKind.TITLE:
            lines.append("Return a single title line, under 100 characters, between the markers.")
        else:
            lines.append("Return the full rewritten script between the markers.")
        lines.extend([CONTENT_START, text.strip(), CONTENT_END])

        return PromptPayload(system_instruction=self._SYSTEM_PROMPT, user_prompt="\n".join(lines))

    def build_hooks_prompt(self, topic: str, *, platform: Platform, count: int) -> PromptPayload:
        prompt = textwrap.dedent(
            f"""
            Write {count} distinct opening hooks for a {platform.value} video about: {topic.strip()}

            ### Output Requirements
            - One hook per line, numbered "1." to "{count}."
            - Mix questions, surprising numbers, short stories and bold claims
            - Each hook is a single sentence under 20 words
            """
        ).strip()
        return PromptPayload(system_instruction=self._SYSTEM_PROMPT, user_prompt=prompt)

    @staticmethod
    def summarize_brand(guidelines: BrandGuidelines) -> List[str]:
        summary: List[str] = []
        voice = guidelines.voice
        if guidelines.brand_name:
            summary.append(f"Brand: {guidelines.brand_name}")
        summary.append(f"Tone: {voice.tone.value}")
        if voice.personality:
            summary.append("Personality: " + ", ".join(voice.personality))
        if voice.preferred_words:
            summary.append("Prefer: " + ", ".join(voice.preferred_words))
        if voice.avoid_words:
            summary.append("Never use: " + ", ".join(voice.avoid_words))
        if guidelines.messaging.key_messages:
            summary.append("Key messages: " + "; ".join(guidelines.messaging.key_messages))
        if guidelines.content_rules.forbidden_topics:
            summary.append("Forbidden topics: " + ", ".join(guidelines.content_rules.forbidden_topics))
        return summary


def extract_marked_content(prompt: str) -> Optional[str]:
    """Return the text between the content markers of a built prompt."""

    start = prompt.find(CONTENT_START)
    end = prompt.find(CONTENT_END, start + len(CONTENT_START)) if start != -1 else -1
    if start == -1 or end == -1:
        return None
    return prompt[start + len(CONTENT_START):end].strip()


__all__ = [
    "CONTENT_START",
    "CONTENT_END",
    "PromptPayload",
    "PromptBuilder",
    "extract_marked_content",
]
