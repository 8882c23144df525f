"""Deterministic template provider for offline runs and tests."""

from __future__ import annotations

import asyncio
import logging
import textwrap
from typing import Optional

from ..core import GenerationIntent, GenerationResult, MockConfig, ProviderCallFailedError, ProviderId, Task, TaskType
from ..routing.cost_model import estimate_tokens
from .prompts import extract_marked_content
from .base import ContentProvider

LOGGER = logging.getLogger(__name__)


def _video_script(topic: str) -> str:
    return textwrap.dedent(
        f"""
        Wait... did you know most people get {topic} completely wrong?

        Here's what nobody tells you about {topic}.
        First, start small and stay consistent.
        Second, track what works and drop what doesn't.
        Third, share what you learn with your audience.

        Try this today and see the difference for yourself.
        Follow for more tips like this!
        """
    ).strip()


def _social_post(topic: str) -> str:
    return textwrap.dedent(
        f"""
        Here's something that changed my perspective on {topic}:

        Most people think it takes years, but the reality is a few small habits.

        Here's what I've learned:
        - Start before you feel ready
        - Keep it simple
        - Show up every day

        What's been your experience with {topic}? Drop a comment below!
        """
    ).strip()


def _article(topic: str) -> str:
    return textwrap.dedent(
        f"""
        # The Ultimate Guide to {topic}

        ## Introduction
        Understanding {topic} has become more important than ever. This guide walks you through the essentials.

        ## Step-by-Step
        1. Learn the core principles of {topic}.
        2. Apply them to one small project.
        3. Review your results and adjust.

        ## Conclusion
        Mastering {topic} is a journey, not a destination. Small, consistent actions lead to remarkable results.
        """
    ).strip()


def _ad_copy(topic: str) -> str:
    return textwrap.dedent(
        f"""
        ATTENTION: {topic} fans!

        Are you tired of wasting time on things that don't work?
        What if I told you there's a simple fix that takes just 5 minutes?

        Our proven system has helped 10,000+ people get results.
        Get 50% off today only. Click now to claim your discount!
        """
    ).strip()


def _generic(topic: str) -> str:
    return textwrap.dedent(
        f"""
        Based on your request about "{topic}", here's a short response.

        Key considerations include the core principles, practical steps you can take
        immediately, and the common pitfalls to avoid along the way.

        Would you like me to expand on any part of this?
        """
    ).strip()


def _hooks(topic: str) -> str:
    return "\n".join(
        [
            f"1. What if everything you know about {topic} is wrong?",
            f"2. 9 out of 10 people get {topic} wrong. Here's why.",
            f"3. I tried {topic} for 30 days and this happened.",
            f"4. Nobody talks about the real truth behind {topic}.",
            f"5. This is the simplest way to get started with {topic}.",
            f"6. Why does {topic} feel so hard when it isn't?",
            f"7. The secret to {topic} takes 5 minutes a day.",
            f"8. Stop doing {topic} the hard way.",
        ]
    )


_TEMPLATES = {
    TaskType.VIDEO_SCRIPT: _video_script,
    TaskType.SOCIAL: _social_post,
    TaskType.ARTICLE: _article,
    TaskType.AD_COPY: _ad_copy,
}


class MockProvider(ContentProvider):
    """Template-based provider with optional forced failure and latency.

    Output depends only on the task, so repeated runs are identical.
    """

    def __init__(
        self,
        *,
        provider_id: ProviderId = ProviderId.MOCK,
        cost_per_token: float = 0.0,
        latency_seconds: float = 0.0,
        fail: bool = False,
        health_retry_wait: float = 0.0,
    ) -> None:
        super().__init__(cost_per_token=cost_per_token, model="template", health_retry_wait=health_retry_wait)
        self.provider_id = provider_id
        self.latency_seconds = latency_seconds
        self.fail = fail
        self.calls = 0

    @classmethod
    def from_config(cls, config: MockConfig) -> "MockProvider":
        return cls(cost_per_token=config.cost_per_token, latency_seconds=config.latency_seconds)

    async def generate(self, task: Task) -> GenerationResult:
        self.calls += 1
        if self.latency_seconds:
            await asyncio.sleep(self.latency_seconds)
        if self.fail:
            raise ProviderCallFailedError(
                "Mock provider configured to fail",
                provider=self.provider_id.value,
                status_code=503,
                endpoint="template",
            )

        text = self.render(task)
        prompt_tokens = estimate_tokens(task.prompt)
        completion_tokens = estimate_tokens(text)
        LOGGER.debug(
            "Mock response generated",
            extra={"provider": self.provider_id.value, "intent": task.intent.value, "task_type": task.task_type.value},
        )
        return GenerationResult(
            text=text,
            provider=self.provider_id,
            model=self.model,
            actual_cost=self._price(prompt_tokens, completion_tokens),
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=self.latency_seconds * 1000,
        )

    def render(self, task: Task) -> str:
        topic = task.topic or task.prompt[:60].strip()

        if task.intent == GenerationIntent.HOOKS:
            return _hooks(topic)
        if task.intent == GenerationIntent.REWRITE:
            original = extract_marked_content(task.prompt) or task.prompt
            return f"What if everything you knew about {topic} was wrong? {original}"
        if task.intent == GenerationIntent.TITLE:
            original = (extract_marked_content(task.prompt) or topic).rstrip(".!? ")
            return f"{original}: The Secret Nobody Tells You"

        template = _TEMPLATES.get(task.task_type, _generic)
        return template(topic)

    async def _probe(self) -> None:
        if self.fail:
            raise ProviderCallFailedError("Mock provider configured to fail", provider=self.provider_id.value)


__all__ = ["MockProvider"]
