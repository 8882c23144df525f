"""
CreatorLens Content Optimizer

This module provides the ContentOptimizer that ties routing, provider calls,
usage accounting and scoring together. It is the only component that calls
providers and the only one that turns provider errors into a failover.

Every request walks the same state machine:
pending -> routing -> generating -> scoring -> done | failed
"""

from __future__ import annotations

import asyncio
import difflib
import logging
from typing import Dict, List, Mapping, Optional, Tuple

from .core import (
    BrandGuidelines,
    ContentKind,
    CreatorLensError,
    ErrorDetail,
    GenerationIntent,
    GenerationResult,
    HookGenerationResult,
    NoCandidatesGeneratedError,
    NoProvidersRegisteredError,
    OptimizationResult,
    OptimizationState,
    Platform,
    ProviderCallFailedError,
    ProviderError,
    ProviderHealth,
    ProviderId,
    ProviderTimeoutError,
    Task,
    TaskType,
    ValidationError,
    classify_error_for_retry,
    get_user_friendly_message,
)
from .llm.base import ContentProvider
from .llm.prompts import PromptBuilder
from .llm.response_parser import extract_rewritten_text, extract_title, parse_hook_candidates
from .routing import CostModel, ProviderRegistry, ProviderRouter, UsageLedger
from .scoring import BrandAlignmentScorer, HookGenerator, ScriptScorer

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_TIMEOUT_SECONDS = 30.0

_TRANSITIONS: Dict[OptimizationState, set] = {
    OptimizationState.PENDING: {OptimizationState.ROUTING, OptimizationState.FAILED},
    OptimizationState.ROUTING: {OptimizationState.GENERATING, OptimizationState.FAILED},
    OptimizationState.GENERATING: {OptimizationState.SCORING, OptimizationState.FAILED},
    OptimizationState.SCORING: {OptimizationState.DONE, OptimizationState.FAILED},
    OptimizationState.DONE: set(),
    OptimizationState.FAILED: set(),
}


class _RequestState:
    """Tracks one request through the optimization state machine."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        self.state = OptimizationState.PENDING

    def advance(self, new_state: OptimizationState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid transition {self.state.value} -> {new_state.value}")
        logger.debug(
            "Optimization state changed",
            extra={"operation": self.operation, "from_state": self.state.value, "to_state": new_state.value},
        )
        self.state = new_state


def _error_detail(error: CreatorLensError) -> ErrorDetail:
    return ErrorDetail(
        kind=error.error_code,
        provider=getattr(error, "provider", None),
        message=error.message,
        status_code=getattr(error, "status_code", None),
        user_message=get_user_friendly_message(error),
    )


def _topic_from(text: str, limit: int = 8) -> str:
    words = text.split()
    topic = " ".join(words[:limit])
    return topic.rstrip(".!?,;:") or text.strip()


def _as_platform(platform: Platform | str) -> Platform:
    return platform if isinstance(platform, Platform) else Platform(str(platform).lower())


class ContentOptimizer:
    """
    Orchestrates routed generation with failover, usage accounting and scoring.

    Provider errors never escape ``optimize`` or ``generate_hooks``; they are
    reported as a ``failed`` result carrying an ``ErrorDetail``. ``run_task``
    raises the final error instead.
    """

    def __init__(
        self,
        *,
        registry: ProviderRegistry,
        router: ProviderRouter,
        ledger: UsageLedger,
        cost_model: CostModel,
        providers: Mapping[ProviderId, ContentProvider],
        scorer: Optional[ScriptScorer] = None,
        hook_generator: Optional[HookGenerator] = None,
        brand_scorer: Optional[BrandAlignmentScorer] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        default_platform: Platform = Platform.YOUTUBE,
        default_timeout: float = DEFAULT_PROVIDER_TIMEOUT_SECONDS,
    ) -> None:
        self._registry = registry
        self._router = router
        self._ledger = ledger
        self._cost_model = cost_model
        self._providers: Dict[ProviderId, ContentProvider] = dict(providers)
        self._scorer = scorer or ScriptScorer()
        self._hooks = hook_generator or HookGenerator(self._scorer)
        self._brand = brand_scorer or BrandAlignmentScorer(self._scorer.lexicon)
        self._prompts = prompt_builder or PromptBuilder()
        self._default_platform = default_platform
        self._default_timeout = default_timeout

    @property
    def ledger(self) -> UsageLedger:
        return self._ledger

    @property
    def router(self) -> ProviderRouter:
        return self._router

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    @property
    def scorer(self) -> ScriptScorer:
        return self._scorer

    @property
    def brand_scorer(self) -> BrandAlignmentScorer:
        return self._brand

    @property
    def hook_generator(self) -> HookGenerator:
        return self._hooks

    @property
    def default_platform(self) -> Platform:
        return self._default_platform

    async def optimize(
        self,
        text: str,
        *,
        platform: Optional[Platform | str] = None,
        kind: ContentKind | str = ContentKind.SCRIPT,
        task_type: Optional[TaskType] = None,
        guidelines: Optional[BrandGuidelines] = None,
        override: Optional[ProviderId] = None,
        cost_ceiling: Optional[float] = None,
        max_output_tokens: int = 1000,
        temperature: float = 0.7,
        timeout: Optional[float] = None,
    ) -> OptimizationResult:
        """
        Rewrite a script or title through a routed provider and score the result.

        Args:
            text: Original script or title
            platform: Target platform; defaults to the configured platform
            kind: ``script`` or ``title``
            task_type: Routing hint; scripts default to video_script, titles to creative
            guidelines: Optional brand guidelines for the prompt and the rewrite pass
            override: Explicit provider choice
            cost_ceiling: Maximum USD the caller will spend
            max_output_tokens: Output token cap passed to the provider
            temperature: Sampling temperature passed to the provider
            timeout: Per-call provider timeout in seconds

        Returns:
            OptimizationResult in state ``done`` or ``failed``
        """
        if not text or not text.strip():
            raise ValidationError("Content to optimize cannot be empty", field="text")

        platform_id = _as_platform(platform or self._default_platform)
        content_kind = kind if isinstance(kind, ContentKind) else ContentKind(str(kind).lower())
        request = _RequestState("optimize")

        original_score = self._scorer.analyze(text, platform_id)
        payload = self._prompts.build_rewrite_prompt(
            text,
            kind=content_kind,
            platform=platform_id,
            breakdown=original_score,
            guidelines=guidelines,
        )
        task = Task(
            prompt=payload.user_prompt,
            system_instruction=payload.system_instruction,
            task_type=task_type or (TaskType.VIDEO_SCRIPT if content_kind == ContentKind.SCRIPT else TaskType.CREATIVE),
            override=override,
            cost_ceiling=cost_ceiling,
            max_output_tokens=max_output_tokens,
            temperature=temperature,
            intent=GenerationIntent.REWRITE if content_kind == ContentKind.SCRIPT else GenerationIntent.TITLE,
            topic=_topic_from(text),
        )

        attempted: List[ProviderId] = []
        try:
            generation = await self._route_and_generate(task, timeout, attempted, request)
        except (NoProvidersRegisteredError, ProviderError) as exc:
            request.advance(OptimizationState.FAILED)
            logger.error(
                "Optimization failed",
                extra={"attempted": [p.value for p in attempted], "error": exc.error_code},
            )
            return OptimizationResult(
                state=request.state,
                kind=content_kind,
                attempted_providers=attempted,
                original_text=text,
                original_score=original_score,
                error=_error_detail(exc),
            )

        request.advance(OptimizationState.SCORING)
        optimized, changes = self._post_process(generation, content_kind, platform_id, guidelines)
        if not optimized.strip():
            optimized = text
            changes = []

        score = self._scorer.analyze(optimized, platform_id)
        brand_check = self._brand.check_alignment(optimized, guidelines) if guidelines is not None else None
        diff = list(
            difflib.unified_diff(
                text.splitlines(),
                optimized.splitlines(),
                fromfile="original",
                tofile="optimized",
                lineterm="",
            )
        )
        request.advance(OptimizationState.DONE)

        result = OptimizationResult(
            state=request.state,
            kind=content_kind,
            provider=generation.provider,
            attempted_providers=attempted,
            original_text=text,
            optimized_text=optimized,
            original_score=original_score,
            score=score,
            brand_check=brand_check,
            changes_applied=changes,
            diff=diff,
        )
        logger.info(
            "Optimization completed",
            extra={
                "provider": generation.provider.value,
                "kind": content_kind.value,
                "original_overall": original_score.overall,
                "optimized_overall": score.overall,
            },
        )
        return result

    async def generate_hooks(
        self,
        topic: str,
        *,
        platform: Optional[Platform | str] = None,
        count: int = 5,
        task_type: TaskType = TaskType.CREATIVE,
        override: Optional[ProviderId] = None,
        cost_ceiling: Optional[float] = None,
        max_output_tokens: int = 400,
        temperature: float = 0.9,
        timeout: Optional[float] = None,
    ) -> HookGenerationResult:
        """Generate hook candidates through a provider and rank them locally."""

        if not topic or not topic.strip():
            raise ValidationError("Hook topic cannot be empty", field="topic")
        if count < 1:
            raise ValidationError("Hook count must be at least 1", field="count", value=count)

        platform_id = _as_platform(platform or self._default_platform)
        request = _RequestState("generate_hooks")
        payload = self._prompts.build_hooks_prompt(topic, platform=platform_id, count=count)
        task = Task(
            prompt=payload.user_prompt,
            system_instruction=payload.system_instruction,
            task_type=task_type,
            override=override,
            cost_ceiling=cost_ceiling,
            max_output_tokens=max_output_tokens,
            temperature=temperature,
            intent=GenerationIntent.HOOKS,
            topic=topic.strip(),
        )

        attempted: List[ProviderId] = []
        try:
            generation = await self._route_and_generate(task, timeout, attempted, request)
            request.advance(OptimizationState.SCORING)
            candidates = parse_hook_candidates(generation.text)
            try:
                hooks = self._hooks.generate_hooks(topic.strip(), platform_id, count, candidates)
            except NoCandidatesGeneratedError as exc:
                exc.provider = generation.provider.value
                exc.context["provider"] = generation.provider.value
                exc.context["raw_preview"] = generation.text[:200]
                raise
        except (NoProvidersRegisteredError, ProviderError, NoCandidatesGeneratedError) as exc:
            request.advance(OptimizationState.FAILED)
            logger.error(
                "Hook generation failed",
                extra={"topic": topic, "attempted": [p.value for p in attempted], "error": exc.error_code},
            )
            return HookGenerationResult(
                state=request.state,
                topic=topic.strip(),
                provider=attempted[-1] if isinstance(exc, NoCandidatesGeneratedError) else None,
                attempted_providers=attempted,
                error=_error_detail(exc),
            )

        request.advance(OptimizationState.DONE)
        return HookGenerationResult(
            state=request.state,
            topic=topic.strip(),
            provider=generation.provider,
            attempted_providers=attempted,
            hooks=hooks,
        )

    async def run_task(self, task: Task, *, timeout: Optional[float] = None) -> GenerationResult:
        """
        Route and execute a free-form task with one failover hop.

        Raises:
            NoProvidersRegisteredError: the registry is empty
            ProviderCallFailedError / ProviderTimeoutError: both attempts failed
        """
        return await self._route_and_generate(task, timeout, [], _RequestState("run_task"))

    async def refresh_health(self) -> List[ProviderHealth]:
        """Probe every registered provider and store the results in the registry."""

        probes = []
        provider_ids = []
        for provider_id in self._registry.ids():
            client = self._providers.get(provider_id)
            if client is None:
                continue
            provider_ids.append(provider_id)
            probes.append(client.check_health())

        results = await asyncio.gather(*probes)
        for provider_id, health in zip(provider_ids, results):
            self._registry.update_health(provider_id, health.status, health.latency_ms)
        return list(results)

    async def aclose(self) -> None:
        for client in self._providers.values():
            await client.aclose()

    async def _route_and_generate(
        self,
        task: Task,
        timeout: Optional[float],
        attempted: List[ProviderId],
        request: _RequestState,
    ) -> GenerationResult:
        request.advance(OptimizationState.ROUTING)
        primary = self._router.select_provider(task)
        request.advance(OptimizationState.GENERATING)

        attempted.append(primary)
        try:
            return await self._call_provider(primary, task, timeout)
        except (ProviderCallFailedError, ProviderTimeoutError) as exc:
            fallback = self._router.select_failover(primary)
            if fallback is None or fallback == primary or not classify_error_for_retry(exc):
                raise
            logger.warning(
                "Primary provider failed; failing over",
                extra={"provider": primary.value, "fallback": fallback.value, "error": exc.error_code},
            )
            attempted.append(fallback)
            return await self._call_provider(fallback, task, timeout)

    async def _call_provider(
        self,
        provider_id: ProviderId,
        task: Task,
        timeout: Optional[float],
    ) -> GenerationResult:
        client = self._providers.get(provider_id)
        if client is None:
            raise ProviderCallFailedError(
                f"No client configured for provider {provider_id.value}",
                provider=provider_id.value,
            )

        limit = timeout if timeout is not None else self._default_timeout
        try:
            result = await asyncio.wait_for(client.generate(task), timeout=limit)
        except asyncio.TimeoutError as exc:
            raise ProviderTimeoutError(
                f"Provider {provider_id.value} did not respond within {limit}s",
                provider=provider_id.value,
                timeout_seconds=limit,
                cause=exc,
            ) from exc

        if result.actual_cost is not None:
            cost = result.actual_cost
        else:
            cost = self._cost_model.estimate_cost(provider_id, task.prompt, task.max_output_tokens)
        self._ledger.record_usage(provider_id, cost)
        return result

    def _post_process(
        self,
        generation: GenerationResult,
        kind: ContentKind,
        platform: Platform,
        guidelines: Optional[BrandGuidelines],
    ) -> Tuple[str, List[str]]:
        changes = [f"Rewritten by {generation.provider.value}"]
        if kind == ContentKind.TITLE:
            optimized = extract_title(generation.text) or generation.text.strip()
        else:
            optimized = extract_rewritten_text(generation.text)

        if kind == ContentKind.SCRIPT and self._scorer.needs_call_to_action(optimized):
            optimized = f"{optimized.rstrip()}\n\n{self._scorer.lexicon.cta_for(platform)}"
            changes.append("Added platform call-to-action")

        if guidelines is not None:
            rewrite = self._brand.rewrite(
                optimized,
                guidelines,
                append_key_message=kind == ContentKind.SCRIPT,
            )
            optimized = rewrite.text
            changes.extend(rewrite.changes)

        return optimized, changes


__all__ = ["ContentOptimizer", "DEFAULT_PROVIDER_TIMEOUT_SECONDS"]
