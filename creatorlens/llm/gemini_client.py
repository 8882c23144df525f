"""Gemini provider for CreatorLens."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import google.generativeai as genai

from ..core import GeminiConfig, GenerationResult, ProviderCallFailedError, ProviderId, Task
from .base import ContentProvider

LOGGER = logging.getLogger(__name__)


@dataclass
class GeminiClientSettings:
    """Runtime configuration for the Gemini provider."""

    api_key: str
    model: str
    cost_per_token: float
    top_p: float = 0.95
    top_k: int = 32
    candidate_count: int = 1

    @classmethod
    def from_config(cls, config: GeminiConfig) -> "GeminiClientSettings":
        return cls(
            api_key=config.api_key,
            model=config.model,
            cost_per_token=config.cost_per_token,
        )


class GeminiProvider(ContentProvider):
    """Async wrapper around the Google Generative AI client."""

    provider_id = ProviderId.GEMINI

    def __init__(
        self,
        settings: GeminiClientSettings,
        *,
        model_factory: Optional[Callable[..., Any]] = None,
    ) -> None:
        super().__init__(cost_per_token=settings.cost_per_token, model=settings.model)
        self._settings = settings
        genai.configure(api_key=settings.api_key)
        self._model_factory = model_factory or genai.GenerativeModel

    @classmethod
    def from_config(cls, config: GeminiConfig) -> "GeminiProvider":
        return cls(GeminiClientSettings.from_config(config))

    @property
    def settings(self) -> GeminiClientSettings:
        return self._settings

    async def generate(self, task: Task) -> GenerationResult:
        options: Dict[str, Any] = {"model_name": self._settings.model}
        if task.system_instruction:
            options["system_instruction"] = task.system_instruction

        start_time = time.perf_counter()
        try:
            model = self._model_factory(**options)
            response = await model.generate_content_async(
                task.prompt,
                generation_config=self._build_generation_config(task),
            )
        except ProviderCallFailedError:
            raise
        except Exception as exc:  # pylint: disable=broad-except
            raise self._wrap_error(exc) from exc
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        return self._build_result(response, elapsed_ms)

    async def _probe(self) -> None:
        await asyncio.to_thread(genai.get_model, f"models/{self._settings.model}")

    def _build_generation_config(self, task: Task) -> Dict[str, Any]:
        return {
            "temperature": task.temperature,
            "top_p": self._settings.top_p,
            "top_k": self._settings.top_k,
            "max_output_tokens": task.max_output_tokens,
            "candidate_count": self._settings.candidate_count,
        }

    def _build_result(self, raw_response: Any, elapsed_ms: float) -> GenerationResult:
        try:
            text = raw_response.text
        except ValueError:
            # Blocked or empty candidates raise instead of returning text
            text = ""
        if not isinstance(text, str) or not text.strip():
            raise ProviderCallFailedError(
                "Gemini returned an empty response",
                provider=self.provider_id.value,
                endpoint=self._settings.model,
            )

        usage = getattr(raw_response, "usage_metadata", None)
        if usage:
            prompt_tokens = int(getattr(usage, "prompt_token_count", 0) or 0)
            completion_tokens = int(getattr(usage, "candidates_token_count", 0) or 0)
        else:
            prompt_tokens = completion_tokens = 0

        result = GenerationResult(
            text=text,
            provider=self.provider_id,
            model=self._settings.model,
            actual_cost=self._price(prompt_tokens, completion_tokens),
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=elapsed_ms,
        )
        LOGGER.info(
            "Gemini response generated",
            extra={
                "model": result.model,
                "prompt_tokens": result.prompt_tokens,
                "completion_tokens": result.completion_tokens,
                "cost_usd": result.actual_cost,
                "latency_ms": round(elapsed_ms, 1),
            },
        )
        return result

    def _wrap_error(self, error: Exception) -> ProviderCallFailedError:
        status_code = getattr(error, "code", None) or getattr(error, "status_code", None)
        response_data = getattr(error, "response", None)
        if isinstance(response_data, dict):
            payload = response_data
        else:
            payload = {"error": str(response_data)} if response_data else None
        return ProviderCallFailedError(
            str(error) or error.__class__.__name__,
            provider=self.provider_id.value,
            status_code=status_code if isinstance(status_code, int) else None,
            response_data=payload,
            endpoint=self._settings.model,
            cause=error,
        )


__all__ = ["GeminiProvider", "GeminiClientSettings"]
