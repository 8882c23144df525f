"""Async chat-completions provider for CreatorLens."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from ..core import (
    GenerationResult,
    OpenAIConfig,
    ProviderCallFailedError,
    ProviderId,
    ProviderTimeoutError,
    Task,
)
from .base import ContentProvider

LOGGER = logging.getLogger(__name__)


@dataclass
class OpenAIClientSettings:
    """Runtime options for the chat-completions provider."""

    api_key: str
    model: str = "gpt-4o"
    base_url: str = "https://api.openai.com/v1"
    cost_per_token: float = 0.00003
    request_timeout: float = 60.0

    @classmethod
    def from_config(cls, config: OpenAIConfig) -> "OpenAIClientSettings":
        return cls(
            api_key=config.api_key,
            model=config.model,
            base_url=config.base_url,
            cost_per_token=config.cost_per_token,
        )


class OpenAIChatProvider(ContentProvider):
    """Async wrapper around the chat-completions REST API."""

    provider_id = ProviderId.OPENAI

    def __init__(
        self,
        settings: OpenAIClientSettings,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(cost_per_token=settings.cost_per_token, model=settings.model)
        self._settings = settings
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_config(
        cls,
        config: OpenAIConfig,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ) -> "OpenAIChatProvider":
        return cls(OpenAIClientSettings.from_config(config), client=client)

    @property
    def settings(self) -> OpenAIClientSettings:
        return self._settings

    async def __aenter__(self) -> "OpenAIChatProvider":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        await self.aclose()

    async def aclose(self) -> None:
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def generate(self, task: Task) -> GenerationResult:
        messages: List[Dict[str, str]] = []
        if task.system_instruction:
            messages.append({"role": "system", "content": task.system_instruction})
        messages.append({"role": "user", "content": task.prompt})
        payload = {
            "model": self._settings.model,
            "messages": messages,
            "max_tokens": task.max_output_tokens,
            "temperature": task.temperature,
        }

        start_time = time.perf_counter()
        data = await self._post_json("/chat/completions", payload)
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        text = self._extract_text(data)
        if not text.strip():
            raise ProviderCallFailedError(
                "Chat completion returned no content",
                provider=self.provider_id.value,
                endpoint="/chat/completions",
                response_data=data,
            )

        model = data.get("model")
        if not isinstance(model, str) or not model:
            model = self._settings.model
        usage = data.get("usage")
        if not isinstance(usage, dict):
            usage = {}
        prompt_tokens = int(usage.get("prompt_tokens") or 0)
        completion_tokens = int(usage.get("completion_tokens") or 0)
        result = GenerationResult(
            text=text,
            provider=self.provider_id,
            model=model,
            actual_cost=self._price(prompt_tokens, completion_tokens),
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=elapsed_ms,
        )
        LOGGER.info(
            "Chat completion generated",
            extra={
                "model": result.model,
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens,
                "cost_usd": result.actual_cost,
                "latency_ms": round(elapsed_ms, 1),
            },
        )
        return result

    async def _probe(self) -> None:
        await self._ensure_client()
        assert self._client is not None
        try:
            response = await self._client.get(
                self._url("/models"),
                headers=self._headers(),
                timeout=self._settings.request_timeout,
            )
        except httpx.RequestError as exc:
            raise ProviderCallFailedError(
                "Health probe request failed",
                provider=self.provider_id.value,
                endpoint="/models",
                cause=exc,
            ) from exc
        if response.status_code >= 400:
            raise self._map_error(response, "/models")

    async def _post_json(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        await self._ensure_client()
        assert self._client is not None
        try:
            response = await self._client.post(
                self._url(path),
                json=payload,
                headers=self._headers(),
                timeout=self._settings.request_timeout,
            )
        except httpx.TimeoutException as exc:
            raise ProviderTimeoutError(
                "Chat completion request timed out",
                provider=self.provider_id.value,
                timeout_seconds=self._settings.request_timeout,
                cause=exc,
            ) from exc
        except httpx.RequestError as exc:
            raise ProviderCallFailedError(
                "Chat completion request failed",
                provider=self.provider_id.value,
                endpoint=path,
                cause=exc,
            ) from exc

        if response.status_code >= 400:
            error = self._map_error(response, path)
            LOGGER.warning(
                "Chat completion request rejected",
                extra={"path": path, "status_code": response.status_code, **self._extract_metadata(response)},
            )
            raise error
        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderCallFailedError(
                "Chat completion returned invalid JSON",
                provider=self.provider_id.value,
                status_code=response.status_code,
                endpoint=path,
            ) from exc
        if not isinstance(data, dict):
            raise ProviderCallFailedError(
                "Chat completion returned an unexpected payload",
                provider=self.provider_id.value,
                status_code=response.status_code,
                endpoint=path,
            )
        LOGGER.debug("Chat completion request succeeded", extra={"path": path, **self._extract_metadata(response)})
        return data

    async def _ensure_client(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient()

    def _url(self, path: str) -> str:
        return f"{self._settings.base_url.rstrip('/')}{path}"

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._settings.api_key}"}

    def _extract_text(self, data: Dict[str, Any]) -> str:
        choices = data.get("choices") or []
        if not choices:
            return ""
        choice = choices[0] if isinstance(choices, list) else None
        message = choice.get("message") or {} if isinstance(choice, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if content is None and isinstance(message, dict):
            return ""
        # content part lists and bare strings in place of a choice both land here
        if not isinstance(content, str):
            raise ProviderCallFailedError(
                "Chat completion returned a malformed choice",
                provider=self.provider_id.value,
                endpoint="/chat/completions",
                response_data=data,
            )
        return content

    @staticmethod
    def _extract_metadata(response: httpx.Response) -> Dict[str, Any]:
        headers = response.headers
        remaining = headers.get("x-ratelimit-remaining-requests")
        try:
            rate_limit_remaining = int(remaining) if remaining else None
        except ValueError:
            rate_limit_remaining = None
        return {
            "request_id": headers.get("x-request-id"),
            "rate_limit_remaining": rate_limit_remaining,
        }

    def _map_error(self, response: httpx.Response, path: str) -> ProviderCallFailedError:
        try:
            data = response.json()
        except ValueError:
            data = {"error": response.text}
        if not isinstance(data, dict):
            data = {"error": data}
        error = data.get("error")
        if isinstance(error, dict):
            message = error.get("message") or response.text
        else:
            message = error or data.get("message") or response.text
        return ProviderCallFailedError(
            message or f"Chat completion failed with status {response.status_code}",
            provider=self.provider_id.value,
            status_code=response.status_code,
            response_data=data,
            endpoint=path,
        )


__all__ = ["OpenAIChatProvider", "OpenAIClientSettings"]
