"""Provider boundary shared by every generation backend."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Optional

from tenacity import AsyncRetrying, stop_after_attempt, wait_fixed

from ..core import GenerationResult, HealthStatus, ProviderHealth, ProviderId, Task

LOGGER = logging.getLogger(__name__)


class ContentProvider(ABC):
    """A backend that turns a ``Task`` into generated text.

    Implementations raise ``ProviderCallFailedError`` for any upstream
    failure, including empty output. Timeouts are enforced by the caller.
    """

    provider_id: ProviderId

    def __init__(
        self,
        *,
        cost_per_token: float,
        model: Optional[str] = None,
        health_attempts: int = 2,
        health_retry_wait: float = 0.5,
    ) -> None:
        self._cost_per_token = cost_per_token
        self._model = model
        self._health_attempts = health_attempts
        self._health_retry_wait = health_retry_wait

    @property
    def model(self) -> Optional[str]:
        return self._model

    @property
    def cost_per_token(self) -> float:
        return self._cost_per_token

    @abstractmethod
    async def generate(self, task: Task) -> GenerationResult:
        """Run one generation call for ``task``."""

    @abstractmethod
    async def _probe(self) -> None:
        """Cheap reachability check; raises on failure."""

    async def check_health(self) -> ProviderHealth:
        """Probe the provider with one retry.

        A probe that succeeds first time is ``online``, one that needs the
        retry is ``degraded`` and one that fails twice is ``offline``.
        """

        started = time.perf_counter()
        attempts = 0
        try:
            async for attempt in AsyncRetrying(
                reraise=True,
                stop=stop_after_attempt(self._health_attempts),
                wait=wait_fixed(self._health_retry_wait),
            ):
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    await self._probe()
        except Exception as exc:  # pylint: disable=broad-except
            LOGGER.warning(
                "Provider health probe failed",
                extra={"provider": self.provider_id.value, "attempts": attempts, "error": str(exc)},
            )
            return ProviderHealth(
                provider=self.provider_id,
                status=HealthStatus.OFFLINE,
                latency_ms=None,
                detail=str(exc),
            )

        latency_ms = (time.perf_counter() - started) * 1000
        status = HealthStatus.ONLINE if attempts <= 1 else HealthStatus.DEGRADED
        return ProviderHealth(provider=self.provider_id, status=status, latency_ms=latency_ms)

    async def aclose(self) -> None:
        """Release network resources; no-op by default."""

    def _price(self, prompt_tokens: int, completion_tokens: int) -> Optional[float]:
        """Cost of reported token usage, or None when nothing was reported."""

        total = prompt_tokens + completion_tokens
        if total <= 0:
            return None
        return total * self._cost_per_token


__all__ = ["ContentProvider"]
