"""Provider selection for generation tasks."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, Optional

from ..core import HealthStatus, ProviderId, Task, TaskType
from .registry import ProviderRegistry

LOGGER = logging.getLogger(__name__)

DEFAULT_CHEAP_PROVIDER_THRESHOLD = 0.001

DEFAULT_AFFINITY: Mapping[TaskType, ProviderId] = MappingProxyType(
    {
        TaskType.ANALYSIS: ProviderId.OPENAI,
        TaskType.COMPLEX: ProviderId.OPENAI,
        TaskType.CODING: ProviderId.OPENAI,
        TaskType.CREATIVE: ProviderId.GEMINI,
        TaskType.SOCIAL: ProviderId.GEMINI,
        TaskType.VIDEO_SCRIPT: ProviderId.GEMINI,
        TaskType.ARTICLE: ProviderId.GEMINI,
        TaskType.AD_COPY: ProviderId.GEMINI,
    }
)


class ProviderRouter:
    """Decide which registered provider serves a task.

    The router never calls a provider; it returns a decision that the caller
    executes and reports to the usage ledger. Health is informational only,
    so the same task always resolves to the same provider for a given
    registry and affinity table.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        *,
        affinity: Optional[Mapping[TaskType, ProviderId]] = None,
        cheap_provider_threshold: float = DEFAULT_CHEAP_PROVIDER_THRESHOLD,
    ) -> None:
        self._registry = registry
        self._affinity = dict(DEFAULT_AFFINITY if affinity is None else affinity)
        self._cheap_threshold = cheap_provider_threshold

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    @property
    def affinity(self) -> Mapping[TaskType, ProviderId]:
        return MappingProxyType(self._affinity)

    def select_provider(self, task: Task) -> ProviderId:
        """Resolve the provider for ``task``; first matching rule wins.

        Raises:
            NoProvidersRegisteredError: the registry is empty.
        """

        cheapest = self._registry.cheapest()

        if task.override is not None:
            if self._registry.is_registered(task.override):
                profile = self._registry.get(task.override)
                if profile.status != HealthStatus.ONLINE:
                    LOGGER.warning(
                        "Explicit provider override is not healthy",
                        extra={"provider": profile.id.value, "status": profile.status.value},
                    )
                return task.override
            LOGGER.warning(
                "Ignoring override for unregistered provider",
                extra={"provider": task.override.value},
            )

        if task.cost_ceiling is not None and task.cost_ceiling < self._cheap_threshold:
            LOGGER.debug(
                "Cost ceiling below cheap threshold; routing to cheapest provider",
                extra={"cost_ceiling": task.cost_ceiling, "provider": cheapest.value},
            )
            return cheapest

        preferred = self._affinity.get(task.task_type)
        if preferred is not None and self._registry.is_registered(preferred):
            return preferred

        return cheapest

    def select_failover(self, primary: ProviderId) -> Optional[ProviderId]:
        """The provider after ``primary`` in cost order, wrapping to the cheapest."""

        ordered = self._registry.ordered_by_cost()
        if len(ordered) < 2:
            return None
        if primary not in ordered:
            return ordered[0]
        index = ordered.index(primary)
        return ordered[(index + 1) % len(ordered)]


__all__ = ["DEFAULT_AFFINITY", "DEFAULT_CHEAP_PROVIDER_THRESHOLD", "ProviderRouter"]
