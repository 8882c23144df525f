"""Static provider registry with mutable health fields."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from ..core import (
    HealthStatus,
    NoProvidersRegisteredError,
    ProviderId,
    ProviderProfile,
    UnknownProviderError,
)

LOGGER = logging.getLogger(__name__)


def coerce_provider_id(provider: ProviderId | str) -> ProviderId:
    """Turn a loose provider string into a ``ProviderId``."""

    if isinstance(provider, ProviderId):
        return provider
    try:
        return ProviderId(str(provider).strip().lower())
    except ValueError as exc:
        raise UnknownProviderError(
            f"Unknown provider: {provider}",
            provider=str(provider),
        ) from exc


class ProviderRegistry:
    """Providers known to the engine, in registration order.

    Profiles are registered at startup and never removed. Health updates are
    the only runtime mutation and are serialized by a lock so probes running
    on other threads cannot interleave with readers.
    """

    def __init__(self, profiles: Optional[Iterable[ProviderProfile]] = None) -> None:
        self._profiles: Dict[ProviderId, ProviderProfile] = {}
        self._lock = threading.Lock()
        for profile in profiles or []:
            self.register(profile)

    def register(self, profile: ProviderProfile) -> None:
        with self._lock:
            if profile.id in self._profiles:
                LOGGER.warning("Replacing registered provider", extra={"provider": profile.id.value})
            self._profiles[profile.id] = profile.model_copy(deep=True)
        LOGGER.debug(
            "Registered provider",
            extra={"provider": profile.id.value, "cost_per_token": profile.cost_per_token},
        )

    def __len__(self) -> int:
        return len(self._profiles)

    def __contains__(self, provider: object) -> bool:
        return provider in self._profiles

    def is_registered(self, provider: ProviderId | str) -> bool:
        try:
            return coerce_provider_id(provider) in self._profiles
        except UnknownProviderError:
            return False

    def ids(self) -> List[ProviderId]:
        return list(self._profiles)

    def get(self, provider: ProviderId | str) -> ProviderProfile:
        """Return a copy of the provider profile."""

        provider_id = coerce_provider_id(provider)
        with self._lock:
            profile = self._profiles.get(provider_id)
            if profile is None:
                raise UnknownProviderError(
                    f"Provider {provider_id.value} is not registered",
                    provider=provider_id.value,
                )
            return profile.model_copy(deep=True)

    def profiles(self) -> List[ProviderProfile]:
        with self._lock:
            return [profile.model_copy(deep=True) for profile in self._profiles.values()]

    def rate(self, provider: ProviderId | str) -> float:
        return self.get(provider).cost_per_token

    def ordered_by_cost(self) -> List[ProviderId]:
        """Provider ids from cheapest to most expensive; ties keep registration order."""

        return [profile.id for profile in sorted(self._profiles.values(), key=lambda p: p.cost_per_token)]

    def cheapest(self) -> ProviderId:
        ordered = self.ordered_by_cost()
        if not ordered:
            raise NoProvidersRegisteredError()
        return ordered[0]

    def most_expensive(self) -> ProviderId:
        if not self._profiles:
            raise NoProvidersRegisteredError()
        # max() keeps the first of equal elements, matching registration order
        return max(self._profiles.values(), key=lambda p: p.cost_per_token).id

    def update_health(
        self,
        provider: ProviderId | str,
        status: HealthStatus,
        latency_ms: Optional[float] = None,
    ) -> ProviderProfile:
        provider_id = coerce_provider_id(provider)
        with self._lock:
            profile = self._profiles.get(provider_id)
            if profile is None:
                raise UnknownProviderError(
                    f"Provider {provider_id.value} is not registered",
                    provider=provider_id.value,
                )
            previous = profile.status
            profile.status = status
            profile.latency_ms = latency_ms
            profile.last_checked = datetime.now(timezone.utc)
            updated = profile.model_copy(deep=True)

        if previous != status:
            LOGGER.info(
                "Provider health changed",
                extra={"provider": provider_id.value, "from": previous.value, "to": status.value},
            )
        return updated


__all__ = ["ProviderRegistry", "coerce_provider_id"]
