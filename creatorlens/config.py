"""Application configuration loading utilities for CreatorLens."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Mapping, MutableMapping, Optional

from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError

from .core import (
    AppConfig,
    ConfigurationError,
    GeminiConfig,
    MockConfig,
    OpenAIConfig,
    Platform,
    RoutingConfig,
)

BOOLEAN_TRUE = {"1", "true", "t", "yes", "y", "on"}
BOOLEAN_FALSE = {"0", "false", "f", "no", "n", "off"}

PLACEHOLDER_VALUES = {
    "your_openai_api_key_here",
    "your_gemini_api_key_here",
    "changeme",
}


def _load_env_file(env_file: Optional[str]) -> None:
    """Load variables from the provided `.env` file if it exists."""

    candidate = Path(env_file or ".env")
    if candidate.exists():
        # Do not override explicit environment variables.
        load_dotenv(candidate, override=False)


def _optional(env: Mapping[str, str], key: str) -> Optional[str]:
    value = env.get(key)
    if value is None or not value.strip():
        return None
    return value.strip()


def _parse_float(env: Mapping[str, str], key: str) -> Optional[float]:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"Configuration value for {key} must be a float",
            config_key=key,
            expected_type="float",
            provided_value=raw,
        ) from exc


def _parse_bool(env: Mapping[str, str], key: str) -> Optional[bool]:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return None
    value = raw.strip().lower()
    if value in BOOLEAN_TRUE:
        return True
    if value in BOOLEAN_FALSE:
        return False
    raise ConfigurationError(
        f"Configuration value for {key} must be a boolean",
        config_key=key,
        expected_type="bool",
        provided_value=raw,
    )


def _parse_non_negative(env: Mapping[str, str], key: str) -> Optional[float]:
    value = _parse_float(env, key)
    if value is not None and value < 0:
        raise ConfigurationError(
            f"Configuration value for {key} cannot be negative",
            config_key=key,
            expected_type="float >= 0",
            provided_value=value,
        )
    return value


def _build_openai_config(env: Mapping[str, str]) -> Optional[OpenAIConfig]:
    api_key = _optional(env, "OPENAI_API_KEY")
    if api_key is None:
        return None

    config_kwargs: MutableMapping[str, object] = {"api_key": api_key}
    model = _optional(env, "OPENAI_MODEL")
    if model:
        config_kwargs["model"] = model
    base_url = _optional(env, "OPENAI_BASE_URL")
    if base_url:
        config_kwargs["base_url"] = base_url
    cost = _parse_non_negative(env, "OPENAI_COST_PER_TOKEN")
    if cost is not None:
        config_kwargs["cost_per_token"] = cost
    return OpenAIConfig(**config_kwargs)


def _build_gemini_config(env: Mapping[str, str]) -> Optional[GeminiConfig]:
    api_key = _optional(env, "GEMINI_API_KEY")
    if api_key is None:
        return None

    config_kwargs: MutableMapping[str, object] = {"api_key": api_key}
    model = _optional(env, "GEMINI_MODEL")
    if model:
        config_kwargs["model"] = model
    cost = _parse_non_negative(env, "GEMINI_COST_PER_TOKEN")
    if cost is not None:
        config_kwargs["cost_per_token"] = cost
    return GeminiConfig(**config_kwargs)


def _build_mock_config(env: Mapping[str, str]) -> Optional[MockConfig]:
    if not _parse_bool(env, "ENABLE_MOCK_PROVIDER"):
        return None

    config_kwargs: MutableMapping[str, object] = {}
    cost = _parse_non_negative(env, "MOCK_COST_PER_TOKEN")
    if cost is not None:
        config_kwargs["cost_per_token"] = cost
    latency = _parse_non_negative(env, "MOCK_LATENCY_SECONDS")
    if latency is not None:
        config_kwargs["latency_seconds"] = latency
    return MockConfig(**config_kwargs)


def _build_routing_config(env: Mapping[str, str]) -> RoutingConfig:
    config_kwargs: MutableMapping[str, object] = {}

    threshold = _parse_non_negative(env, "CHEAP_PROVIDER_THRESHOLD")
    if threshold is not None:
        config_kwargs["cheap_provider_threshold"] = threshold

    timeout = _parse_float(env, "PROVIDER_TIMEOUT_SECONDS")
    if timeout is not None:
        if timeout <= 0:
            raise ConfigurationError(
                "Provider timeout must be positive",
                config_key="PROVIDER_TIMEOUT_SECONDS",
                expected_type="float > 0",
                provided_value=timeout,
            )
        config_kwargs["provider_timeout_seconds"] = timeout

    budget = _parse_non_negative(env, "BUDGET_ALERT_USD")
    if budget is not None:
        config_kwargs["budget_alert_usd"] = budget

    return RoutingConfig(**config_kwargs)


def _build_app_kwargs(env: Mapping[str, str]) -> MutableMapping[str, object]:
    kwargs: MutableMapping[str, object] = {}

    platform = _optional(env, "DEFAULT_PLATFORM")
    if platform:
        try:
            kwargs["default_platform"] = Platform(platform.lower())
        except ValueError as exc:
            raise ConfigurationError(
                "Invalid default platform configured",
                config_key="DEFAULT_PLATFORM",
                expected_type=f"one of {[p.value for p in Platform]}",
                provided_value=platform,
            ) from exc

    lexicon_file = _optional(env, "SCORING_LEXICON_FILE")
    if lexicon_file:
        kwargs["scoring_lexicon_file"] = lexicon_file

    log_level = _optional(env, "LOG_LEVEL")
    if log_level:
        kwargs["log_level"] = log_level.upper()

    log_file = _optional(env, "LOG_FILE")
    if log_file:
        kwargs["log_file"] = log_file

    return kwargs


def validate_app_config(config: AppConfig) -> None:
    """Run additional validation that Pydantic does not cover."""

    if not config.configured_providers:
        raise ConfigurationError(
            "No generation provider configured; set OPENAI_API_KEY, GEMINI_API_KEY or ENABLE_MOCK_PROVIDER",
            config_key="OPENAI_API_KEY",
        )

    if config.openai is not None and config.openai.api_key.lower() in PLACEHOLDER_VALUES:
        raise ConfigurationError(
            "OpenAI API key is using a placeholder value",
            config_key="OPENAI_API_KEY",
            provided_value=config.openai.api_key,
        )
    if config.gemini is not None and config.gemini.api_key.lower() in PLACEHOLDER_VALUES:
        raise ConfigurationError(
            "Gemini API key is using a placeholder value",
            config_key="GEMINI_API_KEY",
            provided_value=config.gemini.api_key,
        )
    if config.scoring_lexicon_file and not Path(config.scoring_lexicon_file).exists():
        raise ConfigurationError(
            "Scoring lexicon file does not exist",
            config_key="SCORING_LEXICON_FILE",
            config_file=config.scoring_lexicon_file,
        )


def load_app_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    env_file: Optional[str] = None,
) -> AppConfig:
    """Load an :class:`AppConfig` from environment variables."""

    if env is None:
        _load_env_file(env_file)
        env_mapping = dict(os.environ)
    else:
        env_mapping = dict(env)

    try:
        config = AppConfig(
            openai=_build_openai_config(env_mapping),
            gemini=_build_gemini_config(env_mapping),
            mock=_build_mock_config(env_mapping),
            routing=_build_routing_config(env_mapping),
            **_build_app_kwargs(env_mapping),
        )
    except PydanticValidationError as exc:
        raise ConfigurationError(
            "Invalid configuration values",
            config_file=env_file,
            cause=exc,
        ) from exc

    validate_app_config(config)
    return config


@lru_cache()
def get_app_config(env_file: Optional[str] = None) -> AppConfig:
    """Cached configuration loader for use within the application."""

    return load_app_config(env_file=env_file)


def reload_app_config(env_file: Optional[str] = None) -> AppConfig:
    """Clear the cached configuration and reload from the environment."""

    get_app_config.cache_clear()
    return get_app_config(env_file=env_file)


__all__ = [
    "get_app_config",
    "load_app_config",
    "reload_app_config",
    "validate_app_config",
]
