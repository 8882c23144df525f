"""
CreatorLens Custom Exceptions

This module defines the exception hierarchy for the CreatorLens routing and
scoring engine. Every error carries a stable error code, structured context
and a user-facing message so the thin handlers in front of the engine can
decide what to show without parsing exception strings.

Exception Categories:
- Routing Errors: unknown providers, empty registries
- Provider Errors: upstream call failures and timeouts
- Generation Errors: unusable provider output
- System Errors: configuration and validation problems
"""

from __future__ import annotations

import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

GENERIC_GENERATION_MESSAGE = "Generation failed, please retry."


class CreatorLensError(Exception):
    """
    Base exception class for all CreatorLens errors.

    Provides common functionality for error tracking, context preservation,
    and debugging information across the entire engine.
    """

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        retryable: bool = False,
        user_message: Optional[str] = None,
    ) -> None:
        """
        Initialize a CreatorLens error.

        Args:
            message: Technical error message for developers
            error_code: Unique error code for categorization
            context: Additional context information
            cause: The underlying exception that caused this error
            retryable: Whether this error might succeed on another provider
            user_message: User-friendly error message
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}
        self.cause = cause
        self.retryable = retryable
        self.user_message = user_message or message
        self.timestamp = datetime.now(timezone.utc)
        self.traceback_str = traceback.format_exc()

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "user_message": self.user_message,
            "context": self.context,
            "retryable": self.retryable,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }

    def __str__(self) -> str:
        """String representation with context."""
        base_msg = f"{self.error_code}: {self.message}"
        context = {k: v for k, v in self.context.items() if v is not None}
        if context:
            context_str = ", ".join(f"{k}={v}" for k, v in context.items())
            base_msg += f" (Context: {context_str})"
        if self.cause:
            base_msg += f" (Caused by: {self.cause})"
        return base_msg


# Routing Errors
class UnknownProviderError(CreatorLensError):
    """Raised when a provider id is not present in the registry."""

    def __init__(self, message: str, *, provider: Optional[str] = None, **kwargs) -> None:
        context = kwargs.pop("context", {})
        context.update({"provider": provider})
        kwargs.setdefault("retryable", False)
        super().__init__(message, context=context, **kwargs)
        self.provider = provider


class NoProvidersRegisteredError(CreatorLensError):
    """Raised when a routing decision is requested from an empty registry."""

    def __init__(self, message: str = "No providers are registered", **kwargs) -> None:
        kwargs.setdefault("retryable", False)
        kwargs.setdefault("user_message", GENERIC_GENERATION_MESSAGE)
        super().__init__(message, **kwargs)


# Provider Errors
class ProviderError(CreatorLensError):
    """
    Base class for failures of an upstream generation provider.

    Provider errors are the only errors the optimizer converts into a
    failover attempt, which is why they are flagged retryable.
    """

    def __init__(
        self,
        message: str,
        *,
        provider: Optional[str] = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        context.update({"provider": provider})
        kwargs.setdefault("retryable", True)
        kwargs.setdefault("user_message", GENERIC_GENERATION_MESSAGE)
        super().__init__(message, context=context, **kwargs)
        self.provider = provider


class ProviderCallFailedError(ProviderError):
    """
    An upstream provider returned an error payload or could not be reached.

    Wraps the HTTP status code and the structured error body, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        response_data: Optional[Dict[str, Any]] = None,
        endpoint: Optional[str] = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        context.update({
            "status_code": status_code,
            "endpoint": endpoint,
        })
        if response_data:
            context["response_data"] = response_data

        super().__init__(message, context=context, **kwargs)
        self.status_code = status_code
        self.response_data = response_data
        self.endpoint = endpoint


class ProviderTimeoutError(ProviderError):
    """A provider call did not complete within the caller-supplied timeout."""

    def __init__(
        self,
        message: str,
        *,
        timeout_seconds: Optional[float] = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        context.update({"timeout_seconds": timeout_seconds})
        super().__init__(message, context=context, **kwargs)
        self.timeout_seconds = timeout_seconds


# Generation Errors
class NoCandidatesGeneratedError(CreatorLensError):
    """The provider output contained no usable hook or title candidates."""

    def __init__(
        self,
        message: str,
        *,
        provider: Optional[str] = None,
        topic: Optional[str] = None,
        raw_preview: Optional[str] = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        context.update({
            "provider": provider,
            "topic": topic,
            "raw_preview": raw_preview[:200] if raw_preview else None,
        })
        kwargs.setdefault("user_message", GENERIC_GENERATION_MESSAGE)
        super().__init__(message, context=context, **kwargs)
        self.provider = provider
        self.topic = topic


# System Errors
class ValidationError(CreatorLensError):
    """Invalid input handed to a pure component (negative costs, bad counts)."""

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Any = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        context.update({
            "field": field,
            "value": str(value) if value is not None else None,
        })
        kwargs.setdefault("retryable", False)
        super().__init__(message, context=context, **kwargs)
        self.field = field
        self.value = value


class ConfigurationError(CreatorLensError):
    """
    Configuration errors.

    Handles missing API keys, invalid configuration values,
    and malformed scoring lexicon files.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        config_file: Optional[str] = None,
        expected_type: Optional[str] = None,
        provided_value: Any = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        context.update({
            "config_key": config_key,
            "config_file": config_file,
            "expected_type": expected_type,
            "provided_value": str(provided_value) if provided_value is not None else None,
        })

        kwargs.setdefault("retryable", False)

        super().__init__(message, context=context, **kwargs)
        self.config_key = config_key
        self.config_file = config_file
        self.expected_type = expected_type
        self.provided_value = provided_value


# Utility Functions
def classify_error_for_retry(error: Exception) -> bool:
    """
    Classify whether an error may succeed against another provider.

    Args:
        error: Exception to classify

    Returns:
        True if a failover attempt is worthwhile, False otherwise
    """
    if isinstance(error, CreatorLensError):
        return error.retryable
    return isinstance(error, (ConnectionError, TimeoutError))


def get_user_friendly_message(error: Exception) -> str:
    """
    Get a user-friendly error message.

    Args:
        error: Exception to get message for

    Returns:
        User-friendly error message
    """
    if isinstance(error, CreatorLensError):
        return error.user_message

    error_messages = {
        ConnectionError: GENERIC_GENERATION_MESSAGE,
        TimeoutError: GENERIC_GENERATION_MESSAGE,
        PermissionError: "Permission denied. Please check your access rights.",
        FileNotFoundError: "Required file not found. Please check your configuration.",
    }

    return error_messages.get(type(error), str(error))


__all__ = [
    "GENERIC_GENERATION_MESSAGE",
    "CreatorLensError",
    "UnknownProviderError",
    "NoProvidersRegisteredError",
    "ProviderError",
    "ProviderCallFailedError",
    "ProviderTimeoutError",
    "NoCandidatesGeneratedError",
    "ValidationError",
    "ConfigurationError",
    "classify_error_for_retry",
    "get_user_friendly_message",
]
