"""Generation provider integrations for CreatorLens."""

from .base import ContentProvider
from .gemini_client import GeminiClientSettings, GeminiProvider
from .mock_provider import MockProvider
from .openai_client import OpenAIChatProvider, OpenAIClientSettings
from .prompts import CONTENT_END, CONTENT_START, PromptBuilder, PromptPayload, extract_marked_content
from .response_parser import extract_rewritten_text, extract_title, parse_hook_candidates

__all__ = [
    "ContentProvider",
    "GeminiProvider",
    "GeminiClientSettings",
    "OpenAIChatProvider",
    "OpenAIClientSettings",
    "MockProvider",
    "PromptBuilder",
    "PromptPayload",
    "CONTENT_START",
    "CONTENT_END",
    "extract_marked_content",
    "parse_hook_candidates",
    "extract_rewritten_text",
    "extract_title",
]
