"""LLM narrative layer: prompts, providers, TTL cache and fallback chain."""

from .cache import CacheType, LLMCache, MemoryLLMCache, SQLiteLLMCache
from .client import LLMResult, NarrativeClient, extract_json
from .providers import AnthropicProvider, OpenAIProvider

__all__ = [
    "AnthropicProvider",
    "CacheType",
    "LLMCache",
    "LLMResult",
    "MemoryLLMCache",
    "NarrativeClient",
    "OpenAIProvider",
    "SQLiteLLMCache",
    "extract_json",
]
