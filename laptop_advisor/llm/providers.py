"""LLM provider adapters.

SDKs are imported lazily so the package works without them until a
narrative is actually requested. A provider whose API key is missing
reports itself unavailable instead of failing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..common.config import (
    LLMSettings,
    get_anthropic_api_key,
    get_openai_api_key,
    is_anthropic_configured,
    is_openai_configured,
)

SYSTEM_PROMPT = "당신은 한국 노트북 구매 상담 전문가입니다. 요청된 JSON 형식으로만 응답하세요."


class LLMProvider(ABC):
    name: str = ""

    def __init__(self, llm_settings: LLMSettings | None = None) -> None:
        self.settings = llm_settings or LLMSettings()

    @abstractmethod
    def is_available(self) -> bool:
        ...

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Return the raw response text for ``prompt``."""


class OpenAIProvider(LLMProvider):
    name = "openai"

    def is_available(self) -> bool:
        return is_openai_configured()

    def generate(self, prompt: str) -> str:
        import openai

        client = openai.OpenAI(api_key=get_openai_api_key())
        response = client.chat.completions.create(
            model=self.settings.openai_model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=self.settings.temperature,
            max_tokens=self.settings.max_tokens,
            response_format={"type": "json_object"},
        )
        return response.choices[0].message.content or ""


class AnthropicProvider(LLMProvider):
    name = "anthropic"

    def is_available(self) -> bool:
        return is_anthropic_configured()

    def generate(self, prompt: str) -> str:
        import anthropic

        client = anthropic.Anthropic(api_key=get_anthropic_api_key())
        response = client.messages.create(
            model=self.settings.anthropic_model,
            max_tokens=self.settings.max_tokens,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.settings.temperature,
        )
        return response.content[0].text


_PROVIDER_CLASSES: dict[str, type[LLMProvider]] = {
    OpenAIProvider.name: OpenAIProvider,
    AnthropicProvider.name: AnthropicProvider,
}


def build_providers(llm_settings: LLMSettings | None = None) -> list[LLMProvider]:
    """Instantiate providers in ``provider_order``; unknown names are skipped."""
    llm_settings = llm_settings or LLMSettings()
    return [
        _PROVIDER_CLASSES[name](llm_settings)
        for name in llm_settings.provider_order
        if name in _PROVIDER_CLASSES
    ]
