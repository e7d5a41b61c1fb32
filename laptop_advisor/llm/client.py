"""Narrative generation with cache, provider fallback and a template fallback.

Order of resolution for a request:
1. unexpired cache entry for the key
2. each available provider in order; the first response that parses as JSON
   is cached with the TTL of its cache type
3. a fixed template response, cached for a short TTL so the providers are
   retried soon

generate_with_fallback never raises because of a provider failure.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from ..common.config import CacheSettings, LLMSettings
from .cache import CacheEntry, CacheType, LLMCache, cache_ttl
from .providers import LLMProvider, build_providers

logger = logging.getLogger(__name__)

TEMPLATE_PROVIDER = "template"

FALLBACK_RESPONSE: dict = {
    "pros": [
        "분석 데이터를 기반으로 합리적인 성능을 제공합니다",
        "현재 가격대에서 적절한 선택입니다",
    ],
    "cons": [
        "AI 분석이 일시적으로 불가합니다",
        "상세 분석은 잠시 후 다시 확인해 주세요",
    ],
    "usageSummaries": {
        "gaming": "게임 성능 점수를 참고하세요",
        "work": "작업 성능 점수를 참고하세요",
        "student": "학생 적합도 점수를 참고하세요",
        "video": "영상편집 점수를 참고하세요",
        "portable": "휴대성 점수를 참고하세요",
    },
    "shouldBuyConclusion": "현재 가격과 스펙을 종합적으로 고려하여 판단하세요.",
    "bestFor": "용도에 맞는 점수를 확인하고 결정하세요.",
}

_CODE_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


def extract_json(text: str) -> str:
    """Strip markdown code fences or surrounding prose from a JSON response."""
    match = _CODE_FENCE.search(text)
    if match:
        return match.group(1).strip()

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1:
        return text[start:end + 1]

    return text


@dataclass
class LLMResult:
    text: str
    provider: str
    cached: bool

    @property
    def data(self) -> dict:
        return json.loads(self.text)

    @property
    def is_fallback(self) -> bool:
        return self.provider == TEMPLATE_PROVIDER


class NarrativeClient:
    """Generates JSON narratives through a chain of LLM providers.

    Usage:
        client = NarrativeClient(SQLiteLLMCache())
        result = client.generate_with_fallback(prompt, "analysis:42", CacheType.ANALYSIS)
        advice = result.data
    """

    def __init__(
        self,
        cache: LLMCache,
        providers: list[LLMProvider] | None = None,
        llm_settings: LLMSettings | None = None,
        cache_settings: CacheSettings | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.cache = cache
        self.providers = providers if providers is not None else build_providers(llm_settings)
        self.cache_settings = cache_settings or CacheSettings()
        self._clock = clock

    def generate_with_fallback(
        self,
        prompt: str,
        cache_key: str,
        cache_type: CacheType = CacheType.ANALYSIS,
        product_id: int | None = None,
    ) -> LLMResult:
        now = self._clock()

        entry = self.cache.get(cache_key, now)
        if entry is not None:
            logger.debug("LLM cache hit for %s (%s)", cache_key, entry.provider)
            return LLMResult(text=entry.response, provider=entry.provider, cached=True)

        for provider in self.providers:
            if not provider.is_available():
                continue
            try:
                text = extract_json(provider.generate(prompt))
                json.loads(text)
            except Exception:
                logger.warning("LLM provider %s failed", provider.name, exc_info=True)
                continue

            self.cache.set(CacheEntry(
                cache_key=cache_key,
                provider=provider.name,
                response=text,
                expires_at=now + cache_ttl(cache_type, self.cache_settings),
                product_id=product_id,
            ))
            logger.info("Generated %s narrative with %s", cache_type.value, provider.name)
            return LLMResult(text=text, provider=provider.name, cached=False)

        logger.warning("All LLM providers failed for %s, using template", cache_key)
        fallback_text = json.dumps(FALLBACK_RESPONSE, ensure_ascii=False)
        self.cache.set(CacheEntry(
            cache_key=cache_key,
            provider=TEMPLATE_PROVIDER,
            response=fallback_text,
            expires_at=now + timedelta(hours=self.cache_settings.fallback_ttl_hours),
            product_id=product_id,
        ))
        return LLMResult(text=fallback_text, provider=TEMPLATE_PROVIDER, cached=False)

    def invalidate(self, cache_key: str) -> None:
        self.cache.delete(cache_key)

    def clean_expired(self) -> int:
        return self.cache.delete_expired(self._clock())
