"""End-to-end tests: storage -> analysis -> ranking -> narratives.

Everything runs against a real temporary SQLite database. LLM providers are
mocked, so the template fallback and the persistent cache are exercised
without network access.
"""

from __future__ import annotations

from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest

from laptop_advisor.advisor.service import LaptopAdvisor
from laptop_advisor.common.models import Budget, ParsedSpec, RecommendRequest
from laptop_advisor.database.models import Product
from laptop_advisor.database.repository import ProductRepository
from laptop_advisor.llm.cache import SQLiteLLMCache
from laptop_advisor.llm.client import FALLBACK_RESPONSE, NarrativeClient


CATALOG = [
    (
        "G16",
        "게이밍 16",
        ParsedSpec(cpu="Intel Core i9-14900HX", gpu="RTX 4080", ram_gb=32, ssd_gb=2048,
                   screen_size=16.0, refresh_rate=240, weight_kg=2.6, battery_wh=90),
        2_790_000,
    ),
    (
        "AIR13",
        "울트라북 13",
        ParsedSpec(cpu="Apple M3", ram_gb=16, ssd_gb=512, screen_size=13.6,
                   weight_kg=1.24, battery_wh=52.6),
        1_390_000,
    ),
    (
        "OFFICE15",
        "사무용 15",
        ParsedSpec(cpu="Intel Core i5-1335U", ram_gb=8, ssd_gb=256, screen_size=15.6,
                   weight_kg=1.7, battery_wh=45),
        690_000,
    ),
]


@pytest.fixture
def catalog(temp_db, fixed_now):
    repository = ProductRepository(temp_db)
    ids = {}
    for naver_id, name, spec, price in CATALOG:
        product_id = repository.upsert_product(Product(
            naver_id=naver_id, name=name, current_lowest=price, release_date=date(2025, 1, 15)
        ))
        repository.save_spec(product_id, spec)
        for days_ago in range(0, 60):
            day = fixed_now.date() - timedelta(days=days_ago)
            repository.record_price(product_id, day, price)
        ids[naver_id] = product_id
    return repository, ids


@pytest.fixture
def failing_narrator(temp_db, fixed_now):
    provider = MagicMock()
    provider.name = "openai"
    provider.is_available.return_value = True
    provider.generate.side_effect = ConnectionError("offline")
    narrator = NarrativeClient(
        SQLiteLLMCache(temp_db), providers=[provider], clock=lambda: fixed_now
    )
    return narrator, provider


class TestEndToEnd:
    def test_recommendation_flow(self, catalog, fixed_now):
        repository, ids = catalog
        advisor = LaptopAdvisor(repository, now=fixed_now)

        result = advisor.recommend(
            RecommendRequest(budget=Budget(max=1_500_000), usage=["student", "portable"])
        )
        ranked = [r["product"]["product_id"] for r in result["recommendations"]]
        assert ids["G16"] not in ranked
        assert ranked[0] == ids["AIR13"]

    def test_gaming_query_reports_model_age(self, catalog, fixed_now):
        repository, ids = catalog
        advisor = LaptopAdvisor(repository, now=fixed_now)

        result = advisor.recommend(RecommendRequest(usage=["gaming"]))
        top = result["recommendations"][0]
        assert top["product"]["product_id"] == ids["G16"]
        assert "출시된 지 2년이 넘은 모델입니다" not in top["warnings"]
        assert top["product"]["months_since_release"] == 21

    def test_template_narrative_is_persisted(self, catalog, failing_narrator, fixed_now):
        repository, ids = catalog
        narrator, provider = failing_narrator
        advisor = LaptopAdvisor(repository, narrator, now=fixed_now)

        first = advisor.analyze_product(ids["AIR13"])
        second = advisor.analyze_product(ids["AIR13"])

        assert first["llm_advice"] == FALLBACK_RESPONSE
        assert second["llm_advice"] == FALLBACK_RESPONSE
        assert provider.generate.call_count == 1

    def test_reset_clears_cache_rows(self, catalog, failing_narrator, fixed_now):
        repository, ids = catalog
        narrator, _ = failing_narrator
        LaptopAdvisor(repository, narrator, now=fixed_now).compare([ids["G16"], ids["AIR13"]])

        counts = repository.reset()
        assert counts["llm_cache"] == 1
        assert counts["products"] == 3
        assert counts["prices"] == 180
