"""Tests for the advisor service flows."""

from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest

from laptop_advisor.advisor.errors import MissingSpecError, ProductNotFoundError
from laptop_advisor.advisor.service import NO_CANDIDATES_MESSAGE, LaptopAdvisor
from laptop_advisor.analysis.models import Verdict
from laptop_advisor.common.models import Budget, RecommendRequest
from laptop_advisor.database.models import Product, ProductSort
from laptop_advisor.llm.cache import MemoryLLMCache
from laptop_advisor.llm.client import NarrativeClient


def seed(repository, naver_id, spec, current=None, prices=None, release_date=None, now=None):
    """Store a product with its spec and {days_ago: price} history."""
    product_id = repository.upsert_product(Product(
        naver_id=naver_id,
        name=f"노트북 {naver_id}",
        brand="LG",
        release_date=release_date,
        current_lowest=current,
    ))
    if spec is not None:
        repository.save_spec(product_id, spec)
    for days_ago, price in (prices or {}).items():
        repository.record_price(product_id, now.date() - timedelta(days=days_ago), price)
    return product_id


def make_narrator(response='{"pros": ["좋음"]}'):
    provider = MagicMock()
    provider.name = "openai"
    provider.is_available.return_value = True
    provider.generate.return_value = response
    return NarrativeClient(MemoryLLMCache(), providers=[provider]), provider


@pytest.fixture
def stable_id(repository, gaming_spec, fixed_now):
    return seed(
        repository, "STABLE", gaming_spec,
        current=1_000_000,
        prices={days: 1_000_000 for days in range(0, 41)},
        release_date=date(2025, 8, 1),
        now=fixed_now,
    )


@pytest.fixture
def discounted_id(repository, ultrabook_spec, fixed_now):
    prices = {days: 1_000_000 for days in range(1, 31)}
    prices[0] = 800_000
    return seed(
        repository, "DISCOUNT", ultrabook_spec,
        current=800_000,
        prices=prices,
        release_date=date(2026, 7, 1),
        now=fixed_now,
    )


class TestListProducts:
    def test_usage_filter_drops_low_scores(self, repository, stable_id, discounted_id, fixed_now):
        result = LaptopAdvisor(repository, now=fixed_now).list_products(usage="gaming")
        assert [item["product"]["id"] for item in result["products"]] == [stable_id]
        assert result["products"][0]["scores"]["gaming"] == 87
        # total counts search matches before the usage filter
        assert result["total"] == 2

    def test_products_without_spec_are_kept(self, repository, stable_id, discounted_id, fixed_now):
        bare_id = seed(repository, "BARE", None, current=500_000)
        result = LaptopAdvisor(repository, now=fixed_now).list_products(
            usage="gaming", sort="price_asc"
        )
        items = result["products"]
        assert [item["product"]["id"] for item in items] == [bare_id, stable_id]
        assert items[0]["scores"] is None
        assert items[0]["gpu_tier"] is None

    def test_search_and_pagination(self, repository, stable_id, discounted_id, fixed_now):
        advisor = LaptopAdvisor(repository, now=fixed_now)
        assert [
            item["product"]["id"] for item in advisor.list_products(query="discount")["products"]
        ] == [discounted_id]

        result = advisor.list_products(sort=ProductSort.PRICE_DESC, page=2, limit=1)
        assert [item["product"]["id"] for item in result["products"]] == [discounted_id]
        assert result["page"] == 2
        assert result["total_pages"] == 2

    def test_budget(self, repository, stable_id, discounted_id, fixed_now):
        result = LaptopAdvisor(repository, now=fixed_now).list_products(
            budget=Budget(max=900_000)
        )
        assert [item["product"]["id"] for item in result["products"]] == [discounted_id]

    def test_unknown_usage(self, repository, fixed_now):
        with pytest.raises(ValueError):
            LaptopAdvisor(repository, now=fixed_now).list_products(usage="mining")


class TestAnalyzeProduct:
    def test_full_report(self, repository, stable_id, fixed_now):
        advisor = LaptopAdvisor(repository, now=fixed_now)
        report = advisor.analyze_product(stable_id)

        assert report["product"]["months_since_release"] == 14
        assert report["product"]["is_old"] is False
        assert report["price_analysis"]["avg_30d"] == pytest.approx(1_000_000)
        assert report["price_analysis"]["price_trend"] == "stable"
        assert report["scores"]["gaming"] == 87
        assert len(report["game_estimates"]) == 11
        assert report["should_buy"]["score"] == 50
        assert report["should_buy"]["verdict"] == Verdict.HOLD.value
        assert report["llm_advice"] is None

    def test_unknown_product(self, repository, fixed_now):
        advisor = LaptopAdvisor(repository, now=fixed_now)
        with pytest.raises(ProductNotFoundError) as exc_info:
            advisor.analyze_product(404)
        assert exc_info.value.product_id == 404
        assert isinstance(exc_info.value, LookupError)

    def test_product_without_spec(self, repository, fixed_now):
        product_id = seed(repository, "NOSPEC", None, current=1_000_000)
        with pytest.raises(MissingSpecError):
            LaptopAdvisor(repository, now=fixed_now).analyze_product(product_id)

    def test_product_without_prices(self, repository, gaming_spec, fixed_now):
        product_id = seed(repository, "NOPRICE", gaming_spec)
        narrator, provider = make_narrator()
        report = LaptopAdvisor(repository, narrator, now=fixed_now).analyze_product(product_id)

        assert report["price_analysis"] is None
        assert report["should_buy"]["score"] == 50
        assert report["llm_advice"] is None
        provider.generate.assert_not_called()

    def test_narrative_attached_and_cached(self, repository, stable_id, fixed_now):
        narrator, provider = make_narrator()
        advisor = LaptopAdvisor(repository, narrator, now=fixed_now)

        assert advisor.analyze_product(stable_id)["llm_advice"] == {"pros": ["좋음"]}
        advisor.analyze_product(stable_id)
        assert provider.generate.call_count == 1

    def test_narrative_failure_does_not_break_analysis(self, repository, stable_id, fixed_now):
        narrator = MagicMock()
        narrator.generate_with_fallback.side_effect = RuntimeError("cache unavailable")
        report = LaptopAdvisor(repository, narrator, now=fixed_now).analyze_product(stable_id)

        assert report["llm_advice"] is None
        assert report["scores"]["gaming"] == 87

    def test_without_narrative(self, repository, stable_id, fixed_now):
        narrator, provider = make_narrator()
        report = LaptopAdvisor(repository, narrator, now=fixed_now).analyze_product(
            stable_id, with_narrative=False
        )
        assert report["llm_advice"] is None
        provider.generate.assert_not_called()


class TestPriceTrendAndGames:
    def test_price_trend_window(self, repository, stable_id, fixed_now):
        trend = LaptopAdvisor(repository, now=fixed_now).price_trend(stable_id, days=10)
        assert trend["days"] == 10
        assert len(trend["points"]) == 11
        assert trend["points"][-1]["date"] == "2026-10-17"
        assert trend["analysis"]["current_lowest"] == 1_000_000

    def test_zero_day_window_keeps_only_today(self, repository, discounted_id, fixed_now):
        trend = LaptopAdvisor(repository, now=fixed_now).price_trend(discounted_id, days=0)
        assert [p["price"] for p in trend["points"]] == [800_000]
        assert trend["analysis"]["all_time_max"] == 800_000

    def test_price_trend_unknown_product(self, repository, fixed_now):
        with pytest.raises(ProductNotFoundError):
            LaptopAdvisor(repository, now=fixed_now).price_trend(404)

    def test_game_estimates(self, repository, stable_id, fixed_now):
        result = LaptopAdvisor(repository, now=fixed_now).game_estimates(stable_id)
        assert result["refresh_rate"] == 240
        assert all("playability_label" in g for g in result["games"])


class TestShouldBuy:
    def test_discounted_new_model(self, repository, discounted_id, fixed_now):
        result = LaptopAdvisor(repository, now=fixed_now).should_buy(discounted_id)
        assert result.should_buy is True
        assert result.score == 100
        assert result.months_since_release == 3
        assert result.verdict == Verdict.STRONG_BUY

    def test_stable_price_holds(self, repository, stable_id, fixed_now):
        result = LaptopAdvisor(repository, now=fixed_now).should_buy(stable_id)
        assert result.should_buy is False
        assert result.verdict == Verdict.HOLD


class TestCompare:
    def test_two_products(self, repository, stable_id, discounted_id, fixed_now):
        narrator, provider = make_narrator('{"winner": "노트북 DISCOUNT"}')
        result = LaptopAdvisor(repository, narrator, now=fixed_now).compare(
            [stable_id, discounted_id]
        )
        assert [p["product"]["id"] for p in result["products"]] == [stable_id, discounted_id]
        assert result["llm_comparison"] == {"winner": "노트북 DISCOUNT"}

    def test_cache_key_ignores_order(self, repository, stable_id, discounted_id, fixed_now):
        narrator, provider = make_narrator()
        advisor = LaptopAdvisor(repository, narrator, now=fixed_now)
        advisor.compare([stable_id, discounted_id])
        advisor.compare([discounted_id, stable_id])
        assert provider.generate.call_count == 1

    @pytest.mark.parametrize("ids", [[1], [1, 2, 3, 4], [1, 1]])
    def test_invalid_selection(self, repository, fixed_now, ids):
        with pytest.raises(ValueError):
            LaptopAdvisor(repository, now=fixed_now).compare(ids)

    def test_unknown_product(self, repository, stable_id, fixed_now):
        with pytest.raises(ProductNotFoundError):
            LaptopAdvisor(repository, now=fixed_now).compare([stable_id, 404])


class TestRecommend:
    def test_ranks_by_usage(self, repository, stable_id, discounted_id, fixed_now):
        result = LaptopAdvisor(repository, now=fixed_now).recommend(
            RecommendRequest(usage=["gaming"])
        )
        ids = [r["product"]["product_id"] for r in result["recommendations"]]
        assert ids == [stable_id, discounted_id]
        assert result["message"] is None

    def test_portable_prefers_ultrabook(self, repository, stable_id, discounted_id, fixed_now):
        result = LaptopAdvisor(repository, now=fixed_now).recommend(
            RecommendRequest(usage=["portable"], priority="portable")
        )
        top = result["recommendations"][0]
        assert top["product"]["product_id"] == discounted_id
        assert top["should_buy"] is True

    def test_budget_filters(self, repository, stable_id, discounted_id, fixed_now):
        result = LaptopAdvisor(repository, now=fixed_now).recommend(
            RecommendRequest(budget=Budget(max=900_000))
        )
        assert [r["product"]["product_id"] for r in result["recommendations"]] == [discounted_id]

    def test_empty_pool(self, repository, stable_id, fixed_now):
        result = LaptopAdvisor(repository, now=fixed_now).recommend(
            RecommendRequest(budget=Budget(max=100_000))
        )
        assert result == {
            "recommendations": [],
            "message": NO_CANDIDATES_MESSAGE,
            "llm_explanation": None,
        }

    def test_limit(self, repository, stable_id, discounted_id, fixed_now):
        result = LaptopAdvisor(repository, now=fixed_now).recommend(RecommendRequest(), limit=1)
        assert len(result["recommendations"]) == 1

    def test_explanation(self, repository, stable_id, fixed_now):
        narrator, _ = make_narrator('{"summary": "추천"}')
        result = LaptopAdvisor(repository, narrator, now=fixed_now).recommend(RecommendRequest())
        assert result["llm_explanation"] == {"summary": "추천"}

    def test_zero_limit_returns_nothing(self, repository, stable_id, discounted_id, fixed_now):
        result = LaptopAdvisor(repository, now=fixed_now).recommend(RecommendRequest(), limit=0)
        assert result["recommendations"] == []
