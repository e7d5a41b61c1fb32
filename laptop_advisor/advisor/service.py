"""Advisor service: wires storage, the analysis engine and narratives together.

Each public method corresponds to one user-facing flow (catalog browsing,
product analysis, price trend, game estimates, should-buy, comparison,
recommendation) and returns plain dicts ready for JSON output. Narratives
are optional: when no NarrativeClient is configured, or narration fails,
``llm_*`` fields are None and the rest of the result is unaffected.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from ..analysis.game_fps import PLAYABILITY_LABELS, estimate_game_fps
from ..analysis.models import PriceAnalysis, ShouldBuyResult, UsageScores
from ..analysis.performance import (
    analyze_display_suitability,
    analyze_port_suitability,
    analyze_tech_features,
    calculate_usage_scores,
    calculate_work_suitability,
)
from ..analysis.price import analyze_prices
from ..analysis.should_buy import evaluate_should_buy, is_old_model, months_since_release
from ..common.config import RecommendSettings
from ..common.models import Budget, ParsedSpec, RecommendRequest, Usage
from ..database.models import Product, ProductSort
from ..database.repository import ProductRepository
from ..llm.cache import CacheType
from ..llm.client import NarrativeClient
from ..llm.prompts import (
    build_analysis_prompt,
    build_comparison_prompt,
    build_recommend_prompt,
)
from ..recommend.engine import rank_recommendations
from ..recommend.models import RankingCandidate
from .errors import MissingSpecError, ProductNotFoundError

logger = logging.getLogger(__name__)

NO_CANDIDATES_MESSAGE = "조건에 맞는 노트북이 없습니다. 예산이나 용도를 조정해 보세요."
USAGE_FILTER_MIN_SCORE = 60


class LaptopAdvisor:
    """Entry point for every advisor flow.

    Usage:
        advisor = LaptopAdvisor(ProductRepository(), NarrativeClient(SQLiteLLMCache()))
        report = advisor.analyze_product(42)
        top = advisor.recommend(RecommendRequest(usage=["gaming"]))
    """

    def __init__(
        self,
        repository: ProductRepository,
        narrator: NarrativeClient | None = None,
        now: datetime | None = None,
        recommend_settings: RecommendSettings | None = None,
    ) -> None:
        self.repository = repository
        self.narrator = narrator
        self._fixed_now = now
        self.recommend_settings = recommend_settings or RecommendSettings()

    def _now(self) -> datetime:
        return self._fixed_now or datetime.now()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load(self, product_id: int) -> tuple[Product, ParsedSpec]:
        product = self.repository.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        spec = self.repository.get_spec(product_id)
        if spec is None:
            raise MissingSpecError(product_id)
        return product, spec

    def _analyze_price(
        self,
        product: Product,
        since_days: int | None = None,
    ) -> PriceAnalysis | None:
        """Price analysis over the stored history, None without any price."""
        now = self._now()
        since = (now - timedelta(days=since_days)).date() if since_days is not None else None
        history = self.repository.get_price_history(product.id, since=since)

        current = product.current_lowest
        if current is None and history:
            current = history[-1].price
        if current is None:
            return None
        return analyze_prices(history, current, now=now)

    def _narrate(
        self,
        prompt: str,
        cache_key: str,
        cache_type: CacheType,
        product_id: int | None = None,
    ) -> dict | None:
        if self.narrator is None:
            return None
        try:
            result = self.narrator.generate_with_fallback(
                prompt, cache_key, cache_type, product_id
            )
            return result.data
        except Exception:
            logger.warning("Narrative generation failed for %s", cache_key, exc_info=True)
            return None

    # ------------------------------------------------------------------
    # Flows
    # ------------------------------------------------------------------

    def list_products(
        self,
        query: str | None = None,
        brand: str | None = None,
        budget: Budget | None = None,
        usage: Usage | str | None = None,
        sort: ProductSort | str = ProductSort.RELEVANCE,
        page: int = 1,
        limit: int = 20,
    ) -> dict:
        """Browse the catalog.

        The usage filter runs on the fetched page: products scoring below
        USAGE_FILTER_MIN_SCORE for ``usage`` are dropped, products without a
        spec are kept. ``total`` and ``total_pages`` count the search
        matches before that filter.
        """
        usage = Usage(usage) if usage else None
        result = self.repository.search_products(query, brand, budget, sort, page, limit)

        items = []
        for product in result.products:
            spec = self.repository.get_spec(product.id)
            scores = calculate_usage_scores(spec, product.current_lowest) if spec else None
            if usage and scores and scores.get(usage.value) < USAGE_FILTER_MIN_SCORE:
                continue
            items.append({
                "product": product.to_dict(),
                "gpu_tier": spec.gpu_tier if spec else None,
                "scores": scores.to_dict() if scores else None,
            })

        return {
            "products": items,
            "total": result.total,
            "page": result.page,
            "total_pages": result.total_pages,
        }

    def analyze_product(self, product_id: int, with_narrative: bool = True) -> dict:
        """Full analysis of one laptop."""
        product, spec = self._load(product_id)
        price_analysis = self._analyze_price(product)
        current = price_analysis.current_lowest if price_analysis else None
        months = months_since_release(product.release_date, self._now())

        scores = calculate_usage_scores(spec, current)
        games = estimate_game_fps(spec.gpu_tier, spec.effective_refresh_rate)
        verdict = evaluate_should_buy(price_analysis, months)

        llm_advice = None
        if with_narrative and price_analysis is not None:
            prompt = build_analysis_prompt(
                product.name, spec, price_analysis, scores, games, months
            )
            llm_advice = self._narrate(
                prompt, f"analysis:{product_id}", CacheType.ANALYSIS, product_id
            )

        logger.info(
            "Analyzed %s: overall=%d should_buy=%s",
            product.name, scores.overall, verdict.should_buy,
        )

        return {
            "product": {
                **product.to_dict(),
                "months_since_release": months,
                "is_old": is_old_model(months),
            },
            "spec": spec.model_dump(),
            "price_analysis": price_analysis.to_dict() if price_analysis else None,
            "scores": scores.to_dict(),
            "work_suitability": calculate_work_suitability(spec).to_dict(),
            "display": analyze_display_suitability(spec).to_dict(),
            "ports": analyze_port_suitability(spec).to_dict(),
            "tech_features": analyze_tech_features(spec).to_dict(),
            "game_estimates": [g.to_dict() for g in games],
            "should_buy": verdict.to_dict(),
            "llm_advice": llm_advice,
        }

    def price_trend(self, product_id: int, days: int = 90) -> dict:
        """Daily price points and analysis over the last ``days`` days."""
        product = self.repository.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        since = (self._now() - timedelta(days=days)).date()
        history = self.repository.get_price_history(product_id, since=since)
        price_analysis = self._analyze_price(product, since_days=days)

        return {
            "product_id": product_id,
            "days": days,
            "points": [r.to_dict() for r in history],
            "analysis": price_analysis.to_dict() if price_analysis else None,
        }

    def game_estimates(self, product_id: int) -> dict:
        _, spec = self._load(product_id)
        games = estimate_game_fps(spec.gpu_tier, spec.effective_refresh_rate)
        return {
            "product_id": product_id,
            "gpu": spec.gpu,
            "gpu_tier": spec.gpu_tier,
            "refresh_rate": spec.effective_refresh_rate,
            "games": [
                {**g.to_dict(), "playability_label": PLAYABILITY_LABELS[g.playability]}
                for g in games
            ],
        }

    def should_buy(self, product_id: int) -> ShouldBuyResult:
        product = self.repository.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        price_analysis = self._analyze_price(product)
        months = months_since_release(product.release_date, self._now())
        return evaluate_should_buy(price_analysis, months)

    def compare(self, product_ids: list[int], with_narrative: bool = True) -> dict:
        """Compare 2-3 laptops side by side.

        Raises:
            ValueError: If fewer than 2 or more than 3 distinct ids are given.
        """
        if len(set(product_ids)) != len(product_ids) or not 2 <= len(product_ids) <= 3:
            raise ValueError("compare needs 2 or 3 distinct product ids")

        entries: list[tuple[Product, ParsedSpec, PriceAnalysis | None, UsageScores]] = []
        for product_id in product_ids:
            product, spec = self._load(product_id)
            price_analysis = self._analyze_price(product)
            current = price_analysis.current_lowest if price_analysis else None
            entries.append((product, spec, price_analysis, calculate_usage_scores(spec, current)))

        llm_comparison = None
        priced = [(p.name, s, pa, sc) for p, s, pa, sc in entries if pa is not None]
        if with_narrative and len(priced) == len(entries):
            cache_key = "comparison:" + ",".join(str(i) for i in sorted(product_ids))
            llm_comparison = self._narrate(
                build_comparison_prompt(priced), cache_key, CacheType.COMPARISON
            )

        return {
            "products": [
                {
                    "product": product.to_dict(),
                    "spec": spec.model_dump(),
                    "scores": scores.to_dict(),
                    "price_analysis": price_analysis.to_dict() if price_analysis else None,
                }
                for product, spec, price_analysis, scores in entries
            ],
            "llm_comparison": llm_comparison,
        }

    def recommend(
        self,
        request: RecommendRequest,
        limit: int | None = None,
        with_narrative: bool = True,
    ) -> dict:
        """Rank stored laptops for a budget/usage/priority query."""
        if limit is None:
            limit = self.recommend_settings.default_limit
        now = self._now()

        candidates: list[RankingCandidate] = []
        for product, spec in self.repository.find_candidates(
            request.budget, self.recommend_settings.candidate_pool_size
        ):
            price_analysis = self._analyze_price(product)
            candidates.append(RankingCandidate(
                product_id=product.id,
                name=product.name,
                brand=product.brand,
                scores=calculate_usage_scores(spec, product.current_lowest),
                price_analysis=price_analysis,
                months_since_release=months_since_release(product.release_date, now),
            ))

        if not candidates:
            return {"recommendations": [], "message": NO_CANDIDATES_MESSAGE, "llm_explanation": None}

        recommendations = rank_recommendations(candidates, request, limit)

        llm_explanation = None
        if with_narrative:
            top = [
                (
                    r.candidate.name,
                    r.candidate.price_analysis.current_lowest if r.candidate.price_analysis else None,
                    r.candidate.scores,
                    r.match_score,
                )
                for r in recommendations[:3]
            ]
            llm_explanation = self._narrate(
                build_recommend_prompt(request, top),
                request.stable_cache_key(),
                CacheType.RECOMMEND,
            )

        logger.info(
            "Recommended %d of %d candidates", len(recommendations), len(candidates)
        )
        return {
            "recommendations": [r.to_dict() for r in recommendations],
            "message": None,
            "llm_explanation": llm_explanation,
        }
