"""Data models for the recommendation ranker."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..analysis.models import PriceAnalysis, ShouldBuyResult, UsageScores


@dataclass
class RankingCandidate:
    """A pre-filtered laptop with its scores and price analysis."""

    product_id: int
    name: str
    scores: UsageScores
    price_analysis: PriceAnalysis | None = None
    months_since_release: int | None = None
    brand: str = ""

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "brand": self.brand,
            "scores": self.scores.to_dict(),
            "current_lowest": (
                self.price_analysis.current_lowest if self.price_analysis else None
            ),
            "months_since_release": self.months_since_release,
        }


@dataclass
class Recommendation:
    candidate: RankingCandidate
    match_score: float
    should_buy: ShouldBuyResult
    reasons: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "product": self.candidate.to_dict(),
            "match_score": round(self.match_score, 1),
            "reasons": list(self.reasons),
            "warnings": list(self.warnings),
            "should_buy": self.should_buy.should_buy,
            "should_buy_reason": self.should_buy.reason,
        }
