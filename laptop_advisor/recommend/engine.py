"""Recommendation ranking: orders candidates by fit to a usage/priority query.

Candidates arrive already filtered by budget (see
ProductRepository.find_candidates). Ranking is:

1. match score = mean of the requested usage scores (or overall score when
   no usage is given) plus a priority bonus, capped at 100
2. stable sort by match score, descending (ties keep input order)
3. truncate to ``limit``
"""

from __future__ import annotations

import logging

from ..analysis.models import UsageScores
from ..analysis.should_buy import evaluate_should_buy, is_old_model
from ..common.models import Priority, RecommendRequest, Usage
from .models import RankingCandidate, Recommendation

logger = logging.getLogger(__name__)

MAX_REASONS = 3


def calculate_match_score(scores: UsageScores, request: RecommendRequest) -> float:
    if not request.usage:
        return float(scores.overall)

    selected = [scores.get(u.value) for u in request.usage]
    base = sum(selected) / len(selected)

    bonus = 0
    if request.priority == Priority.PERFORMANCE and max(scores.gaming, scores.work) > 80:
        bonus += 10
    if request.priority == Priority.PORTABLE and scores.portable > 75:
        bonus += 10
    if request.priority == Priority.VALUE:
        bonus += 5
    if request.priority == Priority.LATEST:
        bonus += 3

    return min(100.0, base + bonus)


def build_reasons(candidate: RankingCandidate, request: RecommendRequest) -> list[str]:
    scores = candidate.scores
    reasons: list[str] = []

    if Usage.GAMING in request.usage and scores.gaming >= 70:
        reasons.append(f"게임 성능 점수 {scores.gaming}점으로 우수합니다")
    if Usage.WORK in request.usage and scores.work >= 70:
        reasons.append(f"작업/코딩 성능 점수 {scores.work}점으로 적합합니다")
    if Usage.PORTABLE in request.usage and scores.portable >= 75:
        reasons.append(f"휴대성 점수 {scores.portable}점으로 가볍고 오래 쓸 수 있습니다")
    if candidate.price_analysis and candidate.price_analysis.price_drop_detected:
        reasons.append("현재 가격이 최근 평균보다 저렴합니다")

    return reasons[:MAX_REASONS]


def build_warnings(candidate: RankingCandidate) -> list[str]:
    warnings: list[str] = []

    if is_old_model(candidate.months_since_release):
        warnings.append("출시된 지 2년이 넘은 모델입니다")
    if candidate.scores.gaming < 30:
        warnings.append("게임 성능이 낮습니다")
    if candidate.scores.video < 30:
        warnings.append("영상편집에는 적합하지 않습니다")

    return warnings


def rank_recommendations(
    candidates: list[RankingCandidate],
    request: RecommendRequest,
    limit: int = 5,
) -> list[Recommendation]:
    """Rank budget-filtered candidates for a recommendation query.

    Args:
        candidates: Candidates already inside the requested budget.
        request: Usage and priority of the query.
        limit: Maximum number of recommendations returned.

    Returns:
        Up to ``limit`` recommendations, best match first. An empty pool
        gives an empty list.
    """
    if not candidates or limit <= 0:
        return []

    scored = [
        (calculate_match_score(c.scores, request), c)
        for c in candidates
    ]
    # sorted() is stable, so equal match scores keep their input order
    ranked = sorted(scored, key=lambda pair: pair[0], reverse=True)[:limit]

    recommendations = [
        Recommendation(
            candidate=candidate,
            match_score=match_score,
            should_buy=evaluate_should_buy(
                candidate.price_analysis, candidate.months_since_release
            ),
            reasons=build_reasons(candidate, request),
            warnings=build_warnings(candidate),
        )
        for match_score, candidate in ranked
    ]

    logger.debug(
        "Ranked %d/%d candidates: %s",
        len(recommendations),
        len(candidates),
        [(r.candidate.product_id, round(r.match_score, 1)) for r in recommendations],
    )
    return recommendations
