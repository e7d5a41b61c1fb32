"""Buy-now-or-wait verdict.

A transparent linear score starting at 50. Each adjustment is recorded as a
ShouldBuyFactor so it can be shown to the user verbatim.
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from .models import PriceAnalysis, PriceTrend, ShouldBuyFactor, ShouldBuyResult, Verdict
from .performance import round_half_up

logger = logging.getLogger(__name__)

BASE_SCORE = 50
BUY_THRESHOLD = 55
NEW_MODEL_MONTHS = 6
OLD_MODEL_MONTHS = 24

_DAYS_PER_MONTH = 30


def months_since_release(
    release_date: date | datetime | None,
    now: datetime | None = None,
) -> int | None:
    """Whole 30-day months elapsed since release (None if unknown)."""
    if release_date is None:
        return None
    now = now or datetime.now()
    if not isinstance(release_date, datetime):
        release_date = datetime.combine(release_date, datetime.min.time())
    elapsed = (now - release_date).total_seconds()
    return int(elapsed // (_DAYS_PER_MONTH * 24 * 60 * 60))


def is_old_model(months: int | None) -> bool:
    return months is not None and months > OLD_MODEL_MONTHS


def _verdict(score: int) -> Verdict:
    if score >= 75:
        return Verdict.STRONG_BUY
    if score >= 55:
        return Verdict.BUY
    if score >= 40:
        return Verdict.HOLD
    return Verdict.AVOID


def evaluate_should_buy(
    price_analysis: PriceAnalysis | None,
    months_since_release: int | None = None,
) -> ShouldBuyResult:
    """Score whether now is a good time to buy.

    Args:
        price_analysis: Output of analyze_prices, or None when there is no
            price data (only the release-date factors apply).
        months_since_release: Model age in months, None if unknown.

    Returns:
        ShouldBuyResult with the score clamped to [0, 100].
    """
    factors: list[ShouldBuyFactor] = []
    score = BASE_SCORE

    if price_analysis is not None:
        current = price_analysis.current_lowest
        avg_30d = price_analysis.avg_30d

        if avg_30d and current < avg_30d * 0.9:
            percent = round_half_up((avg_30d - current) * 100 / avg_30d)
            factors.append(ShouldBuyFactor(f"현재가가 30일 평균보다 {percent}% 저렴", True, 25))
            score += 25
        elif avg_30d and current > avg_30d * 1.05:
            factors.append(ShouldBuyFactor("현재가가 최근 평균보다 높음", False, 15))
            score -= 15

        if price_analysis.price_trend == PriceTrend.FALLING:
            factors.append(ShouldBuyFactor("가격 하락 추세 진행 중", False, 10))
            score -= 10
        elif price_analysis.price_trend == PriceTrend.RISING:
            factors.append(ShouldBuyFactor("가격 상승 추세 - 빠른 결정 추천", True, 10))
            score += 10

        if price_analysis.price_drop_detected:
            factors.append(ShouldBuyFactor("가격 급락 감지", True, 15))
            score += 15

    if months_since_release is not None:
        if months_since_release < NEW_MODEL_MONTHS:
            factors.append(ShouldBuyFactor("신제품 (6개월 이내 출시)", True, 15))
            score += 15
        elif months_since_release > OLD_MODEL_MONTHS:
            factors.append(ShouldBuyFactor(
                f"출시 {months_since_release}개월 경과 - 구형 모델", False, 20
            ))
            score -= 20

    score = max(0, min(100, score))
    should_buy = score >= BUY_THRESHOLD
    reason = _build_reason(factors, should_buy, months_since_release)

    logger.debug("Should-buy score %d (%d factors)", score, len(factors))

    return ShouldBuyResult(
        should_buy=should_buy,
        score=score,
        verdict=_verdict(score),
        reason=reason,
        factors=factors,
        months_since_release=months_since_release,
    )


def _build_reason(
    factors: list[ShouldBuyFactor],
    should_buy: bool,
    months: int | None,
) -> str:
    if not should_buy:
        if is_old_model(months):
            return (
                f"출시된 지 {months}개월이 지난 구형 모델입니다. "
                "후속 신제품 출시 가능성이 높으니 최신 모델을 먼저 확인해 보세요."
            )
        return "현재 시점에서는 구매를 잠시 보류하는 것을 추천합니다. 가격이 더 내려갈 가능성이 있습니다."

    positives = [f for f in factors if f.positive]
    if positives:
        top = max(positives, key=lambda f: f.weight)
        return f"{top.factor}. 지금이 구매하기 좋은 시점입니다."
    return "가격과 출시일을 종합했을 때 구매를 고려해 볼 만합니다."
