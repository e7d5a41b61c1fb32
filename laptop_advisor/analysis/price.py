"""Price history analysis.

Turns a daily lowest-price history plus today's lowest price into rolling
averages, a trend, a value score, a drop/anomaly check and a one-line
Korean summary. The result is a computed view: recompute it whenever the
history changes instead of storing it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from statistics import mean

from .models import AnomalyLevel, PriceAnalysis, PriceRecord, PriceTier, PriceTrend
from .performance import round_half_up

logger = logging.getLogger(__name__)

DROP_THRESHOLD = 0.9           # current < avg_7d * 0.9 -> drop detected
TREND_THRESHOLD_PERCENT = 3.0
NEAR_ALL_TIME_LOW = 1.02
ANOMALY_DANGER_PERCENT = 20.0
ANOMALY_CAUTION_PERCENT = 10.0


def _average(prices: list[int]) -> float | None:
    return mean(prices) if prices else None


def _window(history: list[PriceRecord], now: datetime, days: int) -> list[int]:
    since = now - timedelta(days=days)
    return [r.price for r in history if r.date >= since]


def analyze_prices(
    history: list[PriceRecord],
    current_lowest: int,
    now: datetime | None = None,
) -> PriceAnalysis:
    """Analyze a product's price history against its current lowest price.

    Args:
        history: Daily price records, any order.
        current_lowest: Current lowest price in KRW.
        now: Analysis time; windows are "on or after now - N days".

    Returns:
        PriceAnalysis. Every average is None when its window is empty.
    """
    now = now or datetime.now()

    avg_7d = _average(_window(history, now, 7))
    avg_30d = _average(_window(history, now, 30))
    avg_90d = _average(_window(history, now, 90))

    all_prices = [r.price for r in history]
    all_time_avg = _average(all_prices)
    all_time_min = min(all_prices) if all_prices else None
    all_time_max = max(all_prices) if all_prices else None

    price_drop_detected = avg_7d is not None and current_lowest < avg_7d * DROP_THRESHOLD
    drop_percent = (avg_7d - current_lowest) * 100 / avg_7d if avg_7d else None

    price_trend = classify_trend(avg_7d, avg_30d)
    vs_avg_30d_percent = (avg_30d - current_lowest) * 100 / avg_30d if avg_30d else None

    value_score = calculate_value_score(current_lowest, avg_30d)
    price_tier = classify_price_tier(value_score)

    reference = avg_30d if avg_30d is not None else (
        avg_7d if avg_7d is not None else all_time_avg
    )
    anomaly_level, anomaly_warning = detect_price_anomaly(drop_percent, reference)

    summary = build_price_summary(
        current_lowest,
        price_drop_detected=price_drop_detected,
        drop_percent=drop_percent,
        vs_avg_30d_percent=vs_avg_30d_percent,
        price_trend=price_trend,
        all_time_min=all_time_min,
    )

    logger.debug(
        "Price analysis: current=%s avg7=%s avg30=%s trend=%s anomaly=%s",
        current_lowest, avg_7d, avg_30d, price_trend, anomaly_level.value,
    )

    return PriceAnalysis(
        current_lowest=current_lowest,
        avg_7d=avg_7d,
        avg_30d=avg_30d,
        avg_90d=avg_90d,
        all_time_min=all_time_min,
        all_time_max=all_time_max,
        all_time_avg=all_time_avg,
        price_drop_detected=price_drop_detected,
        drop_percent=drop_percent,
        price_trend=price_trend,
        vs_avg_30d_percent=vs_avg_30d_percent,
        value_score=value_score,
        price_tier=price_tier,
        anomaly_level=anomaly_level,
        anomaly_warning=anomaly_warning,
        summary=summary,
    )


def classify_trend(avg_7d: float | None, avg_30d: float | None) -> PriceTrend | None:
    """Compare the 7-day average to the 30-day average.

    A difference of exactly +/-3% is still "stable".
    """
    if not avg_7d or not avg_30d:
        return None
    diff = (avg_7d - avg_30d) * 100 / avg_30d
    if diff > TREND_THRESHOLD_PERCENT:
        return PriceTrend.RISING
    if diff < -TREND_THRESHOLD_PERCENT:
        return PriceTrend.FALLING
    return PriceTrend.STABLE


def calculate_value_score(current: int, avg_30d: float | None) -> float:
    """Piecewise-linear score of current / avg_30d; lower ratio scores higher."""
    if not avg_30d:
        return 50.0

    ratio = current / avg_30d
    if ratio <= 0.85:
        return 85 + min(15.0, (0.85 - ratio) * 100)
    if ratio <= 0.95:
        return 70 + (0.95 - ratio) * 150
    if ratio <= 1.0:
        return 50 + (1.0 - ratio) * 200
    if ratio <= 1.1:
        return 30 + (1.1 - ratio) * 200
    return max(0.0, 30 - (ratio - 1.1) * 100)


def classify_price_tier(value_score: float) -> PriceTier:
    if value_score >= 70:
        return PriceTier.CHEAP
    if value_score >= 40:
        return PriceTier.AVERAGE
    return PriceTier.EXPENSIVE


def detect_price_anomaly(
    drop_percent: float | None,
    reference: float | None,
) -> tuple[AnomalyLevel, str | None]:
    """Flag suspiciously large drops, which are often mislinked listings.

    Returns:
        (level, warning). warning is None when level is NONE.
    """
    if not reference or not drop_percent:
        return AnomalyLevel.NONE, None

    if drop_percent >= ANOMALY_DANGER_PERCENT:
        return AnomalyLevel.DANGER, (
            f"가격이 평균 대비 {round_half_up(drop_percent)}% 급락했습니다. "
            "이 경우 행사가로 저렴해졌거나, 병행수입 제품이 잘못 연동되어 가격이 저렴하거나, "
            "완전히 다른 제품이 연동되었을 수 있으니 구매 전 반드시 확인하세요."
        )

    if drop_percent >= ANOMALY_CAUTION_PERCENT:
        return AnomalyLevel.CAUTION, (
            f"가격이 평균 대비 {round_half_up(drop_percent)}% 하락했습니다. "
            "행사 할인일 수 있지만, 병행수입 제품이나 다른 제품이 잘못 연동된 경우도 있으니 "
            "판매처와 상품 정보를 꼭 확인하세요."
        )

    return AnomalyLevel.NONE, None


def build_price_summary(
    current: int,
    *,
    price_drop_detected: bool,
    drop_percent: float | None,
    vs_avg_30d_percent: float | None,
    price_trend: PriceTrend | None,
    all_time_min: int | None,
) -> str:
    """One-line summary; the first matching rule wins."""
    if price_drop_detected:
        return f"🔥 가격 급락! 최근 7일 평균보다 {round_half_up(abs(drop_percent or 0))}% 저렴합니다."
    if all_time_min and current <= all_time_min * NEAR_ALL_TIME_LOW:
        return "📉 역대 최저가 수준입니다. 지금이 구매 적기입니다."
    if vs_avg_30d_percent is not None:
        if vs_avg_30d_percent > 0:
            return f"최근 30일 평균보다 {vs_avg_30d_percent:.1f}% 저렴합니다."
        if vs_avg_30d_percent < -5:
            return (
                f"최근 30일 평균보다 {abs(vs_avg_30d_percent):.1f}% 비쌉니다. "
                "조금 기다리는 것도 좋습니다."
            )
    if price_trend == PriceTrend.RISING:
        return "📈 가격이 오르는 추세입니다. 빠른 결정을 추천합니다."
    if price_trend == PriceTrend.FALLING:
        return "📉 가격이 내리는 추세입니다. 조금 더 기다리면 좋을 수 있습니다."
    return "가격이 안정적입니다."


def format_price(price: int) -> str:
    """1290000 -> "1,290,000원"."""
    return f"{price:,}원"


def get_price_budget_label(price: int) -> str:
    if price < 500_000:
        return "50만원 미만"
    if price < 700_000:
        return "50-70만원"
    if price < 1_000_000:
        return "70-100만원"
    if price < 1_500_000:
        return "100-150만원"
    if price < 2_000_000:
        return "150-200만원"
    if price < 3_000_000:
        return "200-300만원"
    return "300만원 이상"
