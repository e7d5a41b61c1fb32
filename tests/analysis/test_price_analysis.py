"""Tests for price history analysis."""

from datetime import date, datetime

import pytest

from laptop_advisor.analysis.models import AnomalyLevel, PriceRecord, PriceTier, PriceTrend
from laptop_advisor.analysis.price import (
    analyze_prices,
    build_price_summary,
    calculate_value_score,
    classify_price_tier,
    classify_trend,
    detect_price_anomaly,
    format_price,
    get_price_budget_label,
)


class TestPriceRecord:
    def test_plain_date_is_anchored_at_midnight(self):
        record = PriceRecord(price=1_000_000, date=date(2026, 10, 1))
        assert record.date == datetime(2026, 10, 1)
        assert record.to_dict()["date"] == "2026-10-01"


class TestClassifyTrend:
    def test_exactly_three_percent_is_stable(self):
        assert classify_trend(103_000, 100_000) == PriceTrend.STABLE

    def test_just_over_three_percent_is_rising(self):
        assert classify_trend(103_001, 100_000) == PriceTrend.RISING

    def test_falling(self):
        assert classify_trend(96_999, 100_000) == PriceTrend.FALLING
        assert classify_trend(97_000, 100_000) == PriceTrend.STABLE

    def test_missing_average(self):
        assert classify_trend(None, 100_000) is None
        assert classify_trend(100_000, None) is None


class TestAnomaly:
    def test_caution_below_twenty_percent(self):
        level, warning = detect_price_anomaly(19.9, 1_000_000)
        assert level == AnomalyLevel.CAUTION
        assert warning.startswith("가격이 평균 대비 20% 하락했습니다.")

    def test_danger_at_twenty_percent(self):
        level, warning = detect_price_anomaly(20.0, 1_000_000)
        assert level == AnomalyLevel.DANGER
        assert "급락" in warning
        assert "구매 전 반드시 확인하세요" in warning

    def test_small_or_negative_drop(self):
        assert detect_price_anomaly(9.9, 1_000_000) == (AnomalyLevel.NONE, None)
        assert detect_price_anomaly(-15.0, 1_000_000) == (AnomalyLevel.NONE, None)

    def test_no_reference(self):
        assert detect_price_anomaly(30.0, None) == (AnomalyLevel.NONE, None)
        assert detect_price_anomaly(None, 1_000_000) == (AnomalyLevel.NONE, None)


class TestValueScore:
    def test_default_without_average(self):
        assert calculate_value_score(900_000, None) == 50.0

    def test_at_average(self):
        assert calculate_value_score(1_000_000, 1_000_000) == pytest.approx(50.0)

    def test_deep_discount_caps_at_100(self):
        assert calculate_value_score(500_000, 1_000_000) == pytest.approx(100.0)

    def test_far_above_average_floors_at_zero(self):
        assert calculate_value_score(1_500_000, 1_000_000) == 0.0

    def test_non_increasing_in_ratio(self):
        ratios = [0.7 + i * 0.01 for i in range(60)]
        scores = [calculate_value_score(int(r * 1_000_000), 1_000_000) for r in ratios]
        assert all(a >= b for a, b in zip(scores, scores[1:]))

    def test_tiers(self):
        assert classify_price_tier(70) == PriceTier.CHEAP
        assert classify_price_tier(69.9) == PriceTier.AVERAGE
        assert classify_price_tier(40) == PriceTier.AVERAGE
        assert classify_price_tier(39.9) == PriceTier.EXPENSIVE


class TestAnalyzePrices:
    def test_empty_history(self, fixed_now):
        analysis = analyze_prices([], 900_000, now=fixed_now)
        assert analysis.avg_7d is None
        assert analysis.avg_30d is None
        assert analysis.avg_90d is None
        assert analysis.all_time_min is None
        assert analysis.price_trend is None
        assert analysis.drop_percent is None
        assert analysis.price_drop_detected is False
        assert analysis.value_score == 50.0
        assert analysis.price_tier == PriceTier.AVERAGE
        assert analysis.anomaly_level == AnomalyLevel.NONE
        assert analysis.summary == "가격이 안정적입니다."

    def test_windows(self, fixed_now, make_history):
        history = make_history({0: 1_000_000, 5: 1_100_000, 20: 1_200_000, 60: 1_300_000, 200: 900_000})
        analysis = analyze_prices(history, 1_000_000, now=fixed_now)
        assert analysis.avg_7d == pytest.approx(1_050_000)
        assert analysis.avg_30d == pytest.approx(1_100_000)
        assert analysis.avg_90d == pytest.approx(1_150_000)
        assert analysis.all_time_avg == pytest.approx(1_100_000)
        assert analysis.all_time_min == 900_000
        assert analysis.all_time_max == 1_300_000

    def test_sudden_drop_is_flagged_as_danger(self, fixed_now, make_history):
        history = make_history({days: 1_000_000 for days in range(1, 31)})
        history += make_history({0: 750_000})
        analysis = analyze_prices(history, 750_000, now=fixed_now)

        assert analysis.avg_30d == pytest.approx(1_000_000, rel=0.01)
        assert analysis.price_drop_detected is True
        assert analysis.drop_percent > 20
        assert analysis.anomaly_level == AnomalyLevel.DANGER
        assert analysis.summary.startswith("🔥 가격 급락!")

    def test_idempotent(self, fixed_now, make_history):
        history = make_history({1: 1_000_000, 10: 1_050_000, 40: 1_100_000})
        first = analyze_prices(history, 990_000, now=fixed_now)
        second = analyze_prices(list(reversed(history)), 990_000, now=fixed_now)
        assert first == second

    def test_rising_trend(self, fixed_now, make_history):
        prices = {days: 1_000_000 for days in range(8, 30)}
        prices.update({days: 1_100_000 for days in range(0, 7)})
        analysis = analyze_prices(make_history(prices), 1_100_000, now=fixed_now)
        assert analysis.price_trend == PriceTrend.RISING

    def test_to_dict_serializes_enums(self, fixed_now, make_history):
        data = analyze_prices(make_history({1: 1_000_000}), 1_000_000, now=fixed_now).to_dict()
        assert data["price_tier"] == "average"
        assert data["anomaly_level"] == "none"
        assert data["price_trend"] == "stable"


class TestPriceSummary:
    def _summary(self, **overrides):
        params = {
            "price_drop_detected": False,
            "drop_percent": None,
            "vs_avg_30d_percent": None,
            "price_trend": None,
            "all_time_min": None,
        }
        params.update(overrides)
        return build_price_summary(1_000_000, **params)

    def test_all_time_low(self):
        assert self._summary(all_time_min=990_000) == "📉 역대 최저가 수준입니다. 지금이 구매 적기입니다."

    def test_cheaper_than_average(self):
        assert self._summary(vs_avg_30d_percent=4.26) == "최근 30일 평균보다 4.3% 저렴합니다."

    def test_pricier_than_average(self):
        assert self._summary(vs_avg_30d_percent=-7.5) == (
            "최근 30일 평균보다 7.5% 비쌉니다. 조금 기다리는 것도 좋습니다."
        )

    def test_slightly_pricier_falls_through_to_trend(self):
        assert self._summary(vs_avg_30d_percent=-2.0, price_trend=PriceTrend.FALLING) == (
            "📉 가격이 내리는 추세입니다. 조금 더 기다리면 좋을 수 있습니다."
        )

    def test_rising(self):
        assert self._summary(price_trend=PriceTrend.RISING) == (
            "📈 가격이 오르는 추세입니다. 빠른 결정을 추천합니다."
        )

    def test_drop_wins_over_everything(self):
        summary = self._summary(
            price_drop_detected=True, drop_percent=12.4, all_time_min=1_000_000
        )
        assert summary == "🔥 가격 급락! 최근 7일 평균보다 12% 저렴합니다."


class TestFormatting:
    def test_format_price(self):
        assert format_price(1_290_000) == "1,290,000원"
        assert format_price(0) == "0원"

    @pytest.mark.parametrize(
        "price, label",
        [
            (499_000, "50만원 미만"),
            (500_000, "50-70만원"),
            (999_999, "70-100만원"),
            (1_490_000, "100-150만원"),
            (1_990_000, "150-200만원"),
            (2_500_000, "200-300만원"),
            (3_000_000, "300만원 이상"),
        ],
    )
    def test_budget_label(self, price, label):
        assert get_price_budget_label(price) == label
