"""Data models for the analysis engine.

All models use @dataclass with to_dict() for JSON serialization.
Every value here is derived from a ParsedSpec and/or a price history and is
safe to recompute at any time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


# === Enums ===

class PriceTrend(str, Enum):
    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"


class AnomalyLevel(str, Enum):
    """How suspicious a sudden price drop is."""
    NONE = "none"
    CAUTION = "caution"
    DANGER = "danger"


class PriceTier(str, Enum):
    """Current price relative to its 30-day average.

    CHEAP corresponds to a high value score (good time to buy).
    """
    CHEAP = "cheap"
    AVERAGE = "average"
    EXPENSIVE = "expensive"


class Playability(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class WorkRating(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class Verdict(str, Enum):
    STRONG_BUY = "strong_buy"
    BUY = "buy"
    HOLD = "hold"
    AVOID = "avoid"


VERDICT_LABELS: dict[Verdict, str] = {
    Verdict.STRONG_BUY: "적극 추천",
    Verdict.BUY: "구매 가능",
    Verdict.HOLD: "보류 추천",
    Verdict.AVOID: "비추천",
}


# === Scores ===

@dataclass(frozen=True)
class UsageScores:
    """Per-use-case suitability, each 0-100."""

    gaming: int
    work: int
    student: int
    video: int
    portable: int
    overall: int

    def get(self, usage: str) -> int:
        """Score for a usage name; unknown names score 0."""
        return {
            "gaming": self.gaming,
            "work": self.work,
            "student": self.student,
            "video": self.video,
            "portable": self.portable,
        }.get(usage, 0)

    def to_dict(self) -> dict:
        return {
            "gaming": self.gaming,
            "work": self.work,
            "student": self.student,
            "video": self.video,
            "portable": self.portable,
            "overall": self.overall,
        }


@dataclass
class DisplaySuitability:
    for_doc: bool
    for_media: bool
    for_game: bool
    for_design: bool
    summary: str

    def to_dict(self) -> dict:
        return {
            "for_doc": self.for_doc,
            "for_media": self.for_media,
            "for_game": self.for_game,
            "for_design": self.for_design,
            "summary": self.summary,
        }


@dataclass
class PortSuitability:
    can_dual_monitor: bool
    can_external_gpu: bool
    port_score: int
    summary: str
    details: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "can_dual_monitor": self.can_dual_monitor,
            "can_external_gpu": self.can_external_gpu,
            "port_score": self.port_score,
            "summary": self.summary,
            "details": list(self.details),
        }


@dataclass
class TechFeatures:
    """Detected modern-hardware features plus ordered display badges."""

    wifi6: bool = False
    wifi6e: bool = False
    wifi7: bool = False
    bt5: bool = False
    bt53: bool = False
    pcie_gen4: bool = False
    pcie_gen5: bool = False
    ddr5: bool = False
    npu: bool = False
    oled: bool = False
    mini_led: bool = False
    thunderbolt4: bool = False
    highlights: list[str] = field(default_factory=list)

    @property
    def ai_accel(self) -> bool:
        return self.npu

    @property
    def usb4(self) -> bool:
        return self.thunderbolt4

    def to_dict(self) -> dict:
        return {
            "wifi6": self.wifi6,
            "wifi6e": self.wifi6e,
            "wifi7": self.wifi7,
            "bt5": self.bt5,
            "bt53": self.bt53,
            "pcie_gen4": self.pcie_gen4,
            "pcie_gen5": self.pcie_gen5,
            "ddr5": self.ddr5,
            "npu": self.npu,
            "ai_accel": self.ai_accel,
            "oled": self.oled,
            "mini_led": self.mini_led,
            "thunderbolt4": self.thunderbolt4,
            "usb4": self.usb4,
            "highlights": list(self.highlights),
        }


@dataclass
class WorkTaskRating:
    """Rating of one professional workload (coding, photo, ...)."""

    score: int
    rating: WorkRating
    label: str

    def to_dict(self) -> dict:
        return {"score": self.score, "rating": self.rating.value, "label": self.label}


@dataclass
class WorkSuitability:
    coding: WorkTaskRating
    video_edit: WorkTaskRating
    photoshop: WorkTaskRating
    three_d: WorkTaskRating

    def to_dict(self) -> dict:
        return {
            "coding": self.coding.to_dict(),
            "video_edit": self.video_edit.to_dict(),
            "photoshop": self.photoshop.to_dict(),
            "three_d": self.three_d.to_dict(),
        }


# === Game estimates ===

@dataclass
class GameEstimate:
    game_name: str
    game_slug: str
    fps_low: int
    fps_mid: int
    fps_high: int
    playability: Playability
    summary: str

    def to_dict(self) -> dict:
        return {
            "game_name": self.game_name,
            "game_slug": self.game_slug,
            "fps_low": self.fps_low,
            "fps_mid": self.fps_mid,
            "fps_high": self.fps_high,
            "playability": self.playability.value,
            "summary": self.summary,
        }


# === Prices ===

@dataclass
class PriceRecord:
    """A single daily lowest-price observation.

    Maps to the storage contract: { date, price }
    """

    price: int  # KRW
    date: datetime
    mall_name: str = ""

    def __post_init__(self) -> None:
        # Day-granular records are anchored at midnight
        if not isinstance(self.date, datetime) and isinstance(self.date, date):
            self.date = datetime.combine(self.date, datetime.min.time())

    def to_dict(self) -> dict:
        return {
            "date": self.date.date().isoformat(),
            "price": self.price,
            "mall_name": self.mall_name,
        }


@dataclass
class PriceAnalysis:
    """Computed view over a price history; never a source of truth."""

    current_lowest: int
    avg_7d: float | None
    avg_30d: float | None
    avg_90d: float | None
    all_time_min: int | None
    all_time_max: int | None
    all_time_avg: float | None
    price_drop_detected: bool
    drop_percent: float | None
    price_trend: PriceTrend | None
    vs_avg_30d_percent: float | None
    value_score: float
    price_tier: PriceTier
    anomaly_level: AnomalyLevel
    anomaly_warning: str | None
    summary: str

    def to_dict(self) -> dict:
        def _r(value: float | None, digits: int = 1) -> float | None:
            return round(value, digits) if value is not None else None

        return {
            "current_lowest": self.current_lowest,
            "avg_7d": _r(self.avg_7d, 0),
            "avg_30d": _r(self.avg_30d, 0),
            "avg_90d": _r(self.avg_90d, 0),
            "all_time_min": self.all_time_min,
            "all_time_max": self.all_time_max,
            "all_time_avg": _r(self.all_time_avg, 0),
            "price_drop_detected": self.price_drop_detected,
            "drop_percent": _r(self.drop_percent),
            "price_trend": self.price_trend.value if self.price_trend else None,
            "vs_avg_30d_percent": _r(self.vs_avg_30d_percent),
            "value_score": round(self.value_score, 1),
            "price_tier": self.price_tier.value,
            "anomaly_level": self.anomaly_level.value,
            "anomaly_warning": self.anomaly_warning,
            "summary": self.summary,
        }


# === Should-buy ===

@dataclass
class ShouldBuyFactor:
    factor: str
    positive: bool
    weight: int

    def to_dict(self) -> dict:
        return {"factor": self.factor, "positive": self.positive, "weight": self.weight}


@dataclass
class ShouldBuyResult:
    should_buy: bool
    score: int
    verdict: Verdict
    reason: str
    factors: list[ShouldBuyFactor] = field(default_factory=list)
    months_since_release: int | None = None

    @property
    def verdict_label(self) -> str:
        return VERDICT_LABELS[self.verdict]

    def to_dict(self) -> dict:
        return {
            "should_buy": self.should_buy,
            "score": self.score,
            "verdict": self.verdict.value,
            "verdict_label": self.verdict_label,
            "reason": self.reason,
            "factors": [f.to_dict() for f in self.factors],
            "months_since_release": self.months_since_release,
        }
