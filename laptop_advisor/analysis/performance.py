"""Laptop performance scoring: maps a ParsedSpec to 0-100 suitability scores.

Component scores (CPU, GPU, RAM, SSD, battery, weight, refresh rate, price,
screen size) are step functions over fixed breakpoints. Use-case scores are
fixed weighted sums of those components:

- Gaming: GPU 50% + CPU 25% + RAM 15% + refresh rate 10%
- Work (coding): CPU 35% + RAM 30% + SSD 20% + resolution baseline 15%
- Video editing: GPU 30% + CPU 30% + RAM 25% + SSD 15%
- Student: price 30% + weight 25% + battery 25% + base performance 20%
- Portable: weight 40% + battery 30% + screen size 30%
- Overall: gaming 20% + work 25% + video 20% + student 20% + portable 15%

Missing or unrecognized inputs never raise: they fall back to a neutral
default score instead.
"""

from __future__ import annotations

import logging
import math
import re

from ..common.models import ParsedSpec
from .models import (
    DisplaySuitability,
    PortSuitability,
    TechFeatures,
    UsageScores,
    WorkRating,
    WorkSuitability,
    WorkTaskRating,
)

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50

# Placeholder for the resolution factor of the work score, which is not modeled
WORK_RESOLUTION_BASELINE = 60

# First match wins, so each family lists its strongest/most specific pattern first.
CPU_SCORE_TABLE: list[tuple[re.Pattern[str], int]] = [
    # Intel Core Ultra
    (re.compile(r"ultra\s*[79]\b"), 90),
    (re.compile(r"ultra\s*5\b"), 80),
    # Intel 13th/14th gen
    (re.compile(r"i9[-\s]?1[34]\d{3}hx"), 95),
    (re.compile(r"i9[-\s]?1[34]\d{3}h"), 85),
    (re.compile(r"i7[-\s]?1[34]\d{3}hx"), 88),
    (re.compile(r"i7[-\s]?1[34]\d{3}h"), 78),
    (re.compile(r"i5[-\s]?1[34]\d{3}h"), 68),
    (re.compile(r"i5[-\s]?1[34]\d{2,3}u"), 60),
    (re.compile(r"i3[-\s]?1[34]\d{2,3}"), 45),
    # AMD Ryzen AI / 7000-9000 series
    (re.compile(r"ryzen\s*ai\s*(max\+?\s*)?9"), 90),
    (re.compile(r"ryzen\s*ai\s*7"), 80),
    (re.compile(r"ryzen\s*ai\s*5"), 70),
    (re.compile(r"ryzen\s*9\s*[7-9]\d{3}"), 90),
    (re.compile(r"ryzen\s*7\s*[7-9]\d{3}"), 80),
    (re.compile(r"ryzen\s*5\s*[7-9]\d{3}"), 70),
    # AMD Ryzen 5000/6000 series and unnumbered models
    (re.compile(r"ryzen\s*9"), 82),
    (re.compile(r"ryzen\s*7"), 72),
    (re.compile(r"ryzen\s*5"), 62),
    # Apple silicon
    (re.compile(r"\bm4\s*max\b"), 98),
    (re.compile(r"\bm4\s*pro\b"), 92),
    (re.compile(r"\bm4\b"), 85),
    (re.compile(r"\bm3\s*max\b"), 95),
    (re.compile(r"\bm3\s*pro\b"), 90),
    (re.compile(r"\bm3\b"), 82),
    (re.compile(r"\bm2\b"), 75),
]

GPU_SCORE_TABLE: dict[int, int] = {
    1: 10,
    2: 20,
    3: 35,
    4: 45,
    5: 55,
    6: 65,
    7: 75,
    8: 85,
    9: 92,
    10: 100,
}

_WORK_RATING_LABELS: dict[WorkRating, str] = {
    WorkRating.EXCELLENT: "이 정도면 충분",
    WorkRating.GOOD: "문제없이 사용 가능",
    WorkRating.FAIR: "조금 아쉬움",
    WorkRating.POOR: "추천하지 않음",
}


def round_half_up(value: float) -> int:
    """Round half up (2.5 -> 3), matching how scores are displayed."""
    return int(math.floor(value + 0.5))


def _clamp_score(value: int) -> int:
    return max(0, min(100, value))


# ----------------------------------------------------------------------
# Component scores
# ----------------------------------------------------------------------


def score_cpu(cpu: str | None) -> int:
    """Lexical tier lookup of a CPU model string (unknown -> 50)."""
    if not cpu:
        return NEUTRAL_SCORE
    lower = cpu.lower()
    for pattern, score in CPU_SCORE_TABLE:
        if pattern.search(lower):
            return score
    return NEUTRAL_SCORE


def score_gpu(tier: int | None) -> int:
    if tier is None:
        return GPU_SCORE_TABLE[1]
    return GPU_SCORE_TABLE.get(tier, GPU_SCORE_TABLE[1])


def score_ram(ram_gb: int) -> int:
    if ram_gb >= 64:
        return 100
    if ram_gb >= 32:
        return 85
    if ram_gb >= 16:
        return 70
    if ram_gb >= 8:
        return 50
    return 25


def score_ssd(ssd_gb: int) -> int:
    if ssd_gb >= 2048:
        return 100
    if ssd_gb >= 1024:
        return 80
    if ssd_gb >= 512:
        return 60
    if ssd_gb >= 256:
        return 40
    return 20


def score_battery(battery_wh: float | None) -> int:
    if not battery_wh:
        return NEUTRAL_SCORE
    if battery_wh >= 90:
        return 100
    if battery_wh >= 72:
        return 80
    if battery_wh >= 60:
        return 65
    if battery_wh >= 45:
        return 50
    return 30


def score_weight(weight_kg: float | None) -> int:
    """Lighter is better."""
    if not weight_kg:
        return NEUTRAL_SCORE
    if weight_kg <= 1.0:
        return 100
    if weight_kg <= 1.3:
        return 90
    if weight_kg <= 1.5:
        return 80
    if weight_kg <= 1.8:
        return 65
    if weight_kg <= 2.0:
        return 55
    if weight_kg <= 2.5:
        return 40
    if weight_kg <= 3.0:
        return 25
    return 10


def score_refresh_rate(hz: int | None) -> int:
    if not hz:
        return NEUTRAL_SCORE
    if hz >= 240:
        return 100
    if hz >= 165:
        return 85
    if hz >= 144:
        return 75
    if hz >= 120:
        return 65
    if hz >= 90:
        return 55
    return 40


def score_price(price: int | None) -> int:
    """Cheaper is better (student budget)."""
    if not price:
        return NEUTRAL_SCORE
    if price < 600_000:
        return 100
    if price < 800_000:
        return 85
    if price < 1_000_000:
        return 70
    if price < 1_300_000:
        return 55
    if price < 1_600_000:
        return 40
    if price < 2_000_000:
        return 25
    return 10


def score_screen_size(inches: float | None) -> int:
    """Smaller screens are more portable (unknown -> 60)."""
    if not inches:
        return 60
    if inches <= 13.3:
        return 100
    if inches <= 14:
        return 85
    if inches <= 15.6:
        return 65
    return 40


# ----------------------------------------------------------------------
# Use-case scores
# ----------------------------------------------------------------------


def calculate_usage_scores(
    spec: ParsedSpec,
    current_price: int | None = None,
) -> UsageScores:
    """Compute per-use-case suitability scores for a laptop.

    Args:
        spec: Normalized hardware spec.
        current_price: Current lowest price in KRW, used by the student score.

    Returns:
        UsageScores with every field clamped to [0, 100].
    """
    cpu = score_cpu(spec.cpu)
    gpu = score_gpu(spec.gpu_tier)
    ram = score_ram(spec.ram_gb)
    ssd = score_ssd(spec.ssd_gb)
    weight = score_weight(spec.weight_kg)
    battery = score_battery(spec.battery_wh)
    refresh = score_refresh_rate(spec.refresh_rate)
    price = score_price(current_price)
    size = score_screen_size(spec.screen_size)

    gaming = round_half_up(gpu * 0.5 + cpu * 0.25 + ram * 0.15 + refresh * 0.1)
    work = round_half_up(cpu * 0.35 + ram * 0.3 + ssd * 0.2 + WORK_RESOLUTION_BASELINE * 0.15)
    video = round_half_up(gpu * 0.3 + cpu * 0.3 + ram * 0.25 + ssd * 0.15)

    base = round_half_up(cpu * 0.5 + ram * 0.3 + ssd * 0.2)
    student = round_half_up(price * 0.3 + weight * 0.25 + battery * 0.25 + base * 0.2)

    portable = round_half_up(weight * 0.4 + battery * 0.3 + size * 0.3)

    overall = round_half_up(
        gaming * 0.2 + work * 0.25 + video * 0.2 + student * 0.2 + portable * 0.15
    )

    scores = UsageScores(
        gaming=_clamp_score(gaming),
        work=_clamp_score(work),
        student=_clamp_score(student),
        video=_clamp_score(video),
        portable=_clamp_score(portable),
        overall=_clamp_score(overall),
    )
    logger.debug(
        "Usage scores for %s (gpu tier %s): %s", spec.cpu, spec.gpu_tier, scores.to_dict()
    )
    return scores


def get_score_label(score: int) -> str:
    if score >= 80:
        return "매우 적합"
    if score >= 60:
        return "적합"
    if score >= 40:
        return "보통"
    return "부적합"


# ----------------------------------------------------------------------
# Work suitability
# ----------------------------------------------------------------------


def _work_rating(score: int) -> WorkRating:
    if score >= 75:
        return WorkRating.EXCELLENT
    if score >= 55:
        return WorkRating.GOOD
    if score >= 35:
        return WorkRating.FAIR
    return WorkRating.POOR


def _rate(score: int) -> WorkTaskRating:
    rating = _work_rating(score)
    return WorkTaskRating(score=score, rating=rating, label=_WORK_RATING_LABELS[rating])


def calculate_work_suitability(spec: ParsedSpec) -> WorkSuitability:
    """Rate four professional workloads from the same component scores."""
    cpu = score_cpu(spec.cpu)
    gpu = score_gpu(spec.gpu_tier)
    ram = score_ram(spec.ram_gb)
    ssd = score_ssd(spec.ssd_gb)

    return WorkSuitability(
        coding=_rate(round_half_up(cpu * 0.4 + ram * 0.35 + ssd * 0.25)),
        video_edit=_rate(round_half_up(cpu * 0.3 + gpu * 0.3 + ram * 0.25 + ssd * 0.15)),
        photoshop=_rate(round_half_up(gpu * 0.25 + cpu * 0.35 + ram * 0.25 + ssd * 0.15)),
        three_d=_rate(round_half_up(gpu * 0.4 + cpu * 0.3 + ram * 0.2 + ssd * 0.1)),
    )


# ----------------------------------------------------------------------
# Display
# ----------------------------------------------------------------------

_RESOLUTION_DIMS = re.compile(r"(\d{3,4})\s*[x×*]\s*(\d{3,4})")
_RESOLUTION_KEYWORDS: list[tuple[str, int]] = [
    ("4k", 3840),
    ("uhd", 3840),
    ("wqxga", 2560),
    ("qhd", 2560),
]


def resolution_width(resolution: str | None) -> int | None:
    """Horizontal pixel count from "2560x1600" or a named resolution."""
    if not resolution:
        return None
    lower = resolution.lower()
    match = _RESOLUTION_DIMS.search(lower)
    if match:
        return max(int(match.group(1)), int(match.group(2)))
    for keyword, width in _RESOLUTION_KEYWORDS:
        if keyword in lower:
            return width
    return None


def _is_oled(spec: ParsedSpec) -> bool:
    return bool(spec.panel_type) and "oled" in spec.panel_type.lower()


def analyze_display_suitability(spec: ParsedSpec) -> DisplaySuitability:
    width = resolution_width(spec.resolution) or 0
    is_high_res = width >= 2560
    is_high_refresh = spec.effective_refresh_rate >= 120
    is_oled = _is_oled(spec)
    is_bright = (spec.brightness or 0) >= 400

    return DisplaySuitability(
        for_doc=True,
        for_media=is_oled or is_bright or is_high_res,
        for_game=is_high_refresh,
        for_design=is_high_res or is_oled,
        summary=_build_display_summary(spec, width),
    )


def _build_display_summary(spec: ParsedSpec, width: int) -> str:
    parts: list[str] = []
    if _is_oled(spec):
        parts.append("OLED 패널로 색감이 뛰어납니다")
    if spec.effective_refresh_rate >= 144:
        parts.append(f"{spec.effective_refresh_rate}Hz 고주사율로 게임에 적합합니다")
    if width >= 3840:
        parts.append("4K 해상도로 선명한 화질을 제공합니다")
    elif width >= 2560:
        parts.append("QHD 해상도로 작업에 적합합니다")
    if not parts:
        parts.append("기본적인 문서 작업과 영상 감상에 적합합니다")
    return ". ".join(parts) + "."


# ----------------------------------------------------------------------
# Ports
# ----------------------------------------------------------------------


def analyze_port_suitability(spec: ParsedSpec) -> PortSuitability:
    usb_a = spec.usb_a_count or 0
    usb_c = spec.usb_c_count or 0

    can_dual_monitor = usb_c >= 2 or (spec.has_hdmi and usb_c >= 1) or spec.thunderbolt
    can_external_gpu = spec.thunderbolt
    few_ports = usb_c == 0 and usb_a <= 1

    details: list[str] = []
    if spec.thunderbolt:
        details.append("썬더볼트 지원 - 외장 GPU 연결 가능")
    if can_dual_monitor:
        details.append("모니터 2대 연결 가능")
    if not spec.lan_port:
        details.append("유선 LAN 없음 (USB 허브 필요)")
    if few_ports:
        details.append("포트 수가 적어 허브 추천")

    if spec.thunderbolt and can_dual_monitor:
        summary = "포트가 풍부합니다. 모니터 2대 연결과 외장 GPU도 지원합니다."
    elif can_dual_monitor:
        summary = "모니터 2대 연결이 가능합니다."
    elif few_ports:
        summary = "포트가 부족합니다. USB 허브를 추천합니다."
    else:
        summary = "기본적인 연결에 충분합니다."

    return PortSuitability(
        can_dual_monitor=can_dual_monitor,
        can_external_gpu=can_external_gpu,
        port_score=calculate_port_score(spec),
        summary=summary,
        details=details,
    )


def calculate_port_score(spec: ParsedSpec) -> int:
    score = 40
    score += (spec.usb_a_count or 0) * 10
    score += (spec.usb_c_count or 0) * 15
    if spec.thunderbolt:
        score += 20
    if spec.has_hdmi:
        score += 10
    if spec.sd_card:
        score += 10
    if spec.lan_port:
        score += 5
    return min(100, score)


# ----------------------------------------------------------------------
# Tech features
# ----------------------------------------------------------------------


def _wifi_generation(wifi_version: str | None) -> str | None:
    """Normalize "Wi-Fi 6E" / "802.11be" to "6", "6e" or "7"."""
    if not wifi_version:
        return None
    compact = re.sub(r"[\s\-]", "", wifi_version.lower())
    if "wifi7" in compact or "802.11be" in compact:
        return "7"
    if "wifi6e" in compact:
        return "6e"
    if "wifi6" in compact or "802.11ax" in compact:
        return "6"
    return None


def _version_number(text: str | None) -> float | None:
    if not text:
        return None
    match = re.search(r"(\d+(?:\.\d+)?)", text)
    return float(match.group(1)) if match else None


def analyze_tech_features(spec: ParsedSpec) -> TechFeatures:
    """Detect modern-hardware features and build an ordered badge list.

    Within a category only the highest tier earns a badge (Wi-Fi 7 hides
    Wi-Fi 6E, PCIe 5.0 hides PCIe 4.0).
    """
    wifi = _wifi_generation(spec.wifi_version)
    bt = _version_number(spec.bt_version)
    pcie = _version_number(spec.pcie_gen)
    ram_type = (spec.ram_type or "").lower()
    panel = (spec.panel_type or "").lower()

    features = TechFeatures(
        wifi6=wifi == "6",
        wifi6e=wifi == "6e",
        wifi7=wifi == "7",
        bt5=bt is not None and 5.0 <= bt < 5.2,
        bt53=bt is not None and bt >= 5.2,
        pcie_gen4=pcie is not None and int(pcie) == 4,
        pcie_gen5=pcie is not None and int(pcie) >= 5,
        ddr5="ddr5" in ram_type,
        npu=spec.has_npu,
        oled="oled" in panel,
        mini_led=re.sub(r"[\s\-]", "", panel) == "miniled",
        thunderbolt4=spec.thunderbolt,
    )

    highlights = features.highlights
    if features.wifi7:
        highlights.append("Wi-Fi 7 최신 무선")
    elif features.wifi6e:
        highlights.append("Wi-Fi 6E 고속 무선")
    if features.ddr5:
        highlights.append("DDR5 최신 메모리")
    if features.pcie_gen5:
        highlights.append("PCIe 5.0 초고속 SSD")
    elif features.pcie_gen4:
        highlights.append("PCIe 4.0 고속 SSD")
    if features.npu:
        highlights.append("NPU 탑재 AI 가속")
    if features.oled:
        highlights.append("OLED 디스플레이")
    if features.thunderbolt4:
        highlights.append("썬더볼트 4 지원")

    return features
