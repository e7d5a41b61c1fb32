"""Per-game frame-rate estimates from a GPU tier.

FPS figures are 1080p estimates per GPU tier, stored as
(high settings, medium settings, low settings).
"""

from __future__ import annotations

from ..common.gpu_tier import clamp_gpu_tier
from .models import GameEstimate, Playability

FPS_CAP = 360

# slug -> (display name, {gpu_tier: (fps_high, fps_mid, fps_low)})
GAME_FPS_TABLE: dict[str, tuple[str, dict[int, tuple[int, int, int]]]] = {
    "lol": ("리그 오브 레전드", {
        1: (80, 50, 30),
        2: (144, 90, 60),
        3: (200, 144, 100),
        4: (300, 200, 144),
        5: (360, 300, 200),
        6: (360, 360, 300),
        7: (360, 360, 360),
        8: (360, 360, 360),
        9: (360, 360, 360),
        10: (360, 360, 360),
    }),
    "valorant": ("발로란트", {
        1: (60, 40, 25),
        2: (120, 80, 50),
        3: (165, 120, 80),
        4: (240, 165, 120),
        5: (360, 240, 165),
        6: (360, 360, 240),
        7: (360, 360, 360),
        8: (360, 360, 360),
        9: (360, 360, 360),
        10: (360, 360, 360),
    }),
    "overwatch2": ("오버워치 2", {
        1: (35, 20, 12),
        2: (70, 45, 30),
        3: (120, 80, 55),
        4: (165, 120, 80),
        5: (200, 165, 120),
        6: (240, 200, 165),
        7: (300, 240, 200),
        8: (360, 300, 240),
        9: (360, 360, 300),
        10: (360, 360, 360),
    }),
    "pubg": ("배틀그라운드", {
        1: (20, 12, 7),
        2: (40, 25, 15),
        3: (60, 40, 25),
        4: (90, 60, 40),
        5: (120, 90, 60),
        6: (144, 120, 90),
        7: (165, 144, 120),
        8: (200, 165, 144),
        9: (240, 200, 165),
        10: (300, 240, 200),
    }),
    "gtav": ("GTA V", {
        1: (30, 18, 10),
        2: (60, 40, 25),
        3: (90, 65, 45),
        4: (120, 90, 65),
        5: (144, 120, 90),
        6: (165, 144, 120),
        7: (200, 165, 144),
        8: (240, 200, 165),
        9: (300, 240, 200),
        10: (360, 300, 240),
    }),
    "cyberpunk2077": ("사이버펑크 2077", {
        1: (10, 6, 3),
        2: (20, 12, 7),
        3: (35, 22, 13),
        4: (50, 35, 22),
        5: (65, 50, 35),
        6: (80, 65, 45),
        7: (100, 80, 60),
        8: (120, 100, 75),
        9: (144, 120, 90),
        10: (165, 144, 110),
    }),
    "eldenring": ("엘든링", {
        1: (20, 12, 8),
        2: (40, 28, 18),
        3: (60, 45, 30),
        4: (80, 60, 45),
        5: (100, 80, 60),
        6: (120, 100, 80),
        7: (144, 120, 100),
        8: (144, 144, 120),
        9: (144, 144, 144),
        10: (144, 144, 144),
    }),
    "diablo4": ("디아블로 4", {
        1: (25, 15, 8),
        2: (50, 30, 20),
        3: (80, 55, 35),
        4: (100, 80, 55),
        5: (120, 100, 80),
        6: (144, 120, 100),
        7: (165, 144, 120),
        8: (200, 165, 144),
        9: (240, 200, 165),
        10: (300, 240, 200),
    }),
    "lostark": ("로스트아크", {
        1: (50, 30, 20),
        2: (100, 70, 45),
        3: (144, 100, 70),
        4: (200, 144, 100),
        5: (240, 200, 144),
        6: (300, 240, 200),
        7: (360, 300, 240),
        8: (360, 360, 300),
        9: (360, 360, 360),
        10: (360, 360, 360),
    }),
    "fc25": ("EA FC 25 (피파)", {
        1: (40, 25, 15),
        2: (80, 55, 35),
        3: (120, 85, 60),
        4: (144, 120, 85),
        5: (165, 144, 120),
        6: (200, 165, 144),
        7: (240, 200, 165),
        8: (300, 240, 200),
        9: (360, 300, 240),
        10: (360, 360, 300),
    }),
    "maple": ("메이플스토리", {
        1: (60, 40, 25),
        2: (120, 80, 55),
        3: (200, 144, 100),
        4: (300, 200, 144),
        5: (360, 300, 200),
        6: (360, 360, 300),
        7: (360, 360, 360),
        8: (360, 360, 360),
        9: (360, 360, 360),
        10: (360, 360, 360),
    }),
}

PLAYABILITY_LABELS: dict[Playability, str] = {
    Playability.EXCELLENT: "매우 쾌적",
    Playability.GOOD: "원활",
    Playability.FAIR: "간신히 가능",
    Playability.POOR: "권장 안 함",
}

_PLAYABILITY_RANK = {
    Playability.EXCELLENT: 0,
    Playability.GOOD: 1,
    Playability.FAIR: 2,
    Playability.POOR: 3,
}


def classify_playability(fps_mid: int, refresh_rate: int = 60) -> Playability:
    """Compare medium-settings FPS against a target of min(refresh rate, 60)."""
    target = min(refresh_rate, 60)
    if fps_mid >= target * 2:
        return Playability.EXCELLENT
    if fps_mid >= target:
        return Playability.GOOD
    if fps_mid >= target * 0.6:
        return Playability.FAIR
    return Playability.POOR


def _build_summary(
    game_name: str,
    fps_low: int,
    fps_mid: int,
    fps_high: int,
    playability: Playability,
) -> str:
    if playability == Playability.EXCELLENT:
        return f"최상 옵션에서도 {fps_high}fps로 매우 쾌적하게 즐길 수 있습니다."
    if playability == Playability.GOOD:
        if fps_mid >= 60:
            return f"보통 옵션에서 {fps_mid}fps로 원활하게 플레이 가능합니다."
        return f"낮은 옵션에서 {fps_low}fps로 플레이 가능합니다."
    if playability == Playability.FAIR:
        return f"낮은 옵션에서 {fps_low}fps로 간신히 플레이 가능합니다. 옵션 타협이 필요합니다."
    return f"{game_name}을 원활하게 즐기기 어렵습니다."


def estimate_game_fps(gpu_tier: int, refresh_rate: int = 60) -> list[GameEstimate]:
    """Estimate FPS and playability for every game in the catalog.

    Args:
        gpu_tier: GPU performance tier; clamped to [1, 10].
        refresh_rate: Display refresh rate in Hz.

    Returns:
        One GameEstimate per catalog entry, in catalog order.
    """
    tier = clamp_gpu_tier(gpu_tier)
    estimates: list[GameEstimate] = []

    for slug, (name, fps_table) in GAME_FPS_TABLE.items():
        fps_high, fps_mid, fps_low = fps_table.get(tier, fps_table[1])
        fps_high = min(fps_high, FPS_CAP)
        fps_mid = min(fps_mid, FPS_CAP)
        fps_low = min(fps_low, FPS_CAP)
        playability = classify_playability(fps_mid, refresh_rate)

        estimates.append(GameEstimate(
            game_name=name,
            game_slug=slug,
            fps_low=fps_low,
            fps_mid=fps_mid,
            fps_high=fps_high,
            playability=playability,
            summary=_build_summary(name, fps_low, fps_mid, fps_high, playability),
        ))

    return estimates


def sort_by_playability(estimates: list[GameEstimate]) -> list[GameEstimate]:
    """Best playability first; ties keep catalog order."""
    return sorted(estimates, key=lambda e: _PLAYABILITY_RANK[e.playability])
