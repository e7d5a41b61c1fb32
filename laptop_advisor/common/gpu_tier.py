"""GPU model -> performance tier (1 = integrated graphics, 10 = top-tier discrete).

Keys are matched as lowercase substrings in declaration order, so a more
specific model ("rtx 3080 ti") must be listed before its prefix ("rtx 3080").
"""

from __future__ import annotations

MIN_GPU_TIER = 1
MAX_GPU_TIER = 10

GPU_TIER_TABLE: list[tuple[str, int]] = [
    # Integrated graphics
    ("iris xe", 1),
    ("iris plus", 1),
    ("uhd", 1),
    ("radeon 890m", 2),
    ("radeon 780m", 2),
    ("radeon 760m", 1),
    ("radeon 680m", 1),
    # NVIDIA MX
    ("mx550", 2),
    ("mx450", 2),
    ("mx350", 1),
    # NVIDIA RTX 40 (mobile)
    ("rtx 4090", 10),
    ("rtx 4080", 9),
    ("rtx 4070", 8),
    ("rtx 4060", 7),
    ("rtx 4050", 6),
    # NVIDIA RTX 30 (mobile)
    ("rtx 3080 ti", 8),
    ("rtx 3080", 7),
    ("rtx 3070 ti", 7),
    ("rtx 3070", 6),
    ("rtx 3060", 6),
    ("rtx 3050 ti", 5),
    ("rtx 3050", 4),
    # NVIDIA RTX 20 (mobile)
    ("rtx 2080", 6),
    ("rtx 2070", 5),
    ("rtx 2060", 5),
    # NVIDIA GTX
    ("gtx 1660 ti", 4),
    ("gtx 1650 ti", 3),
    ("gtx 1650", 3),
    ("gtx 1050 ti", 2),
    ("gtx 1050", 2),
    # AMD Radeon RX (mobile)
    ("rx 7900m", 9),
    ("rx 7700s", 7),
    ("rx 7600m", 6),
    ("rx 6850m", 7),
    ("rx 6800m", 6),
    ("rx 6700m", 5),
    ("rx 6600m", 5),
    ("rx 6500m", 3),
]


def clamp_gpu_tier(tier: int) -> int:
    return max(MIN_GPU_TIER, min(MAX_GPU_TIER, tier))


def get_gpu_tier(gpu: str | None) -> int:
    """Resolve a GPU model string to its tier.

    Empty or unrecognized strings are treated as integrated graphics (tier 1).
    """
    if not gpu:
        return MIN_GPU_TIER
    lower = gpu.lower()
    for key, tier in GPU_TIER_TABLE:
        if key in lower:
            return tier
    return MIN_GPU_TIER
