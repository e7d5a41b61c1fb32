"""Analysis engine: usage scoring, game FPS estimates, price analysis, should-buy."""

from .game_fps import PLAYABILITY_LABELS, estimate_game_fps, sort_by_playability
from .performance import (
    analyze_display_suitability,
    analyze_port_suitability,
    analyze_tech_features,
    calculate_usage_scores,
    calculate_work_suitability,
    get_score_label,
)
from .price import analyze_prices, format_price, get_price_budget_label
from .should_buy import evaluate_should_buy, months_since_release

__all__ = [
    "PLAYABILITY_LABELS",
    "analyze_display_suitability",
    "analyze_port_suitability",
    "analyze_prices",
    "analyze_tech_features",
    "calculate_usage_scores",
    "calculate_work_suitability",
    "estimate_game_fps",
    "evaluate_should_buy",
    "format_price",
    "get_price_budget_label",
    "get_score_label",
    "months_since_release",
    "sort_by_playability",
]
