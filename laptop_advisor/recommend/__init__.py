"""Recommendation ranker for the budget/usage/priority wizard."""

from .engine import calculate_match_score, rank_recommendations
from .models import RankingCandidate, Recommendation

__all__ = [
    "calculate_match_score",
    "rank_recommendations",
    "RankingCandidate",
    "Recommendation",
]
