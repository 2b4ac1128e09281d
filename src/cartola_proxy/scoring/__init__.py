"""Live score map and standings aggregation."""

from .aggregator import aggregate, round_score, sort_standings, sum_roster, zero_standings
from .live import fetch_live_scores, parse_live_scores, score_value

__all__ = [
    "aggregate",
    "fetch_live_scores",
    "parse_live_scores",
    "round_score",
    "score_value",
    "sort_standings",
    "sum_roster",
    "zero_standings",
]
