"""League resolution across unstable upstream routes."""

from .resolver import LeagueResolver, ResolutionAttempt, ResolvedLeague, match_search_result

__all__ = [
    "LeagueResolver",
    "ResolutionAttempt",
    "ResolvedLeague",
    "match_search_result",
]
