"""Input adapters that normalize raw upstream payloads."""

from .participants import (
    PARTICIPANT_ARRAY_PATHS,
    find_participant_entries,
    normalize_participants,
    summarize_league,
)
from .rosters import extract_player_ids

__all__ = [
    "PARTICIPANT_ARRAY_PATHS",
    "extract_player_ids",
    "find_participant_entries",
    "normalize_participants",
    "summarize_league",
]
