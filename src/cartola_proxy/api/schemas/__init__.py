"""Pydantic models for API I/O."""

from .debug import AttemptResponse, ErrorResponse, LeagueDebugResponse, TokenDebugResponse
from .standings import LiveStandingsResponse

__all__ = [
    "AttemptResponse",
    "ErrorResponse",
    "LeagueDebugResponse",
    "LiveStandingsResponse",
    "TokenDebugResponse",
]
