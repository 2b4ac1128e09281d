"""Canonical records shared by the resolver, cache and aggregator."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class MarketStatus(BaseModel):
    """Snapshot of the upstream market state for the current round."""

    round: Optional[int] = None
    market_state: Literal["open", "closed"]
    in_play: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def is_live(self) -> bool:
        return self.in_play or self.market_state == "closed"


class ParticipantRecord(BaseModel):
    team_id: int
    display_name: str

    model_config = ConfigDict(frozen=True)


class AggregatedStanding(BaseModel):
    team_id: int
    display_name: str
    partial_score: float = Field(default=0.0)

    model_config = ConfigDict(frozen=True)


class LeagueSummary(BaseModel):
    """Identifying fields probed out of an opaque league payload."""

    identifier: str
    league_id: Optional[int] = None
    name: Optional[str] = None
    slug: Optional[str] = None

    model_config = ConfigDict(frozen=True)
