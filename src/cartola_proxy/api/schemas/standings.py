from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel

from cartola_proxy.models import AggregatedStanding, LeagueSummary, MarketStatus


class LiveStandingsResponse(BaseModel):
    league: LeagueSummary
    market: MarketStatus
    live: bool
    state: str
    updated_at: datetime
    standings: List[AggregatedStanding]
