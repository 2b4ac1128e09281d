"""Standings pipeline: market gate, league resolution, rosters, scoring."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, List

import httpx

from cartola_proxy.cache import RosterCache
from cartola_proxy.config import ProxySettings
from cartola_proxy.errors import EmptyParticipants, RequestDeadlineExceeded
from cartola_proxy.ingest import normalize_participants, summarize_league
from cartola_proxy.league import LeagueResolver, ResolvedLeague
from cartola_proxy.market import MarketStatusGate
from cartola_proxy.models import AggregatedStanding, LeagueSummary, MarketStatus, ParticipantRecord
from cartola_proxy.scoring import aggregate, fetch_live_scores, zero_standings
from cartola_proxy.upstream import UpstreamClient


logger = logging.getLogger("uvicorn.error")

STATE_LIVE = "live"
STATE_MARKET_NOT_LIVE = "market_not_live"

PRIVATE_LEAGUE_HINT = (
    "The league payload had no participant list. Private leagues only list "
    "their teams to a member's credential; check GLB_TOKEN."
)


@dataclass
class LiveStandings:
    league: LeagueSummary
    market: MarketStatus
    live: bool
    state: str
    updated_at: datetime
    standings: List[AggregatedStanding]


@dataclass
class LeagueInspection:
    resolved: ResolvedLeague
    summary: LeagueSummary
    participants: List[ParticipantRecord]


class StandingsService:
    """Owns the upstream client and roster cache shared by every request."""

    def __init__(
        self,
        settings: ProxySettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        client: UpstreamClient | None = None,
        roster_cache: RosterCache | None = None,
    ) -> None:
        self.settings = settings
        self.client = client or UpstreamClient(settings, transport=transport)
        routes = settings.routes
        self.market = MarketStatusGate(self.client, routes)
        self.resolver = LeagueResolver(self.client, routes)
        self.rosters = roster_cache or RosterCache(self.client, routes, ttl=settings.roster_ttl)

    async def market_status(self) -> Any:
        return await self.market.fetch_raw()

    async def inspect_league(self, identifier: str) -> LeagueInspection:
        resolved = await self.resolver.resolve(identifier)
        return LeagueInspection(
            resolved=resolved,
            summary=summarize_league(resolved.payload, resolved.identifier),
            participants=normalize_participants(resolved.payload),
        )

    async def live_standings(self, identifier: str) -> LiveStandings:
        try:
            return await asyncio.wait_for(
                self._live_standings(identifier),
                timeout=self.settings.request_deadline,
            )
        except asyncio.TimeoutError as exc:
            logger.warning(
                "Standings for league %r exceeded the %.1fs deadline",
                identifier,
                self.settings.request_deadline,
            )
            raise RequestDeadlineExceeded(
                f"Standings for league {identifier!r} took longer than {self.settings.request_deadline:g}s."
            ) from exc

    async def _live_standings(self, identifier: str) -> LiveStandings:
        status = await self.market.check_status()
        inspection = await self.inspect_league(identifier)
        participants = inspection.participants
        if not participants:
            logger.warning(
                "League %r resolved via %s but no participants were found (keys: %s)",
                identifier,
                inspection.resolved.route,
                _payload_keys(inspection.resolved.payload),
            )
            raise EmptyParticipants(
                f"League {identifier!r} has no participants visible to this proxy.",
                hint=PRIVATE_LEAGUE_HINT,
            )

        if status.is_live:
            live_scores = await fetch_live_scores(self.client, self.settings.routes)
            standings = await aggregate(
                participants,
                live_scores,
                self.rosters,
                max_concurrency=self.settings.max_concurrency,
            )
            state = STATE_LIVE
        else:
            logger.info("Market not live for round %s; returning zeroed standings", status.round)
            standings = zero_standings(participants)
            state = STATE_MARKET_NOT_LIVE

        return LiveStandings(
            league=inspection.summary,
            market=status,
            live=status.is_live,
            state=state,
            updated_at=datetime.now(timezone.utc),
            standings=standings,
        )

    async def aclose(self) -> None:
        await self.client.aclose()


def _payload_keys(payload: Any) -> list[str]:
    if isinstance(payload, dict):
        return sorted(str(key) for key in payload)
    return []
