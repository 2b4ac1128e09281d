"""Combine team rosters with live player scores into sorted standings."""

from __future__ import annotations

import asyncio
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, List, Mapping, Protocol, Sequence

from cartola_proxy.errors import ProxyError
from cartola_proxy.models import AggregatedStanding, ParticipantRecord

from .live import score_value


logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
DEFAULT_MAX_CONCURRENCY = 8


class RosterSource(Protocol):
    async def get_roster(self, team_id: int) -> List[int]:
        ...


def round_score(total: Decimal) -> float:
    """Round to cents with ties going away from zero (5.005 -> 5.01)."""

    rounded = total.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    # normalizes -0.00 to 0.0
    return float(rounded) + 0.0


def sum_roster(roster: Iterable[int], live_scores: Mapping[str, Any]) -> float:
    # Decimal from repr keeps 2.505 as written instead of its binary approximation.
    total = Decimal(0)
    for player_id in roster:
        value = score_value(live_scores.get(str(player_id)))
        if value is not None:
            total += Decimal(repr(value))
    return round_score(total)


def sort_standings(standings: Sequence[AggregatedStanding]) -> List[AggregatedStanding]:
    """Sort descending by score; ties keep discovery order."""

    return sorted(standings, key=lambda standing: standing.partial_score, reverse=True)


def zero_standings(participants: Iterable[ParticipantRecord]) -> List[AggregatedStanding]:
    return [
        AggregatedStanding(team_id=participant.team_id, display_name=participant.display_name)
        for participant in participants
    ]


async def _team_roster(source: RosterSource, participant: ParticipantRecord, semaphore: asyncio.Semaphore) -> List[int]:
    async with semaphore:
        try:
            return await source.get_roster(participant.team_id)
        except ProxyError as exc:
            logger.warning(
                "Roster for team %s (%s) unavailable, scoring 0: %s %s",
                participant.team_id,
                participant.display_name,
                exc.upstream_status,
                exc.upstream_body,
            )
            return []


async def aggregate(
    participants: Sequence[ParticipantRecord],
    live_scores: Mapping[str, Any],
    roster_source: RosterSource,
    *,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
) -> List[AggregatedStanding]:
    """Score every participant and return standings sorted by partial score.

    Rosters are fetched concurrently. A team whose roster cannot be fetched or
    parsed still appears, with a score of 0.
    """

    semaphore = asyncio.Semaphore(max(1, max_concurrency))
    rosters = await asyncio.gather(
        *(_team_roster(roster_source, participant, semaphore) for participant in participants)
    )
    standings = [
        AggregatedStanding(
            team_id=participant.team_id,
            display_name=participant.display_name,
            partial_score=sum_roster(roster, live_scores),
        )
        for participant, roster in zip(participants, rosters)
    ]
    return sort_standings(standings)
