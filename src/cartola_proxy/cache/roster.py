"""In-process roster cache keyed by team id."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from cartola_proxy.config import UpstreamRoutes
from cartola_proxy.ingest import extract_player_ids
from cartola_proxy.upstream import UpstreamClient


logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0


@dataclass(frozen=True)
class RosterCacheEntry:
    team_id: int
    roster: Tuple[int, ...]
    fetched_at: float


class RosterCache:
    """Per-team roster store with a soft TTL.

    There is no locking: two concurrent misses for the same team both hit the
    upstream and the later write wins. Rosters are idempotent fetches, so the
    only cost is duplicated work.
    """

    def __init__(
        self,
        client: UpstreamClient,
        routes: UpstreamRoutes,
        *,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.routes = routes
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[int, RosterCacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def peek(self, team_id: int) -> Optional[RosterCacheEntry]:
        """Return the fresh entry for ``team_id`` without fetching."""

        entry = self._entries.get(team_id)
        if entry is None:
            return None
        if self._clock() - entry.fetched_at >= self.ttl:
            return None
        return entry

    async def get_roster(self, team_id: int) -> List[int]:
        entry = self.peek(team_id)
        if entry is not None:
            logger.debug("Roster cache hit for team %s", team_id)
            return list(entry.roster)

        path = self.routes.team_roster.format(team_id=team_id)
        payload = await self.client.fetch_or_raise(path, context=f"roster of team {team_id}")
        roster = extract_player_ids(payload)
        if not roster:
            logger.warning("No player ids found in roster payload for team %s", team_id)
        self._entries[team_id] = RosterCacheEntry(
            team_id=team_id,
            roster=tuple(roster),
            fetched_at=self._clock(),
        )
        return list(roster)

    def invalidate(self, team_id: int | None = None) -> None:
        if team_id is None:
            self._entries.clear()
        else:
            self._entries.pop(team_id, None)
