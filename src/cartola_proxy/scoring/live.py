"""Live per-player score map, rebuilt on every standings request."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Mapping, Optional

from cartola_proxy.config import UpstreamRoutes
from cartola_proxy.upstream import UpstreamClient


logger = logging.getLogger(__name__)

SCORE_FIELD = "pontuacao"


def score_value(entry: Any) -> Optional[float]:
    """Return the numeric score in ``entry`` (a number or a player mapping)."""

    if isinstance(entry, Mapping):
        entry = entry.get(SCORE_FIELD)
    if isinstance(entry, bool) or not isinstance(entry, (int, float)):
        return None
    if not math.isfinite(entry):
        return None
    return float(entry)


def parse_live_scores(payload: Any) -> Dict[str, float]:
    players = payload.get("atletas") if isinstance(payload, Mapping) else None
    if not isinstance(players, Mapping):
        return {}
    scores: Dict[str, float] = {}
    for player_id, entry in players.items():
        value = score_value(entry)
        if value is not None:
            scores[str(player_id)] = value
    return scores


async def fetch_live_scores(client: UpstreamClient, routes: UpstreamRoutes) -> Dict[str, float]:
    payload = await client.fetch_or_raise(routes.live_scores, context="live scores")
    scores = parse_live_scores(payload)
    logger.info("Loaded live scores for %s players", len(scores))
    return scores
