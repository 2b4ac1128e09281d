"""Market status gate: is live scoring meaningful right now?"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from cartola_proxy.config import UpstreamRoutes
from cartola_proxy.ingest.participants import coerce_id
from cartola_proxy.models import MarketStatus
from cartola_proxy.upstream import UpstreamClient


logger = logging.getLogger(__name__)

MARKET_CLOSED = 2


def parse_market_status(payload: Any) -> MarketStatus:
    data = payload if isinstance(payload, Mapping) else {}
    state_code = coerce_id(data.get("status_mercado"))
    state = "closed" if state_code == MARKET_CLOSED else "open"
    return MarketStatus(
        round=coerce_id(data.get("rodada_atual")),
        market_state=state,
        in_play=data.get("bola_rolando") is True,
    )


class MarketStatusGate:
    def __init__(self, client: UpstreamClient, routes: UpstreamRoutes) -> None:
        self.client = client
        self.routes = routes

    async def fetch_raw(self) -> Any:
        return await self.client.fetch_or_raise(self.routes.market_status, context="market status")

    async def check_status(self) -> MarketStatus:
        status = parse_market_status(await self.fetch_raw())
        logger.debug(
            "Market round=%s state=%s in_play=%s",
            status.round,
            status.market_state,
            status.in_play,
        )
        return status
