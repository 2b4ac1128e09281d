"""League lookup through an ordered chain of upstream route strategies."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Tuple
from urllib.parse import quote

from cartola_proxy.config import UpstreamRoutes
from cartola_proxy.errors import LeagueNotFound, ProxyError
from cartola_proxy.ingest.participants import coerce_id, dig
from cartola_proxy.upstream import UpstreamClient, UpstreamResponse


logger = logging.getLogger(__name__)

SEARCH_RESULT_PATHS = ((), ("ligas",), ("resultados",))


@dataclass(frozen=True)
class ResolutionAttempt:
    route: str
    path: str
    status_code: Optional[int]
    ok: bool
    response: UpstreamResponse = field(repr=False, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "route": self.route,
            "path": self.path,
            "status": self.status_code,
            "ok": self.ok,
        }


@dataclass
class ResolvedLeague:
    identifier: str
    payload: Any
    route: str
    attempts: List[ResolutionAttempt]


Strategy = Callable[[str, List[ResolutionAttempt]], Awaitable[Optional[Tuple[str, Any]]]]


def is_numeric_identifier(identifier: str) -> bool:
    return identifier.isdecimal()


def _search_entries(payload: Any) -> List[Any]:
    for path in SEARCH_RESULT_PATHS:
        candidate = dig(payload, path) if path else payload
        if isinstance(candidate, list):
            return candidate
    return []


def match_search_result(payload: Any, identifier: str) -> Optional[int]:
    """Return the numeric id of the search entry matching ``identifier``."""

    for entry in _search_entries(payload):
        if not isinstance(entry, Mapping):
            continue
        league_id = coerce_id(entry.get("liga_id")) or coerce_id(entry.get("id"))
        if league_id is None:
            continue
        if entry.get("slug") == identifier or str(league_id) == identifier:
            return league_id
    return None


class LeagueResolver:
    """Try plural, singular, then search-and-retry; first success wins."""

    def __init__(self, client: UpstreamClient, routes: UpstreamRoutes) -> None:
        self.client = client
        self.routes = routes
        self.strategies: List[Strategy] = [
            self._direct("plural", routes.league_plural),
            self._direct("singular", routes.league_singular),
            self._search_and_retry,
        ]

    async def resolve(self, identifier: str) -> ResolvedLeague:
        identifier = identifier.strip()
        if not identifier:
            raise LeagueNotFound("League identifier is empty.")

        attempts: List[ResolutionAttempt] = []
        for strategy in self.strategies:
            found = await strategy(identifier, attempts)
            if found is not None:
                route, payload = found
                logger.info("League %r resolved via %s route", identifier, route)
                return ResolvedLeague(identifier=identifier, payload=payload, route=route, attempts=attempts)
        raise self._last_error(identifier, attempts)

    def _direct(self, name: str, template: str) -> Strategy:
        async def strategy(identifier: str, attempts: List[ResolutionAttempt]) -> Optional[Tuple[str, Any]]:
            return await self._try_route(name, template, identifier, attempts)

        return strategy

    async def _try_route(
        self,
        name: str,
        template: str,
        identifier: str,
        attempts: List[ResolutionAttempt],
    ) -> Optional[Tuple[str, Any]]:
        path = template.format(identifier=quote(identifier, safe=""))
        result = await self.client.fetch(path)
        attempts.append(ResolutionAttempt(name, path, result.status_code, result.ok, result))
        if result.ok:
            return name, result.payload
        return None

    async def _search_and_retry(
        self,
        identifier: str,
        attempts: List[ResolutionAttempt],
    ) -> Optional[Tuple[str, Any]]:
        if is_numeric_identifier(identifier):
            return None

        path = self.routes.league_search
        result = await self.client.fetch(path, params={self.routes.league_search_param: identifier})
        attempts.append(ResolutionAttempt("search", path, result.status_code, result.ok, result))
        if not result.ok:
            return None

        league_id = match_search_result(result.payload, identifier)
        if league_id is None:
            logger.info("League search for %r returned no matching entry", identifier)
            return None

        resolved = str(league_id)
        for name, template in (
            ("plural-by-id", self.routes.league_plural),
            ("singular-by-id", self.routes.league_singular),
        ):
            found = await self._try_route(name, template, resolved, attempts)
            if found is not None:
                return found
        return None

    def _last_error(self, identifier: str, attempts: List[ResolutionAttempt]) -> ProxyError:
        failures = [attempt for attempt in attempts if not attempt.ok]
        details = {"attempts": [attempt.to_dict() for attempt in attempts]}
        if not failures:
            return LeagueNotFound(f"League {identifier!r} could not be resolved.", details=details)
        last = failures[-1]
        error = last.response.to_error(
            has_token=self.client.has_token,
            context=f"league {identifier!r}",
            not_found=LeagueNotFound,
        )
        error.details = details
        logger.warning(
            "League %r unresolved after %s attempts; last %s -> %s %s",
            identifier,
            len(attempts),
            last.path,
            last.status_code,
            last.response.body,
        )
        return error
