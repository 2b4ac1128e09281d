"""Runtime settings for the proxy, read from the process environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping


logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.cartolafc.globo.com"
DEFAULT_USER_AGENT = "Mozilla/5.0"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_ROSTER_TTL_SECONDS = 300.0
DEFAULT_REQUEST_DEADLINE_SECONDS = 30.0
DEFAULT_MAX_CONCURRENCY = 8
DEFAULT_PORT = 8080

_API_URL_ENV = "CARTOLA_API_URL"
_TOKEN_ENV = "GLB_TOKEN"
_TIMEOUT_ENV = "CARTOLA_TIMEOUT"
_ROSTER_TTL_ENV = "CARTOLA_ROSTER_TTL"
_DEADLINE_ENV = "CARTOLA_REQUEST_DEADLINE"
_CONCURRENCY_ENV = "CARTOLA_MAX_CONCURRENCY"
_USER_AGENT_ENV = "CARTOLA_USER_AGENT"
_ROUTES_PROFILE_ENV = "CARTOLA_ROUTES_PROFILE"
_PORT_ENV = "PORT"


@dataclass(frozen=True)
class UpstreamRoutes:
    """Path templates for every upstream capability the proxy consumes."""

    market_status: str = "/mercado/status"
    live_scores: str = "/atletas/pontuados"
    league_plural: str = "/ligas/{identifier}"
    league_singular: str = "/liga/{identifier}"
    league_search: str = "/ligas"
    league_search_param: str = "q"
    team_roster: str = "/time/id/{team_id}"

    def with_overrides(self, overrides: Mapping[str, str]) -> "UpstreamRoutes":
        known = set(self.__dataclass_fields__)
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise KeyError(f"Unknown upstream route(s): {', '.join(unknown)}")
        return replace(self, **dict(overrides))


@dataclass(frozen=True)
class ProxySettings:
    api_url: str = DEFAULT_API_URL
    token: str = ""
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    roster_ttl: float = DEFAULT_ROSTER_TTL_SECONDS
    request_deadline: float = DEFAULT_REQUEST_DEADLINE_SECONDS
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    port: int = DEFAULT_PORT
    routes: UpstreamRoutes = field(default_factory=UpstreamRoutes)

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ProxySettings":
        """Build settings from ``environ`` (defaults to ``os.environ``)."""

        env = os.environ if environ is None else environ
        routes = UpstreamRoutes()
        profile_path = env.get(_ROUTES_PROFILE_ENV)
        if profile_path:
            from cartola_proxy.config_loader import RouteProfile

            routes = RouteProfile.load(Path(profile_path)).apply(routes)

        return cls(
            api_url=env.get(_API_URL_ENV, DEFAULT_API_URL).rstrip("/"),
            token=env.get(_TOKEN_ENV, "").strip(),
            user_agent=env.get(_USER_AGENT_ENV, DEFAULT_USER_AGENT),
            timeout=_env_float(env, _TIMEOUT_ENV, DEFAULT_TIMEOUT_SECONDS, clamp_min=0.1),
            roster_ttl=_env_float(env, _ROSTER_TTL_ENV, DEFAULT_ROSTER_TTL_SECONDS, clamp_min=0.0),
            request_deadline=_env_float(env, _DEADLINE_ENV, DEFAULT_REQUEST_DEADLINE_SECONDS, clamp_min=1.0),
            max_concurrency=_env_int(env, _CONCURRENCY_ENV, DEFAULT_MAX_CONCURRENCY, min_value=1),
            port=_env_int(env, _PORT_ENV, DEFAULT_PORT, min_value=1),
            routes=routes,
        )


def _env_float(
    env: Mapping[str, str],
    name: str,
    default: float,
    *,
    clamp_min: float | None = None,
) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    return value


def _env_int(env: Mapping[str, str], name: str, default: int, *, min_value: int | None = None) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value
