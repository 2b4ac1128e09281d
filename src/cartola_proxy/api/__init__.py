"""REST facade for the live standings proxy."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from cartola_proxy.api.schemas import (
    AttemptResponse,
    ErrorResponse,
    LeagueDebugResponse,
    LiveStandingsResponse,
    TokenDebugResponse,
)
from cartola_proxy.config import ProxySettings
from cartola_proxy.errors import ProxyError
from cartola_proxy.service import StandingsService


logger = logging.getLogger("uvicorn.error")

ROUTES_BANNER = (
    "Cartola proxy is up. Use /health, /status, /debug/token, "
    "/debug/league/{identifier}, /live/{identifier}"
)


def _clean_identifier(identifier: str) -> str:
    cleaned = identifier.strip()
    if not cleaned:
        raise HTTPException(status_code=400, detail="League identifier must not be blank")
    return cleaned


def create_app(
    settings: ProxySettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    settings = settings or ProxySettings.from_env()
    service = StandingsService(settings, transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            yield
        finally:
            await service.aclose()

    app = FastAPI(title="cartola proxy", lifespan=lifespan)
    app.state.settings = settings
    app.state.service = service

    @app.exception_handler(ProxyError)
    async def proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
        logger.warning(
            "%s %s failed: %s (upstream %s) %s",
            request.method,
            request.url.path,
            exc.kind,
            exc.upstream_status,
            exc.upstream_body,
        )
        body = ErrorResponse.model_validate(exc.to_dict())
        return JSONResponse(status_code=exc.http_status, content=body.model_dump(mode="json"))

    @app.get("/", response_class=PlainTextResponse)
    async def index() -> str:
        return ROUTES_BANNER

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/status")
    async def market_status() -> Any:
        return await service.market_status()

    @app.get("/debug/token", response_model=TokenDebugResponse)
    async def debug_token() -> TokenDebugResponse:
        return TokenDebugResponse(has_token=settings.has_token)

    @app.get("/debug/league/{identifier}", response_model=LeagueDebugResponse)
    async def debug_league(identifier: str) -> LeagueDebugResponse:
        inspection = await service.inspect_league(_clean_identifier(identifier))
        resolved = inspection.resolved
        payload = resolved.payload
        return LeagueDebugResponse(
            identifier=resolved.identifier,
            route=resolved.route,
            attempts=[AttemptResponse(**attempt.to_dict()) for attempt in resolved.attempts],
            keys=sorted(str(key) for key in payload) if isinstance(payload, dict) else [],
            participant_count=len(inspection.participants),
            league=inspection.summary,
        )

    @app.get("/live/{identifier}", response_model=LiveStandingsResponse)
    async def live(identifier: str) -> LiveStandingsResponse:
        result = await service.live_standings(_clean_identifier(identifier))
        return LiveStandingsResponse(
            league=result.league,
            market=result.market,
            live=result.live,
            state=result.state,
            updated_at=result.updated_at,
            standings=result.standings,
        )

    return app
