import asyncio
from dataclasses import replace

import httpx
import pytest

from cartola_proxy.errors import EmptyParticipants, RequestDeadlineExceeded, Unauthorized
from cartola_proxy.service import STATE_LIVE, STATE_MARKET_NOT_LIVE, StandingsService

from .fakes import FakeUpstream, league_payload, roster_payload

LIVE_STATUS = {"rodada_atual": 20, "status_mercado": 2, "bola_rolando": True}
OPEN_STATUS = {"rodada_atual": 21, "status_mercado": 1, "bola_rolando": False}


def _live_upstream(status=LIVE_STATUS) -> FakeUpstream:
    return FakeUpstream(
        {
            "/mercado/status": (200, status),
            "/liga/amigos": (200, league_payload((1, "Tricolor"), (2, "Verdão"), (3, "Mengão"))),
            "/time/id/1": (200, roster_payload(10, 11)),
            "/time/id/2": (200, roster_payload(20)),
            "/time/id/3": (500, {"mensagem": "erro"}),
            "/atletas/pontuados": (
                200,
                {"atletas": {"10": {"pontuacao": 4.2}, "11": {"pontuacao": 1.0}, "20": {"pontuacao": 8.0}}},
            ),
        }
    )


@pytest.mark.anyio
async def test_live_standings_end_to_end(settings):
    upstream = _live_upstream()
    service = StandingsService(settings, transport=upstream.transport)

    result = await service.live_standings("amigos")

    assert result.live is True
    assert result.state == STATE_LIVE
    assert result.league.league_id == 4321
    assert result.market.round == 20
    assert [(s.team_id, s.display_name, s.partial_score) for s in result.standings] == [
        (2, "Verdão", 8.0),
        (1, "Tricolor", 5.2),
        (3, "Mengão", 0.0),
    ]
    assert upstream.count("/ligas/amigos") == 1
    assert upstream.count("/liga/amigos") == 1
    await service.aclose()


@pytest.mark.anyio
async def test_rosters_are_cached_across_requests(settings):
    upstream = _live_upstream()
    service = StandingsService(settings, transport=upstream.transport)

    await service.live_standings("amigos")
    await service.live_standings("amigos")

    assert upstream.count("/time/id/1") == 1
    assert upstream.count("/atletas/pontuados") == 2
    # failed roster fetches are retried on the next request
    assert upstream.count("/time/id/3") == 2


@pytest.mark.anyio
async def test_market_not_live_skips_rosters_and_scores(settings):
    upstream = _live_upstream(status=OPEN_STATUS)
    service = StandingsService(settings, transport=upstream.transport)

    result = await service.live_standings("amigos")

    assert result.live is False
    assert result.state == STATE_MARKET_NOT_LIVE
    assert [s.partial_score for s in result.standings] == [0.0, 0.0, 0.0]
    assert not any(path.startswith("/time/id/") for path in upstream.paths)
    assert upstream.count("/atletas/pontuados") == 0


@pytest.mark.anyio
async def test_private_league_without_participants(settings):
    upstream = FakeUpstream(
        {
            "/mercado/status": (200, LIVE_STATUS),
            "/ligas/privada": (200, {"liga": {"liga_id": 7, "nome": "Privada"}, "mensagem": "restrita"}),
        }
    )
    service = StandingsService(settings, transport=upstream.transport)

    with pytest.raises(EmptyParticipants) as excinfo:
        await service.live_standings("privada")

    assert excinfo.value.http_status == 404
    assert "GLB_TOKEN" in excinfo.value.hint


@pytest.mark.anyio
async def test_market_failure_aborts_before_league_lookup(settings):
    upstream = FakeUpstream({"/mercado/status": (403, {"mensagem": "forbidden"})})
    service = StandingsService(settings, transport=upstream.transport)

    with pytest.raises(Unauthorized):
        await service.live_standings("amigos")
    assert upstream.paths == ["/mercado/status"]


@pytest.mark.anyio
async def test_request_deadline_bounds_the_pipeline(settings):
    async def slow(request):
        await asyncio.sleep(1)
        return httpx.Response(200, json=LIVE_STATUS)

    upstream = FakeUpstream({"/mercado/status": slow})
    service = StandingsService(replace(settings, request_deadline=0.05), transport=upstream.transport)

    with pytest.raises(RequestDeadlineExceeded) as excinfo:
        await service.live_standings("amigos")
    assert excinfo.value.http_status == 504


@pytest.mark.anyio
async def test_roster_with_unparseable_player_id_still_scores_other_teams(settings):
    upstream = _live_upstream()
    upstream.routes["/time/id/1"] = (200, {"atletas": [{"atleta_id": "³"}, {"atleta_id": 11}]})
    service = StandingsService(settings, transport=upstream.transport)

    result = await service.live_standings("amigos")

    assert [(s.team_id, s.partial_score) for s in result.standings] == [(2, 8.0), (1, 1.0), (3, 0.0)]
    await service.aclose()
