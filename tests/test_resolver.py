import httpx
import pytest

from cartola_proxy.config import UpstreamRoutes
from cartola_proxy.errors import LeagueNotFound, Unauthorized, UpstreamError, UpstreamUnreachable
from cartola_proxy.league import LeagueResolver, match_search_result

from .fakes import FakeUpstream, league_payload


def _resolver(make_client, upstream, **overrides):
    return LeagueResolver(make_client(upstream, **overrides), UpstreamRoutes())


@pytest.mark.anyio
async def test_plural_route_wins_first(make_client):
    upstream = FakeUpstream({"/ligas/amigos": (200, league_payload((1, "A")))})

    resolved = await _resolver(make_client, upstream).resolve("amigos")

    assert resolved.route == "plural"
    assert upstream.paths == ["/ligas/amigos"]


@pytest.mark.anyio
async def test_singular_route_after_plural_404(make_client):
    upstream = FakeUpstream({"/liga/amigos": (200, league_payload((1, "A")))})

    resolved = await _resolver(make_client, upstream).resolve("amigos")

    assert resolved.route == "singular"
    assert upstream.paths == ["/ligas/amigos", "/liga/amigos"]
    assert [(a.route, a.status_code, a.ok) for a in resolved.attempts] == [
        ("plural", 404, False),
        ("singular", 200, True),
    ]


@pytest.mark.anyio
async def test_slug_resolves_through_search(make_client):
    upstream = FakeUpstream(
        {
            "/ligas": (200, [{"liga_id": 99, "slug": "amigos-2"}, {"liga_id": 4321, "slug": "amigos"}]),
            "/liga/4321": (200, league_payload((1, "A"))),
        }
    )

    resolved = await _resolver(make_client, upstream).resolve("amigos")

    assert resolved.route == "singular-by-id"
    assert upstream.paths == ["/ligas/amigos", "/liga/amigos", "/ligas", "/ligas/4321", "/liga/4321"]
    assert upstream.calls[2].url.params["q"] == "amigos"


@pytest.mark.anyio
async def test_numeric_identifier_skips_search(make_client):
    upstream = FakeUpstream()

    with pytest.raises(LeagueNotFound) as excinfo:
        await _resolver(make_client, upstream).resolve("1234")

    assert upstream.paths == ["/ligas/1234", "/liga/1234"]
    assert excinfo.value.upstream_status == 404
    assert [a["route"] for a in excinfo.value.details["attempts"]] == ["plural", "singular"]


@pytest.mark.anyio
async def test_search_without_match_surfaces_last_route_error(make_client):
    upstream = FakeUpstream(
        {
            "/liga/amigos": (410, {"mensagem": "gone"}),
            "/ligas": (200, {"ligas": [{"liga_id": 1, "slug": "outra"}]}),
        }
    )

    with pytest.raises(UpstreamError) as excinfo:
        await _resolver(make_client, upstream).resolve("amigos")

    assert excinfo.value.upstream_status == 410
    assert excinfo.value.upstream_body == {"mensagem": "gone"}


@pytest.mark.anyio
async def test_error_from_search_based_retry_is_surfaced(make_client):
    upstream = FakeUpstream(
        {
            "/ligas": (200, [{"liga_id": 4321, "slug": "amigos"}]),
            "/liga/4321": (500, {"mensagem": "erro interno"}),
        }
    )

    with pytest.raises(UpstreamError) as excinfo:
        await _resolver(make_client, upstream).resolve("amigos")

    assert excinfo.value.upstream_status == 500
    assert excinfo.value.details["attempts"][-1]["route"] == "singular-by-id"


@pytest.mark.anyio
async def test_unauthorized_includes_token_hint_when_missing(make_client):
    upstream = FakeUpstream(
        {
            "/ligas/1234": (401, {"mensagem": "Usuário não autorizado"}),
            "/liga/1234": (401, {"mensagem": "Usuário não autorizado"}),
        }
    )

    with pytest.raises(Unauthorized) as excinfo:
        await _resolver(make_client, upstream, token="").resolve("1234")

    assert excinfo.value.http_status == 401
    assert "GLB_TOKEN" in excinfo.value.hint


@pytest.mark.anyio
async def test_network_failure_is_unreachable(make_client):
    def broken(request):
        raise httpx.ConnectError("connection refused", request=request)

    upstream = FakeUpstream({"/ligas/1": broken, "/liga/1": broken})

    with pytest.raises(UpstreamUnreachable):
        await _resolver(make_client, upstream).resolve("1")


@pytest.mark.anyio
async def test_blank_identifier_is_not_found(make_client):
    upstream = FakeUpstream()
    with pytest.raises(LeagueNotFound):
        await _resolver(make_client, upstream).resolve("   ")
    assert upstream.calls == []


def test_match_search_result_by_slug_or_id():
    results = [{"id": 5, "slug": "a"}, {"liga_id": "6", "slug": "b"}, {"slug": "no-id"}, "junk"]
    assert match_search_result(results, "b") == 6
    assert match_search_result(results, "5") == 5
    assert match_search_result(results, "no-id") is None
    assert match_search_result({"resultados": results}, "a") == 5
