import httpx
import pytest

from cartola_proxy.config import UpstreamRoutes
from cartola_proxy.errors import UpstreamUnreachable
from cartola_proxy.market import MarketStatusGate, parse_market_status

from .fakes import FakeUpstream


@pytest.mark.parametrize(
    ("payload", "state", "in_play", "live"),
    [
        ({"rodada_atual": 12, "status_mercado": 1, "bola_rolando": False}, "open", False, False),
        ({"rodada_atual": 12, "status_mercado": 2, "bola_rolando": True}, "closed", True, True),
        ({"rodada_atual": 12, "status_mercado": 2, "bola_rolando": False}, "closed", False, True),
        ({"rodada_atual": "12", "status_mercado": "2"}, "closed", False, True),
        ({"rodada_atual": 12, "status_mercado": 4, "bola_rolando": False}, "open", False, False),
        ({"rodada_atual": 38, "status_mercado": 6, "bola_rolando": False}, "open", False, False),
        ({"bola_rolando": "true"}, "open", False, False),
        (None, "open", False, False),
    ],
)
def test_parse_market_status(payload, state, in_play, live):
    status = parse_market_status(payload)
    assert status.market_state == state
    assert status.in_play is in_play
    assert status.is_live is live


def test_round_is_parsed():
    assert parse_market_status({"rodada_atual": "12"}).round == 12


@pytest.mark.anyio
async def test_gate_reads_status_route(make_client):
    upstream = FakeUpstream({"/mercado/status": (200, {"rodada_atual": 30, "status_mercado": 2, "bola_rolando": True})})
    gate = MarketStatusGate(make_client(upstream), UpstreamRoutes())

    status = await gate.check_status()

    assert status.round == 30
    assert status.is_live


@pytest.mark.anyio
async def test_gate_failure_aborts(make_client):
    def down(request):
        raise httpx.ConnectTimeout("slow", request=request)

    gate = MarketStatusGate(make_client(FakeUpstream({"/mercado/status": down})), UpstreamRoutes())
    with pytest.raises(UpstreamUnreachable):
        await gate.check_status()
