from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable

import pytest

from cartola_proxy.config import ProxySettings
from cartola_proxy.upstream import UpstreamClient

from .fakes import API_URL, FakeUpstream


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def settings() -> ProxySettings:
    return ProxySettings(api_url=API_URL, token="secret-token")


@pytest.fixture
def make_client(settings: ProxySettings) -> Callable[..., UpstreamClient]:
    def factory(upstream: FakeUpstream, **overrides: Any) -> UpstreamClient:
        return UpstreamClient(replace(settings, **overrides), transport=upstream.transport)

    return factory
