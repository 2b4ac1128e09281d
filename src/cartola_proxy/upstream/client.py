"""Thin async client for the upstream sports-data API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from cartola_proxy.config import ProxySettings
from cartola_proxy.errors import NotFound, ProxyError, classify_failure


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpstreamResponse:
    """Outcome of one upstream GET: a decoded payload or a failure."""

    path: str
    payload: Any = None
    status_code: int | None = None
    body: Any = None
    ok: bool = True

    @classmethod
    def success(cls, path: str, payload: Any, status_code: int = 200) -> "UpstreamResponse":
        return cls(path=path, payload=payload, status_code=status_code, ok=True)

    @classmethod
    def failure(cls, path: str, status_code: int | None, body: Any) -> "UpstreamResponse":
        return cls(path=path, status_code=status_code, body=body, ok=False)

    def to_error(
        self,
        *,
        has_token: bool,
        context: str | None = None,
        not_found: type[NotFound] = NotFound,
    ) -> ProxyError:
        return classify_failure(
            self.status_code,
            self.body,
            has_token=has_token,
            context=context or self.path,
            not_found=not_found,
        )


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class UpstreamClient:
    """Issues authenticated GET requests; never retries."""

    def __init__(
        self,
        settings: ProxySettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.api_url,
            headers=self.build_headers(),
            timeout=httpx.Timeout(settings.timeout),
            transport=transport,
        )

    @property
    def has_token(self) -> bool:
        return self.settings.has_token

    def build_headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": self.settings.user_agent,
            "Accept": "application/json",
        }
        if self.settings.token:
            headers["Authorization"] = f"Bearer {self.settings.token}"
        return headers

    async def fetch(self, path: str, params: Mapping[str, str] | None = None) -> UpstreamResponse:
        try:
            response = await self._client.get(path, params=params)
        except httpx.TimeoutException as exc:
            logger.warning("Upstream timeout on %s: %s", path, exc)
            return UpstreamResponse.failure(path, None, f"timeout: {exc}")
        except httpx.HTTPError as exc:
            logger.warning("Upstream transport error on %s: %s", path, exc)
            return UpstreamResponse.failure(path, None, str(exc))

        if response.is_success:
            try:
                return UpstreamResponse.success(path, response.json(), response.status_code)
            except ValueError:
                logger.warning("Upstream returned non-JSON body on %s (%s)", path, response.status_code)
                return UpstreamResponse.failure(path, response.status_code, response.text)

        body = _decode_body(response)
        logger.warning("Upstream %s on %s: %s", response.status_code, path, body)
        return UpstreamResponse.failure(path, response.status_code, body)

    async def fetch_or_raise(self, path: str, *, context: str | None = None) -> Any:
        """Fetch ``path`` and return its payload, raising a ``ProxyError`` on failure."""

        result = await self.fetch(path)
        if not result.ok:
            raise result.to_error(has_token=self.has_token, context=context)
        return result.payload

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "UpstreamClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
