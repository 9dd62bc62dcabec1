"""HTTP transport used by providers to reach web services."""

import logging
from typing import Protocol

import httpx

from replaytv.exceptions import TransportError

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64; rv:128.0) Gecko/20100101 Firefox/128.0"


class Getter(Protocol):
    """Anything able to fetch a URL and return its body."""

    async def get(self, url: str) -> bytes:
        ...


class HttpGetter:
    """Default getter backed by an ``httpx.AsyncClient``.

    The client is created lazily and reused for every call, so a single
    getter can be shared by all providers.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def get(self, url: str) -> bytes:
        """Fetch ``url`` and return the raw body."""
        log.debug("GET %s", url)
        try:
            res = await self._get_client().get(url)
        except httpx.HTTPError as e:
            raise TransportError(url, f"Request failed: {e}") from e

        if res.is_error:
            raise TransportError(url, f"Unexpected status {res.status_code}")
        return res.content

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpGetter":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()
