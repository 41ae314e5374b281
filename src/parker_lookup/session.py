"""Cookie-backed HTTP session against Parker's Rails web interface."""

from __future__ import annotations

import logging
from functools import cached_property
from urllib.parse import urlparse

import httpx
from scrapling.parser import Adaptor

from .config import HTTP_TIMEOUT, PARKER_BASE_URL
from .errors import NetworkError

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/131.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


class Page:
    """A fetched page after redirects: final URL, status and HTML."""

    def __init__(self, url: str, status: int, html: str) -> None:
        self.url = url
        self.status = status
        self.html = html

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def path(self) -> str:
        return urlparse(self.url).path

    @cached_property
    def selector(self) -> Adaptor:
        return Adaptor(self.html or "<html></html>", url=self.url)

    def __repr__(self) -> str:
        return f"Page(url={self.url!r}, status={self.status})"


class ParkerSession:
    """Explicit session value shared by the authenticator, resolver and creator.

    Cookies live in the underlying ``httpx.AsyncClient`` jar. Parker expires
    sessions on its own; callers detect that by landing on the sign-in page.
    """

    def __init__(
        self,
        base_url: str = PARKER_BASE_URL,
        *,
        timeout: float = HTTP_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=DEFAULT_HEADERS,
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def get(self, path: str, params: dict | None = None) -> Page:
        return await self._request("GET", path, params=params)

    async def post_form(self, path: str, data: dict) -> Page:
        """POST form-encoded data and follow redirects."""
        return await self._request("POST", path, data=data)

    async def _request(self, method: str, path: str, **kwargs: object) -> Page:
        client = self._get_client()
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise NetworkError(f"{method} {path} failed: {exc}") from exc
        page = Page(str(response.url), response.status_code, response.text)
        logger.debug("%s %s -> %s", method, path, page)
        return page

    def reset(self) -> None:
        """Forget all session cookies."""
        if self._client is not None:
            self._client.cookies.clear()

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> ParkerSession:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
