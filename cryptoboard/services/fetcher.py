from __future__ import annotations

from typing import Any, Optional
import httpx

from cryptoboard.core.errors import UpstreamError

class Fetcher:
    """Thin JSON-over-HTTP helper shared by every provider client.

    Any transport failure, non-2xx status or non-JSON body surfaces as
    UpstreamError with the cause chained.
    """

    def __init__(self, user_agent: str, timeout_s: int, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._headers = {"User-Agent": user_agent}
        self._timeout = httpx.Timeout(timeout_s)
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self._headers,
            timeout=self._timeout,
            follow_redirects=True,
            transport=self._transport,
        )

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        resp.raise_for_status()
        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamError(f"{resp.request.url}: response is not JSON") from e

    async def get_json(self, url: str, params: dict | None = None, headers: dict | None = None) -> Any:
        async with self._client() as client:
            try:
                resp = await client.get(url, params=params, headers=headers)
                return self._json(resp)
            except httpx.HTTPError as e:
                raise UpstreamError(f"GET {url}: {type(e).__name__}: {e}") from e

    async def post_form(
        self,
        url: str,
        data: dict,
        auth: tuple[str, str] | None = None,
        headers: dict | None = None,
    ) -> Any:
        async with self._client() as client:
            try:
                resp = await client.post(url, data=data, auth=auth, headers=headers)
                return self._json(resp)
            except httpx.HTTPError as e:
                raise UpstreamError(f"POST {url}: {type(e).__name__}: {e}") from e
