"""Provider clients: one per upstream, each returning raw payload items."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Optional

from loguru import logger

from cryptoboard.core.errors import AuthError, UpstreamError
from cryptoboard.services.fetcher import Fetcher
from cryptoboard.services.normalize import Source

@dataclass
class SourceBatch:
    items: list[dict[str, Any]] = field(default_factory=list)
    # Upstream-reported total, only the social provider sends one
    total_results: Optional[int] = None

def _envelope(data: Any, *path: str) -> Any:
    node = data
    for key in path:
        if not isinstance(node, dict) or key not in node:
            raise UpstreamError(f"malformed envelope: missing {'.'.join(path)}")
        node = node[key]
    return node

class GuardianSource:
    """Paginated news search. Page 1 tells us how many pages exist; the rest are fetched concurrently."""

    kind = Source.GUARDIAN

    def __init__(self, fetcher: Fetcher, base_url: str, api_key: str, page_size: int = 200):
        self._fetcher = fetcher
        self._base_url = base_url
        self._api_key = api_key
        self._page_size = page_size

    async def _page(self, query: str, page: int) -> tuple[list[dict], int]:
        data = await self._fetcher.get_json(
            self._base_url,
            params={"q": query, "page-size": self._page_size, "page": page, "api-key": self._api_key},
        )
        results = _envelope(data, "response", "results")
        pages = _envelope(data, "response", "pages")
        status = data["response"].get("status", "ok")
        if status != "ok":
            raise UpstreamError(f"guardian page {page}: status {status!r}")
        if not isinstance(results, list):
            raise UpstreamError(f"guardian page {page}: results is not a list")
        try:
            return results, int(pages)
        except (TypeError, ValueError) as e:
            raise UpstreamError(f"guardian page {page}: bad page count {pages!r}") from e

    async def fetch_all(self, query: str) -> SourceBatch:
        first, total_pages = await self._page(query, 1)
        logger.info(f"Guardian: {total_pages} page(s) to fetch for {query!r}")

        tasks = [asyncio.ensure_future(self._page(query, p)) for p in range(2, total_pages + 1)]
        try:
            # gather keeps argument order, so the concatenation is stable whatever the arrival order
            rest = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

        items = list(first)
        for results, _ in rest:
            items.extend(results)
        logger.info(f"Guardian: fetched {len(items)} items")
        return SourceBatch(items=items)

class TimesSource:
    kind = Source.TIMES

    def __init__(self, fetcher: Fetcher, base_url: str, api_key: str):
        self._fetcher = fetcher
        self._base_url = base_url
        self._api_key = api_key

    async def fetch_all(self, query: str) -> SourceBatch:
        data = await self._fetcher.get_json(self._base_url, params={"q": query, "api-key": self._api_key})
        docs = _envelope(data, "response", "docs") or []
        if not isinstance(docs, list):
            raise UpstreamError("times: docs is not a list")
        logger.info(f"Times: fetched {len(docs)} items")
        return SourceBatch(items=docs)

class SocialSource:
    """Social search behind a bearer token; a new token is requested on every call."""

    kind = Source.SOCIAL

    def __init__(
        self,
        fetcher: Fetcher,
        token_url: str,
        search_url: str,
        client_id_secret: str,
        username: str,
        password: str,
        limit: int = 100,
    ):
        self._fetcher = fetcher
        self._token_url = token_url
        self._search_url = search_url
        client_id, _, client_secret = client_id_secret.partition(":")
        self._client_auth = (client_id, client_secret)
        self._username = username
        self._password = password
        self._limit = limit

    async def access_token(self) -> str:
        try:
            data = await self._fetcher.post_form(
                self._token_url,
                data={"grant_type": "password", "username": self._username, "password": self._password},
                auth=self._client_auth,
            )
        except UpstreamError as e:
            raise AuthError(f"token exchange failed: {e}") from e
        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise AuthError(f"token exchange returned no access_token: {data!r}")
        return token

    async def fetch_all(self, query: str) -> SourceBatch:
        token = await self.access_token()
        data = await self._fetcher.get_json(
            self._search_url,
            params={"q": query, "limit": self._limit},
            headers={"Authorization": f"Bearer {token}"},
        )
        children = _envelope(data, "data", "children")
        if not isinstance(children, list):
            raise UpstreamError("social: children is not a list")
        items = [c.get("data", {}) if isinstance(c, dict) else c for c in children]
        total = data["data"].get("dist")
        logger.info(f"Social: fetched {len(items)} items (total reported: {total})")
        return SourceBatch(items=items, total_results=total)
