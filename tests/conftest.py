from __future__ import annotations

import pytest
import pytest_asyncio

from cryptoboard.core.config import Settings
from cryptoboard.core.db import create_tables, make_engine, make_sessionmaker
from cryptoboard.services.normalize import Source
from cryptoboard.services.sources import SourceBatch


@pytest.fixture
def settings(tmp_path):
    return Settings(
        db_path=str(tmp_path / "test.db"),
        guardian_api_key="g-key",
        times_api_key="t-key",
        social_client_id_secret="cid:csecret",
        social_username="user",
        social_password="pass",
        _env_file=None,
    )


@pytest_asyncio.fixture
async def engine(tmp_path):
    eng = make_engine(str(tmp_path / "store.db"))
    await create_tables(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def sessionmaker(engine):
    return make_sessionmaker(engine)


class StaticClient:
    """Source client stub returning a fixed batch and counting calls."""

    def __init__(self, kind: Source, items: list[dict], total_results: int | None = None):
        self.kind = kind
        self.items = items
        self.total_results = total_results
        self.calls = 0

    async def fetch_all(self, query: str) -> SourceBatch:
        self.calls += 1
        return SourceBatch(items=list(self.items), total_results=self.total_results)


def guardian_item(n: int, title: str | None = None) -> dict:
    return {
        "id": f"technology/2024/jan/{n:02d}/story",
        "webTitle": title or f"Crypto story {n}",
        "webUrl": f"https://www.theguardian.com/technology/2024/jan/{n:02d}/story",
        "webPublicationDate": f"2024-01-{n:02d}T10:00:00Z",
        "sectionName": "Technology",
    }


def social_item(n: int, title: str | None = None) -> dict:
    return {
        "title": title or f"Thoughts on bitcoin {n}",
        "permalink": f"/r/CryptoCurrency/comments/abc{n}/post/",
        "created_utc": 1704103200 + n,
        "author": f"user{n}",
        "selftext": "Is this a bubble?",
        "thumbnail": "self",
        "subreddit": "CryptoCurrency",
    }
