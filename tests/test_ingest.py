import pytest
from sqlalchemy import func, select

from conftest import StaticClient, guardian_item, social_item
from cryptoboard.core.errors import UpstreamError
from cryptoboard.models import GuardianArticle, SocialArticle
from cryptoboard.services.ingest import ingest_source
from cryptoboard.services.normalize import Source, normalize
from cryptoboard.services.store import ArticleStore


async def _count(session, model) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


async def _ingest(sessionmaker, client, key_field="url"):
    async with sessionmaker() as session:
        return await ingest_source(session, client, ArticleStore(client.kind), "cryptocurrency", key_field)


async def test_first_ingestion_stores_everything(sessionmaker) -> None:
    client = StaticClient(Source.GUARDIAN, [guardian_item(n) for n in range(1, 4)])

    result = await _ingest(sessionmaker, client)

    assert result.stats.inserted == 3
    assert [r.title for r in result.rows] == ["Crypto story 1", "Crypto story 2", "Crypto story 3"]
    assert all(r.host_origin == "theguardian" for r in result.rows)
    assert all(r.dedup_key == r.url for r in result.rows)


async def test_ingestion_is_idempotent(sessionmaker) -> None:
    client = StaticClient(Source.GUARDIAN, [guardian_item(n) for n in range(1, 6)])

    first = await _ingest(sessionmaker, client)
    second = await _ingest(sessionmaker, client)

    assert len(first.rows) == len(second.rows) == 5
    assert second.stats.inserted == 0
    assert second.stats.duplicates == 5
    assert [r.id for r in first.rows] == [r.id for r in second.rows]


async def test_one_duplicate_out_of_three(sessionmaker) -> None:
    await _ingest(sessionmaker, StaticClient(Source.GUARDIAN, [guardian_item(1), guardian_item(9)]))

    client = StaticClient(Source.GUARDIAN, [guardian_item(1), guardian_item(2), guardian_item(3)])
    result = await _ingest(sessionmaker, client)

    assert result.stats.inserted == 2
    assert result.stats.duplicates == 1
    assert len(result.rows) == 2 + 2


async def test_drift_rebuilds_whole_table(sessionmaker) -> None:
    async with sessionmaker() as session:
        for n in range(1, 6):
            # Written before publication_date was part of the field set
            url = f"https://www.theguardian.com/old/{n}"
            session.add(GuardianArticle(dedup_key=url, title=f"old {n}", url=url, host_origin="theguardian"))
        await session.commit()

    client = StaticClient(Source.GUARDIAN, [guardian_item(n) for n in range(1, 4)])
    result = await _ingest(sessionmaker, client)

    assert result.stats.rebuilt is True
    assert len(result.rows) == 3
    assert {r.title for r in result.rows} == {"Crypto story 1", "Crypto story 2", "Crypto story 3"}


async def test_rebuild_when_dedup_key_setting_changes(sessionmaker) -> None:
    items = [social_item(1), social_item(2)]
    await _ingest(sessionmaker, StaticClient(Source.SOCIAL, items), key_field="link")

    result = await _ingest(sessionmaker, StaticClient(Source.SOCIAL, items), key_field="title")

    assert result.stats.rebuilt is True
    assert [r.dedup_key for r in result.rows] == [r.title for r in result.rows]


async def test_title_key_treats_same_title_as_duplicate(sessionmaker) -> None:
    items = [guardian_item(1, title="Same"), guardian_item(2, title="Same"), guardian_item(3)]

    result = await _ingest(sessionmaker, StaticClient(Source.GUARDIAN, items), key_field="title")

    assert result.stats.inserted == 2
    assert len(result.rows) == 2


async def test_items_without_title_or_key_are_skipped(sessionmaker) -> None:
    no_title = guardian_item(1)
    del no_title["webTitle"]
    no_url = guardian_item(2)
    no_url["webUrl"] = ""

    result = await _ingest(sessionmaker, StaticClient(Source.GUARDIAN, [no_title, no_url, guardian_item(3)]))

    assert result.stats.skipped == 2
    assert len(result.rows) == 1


async def test_upstream_failure_leaves_table_untouched(sessionmaker) -> None:
    await _ingest(sessionmaker, StaticClient(Source.GUARDIAN, [guardian_item(1)]))

    class Failing(StaticClient):
        async def fetch_all(self, query):
            raise UpstreamError("page 2: 502")

    with pytest.raises(UpstreamError):
        await _ingest(sessionmaker, Failing(Source.GUARDIAN, []))

    async with sessionmaker() as session:
        assert await _count(session, GuardianArticle) == 1


async def test_social_total_results_passed_through(sessionmaker) -> None:
    client = StaticClient(Source.SOCIAL, [social_item(1)], total_results=250)

    result = await _ingest(sessionmaker, client, key_field="link")

    assert result.total_results == 250
    assert result.rows[0].community_tag == "CryptoCurrency"


async def test_conditional_insert_ignores_existing_key(sessionmaker) -> None:
    store = ArticleStore(Source.SOCIAL)
    article = normalize(social_item(1), Source.SOCIAL)

    async with sessionmaker() as session:
        assert await store.insert_if_absent(session, [article], "link") == 1
        await session.commit()
    # A second writer that missed the first insert in its snapshot
    async with sessionmaker() as session:
        assert await store.insert_if_absent(session, [article], "link") == 0
        await session.commit()
        assert await _count(session, SocialArticle) == 1


async def test_social_item_with_bad_timestamp_is_skipped(sessionmaker) -> None:
    bad = social_item(1)
    bad["created_utc"] = 1e20
    client = StaticClient(Source.SOCIAL, [bad, social_item(2)], total_results=2)

    result = await _ingest(sessionmaker, client, key_field="link")

    assert result.stats.skipped == 1
    assert [r.title for r in result.rows] == ["Thoughts on bitcoin 2"]
