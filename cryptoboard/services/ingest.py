from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cryptoboard.core.errors import PersistenceError
from cryptoboard.models import ArticleColumns
from cryptoboard.services.dedup import detect_drift, select_new
from cryptoboard.services.normalize import CANONICAL_FIELDS, Article, NormalizeError, Source, normalize
from cryptoboard.services.sources import SourceBatch
from cryptoboard.services.store import ArticleStore

class SourceClient(Protocol):
    kind: Source

    async def fetch_all(self, query: str) -> SourceBatch: ...

@dataclass
class IngestStats:
    items_seen: int = 0
    inserted: int = 0
    duplicates: int = 0
    skipped: int = 0
    rebuilt: bool = False

@dataclass
class IngestResult:
    stats: IngestStats
    rows: Sequence[ArticleColumns] = field(default_factory=list)
    total_results: Optional[int] = None

def _candidates(batch: SourceBatch, source: Source, key_field: str, stats: IngestStats) -> list[Article]:
    out = []
    for raw in batch.items:
        stats.items_seen += 1
        try:
            article = normalize(raw, source)
        except NormalizeError as e:
            logger.warning(f"Skipping item: {e}")
            stats.skipped += 1
            continue
        if not article.key(key_field):
            logger.warning(f"Skipping {source.value} item {article.title!r}: empty {key_field}")
            stats.skipped += 1
            continue
        out.append(article)
    return out

async def ingest_source(
    session: AsyncSession,
    client: SourceClient,
    store: ArticleStore,
    query: str,
    key_field: str,
) -> IngestResult:
    """Fetch, normalize, reconcile against the stored table and persist one source.

    Either the whole batch is merged in one transaction or nothing is written:
    upstream errors are raised before the table is touched and storage errors
    roll back the purge and inserts together.
    """
    batch = await client.fetch_all(query)

    source = client.kind
    stats = IngestStats()
    candidates = _candidates(batch, source, key_field, stats)

    try:
        existing = await store.all(session)
        if detect_drift(existing, CANONICAL_FIELDS[source], key_field):
            logger.warning(f"{source.value}: stored rows do not match the current field set, rebuilding")
            stats.rebuilt = True
            await store.purge(session)
            to_insert = candidates
        else:
            to_insert, stats.duplicates = select_new(candidates, (r.dedup_key for r in existing), key_field)

        stats.inserted = await store.insert_if_absent(session, to_insert, key_field)
        # Rows that lost a race with another ingestion of the same source
        stats.duplicates += len(to_insert) - stats.inserted
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise PersistenceError(f"{source.value}: commit failed: {e}") from e
    except Exception:
        await session.rollback()
        raise

    logger.info(
        f"{source.value}: seen={stats.items_seen} inserted={stats.inserted} "
        f"duplicates={stats.duplicates} skipped={stats.skipped} rebuilt={stats.rebuilt}"
    )

    rows = await store.all(session)
    return IngestResult(stats=stats, rows=rows, total_results=batch.total_results)
