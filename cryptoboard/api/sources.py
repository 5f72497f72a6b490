from __future__ import annotations

from fastapi import APIRouter, Depends

from cryptoboard.api.deps import get_ctx
from cryptoboard.core.context import AppContext
from cryptoboard.services.feed import row_to_dict
from cryptoboard.services.ingest import IngestResult, ingest_source
from cryptoboard.services.normalize import Source

router = APIRouter(tags=["ingest"])

async def _ingest(ctx: AppContext, source: Source) -> IngestResult:
    async with ctx.sessionmaker() as session:
        return await ingest_source(
            session,
            ctx.sources[source],
            ctx.stores[source],
            query=ctx.settings.search_query,
            key_field=ctx.dedup_keys[source],
        )

@router.get("/guardian")
async def ingest_guardian(ctx: AppContext = Depends(get_ctx)):
    result = await _ingest(ctx, Source.GUARDIAN)
    return [row_to_dict(r, Source.GUARDIAN) for r in result.rows]

@router.get("/times")
async def ingest_times(ctx: AppContext = Depends(get_ctx)):
    result = await _ingest(ctx, Source.TIMES)
    return [row_to_dict(r, Source.TIMES) for r in result.rows]

@router.get("/social")
async def ingest_social(ctx: AppContext = Depends(get_ctx)):
    result = await _ingest(ctx, Source.SOCIAL)
    return {
        "totalResults": result.total_results,
        "articles": [row_to_dict(r, Source.SOCIAL) for r in result.rows],
    }
