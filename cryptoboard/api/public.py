from __future__ import annotations

from fastapi import APIRouter, Depends

from cryptoboard.api.deps import get_ctx
from cryptoboard.core.context import AppContext
from cryptoboard.services.prices import fetch_price_history, linear_trend

router = APIRouter(tags=["public"])

@router.get("/articles")
async def list_articles(ctx: AppContext = Depends(get_ctx)):
    return await ctx.feed.get_articles()

@router.get("/trending")
async def list_trending(ctx: AppContext = Depends(get_ctx)):
    return await ctx.feed.get_trending()

@router.get("/crypto-growth")
async def crypto_growth(ctx: AppContext = Depends(get_ctx)):
    s = ctx.settings
    points = await fetch_price_history(ctx.fetcher, s.price_url, s.price_coin, s.price_days)
    return linear_trend(points, projection_days=s.projection_days)
