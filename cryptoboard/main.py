from __future__ import annotations

from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from cryptoboard.core.config import Settings
from cryptoboard.core.context import close_context, open_context
from cryptoboard.core.errors import CryptoboardError
from cryptoboard.core.logging import setup_logging
from cryptoboard.core.scheduler import start_scheduler
from cryptoboard.api.public import router as public_router
from cryptoboard.api.sources import router as sources_router

def create_app(settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    settings = settings or Settings()
    app = FastAPI(title="Cryptoboard Feed API", version="1.0.0")

    # The dashboard is served from a different origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(public_router)
    app.include_router(sources_router)

    @app.exception_handler(CryptoboardError)
    async def cryptoboard_error_handler(request: Request, exc: CryptoboardError):
        logger.opt(exception=exc).error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=500, content={"message": exc.message})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(f"{request.method} {request.url.path} failed unexpectedly: {exc}")
        return JSONResponse(status_code=500, content={"message": CryptoboardError.message})

    @app.on_event("startup")
    async def on_startup():
        setup_logging(settings.log_level, settings.log_file)
        try:
            ctx = await open_context(settings, transport=transport)
        except CryptoboardError:
            logger.exception("Database connection failed, shutting down")
            raise
        app.state.ctx = ctx
        start_scheduler(ctx.scheduler, ctx.feed.refresh_all, settings.refresh_interval_minutes)

    @app.on_event("shutdown")
    async def on_shutdown():
        ctx = getattr(app.state, "ctx", None)
        if ctx is not None:
            await close_context(ctx)

    @app.get("/health")
    async def health():
        return {"ok": True}

    return app
