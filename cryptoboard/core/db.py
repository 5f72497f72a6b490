from __future__ import annotations

from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase

def _sqlite_url(path: str) -> str:
    return f"sqlite+aiosqlite:///{path}"

def make_engine(db_path: str) -> AsyncEngine:
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    return create_async_engine(
        _sqlite_url(db_path),
        echo=False,
    )

def make_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

class Base(DeclarativeBase):
    pass

async def create_tables(engine: AsyncEngine) -> None:
    # Registers the mapped tables on Base.metadata
    import cryptoboard.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
