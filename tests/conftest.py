from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from models import Base, Station  # noqa: E402


async def _seed_stations(session_factory) -> None:
    async with session_factory() as session:
        session.add_all(
            [
                Station(
                    code="ENGLISH",
                    name="English",
                    stream_url="https://stream.test/english.m3u8",
                    metadata_url="/api/metadata/english",
                    display_order=1,
                ),
                Station(
                    code="HINDI",
                    name="Hindi",
                    stream_url="https://stream.test/hindi.m3u8",
                    metadata_url="/api/metadata/hindi",
                    display_order=2,
                ),
                Station(
                    code="ARCHIVE",
                    name="Archive",
                    stream_url="https://stream.test/archive.m3u8",
                    metadata_url="/api/metadata/archive",
                    is_active=False,
                    display_order=3,
                ),
            ]
        )
        await session.commit()


@pytest.fixture
def run_db():
    """Run ``scenario(session_factory)`` against a fresh database, in memory unless ``url`` is given.

    The engine is created inside the event loop started by ``asyncio.run`` so
    every test gets its own loop and its own database.
    """

    def _run(scenario, seed: bool = True, url: str | None = None):
        async def _main():
            if url is None:
                engine = create_async_engine(
                    "sqlite+aiosqlite://",
                    connect_args={"check_same_thread": False},
                    poolclass=StaticPool,
                )
            else:
                # File databases give every session its own connection
                engine = create_async_engine(url, connect_args={"timeout": 30})
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
            if seed:
                await _seed_stations(session_factory)
            try:
                return await scenario(session_factory)
            finally:
                await engine.dispose()

        return asyncio.run(_main())

    return _run
