"""Shared fixtures: an in-memory database and the API wired to it."""

import asyncio

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.models import Board, BoardColumn, Item
from app.db.session import get_db
from app.main import app


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def http(session_factory):
    # every session shares the one in-memory connection: serve one request at a time
    lock = asyncio.Lock()

    async def override_get_db():
        async with lock:
            async with session_factory() as session:
                yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
async def board(session_factory):
    """Board owned by alice with columns Todo (a, b) and Doing (empty)."""
    async with session_factory() as session:
        board = Board(owner_user_id="alice", name="Sprint 1", color="#cbd5e1")
        session.add(board)
        await session.flush()
        session.add_all([
            BoardColumn(id="todo", board_id=board.id, name="Todo", order=1),
            BoardColumn(id="doing", board_id=board.id, name="Doing", order=2),
        ])
        await session.flush()
        session.add_all([
            Item(id="a", column_id="todo", order=1, title="Card A"),
            Item(id="b", column_id="todo", order=2, title="Card B"),
        ])
        await session.commit()
        return board.id
