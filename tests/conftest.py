"""Shared fixtures for predicate tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import pytest
from predicate_models import Base, Person, build_people
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cqrs_ddd_predicates import QuerySource

FetchNames = Callable[[QuerySource[Any]], Awaitable[set[str]]]


@pytest.fixture
async def session() -> AsyncGenerator[AsyncSession, None]:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        session.add_all(build_people())
        await session.commit()
        yield session
    await engine.dispose()


@pytest.fixture
def fetch_names(session: AsyncSession) -> FetchNames:
    """Execute a query source and return the full names it selects."""

    async def _fetch(source: QuerySource[Any]) -> set[str]:
        rows = (await session.scalars(source.to_select())).all()
        return {person.full_name for person in rows}

    return _fetch


@pytest.fixture
def people() -> QuerySource[Person]:
    return QuerySource(Person)
