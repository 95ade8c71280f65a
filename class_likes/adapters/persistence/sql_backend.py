"""SQL counter backend — implements CounterBackend with SQLAlchemy (async).

One row per class. A mutation is, inside one transaction:

    INSERT ... ON CONFLICT DO NOTHING          (row exists, count 0)
    UPDATE ... SET count = CASE WHEN count + :d < 0 THEN 0 ELSE count + :d END
           RETURNING count

The single UPDATE computes the new value from the row as the database sees
it under its row lock, so concurrent writers cannot lose each other's
updates. Supported dialects: postgresql (asyncpg) and sqlite (aiosqlite).
"""

from __future__ import annotations

from sqlalchemy import case, func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from class_likes.adapters.persistence.database import Base, build_session_factory
from class_likes.adapters.persistence.models import LikeCounterModel
from class_likes.application.errors import BackendUnavailableError
from class_likes.application.ports.counter_backend import CounterBackend
from class_likes.domain.entities.like_counter import CounterSnapshot
from class_likes.domain.policies.counting import coerce_count, delta_for
from class_likes.domain.value_objects.enums import LikeAction


like_counters = LikeCounterModel.__table__

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlCounterBackend(CounterBackend):
    name = "sql"

    def __init__(self, engine: AsyncEngine):
        dialect = engine.dialect.name
        if dialect not in _INSERT_BY_DIALECT:
            raise ValueError(f"Unsupported database dialect for like counters: {dialect}")
        self._engine = engine
        self._insert = _INSERT_BY_DIALECT[dialect]
        self._sessions = build_session_factory(engine)

    async def create_schema(self) -> None:
        """Create tables directly (dev/tests). Production uses alembic."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def get_all(self) -> CounterSnapshot:
        try:
            async with self._sessions() as session:
                result = await session.execute(
                    select(like_counters.c.class_id, like_counters.c.count)
                )
                return {class_id: coerce_count(count) for class_id, count in result.all()}
        except SQLAlchemyError as exc:
            raise BackendUnavailableError(self.name, f"read failed: {exc}") from exc

    async def mutate(self, class_id: str, action: LikeAction) -> int:
        delta = delta_for(action)
        next_count = like_counters.c.count + delta
        try:
            async with self._sessions.begin() as session:
                await session.execute(
                    self._insert(like_counters)
                    .values(class_id=class_id, count=0)
                    .on_conflict_do_nothing(index_elements=["class_id"])
                )
                result = await session.execute(
                    update(like_counters)
                    .where(like_counters.c.class_id == class_id)
                    .values(
                        count=case((next_count < 0, 0), else_=next_count),
                        updated_at=func.now(),
                    )
                    .returning(like_counters.c.count)
                )
                return result.scalar_one()
        except SQLAlchemyError as exc:
            raise BackendUnavailableError(self.name, f"update of '{class_id}' failed: {exc}") from exc

    async def aclose(self) -> None:
        await self._engine.dispose()
