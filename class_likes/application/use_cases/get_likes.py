"""GetLikesUseCase — read every class's like count."""

from __future__ import annotations

from class_likes.application.services.counter_store import CounterStore
from class_likes.domain.entities.like_counter import CounterSnapshot


class GetLikesUseCase:
    def __init__(self, store: CounterStore):
        self._store = store

    async def execute(self) -> CounterSnapshot:
        return await self._store.get_all()
