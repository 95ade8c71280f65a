"""In-memory counter backend — implements CounterBackend.

Development fallback only: counts live in this process and are lost on
restart; separate worker processes each see their own map.
"""

from __future__ import annotations

import threading

from class_likes.application.ports.counter_backend import CounterBackend
from class_likes.domain.entities.like_counter import CounterSnapshot, LikeCounter
from class_likes.domain.value_objects.enums import LikeAction


class InMemoryCounterBackend(CounterBackend):
    name = "memory"
    durable = False

    def __init__(self, initial: CounterSnapshot | None = None):
        self._counts: CounterSnapshot = dict(initial or {})
        self._lock = threading.Lock()

    async def get_all(self) -> CounterSnapshot:
        with self._lock:
            return dict(self._counts)

    async def mutate(self, class_id: str, action: LikeAction) -> int:
        with self._lock:
            counter = LikeCounter(class_id, self._counts.get(class_id, 0))
            self._counts[class_id] = counter.apply(action)
            return counter.count
