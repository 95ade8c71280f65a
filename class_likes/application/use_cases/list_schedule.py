"""ListScheduleUseCase — schedule rows merged with live like counts."""

from __future__ import annotations

from dataclasses import dataclass

from class_likes.application.ports.schedule_repo import ScheduleRepository
from class_likes.application.services.counter_store import CounterStore
from class_likes.domain.entities.class_session import ClassSession


@dataclass
class ScheduledClass:
    session: ClassSession
    likes: int


class ListScheduleUseCase:
    def __init__(self, schedule: ScheduleRepository, store: CounterStore):
        self._schedule = schedule
        self._store = store

    async def execute(self) -> list[ScheduledClass]:
        """Every session ordered by date/time.

        The stored count wins; ``initial_likes`` is shown only for classes
        the store has never seen.
        """
        sessions = sorted(self._schedule.get_all(), key=ClassSession.sort_key)
        likes = await self._store.get_all()
        return [
            ScheduledClass(session=s, likes=likes.get(s.id, s.initial_likes))
            for s in sessions
        ]
