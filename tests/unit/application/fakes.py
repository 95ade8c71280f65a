"""In-memory fakes shared by the application tests."""

from __future__ import annotations

import asyncio

from class_likes.application.errors import BackendUnavailableError
from class_likes.application.ports.counter_backend import CounterBackend
from class_likes.application.ports.schedule_repo import ScheduleRepository
from class_likes.domain.entities.like_counter import LikeCounter


class ToggleBackend(CounterBackend):
    """Dict-backed backend whose reads / writes can be switched off."""

    name = "toggle"

    def __init__(self, counts=None):
        self.counts = dict(counts or {})
        self.reads_fail = False
        self.writes_fail = False

    async def get_all(self):
        if self.reads_fail:
            raise BackendUnavailableError(self.name, "read refused")
        return dict(self.counts)

    async def mutate(self, class_id, action):
        if self.writes_fail:
            raise BackendUnavailableError(self.name, "write refused")
        counter = LikeCounter(class_id, self.counts.get(class_id, 0))
        self.counts[class_id] = counter.apply(action)
        return counter.count


class SlowBackend(CounterBackend):
    """Answers after ``delay`` seconds; writes do land."""

    name = "slow"

    def __init__(self, delay=5.0):
        self.delay = delay
        self.counts = {}

    async def get_all(self):
        await asyncio.sleep(self.delay)
        return dict(self.counts)

    async def mutate(self, class_id, action):
        await asyncio.sleep(self.delay)
        counter = LikeCounter(class_id, self.counts.get(class_id, 0))
        self.counts[class_id] = counter.apply(action)
        return counter.count


class BrokenBackend(CounterBackend):
    """Raises something that is not a CounterStoreError."""

    name = "broken"

    async def get_all(self):
        raise RuntimeError("bug in backend")

    async def mutate(self, class_id, action):
        raise RuntimeError("bug in backend")


class FakeScheduleRepo(ScheduleRepository):
    def __init__(self, sessions):
        self._sessions = list(sessions)

    def get_all(self):
        return list(self._sessions)
