"""SnapshotCache — last counts the backend confirmed to this process.

NOT AUTHORITATIVE. It is only written after a successful backend read or
write and only read when the backend cannot answer. Other processes keep
their own copy, so values here may be stale; nothing relies on it for
correctness.
"""

from __future__ import annotations

import time

from class_likes.domain.entities.like_counter import CounterSnapshot


class SnapshotCache:
    def __init__(self) -> None:
        self._counts: CounterSnapshot = {}
        self._updated_at: float | None = None

    def replace(self, snapshot: CounterSnapshot) -> None:
        self._counts = dict(snapshot)
        self._updated_at = time.monotonic()

    def record(self, class_id: str, count: int) -> None:
        self._counts[class_id] = count
        self._updated_at = time.monotonic()

    def get(self, class_id: str) -> int | None:
        return self._counts.get(class_id)

    def snapshot(self) -> CounterSnapshot:
        return dict(self._counts)

    @property
    def is_empty(self) -> bool:
        return self._updated_at is None

    def age_seconds(self) -> float | None:
        if self._updated_at is None:
            return None
        return time.monotonic() - self._updated_at
