"""CounterStore — the public face of like-count persistence.

Wraps one ``CounterBackend`` with:
- a bounded wait on every backend call (timed-out writes keep running),
- read fallback: on failure ``get_all`` serves the last good snapshot
  (or ``{}`` if this process never had one) instead of raising,
- write reporting: on failure ``mutate`` raises ``MutationFailedError``
  carrying the best-known count, never a fabricated one.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial

from class_likes.application.errors import CounterStoreError, MutationFailedError
from class_likes.application.ports.counter_backend import CounterBackend
from class_likes.application.services.snapshot_cache import SnapshotCache
from class_likes.domain.entities.like_counter import CounterSnapshot
from class_likes.domain.value_objects.enums import LikeAction

logger = logging.getLogger(__name__)


class CounterStore:
    def __init__(
        self,
        backend: CounterBackend,
        timeout: float = 5.0,
        cache: SnapshotCache | None = None,
    ):
        self._backend = backend
        self._timeout = timeout
        self._cache = cache or SnapshotCache()

    @property
    def backend(self) -> CounterBackend:
        return self._backend

    @property
    def cache(self) -> SnapshotCache:
        return self._cache

    async def get_all(self) -> CounterSnapshot:
        """Current counts; never raises."""
        try:
            snapshot = await asyncio.wait_for(self._backend.get_all(), self._timeout)
        except asyncio.TimeoutError:
            logger.error(
                "Counter backend '%s' read timed out after %.1fs",
                self._backend.name, self._timeout,
            )
            return self._fallback_snapshot()
        except Exception:
            logger.exception("Counter backend '%s' read failed", self._backend.name)
            return self._fallback_snapshot()

        self._cache.replace(snapshot)
        return snapshot

    async def mutate(self, class_id: str, action: LikeAction) -> int:
        """Apply a like/unlike; raises MutationFailedError if it did not happen.

        A timeout does not cancel the backend call (a file write in a worker
        thread cannot be stopped). The caller gets a failure that says the
        update may still apply; if it lands later its count is cached.
        """
        task = asyncio.ensure_future(self._backend.mutate(class_id, action))
        try:
            count = await asyncio.wait_for(asyncio.shield(task), self._timeout)
        except asyncio.TimeoutError as exc:
            logger.error(
                "Counter backend '%s' timed out updating '%s'",
                self._backend.name, class_id,
            )
            task.add_done_callback(partial(self._record_late_write, class_id))
            raise MutationFailedError(
                class_id, self._cache.get(class_id), "backend timed out; the update may still apply"
            ) from exc
        except CounterStoreError as exc:
            logger.error("Counter backend '%s' failed updating '%s': %s",
                         self._backend.name, class_id, exc.message)
            raise MutationFailedError(class_id, self._cache.get(class_id), exc.message) from exc

        self._cache.record(class_id, count)
        logger.debug("'%s' %s -> %d", class_id, action.value, count)
        return count

    def last_known(self, class_id: str) -> int | None:
        return self._cache.get(class_id)

    async def check_health(self) -> tuple[bool, str]:
        """Probe the backend with a full read."""
        try:
            snapshot = await asyncio.wait_for(self._backend.get_all(), self._timeout)
        except asyncio.TimeoutError:
            return False, f"timed out after {self._timeout:.1f}s"
        except Exception as e:
            return False, f"error: {e}"
        self._cache.replace(snapshot)
        return True, f"{len(snapshot)} counters"

    async def migrate_legacy(self) -> int:
        return await self._backend.migrate_legacy()

    async def aclose(self) -> None:
        await self._backend.aclose()

    def _record_late_write(self, class_id: str, task: asyncio.Future) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Timed-out update of '%s' failed afterwards: %s", class_id, exc)
            return
        count = task.result()
        self._cache.record(class_id, count)
        logger.warning("Timed-out update of '%s' landed late, count=%d", class_id, count)

    def _fallback_snapshot(self) -> CounterSnapshot:
        if self._cache.is_empty:
            logger.warning("No cached like counts available, serving an empty snapshot")
            return {}
        logger.warning(
            "Serving cached like counts (%d entries, %.0fs old); they may be stale",
            len(self._cache.snapshot()), self._cache.age_seconds() or 0.0,
        )
        return self._cache.snapshot()
