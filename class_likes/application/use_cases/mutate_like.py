"""MutateLikeUseCase — apply one like/unlike and report the resulting count."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from class_likes.application.errors import MutationFailedError
from class_likes.application.services.counter_store import CounterStore
from class_likes.domain.value_objects.enums import LikeAction

logger = logging.getLogger(__name__)


@dataclass
class MutationResult:
    """Outcome of one like/unlike request."""

    class_id: str
    success: bool
    count: int
    error: str | None = None


class MutateLikeUseCase:
    def __init__(self, store: CounterStore):
        self._store = store

    async def execute(self, class_id: str, action: LikeAction) -> MutationResult:
        """Delegate to the store.

        On failure the result still carries the most accurate count we
        have: the cached value, else whatever a fresh (fallback-safe) read
        returns for the class, else 0.
        """
        try:
            count = await self._store.mutate(class_id, action)
        except MutationFailedError as exc:
            count = exc.last_known
            if count is None:
                snapshot = await self._store.get_all()
                count = snapshot.get(class_id, 0)
            logger.warning(
                "Like update for '%s' (%s) failed, reporting count=%d: %s",
                class_id, action.value, count, exc.reason,
            )
            return MutationResult(class_id=class_id, success=False, count=count, error=exc.reason)

        logger.info("Class '%s' %s → %d", class_id, action.value, count)
        return MutationResult(class_id=class_id, success=True, count=count)
