"""Port interface for like-counter persistence backends."""

from abc import ABC, abstractmethod

from class_likes.domain.entities.like_counter import CounterSnapshot
from class_likes.domain.value_objects.enums import LikeAction


class CounterBackend(ABC):
    """One storage strategy for the classId -> count map.

    Implementations raise ``CounterStoreError`` subclasses on failure; the
    ``CounterStore`` service decides what the caller sees.
    """

    name: str = "abstract"
    # False when counts do not survive a process restart
    durable: bool = True

    @abstractmethod
    async def get_all(self) -> CounterSnapshot:
        """Return every known classId with its count."""
        ...

    @abstractmethod
    async def mutate(self, class_id: str, action: LikeAction) -> int:
        """Atomically apply +1 / clamped -1 and return the resulting count.

        Two concurrent calls for the same class_id must never both compute
        from the same previous value.
        """
        ...

    async def migrate_legacy(self) -> int:
        """Copy data from an older storage layout. Returns counters copied."""
        return 0

    async def aclose(self) -> None:
        """Release connections / pools held by the backend."""
        return None
