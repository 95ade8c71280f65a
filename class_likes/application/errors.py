"""Counter store failures.

Adapters translate their I/O errors (httpx, OSError, SQLAlchemy) into
these so the application layer only ever handles one hierarchy.
"""

from __future__ import annotations


class CounterStoreError(Exception):
    """Base class for any failure of a counter backend."""

    def __init__(self, backend: str, message: str):
        self.backend = backend
        self.message = message
        super().__init__(f"[{backend}] {message}")


class BackendUnavailableError(CounterStoreError):
    """Backend I/O failed, timed out or returned something unusable."""


class MutationConflictError(CounterStoreError):
    """Optimistic-concurrency retries were exhausted without a clean write."""

    def __init__(self, backend: str, class_id: str, attempts: int):
        self.class_id = class_id
        self.attempts = attempts
        super().__init__(
            backend,
            f"could not update '{class_id}' after {attempts} attempts",
        )


class MutationFailedError(Exception):
    """A like/unlike was not applied.

    ``last_known`` is the best count the store can vouch for (it comes from
    the non-authoritative cache) or None when nothing is known.
    """

    def __init__(self, class_id: str, last_known: int | None, reason: str):
        self.class_id = class_id
        self.last_known = last_known
        self.reason = reason
        super().__init__(f"like update for '{class_id}' failed: {reason}")
