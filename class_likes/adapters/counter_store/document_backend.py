"""Versioned document store backend — implements CounterBackend.

For remote stores that can only read and replace a whole document. The
whole ``{classId: count}`` map is one JSON document:

    GET {base}/{name}   → 200 + JSON object + ETag header, or 404 (absent)
    PUT {base}/{name}   with If-Match: <etag>  (If-None-Match: * when absent)
                        → 2xx written, 409/412 someone else wrote first

Mutations use optimistic concurrency: read, recompute the count from what
was just read, conditional write. On a version conflict or a failed read
the whole cycle is repeated against a fresh read, up to ``max_attempts``
times with a short linear backoff, then ``MutationConflictError`` is
raised. A failed write (network error, 5xx) is never retried, since the
server may have applied it; it surfaces as ``BackendUnavailableError``.
An update is never written against a stale version.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import httpx

from class_likes.application.errors import BackendUnavailableError, MutationConflictError
from class_likes.application.ports.counter_backend import CounterBackend
from class_likes.domain.entities.like_counter import CounterSnapshot, LikeCounter
from class_likes.domain.policies.counting import sanitize_snapshot
from class_likes.domain.value_objects.enums import LikeAction

logger = logging.getLogger(__name__)

CONFLICT_STATUSES = (409, 412)


@dataclass(frozen=True)
class VersionedDocument:
    counts: CounterSnapshot
    # None → the document does not exist yet
    version: str | None


class DocumentCounterBackend(CounterBackend):
    name = "document"

    def __init__(
        self,
        base_url: str,
        document: str = "class_likes",
        token: str = "",
        max_attempts: int = 5,
        backoff: float = 0.05,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._document_url = f"{base_url.rstrip('/')}/{document}"
        self._token = token
        self._max_attempts = max_attempts
        self._backoff = backoff
        self._timeout = timeout
        self._transport = transport

    async def get_all(self) -> CounterSnapshot:
        async with self._client() as client:
            document = await self._fetch(client)
        return document.counts

    async def mutate(self, class_id: str, action: LikeAction) -> int:
        last_error: BackendUnavailableError | None = None

        async with self._client() as client:
            for attempt in range(1, self._max_attempts + 1):
                try:
                    document = await self._fetch(client)
                except BackendUnavailableError as exc:
                    last_error = exc
                    logger.warning(
                        "Document store error reading for '%s' (attempt %d/%d): %s",
                        class_id, attempt, self._max_attempts, exc.message,
                    )
                else:
                    counter = LikeCounter(class_id, document.counts.get(class_id, 0))
                    counter.apply(action)
                    updated = {**document.counts, class_id: counter.count}
                    # Write failures are final: the PUT may have landed
                    if await self._store(client, updated, document.version):
                        if attempt > 1:
                            logger.info("'%s' written on attempt %d", class_id, attempt)
                        return counter.count
                    last_error = None
                    logger.info(
                        "Version conflict writing '%s' (attempt %d/%d), re-reading",
                        class_id, attempt, self._max_attempts,
                    )

                if attempt < self._max_attempts:
                    await asyncio.sleep(self._backoff * attempt)

        logger.error("Giving up on '%s' after %d attempts", class_id, self._max_attempts)
        raise MutationConflictError(self.name, class_id, self._max_attempts) from last_error

    def _client(self) -> httpx.AsyncClient:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return httpx.AsyncClient(
            transport=self._transport, timeout=self._timeout, headers=headers
        )

    async def _fetch(self, client: httpx.AsyncClient) -> VersionedDocument:
        try:
            response = await client.get(self._document_url)
            if response.status_code == 404:
                return VersionedDocument(counts={}, version=None)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise BackendUnavailableError(self.name, f"read failed: {exc}") from exc

        version = response.headers.get("ETag")
        if not version:
            # Without a version a conditional write is impossible
            raise BackendUnavailableError(self.name, "document has no ETag")

        try:
            raw = response.json()
        except ValueError:
            raw = None
        if not isinstance(raw, dict):
            logger.warning(
                "Document %s is not a JSON object; treating it as empty until the next write",
                self._document_url,
            )
            return VersionedDocument(counts={}, version=version)

        counts, dirty = sanitize_snapshot(raw)
        if dirty:
            logger.warning("Document %s holds invalid counts; reading them as 0", self._document_url)
        return VersionedDocument(counts=counts, version=version)

    async def _store(
        self, client: httpx.AsyncClient, counts: CounterSnapshot, version: str | None
    ) -> bool:
        """Conditional write. False means another writer got there first."""
        if version is None:
            condition = {"If-None-Match": "*"}
        else:
            condition = {"If-Match": version}
        try:
            response = await client.put(self._document_url, json=counts, headers=condition)
            if response.status_code in CONFLICT_STATUSES:
                return False
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise BackendUnavailableError(self.name, f"write failed: {exc}") from exc
        return True
