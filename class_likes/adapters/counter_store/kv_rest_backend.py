"""Redis-over-REST hash backend — implements CounterBackend.

Talks the Vercel KV / Upstash REST protocol: each Redis command is POSTed
as a JSON array to the store URL and answered with ``{"result": ...}`` or
``{"error": "..."}``.

All counts live in one hash (``class_likes_v2`` by default), one field per
classId. Increments use the server-side atomic HINCRBY inside a Lua script
that also applies the zero floor, so neither the increment nor the clamp
is ever a client-side read-modify-write.

Older deployments kept the whole map as one JSON blob under
``class_likes``. The first read or write of each process copies that blob
into the hash (fields that already exist are kept, the blob is never
deleted) and a marker key stops it from being applied twice.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import httpx

from class_likes.application.errors import BackendUnavailableError
from class_likes.application.ports.counter_backend import CounterBackend
from class_likes.domain.entities.like_counter import CounterSnapshot
from class_likes.domain.policies.counting import coerce_count, delta_for, sanitize_snapshot
from class_likes.domain.value_objects.enums import LikeAction

logger = logging.getLogger(__name__)

# KEYS[1] = hash, ARGV[1] = field, ARGV[2] = delta
INCREMENT_CLAMPED_SCRIPT = """\
local n = redis.call('HINCRBY', KEYS[1], ARGV[1], ARGV[2])
if n < 0 then
  redis.call('HSET', KEYS[1], ARGV[1], 0)
  n = 0
end
return n
"""

# KEYS[1] = hash, KEYS[2] = marker, ARGV = field, value, field, value, ...
MIGRATE_LEGACY_SCRIPT = """\
if not redis.call('SET', KEYS[2], '1', 'NX') then
  return -1
end
local written = 0
for i = 1, #ARGV, 2 do
  written = written + redis.call('HSETNX', KEYS[1], ARGV[i], ARGV[i + 1])
end
return written
"""


class KvRestCounterBackend(CounterBackend):
    """Atomic per-field counters in a remote Redis hash."""

    name = "kv"

    def __init__(
        self,
        url: str,
        token: str,
        hash_key: str = "class_likes_v2",
        legacy_key: str = "class_likes",
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._url = url.rstrip("/")
        self._token = token
        self._hash_key = hash_key
        self._legacy_key = legacy_key
        self._marker_key = f"{hash_key}:migrated"
        self._timeout = timeout
        self._transport = transport
        self._migration_checked = False
        self._migration_lock = asyncio.Lock()

    async def get_all(self) -> CounterSnapshot:
        await self._ensure_migrated()
        raw = await self._command("HGETALL", self._hash_key)
        fields = self._decode_hash(raw)
        snapshot, dirty = sanitize_snapshot(fields)
        if dirty:
            logger.warning("Hash '%s' holds non-numeric or negative counts; reading them as 0", self._hash_key)
        return snapshot

    async def mutate(self, class_id: str, action: LikeAction) -> int:
        await self._ensure_migrated()
        result = await self._command(
            "EVAL", INCREMENT_CLAMPED_SCRIPT, 1, self._hash_key, class_id, delta_for(action)
        )
        if isinstance(result, bool) or not isinstance(result, (int, str)):
            raise BackendUnavailableError(self.name, f"unexpected HINCRBY reply: {result!r}")
        return coerce_count(result)

    async def migrate_legacy(self) -> int:
        """Copy the legacy JSON blob into the hash. Returns fields written."""
        legacy = await self._read_legacy()
        if not legacy:
            return 0

        args: list[Any] = []
        for class_id, count in legacy.items():
            args.extend([class_id, count])
        written = await self._command(
            "EVAL", MIGRATE_LEGACY_SCRIPT, 2, self._hash_key, self._marker_key, *args
        )
        if isinstance(written, bool) or not isinstance(written, int):
            raise BackendUnavailableError(self.name, f"unexpected migration reply: {written!r}")
        if written < 0:
            logger.debug("Legacy key '%s' already migrated", self._legacy_key)
            return 0

        logger.info(
            "Migrated %d of %d legacy like counters from '%s' into hash '%s'",
            written, len(legacy), self._legacy_key, self._hash_key,
        )
        return written

    async def _ensure_migrated(self) -> None:
        if self._migration_checked:
            return
        async with self._migration_lock:
            if self._migration_checked:
                return
            await self.migrate_legacy()
            self._migration_checked = True

    async def _read_legacy(self) -> CounterSnapshot | None:
        raw = await self._command("GET", self._legacy_key)
        if raw is None:
            return None
        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except ValueError:
                logger.warning("Legacy key '%s' is not valid JSON; skipping migration", self._legacy_key)
                return None
        if not isinstance(raw, dict):
            logger.warning(
                "Legacy key '%s' holds %s, not an object; skipping migration",
                self._legacy_key, type(raw).__name__,
            )
            return None
        snapshot, _ = sanitize_snapshot(raw)
        return snapshot

    def _decode_hash(self, raw: Any) -> dict[str, Any]:
        """HGETALL replies with a flat [field, value, ...] list (or null)."""
        if raw is None:
            return {}
        if isinstance(raw, dict):
            return raw
        if isinstance(raw, list) and len(raw) % 2 == 0:
            return {str(raw[i]): raw[i + 1] for i in range(0, len(raw), 2)}
        logger.warning("Malformed HGETALL reply for '%s'; treating it as empty", self._hash_key)
        return {}

    async def _command(self, *args: Any) -> Any:
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.post(
                    self._url,
                    json=[str(a) for a in args],
                    headers={"Authorization": f"Bearer {self._token}"},
                )
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise BackendUnavailableError(self.name, f"{args[0]} failed: {exc}") from exc

        if not isinstance(payload, dict):
            raise BackendUnavailableError(self.name, f"{args[0]} returned {payload!r}")
        if payload.get("error"):
            raise BackendUnavailableError(self.name, f"{args[0]} error: {payload['error']}")
        return payload.get("result")
