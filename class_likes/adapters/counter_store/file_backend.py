"""Local JSON file counter backend — implements CounterBackend.

Layout: one JSON object ``{"<classId>": <count>, ...}``.

Every mutation is read-whole-file → modify → write-whole-file, serialized
by a process-wide mutex plus an exclusive ``flock`` on a sidecar lock file
(so several worker processes sharing the file also serialize). Writes go
through a temp file + ``os.replace`` so readers never see half a document.
An empty, unparsable or non-object file is reset to ``{}``.
"""

from __future__ import annotations

import asyncio
import fcntl
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from class_likes.application.errors import BackendUnavailableError
from class_likes.application.ports.counter_backend import CounterBackend
from class_likes.domain.entities.like_counter import CounterSnapshot, LikeCounter
from class_likes.domain.policies.counting import sanitize_snapshot
from class_likes.domain.value_objects.enums import LikeAction

logger = logging.getLogger(__name__)

# One mutex per resolved path, shared by every backend instance in the process
_PATH_LOCKS: dict[Path, threading.Lock] = {}
_PATH_LOCKS_GUARD = threading.Lock()


def _mutex_for(path: Path) -> threading.Lock:
    with _PATH_LOCKS_GUARD:
        return _PATH_LOCKS.setdefault(path, threading.Lock())


class JsonFileCounterBackend(CounterBackend):
    name = "file"

    def __init__(self, path: str | Path):
        self._path = Path(path).resolve()
        self._lock_path = self._path.with_name(self._path.name + ".lock")
        self._mutex = _mutex_for(self._path)

    @property
    def path(self) -> Path:
        return self._path

    async def get_all(self) -> CounterSnapshot:
        return await asyncio.to_thread(self._read_all)

    async def mutate(self, class_id: str, action: LikeAction) -> int:
        return await asyncio.to_thread(self._mutate, class_id, action)

    # ─── Blocking helpers (run in a worker thread) ───────────────────

    def _read_all(self) -> CounterSnapshot:
        try:
            with self._locked():
                return self._load()
        except OSError as exc:
            raise BackendUnavailableError(self.name, f"cannot read {self._path}: {exc}") from exc

    def _mutate(self, class_id: str, action: LikeAction) -> int:
        try:
            with self._locked():
                snapshot = self._load()
                counter = LikeCounter(class_id, snapshot.get(class_id, 0))
                snapshot[class_id] = counter.apply(action)
                self._write(snapshot)
                return counter.count
        except OSError as exc:
            raise BackendUnavailableError(self.name, f"cannot update {self._path}: {exc}") from exc

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with self._mutex:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._lock_path, "a") as lock_file:
                fcntl.flock(lock_file, fcntl.LOCK_EX)
                try:
                    yield
                finally:
                    fcntl.flock(lock_file, fcntl.LOCK_UN)

    def _load(self) -> CounterSnapshot:
        """Read the document, repairing it in place if it is not usable."""
        if not self._path.exists():
            self._write({})
            return {}

        content = self._path.read_bytes().strip()
        if not content:
            self._write({})
            return {}

        try:
            raw = json.loads(content.decode("utf-8"))
        except ValueError:
            # UnicodeDecodeError included
            logger.warning("Invalid JSON in %s, resetting to an empty object", self._path)
            self._write({})
            return {}

        if not isinstance(raw, dict):
            logger.warning(
                "Expected a JSON object in %s, got %s; resetting to an empty object",
                self._path, type(raw).__name__,
            )
            self._write({})
            return {}

        snapshot, dirty = sanitize_snapshot(raw)
        if dirty:
            logger.warning("Repaired invalid like counts in %s", self._path)
            self._write(snapshot)
        return snapshot

    def _write(self, snapshot: CounterSnapshot) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(snapshot, f, ensure_ascii=False, indent=2, sort_keys=True)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
