"""Counter backend selection — evaluated once per process.

Precedence when LIKES_BACKEND is not set:
    KV_REST_API_URL + KV_REST_API_TOKEN → kv
    DOCUMENT_STORE_URL                  → document
    DATABASE_URL                        → sql
    otherwise                           → file (memory if the file is not writable)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from class_likes.adapters.counter_store.document_backend import DocumentCounterBackend
from class_likes.adapters.counter_store.file_backend import JsonFileCounterBackend
from class_likes.adapters.counter_store.kv_rest_backend import KvRestCounterBackend
from class_likes.adapters.counter_store.memory_backend import InMemoryCounterBackend
from class_likes.application.ports.counter_backend import CounterBackend
from class_likes.config import Settings
from class_likes.domain.value_objects.enums import BackendKind

logger = logging.getLogger(__name__)


def select_backend_kind(settings: Settings) -> BackendKind:
    """Pick the backend from configuration presence (or the explicit override)."""
    if settings.likes_backend:
        try:
            return BackendKind(settings.likes_backend.strip().lower())
        except ValueError:
            choices = ", ".join(k.value for k in BackendKind)
            raise ValueError(
                f"LIKES_BACKEND={settings.likes_backend!r} is not one of: {choices}"
            ) from None
    if settings.kv_rest_api_url and settings.kv_rest_api_token:
        return BackendKind.KV
    if settings.document_store_url:
        return BackendKind.DOCUMENT
    if settings.database_url:
        return BackendKind.SQL
    return BackendKind.FILE


def build_counter_backend(settings: Settings, kind: BackendKind | None = None) -> CounterBackend:
    kind = kind or select_backend_kind(settings)

    if kind == BackendKind.KV:
        if not (settings.kv_rest_api_url and settings.kv_rest_api_token):
            raise ValueError("kv backend needs KV_REST_API_URL and KV_REST_API_TOKEN")
        backend: CounterBackend = KvRestCounterBackend(
            url=settings.kv_rest_api_url,
            token=settings.kv_rest_api_token,
            hash_key=settings.kv_hash_key,
            legacy_key=settings.kv_legacy_key,
            timeout=settings.backend_timeout_seconds,
        )
    elif kind == BackendKind.DOCUMENT:
        if not settings.document_store_url:
            raise ValueError("document backend needs DOCUMENT_STORE_URL")
        backend = DocumentCounterBackend(
            base_url=settings.document_store_url,
            document=settings.document_name,
            token=settings.document_store_token,
            max_attempts=settings.document_max_attempts,
            backoff=settings.document_retry_backoff,
            timeout=settings.backend_timeout_seconds,
        )
    elif kind == BackendKind.SQL:
        if not settings.database_url:
            raise ValueError("sql backend needs DATABASE_URL")
        # Imported lazily so deployments without a database never load a driver
        from class_likes.adapters.persistence.database import build_engine
        from class_likes.adapters.persistence.sql_backend import SqlCounterBackend

        backend = SqlCounterBackend(build_engine(settings.database_url, echo=settings.debug))
    elif kind == BackendKind.FILE:
        path = Path(settings.likes_file_path)
        if _is_writable_location(path):
            backend = JsonFileCounterBackend(path)
        else:
            logger.warning(
                "Likes file %s is not writable; falling back to in-memory counts "
                "(they will NOT survive a restart)", path,
            )
            backend = InMemoryCounterBackend()
    else:
        backend = InMemoryCounterBackend()

    logger.info("Using '%s' counter backend", backend.name)
    if not backend.durable:
        logger.warning("The '%s' counter backend is for development only", backend.name)
    return backend


def _is_writable_location(path: Path) -> bool:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        return False
    if path.exists():
        return os.access(path, os.W_OK)
    return os.access(path.parent, os.W_OK)
