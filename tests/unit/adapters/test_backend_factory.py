"""Tests for once-per-process counter backend selection."""

import pytest

from class_likes.adapters.counter_store.document_backend import DocumentCounterBackend
from class_likes.adapters.counter_store.factory import build_counter_backend, select_backend_kind
from class_likes.adapters.counter_store.file_backend import JsonFileCounterBackend
from class_likes.adapters.counter_store.kv_rest_backend import KvRestCounterBackend
from class_likes.adapters.counter_store.memory_backend import InMemoryCounterBackend
from class_likes.config import Settings
from class_likes.domain.value_objects.enums import BackendKind


def _settings(tmp_path, **overrides) -> Settings:
    values = {
        "LIKES_BACKEND": "",
        "KV_REST_API_URL": "",
        "KV_REST_API_TOKEN": "",
        "DOCUMENT_STORE_URL": "",
        "DATABASE_URL": "",
        "LIKES_FILE_PATH": str(tmp_path / "data" / "likes.json"),
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_defaults_to_file(tmp_path):
    settings = _settings(tmp_path)
    assert select_backend_kind(settings) == BackendKind.FILE
    assert isinstance(build_counter_backend(settings), JsonFileCounterBackend)


def test_kv_needs_url_and_token(tmp_path):
    assert select_backend_kind(_settings(tmp_path, KV_REST_API_URL="https://kv")) == BackendKind.FILE
    settings = _settings(tmp_path, KV_REST_API_URL="https://kv", KV_REST_API_TOKEN="t")
    assert select_backend_kind(settings) == BackendKind.KV
    assert isinstance(build_counter_backend(settings), KvRestCounterBackend)


def test_kv_takes_precedence_over_database(tmp_path):
    settings = _settings(
        tmp_path,
        KV_REST_API_URL="https://kv",
        KV_REST_API_TOKEN="t",
        DATABASE_URL="sqlite+aiosqlite:///x.db",
    )
    assert select_backend_kind(settings) == BackendKind.KV


def test_document_store_selected(tmp_path):
    settings = _settings(tmp_path, DOCUMENT_STORE_URL="https://docs")
    assert select_backend_kind(settings) == BackendKind.DOCUMENT
    assert isinstance(build_counter_backend(settings), DocumentCounterBackend)


def test_database_url_selects_sql(tmp_path):
    settings = _settings(tmp_path, DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'x.db'}")
    assert select_backend_kind(settings) == BackendKind.SQL
    assert build_counter_backend(settings).name == "sql"


def test_explicit_backend_wins(tmp_path):
    settings = _settings(
        tmp_path, LIKES_BACKEND="Memory", KV_REST_API_URL="https://kv", KV_REST_API_TOKEN="t"
    )
    assert select_backend_kind(settings) == BackendKind.MEMORY
    assert isinstance(build_counter_backend(settings), InMemoryCounterBackend)


def test_unknown_explicit_backend_is_rejected(tmp_path):
    with pytest.raises(ValueError, match="LIKES_BACKEND"):
        select_backend_kind(_settings(tmp_path, LIKES_BACKEND="mongo"))


def test_explicit_backend_missing_config_is_rejected(tmp_path):
    with pytest.raises(ValueError, match="KV_REST_API_URL"):
        build_counter_backend(_settings(tmp_path, LIKES_BACKEND="kv"))


def test_unwritable_file_location_falls_back_to_memory(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    settings = _settings(tmp_path, LIKES_FILE_PATH=str(blocker / "likes.json"))

    backend = build_counter_backend(settings)
    assert isinstance(backend, InMemoryCounterBackend)
    assert backend.durable is False
