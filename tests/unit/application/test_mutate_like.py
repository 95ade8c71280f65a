"""Tests for MutateLikeUseCase and GetLikesUseCase."""

import pytest

from class_likes.application.services.counter_store import CounterStore
from class_likes.application.use_cases.get_likes import GetLikesUseCase
from class_likes.application.use_cases.mutate_like import MutateLikeUseCase
from class_likes.domain.value_objects.enums import LikeAction

from fakes import ToggleBackend


@pytest.mark.asyncio
async def test_like_success():
    uc = MutateLikeUseCase(CounterStore(ToggleBackend({"x": 2})))
    result = await uc.execute("x", LikeAction.LIKE)
    assert result.success is True
    assert result.count == 3
    assert result.error is None


@pytest.mark.asyncio
async def test_unlike_at_zero_stays_zero():
    backend = ToggleBackend()
    uc = MutateLikeUseCase(CounterStore(backend))
    result = await uc.execute("x", LikeAction.UNLIKE)
    assert result.success is True
    assert result.count == 0
    assert backend.counts["x"] == 0


@pytest.mark.asyncio
async def test_failure_reports_cached_count():
    backend = ToggleBackend({"x": 5})
    store = CounterStore(backend)
    await store.get_all()
    backend.writes_fail = True
    backend.counts["x"] = 6  # another process moved on; cache still says 5

    result = await MutateLikeUseCase(store).execute("x", LikeAction.LIKE)
    assert result.success is False
    assert result.count == 5
    assert result.error


@pytest.mark.asyncio
async def test_failure_without_cache_reads_pre_mutation_count():
    backend = ToggleBackend({"x": 4})
    backend.writes_fail = True

    result = await MutateLikeUseCase(CounterStore(backend)).execute("x", LikeAction.LIKE)
    assert result.success is False
    assert result.count == 4


@pytest.mark.asyncio
async def test_failure_with_backend_down_reports_zero():
    backend = ToggleBackend({"x": 4})
    backend.writes_fail = True
    backend.reads_fail = True

    result = await MutateLikeUseCase(CounterStore(backend)).execute("x", LikeAction.UNLIKE)
    assert result.success is False
    assert result.count == 0


@pytest.mark.asyncio
async def test_get_likes_returns_snapshot():
    uc = GetLikesUseCase(CounterStore(ToggleBackend({"a": 1, "b": 0})))
    assert await uc.execute() == {"a": 1, "b": 0}
