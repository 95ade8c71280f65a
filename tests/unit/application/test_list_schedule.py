"""Tests for ListScheduleUseCase — ordering and like merging."""

import pytest

from class_likes.application.services.counter_store import CounterStore
from class_likes.application.use_cases.list_schedule import ListScheduleUseCase
from class_likes.domain.entities.class_session import ClassSession

from fakes import FakeScheduleRepo, ToggleBackend


def _session(id, date, time, initial_likes=0):
    return ClassSession(
        id=id, subject=f"Subject {id}", day="الإثنين", date=date, time=time,
        location="ملحقة 1", professor="الأستاذ", initial_likes=initial_likes,
    )


@pytest.mark.asyncio
async def test_sessions_sorted_by_date_then_time():
    repo = FakeScheduleRepo([
        _session("3", "2025-12-23", "10:00"),
        _session("1", "2025-12-22", "14:00"),
        _session("2", "2025-12-22", "12:00"),
    ])
    uc = ListScheduleUseCase(repo, CounterStore(ToggleBackend()))
    result = await uc.execute()
    assert [c.session.id for c in result] == ["2", "1", "3"]


@pytest.mark.asyncio
async def test_stored_count_wins_over_initial_likes():
    repo = FakeScheduleRepo([
        _session("1", "2025-12-22", "12:00", initial_likes=3),
        _session("2", "2025-12-22", "13:00", initial_likes=3),
    ])
    uc = ListScheduleUseCase(repo, CounterStore(ToggleBackend({"2": 0})))
    likes = {c.session.id: c.likes for c in await uc.execute()}
    assert likes == {"1": 3, "2": 0}
