"""Tests for /schedule and /health."""

import pytest
from fastapi.testclient import TestClient

from class_likes.application.ports.schedule_repo import ScheduleRepository
from class_likes.domain.entities.class_session import ClassSession
from class_likes.domain.value_objects.enums import LikeAction
from class_likes.infrastructure.api.dependencies import get_counter_store, get_schedule_repo
from class_likes.main import app


class FakeScheduleRepo(ScheduleRepository):
    def get_all(self):
        return [
            ClassSession(
                id="6", subject="مدخل إلى دراسة القانون", day="الثلاثاء", date="2025-12-23",
                time="12:00", location="كلية الحقوق", professor="الأستاذ محمد", room="6",
                category="Law", initial_likes=2,
            ),
            ClassSession(
                id="2", subject="النظرية العامة للقانون الدستوري", day="الإثنين", date="2025-12-22",
                time="12:00", location="كلية الحقوق", professor="الأستاذ إبراهيم", initial_likes=4,
            ),
        ]


@pytest.fixture
def client(memory_store):
    app.dependency_overrides[get_counter_store] = lambda: memory_store
    app.dependency_overrides[get_schedule_repo] = lambda: FakeScheduleRepo()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_schedule_merges_live_counts(client, memory_store):
    await memory_store.mutate("6", LikeAction.LIKE)

    response = client.get("/schedule")
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert [s["id"] for s in body["sessions"]] == ["2", "6"]
    likes = {s["id"]: s["likes"] for s in body["sessions"]}
    assert likes == {"2": 4, "6": 1}
    assert body["sessions"][0]["room"] is None


def test_health_reports_backend(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "backend": "memory",
        "durable": False,
        "detail": "0 counters",
    }
