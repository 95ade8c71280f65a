"""Schedule endpoint — the static class list with live like counts."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from class_likes.application.use_cases.list_schedule import ListScheduleUseCase, ScheduledClass
from class_likes.infrastructure.api.dependencies import get_list_schedule_uc

router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.get("")
async def list_schedule(uc: ListScheduleUseCase = Depends(get_list_schedule_uc)):
    """All class sessions ordered by date and time."""
    classes = await uc.execute()
    return {
        "total": len(classes),
        "sessions": [_serialize(c) for c in classes],
    }


def _serialize(c: ScheduledClass) -> dict:
    s = c.session
    return {
        "id": s.id,
        "subject": s.subject,
        "day": s.day,
        "date": s.date,
        "time": s.time,
        "location": s.location,
        "room": s.room,
        "professor": s.professor,
        "category": s.category,
        "likes": c.likes,
    }
