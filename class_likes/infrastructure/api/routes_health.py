"""Health check endpoint."""

from fastapi import APIRouter, Depends

from class_likes.application.services.counter_store import CounterStore
from class_likes.infrastructure.api.dependencies import get_counter_store

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(store: CounterStore = Depends(get_counter_store)):
    """Check that the counter backend answers a read."""
    reachable, detail = await store.check_health()
    return {
        "status": "ok" if reachable else "degraded",
        "backend": store.backend.name,
        "durable": store.backend.durable,
        "detail": detail,
    }
