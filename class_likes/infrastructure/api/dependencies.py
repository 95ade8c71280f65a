"""FastAPI dependency injection — wires the counter backend into use cases."""

from __future__ import annotations

from fastapi import Depends

from class_likes.adapters.counter_store.factory import build_counter_backend
from class_likes.adapters.csv_loader.loader import CsvScheduleRepository
from class_likes.application.services.counter_store import CounterStore
from class_likes.application.use_cases.get_likes import GetLikesUseCase
from class_likes.application.use_cases.list_schedule import ListScheduleUseCase
from class_likes.application.use_cases.mutate_like import MutateLikeUseCase
from class_likes.config import settings

# Singletons: the backend is chosen once per process
_counter_store = CounterStore(
    build_counter_backend(settings),
    timeout=settings.backend_timeout_seconds,
)
_schedule_repo = CsvScheduleRepository(settings.schedule_csv_path)


def get_counter_store() -> CounterStore:
    return _counter_store


def get_schedule_repo() -> CsvScheduleRepository:
    return _schedule_repo


def get_likes_uc(store: CounterStore = Depends(get_counter_store)) -> GetLikesUseCase:
    return GetLikesUseCase(store)


def get_mutate_like_uc(store: CounterStore = Depends(get_counter_store)) -> MutateLikeUseCase:
    return MutateLikeUseCase(store)


def get_list_schedule_uc(
    store: CounterStore = Depends(get_counter_store),
    schedule: CsvScheduleRepository = Depends(get_schedule_repo),
) -> ListScheduleUseCase:
    return ListScheduleUseCase(schedule=schedule, store=store)
