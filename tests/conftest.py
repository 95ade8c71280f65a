"""Pytest configuration and shared fixtures."""

import os

# Chosen before class_likes.config is first imported, so importing the app
# never reaches for a real store from the developer's environment.
os.environ["LIKES_BACKEND"] = "memory"

import pytest  # noqa: E402

from class_likes.adapters.counter_store.memory_backend import InMemoryCounterBackend  # noqa: E402
from class_likes.application.services.counter_store import CounterStore  # noqa: E402


@pytest.fixture
def memory_backend():
    return InMemoryCounterBackend()


@pytest.fixture
def memory_store(memory_backend):
    return CounterStore(memory_backend, timeout=1.0)


@pytest.fixture
def likes_file(tmp_path):
    return tmp_path / "data" / "likes.json"
