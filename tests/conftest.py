"""Shared pytest fixtures."""

import os

import pytest
from loguru import logger

from logkeeper.utils.config import reset_config
from tests.fixtures.memory_store import TODAY, InMemoryLogStore


@pytest.fixture
def today():
    """Fixed reference date for every age computation."""
    return TODAY


@pytest.fixture
def local_store():
    return InMemoryLogStore(name="local")


@pytest.fixture
def remote_store():
    return InMemoryLogStore(name="remote")


@pytest.fixture
def log_messages():
    """Capture loguru messages emitted during a test."""
    messages: list[str] = []
    sink_id = logger.add(lambda msg: messages.append(msg.record["message"]), level="DEBUG")
    yield messages
    logger.remove(sink_id)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Isolate tests from LOG_KEEPER_* variables and the cached config."""
    for key in list(os.environ):
        if key.startswith("LOG_KEEPER_"):
            monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()
