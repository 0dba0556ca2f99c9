"""Test fixtures and store doubles."""

from tests.fixtures.memory_store import InMemoryLogStore, log_name

__all__ = [
    "InMemoryLogStore",
    "log_name",
]
