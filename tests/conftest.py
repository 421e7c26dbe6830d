"""Shared fixtures for migration agent tests."""

import asyncio
from typing import List

import pytest

from migration_agent.api.jsonrpc import JsonRpcDispatcher
from migration_agent.application.task_processor import TaskProcessor
from migration_agent.core.domain.errors import PathwayGenerationError
from migration_agent.core.domain.models import UserProfile
from migration_agent.infrastructure.persistence.memory_task_store import InMemoryTaskStore


class StubGenerator:
    """In-process PathwayGeneratorProtocol implementation recording its calls."""

    def __init__(self, error: Exception | None = None, delay: float = 0.0):
        self.error = error
        self.delay = delay
        self.calls: List[UserProfile] = []

    async def generate_pathways(self, profile: UserProfile) -> str:
        self.calls.append(profile)
        if self.delay:
            await asyncio.sleep(self.delay)
        else:
            await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return f"# Best Migration Option: {profile.destination or 'Anywhere'} work visa"


class RecordingTaskStore(InMemoryTaskStore):
    """Task store that remembers the state of every write."""

    def __init__(self) -> None:
        super().__init__()
        self.writes: list[tuple[str, str]] = []

    def put(self, task) -> None:
        self.writes.append((task.id, task.state.value))
        super().put(task)


@pytest.fixture
def task_store():
    return RecordingTaskStore()


@pytest.fixture
def stub_generator():
    return StubGenerator()


@pytest.fixture
def failing_generator():
    return StubGenerator(error=PathwayGenerationError("API error (status 403): quota exceeded"))


@pytest.fixture
def processor(task_store, stub_generator):
    return TaskProcessor(store=task_store, generator=stub_generator)


@pytest.fixture
def dispatcher(processor):
    return JsonRpcDispatcher(processor)
