"""
Application Layer - Task Processor

This module drives a single task through its lifecycle:

    working  ->  completed   (generator returned text)
             ->  failed      (generator raised)

The processor:
- Writes the task in ``working`` state before any external call
- Extracts a UserProfile from the message text
- Calls the pathway generator (the only blocking step)
- Writes exactly one terminal state and returns it

Generator failures are recorded on the task, never raised to the caller
and never retried.
"""

import asyncio
import uuid
from datetime import datetime
from typing import Callable, Optional

import structlog

from migration_agent.core.domain.errors import PathwayGenerationError
from migration_agent.core.domain.models import (
    ARTIFACT_NAME,
    Artifact,
    Message,
    Part,
    StatusMessage,
    Task,
    TaskState,
    TaskStatus,
    UserProfile,
    utc_now,
)
from migration_agent.core.domain.profile import extract_profile
from migration_agent.core.interfaces.generator import PathwayGeneratorProtocol
from migration_agent.infrastructure.persistence.memory_task_store import InMemoryTaskStore

logger = structlog.get_logger()


class TaskProcessor:
    """Service layer orchestrating one pathway request end-to-end.

    The task store is the only place task state lives; the processor builds
    a new Task value for each write and hands it to the store.
    """

    def __init__(
        self,
        store: InMemoryTaskStore,
        generator: PathwayGeneratorProtocol,
        profile_extractor: Callable[[str], UserProfile] = extract_profile,
    ):
        """Initialize TaskProcessor.

        Args:
            store: Task store shared with the protocol dispatcher
            generator: Pathway generator used for every task
            profile_extractor: Query-to-profile function
        """
        self.store = store
        self.generator = generator
        self.profile_extractor = profile_extractor
        self.logger = logger.bind(component="task_processor")

    async def process_task(self, task_id: str, message: Message) -> Task:
        """Process a send request for ``task_id``.

        Args:
            task_id: Caller-supplied or generated task identifier
            message: Inbound message; only its text parts are used

        Returns:
            The task in its terminal state (completed or failed)
        """
        start_time = datetime.now()
        created_at = utc_now()

        self.store.put(
            Task(
                id=task_id,
                status=TaskStatus(state=TaskState.WORKING, timestamp=created_at),
                created_at=created_at,
                updated_at=created_at,
            )
        )

        query = message.text_query()
        self.logger.info(
            "task.processing.started",
            task_id=task_id,
            query=query[:100],
        )

        profile = self.profile_extractor(query)

        try:
            response_text = await self.generator.generate_pathways(profile)
        except asyncio.CancelledError:
            # Request abandoned mid-generation; leave a terminal state behind
            self.store.put(
                self._failed_task(
                    task_id, created_at, PathwayGenerationError("generation cancelled")
                )
            )
            self.logger.warning("task.processing.cancelled", task_id=task_id)
            raise
        except Exception as e:
            task = self._failed_task(task_id, created_at, e)
            self.store.put(task)

            self.logger.warning(
                "task.processing.failed",
                task_id=task_id,
                error=str(e),
                error_type=type(e).__name__,
                duration_seconds=(datetime.now() - start_time).total_seconds(),
            )
            return task

        task = self._completed_task(task_id, created_at, response_text)
        self.store.put(task)

        self.logger.info(
            "task.processing.completed",
            task_id=task_id,
            response_length=len(response_text),
            duration_seconds=(datetime.now() - start_time).total_seconds(),
        )
        return task

    def get_task(self, task_id: str) -> Task:
        """Look up a task; raises TaskNotFoundError for unknown ids."""
        return self.store.get(task_id)

    def _completed_task(self, task_id: str, created_at: datetime, text: str) -> Task:
        now = utc_now()
        return Task(
            id=task_id,
            status=TaskStatus(
                state=TaskState.COMPLETED,
                timestamp=now,
                message=self._agent_message(task_id, text),
            ),
            artifacts=[
                Artifact(
                    artifact_id=str(uuid.uuid4()),
                    name=ARTIFACT_NAME,
                    parts=[Part(text=text)],
                )
            ],
            created_at=created_at,
            updated_at=now,
        )

    def _failed_task(self, task_id: str, created_at: datetime, error: Exception) -> Task:
        now = utc_now()
        return Task(
            id=task_id,
            status=TaskStatus(
                state=TaskState.FAILED,
                timestamp=now,
                message=self._agent_message(
                    task_id, f"Failed to generate pathways: {error}"
                ),
            ),
            created_at=created_at,
            updated_at=now,
        )

    @staticmethod
    def _agent_message(task_id: str, text: str) -> StatusMessage:
        return StatusMessage(
            parts=[Part(text=text)],
            message_id=str(uuid.uuid4()),
            task_id=task_id,
        )

    @staticmethod
    def generate_task_id() -> str:
        """Generate a unique task id."""
        return str(uuid.uuid4())
