"""
In-Memory Task Store

Volatile, process-local storage for A2A tasks. The store is the single
owner of every Task: callers write whole task values with ``put`` and read
copies with ``get``, so nothing outside the store can mutate a stored task.

Tasks are never evicted; memory grows with the number of distinct task ids
submitted over the lifetime of the process.
"""

import copy
import threading
from contextlib import contextmanager
from typing import Iterator

import structlog

from migration_agent.core.domain.errors import TaskNotFoundError
from migration_agent.core.domain.models import Task

logger = structlog.get_logger()


class ReadWriteLock:
    """
    Shared/exclusive lock.

    Any number of readers may hold the lock together; a writer holds it
    alone. Waiting writers block new readers so writes are not starved.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class InMemoryTaskStore:
    """
    Concurrency-safe mapping from task id to Task.

    All critical sections are constant-time dict operations; the lock is
    never held across an await or an external call.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}
        self._lock = ReadWriteLock()
        self.logger = logger.bind(component="task_store")

    def put(self, task: Task) -> None:
        """
        Insert or overwrite a task keyed by its id.

        Overwrite is how state transitions are recorded; the stored value is
        a private copy of ``task``.
        """
        snapshot = copy.deepcopy(task)
        with self._lock.write():
            self._tasks[snapshot.id] = snapshot

        self.logger.debug("task.stored", task_id=snapshot.id, state=snapshot.state.value)

    def get(self, task_id: str) -> Task:
        """
        Return a copy of the task stored under ``task_id``.

        Raises:
            TaskNotFoundError: If no task with that id was ever stored
        """
        with self._lock.read():
            task = self._tasks.get(task_id)

        if task is None:
            raise TaskNotFoundError(task_id)
        return copy.deepcopy(task)

    def __contains__(self, task_id: object) -> bool:
        with self._lock.read():
            return task_id in self._tasks

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._tasks)
