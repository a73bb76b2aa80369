"""In-memory storage backend for task records.

Beginner terms:
- Lock: a mutual-exclusion primitive; only one thread holds it at a time.
- Snapshot: a copy of the collection taken while the lock is held.
- CRUD: create, read, update, delete operations.
"""

from __future__ import annotations

import logging
import threading

from .errors import InvalidStatusError, InvalidTaskIdError, TaskNotFoundError
from .models import VALID_STATUSES, Task

logger = logging.getLogger(__name__)


class TaskStore:
    """Thread-safe in-memory storage for Task records.

    Every operation, reads included, holds one store-wide lock for its full
    duration. Tasks live in an insertion-ordered dict keyed by id: lookups are
    O(1) and iteration order is creation order. Updates reassign an existing
    key, which keeps the task's position.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tasks: dict[int, Task] = {}
        # Ids are never reused, even after deletion.
        self._next_id = 1

    def create(self, *, title: str, description: str, status: str) -> Task:
        """Store a new task under the next id and return it."""
        _ensure_valid_status(status)
        with self._lock:
            task = Task(id=self._next_id, title=title, description=description, status=status)
            self._next_id += 1
            self._tasks[task.id] = task
            total = len(self._tasks)
        logger.info("task_store event=created task_id=%s total=%s", task.id, total)
        return task

    def list_all(self) -> list[Task]:
        """Return every task in insertion order."""
        with self._lock:
            return list(self._tasks.values())

    def get(self, task_id: int) -> Task:
        _ensure_valid_id(task_id)
        with self._lock:
            task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError()
        return task

    def update(self, task_id: int, *, title: str, description: str, status: str) -> Task:
        """Replace every field except the id of an existing task."""
        _ensure_valid_id(task_id)
        _ensure_valid_status(status)
        with self._lock:
            if task_id not in self._tasks:
                raise TaskNotFoundError()
            task = Task(id=task_id, title=title, description=description, status=status)
            self._tasks[task_id] = task
        logger.info("task_store event=updated task_id=%s status=%s", task_id, status)
        return task

    def delete(self, task_id: int) -> None:
        _ensure_valid_id(task_id)
        with self._lock:
            if self._tasks.pop(task_id, None) is None:
                raise TaskNotFoundError()
            total = len(self._tasks)
        logger.info("task_store event=deleted task_id=%s total=%s", task_id, total)

    def count(self) -> int:
        with self._lock:
            return len(self._tasks)


def _ensure_valid_id(task_id: int) -> None:
    if task_id < 1:
        raise InvalidTaskIdError()


def _ensure_valid_status(status: str) -> None:
    if status not in VALID_STATUSES:
        logger.info("task_store event=rejected reason=invalid_status status=%r", status)
        raise InvalidStatusError()
