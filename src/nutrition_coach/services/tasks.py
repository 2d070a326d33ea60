"""Observable state for in-flight AI operations."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Literal, TypeVar

from nutrition_coach.errors import TaskInProgressError

TaskStatus = Literal["pending", "success", "failure"]

T = TypeVar("T")

_logger = logging.getLogger(__name__)


@dataclass
class AITask:
    """Latest run of one AI operation."""

    operation: str
    status: TaskStatus
    started_at: datetime
    finished_at: datetime | None = None
    result: object | None = None
    error: str | None = None


@dataclass
class TaskTracker:
    """Tracks one task per operation and refuses overlapping runs."""

    _tasks: dict[str, AITask] = field(default_factory=dict)

    def get(self, operation: str) -> AITask | None:
        return self._tasks.get(operation)

    def is_pending(self, operation: str) -> bool:
        task = self._tasks.get(operation)
        return task is not None and task.status == "pending"

    async def run(self, operation: str, func: Callable[[], Awaitable[T]]) -> T:
        """Run func as the current task for operation and record its outcome."""
        if self.is_pending(operation):
            raise TaskInProgressError(operation)
        task = AITask(
            operation=operation, status="pending", started_at=datetime.now(tz=UTC)
        )
        self._tasks[operation] = task
        try:
            result = await func()
        except BaseException as exc:
            task.status = "failure"
            task.error = str(exc) or type(exc).__name__
            task.finished_at = datetime.now(tz=UTC)
            _logger.warning("Task %s failed: %s", operation, task.error)
            raise
        task.status = "success"
        task.result = result
        task.finished_at = datetime.now(tz=UTC)
        return result
