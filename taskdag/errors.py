"""Exceptions raised while building or executing a task graph."""

from __future__ import annotations


class GraphError(Exception):
    """Base class for every error raised by the task graph."""


class CycleDetectedError(GraphError):
    """Adding an edge would create a cycle."""

    def __init__(self) -> None:
        super().__init__("Cycle detected in graph")


class TaskExecutionError(GraphError):
    """A task, or an operation on the shared context, failed."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Task execution failed: {message}")


class TaskNotFoundError(GraphError):
    """A task referenced by an edge is not part of the graph."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")


class InvalidConditionError(GraphError):
    """A condition attached to an edge is not usable."""

    def __init__(self) -> None:
        super().__init__("Invalid condition")