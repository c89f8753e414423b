"""Directed acyclic graph of asynchronous tasks sharing one context."""

from __future__ import annotations

import abc
import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .context import Context, ExtendedContext
from .errors import CycleDetectedError, TaskExecutionError, TaskNotFoundError

Condition = Callable[[ExtendedContext], bool]


class Task(abc.ABC):
    """A unit of work run by a :class:`TaskGraph`.

    Tasks are identified by :meth:`task_id`. Two task objects with the same
    identifier are the same node of the graph.
    """

    @abc.abstractmethod
    async def run(self, context: Context) -> None:
        """Do the work, reading and writing the shared ``context``."""

    def task_id(self) -> str:
        """Return the identifier of this task.

        Classes with their own ``__repr__`` (dataclasses, for instance) are
        identified by it; other classes by their name.
        """
        if type(self).__repr__ is object.__repr__:
            return type(self).__name__
        return repr(self)


@dataclass(frozen=True, repr=False)
class Edge:
    """A link from one task to a dependent task.

    Without a condition the edge is always followed. With one, the dependent
    runs only if the condition holds; otherwise ``else_task`` (if any) runs.
    """

    condition: Optional[Condition] = None
    else_task: Optional[str] = None

    def is_conditional(self) -> bool:
        return self.condition is not None

    def __repr__(self) -> str:
        if not self.is_conditional():
            return "Direct"
        return f"Conditional {{ condition: <function>, else_task: {self.else_task!r} }}"


@dataclass
class _TaskNode:
    task: Task
    dependencies: set[str] = field(default_factory=set)
    dependents: list[tuple[str, Edge]] = field(default_factory=list)


class TaskGraph:
    """Tasks linked by direct or conditional edges, run in parallel where possible."""

    def __init__(self, context: Context | None = None) -> None:
        self._nodes: dict[str, _TaskNode] = {}
        self._context = context if context is not None else Context()

    @classmethod
    def with_data(cls, data: Any) -> "TaskGraph":
        """Create a graph whose context holds ``data`` under the legacy data key."""
        return cls(Context(ExtendedContext.with_data(data)))

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._nodes

    def context(self) -> Context:
        """Return the context shared by every task of the graph."""
        return self._context

    def add_task(self, task: Task) -> "TaskGraph":
        """Add ``task`` unless a task with the same identifier is already present."""
        self._nodes.setdefault(task.task_id(), _TaskNode(task))
        return self

    def add_edge(self, from_task: Task, to_task: Task) -> "TaskGraph":
        """Make ``to_task`` run after ``from_task``.

        Raises CycleDetectedError, leaving the graph unchanged, if the edge
        would close a cycle.
        """
        self.add_task(from_task)
        self.add_task(to_task)
        self._link(from_task.task_id(), to_task.task_id(), Edge())
        return self

    def add_cond_edge(
        self,
        from_task: Task,
        to_task: Task,
        condition: Condition,
        else_task: Task | None = None,
    ) -> "TaskGraph":
        """Make ``to_task`` run after ``from_task`` only if ``condition`` holds.

        The condition is evaluated against the context once ``from_task``
        has finished. When it fails, ``else_task`` runs in its place.
        """
        from_id = from_task.task_id()
        self.add_task(from_task)
        self.add_task(to_task)
        else_id = None
        if else_task is not None:
            else_id = else_task.task_id()
            self.add_task(else_task)
        self._link(from_id, to_task.task_id(), Edge(condition, else_id))
        if else_id is not None:
            self._nodes[else_id].dependencies.add(from_id)
        return self

    def _link(self, from_id: str, to_id: str, edge: Edge) -> None:
        for task_id in (from_id, to_id):
            if task_id not in self._nodes:
                raise TaskNotFoundError(task_id)
        if from_id == to_id or self._reaches(to_id, from_id):
            raise CycleDetectedError()
        self._nodes[from_id].dependents.append((to_id, edge))
        self._nodes[to_id].dependencies.add(from_id)

    def _reaches(self, start: str, target: str) -> bool:
        """Return True if ``target`` can be reached from ``start`` along edges."""
        seen = {start}
        pending = [start]
        while pending:
            for dependent_id, _ in self._nodes[pending.pop()].dependents:
                if dependent_id == target:
                    return True
                if dependent_id not in seen:
                    seen.add(dependent_id)
                    pending.append(dependent_id)
        return False

    def _is_ready(self, task_id: str, completed: set[str]) -> bool:
        return self._nodes[task_id].dependencies <= completed

    async def _run_one(self, task_id: str) -> tuple[str, Exception | None]:
        try:
            await self._nodes[task_id].task.run(self._context)
        except Exception as exc:
            return task_id, exc
        return task_id, None

    async def execute(self) -> None:
        """Run every reachable task, in waves of tasks whose dependencies are done.

        Tasks blocked by a failed condition, and everything after them, are
        skipped. Raises TaskExecutionError when a task fails.
        """
        completed: set[str] = set()
        blocked: set[str] = set()

        while len(completed) < len(self._nodes):
            ready = [
                task_id
                for task_id in self._nodes
                if task_id not in completed
                and task_id not in blocked
                and self._is_ready(task_id, completed)
            ]
            if not ready:
                break

            results = await asyncio.gather(*(self._run_one(task_id) for task_id in ready))

            for task_id, error in results:
                if error is not None:
                    raise TaskExecutionError(f"Task {task_id} failed: {error}") from error
                completed.add(task_id)
                for dependent_id, edge in self._nodes[task_id].dependents:
                    if edge.condition is None:
                        continue
                    async with self._context.read() as ctx:
                        follow = bool(edge.condition(ctx))
                    if follow:
                        if edge.else_task is not None:
                            blocked.add(edge.else_task)
                    else:
                        blocked.add(dependent_id)
                        if edge.else_task is not None:
                            blocked.discard(edge.else_task)