"""Tasks using the context's convenience methods instead of explicit locking."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from ..context import Context, ExtendedContext
from ..graph import Task, TaskGraph


@dataclass(frozen=True)
class IncrementTask(Task):
    """Add ``amount`` to the integer under ``key``."""

    amount: int
    key: str

    async def run(self, context: Context) -> None:
        current = await context.get_or_default(self.key, int)
        new_value = current + self.amount
        await context.set(self.key, new_value)
        print(f"Incremented {self.key} by {self.amount}: {current} -> {new_value}")


@dataclass(frozen=True)
class MultiplyTask(Task):
    """Multiply the integer under ``key``, truncating the result."""

    key: str
    multiplier: float

    async def run(self, context: Context) -> None:
        await context.update(self.key, lambda value: int(value * self.multiplier), int)
        new_value = await context.get(self.key, int)
        print(f"Multiplied {self.key} by {self.multiplier}: result = {new_value}")


@dataclass(frozen=True)
class AggregateTask(Task):
    """Sum the two counters and store a report."""

    async def run(self, context: Context) -> None:
        counter1 = await context.get_or("counter1", 0)
        counter2 = await context.get_or("counter2", 0)
        total = counter1 + counter2

        await context.set("total", total)
        await context.set(
            "report", f"Total: {total} (counter1: {counter1}, counter2: {counter2})"
        )
        print(f"Aggregated: {await context.get('report', str)}")


def _store_batch(ctx: ExtendedContext) -> None:
    ctx.set("batch_item_1", "value1")
    ctx.set("batch_item_2", 42)
    ctx.set("batch_item_3", [1, 2, 3])
    ctx.set("batch_complete", True)


@dataclass(frozen=True)
class BatchUpdateTask(Task):
    """Store several values under a single write lock."""

    async def run(self, context: Context) -> None:
        await context.with_write(_store_batch)
        print("Batch update completed")


def build_graph() -> TaskGraph:
    """Batch -> (inc counter1 -> x2, inc counter2 -> x1.5) -> aggregate."""
    inc1 = IncrementTask(5, "counter1")
    inc2 = IncrementTask(10, "counter2")
    mult1 = MultiplyTask("counter1", 2.0)
    mult2 = MultiplyTask("counter2", 1.5)
    aggregate = AggregateTask()
    batch = BatchUpdateTask()

    graph = TaskGraph()
    graph.add_edge(inc1, mult1)
    graph.add_edge(inc2, mult2)
    graph.add_edge(mult1, aggregate)
    graph.add_edge(mult2, aggregate)
    graph.add_edge(batch, inc1)
    graph.add_edge(batch, inc2)
    return graph


async def _run() -> None:
    graph = build_graph()
    print("Executing task graph with simplified API...\n")
    await graph.execute()

    context = graph.context()
    print("\nFinal Results:")
    print(f"Counter1: {await context.get_or('counter1', 0)}")
    print(f"Counter2: {await context.get_or('counter2', 0)}")
    print(f"Total: {await context.get_or('total', 0)}")

    keys = await context.keys()
    print(f"\nAll stored keys: {keys}")


def main(argv: list[str] | None = None) -> int:
    """Build and run the example graph, then print its results."""
    asyncio.run(_run())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())