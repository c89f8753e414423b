"""Chains, parallel branches and conditional edges over a shared counter."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from ..context import Context, ExtendedContext
from ..graph import Task, TaskGraph


@dataclass(frozen=True)
class IncrementTask(Task):
    """Add ``amount`` to the counter and record that it ran."""

    amount: int

    async def run(self, context: Context) -> None:
        current = await context.get_or_default("counter", int)
        new_value = current + self.amount
        await context.set("counter", new_value)
        print(f"IncrementTask({self.amount}): {current} -> {new_value}")

        await context.set("last_increment", self.amount)
        await context.set(f"increment_{self.amount}", "completed")


@dataclass(frozen=True)
class MultiplyTask(Task):
    """Multiply the counter by ``factor`` and record the result."""

    factor: int

    async def run(self, context: Context) -> None:
        current = await context.get_or_default("counter", int)
        new_value = current * self.factor
        await context.set("counter", new_value)
        print(f"MultiplyTask({self.factor}): {current} -> {new_value}")

        await context.set("last_multiply_factor", self.factor)
        await context.set("multiply_result", new_value)


@dataclass(frozen=True)
class PrintTask(Task):
    """Print the counter and the values other tasks stored."""

    async def run(self, context: Context) -> None:
        value = await context.get_or_default("counter", int)
        print(f"PrintTask: Final value is {value}")

        print("Stored values:")
        last_inc = await context.get("last_increment", int)
        if last_inc is not None:
            print(f"  last_increment = {last_inc}")
        multiply_result = await context.get("multiply_result", int)
        if multiply_result is not None:
            print(f"  multiply_result = {multiply_result}")
        category = await context.get("result_category", str)
        if category is not None:
            print(f"  result_category = {category}")


@dataclass(frozen=True)
class StoreResultTask(Task):
    """Store the counter as the final result and classify it."""

    async def run(self, context: Context) -> None:
        value = await context.get_or_default("counter", int)
        await context.set("final_result", value)

        category = "high" if value > 100 else "low"
        await context.set("result_category", category)

        print(f"StoreResultTask: Stored final result {value} as {category}")


@dataclass(frozen=True)
class CheckStoreTask(Task):
    """Print the values stored by earlier tasks."""

    async def run(self, context: Context) -> None:
        print("CheckStoreTask: Checking stored values...")

        last_inc = await context.get("last_increment", int)
        if last_inc is not None:
            print(f"  Last increment was: {last_inc}")
        multiply_result = await context.get("multiply_result", int)
        if multiply_result is not None:
            print(f"  Multiply result: {multiply_result}")
        category = await context.get("result_category", str)
        if category is not None:
            print(f"  Result category: {category}")


def _counter_or_high_increment(ctx: ExtendedContext) -> bool:
    counter_value = ctx.get("counter", int) or 0
    last_increment = ctx.get("last_increment", int)
    has_high_increment = last_increment is not None and last_increment >= 10
    return counter_value > 5 or has_high_increment


def _increments_done_and_high_multiply(ctx: ExtendedContext) -> bool:
    inc5_done = ctx.contains_key("increment_5")
    inc10_done = ctx.contains_key("increment_10")
    multiply_result = ctx.get("multiply_result", int)
    multiply_high = multiply_result is not None and multiply_result > 50
    return inc5_done and inc10_done and multiply_high


async def _new_graph() -> TaskGraph:
    graph = TaskGraph()
    await graph.context().set("counter", 0)
    return graph


async def run_chain() -> Context:
    """Run Increment(5) -> Multiply(2) -> Print and return the context."""
    graph = await _new_graph()
    multiply_task = MultiplyTask(2)
    graph.add_edge(IncrementTask(5), multiply_task).add_edge(multiply_task, PrintTask())

    print("Executing task graph...")
    await graph.execute()
    return graph.context()


async def run_parallel() -> Context:
    """Run Increment(1) -> (Increment(10), Increment(100)) -> Print."""
    graph = await _new_graph()
    increment1 = IncrementTask(1)
    increment10 = IncrementTask(10)
    increment100 = IncrementTask(100)
    print_task = PrintTask()

    (
        graph.add_edge(increment1, increment10)
        .add_edge(increment1, increment100)
        .add_edge(increment10, print_task)
        .add_edge(increment100, print_task)
    )

    print("Executing parallel task graph...")
    await graph.execute()
    return graph.context()


async def run_conditional() -> Context:
    """Run a graph whose last step depends on values in the store."""
    graph = await _new_graph()
    multiply2 = MultiplyTask(2)
    multiply10 = MultiplyTask(10)

    (
        graph.add_edge(IncrementTask(10), StoreResultTask())
        .add_edge(StoreResultTask(), multiply2)
        .add_cond_edge(multiply2, CheckStoreTask(), _counter_or_high_increment, multiply10)
    )

    print("Executing conditional task graph with store...")
    await graph.execute()
    return graph.context()


async def run_advanced() -> Context:
    """Run a longer chain with a condition over several stored values."""
    graph = await _new_graph()
    inc5 = IncrementTask(5)
    inc10 = IncrementTask(10)
    mult5 = MultiplyTask(5)
    store = StoreResultTask()
    check = CheckStoreTask()
    print_task = PrintTask()

    (
        graph.add_edge(inc5, inc10)
        .add_edge(inc10, mult5)
        .add_edge(mult5, store)
        .add_cond_edge(store, check, _increments_done_and_high_multiply, print_task)
        .add_edge(check, print_task)
    )

    print("Executing advanced store usage graph...")
    await graph.execute()
    return graph.context()


async def _run_all() -> None:
    print("=== Basic Task Graph Example ===")
    context = await run_chain()
    final_value = await context.get_or_default("counter", int)
    print(f"Expected: 10, Got: {final_value}")
    if final_value != 10:
        raise RuntimeError(f"chain produced {final_value}, expected 10")

    print("\n=== Parallel Execution Example ===")
    context = await run_parallel()
    final_value = await context.get_or_default("counter", int)
    print(f"Expected: 111, Got: {final_value}")
    if final_value != 111:
        raise RuntimeError(f"parallel graph produced {final_value}, expected 111")

    print("\n=== Conditional Edge with Store Example ===")
    await run_conditional()

    print("\n=== Advanced Store Usage Example ===")
    await run_advanced()

    print("\nTask graph examples completed successfully!")


def main(argv: list[str] | None = None) -> int:
    """Run every example graph in turn."""
    asyncio.run(_run_all())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())