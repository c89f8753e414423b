"""Two parallel sleeping tasks, then a step that runs only for a "prime" number."""

from __future__ import annotations

import argparse
import asyncio
import time
from dataclasses import dataclass

from ..context import Context, ExtendedContext
from ..graph import Task, TaskGraph


def is_prime(n: int) -> bool:
    """Report whether ``n`` counts as prime here: only odd numbers do."""
    return n % 2 != 0


def current_timestamp() -> int:
    """Return the current Unix time in milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class TaskA(Task):
    """Start the pipeline and record the start time."""

    async def run(self, context: Context) -> None:
        print("🚀 Task A: Starting pipeline")
        await context.set("pipeline_started", True)
        await context.set("start_time", current_timestamp())
        print("✅ Task A: Pipeline initialized")


@dataclass(frozen=True)
class TaskB(Task):
    """Sleep, then record when it finished."""

    sleep_seconds: float = 3.0

    async def run(self, context: Context) -> None:
        print(f"😴 Task B: Starting {self.sleep_seconds}-second sleep...")
        await asyncio.sleep(self.sleep_seconds)

        completion_time = current_timestamp()
        await context.set("task_b_completed", True)
        await context.set("task_b_completion_time", completion_time)
        print(f"✅ Task B: Completed at timestamp {completion_time}")


@dataclass(frozen=True)
class TaskC(Task):
    """Sleep, then record when it finished."""

    sleep_seconds: float = 3.0

    async def run(self, context: Context) -> None:
        print(f"😴 Task C: Starting {self.sleep_seconds}-second sleep...")
        await asyncio.sleep(self.sleep_seconds)

        completion_time = current_timestamp()
        await context.set("task_c_completed", True)
        await context.set("task_c_completion_time", completion_time)
        print(f"✅ Task C: Completed at timestamp {completion_time}")


@dataclass(frozen=True)
class TaskD(Task):
    """Report the completion times and draw a number between 1 and 100."""

    async def run(self, context: Context) -> None:
        print("🔍 Task D: Checking completion times and generating random number")

        task_b_time = await context.get_or("task_b_completion_time", 0)
        task_c_time = await context.get_or("task_c_completion_time", 0)
        print("📊 Task D: Completion times from context:")
        print(f"   Task B completed at: {task_b_time}")
        print(f"   Task C completed at: {task_c_time}")

        random_number = current_timestamp() % 100 + 1
        is_prime_number = is_prime(random_number)
        print(f"🎲 Task D: Generated random number: {random_number}")
        print(f"🔢 Task D: Is {random_number} prime? {is_prime_number}")

        await context.set("random_number", random_number)
        await context.set("is_prime", is_prime_number)
        await context.set("task_d_completed", True)

        if is_prime_number:
            print("✅ Task D: Random number is prime - Task E will execute")
        else:
            print("❌ Task D: Random number is not prime - Task E will NOT execute")


@dataclass(frozen=True)
class TaskE(Task):
    """Final step, reached only when the drawn number is prime."""

    async def run(self, context: Context) -> None:
        random_number = await context.get_or("random_number", 0)
        print("🎯 Task E: Final task executing!")
        print(f"🎉 Task E: Successfully reached because {random_number} is prime!")
        await context.set("task_e_completed", True)


def prime_condition(context: ExtendedContext) -> bool:
    """Follow the edge to Task E only when Task D drew a prime number."""
    prime = context.get("is_prime", bool) or False
    random_number = context.get("random_number", int) or 0
    print(f"🔍 Condition Check: Is {random_number} prime? {prime}")
    return prime


def build_graph(sleep_seconds: float = 3.0) -> TaskGraph:
    """Build A -> (B, C) -> D -> E, with E conditional on a prime number."""
    task_a = TaskA()
    task_b = TaskB(sleep_seconds)
    task_c = TaskC(sleep_seconds)
    task_d = TaskD()
    task_e = TaskE()

    graph = TaskGraph()
    (
        graph.add_edge(task_a, task_b)
        .add_edge(task_a, task_c)
        .add_edge(task_b, task_d)
        .add_edge(task_c, task_d)
        .add_cond_edge(task_d, task_e, prime_condition)
    )
    return graph


async def _run(sleep_seconds: float) -> None:
    print("🎯 Simple Parallel Execution Example")
    print("===================================")
    print("Flow: A -> (B, C) -> D -> E (if prime)")
    print(f"- B and C will each sleep for {sleep_seconds} seconds in parallel")
    print("- D will check their completion times and generate a random number")
    print("- E will only execute if the random number is prime")
    print()

    graph = build_graph(sleep_seconds)

    print("🚀 Starting execution...")
    start = time.monotonic()
    await graph.execute()
    print(f"\n⏱️  Total execution time: {time.monotonic() - start:.3f}s")

    ctx = graph.context()
    task_e_completed = await ctx.get_or("task_e_completed", False)
    random_number = await ctx.get_or("random_number", 0)
    prime = await ctx.get_or("is_prime", False)

    print("\n📊 Final Results:")
    print(f"   Random number generated: {random_number}")
    print(f"   Is prime: {prime}")
    print(f"   Task E executed: {task_e_completed}")

    if task_e_completed:
        print("🎉 SUCCESS: Complete flow executed (prime number generated)")
    else:
        print("✅ PARTIAL: Flow stopped at Task D (non-prime number generated)")

    print("\n🏁 Example completed!")


def main(argv: list[str] | None = None) -> int:
    """Run the parallel example graph."""
    parser = argparse.ArgumentParser(description="Run the parallel task graph example.")
    parser.add_argument(
        "--sleep",
        type=float,
        default=3.0,
        help="seconds tasks B and C sleep (default: 3)",
    )
    args = parser.parse_args(argv)
    asyncio.run(_run(args.sleep))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())