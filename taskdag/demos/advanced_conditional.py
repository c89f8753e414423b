"""A -> (B, C) -> D or an error handler, chosen by a condition over the context."""

from __future__ import annotations

import argparse
import asyncio
import time
from dataclasses import dataclass

from ..context import Context, ExtendedContext
from ..graph import Task, TaskGraph


async def _sleep_ms(milliseconds: float, time_scale: float) -> None:
    await asyncio.sleep(milliseconds / 1000 * time_scale)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


@dataclass(frozen=True)
class DataProcessingTask(Task):
    """Set up the pipeline and validate the data size."""

    data_size: int
    time_scale: float = 1.0

    async def run(self, context: Context) -> None:
        start_time = time.monotonic()
        print(f"🚀 Task A (DataProcessing): Starting with {self.data_size} items")

        await _sleep_ms(500, self.time_scale)

        await context.set("data_size", self.data_size)
        await context.set("processing_start_time", start_time)
        await context.set("task_a_completed", True)
        await context.set("processed_items", 0)
        await context.set("error_count", 0)

        is_valid_data = 0 < self.data_size <= 10000
        await context.set("data_valid", is_valid_data)

        print(
            f"✅ Task A (DataProcessing): Completed setup for {self.data_size} items "
            f"(valid: {is_valid_data})"
        )


@dataclass(frozen=True)
class CpuProcessingTask(Task):
    """Simulated computation taking time in proportion to the data size."""

    time_scale: float = 1.0

    async def run(self, context: Context) -> None:
        print("🔥 Task B (CpuProcessing): Starting CPU-intensive work")
        start = time.monotonic()

        data_size = await context.get_or("data_size", 0)
        await _sleep_ms(100 + data_size // 10, self.time_scale)

        processed_items = data_size // 2
        cpu_score = 95 if data_size > 5000 else 85

        await context.set("cpu_processed_items", processed_items)
        await context.set("cpu_processing_time_ms", _elapsed_ms(start))
        await context.set("cpu_score", cpu_score)
        await context.set("task_b_completed", True)

        print(
            f"✅ Task B (CpuProcessing): Processed {processed_items} items "
            f"with score {cpu_score} in {_elapsed_ms(start)}ms"
        )


@dataclass(frozen=True)
class IoProcessingTask(Task):
    """Simulated I/O: three operations and a success rate."""

    time_scale: float = 1.0

    async def run(self, context: Context) -> None:
        print("💾 Task C (IoProcessing): Starting I/O operations")
        start = time.monotonic()

        data_size = await context.get_or("data_size", 0)

        io_operations = 3
        for i in range(1, io_operations + 1):
            print(f"💾 Task C (IoProcessing): I/O operation {i} of {io_operations}")
            await _sleep_ms(200, self.time_scale)

        success_rate = 100 if data_size < 1000 else 95
        errors = 1 if success_rate < 100 else 0

        await context.set("io_operations", io_operations)
        await context.set("io_success_rate", success_rate)
        await context.set("io_errors", errors)
        await context.set("io_processing_time_ms", _elapsed_ms(start))
        await context.set("task_c_completed", True)

        print(
            f"✅ Task C (IoProcessing): Completed {io_operations} operations with "
            f"{success_rate}% success rate in {_elapsed_ms(start)}ms"
        )


@dataclass(frozen=True)
class AggregationTask(Task):
    """Combine the CPU and I/O results into final metrics."""

    time_scale: float = 1.0

    async def run(self, context: Context) -> None:
        print("📊 Task D (Aggregation): Starting final aggregation")

        cpu_score = await context.get_or("cpu_score", 0)
        cpu_items = await context.get_or("cpu_processed_items", 0)
        cpu_time = await context.get_or("cpu_processing_time_ms", 0)
        io_success_rate = await context.get_or("io_success_rate", 0)
        io_operations = await context.get_or("io_operations", 0)
        io_time = await context.get_or("io_processing_time_ms", 0)
        data_size = await context.get_or("data_size", 0)

        await _sleep_ms(300, self.time_scale)

        total_time = cpu_time + io_time
        overall_score = (cpu_score + io_success_rate) // 2
        efficiency = data_size / total_time * 1000.0 if total_time > 0 else 0.0

        await context.set("final_score", overall_score)
        await context.set("efficiency", efficiency)
        await context.set("total_processing_time_ms", total_time)
        await context.set("aggregation_completed", True)

        print("🎯 Task D (Aggregation): SUCCESS!")
        print(f"   📈 Final Score: {overall_score}")
        print(f"   ⚡ Efficiency: {efficiency:.2f} items/sec")
        print(f"   ⏱️  Total Time: {total_time}ms")
        print(f"   📦 Items Processed: {cpu_items}")
        print(f"   🔗 I/O Operations: {io_operations}")


@dataclass(frozen=True)
class ErrorHandlingTask(Task):
    """Runs in place of the aggregation when its condition fails."""

    time_scale: float = 1.0

    async def run(self, context: Context) -> None:
        print("⚠️  Alternative Task (ErrorHandling): Handling processing issues")

        data_valid = await context.get_or("data_valid", False)
        task_b_completed = await context.get_or("task_b_completed", False)
        task_c_completed = await context.get_or("task_c_completed", False)
        cpu_score = await context.get_or("cpu_score", 0)
        io_success_rate = await context.get_or("io_success_rate", 0)

        print("🔍 Error Analysis:")
        print(f"   Data Valid: {data_valid}")
        print(f"   Task B Completed: {task_b_completed}")
        print(f"   Task C Completed: {task_c_completed}")
        print(f"   CPU Score: {cpu_score}")
        print(f"   I/O Success Rate: {io_success_rate}%")

        await _sleep_ms(200, self.time_scale)

        await context.set("error_handled", True)
        await context.set("recovery_attempted", True)

        print("🔧 Error handling completed - system in safe state")


@dataclass(frozen=True)
class MonitoringTask(Task):
    """Print how long the pipeline has been running."""

    task_name: str

    async def run(self, context: Context) -> None:
        start = await context.get("processing_start_time", float)
        if start is not None:
            elapsed = time.monotonic() - start
            print(f"📊 Monitor ({self.task_name}): Elapsed time: {elapsed:.3f}s")
        else:
            print(f"📊 Monitor ({self.task_name}): Monitoring active")


def success_condition(context: ExtendedContext) -> bool:
    """Aggregate only if B and C finished, scores are high and the data was valid."""
    task_b_done = context.get("task_b_completed", bool) or False
    task_c_done = context.get("task_c_completed", bool) or False
    cpu_score = context.get("cpu_score", int) or 0
    io_success_rate = context.get("io_success_rate", int) or 0
    data_valid = context.get("data_valid", bool) or False

    conditions_met = (
        task_b_done
        and task_c_done
        and cpu_score >= 90
        and io_success_rate >= 95
        and data_valid
    )

    print("🔍 Condition Check:")
    print(f"   Task B completed: {task_b_done}")
    print(f"   Task C completed: {task_c_done}")
    print(f"   CPU score >= 90: {cpu_score >= 90} ({cpu_score})")
    print(f"   I/O success >= 95%: {io_success_rate >= 95} ({io_success_rate}%)")
    print(f"   Data valid: {data_valid}")
    print(f"   → Condition result: {conditions_met}")

    return conditions_met


def build_graph(data_size: int, time_scale: float = 1.0) -> TaskGraph:
    """Build A -> (B, C), monitors after each, then D or the error handler."""
    task_a = DataProcessingTask(data_size, time_scale)
    task_b = CpuProcessingTask(time_scale)
    task_c = IoProcessingTask(time_scale)
    task_d = AggregationTask(time_scale)
    error_handler = ErrorHandlingTask(time_scale)
    monitor_b = MonitoringTask("After-B")
    monitor_c = MonitoringTask("After-C")

    graph = TaskGraph()
    (
        graph.add_edge(task_a, task_b)
        .add_edge(task_a, task_c)
        .add_edge(task_b, monitor_b)
        .add_edge(task_c, monitor_c)
        .add_cond_edge(monitor_c, task_d, success_condition, error_handler)
    )
    return graph


async def run_scenario(data_size: int, time_scale: float = 1.0) -> Context:
    """Build and execute the graph for ``data_size``; return its context."""
    graph = build_graph(data_size, time_scale)

    print("🚀 Executing graph...")
    start = time.monotonic()
    await graph.execute()
    print(f"⏱️  Total execution time: {time.monotonic() - start:.3f}s")

    ctx = graph.context()
    if await ctx.get_or("aggregation_completed", False):
        print("🎉 SUCCESS - Aggregation completed!")
    elif await ctx.get_or("error_handled", False):
        print("⚠️  Error path taken - handled gracefully")
    return ctx


async def _run(time_scale: float) -> None:
    print("🎯 Advanced Conditional Task Graph Example")
    print("==========================================")
    print("Graph Structure: A -> (B, C) -> D (if conditions met) | ErrorHandler (if not)")
    print()

    print("📋 Scenario 1: Normal Processing (Large Dataset)")
    print("------------------------------------------------")
    await run_scenario(8000, time_scale)

    print("\n" + "=" * 60)

    print("📋 Scenario 2: Error Conditions (Small Dataset)")
    print("-----------------------------------------------")
    await run_scenario(500, time_scale)

    print("\n🏁 Advanced conditional execution example completed!")


def main(argv: list[str] | None = None) -> int:
    """Run both scenarios of the conditional example."""
    parser = argparse.ArgumentParser(description="Run the conditional task graph example.")
    parser.add_argument(
        "--time-scale",
        type=float,
        default=1.0,
        help="factor applied to every simulated delay (default: 1)",
    )
    args = parser.parse_args(argv)
    asyncio.run(_run(args.time_scale))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())