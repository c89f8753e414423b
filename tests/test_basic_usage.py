import pytest

from taskdag.context import Context
from taskdag.demos.basic_usage import (
    CheckStoreTask,
    IncrementTask,
    MultiplyTask,
    PrintTask,
    StoreResultTask,
    main,
    run_advanced,
    run_chain,
    run_conditional,
    run_parallel,
)
from taskdag.errors import CycleDetectedError
from taskdag.graph import TaskGraph


@pytest.mark.asyncio
async def test_chain_result():
    context = await run_chain()
    assert await context.get("counter", int) == 10
    assert await context.get("multiply_result", int) == await context.get("counter", int)
    assert await context.get("increment_5") == "completed"


@pytest.mark.asyncio
async def test_parallel_result():
    context = await run_parallel()
    assert await context.get("counter", int) == 111
    for key in ("increment_1", "increment_10", "increment_100"):
        assert await context.get(key) == "completed"


@pytest.mark.asyncio
async def test_conditional_takes_then_branch():
    context = await run_conditional()
    final_result = await context.get("final_result", int)
    counter = await context.get("counter", int)
    assert counter == final_result * 2
    assert await context.get("last_multiply_factor", int) == 2
    assert await context.get("result_category") == "low"


@pytest.mark.asyncio
async def test_advanced_store_usage():
    context = await run_advanced()
    assert await context.contains_key("increment_5")
    assert await context.contains_key("increment_10")
    assert await context.get("multiply_result", int) == await context.get("final_result", int)
    assert await context.get("result_category") == "low"


@pytest.mark.asyncio
async def test_increment_task_prints_and_stores(capsys):
    context = Context()
    await IncrementTask(5).run(context)
    assert await context.get("counter", int) == 5
    assert await context.get("last_increment", int) == 5
    assert "IncrementTask(5): 0 -> 5" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_multiply_task_records_factor():
    context = Context()
    await context.set("counter", 7)
    await MultiplyTask(3).run(context)
    assert await context.get("last_multiply_factor", int) == 3
    assert await context.get("multiply_result", int) == await context.get("counter", int)


@pytest.mark.asyncio
async def test_store_result_categories():
    context = Context()
    await context.set("counter", 101)
    await StoreResultTask().run(context)
    assert await context.get("result_category") == "high"
    assert await context.get("final_result", int) == 101

    await context.set("counter", 100)
    await StoreResultTask().run(context)
    assert await context.get("result_category") == "low"


@pytest.mark.asyncio
async def test_print_and_check_tasks_report_stored_values(capsys):
    context = Context()
    await context.set("counter", 4)
    await context.set("result_category", "low")
    await PrintTask().run(context)
    await CheckStoreTask().run(context)
    out = capsys.readouterr().out
    assert "PrintTask: Final value is 4" in out
    assert "Result category: low" in out


def test_equal_tasks_share_identifier():
    assert IncrementTask(5).task_id() == IncrementTask(5).task_id()
    assert IncrementTask(5).task_id() != IncrementTask(10).task_id()


def test_cycle_between_demo_tasks_is_rejected():
    graph = TaskGraph()
    graph.add_edge(IncrementTask(1), MultiplyTask(2))
    with pytest.raises(CycleDetectedError):
        graph.add_edge(MultiplyTask(2), IncrementTask(1))


def test_main_runs_every_example(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "Task graph examples completed successfully!" in out
    assert "Expected: 111, Got: 111" in out