import pytest

from taskdag.context import Context, ExtendedContext
from taskdag.demos.advanced_conditional import (
    CpuProcessingTask,
    DataProcessingTask,
    IoProcessingTask,
    MonitoringTask,
    build_graph,
    main,
    run_scenario,
    success_condition,
)

FAST = 0.001


def _good_context() -> ExtendedContext:
    ctx = ExtendedContext()
    ctx.set("task_b_completed", True)
    ctx.set("task_c_completed", True)
    ctx.set("cpu_score", 95)
    ctx.set("io_success_rate", 95)
    ctx.set("data_valid", True)
    return ctx


def test_success_condition_holds_when_all_met():
    assert success_condition(_good_context()) is True


@pytest.mark.parametrize(
    "key, value",
    [
        ("cpu_score", 85),
        ("io_success_rate", 90),
        ("data_valid", False),
        ("task_b_completed", False),
    ],
)
def test_success_condition_fails_on_any_shortfall(key, value):
    ctx = _good_context()
    ctx.set(key, value)
    assert success_condition(ctx) is False


def test_success_condition_false_on_empty_context():
    assert success_condition(ExtendedContext()) is False


@pytest.mark.asyncio
@pytest.mark.parametrize("size, valid", [(8000, True), (10000, True), (0, False), (10001, False)])
async def test_data_processing_validates_size(size, valid):
    context = Context()
    await DataProcessingTask(size, FAST).run(context)
    assert await context.get("data_valid", bool) is valid
    assert await context.get("data_size", int) == size
    assert await context.get("task_a_completed", bool) is True


@pytest.mark.asyncio
async def test_cpu_task_scores_small_data_lower():
    context = Context()
    await CpuProcessingTask(FAST).run(context)
    assert await context.get("cpu_score", int) == 85
    assert await context.get("task_b_completed", bool) is True


@pytest.mark.asyncio
async def test_io_task_reports_three_operations():
    context = Context()
    await context.set("data_size", 8000)
    await IoProcessingTask(FAST).run(context)
    assert await context.get("io_operations", int) == 3
    assert await context.get("io_success_rate", int) == 95
    assert await context.get("io_errors", int) == 1


def test_build_graph_holds_seven_tasks():
    assert len(build_graph(8000, FAST)) == 7


@pytest.mark.asyncio
async def test_large_dataset_takes_aggregation_path():
    ctx = await run_scenario(8000, FAST)
    assert await ctx.get("aggregation_completed", bool) is True
    assert await ctx.contains_key("error_handled") is False
    assert await ctx.get("cpu_score", int) == 95
    assert await ctx.get("final_score", int) == 95
    total = await ctx.get("total_processing_time_ms", int)
    cpu_time = await ctx.get("cpu_processing_time_ms", int)
    io_time = await ctx.get("io_processing_time_ms", int)
    assert total == cpu_time + io_time
    assert await ctx.get("efficiency", float) >= 0.0


@pytest.mark.asyncio
async def test_small_dataset_takes_error_path():
    ctx = await run_scenario(500, FAST)
    assert await ctx.get("error_handled", bool) is True
    assert await ctx.get("recovery_attempted", bool) is True
    assert await ctx.contains_key("aggregation_completed") is False
    assert await ctx.get("cpu_score", int) == 85
    assert await ctx.get("io_success_rate", int) == 100


@pytest.mark.asyncio
async def test_monitoring_reports_elapsed_time(capsys):
    context = Context()
    await MonitoringTask("After-B").run(context)
    assert "Monitor (After-B): Monitoring active" in capsys.readouterr().out

    await DataProcessingTask(100, FAST).run(context)
    capsys.readouterr()
    await MonitoringTask("After-C").run(context)
    assert "Monitor (After-C): Elapsed time:" in capsys.readouterr().out


def test_main_runs_both_scenarios(capsys):
    assert main(["--time-scale", str(FAST)]) == 0
    out = capsys.readouterr().out
    assert "Advanced conditional execution example completed!" in out
    assert "SUCCESS - Aggregation completed!" in out
    assert "Error path taken" in out