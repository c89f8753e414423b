import time

import pytest

from taskdag.context import Context, ExtendedContext
from taskdag.demos.simple_parallel import (
    TaskA,
    TaskB,
    TaskC,
    TaskD,
    TaskE,
    build_graph,
    current_timestamp,
    is_prime,
    main,
    prime_condition,
)


@pytest.mark.parametrize("n, expected", [(1, True), (7, True), (9, True), (2, False), (100, False)])
def test_is_prime_treats_odd_numbers_as_prime(n, expected):
    assert is_prime(n) is expected


def test_current_timestamp_is_milliseconds():
    before = int(time.time() * 1000)
    stamp = current_timestamp()
    after = int(time.time() * 1000)
    assert before <= stamp <= after


def test_prime_condition_follows_stored_flag():
    ctx = ExtendedContext()
    ctx.set("is_prime", True)
    ctx.set("random_number", 7)
    assert prime_condition(ctx) is True

    ctx.set("is_prime", False)
    assert prime_condition(ctx) is False


def test_prime_condition_false_on_empty_context():
    assert prime_condition(ExtendedContext()) is False


def test_build_graph_holds_five_tasks():
    graph = build_graph(0)
    assert len(graph) == 5
    for task in (TaskA(), TaskB(0), TaskC(0), TaskD(), TaskE()):
        assert task.task_id() in graph


@pytest.mark.asyncio
async def test_task_d_draws_number_in_range():
    context = Context()
    await TaskD().run(context)
    number = await context.get("random_number", int)
    assert 1 <= number <= 100
    assert await context.get("is_prime", bool) == is_prime(number)
    assert await context.get("task_d_completed", bool) is True


@pytest.mark.asyncio
async def test_execute_runs_pipeline():
    start = current_timestamp()
    graph = build_graph(0.01)
    await graph.execute()
    ctx = graph.context()

    assert await ctx.get("pipeline_started", bool) is True
    assert await ctx.get("task_b_completed", bool) is True
    assert await ctx.get("task_c_completed", bool) is True
    assert await ctx.get("task_b_completion_time", int) >= start
    assert await ctx.get("task_c_completion_time", int) >= start

    number = await ctx.get("random_number", int)
    assert 1 <= number <= 100
    prime = await ctx.get("is_prime", bool)
    assert prime == is_prime(number)
    assert await ctx.get_or("task_e_completed", False) == prime


@pytest.mark.asyncio
async def test_b_and_c_sleep_in_parallel():
    graph = build_graph(0.3)
    start = time.monotonic()
    await graph.execute()
    elapsed = time.monotonic() - start
    assert 0.3 <= elapsed < 0.55

    ctx = graph.context()
    started = await ctx.get("start_time", int)
    b_done = await ctx.get("task_b_completion_time", int)
    c_done = await ctx.get("task_c_completion_time", int)
    assert b_done - started >= 290
    assert c_done - started >= 290
    assert abs(b_done - c_done) < 150


def test_main_runs_example(capsys):
    assert main(["--sleep", "0"]) == 0
    out = capsys.readouterr().out
    assert "Example completed!" in out
    assert "Task D: Generated random number" in out