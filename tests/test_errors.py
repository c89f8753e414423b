import pytest

from taskdag.errors import (
    CycleDetectedError,
    GraphError,
    InvalidConditionError,
    TaskExecutionError,
    TaskNotFoundError,
)


def test_cycle_detected_message():
    assert str(CycleDetectedError()) == "Cycle detected in graph"


def test_invalid_condition_message():
    assert str(InvalidConditionError()) == "Invalid condition"


def test_task_execution_message_and_attribute():
    err = TaskExecutionError("Key 'counter' not found")
    assert str(err) == "Task execution failed: Key 'counter' not found"
    assert err.message == "Key 'counter' not found"


def test_task_not_found_message_and_attribute():
    err = TaskNotFoundError("TaskA")
    assert str(err) == "Task not found: TaskA"
    assert err.task_id == "TaskA"


@pytest.mark.parametrize(
    "error",
    [
        CycleDetectedError(),
        TaskExecutionError("boom"),
        TaskNotFoundError("X"),
        InvalidConditionError(),
    ],
)
def test_all_errors_are_graph_errors(error):
    with pytest.raises(GraphError) as info:
        raise error
    assert info.value is error