# taskdag

`taskdag` runs asynchronous tasks laid out as a directed acyclic graph.
On each round, every task whose dependencies have finished is started, and
those tasks run together with `asyncio.gather`. All tasks share one
key-value `Context`.

- A task is a subclass of `taskdag.graph.Task` with one method,
  `async def run(self, context)`.
- Tasks are linked by direct edges, or by conditional edges that choose
  between a target and an optional "else" task once the source finishes.
- Adding an edge that would close a cycle raises `CycleDetectedError` and
  leaves the graph unchanged.
- A task that raises stops the run with `TaskExecutionError`.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Writing tasks

Each task reports an identifier through `task_id()`. A class that defines
its own `__repr__` (a dataclass, for instance) is identified by that repr;
any other class by its class name. Tasks that report the same identifier
are the same node, so one task can appear in several edges, and
`add_task` ignores a task whose identifier is already present.

```python
import asyncio
from dataclasses import dataclass

from taskdag.graph import Task, TaskGraph


@dataclass(frozen=True)
class Increment(Task):
    amount: int

    async def run(self, context):
        current = await context.get_or("counter", 0)
        await context.set("counter", current + self.amount)


@dataclass(frozen=True)
class Multiply(Task):
    factor: int

    async def run(self, context):
        await context.update("counter", lambda value: value * self.factor, int)


async def main():
    graph = TaskGraph()
    await graph.context().set("counter", 0)

    graph.add_edge(Increment(5), Multiply(2))
    await graph.execute()

    print(await graph.context().get("counter", int))  # 10


asyncio.run(main())
```

`add_task`, `add_edge` and `add_cond_edge` return the graph, so calls can
be chained. `TaskGraph.with_data(data)` creates a graph whose context
holds `data` under the legacy data key, readable with the deprecated
`ExtendedContext.get_data()`.

## The shared context

`TaskGraph.context()` returns the `Context` every task receives. It wraps
an `ExtendedContext`, a store keyed by strings whose lookups can check the
type of the stored value: asking for a key under another type behaves as
if the key were missing. A `bool` never counts as an `int`.

| `Context` method | Effect |
| --- | --- |
| `set(key, value)` | store a value |
| `get(key, type_=None)` | the value, or `None` if missing or of another type |
| `get_or(key, default, type_=None)` | the value, or `default`; without `type_` the value must be of the default's type |
| `get_or_default(key, factory)` | the value, or `factory()`; when `factory` is a type the value must be of it |
| `remove(key, type_=None)` | take the value out (the entry is removed even if its type does not match) |
| `contains_key(key)` / `keys()` / `clear()` | inspect or empty the store |
| `update(key, updater, type_=None)` | replace the value with `updater(value)`; raises `TaskExecutionError` if the key is missing or of another type |
| `update_or_insert(key, default, updater)` | as `update`, starting from `default` when missing |
| `with_read(func)` / `with_write(func)` | call `func` with the `ExtendedContext` under one lock and return its result |

All of these are coroutines. For several operations under one lock, use
`async with context.read() as ctx:` or `async with context.write() as ctx:`
and call the plain `ExtendedContext` methods on `ctx`; do not await the
`Context` methods while holding the lock.

## Conditional edges

A condition is a plain function that takes the `ExtendedContext` and
returns a bool. It is evaluated as soon as the source task finishes. When
it is true the target runs and the else task is skipped; when it is false
the target is skipped and the else task runs. Skipped tasks, and every task
that depends on them, do not run.

```python
@dataclass(frozen=True)
class Report(Task):
    async def run(self, context):
        print("counter is high:", await context.get("counter", int))


@dataclass(frozen=True)
class Fallback(Task):
    async def run(self, context):
        print("counter is low")


def counter_is_high(ctx):
    value = ctx.get("counter", int)
    return value is not None and value > 5


graph.add_cond_edge(Multiply(2), Report(), counter_is_high, Fallback())
```

Leave out the else task (or pass `None`) to simply skip the target.

## Errors

All errors derive from `taskdag.errors.GraphError`:

- `CycleDetectedError` – an edge would create a cycle
- `TaskExecutionError` – a task failed (the original exception is chained),
  or `update` found no usable value
- `TaskNotFoundError` – an edge names a task that is not in the graph
- `InvalidConditionError` – provided for reporting an unusable condition;
  the graph itself does not raise it

## Demo programs

The package ships runnable demonstrations in `taskdag.demos`:

```
taskdag-basic-usage                          # chains, parallel branches and conditional edges
taskdag-simple-api                           # context helpers: update, with_write, keys
taskdag-simple-parallel [--sleep SECONDS]    # A -> (B, C) -> D -> E, with E behind a condition
taskdag-advanced-conditional [--time-scale F]  # two scenarios: the success path and the error path
taskdag-web-service [--host H] [--port P]    # HTTP service, 0.0.0.0:3000 by default
```

In the parallel demo, Task D draws a number from the clock and treats it as
"prime" when it is odd; Task E runs only then.

The web service (`taskdag.demos.web_service.create_app()` returns the
Starlette application) builds a fresh three-step graph for every request:

```
POST /process   {"data": "test data for processing"}
GET  /health    -> OK
```

The JSON reply carries `result` (the upper-cased text prefixed with
`PROCESSED: `), `valid` (the input must be at least 10 bytes long in
UTF-8), `original_length`, `validation_status` (`passed` or `failed`) and
`message`. A body that is not JSON gets 400; a body without a string
`data` field gets 422.

## What it does not do

The graph keeps no state beyond one run in memory: there is no persistence
of results, no retrying of failed tasks, and no timeouts or cancellation of
running tasks beyond stopping at the first failure. The web service has no
authentication and keeps nothing between requests.