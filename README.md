# coroweave

Building blocks for composing Python coroutines without an event loop.

## Modules

- `coroweave.task`
  - `Task(coroutine=None)` wraps a coroutine lazily. The coroutine body does
    not start until the task is first awaited. The task runs at most once.
    Every later await returns the stored result or re-raises the stored
    exception.
  - `Task.is_ready()` is true once the task has finished. It is also true
    when the task has no coroutine.
  - `Task.when_ready()` returns an awaitable that waits for the task to
    finish without fetching its result and without raising its exception.
  - `Task.close()` closes the coroutine and drops any stored result.
  - When a `Task` is awaited with no coroutine behind it, it raises
    `BrokenPromise`.
  - `make_task(awaitable)` wraps any awaitable in a `Task`.
- `coroweave.sync_wait`
  - `sync_wait(awaitable)` drives an awaitable to completion from ordinary
    synchronous code and blocks until it is done. It returns the result or
    raises the exception the awaitable finished with. It works even when the
    work moves to other threads part way through.
- `coroweave.when_all`
  - `when_all_ready(...)` starts several awaitables together once it is
    awaited. It waits until all of them have finished and gives back one
    `WhenAllTask` per input. Pass the awaitables as separate arguments to get
    a tuple back, or pass one iterable of them to get a list back.
  - `WhenAllTask.result()` and `WhenAllTask.non_void_result()` return the
    stored value or raise the stored exception.
  - `when_all(...)` waits in the same way and returns the results directly,
    as a tuple or a list to match the input. If any awaitable failed, the
    first failure in input order is raised once all of them have finished.
- `coroweave.static_thread_pool`
  - `StaticThreadPool(thread_count=None)` is a fixed set of worker threads.
    By default it starts one thread per CPU core.
  - Awaiting `pool.schedule()` moves the current coroutine onto a pool
    thread.
  - `thread_count()` reports the number of worker threads.
  - `shutdown()` lets queued work finish and then joins the workers. Using
    the pool as a context manager calls `shutdown()` on exit. Scheduling
    onto a pool that has been shut down raises `RuntimeError`.

## Installation

```
pip install coroweave
```

## Example

```python
from coroweave.sync_wait import sync_wait
from coroweave.task import Task
from coroweave.when_all import when_all
from coroweave.static_thread_pool import StaticThreadPool


async def square(pool, x):
    await pool.schedule()      # continue on a worker thread
    return x * x


async def main(pool):
    values = await when_all([Task(square(pool, i)) for i in range(10)])
    return sum(values)


with StaticThreadPool(4) as pool:
    print(sync_wait(Task(main(pool))))   # 285
```

## What it does not include

The package provides tasks, joining, blocking waits and a thread pool, and
nothing else. It has no async events, mutexes, latches, generators, timers,
file or socket I/O, and no I/O event loop. Anything that suspends a
coroutine beyond these pieces has to be supplied by the caller, as an
awaitable that yields a callable which receives a resume handle.

## Running the tests

```
pip install -e .[test]
pytest
```