"""Concurrent awaiting of several awaitables.

``when_all_ready`` waits for every awaitable to finish and hands back one
``WhenAllTask`` per input. The outcomes stay in those objects, so no
exception is raised at the await point. ``when_all`` waits the same way and
then unwraps the results, raising the first failure in input order.
"""

from __future__ import annotations

import threading
from typing import Any, Awaitable, Callable, Generator, Optional, Sequence, Union

from coroweave.task import _spawn


class WhenAllTask:
    """Holds the outcome of one awaitable run by ``when_all_ready``."""

    __slots__ = ("_awaitable", "_done", "_value", "_error")

    def __init__(self, awaitable: Awaitable[Any]) -> None:
        self._awaitable: Optional[Awaitable[Any]] = awaitable
        self._done = False
        self._value: Any = None
        self._error: Optional[BaseException] = None

    def _start(self, on_complete: Callable[[], None]) -> None:
        awaitable, self._awaitable = self._awaitable, None
        if awaitable is None:
            raise RuntimeError("task has already been started")

        def finished(value: Any, error: Optional[BaseException]) -> None:
            self._value = value
            self._error = error
            self._done = True
            on_complete()

        _spawn(awaitable, finished)

    def result(self) -> Any:
        """Return the awaitable's result, or raise the exception it finished with."""
        if not self._done:
            raise RuntimeError("task has not completed")
        if self._error is not None:
            raise self._error
        return self._value

    def non_void_result(self) -> Any:
        """Return the result, using ``None`` where the awaitable produced no value."""
        return self.result()


def _is_awaitable(obj: Any) -> bool:
    return hasattr(obj, "__await__")


def _collect(args: tuple[Any, ...]) -> tuple[list[Awaitable[Any]], bool]:
    """Return the awaitables and whether they came as a single sequence."""
    if len(args) == 1 and not _is_awaitable(args[0]):
        try:
            items = list(args[0])
        except TypeError:
            raise TypeError(f"object is not awaitable: {args[0]!r}") from None
        as_list = True
    else:
        items = list(args)
        as_list = False
    for item in items:
        if not _is_awaitable(item):
            raise TypeError(f"object is not awaitable: {item!r}")
    return items, as_list


class _WhenAllReady:
    """Awaitable that starts every task and resumes once all have completed."""

    def __init__(self, awaitables: Sequence[Awaitable[Any]], as_list: bool) -> None:
        self._tasks = [WhenAllTask(awaitable) for awaitable in awaitables]
        self._as_list = as_list
        self._started = False

    def _start_all(self, handle: Callable[[], None]) -> None:
        lock = threading.Lock()
        remaining = len(self._tasks) + 1

        def one_done() -> None:
            nonlocal remaining
            with lock:
                remaining -= 1
                finished = remaining == 0
            if finished:
                handle()

        for task in self._tasks:
            task._start(one_done)
        one_done()

    def __await__(self) -> Generator[Any, Any, Union[list[WhenAllTask], tuple[WhenAllTask, ...]]]:
        if self._started:
            raise RuntimeError("when_all_ready awaitable has already been awaited")
        self._started = True
        if self._tasks:
            yield self._start_all
        return list(self._tasks) if self._as_list else tuple(self._tasks)


class _WhenAll:
    """Awaitable that waits for all tasks and unwraps their results."""

    def __init__(self, ready: _WhenAllReady) -> None:
        self._ready = ready

    def __await__(self) -> Generator[Any, Any, Union[list[Any], tuple[Any, ...]]]:
        tasks = yield from self._ready.__await__()
        if isinstance(tasks, list):
            return [task.result() for task in tasks]
        return tuple(task.non_void_result() for task in tasks)


def when_all_ready(*args: Any) -> _WhenAllReady:
    """Await several awaitables at once, collecting their outcomes.

    Pass awaitables as separate arguments to receive a tuple of
    ``WhenAllTask`` objects, or a single iterable of awaitables to receive a
    list. Nothing starts until the returned object is awaited.
    """
    awaitables, as_list = _collect(args)
    return _WhenAllReady(awaitables, as_list)


def when_all(*args: Any) -> _WhenAll:
    """Await several awaitables at once and return their results.

    Returns a tuple for separate arguments or a list for a single iterable.
    If any awaitable failed, the first failure in input order is raised once
    all of them have finished.
    """
    return _WhenAll(when_all_ready(*args))