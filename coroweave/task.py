"""Lazily started awaitable tasks and the driver that runs coroutine chains.

Suspension protocol: a leaf awaitable suspends by yielding a callable from
its ``__await__``.  The driver calls it with a resume handle.  The handle
may be called (``handle(value)``) or failed (``handle.throw(exc)``) exactly
once, from any thread, at any time, including before the callable returns.
"""

from __future__ import annotations

import enum
import threading
from typing import Any, Awaitable, Callable, Generator, Optional


class BrokenPromise(Exception):
    """Raised when awaiting a task that has no coroutine attached."""

    def __init__(self, message: str = "broken promise") -> None:
        super().__init__(message)


class _State(enum.Enum):
    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"


class _Handle:
    """One-shot resumption handle given to a suspending leaf awaitable."""

    __slots__ = ("_runner", "_used", "_lock")

    def __init__(self, runner: "_Runner") -> None:
        self._runner = runner
        self._used = False
        self._lock = threading.Lock()

    def _claim(self) -> None:
        with self._lock:
            if self._used:
                raise RuntimeError("coroutine has already been resumed")
            self._used = True

    def __call__(self, value: Any = None) -> None:
        self._claim()
        self._runner._resume(value, None)

    def throw(self, error: BaseException) -> None:
        self._claim()
        self._runner._resume(None, error)

    def _disable(self) -> bool:
        with self._lock:
            was_used = self._used
            self._used = True
            return not was_used


class _Runner:
    """Drives one coroutine through its suspension points.

    Synchronous resumption (a handle fired while the driver is still inside
    the registering callable) is queued and picked up by the running loop,
    so long chains of immediate completions do not grow the stack.
    """

    def __init__(
        self,
        coroutine: Any,
        on_done: Callable[[Any, Optional[BaseException]], None],
    ) -> None:
        self._coroutine = coroutine
        self._on_done = on_done
        self._lock = threading.Lock()
        self._running = False
        self._pending: Optional[tuple[Any, Optional[BaseException]]] = None

    def start(self) -> None:
        with self._lock:
            self._running = True
        self._loop(None, None)

    def _resume(self, value: Any, error: Optional[BaseException]) -> None:
        with self._lock:
            if self._running:
                self._pending = (value, error)
                return
            self._running = True
        self._loop(value, error)

    def _loop(self, value: Any, error: Optional[BaseException]) -> None:
        while True:
            try:
                if error is not None:
                    yielded = self._coroutine.throw(error)
                else:
                    yielded = self._coroutine.send(value)
            except StopIteration as stop:
                self._on_done(stop.value, None)
                return
            except BaseException as failure:  # noqa: BLE001 - handed to the waiter
                self._on_done(None, failure)
                return

            if not callable(yielded):
                value, error = None, TypeError(
                    f"awaitable yielded a non-callable object: {yielded!r}"
                )
                continue

            handle = _Handle(self)
            try:
                yielded(handle)
            except BaseException as failure:  # noqa: BLE001 - resumed as an error
                if handle._disable():
                    value, error = None, failure
                    continue

            with self._lock:
                if self._pending is None:
                    self._running = False
                    return
                value, error = self._pending
                self._pending = None


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


def _spawn(
    awaitable: Awaitable[Any],
    on_done: Callable[[Any, Optional[BaseException]], None],
) -> None:
    """Start running ``awaitable`` now; call ``on_done(value, error)`` when finished."""
    _Runner(_await(awaitable), on_done).start()


class _WhenReady:
    """Awaitable that completes when the task completes, ignoring its result."""

    __slots__ = ("_task",)

    def __init__(self, task: "Task") -> None:
        self._task = task

    def __await__(self) -> Generator[Any, Any, None]:
        yield from self._task._drive()


class Task:
    """A lazily started asynchronous operation producing a single result.

    The wrapped coroutine does not begin executing until the task is first
    awaited.  Its outcome is kept, so awaiting a completed task again returns
    the same value or raises the same exception.
    """

    def __init__(self, coroutine: Optional[Awaitable[Any]] = None) -> None:
        self._coroutine = coroutine
        self._state = _State.PENDING
        self._value: Any = None
        self._error: Optional[BaseException] = None

    def is_ready(self) -> bool:
        """True if awaiting the task would complete without suspending."""
        return self._coroutine is None or self._state is _State.DONE

    def when_ready(self) -> _WhenReady:
        """Return an awaitable that waits for completion without fetching the result."""
        return _WhenReady(self)

    def _drive(self) -> Generator[Any, Any, None]:
        if self._coroutine is None or self._state is _State.DONE:
            return
        if self._state is _State.RUNNING:
            raise RuntimeError("task is already being awaited")
        self._state = _State.RUNNING
        try:
            self._value = yield from self._coroutine.__await__()
        except Exception as error:
            self._error = error
        except BaseException as error:
            self._error = error
            self._state = _State.DONE
            raise
        self._state = _State.DONE

    def __await__(self) -> Generator[Any, Any, Any]:
        if self._coroutine is None:
            raise BrokenPromise()
        yield from self._drive()
        if self._error is not None:
            raise self._error
        return self._value

    def close(self) -> None:
        """Release the coroutine and any stored result."""
        coroutine, self._coroutine = self._coroutine, None
        if coroutine is not None and hasattr(coroutine, "close"):
            coroutine.close()
        self._value = None
        self._error = None
        self._state = _State.PENDING


def make_task(awaitable: Awaitable[Any]) -> Task:
    """Wrap any awaitable in a lazily started task."""
    return Task(_await(awaitable))