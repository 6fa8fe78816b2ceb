"""A fixed-size pool of worker threads that coroutines can hop onto."""

from __future__ import annotations

import os
import queue
import threading
from typing import Any, Callable, Generator, Optional

_STOP = object()


class _ScheduleOperation:
    """Awaitable that resumes the awaiting coroutine on a pool thread."""

    __slots__ = ("_pool",)

    def __init__(self, pool: "StaticThreadPool") -> None:
        self._pool = pool

    def __await__(self) -> Generator[Any, Any, None]:
        yield self._pool._enqueue


class StaticThreadPool:
    """Runs resumed coroutines on a fixed number of worker threads.

    With no thread count given, the pool uses one thread per CPU core.
    """

    def __init__(self, thread_count: Optional[int] = None) -> None:
        if thread_count is None:
            thread_count = os.cpu_count() or 1
        if thread_count < 1:
            raise ValueError("thread_count must be at least 1")
        self._thread_count = thread_count
        self._queue: "queue.SimpleQueue[Any]" = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._stopped = False
        self._threads = [
            threading.Thread(
                target=self._run_worker,
                name=f"coroweave-pool-{index}",
                daemon=True,
            )
            for index in range(thread_count)
        ]
        for thread in self._threads:
            thread.start()

    def thread_count(self) -> int:
        """Number of worker threads in the pool."""
        return self._thread_count

    def schedule(self) -> _ScheduleOperation:
        """Return an awaitable that continues the awaiting coroutine on a pool thread."""
        return _ScheduleOperation(self)

    def _enqueue(self, handle: Callable[[], None]) -> None:
        with self._lock:
            if self._stopped:
                raise RuntimeError("thread pool has been shut down")
            self._queue.put(handle)

    def _run_worker(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            item()

    def shutdown(self) -> None:
        """Finish queued work, then stop and join all worker threads."""
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            for _ in self._threads:
                self._queue.put(_STOP)
        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current:
                thread.join()

    def __enter__(self) -> "StaticThreadPool":
        return self

    def __exit__(self, *args: Any) -> None:
        self.shutdown()