import queue
import threading

import pytest

from coroweave.sync_wait import sync_wait
from coroweave.task import Task


class Worker:
    """Single background thread that resumes scheduled coroutines."""

    def __init__(self):
        self._queue = queue.Queue()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    @property
    def thread_id(self):
        return self._thread.ident

    def _run(self):
        while True:
            handle = self._queue.get()
            if handle is None:
                return
            handle()

    def schedule(self):
        return _Schedule(self._queue)

    def stop(self):
        self._queue.put(None)
        self._thread.join()


class _Schedule:
    def __init__(self, work_queue):
        self._queue = work_queue

    def __await__(self):
        yield self._queue.put


@pytest.fixture
def worker():
    w = Worker()
    yield w
    w.stop()


def test_sync_wait_task():
    async def make():
        return "foo"

    task = Task(make())
    assert sync_wait(task) == "foo"
    assert sync_wait(task) == "foo"
    assert sync_wait(Task(make())) == "foo"


def test_sync_wait_plain_coroutine():
    async def make():
        return 42

    assert sync_wait(make()) == 42


def test_sync_wait_propagates_exception():
    async def fail():
        raise KeyError("missing")

    with pytest.raises(KeyError):
        sync_wait(Task(fail()))


def test_sync_wait_resumes_on_other_thread(worker):
    main_thread = threading.get_ident()

    async def hop():
        before = threading.get_ident()
        await worker.schedule()
        return before, threading.get_ident()

    before, after = sync_wait(hop())
    assert before == main_thread
    assert after == worker.thread_id


def test_multiple_threads(worker):
    state = {"value": 0}

    async def create_lazy_task():
        await worker.schedule()
        current = state["value"]
        state["value"] += 1
        return current

    results = [sync_wait(Task(create_lazy_task())) for _ in range(10_000)]
    assert results == list(range(10_000))


def test_non_callable_yield_is_reported_as_type_error():
    class Bad:
        def __await__(self):
            yield 123

    async def run():
        await Bad()

    with pytest.raises(TypeError):
        sync_wait(run())


def test_handle_throw_raises_inside_coroutine(worker):
    class Failing:
        def __await__(self):
            yield lambda handle: handle.throw(OSError("io failure"))

    async def run():
        try:
            await Failing()
        except OSError as error:
            return str(error)
        return "no error"

    assert sync_wait(run()) == "io failure"