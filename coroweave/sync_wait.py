"""Blocking wait for the result of an awaitable."""

from __future__ import annotations

import threading
from typing import Any, Awaitable, Optional

from coroweave.task import _spawn


def sync_wait(awaitable: Awaitable[Any]) -> Any:
    """Run ``awaitable`` to completion, blocking the calling thread.

    Returns its result or raises the exception it completed with.
    """
    finished = threading.Event()
    outcome: dict[str, Any] = {}

    def on_done(value: Any, error: Optional[BaseException]) -> None:
        outcome["value"] = value
        outcome["error"] = error
        finished.set()

    _spawn(awaitable, on_done)
    finished.wait()
    error = outcome["error"]
    if error is not None:
        raise error
    return outcome["value"]