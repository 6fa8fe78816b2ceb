"""Lazy tasks, synchronous waiting, concurrent joins and a thread-pool scheduler for coroutines."""

__version__ = "0.1.0"
__all__ = ["task", "sync_wait", "when_all", "static_thread_pool"]