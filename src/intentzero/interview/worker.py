"""BackgroundWorker — single-thread executor with results delivered on demand.

Work runs on one worker thread. Its outcome is queued, never applied from the
worker thread: the owning thread calls drain() to run the completion
callbacks, so session and transcript state only ever change on the owner.
Coroutines share one event loop that lives on the worker thread, so pooled
HTTP connections stay bound to a loop that outlives each request.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import functools
import queue
import threading
from collections.abc import Callable, Coroutine
from typing import Any

Completion = Callable[[], None]


class BackgroundWorker:
    """Runs one task at a time off the interactive thread."""

    def __init__(self, thread_name_prefix: str = "intentzero") -> None:
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=thread_name_prefix
        )
        self._completions: queue.SimpleQueue[Completion] = queue.SimpleQueue()
        self._futures: set[concurrent.futures.Future[None]] = set()
        self._lock = threading.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None

    def submit(
        self,
        fn: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_failure: Callable[[Exception], None],
    ) -> concurrent.futures.Future[None]:
        """Queue fn on the worker thread.

        The matching callback is queued once fn settles and runs on the
        thread that next calls drain().
        """
        future = self._executor.submit(self._execute, fn, on_success, on_failure)
        with self._lock:
            self._futures.add(future)
        future.add_done_callback(self._forget)
        return future

    def _execute(
        self,
        fn: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_failure: Callable[[Exception], None],
    ) -> None:
        # Queue the completion before the future resolves so wait() + drain()
        # always observes it.
        try:
            value = fn()
        except Exception as exc:
            self._completions.put(functools.partial(on_failure, exc))
        else:
            self._completions.put(functools.partial(on_success, value))

    def run_coroutine[T](self, coro: Coroutine[Any, Any, T]) -> T:
        """Run a coroutine to completion on the worker's event loop.

        Only call this from a task running on the worker thread.
        """
        if self._loop is None or self._loop.is_closed():
            self._loop = asyncio.new_event_loop()
        return self._loop.run_until_complete(coro)

    def _close_loop(self) -> None:
        if self._loop is not None and not self._loop.is_closed():
            self._loop.close()

    def _forget(self, future: concurrent.futures.Future[None]) -> None:
        with self._lock:
            self._futures.discard(future)

    @property
    def has_pending(self) -> bool:
        """Check if a task is still running or its result is undelivered."""
        with self._lock:
            running = any(not future.done() for future in self._futures)
        return running or not self._completions.empty()

    def drain(self) -> int:
        """Run queued completion callbacks on the calling thread.

        Returns:
            Number of callbacks run
        """
        count = 0
        while True:
            try:
                completion = self._completions.get_nowait()
            except queue.Empty:
                return count
            completion()
            count += 1

    def wait(self, timeout: float | None = None) -> None:
        """Block until every submitted task has settled."""
        with self._lock:
            futures = list(self._futures)
        concurrent.futures.wait(futures, timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work and release the worker thread.

        The event loop is closed on the worker thread after queued tasks.
        """
        try:
            self._executor.submit(self._close_loop)
        except RuntimeError:
            pass  # already shut down
        self._executor.shutdown(wait=wait)
