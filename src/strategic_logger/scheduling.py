"""
Fire-and-forget scheduling for synchronous call sites.

A coroutine submitted from inside a running event loop becomes a task on
that loop. Submitted from plain synchronous code, it runs on a private
event loop in a daemon thread, started on first use. Either way the
caller gets control back immediately; failures go to on_error.
"""

import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Callable, Coroutine

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[BaseException], None]


class BackgroundRunner:

    def __init__(self, thread_name: str = "strategic-logger"):
        self.thread_name = thread_name
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._futures: set[concurrent.futures.Future] = set()
        self._tasks: set[asyncio.Task] = set()

    def submit(self, coro: Coroutine[Any, Any, Any], on_error: ErrorCallback) -> "asyncio.Task | concurrent.futures.Future":
        """Schedule coro without waiting for it."""
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is not None:
            task = running.create_task(coro)
            with self._lock:
                self._tasks.add(task)
            task.add_done_callback(lambda t: self._on_done(t, self._tasks, on_error))
            return task

        future = asyncio.run_coroutine_threadsafe(coro, self._ensure_loop())
        with self._lock:
            self._futures.add(future)
        future.add_done_callback(lambda f: self._on_done(f, self._futures, on_error))
        return future

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._futures) + len(self._tasks)

    def wait(self, timeout: float | None = None) -> bool:
        """
        Block until dispatches submitted from synchronous code finish and
        their failures, if any, have been reported.

        Tasks living on a caller's event loop can't be waited on from here;
        use drain() for those. Returns False on timeout.
        """
        with self._idle:
            return self._idle.wait_for(lambda: not self._futures, timeout)

    async def drain(self) -> None:
        """Await every pending dispatch, on this loop and on the background thread."""
        with self._lock:
            futures = list(self._futures)
            tasks = [t for t in self._tasks if t is not asyncio.current_task()]
        waiting = tasks + [asyncio.wrap_future(f) for f in futures]
        if waiting:
            await asyncio.gather(*waiting, return_exceptions=True)
        if futures:
            # Done callbacks on the background thread may still be reporting
            await asyncio.get_running_loop().run_in_executor(None, self.wait)

    def shutdown(self, timeout: float | None = 5.0) -> None:
        """Let pending work finish, then stop the background loop."""
        self.wait(timeout)
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop = None
            self._thread = None
        if loop is None:
            return
        loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(timeout)
        if not loop.is_running():
            loop.close()

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._loop is None:
                loop = asyncio.new_event_loop()
                thread = threading.Thread(
                    target=self._run_loop, args=(loop,), name=self.thread_name, daemon=True
                )
                thread.start()
                self._loop = loop
                self._thread = thread
            return self._loop

    @staticmethod
    def _run_loop(loop: asyncio.AbstractEventLoop) -> None:
        asyncio.set_event_loop(loop)
        loop.run_forever()

    def _on_done(self, future: Any, registry: set, on_error: ErrorCallback) -> None:
        try:
            self._report(future, on_error)
        finally:
            # Removed only after the report; wait() watches the registry
            with self._idle:
                registry.discard(future)
                self._idle.notify_all()

    @staticmethod
    def _report(future: Any, on_error: ErrorCallback) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is None:
            return
        try:
            on_error(exc)
        except Exception:
            logger.exception("Error callback failed while reporting %r", exc)
