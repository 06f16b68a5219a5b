"""Managed execution context for the facades.

A single daemon thread runs an asyncio event loop. Every facade submits its
coroutines to it, so the transport's connection pool is only ever driven
from that one loop. Stopping the loop cancels the calls still in flight, so
each of them still settles with exactly one outcome.
"""

import asyncio
import logging
import threading
from concurrent.futures import Future
from typing import Any, Coroutine, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EventLoopThread:
    """Event loop running forever on a background daemon thread."""

    def __init__(self, name: str = "qontoclient-loop"):
        self._name = name
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    def _ensure_started(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._loop is None or self._loop.is_closed():
                loop = asyncio.new_event_loop()
                started = threading.Event()

                def run() -> None:
                    asyncio.set_event_loop(loop)
                    loop.call_soon(started.set)
                    loop.run_forever()

                thread = threading.Thread(target=run, name=self._name, daemon=True)
                thread.start()
                started.wait()
                self._loop = loop
                self._thread = thread
                logger.debug("Started event loop thread %s", self._name)
            return self._loop

    def is_loop_thread(self) -> bool:
        return self._thread is not None and threading.current_thread() is self._thread

    def submit(self, coroutine: Coroutine[Any, Any, T]) -> "Future[T]":
        """Schedule a coroutine on the loop and return a concurrent Future."""
        loop = self._ensure_started()
        return asyncio.run_coroutine_threadsafe(coroutine, loop)

    def run(self, coroutine: Coroutine[Any, Any, T]) -> T:
        """Run a coroutine on the loop and block the calling thread until it ends.

        Raises:
            RuntimeError: If called from the loop thread itself (it would deadlock)
        """
        if self.is_loop_thread():
            coroutine.close()
            raise RuntimeError("Blocking calls cannot be made from the event loop thread")
        return self.submit(coroutine).result()

    def stop(self) -> None:
        """Cancel pending calls, stop the loop and wait for its thread to end.

        Calls still in flight are cancelled and report the cancellation as
        their outcome.
        """
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop = None
            self._thread = None
        if loop is None:
            return
        asyncio.run_coroutine_threadsafe(_cancel_pending_and_stop(loop), loop)
        if thread is threading.current_thread():
            return
        if thread is not None:
            thread.join()
        loop.close()


async def _cancel_pending_and_stop(loop: asyncio.AbstractEventLoop) -> None:
    current = asyncio.current_task()
    pending = [task for task in asyncio.all_tasks() if task is not current]
    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)
    if pending:
        logger.debug("Cancelled %d pending call(s)", len(pending))
    loop.stop()


_default_loop_thread: Optional[EventLoopThread] = None
_default_lock = threading.Lock()


def get_default_loop_thread() -> EventLoopThread:
    """Return the process-wide loop shared by facades created without one."""
    global _default_loop_thread
    with _default_lock:
        if _default_loop_thread is None:
            _default_loop_thread = EventLoopThread()
        return _default_loop_thread
