"""Elastic, bounded thread pool used by the dispatcher.

Threads are started lazily, up to ``max_workers``, and a thread that waits
longer than ``idle_timeout`` for new work exits again, so an idle pool holds
no threads at all. The queue is unbounded.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from concurrent.futures import Future
from typing import Any, Callable, Deque, Set

LOGGER = logging.getLogger("cpas.dispatch")


class _WorkItem:
    def __init__(self, future: Future, fn: Callable[..., Any], args: tuple) -> None:
        self.future = future
        self.fn = fn
        self.args = args

    def run(self) -> None:
        if not self.future.set_running_or_notify_cancel():
            return
        try:
            result = self.fn(*self.args)
        except BaseException as exc:
            self.future.set_exception(exc)
        else:
            self.future.set_result(result)


class WorkerPool:
    def __init__(
        self,
        max_workers: int = 5,
        idle_timeout: float = 60.0,
        thread_name_prefix: str = "cpas-worker",
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1.")
        if idle_timeout <= 0:
            raise ValueError("idle_timeout must be positive.")
        self._max_workers = max_workers
        self._idle_timeout = idle_timeout
        self._thread_name_prefix = thread_name_prefix
        self._cond = threading.Condition(threading.Lock())
        self._items: Deque[_WorkItem] = deque()
        self._workers: Set[threading.Thread] = set()
        self._idle = 0
        self._spawned = 0
        self._shutdown = False

    @property
    def max_workers(self) -> int:
        return self._max_workers

    @property
    def worker_count(self) -> int:
        with self._cond:
            return len(self._workers)

    @property
    def pending_count(self) -> int:
        with self._cond:
            return len(self._items)

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        future: Future = Future()
        with self._cond:
            if self._shutdown:
                raise RuntimeError("cannot schedule new calls after shutdown")
            self._items.append(_WorkItem(future, fn, args))
            if len(self._items) > self._idle and len(self._workers) < self._max_workers:
                self._start_worker()
            self._cond.notify()
        return future

    def shutdown(self, wait: bool = True, cancel_pending: bool = False) -> None:
        """Stop accepting work.

        Queued calls still run unless ``cancel_pending`` is set, in which case
        their futures are cancelled. With ``wait`` the call returns once every
        worker thread has exited.
        """
        dropped = []
        with self._cond:
            first = not self._shutdown
            self._shutdown = True
            if cancel_pending:
                dropped = list(self._items)
                self._items.clear()
            workers = list(self._workers)
            self._cond.notify_all()
        # Cancelling runs done-callbacks, so it happens outside the lock.
        cancelled = sum(1 for item in dropped if item.future.cancel())
        if first:
            LOGGER.debug(f"[dispatch] pool shutdown workers={len(workers)} cancelled={cancelled}")
        if wait:
            current = threading.current_thread()
            for thread in workers:
                if thread is not current:
                    thread.join()

    def _start_worker(self) -> None:
        # Caller holds self._cond.
        self._spawned += 1
        thread = threading.Thread(
            target=self._worker_loop,
            name=f"{self._thread_name_prefix}-{self._spawned}",
            daemon=True,
        )
        self._workers.add(thread)
        thread.start()

    def _next_item(self) -> _WorkItem | None:
        current = threading.current_thread()
        with self._cond:
            self._idle += 1
            deadline = time.monotonic() + self._idle_timeout
            while not self._items and not self._shutdown:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self._cond.wait(remaining)
            self._idle -= 1
            if self._items:
                return self._items.popleft()
            self._workers.discard(current)
            if not self._shutdown:
                LOGGER.debug(f"[dispatch] worker {current.name} idle for {self._idle_timeout}s; exiting")
            return None

    def _worker_loop(self) -> None:
        while True:
            item = self._next_item()
            if item is None:
                return
            item.run()
            del item
