"""Run work off the request path in worker threads."""

from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from functools import partial
from typing import Any

import anyio

logger = logging.getLogger(__name__)


class BackgroundRunner:
    """Fire-and-forget executor for notification fan-out and manual passes.

    Coroutine functions run in their own event loop on a worker thread, plain
    callables are called directly. Failures are logged and never reach the
    submitter.
    """

    def __init__(self, max_workers: int = 8, *, thread_name_prefix: str = "approvals-bg") -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=thread_name_prefix
        )
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    def submit(self, func: Callable[..., Any], /, **kwargs: Any) -> Future:
        name = getattr(func, "__qualname__", repr(func))
        job = partial(func, **kwargs)
        if inspect.iscoroutinefunction(func):
            job = partial(anyio.run, job)
        future = self._executor.submit(self._run, name, job)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._discard)
        return future

    def drain(self, timeout: float | None = None) -> None:
        """Block until every submitted job has finished."""

        while True:
            with self._lock:
                pending = set(self._pending)
            if not pending:
                return
            _, not_done = wait(pending, timeout=timeout)
            if not_done:
                logger.warning("%d background job(s) still running after drain", len(not_done))
                return

    def shutdown(self, *, wait_for_jobs: bool = True) -> None:
        self._executor.shutdown(wait=wait_for_jobs)

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    @staticmethod
    def _run(name: str, job: Callable[[], Any]) -> Any:
        try:
            return job()
        except Exception:
            logger.exception("Background job %s failed", name)
            return None


__all__ = ["BackgroundRunner"]
