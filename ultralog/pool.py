"""A fixed-size pool of worker threads fed from a job queue."""

from __future__ import annotations

import logging
import os
import threading
from collections import deque
from typing import Callable, Deque, List, Optional

_log = logging.getLogger(__name__)


class Pool:
    """Runs submitted callables on a fixed set of worker threads.

    Stopping the pool ends the workers at once; jobs still queued are dropped.
    """

    def __init__(self, workers: Optional[int] = None) -> None:
        count = workers if workers is not None else (os.cpu_count() or 1)
        if count < 1:
            raise ValueError("a pool needs at least one worker")
        self._jobs: Deque[Callable[[], None]] = deque()
        self._cond = threading.Condition()
        self._terminate = False
        self._threads: List[threading.Thread] = [
            threading.Thread(target=self._fire, daemon=True) for _ in range(count)
        ]
        for thread in self._threads:
            thread.start()

    def submit(self, fn: Callable, *args, **kwargs) -> None:
        """Queue fn(*args, **kwargs) for a worker to run."""
        with self._cond:
            if self._terminate:
                raise RuntimeError("pool is stopped")
            self._jobs.append(lambda: fn(*args, **kwargs))
            self._cond.notify()

    def is_working(self) -> bool:
        """Tell whether any jobs are still waiting in the queue."""
        with self._cond:
            return bool(self._jobs)

    def stop(self) -> None:
        """Signal the workers to end and wait for them."""
        with self._cond:
            self._terminate = True
            self._cond.notify_all()
        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current:
                thread.join()
        self._threads.clear()

    def __enter__(self) -> "Pool":
        return self

    def __exit__(self, *args) -> None:
        self.stop()

    def _fire(self) -> None:
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._terminate or bool(self._jobs))
                if self._terminate:
                    return
                job = self._jobs.popleft()
            try:
                job()
            except Exception:
                _log.exception("job failed")