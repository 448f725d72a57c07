#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Worker Pool Module for the Static File Server
---------------------------------------------
A fixed-size pool of worker threads that run connection-handling tasks.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

DEFAULT_CAPACITY = 64


class WorkerPool:
    """
    Bounded, non-growing pool of worker threads.

    Submitted tasks wait in an unbounded backlog until a worker frees up, so
    ``submit`` never blocks the caller. The pool does not look at task
    results; each task is expected to handle its own failures.
    """

    def __init__(self, capacity=DEFAULT_CAPACITY, thread_name_prefix="WebServerWorker"):
        """
        Initialize the pool.

        Args:
            capacity: Number of worker threads (default: 64)
            thread_name_prefix: Prefix for worker thread names
        """
        if capacity < 1:
            raise ValueError(f"Pool capacity must be at least 1, got {capacity}")

        self.capacity = capacity
        self.logger = logging.getLogger('WorkerPool')
        self._executor = ThreadPoolExecutor(
            max_workers=capacity,
            thread_name_prefix=thread_name_prefix
        )
        self._is_shutdown = False
        self._active = 0
        self._lock = threading.Lock()

    @property
    def active(self):
        """Number of tasks currently executing."""
        with self._lock:
            return self._active

    @property
    def is_shutdown(self):
        return self._is_shutdown

    def submit(self, task, *args):
        """
        Schedule ``task(*args)`` on the next free worker.

        Args:
            task: Callable to run
            *args: Positional arguments for the callable

        Returns:
            concurrent.futures.Future: Future for the task

        Raises:
            RuntimeError: If the pool has been shut down
        """
        if self._is_shutdown:
            raise RuntimeError("Cannot submit tasks to a pool that has been shut down")
        return self._executor.submit(self._run, task, args)

    def _run(self, task, args):
        with self._lock:
            self._active += 1
        try:
            return task(*args)
        finally:
            with self._lock:
                self._active -= 1

    def shutdown(self, wait=True):
        """
        Stop accepting tasks and let queued and running ones finish.

        Args:
            wait: Block until every task has completed (default: True)
        """
        if self._is_shutdown:
            return

        self._is_shutdown = True
        self.logger.debug("Shutting down worker pool...")
        self._executor.shutdown(wait=wait)
        self.logger.debug("Worker pool stopped")
