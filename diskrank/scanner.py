from __future__ import annotations
import logging
import os
import stat as statmod
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Iterable, List, Optional, Tuple

from .models import OrderedReport, SizeResult
from .report import ResultCollector

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = min(32, (os.cpu_count() or 1) + 4)


def _is_dangling(path: str) -> bool:
    # exists() follows the link; lstat() already told us the link itself is there
    return not os.path.exists(path)


def _classify(path: str) -> Tuple[int, Optional[List[str]]]:
    """(size, None) for a leaf entry, (0, children) for a directory."""
    st = os.lstat(path)
    mode = st.st_mode
    if statmod.S_ISLNK(mode):
        return (0 if _is_dangling(path) else int(st.st_size)), None
    if not statmod.S_ISDIR(mode):
        return int(st.st_size), None
    try:
        with os.scandir(path) as it:
            return 0, [entry.path for entry in it]
    except OSError as e:
        logger.debug("cannot list %r: %s", path, e)
        raise


class _PendingDir:
    """A directory whose children are still being sized."""

    def __init__(self, children: List[str]):
        self._children = iter(children)
        self.total = 0
        self.error: Optional[OSError] = None
        self.futures: List[Future] = []

    def next_child(self) -> Optional[str]:
        # once a child failed the sum is lost; don't start more siblings
        if self.error is not None:
            return None
        return next(self._children, None)

    def fail(self, error: OSError):
        if self.error is None:
            self.error = error

    def join(self) -> int:
        # Always join: submitted tasks hold worker slots until they finish.
        for f in self.futures:
            try:
                self.total += f.result()
            except OSError as e:
                self.fail(e)
        if self.error is not None:
            raise self.error
        return self.total


class SizeAggregator:
    """All-or-nothing subtree sizing on a shared thread pool.

    A child is handed to the pool only while a worker slot is free, otherwise
    the calling thread sizes it inline. Every submitted task therefore has a
    thread of its own, so directories can block on their children's futures
    without starving the pool.
    """

    def __init__(self, workers: int = DEFAULT_WORKERS):
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.workers = workers
        self._pool: Optional[ThreadPoolExecutor] = None
        self._slots: Optional[threading.BoundedSemaphore] = None
        if workers > 1:
            self._pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="diskrank")
            self._slots = threading.BoundedSemaphore(workers)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def aggregate(self, path: str) -> SizeResult:
        try:
            return SizeResult.of(self._size_of(path))
        except OSError as e:
            logger.debug("size of %r failed: %s", path, e)
            return SizeResult.failed(e)

    def aggregate_all(self, paths: Iterable[str],
                      collector: Optional[ResultCollector] = None) -> OrderedReport:
        """Size every root concurrently and return them in report order."""
        collector = collector if collector is not None else ResultCollector()
        paths = list(paths)
        if self.workers == 1 or len(paths) < 2:
            for p in paths:
                collector.push(p, self.aggregate(p))
            return collector.drain()

        def run(p: str):
            collector.push(p, self.aggregate(p))

        # Roots get their own threads: they block on the shared pool's futures.
        with ThreadPoolExecutor(max_workers=min(len(paths), self.workers),
                                thread_name_prefix="diskrank-root") as roots:
            futures = [roots.submit(run, p) for p in paths]
            for f in futures:
                f.result()
        return collector.drain()

    def _size_of(self, path: str) -> int:
        # Post-order walk on an explicit stack, so tree depth never touches
        # the interpreter's recursion limit.
        size, children = _classify(path)
        if children is None:
            return size
        stack = [_PendingDir(children)]
        while stack:
            pending = stack[-1]
            child = pending.next_child()
            if child is not None:
                if self._slots is not None and self._slots.acquire(blocking=False):
                    pending.futures.append(self._pool.submit(self._pooled_size_of, child))
                    continue
                try:
                    size, children = _classify(child)
                except OSError as e:
                    pending.fail(e)
                    continue
                if children is None:
                    pending.total += size
                else:
                    stack.append(_PendingDir(children))
                continue

            stack.pop()
            try:
                size = pending.join()
            except OSError as e:
                if not stack:
                    raise
                stack[-1].fail(e)
                continue
            if not stack:
                return size
            stack[-1].total += size
        raise AssertionError("unreachable")

    def _pooled_size_of(self, path: str) -> int:
        try:
            return self._size_of(path)
        finally:
            self._slots.release()


def aggregate(path: str, workers: int = DEFAULT_WORKERS) -> SizeResult:
    with SizeAggregator(workers) as agg:
        return agg.aggregate(path)


def scan_paths(paths: List[str], workers: int = DEFAULT_WORKERS) -> OrderedReport:
    t0 = time.time()
    with SizeAggregator(workers) as agg:
        report = agg.aggregate_all(paths)
    logger.debug("sized %d path(s) in %.3fs with %d worker(s), %d failed",
                 len(report), time.time() - t0, workers, report.failures)
    return report
