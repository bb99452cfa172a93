from __future__ import annotations
import heapq
import itertools
import threading
from typing import Iterable, List, Tuple

from .models import OrderedReport, ReportEntry, SizeResult


class ResultCollector:
    """Thread-safe heap of per-root results, drained once in report order.

    Entries with equal keys (same size, or both failed) come out in
    insertion order, which for concurrent producers is completion order.
    """

    def __init__(self):
        self._heap: List[Tuple[Tuple[int, int], int, ReportEntry]] = []
        self._seq = itertools.count()
        self._lock = threading.Lock()

    def push(self, path: str, result: SizeResult):
        entry = ReportEntry(path=path, result=result)
        with self._lock:
            heapq.heappush(self._heap, (result.order_key(), next(self._seq), entry))

    def __len__(self) -> int:
        with self._lock:
            return len(self._heap)

    def drain(self) -> OrderedReport:
        with self._lock:
            heap, self._heap = self._heap, []
        entries = []
        while heap:
            entries.append(heapq.heappop(heap)[2])
        return OrderedReport(entries=entries)


def collect(results: Iterable[Tuple[str, SizeResult]]) -> OrderedReport:
    collector = ResultCollector()
    for path, result in results:
        collector.push(path, result)
    return collector.drain()
