from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

# Successes sort before failures; see SizeResult.order_key().
_OK = 0
_ERR = 1


@dataclass(frozen=True)
class SizeResult:
    """Total size of a subtree, or the OSError that made it unknowable."""
    size: Optional[int] = None
    error: Optional[OSError] = None

    def __post_init__(self):
        if (self.size is None) == (self.error is None):
            raise ValueError("SizeResult needs exactly one of size or error")
        if self.size is not None and self.size < 0:
            raise ValueError(f"negative size: {self.size}")

    @classmethod
    def of(cls, size: int) -> "SizeResult":
        return cls(size=size)

    @classmethod
    def failed(cls, error: OSError) -> "SizeResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def cause(self) -> str:
        return str(self.error) if self.error is not None else ""

    def order_key(self) -> Tuple[int, int]:
        # Ascending key == descending report order: bigger sizes first,
        # every failure after every success, failures all equal.
        if self.ok:
            return (_OK, -self.size)
        return (_ERR, 0)


def compare_results(a: SizeResult, b: SizeResult) -> int:
    """Report-order comparison: negative if a is listed before b."""
    ka, kb = a.order_key(), b.order_key()
    return (ka > kb) - (ka < kb)


@dataclass(frozen=True)
class ReportEntry:
    path: str
    result: SizeResult


@dataclass
class OrderedReport:
    entries: List[ReportEntry] = field(default_factory=list)

    def __iter__(self) -> Iterator[ReportEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def failures(self) -> int:
        return sum(1 for e in self.entries if not e.result.ok)
