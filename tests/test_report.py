import errno
import functools
import threading

import pytest

from diskrank.models import SizeResult, compare_results
from diskrank.report import ResultCollector, collect


def _err(msg="Permission denied"):
    return SizeResult.failed(PermissionError(errno.EACCES, msg))


def test_size_result_needs_exactly_one_field():
    with pytest.raises(ValueError):
        SizeResult()
    with pytest.raises(ValueError):
        SizeResult(size=1, error=OSError("x"))
    with pytest.raises(ValueError):
        SizeResult.of(-1)


def test_size_result_cause():
    r = _err()
    assert not r.ok
    assert "Permission denied" in r.cause
    assert SizeResult.of(3).cause == ""


def test_report_order_successes_descending_then_errors():
    report = collect([
        ("A", SizeResult.of(500)),
        ("B", SizeResult.of(2000)),
        ("C", _err()),
        ("D", SizeResult.of(10)),
    ])
    assert [e.path for e in report] == ["B", "A", "D", "C"]
    assert len(report) == 4
    assert report.failures == 1


def test_error_sorts_after_any_success():
    report = collect([("err", _err()), ("zero", SizeResult.of(0))])
    assert [e.path for e in report] == ["zero", "err"]


def test_compare_results_is_a_total_order():
    values = [SizeResult.of(0), SizeResult.of(10), SizeResult.of(10),
              SizeResult.of(2 ** 63), _err("a"), _err("b")]
    for a in values:
        assert compare_results(a, a) == 0
        for b in values:
            assert compare_results(a, b) == -compare_results(b, a)
            for c in values:
                if compare_results(a, b) <= 0 and compare_results(b, c) <= 0:
                    assert compare_results(a, c) <= 0

    assert compare_results(SizeResult.of(10), SizeResult.of(5)) < 0
    assert compare_results(SizeResult.of(0), _err()) < 0
    assert compare_results(_err("a"), _err("b")) == 0

    ordered = sorted(values, key=functools.cmp_to_key(compare_results))
    assert [r.size for r in ordered[:4]] == [2 ** 63, 10, 10, 0]
    assert all(not r.ok for r in ordered[4:])


def test_collector_concurrent_pushes_keep_every_entry():
    collector = ResultCollector()

    def produce(start):
        for i in range(start, start + 200):
            collector.push(f"p{i}", SizeResult.of(i) if i % 7 else _err())

    threads = [threading.Thread(target=produce, args=(n * 200,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(collector) == 1600
    report = collector.drain()
    assert len(report) == 1600
    assert len({e.path for e in report}) == 1600
    sizes = [e.result.size for e in report if e.result.ok]
    assert sizes == sorted(sizes, reverse=True)
    seen_error = False
    for e in report:
        if not e.result.ok:
            seen_error = True
        else:
            assert not seen_error
    assert len(collector) == 0


def test_collect_empty():
    assert len(collect([])) == 0
