import time

from course_search.cache import CacheSweeper, QueryCache
from course_search.pipeline_types import RefType, ScoredRef

DAY = 24 * 60 * 60

REFS = [ScoredRef(ref="c1", score=1.0, type=RefType.CLASS)]


def test_put_then_get_returns_entry(clock):
    cache = QueryCache(ttl_seconds=DAY, clock=clock)
    cache.put("cs", REFS, was_subject_match=True)

    entry = cache.get("cs")

    assert entry.refs == tuple(REFS)
    assert entry.was_subject_match is True
    assert "cs" in cache
    assert cache.get("math") is None


def test_get_refreshes_last_access(clock):
    cache = QueryCache(ttl_seconds=DAY, clock=clock)
    cache.put("cs", REFS, was_subject_match=False)
    clock.advance(100)
    assert cache.get("cs").last_access == clock.now


def test_sweep_evicts_only_stale_entries(clock):
    cache = QueryCache(ttl_seconds=DAY, clock=clock)
    cache.put("old", REFS, was_subject_match=False)
    clock.advance(DAY - 10)
    cache.put("fresh", REFS, was_subject_match=False)
    clock.advance(20)

    evicted = cache.sweep()

    assert evicted == 1
    assert "old" not in cache
    assert "fresh" in cache


def test_recently_read_entry_survives_sweep(clock):
    cache = QueryCache(ttl_seconds=DAY, clock=clock)
    cache.put("cs", REFS, was_subject_match=False)
    clock.advance(DAY - 1)
    cache.get("cs")
    clock.advance(DAY - 1)

    assert cache.sweep() == 0
    assert len(cache) == 1


def test_get_or_compute_only_computes_on_miss(clock):
    cache = QueryCache(clock=clock)
    calls = []

    def compute():
        calls.append(1)
        return REFS, False

    entry, hit = cache.get_or_compute("x", compute)
    assert hit is False
    entry2, hit2 = cache.get_or_compute("x", compute)
    assert hit2 is True
    assert entry2.refs == entry.refs
    assert len(calls) == 1


def test_sweeper_run_once_and_lifecycle(clock):
    cache = QueryCache(ttl_seconds=DAY, clock=clock)
    cache.put("cs", REFS, was_subject_match=False)
    clock.advance(DAY + 1)

    sweeper = CacheSweeper(cache, interval_seconds=DAY)
    assert sweeper.run_once() == 1

    sweeper.start()
    assert sweeper.is_running
    sweeper.start()  # no second thread
    sweeper.stop()
    assert not sweeper.is_running


def test_background_sweeper_evicts_on_its_interval(clock):
    cache = QueryCache(ttl_seconds=DAY, clock=clock)
    cache.put("cs", REFS, was_subject_match=False)
    clock.advance(DAY + 1)

    sweeper = CacheSweeper(cache, interval_seconds=0.01)
    sweeper.start()
    try:
        deadline = time.time() + 2.0
        while len(cache) and time.time() < deadline:
            time.sleep(0.01)
    finally:
        sweeper.stop()

    assert len(cache) == 0
