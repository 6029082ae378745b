"""Unit tests for the debounced auto-kern queue."""

import time
from concurrent.futures import Executor, Future

from glyphsmith.config import AutoKernConfig
from glyphsmith.core.scheduler import AutoKernQueue
from glyphsmith.domain import Character, FontMetrics, GlyphData, Path, PathType, Point, Segment
from glyphsmith.store import GlyphDataStore, KerningStore
from glyphsmith.utils import KerningRunLogger


def rect(x0: float, y0: float, x1: float, y1: float) -> Path:
    corners = [Point(x0, y0), Point(x1, y0), Point(x1, y1), Point(x0, y1)]
    return Path("r", PathType.OUTLINE, segment_groups=[[Segment.corner(c) for c in corners]])


STEM = GlyphData([rect(0, 300, 100, 700)])
CHARACTERS = [Character("A", unicode=65), Character("V", unicode=86)]


class InlineExecutor(Executor):
    """Runs every task immediately in the calling thread."""

    def __init__(self) -> None:
        self.requests: list[dict] = []

    def submit(self, fn, /, *args, **kwargs):
        self.requests.append(args[0])
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


class DeferredExecutor(Executor):
    """Holds tasks until the test completes them, in any order."""

    def __init__(self) -> None:
        self.calls: list[tuple[Future, object, tuple]] = []

    def submit(self, fn, /, *args, **kwargs):
        future: Future = Future()
        self.calls.append((future, fn, args))
        return future

    def run(self, index: int) -> None:
        future, fn, args = self.calls[index]
        future.set_result(fn(*args))


class FailingExecutor(Executor):
    def submit(self, fn, /, *args, **kwargs):
        raise RuntimeError("cannot schedule new futures after shutdown")


def make_queue(executor: Executor, store: KerningStore | None = None, **config) -> AutoKernQueue:
    glyph_store = GlyphDataStore({65: STEM, 86: STEM})
    return AutoKernQueue(
        store or KerningStore(),
        glyph_store,
        CHARACTERS,
        FontMetrics(),
        0.0,
        config=AutoKernConfig(**config),
        executor=executor,
        run_logger=KerningRunLogger(),
    )


class TestEnqueue:
    """Tests for buffering pair requests."""

    def test_duplicates_collapse_and_last_target_wins(self) -> None:
        executor = InlineExecutor()
        queue = make_queue(executor)
        queue.enqueue([(65, 86), (86, 65)])
        queue.enqueue([(65, 86, 60.0)])
        assert queue.pending_keys == ["65-86", "86-65"]

        queue.flush()
        pairs = executor.requests[0]["pairs"]
        assert [p["targetDistance"] for p in pairs] == [60.0, None]
        queue.close()

    def test_ignored_pairs_are_dropped(self) -> None:
        store = KerningStore(ignored=["65-86"])
        queue = make_queue(InlineExecutor(), store)
        queue.enqueue([(65, 86), (86, 65)])
        assert queue.pending_keys == ["86-65"]
        queue.close()

    def test_flush_with_nothing_pending(self) -> None:
        queue = make_queue(InlineExecutor())
        assert queue.flush() is None
        assert queue.latest_batch_id == 0

    def test_enqueue_after_close_is_ignored(self) -> None:
        queue = make_queue(InlineExecutor())
        queue.close()
        queue.enqueue([(65, 86)])
        assert queue.pending_keys == []

    def test_debounce_dispatches_after_quiet_period(self) -> None:
        store = KerningStore()
        queue = make_queue(InlineExecutor(), store, debounce_seconds=0.05)
        queue.enqueue([(65, 86, 60.0)])

        deadline = time.monotonic() + 5.0
        while store.get_suggestion("65-86") is None and time.monotonic() < deadline:
            time.sleep(0.01)

        assert queue.latest_batch_id == 1
        assert store.get_suggestion("65-86") == -40
        queue.close()


class TestFlush:
    """Tests for dispatching and applying batches."""

    def test_results_land_in_suggestions(self) -> None:
        store = KerningStore()
        queue = make_queue(InlineExecutor(), store)
        queue.enqueue([(65, 86, 60.0), (86, 65)])
        assert queue.flush() == 1

        assert dict(store.suggestions) == {"65-86": -40, "86-65": 0}
        assert store.get("65-86") is None
        assert queue.run_logger.stats.batches_applied == 1
        assert queue.run_logger.stats.pairs_proposed == 2
        queue.close()

    def test_batch_ids_are_monotonic(self) -> None:
        queue = make_queue(InlineExecutor())
        queue.enqueue([(65, 86)])
        first = queue.flush()
        queue.enqueue([(65, 86)])
        second = queue.flush()
        assert second > first
        queue.close()

    def test_stale_result_is_discarded(self) -> None:
        store = KerningStore()
        executor = DeferredExecutor()
        queue = make_queue(executor, store)

        queue.enqueue([(65, 86, 60.0)])
        queue.flush()
        queue.enqueue([(86, 65)])
        queue.flush()

        executor.run(1)
        executor.run(0)

        assert dict(store.suggestions) == {"86-65": 0}
        assert queue.run_logger.stats.batches_discarded == 1
        assert queue.run_logger.stats.batches_applied == 1
        queue.close()

    def test_older_batch_arriving_first_is_still_discarded(self) -> None:
        store = KerningStore()
        executor = DeferredExecutor()
        queue = make_queue(executor, store)

        queue.enqueue([(65, 86, 60.0)])
        queue.flush()
        queue.enqueue([(86, 65)])
        queue.flush()

        executor.run(0)
        assert dict(store.suggestions) == {}
        executor.run(1)
        assert dict(store.suggestions) == {"86-65": 0}
        queue.close()

    def test_ignored_after_dispatch_gets_no_suggestion(self) -> None:
        store = KerningStore()
        executor = DeferredExecutor()
        queue = make_queue(executor, store)
        queue.enqueue([(65, 86)])
        queue.flush()

        store.ignore_pair("65-86")
        executor.run(0)
        assert store.get_suggestion("65-86") is None
        queue.close()


class TestFailures:
    """Tests for worker failures."""

    def test_submit_failure_is_logged(self) -> None:
        store = KerningStore()
        queue = make_queue(FailingExecutor(), store)
        queue.enqueue([(65, 86)])
        assert queue.flush() == 1
        assert queue.run_logger.stats.batches_failed == 1
        assert dict(store.suggestions) == {}
        queue.close()

    def test_worker_exception_is_logged(self) -> None:
        store = KerningStore()
        executor = DeferredExecutor()
        queue = make_queue(executor, store)
        queue.enqueue([(65, 86)])
        queue.flush()

        future, _, _ = executor.calls[0]
        future.set_exception(OSError("worker died"))

        stats = queue.run_logger.stats
        assert stats.batches_failed == 1
        assert "worker died" in stats.errors[0][1]
        assert dict(store.suggestions) == {}
        queue.close()

    def test_error_payload_is_logged(self) -> None:
        store = KerningStore()
        executor = DeferredExecutor()
        queue = make_queue(executor, store)
        queue.enqueue([(65, 86)])
        queue.flush()

        future, _, _ = executor.calls[0]
        future.set_result({"batch_id": 1, "error": "boom", "traceback": "...", "duration_ms": 1.0})

        assert queue.run_logger.stats.errors == [(1, "boom")]
        assert dict(store.suggestions) == {}
        queue.close()
