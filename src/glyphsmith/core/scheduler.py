"""Debounced queue that feeds the auto-kern worker.

Edits that may change spacing enqueue pairs. Entries are deduplicated by
pair key and flushed as one batch once edits settle. Each batch carries a
monotonically increasing id; only the result of the most recent batch is
written to the suggestion store, older results are discarded on arrival.
"""

import threading
from collections.abc import Iterable, Mapping
from concurrent.futures import Executor, Future, ProcessPoolExecutor
from concurrent.futures.process import BrokenProcessPool
from functools import partial
from typing import Any

from glyphsmith.config import AutoKernConfig
from glyphsmith.core.autokern import KerningPair, build_batch_request, run_kerning_batch
from glyphsmith.domain import Character, FontMetrics
from glyphsmith.exceptions import WorkerUnavailableError
from glyphsmith.store import GlyphDataStore, KerningStore, pair_key
from glyphsmith.utils import KerningRunLogger

PairRequest = tuple[int, int] | tuple[int, int, float | None]


class AutoKernQueue:
    """Collects pair requests and dispatches them to a worker in batches.

    Example:
        queue = AutoKernQueue(store, glyph_store, characters, metrics, 15.0)
        queue.enqueue([(0x41, 0x56), (0x54, 0x6F, 20.0)])
        # ... after ``debounce_seconds`` of quiet the batch is dispatched,
        # and suggestions land in ``store`` when the worker answers.
        queue.close()
    """

    def __init__(
        self,
        store: KerningStore,
        glyph_store: GlyphDataStore,
        characters: Mapping[int, Character] | Iterable[Character],
        metrics: FontMetrics,
        stroke_thickness: float,
        config: AutoKernConfig | None = None,
        executor: Executor | None = None,
        run_logger: KerningRunLogger | None = None,
    ) -> None:
        self.store = store
        self.glyph_store = glyph_store
        if isinstance(characters, Mapping):
            self.characters = dict(characters)
        else:
            self.characters = {c.unicode: c for c in characters if c.unicode is not None}
        self.metrics = metrics
        self.stroke_thickness = stroke_thickness
        self.config = config or AutoKernConfig()
        self.run_logger = run_logger or KerningRunLogger()

        self._executor = executor
        self._owns_executor = executor is None
        self._pending: dict[str, tuple[int, int, float | None]] = {}
        self._timer: threading.Timer | None = None
        self._batch_id = 0
        self._closed = False
        self._lock = threading.Lock()

    @property
    def pending_keys(self) -> list[str]:
        """Pair keys waiting for the next flush, in enqueue order."""
        with self._lock:
            return list(self._pending)

    @property
    def latest_batch_id(self) -> int:
        """Id of the most recently dispatched batch (0 before the first)."""
        return self._batch_id

    def enqueue(self, pairs: Iterable[PairRequest]) -> None:
        """Add pairs to the pending buffer and restart the debounce timer.

        A pair already pending keeps its position; its target distance is
        replaced by the newest one. Ignored pairs are dropped.
        """
        with self._lock:
            if self._closed:
                return
            added = False
            for request in pairs:
                left, right = request[0], request[1]
                target = request[2] if len(request) > 2 else None
                key = pair_key(left, right)
                if self.store.is_ignored(key):
                    continue
                self._pending[key] = (left, right, target)
                added = True
            if added:
                self._restart_timer()

    def _restart_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = threading.Timer(self.config.debounce_seconds, self.flush)
        self._timer.daemon = True
        self._timer.start()

    def _get_executor(self) -> Executor:
        if self._executor is None:
            self._executor = ProcessPoolExecutor(max_workers=self.config.max_workers)
        return self._executor

    def _build_pairs(self, entries: list[tuple[int, int, float | None]]) -> list[KerningPair]:
        pairs = []
        for left, right, target in entries:
            left_char = self.characters.get(left)
            right_char = self.characters.get(right)
            pairs.append(
                KerningPair(
                    left=left,
                    right=right,
                    left_glyph=self.glyph_store.get(left),
                    right_glyph=self.glyph_store.get(right),
                    left_rsb=left_char.rsb_or(self.metrics.default_rsb) if left_char else self.metrics.default_rsb,
                    right_lsb=right_char.lsb_or(self.metrics.default_lsb) if right_char else self.metrics.default_lsb,
                    target_distance=target,
                )
            )
        return pairs

    def flush(self) -> int | None:
        """Dispatch everything pending as one batch.

        Returns:
            The new batch id, or None when nothing was pending
        """
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            if self._closed or not self._pending:
                return None
            entries = list(self._pending.values())
            self._pending.clear()
            self._batch_id += 1
            batch_id = self._batch_id

        pairs = self._build_pairs(entries)
        request = build_batch_request(batch_id, pairs, self.metrics, self.stroke_thickness, self.config)
        self.run_logger.log_batch_dispatched(batch_id, len(pairs))

        try:
            future = self._get_executor().submit(run_kerning_batch, request)
        except (BrokenProcessPool, RuntimeError) as e:
            self.run_logger.log_batch_failed(batch_id, WorkerUnavailableError(batch_id, str(e)))
            return batch_id

        future.add_done_callback(partial(self._on_complete, batch_id, len(pairs)))
        return batch_id

    def _on_complete(self, batch_id: int, requested: int, future: Future) -> None:
        try:
            response: dict[str, Any] = future.result()
        except Exception as e:
            # A dead worker means no suggestion for this batch
            self.run_logger.log_batch_failed(batch_id, WorkerUnavailableError(batch_id, str(e)))
            return

        if "error" in response:
            self.run_logger.log_batch_failed(batch_id, response["error"], response.get("traceback"))
            return

        latest = self._batch_id
        if batch_id != latest:
            self.run_logger.log_batch_discarded(batch_id, latest)
            return

        results = response.get("results", {})
        self.store.merge_suggestions(results)
        self.run_logger.log_batch_applied(batch_id, len(results), requested, response.get("duration_ms", 0.0))

    def close(self, wait: bool = True) -> None:
        """Cancel the debounce timer and shut down an owned executor."""
        with self._lock:
            self._closed = True
            self._pending.clear()
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=wait)

    def __enter__(self) -> "AutoKernQueue":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
