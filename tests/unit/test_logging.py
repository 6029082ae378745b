"""Unit tests for logging setup and the kerning run logger."""

import logging
from pathlib import Path

from glyphsmith.exceptions import WorkerUnavailableError
from glyphsmith.utils import KerningRunLogger, configure_logging


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_repeated_calls_replace_handlers(self, tmp_path: Path) -> None:
        configure_logging(log_file=tmp_path / "first.log", quiet=True)
        configure_logging(log_file=tmp_path / "second.log", quiet=True)

        ours = [
            h.baseFilename
            for h in logging.getLogger().handlers
            if isinstance(h, logging.FileHandler) and h.baseFilename.startswith(str(tmp_path))
        ]
        assert ours == [str(tmp_path / "second.log")]
        assert (tmp_path / "second.log").exists()


class TestKerningRunLogger:
    """Tests for KerningRunLogger statistics."""

    def test_applied_batch_counts_skipped_pairs(self) -> None:
        run_logger = KerningRunLogger()
        run_logger.log_batch_dispatched(1, 5)
        run_logger.log_batch_applied(1, proposed=3, requested=5, duration_ms=1.5)

        stats = run_logger.stats
        assert stats.batches_dispatched == 1
        assert stats.batches_applied == 1
        assert stats.pairs_proposed == 3
        assert stats.pairs_skipped == 2

    def test_failures_are_recorded(self) -> None:
        run_logger = KerningRunLogger()
        run_logger.log_batch_failed(2, WorkerUnavailableError(2, "pool broken"))
        run_logger.log_batch_failed(3, "ValueError: bad glyph", traceback="...")

        assert run_logger.stats.batches_failed == 2
        assert run_logger.stats.errors[0] == (2, "Kerning batch 2 failed: pool broken")

    def test_duration_needs_both_timestamps(self) -> None:
        run_logger = KerningRunLogger()
        run_logger.stats.start_time = 10.0
        assert run_logger.stats.duration_seconds == 0.0
        run_logger.stats.end_time = 12.5
        assert run_logger.stats.duration_seconds == 2.5
