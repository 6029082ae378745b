"""Logging utilities for Glyphsmith."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import structlog

_OWNED_HANDLERS: list[logging.Handler] = []


@dataclass
class KerningStats:
    """Statistics from an auto-kerning session."""

    batches_dispatched: int = 0
    batches_applied: int = 0
    batches_discarded: int = 0
    batches_failed: int = 0
    pairs_proposed: int = 0
    pairs_skipped: int = 0
    errors: list[tuple[int, str]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate session duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (auto-generated if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    # Repeated calls (one per CLI invocation) replace the previous handlers
    while _OWNED_HANDLERS:
        handler = _OWNED_HANDLERS.pop()
        root_logger.removeHandler(handler)
        handler.close()

    if log_file is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = Path(f"glyphsmith_{timestamp}.log")

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(getattr(logging, file_level.upper()))
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
    )

    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)
    _OWNED_HANDLERS.append(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(console_handler)
        _OWNED_HANDLERS.append(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("glyphsmith")
    logger.info("Logging initialized", log_file=str(log_file), level=file_level)

    return logger


class KerningRunLogger:
    """Logger for tracking auto-kerning batches and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger if logger is not None else structlog.get_logger("glyphsmith.autokern")
        self._stats = KerningStats()

    def log_batch_dispatched(self, batch_id: int, pair_count: int) -> None:
        """Log a batch handed to the worker."""
        self._logger.debug("Kerning batch dispatched", batch_id=batch_id, pairs=pair_count)
        self._stats.batches_dispatched += 1

    def log_batch_applied(
        self,
        batch_id: int,
        proposed: int,
        requested: int,
        duration_ms: float,
    ) -> None:
        """Log results of the latest batch written to the suggestion store."""
        self._logger.info(
            "Kerning batch applied",
            batch_id=batch_id,
            proposed=proposed,
            skipped=requested - proposed,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.batches_applied += 1
        self._stats.pairs_proposed += proposed
        self._stats.pairs_skipped += requested - proposed

    def log_batch_discarded(self, batch_id: int, latest_batch_id: int) -> None:
        """Log a stale batch result arriving after a newer dispatch."""
        self._logger.debug(
            "Stale kerning batch discarded",
            batch_id=batch_id,
            latest_batch_id=latest_batch_id,
        )
        self._stats.batches_discarded += 1

    def log_batch_failed(
        self,
        batch_id: int,
        error: Exception | str,
        traceback: str | None = None,
    ) -> None:
        """Log a batch the worker could not complete."""
        self._logger.error(
            "Kerning batch failed",
            batch_id=batch_id,
            error=str(error),
            error_type=type(error).__name__ if isinstance(error, Exception) else "WorkerError",
            traceback=traceback,
        )
        self._stats.batches_failed += 1
        self._stats.errors.append((batch_id, str(error)))

    @property
    def stats(self) -> KerningStats:
        """Get current kerning statistics."""
        return self._stats
