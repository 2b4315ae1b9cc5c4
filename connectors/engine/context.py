"""
Runtime context a host query hands to every row source.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional, Protocol

from connectors.engine.expressions import Expression
from connectors.core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class QueryHints:
    """Skip/take hints derived from the query's paging clauses."""

    skip: Optional[int] = None
    take: Optional[int] = None

    def __post_init__(self):
        if self.skip is not None and self.skip < 0:
            raise ValueError(f"skip must be non-negative, got {self.skip}")
        if self.take is not None and self.take < 0:
            raise ValueError(f"take must be non-negative, got {self.take}")


class DataSourceObserver(Protocol):
    """Observability sink notified around every fetch."""

    def report_begin(self, source_name: str) -> None: ...

    def report_rows_read(self, source_name: str, count: int) -> None: ...

    def report_end(self, source_name: str, total_count: int) -> None: ...


class LoggingObserver:
    """Default observer: row-count telemetry goes to the log."""

    def report_begin(self, source_name: str) -> None:
        logger.debug(f"[{source_name}] Fetch started")

    def report_rows_read(self, source_name: str, count: int) -> None:
        logger.debug(f"[{source_name}] Rows read so far: {count}")

    def report_end(self, source_name: str, total_count: int) -> None:
        logger.info(f"[{source_name}] Fetch finished, {total_count} rows read")


class RowCounter:
    """Mutable running total shared between a fetch and its lifecycle report."""

    def __init__(self, source_name: str, observer: DataSourceObserver):
        self.source_name = source_name
        self.total = 0
        self._observer = observer

    def add(self, count: int):
        self.total += count
        self._observer.report_rows_read(self.source_name, self.total)


@dataclass
class RuntimeContext:
    """
    Everything a row source receives from the host for one query execution.

    Args:
        where: The query's filter tree for this source, None when unfiltered
        hints: Skip/take hints
        cancellation: Set by the host when the query is cancelled
        observer: Observability sink for begin/rows-read/end notifications
    """

    where: Optional[Expression] = None
    hints: QueryHints = field(default_factory=QueryHints)
    cancellation: threading.Event = field(default_factory=threading.Event)
    observer: DataSourceObserver = field(default_factory=LoggingObserver)

    @property
    def is_cancelled(self) -> bool:
        return self.cancellation.is_set()

    @contextmanager
    def report_fetch(self, source_name: str) -> Iterator[RowCounter]:
        """
        Bracket a fetch with exactly one begin and exactly one end notification.

        The end notification fires with the final row count whether the body
        completes, returns early or raises.
        """
        self.observer.report_begin(source_name)
        counter = RowCounter(source_name, self.observer)
        try:
            yield counter
        finally:
            self.observer.report_end(source_name, counter.total)
