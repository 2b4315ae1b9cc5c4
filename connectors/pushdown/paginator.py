"""
Paginated fetch loop.

PageFetcher follows a page-based list API, maps skip/take hints onto pages,
publishes each page as one batch and stops on the first of: empty page, short
page, exhausted row budget, cancellation. The loop is an explicit state
machine so every termination path is a single transition.
"""

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple, Type

from connectors.core.exceptions import RequestCancelled
from connectors.core.logging_config import LoggerMixin, get_logger
from connectors.engine.context import QueryHints, RowCounter, RuntimeContext
from connectors.engine.resolver import EntityResolver

logger = get_logger(__name__)


class FetchState(Enum):
    NOT_STARTED = "not_started"
    FETCHING_PAGE = "fetching_page"
    PUBLISHING = "publishing"
    DONE = "done"
    CANCELLED = "cancelled"
    FAILED = "failed"


FINAL_STATES = frozenset({FetchState.DONE, FetchState.CANCELLED, FetchState.FAILED})


@dataclass
class FetchCursor:
    """Transient state of one fetch."""

    page: int
    page_size: int
    emitted: int = 0
    budget: Optional[int] = None
    offset: int = 0
    state: FetchState = FetchState.NOT_STARTED
    calls: int = 0
    current_page: List[Any] = field(default_factory=list, repr=False)

    @classmethod
    def from_hints(cls, hints: QueryHints, page_size: int) -> "FetchCursor":
        """
        First page is ``skip // page_size + 1`` (1-based); take is the row budget.

        The ``skip % page_size`` rows of that page that precede the requested
        offset are dropped before publishing, so the stream starts exactly at
        ``skip``.
        """
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        skip = hints.skip or 0
        return cls(page=skip // page_size + 1, page_size=page_size, budget=hints.take, offset=skip % page_size)

    @property
    def remaining(self) -> Optional[int]:
        if self.budget is None:
            return None
        return max(self.budget - self.emitted, 0)

    @property
    def budget_exhausted(self) -> bool:
        return self.budget is not None and self.emitted >= self.budget


class PageFetcher(LoggerMixin):
    """
    Runs the page loop for one table fetch.

    Args:
        source_name: Name used in logs and lifecycle reports
        fetch_page: ``fetch_page(page, page_size)`` returning one page of entities
        to_row: Wraps one entity into an EntityResolver
        page_size: Remote page size
        context: Runtime context providing hints, cancellation and the observer
        prepare_page: Optional hook applied to each (already truncated) page
            before conversion, used for per-item enrichment
    """

    def __init__(
        self,
        source_name: str,
        fetch_page: Callable[[int, int], Sequence[Any]],
        to_row: Callable[[Any], EntityResolver],
        page_size: int,
        context: RuntimeContext,
        prepare_page: Optional[Callable[[List[Any]], List[Any]]] = None
    ):
        self.source_name = source_name
        self.fetch_page = fetch_page
        self.to_row = to_row
        self.page_size = page_size
        self.context = context
        self.prepare_page = prepare_page

    def run(self, channel, hints: Optional[QueryHints] = None, cancellation: Optional[threading.Event] = None) -> FetchCursor:
        """
        Fetch pages into ``channel`` until a final state is reached.

        Args:
            channel: Anything with ``publish(batch) -> bool``
            hints: Skip/take hints, defaults to the context's
            cancellation: Cancellation signal, defaults to the context's

        Returns:
            The final cursor

        Raises:
            Whatever the page call raised; the exception propagates unchanged
        """
        hints = hints if hints is not None else self.context.hints
        cancellation = cancellation if cancellation is not None else self.context.cancellation
        cursor = FetchCursor.from_hints(hints, self.page_size)

        with self.context.report_fetch(self.source_name) as counter:
            while cursor.state not in FINAL_STATES:
                if cursor.state is FetchState.NOT_STARTED:
                    cursor.state = self._start(cursor)
                elif cursor.state is FetchState.FETCHING_PAGE:
                    cursor.state = self._fetch(cursor, cancellation)
                elif cursor.state is FetchState.PUBLISHING:
                    cursor.state = self._publish(cursor, channel, counter)

        self.logger.debug(
            f"[{self.source_name}] Fetch ended in state {cursor.state.value} after "
            f"{cursor.calls} page calls, {cursor.emitted} rows"
        )
        return cursor

    def _start(self, cursor: FetchCursor) -> FetchState:
        if cursor.budget == 0:
            self.logger.debug(f"[{self.source_name}] Row budget is zero, nothing to fetch")
            return FetchState.DONE
        return FetchState.FETCHING_PAGE

    def _fetch(self, cursor: FetchCursor, cancellation: threading.Event) -> FetchState:
        if cancellation.is_set():
            self.logger.info(f"[{self.source_name}] Fetch cancelled before page {cursor.page}")
            return FetchState.CANCELLED

        cursor.calls += 1
        try:
            items = self.fetch_page(cursor.page, cursor.page_size)
        except RequestCancelled:
            self.logger.info(f"[{self.source_name}] Fetch cancelled during page {cursor.page}")
            return FetchState.CANCELLED
        except Exception as e:
            cursor.state = FetchState.FAILED
            self.logger.error(f"Error occurred while collecting {self.source_name} data (page {cursor.page}): {e}")
            raise

        cursor.current_page = list(items or [])
        self.logger.debug(f"[{self.source_name}] Page {cursor.page}: {len(cursor.current_page)} items")

        if not cursor.current_page:
            return FetchState.DONE
        return FetchState.PUBLISHING

    def _publish(self, cursor: FetchCursor, channel, counter: RowCounter) -> FetchState:
        fetched = len(cursor.current_page)
        items = cursor.current_page[cursor.offset:]
        cursor.offset = 0
        if cursor.remaining is not None:
            items = items[:cursor.remaining]
        cursor.current_page = []

        if self.prepare_page is not None:
            items = self.prepare_page(items)

        rows = [self.to_row(item) for item in items]
        if rows:
            if not channel.publish(rows):
                return FetchState.CANCELLED
            cursor.emitted += len(rows)
            counter.add(len(rows))

        if fetched < cursor.page_size or cursor.budget_exhausted:
            return FetchState.DONE

        cursor.page += 1
        return FetchState.FETCHING_PAGE


def enrich_each(
    items: Iterable[Any],
    enrich: Callable[[Any], Any],
    source_name: str,
    recoverable: Tuple[Type[BaseException], ...],
    fallback: Optional[Callable[[Any], Any]] = None,
    cancellation: Optional[threading.Event] = None
) -> List[Any]:
    """
    Enrich every item, keeping the basic item when its enrichment fails.

    Args:
        items: Items from one page
        enrich: Per-item call returning the enriched item
        source_name: Name used in warning logs
        recoverable: Exception types that trigger the fallback; anything else propagates
        fallback: Turns a basic item into a result, identity when None
        cancellation: Once set, remaining items pass through unenriched

    Returns:
        One result per input item, in input order
    """
    results = []
    for item in items:
        if cancellation is not None and cancellation.is_set():
            results.append(fallback(item) if fallback else item)
            continue
        try:
            results.append(enrich(item))
        except RequestCancelled:
            results.append(fallback(item) if fallback else item)
        except recoverable as e:
            logger.warning(f"[{source_name}] Could not load details, using basic data: {e}")
            results.append(fallback(item) if fallback else item)
    return results
