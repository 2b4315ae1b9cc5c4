"""
Bounded chunk channel between a fetch and the host that consumes its rows.

A RowSource runs its fetch on a producer thread and publishes row batches
into a ChunkChannel. The channel holds at most ``maxsize`` batches, so a slow
consumer stalls the producer instead of letting batches pile up in memory.
"""

import queue
import threading
from typing import Iterator, List, Optional, Sequence

from connectors.core.config import get_settings
from connectors.core.exceptions import DataSourceError
from connectors.core.logging_config import LoggerMixin
from connectors.engine.context import RuntimeContext
from connectors.engine.resolver import EntityResolver

# Blocked producers re-check cancellation at this interval (seconds)
_POLL_INTERVAL = 0.05

_END_OF_STREAM = object()


class ChunkChannel:
    """
    Bounded, single-producer single-consumer channel of row batches.

    Args:
        source_name: Name reported in errors raised to the consumer
        maxsize: Maximum number of batches buffered
        cancellation: Query cancellation signal
    """

    def __init__(self, source_name: str, maxsize: int, cancellation: Optional[threading.Event] = None):
        self.source_name = source_name
        self._queue: "queue.Queue" = queue.Queue(maxsize=maxsize)
        self._cancellation = cancellation or threading.Event()
        self._abandoned = threading.Event()
        self._error: Optional[BaseException] = None
        self.batches_published = 0

    @property
    def is_open(self) -> bool:
        """False once the query is cancelled or the consumer stopped reading."""
        return not (self._cancellation.is_set() or self._abandoned.is_set())

    def publish(self, batch: Sequence[EntityResolver]) -> bool:
        """
        Hand one batch to the consumer, blocking while the channel is full.

        Returns:
            True when the batch was queued, False when the channel closed first
        """
        batch = list(batch)
        while self.is_open:
            try:
                self._queue.put(batch, timeout=_POLL_INTERVAL)
            except queue.Full:
                continue
            self.batches_published += 1
            return True
        return False

    def close(self, error: Optional[BaseException] = None):
        """Mark the end of the stream; ``error`` is re-raised on the consumer side."""
        self._error = error
        while not self._abandoned.is_set():
            try:
                self._queue.put(_END_OF_STREAM, timeout=_POLL_INTERVAL)
                return
            except queue.Full:
                continue

    def __iter__(self) -> Iterator[EntityResolver]:
        try:
            while True:
                batch = self._queue.get()
                if batch is _END_OF_STREAM:
                    if self._error is not None:
                        raise DataSourceError(
                            self.source_name,
                            f"Data source '{self.source_name}' failed: {self._error}"
                        ) from self._error
                    return
                for row in batch:
                    yield row
        finally:
            self._abandoned.set()


class RowSource(LoggerMixin):
    """
    Base class for every table source.

    Subclasses implement collect_chunks(); rows() runs it on a producer
    thread and returns the consumer side of the channel.
    """

    source_name = "rows"

    def __init__(self, context: RuntimeContext, queue_size: Optional[int] = None):
        self.context = context
        self.queue_size = queue_size or get_settings().CHUNK_QUEUE_SIZE

    def rows(self) -> Iterator[EntityResolver]:
        channel = ChunkChannel(self.source_name, self.queue_size, self.context.cancellation)
        producer = threading.Thread(
            target=self._produce,
            args=(channel,),
            name=f"{self.source_name}-fetch",
            daemon=True
        )
        self.logger.debug(f"[{self.source_name}] Starting producer thread (queue size {self.queue_size})")
        producer.start()
        return iter(channel)

    def read_all(self) -> List[EntityResolver]:
        """Drain rows() into a list."""
        return list(self.rows())

    def collect_chunks(self, channel: ChunkChannel):
        raise NotImplementedError

    def _produce(self, channel: ChunkChannel):
        error = None
        try:
            self.collect_chunks(channel)
        except Exception as e:
            error = e
        finally:
            channel.close(error)
