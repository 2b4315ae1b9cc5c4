"""
Shared bases for table sources.
"""

from typing import Any, List, Optional

from connectors.core.exceptions import RequestCancelled
from connectors.engine.chunks import ChunkChannel, RowSource
from connectors.engine.context import RuntimeContext
from connectors.engine.resolver import ColumnMap, EntityResolver
from connectors.pushdown.paginator import PageFetcher


class PagedRowSource(RowSource):
    """
    Row source backed by a page-based list API.

    Subclasses set ``source_name`` and ``column_map`` and implement
    fetch_page(); prepare_page() may be overridden for per-item enrichment.
    """

    column_map: ColumnMap

    def __init__(self, context: RuntimeContext, page_size: int, queue_size: Optional[int] = None):
        super().__init__(context, queue_size)
        self.page_size = page_size

    def fetch_page(self, page: int, page_size: int) -> List[Any]:
        raise NotImplementedError

    def prepare_page(self, items: List[Any]) -> List[Any]:
        return items

    def to_row(self, entity: Any) -> EntityResolver:
        return EntityResolver(entity, self.column_map)

    def collect_chunks(self, channel: ChunkChannel):
        fetcher = PageFetcher(
            self.source_name,
            self.fetch_page,
            self.to_row,
            self.page_size,
            self.context,
            prepare_page=self.prepare_page
        )
        fetcher.run(channel)


class ListRowSource(RowSource):
    """
    Row source for APIs answered in one call (or one client-side loop).

    The whole list is published as a single batch, cut to the rows from
    ``skip`` up to ``skip + take`` the same way the page loop cuts its stream.
    """

    column_map: ColumnMap

    def fetch_all(self) -> List[Any]:
        raise NotImplementedError

    def collect_chunks(self, channel: ChunkChannel):
        with self.context.report_fetch(self.source_name) as counter:
            if self.context.is_cancelled:
                return

            try:
                entities = self.fetch_all()
            except RequestCancelled:
                self.logger.info(f"[{self.source_name}] Fetch cancelled")
                return
            except Exception as e:
                self.logger.error(f"Error occurred while collecting {self.source_name} data: {e}")
                raise

            hints = self.context.hints
            start = hints.skip or 0
            stop = start + hints.take if hints.take is not None else None
            entities = entities[start:stop]

            rows = [EntityResolver(entity, self.column_map) for entity in entities]
            if rows and channel.publish(rows):
                counter.add(len(rows))
