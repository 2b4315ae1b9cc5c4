"""
Tests for the paginated fetch loop.
"""

import threading

import pytest

from connectors.core.exceptions import RequestCancelled
from connectors.engine.context import QueryHints
from connectors.pushdown.paginator import FetchCursor, FetchState, PageFetcher, enrich_each
from tests.conftest import PagedFake, RecordingChannel


def identity(item):
    return item


def make_fetcher(fetch_page, context, page_size=100, prepare_page=None):
    return PageFetcher("test_source", fetch_page, identity, page_size, context, prepare_page=prepare_page)


class TestFetchCursor:
    """Test skip/take mapping onto pages"""

    def test_defaults(self):
        cursor = FetchCursor.from_hints(QueryHints(), 50)
        assert cursor.page == 1
        assert cursor.budget is None
        assert cursor.remaining is None

    def test_skip_maps_to_page_boundary(self):
        cursor = FetchCursor.from_hints(QueryHints(skip=250), 100)
        assert cursor.page == 3

    def test_take_is_the_exact_budget(self):
        cursor = FetchCursor.from_hints(QueryHints(skip=250, take=10), 100)
        assert cursor.budget == 10
        assert cursor.offset == 50

    def test_zero_take_stays_zero(self):
        cursor = FetchCursor.from_hints(QueryHints(skip=250, take=0), 100)
        assert cursor.budget == 0

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            FetchCursor.from_hints(QueryHints(), 0)


class TestTermination:
    """Test the stop conditions of the page loop"""

    def test_short_page_stops(self, make_context):
        fake = PagedFake([100, 100, 37])
        channel = RecordingChannel()

        cursor = make_fetcher(fake, make_context()).run(channel)

        assert len(fake.calls) == 3
        assert len(channel.rows) == 237
        assert cursor.state is FetchState.DONE

    def test_empty_page_stops(self, make_context):
        fake = PagedFake([100, 100, 100, 0])
        channel = RecordingChannel()

        make_fetcher(fake, make_context()).run(channel)

        assert len(fake.calls) == 4
        assert len(channel.rows) == 300
        assert [page for page, _ in fake.calls] == [1, 2, 3, 4]

    def test_each_page_is_one_batch(self, make_context):
        channel = RecordingChannel()
        make_fetcher(PagedFake([100, 20]), make_context()).run(channel)
        assert [len(batch) for batch in channel.batches] == [100, 20]

    def test_take_limits_rows_and_calls(self, make_context):
        fake = PagedFake([100, 100])
        channel = RecordingChannel()

        cursor = make_fetcher(fake, make_context(take=5)).run(channel)

        assert len(fake.calls) == 1
        assert channel.rows == [0, 1, 2, 3, 4]
        assert cursor.state is FetchState.DONE

    def test_take_spanning_pages(self, make_context):
        fake = PagedFake([10, 10, 10])
        channel = RecordingChannel()

        make_fetcher(fake, make_context(take=15), page_size=10).run(channel)

        assert len(fake.calls) == 2
        assert len(channel.rows) == 15

    def test_take_zero_makes_no_call(self, make_context, observer):
        fake = PagedFake([100])
        cursor = make_fetcher(fake, make_context(take=0)).run(RecordingChannel())

        assert fake.calls == []
        assert cursor.state is FetchState.DONE
        assert observer.count('begin') == 1
        assert observer.count('end') == 1

    def test_skip_starts_at_page(self, make_context):
        fake = PagedFake([100])
        make_fetcher(fake, make_context(skip=250)).run(RecordingChannel())
        assert fake.calls[0] == (3, 100)

    def test_skip_and_take_start_at_the_offset(self, make_context):
        fake = PagedFake([100, 100, 100])
        channel = RecordingChannel()

        make_fetcher(fake, make_context(skip=250, take=10)).run(channel)

        assert len(fake.calls) == 1
        # PagedFake numbers rows from 0 across the pages it was asked for
        assert channel.rows == list(range(50, 60))

    def test_skip_and_small_take_publish_take_rows(self, make_context):
        channel = RecordingChannel()
        make_fetcher(PagedFake([100, 100]), make_context(skip=250, take=5)).run(channel)
        assert len(channel.rows) == 5

    def test_skip_remainder_spans_into_next_page(self, make_context):
        fake = PagedFake([10, 10, 10])
        channel = RecordingChannel()

        make_fetcher(fake, make_context(skip=7, take=5), page_size=10).run(channel)

        assert [page for page, _ in fake.calls] == [1, 2]
        assert channel.rows == [7, 8, 9, 10, 11]

    def test_skip_past_short_page_publishes_nothing(self, make_context, observer):
        fake = PagedFake([5])
        channel = RecordingChannel()

        make_fetcher(fake, make_context(skip=8), page_size=10).run(channel)

        assert len(fake.calls) == 1
        assert channel.batches == []
        assert observer.final_total == 0


class TestCancellation:
    """Test that cancellation stops further page calls"""

    def test_cancel_before_start(self, make_context):
        cancellation = threading.Event()
        cancellation.set()
        fake = PagedFake([100])

        cursor = make_fetcher(fake, make_context(cancellation=cancellation)).run(RecordingChannel())

        assert fake.calls == []
        assert cursor.state is FetchState.CANCELLED

    def test_cancel_after_first_page(self, make_context):
        cancellation = threading.Event()
        fake = PagedFake([100, 100, 100], on_call=lambda page, size: cancellation.set())
        channel = RecordingChannel()

        cursor = make_fetcher(fake, make_context(cancellation=cancellation)).run(channel)

        assert len(fake.calls) == 1
        assert len(channel.rows) == 100
        assert cursor.state is FetchState.CANCELLED

    def test_closed_channel_cancels(self, make_context):
        fake = PagedFake([100, 100])
        cursor = make_fetcher(fake, make_context()).run(RecordingChannel(accept=False))

        assert len(fake.calls) == 1
        assert cursor.state is FetchState.CANCELLED

    def test_request_cancelled_ends_quietly(self, make_context, observer):
        def fetch_page(page, page_size):
            raise RequestCancelled("cancelled")

        cursor = make_fetcher(fetch_page, make_context()).run(RecordingChannel())

        assert cursor.state is FetchState.CANCELLED
        assert observer.count('end') == 1


class TestLifecycle:
    """Test begin/rows-read/end reporting"""

    def test_begin_and_end_once(self, make_context, observer):
        make_fetcher(PagedFake([100, 100, 37]), make_context()).run(RecordingChannel())

        assert observer.count('begin') == 1
        assert observer.count('end') == 1
        assert observer.final_total == 237
        assert [event[2] for event in observer.events if event[0] == 'rows'] == [100, 200, 237]

    def test_failure_propagates_unchanged(self, make_context, observer):
        error = RuntimeError("boom")

        def fail_on_second_page(page, page_size):
            if page == 2:
                raise error

        fake = PagedFake([100, 100], on_call=fail_on_second_page)
        channel = RecordingChannel()

        with pytest.raises(RuntimeError) as excinfo:
            make_fetcher(fake, make_context()).run(channel)

        assert excinfo.value is error
        assert len(channel.rows) == 100
        assert observer.count('begin') == 1
        assert observer.count('end') == 1
        assert observer.final_total == 100

    def test_explicit_hints_override_context(self, make_context):
        fake = PagedFake([100, 100])
        channel = RecordingChannel()

        make_fetcher(fake, make_context(take=500)).run(channel, hints=QueryHints(take=3))

        assert len(channel.rows) == 3


class TestPreparePage:
    """Test the per-page enrichment hook"""

    def test_prepare_sees_truncated_page(self, make_context):
        seen = []

        def prepare(items):
            seen.append(len(items))
            return [item * 10 for item in items]

        channel = RecordingChannel()
        make_fetcher(PagedFake([100]), make_context(take=3), prepare_page=prepare).run(channel)

        assert seen == [3]
        assert channel.rows == [0, 10, 20]


class TestEnrichEach:
    """Test per-item enrichment with fallback"""

    def test_one_failure_in_a_page_keeps_every_item(self):
        def enrich(item):
            if item == 3:
                raise ValueError("detail call failed")
            return ("detailed", item)

        results = enrich_each(range(5), enrich, "test_source", (ValueError,), fallback=lambda item: ("basic", item))

        assert len(results) == 5
        assert [item for _, item in results] == [0, 1, 2, 3, 4]
        assert [kind for kind, _ in results].count("detailed") == 4
        assert results[3] == ("basic", 3)

    def test_failures_fall_back_to_basic_item(self):
        def enrich(item):
            if item % 2:
                raise ValueError("detail call failed")
            return f"detailed-{item}"

        results = enrich_each(range(4), enrich, "test_source", (ValueError,), fallback=lambda item: f"basic-{item}")

        assert results == ["detailed-0", "basic-1", "detailed-2", "basic-3"]

    def test_every_enrichment_failing_keeps_all_items(self):
        def enrich(item):
            raise ValueError("down")

        assert enrich_each([1, 2, 3], enrich, "test_source", (ValueError,)) == [1, 2, 3]

    def test_unrecoverable_error_propagates(self):
        def enrich(item):
            raise KeyError("bug")

        with pytest.raises(KeyError):
            enrich_each([1], enrich, "test_source", (ValueError,))

    def test_cancellation_skips_enrichment(self):
        cancellation = threading.Event()
        cancellation.set()
        calls = []

        results = enrich_each([1, 2], calls.append, "test_source", (ValueError,), cancellation=cancellation)

        assert calls == []
        assert results == [1, 2]

    def test_request_cancelled_uses_fallback(self):
        def enrich(item):
            raise RequestCancelled("cancelled")

        assert enrich_each([1], enrich, "test_source", (ValueError,), fallback=str) == ["1"]
