"""
Shared fixtures for the connector tests.
"""

import json
import threading
from typing import List

import pytest
import requests

from connectors.core.config import reset_settings
from connectors.engine.context import QueryHints, RuntimeContext


class RecordingObserver:
    """Observer that keeps every lifecycle notification."""

    def __init__(self):
        self.events = []

    def report_begin(self, source_name):
        self.events.append(('begin', source_name))

    def report_rows_read(self, source_name, count):
        self.events.append(('rows', source_name, count))

    def report_end(self, source_name, total_count):
        self.events.append(('end', source_name, total_count))

    def count(self, kind: str) -> int:
        return sum(1 for event in self.events if event[0] == kind)

    @property
    def final_total(self):
        ends = [event for event in self.events if event[0] == 'end']
        return ends[-1][2] if ends else None


class RecordingChannel:
    """Channel stand-in that accepts every batch."""

    def __init__(self, accept: bool = True):
        self.batches: List[list] = []
        self.accept = accept

    def publish(self, batch):
        if not self.accept:
            return False
        self.batches.append(list(batch))
        return True

    @property
    def rows(self):
        return [row for batch in self.batches for row in batch]


class PagedFake:
    """
    Page-list function returning pages of the given sizes.

    Items are consecutive integers; calls are recorded as (page, page_size).
    """

    def __init__(self, sizes, on_call=None):
        self.sizes = list(sizes)
        self.calls = []
        self.on_call = on_call

    def __call__(self, page, page_size):
        self.calls.append((page, page_size))
        if self.on_call:
            self.on_call(page, page_size)
        index = len(self.calls) - 1
        size = self.sizes[index] if index < len(self.sizes) else 0
        start = sum(self.sizes[:index])
        return list(range(start, start + size))


def make_response(status_code=200, payload=None, headers=None):
    """Real requests.Response carrying a JSON body."""
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(payload if payload is not None else {}).encode("utf-8")
    response.headers.update(headers or {})
    response.url = "https://api.example.test"
    return response


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Every test starts from default settings without credentials."""
    for name in ("JIRA_URL", "JIRA_USERNAME", "JIRA_API_TOKEN", "JIRA_DEPLOYMENT", "GITHUB_TOKEN"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def make_context(observer):
    def _make(where=None, skip=None, take=None, cancellation=None):
        return RuntimeContext(
            where=where,
            hints=QueryHints(skip=skip, take=take),
            cancellation=cancellation or threading.Event(),
            observer=observer
        )
    return _make
