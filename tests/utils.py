"""Test utilities shared across the suite."""

import socket
from collections.abc import Callable, Mapping
from contextlib import closing
from typing import Any

import httpx

from baksheesh.common.data_models import BribeReport
from baksheesh.common.request_manager import SyncRequestManager


def find_free_port() -> int:
    """Find a free port on localhost."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("", 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


def collect_results() -> tuple[Callable[[Any], None], list[Any]]:
    """Create a callback that collects results in a list.

    Example:
        callback, results = collect_results()
        driver = SyncDriver(scraper, on_data=callback)
        driver.run()
        assert len(results) > 0
    """
    results: list[Any] = []

    def callback(data: Any) -> None:
        results.append(data)

    return callback, results


class RecordingSleep:
    """Stand-in for time.sleep that records the requested pauses."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def static_pages(
    pages: Mapping[str, str | int],
) -> tuple[SyncRequestManager, list[str]]:
    """Build a request manager that serves canned pages without a network.

    Args:
        pages: URL to page HTML, or to an HTTP status code to answer with.
            Unknown URLs get a 404.

    Returns:
        A tuple of (request_manager, fetched_urls). fetched_urls lists
        every URL requested, in order.
    """
    fetched: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        fetched.append(url)
        page = pages.get(url, 404)
        if isinstance(page, int):
            return httpx.Response(page, text="error")
        return httpx.Response(200, text=page)

    manager = SyncRequestManager(transport=httpx.MockTransport(handler))
    return manager, fetched


def report(amount: float | None, department: str, transaction: str = "x") -> BribeReport:
    return BribeReport(amount=amount, transaction=transaction, department=department)
