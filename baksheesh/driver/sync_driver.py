"""Synchronous pagination driver.

The driver walks a scraper's pages strictly in order, one at a time:
fetch, parse, record the outcome, pause, next. Every page ends up as either
a PageSuccess or a PageFailure. What a failure does to the rest of the run
is decided by FailurePolicy.

Side effects the loop needs (progress reporting, the pause between pages,
handing records to storage) are injected as callbacks, so the loop itself
can be driven by tests without a network or a clock.
"""

from __future__ import annotations

import copy
import logging
import time
from collections.abc import Callable, Sequence
from typing import Generic, TypeVar

from typing_extensions import assert_never

from baksheesh.common.exceptions import (
    ScraperAssumptionException,
    TransientException,
)
from baksheesh.common.request_manager import (
    DEFAULT_TIMEOUT,
    SyncRequestManager,
)
from baksheesh.data_types import (
    BaseScraper,
    FailurePolicy,
    PageFailure,
    PageOutcome,
    PageRequest,
    PageSuccess,
    ScraperStatus,
)

logger = logging.getLogger(__name__)

ScraperReturnDatatype = TypeVar("ScraperReturnDatatype")


def log_page_error(failure: PageFailure) -> None:
    """Default on_page_error callback: log the failure and keep going."""
    logger.error(
        "Page at offset %d (%s) failed: %s",
        failure.offset,
        failure.url,
        failure.error,
    )


class SyncDriver(Generic[ScraperReturnDatatype]):
    """Synchronous driver for running paginated listing scrapers.

    Example usage::

        driver = SyncDriver(BribeListingScraper(), on_progress=print_progress)
        pages = driver.run()
        table = assemble(pages)
    """

    def __init__(
        self,
        scraper: BaseScraper[ScraperReturnDatatype],
        request_manager: SyncRequestManager | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        delay_ms: int | None = None,
        failure_policy: FailurePolicy = FailurePolicy.ABORT,
        sleep: Callable[[float], None] = time.sleep,
        on_progress: Callable[[int, str], None] | None = None,
        on_data: Callable[[ScraperReturnDatatype], None] | None = None,
        on_page_error: Callable[[PageFailure], None] | None = None,
        on_run_start: Callable[[str], None] | None = None,
        on_run_complete: Callable[[str, str, Exception | None], None]
        | None = None,
    ) -> None:
        """Initialize the driver.

        Args:
            scraper: Scraper that knows the pages and how to parse them.
            request_manager: SyncRequestManager for HTTP. If omitted, the
                driver creates one and closes it when the run ends.
            timeout: Request timeout in seconds for a driver-owned manager.
            delay_ms: Pause between consecutive pages. Defaults to the
                scraper's msec_between_pages.
            failure_policy: ABORT re-raises the first page failure; CONTINUE
                records it and moves on.
            sleep: Called with the pause in seconds between pages.
            on_progress: Called with (offset, url) before each page is fetched.
            on_data: Called with each record as its page is parsed.
            on_page_error: Called with each PageFailure under CONTINUE.
                Defaults to logging the failure.
            on_run_start: Called with the scraper name before the first page.
            on_run_complete: Called with (scraper_name, status, error) when
                the run ends; status is "completed" or "error".
        """
        self.scraper = scraper

        if request_manager is not None:
            self.request_manager = request_manager
            self._owns_request_manager = False
        else:
            self.request_manager = SyncRequestManager(timeout=timeout)
            self._owns_request_manager = True

        self.delay_ms = (
            delay_ms if delay_ms is not None else scraper.msec_between_pages
        )
        self.failure_policy = failure_policy
        self.sleep = sleep
        self.on_progress = on_progress
        self.on_data = on_data
        self.on_page_error = on_page_error or log_page_error
        self.on_run_start = on_run_start
        self.on_run_complete = on_run_complete

        self.outcomes: list[PageOutcome[ScraperReturnDatatype]] = []

    @property
    def failures(self) -> list[PageFailure]:
        return [o for o in self.outcomes if isinstance(o, PageFailure)]

    def process_page(
        self, request: PageRequest
    ) -> PageOutcome[ScraperReturnDatatype]:
        """Fetch and parse one page, capturing scraping errors as a result.

        Only network failures and scraper assumption violations become
        PageFailure; anything else is a bug and propagates.
        """
        try:
            response = self.request_manager.resolve_request(request)
            records = self.scraper.parse_page(response)
        except (TransientException, ScraperAssumptionException) as e:
            return PageFailure(offset=request.offset, url=request.url, error=e)
        return PageSuccess(
            offset=request.offset, url=request.url, records=records
        )

    def scrape_all(self) -> list[PageOutcome[ScraperReturnDatatype]]:
        """Visit every page in order and return one outcome per page.

        Under FailurePolicy.ABORT the first failure is re-raised and no
        outcomes are returned.
        """
        scraper_name = self.scraper.__class__.__name__
        if self.on_run_start:
            self.on_run_start(scraper_name)

        status = "completed"
        error: Exception | None = None
        self.outcomes = []

        try:
            requests = list(self.scraper.page_requests())
            logger.info(
                "Starting %s (version %s, %s): %d pages",
                scraper_name,
                self.scraper.version or "unversioned",
                self.scraper.status.value,
                len(requests),
            )
            if self.scraper.status is ScraperStatus.RETIRED:
                logger.warning(
                    "%s is retired; its site may have changed", scraper_name
                )

            for index, request in enumerate(requests):
                if self.on_progress:
                    self.on_progress(request.offset, request.url)

                outcome = self.process_page(request)
                self.outcomes.append(outcome)

                match outcome:
                    case PageSuccess():
                        if self.on_data:
                            for record in outcome.records:
                                self.on_data(record)
                    case PageFailure():
                        if self.failure_policy is FailurePolicy.ABORT:
                            raise outcome.error
                        self.on_page_error(outcome)
                    case _:
                        assert_never(outcome)

                if index < len(requests) - 1 and self.delay_ms > 0:
                    self.sleep(self.delay_ms / 1000)
        except Exception as e:
            status = "error"
            error = e
            raise
        finally:
            if self._owns_request_manager:
                self.request_manager.close()

            if self.on_run_complete:
                self.on_run_complete(scraper_name, status, error)

        return list(self.outcomes)

    def run(self) -> list[list[ScraperReturnDatatype]]:
        """Scrape every page and return the records of each successful page.

        The outer list is in page order. Failed pages (only possible under
        FailurePolicy.CONTINUE) are left out; see failures for what went wrong.
        """
        return [
            outcome.records
            for outcome in self.scrape_all()
            if isinstance(outcome, PageSuccess)
        ]


def scrape_all(
    scraper: BaseScraper[ScraperReturnDatatype],
    offsets: Sequence[int] | None = None,
    delay_ms: int | None = None,
    **driver_kwargs,
) -> list[list[ScraperReturnDatatype]]:
    """Run a scraper over the given offsets and return per-page records.

    Convenience wrapper around SyncDriver.run(). When offsets is given the
    run uses a copy of the scraper with those offsets; the scraper passed in
    is left as it was.
    """
    if offsets is not None:
        scraper = copy.copy(scraper)
        scraper.page_offsets = tuple(offsets)
    driver = SyncDriver(scraper, delay_ms=delay_ms, **driver_kwargs)
    return driver.run()
