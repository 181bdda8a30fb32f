"""Data types shared between scrapers and drivers.

The scraper knows what the listing looks like: where it lives, how pages are
numbered and how records are pulled out of the HTML. The driver does the
I/O: it fetches each page, hands the response to the scraper and decides
what a failed page means for the run. The types below are what passes
between the two.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Generic, TypeVar

ScraperReturnType = TypeVar("ScraperReturnType")


class ScraperStatus(Enum):
    """Status of a scraper's development lifecycle.

    Values:
        IN_DEVELOPMENT: Scraper is being built, not ready for production.
        ACTIVE: Scraper is working and maintained.
        RETIRED: Scraper is no longer maintained (site changed, etc.).
    """

    IN_DEVELOPMENT = "in_development"
    ACTIVE = "active"
    RETIRED = "retired"


class MismatchPolicy(Enum):
    """What to do when a page's extracted columns differ in length.

    Values:
        TRUNCATE: Pair values up to the shortest column and drop the rest.
        RAISE: Raise ShapeMismatchException.
    """

    TRUNCATE = "truncate"
    RAISE = "raise"


class FailurePolicy(Enum):
    """What a failed page means for the rest of the run.

    Values:
        ABORT: Re-raise the first failure; nothing is returned.
        CONTINUE: Record the failure and move on to the next page.
    """

    ABORT = "abort"
    CONTINUE = "continue"


@dataclass(frozen=True)
class PageRequest:
    """A single listing page to fetch.

    Attributes:
        offset: Pagination offset this page was built from.
        url: Absolute URL of the page.
    """

    offset: int
    url: str


@dataclass
class Response:
    """HTTP response from fetching a page.

    Modeled after httpx.Response to provide a familiar interface.

    Attributes:
        status_code: HTTP status code (200, 404, etc.).
        headers: Response headers.
        content: Raw response bytes.
        text: Decoded response text.
        url: URL that was requested.
        request: The PageRequest that triggered this response, if any.
    """

    status_code: int
    headers: dict[str, str]
    content: bytes
    text: str
    url: str
    request: PageRequest | None = None


@dataclass(frozen=True)
class ExtractedColumns:
    """Raw text pulled from a listing page, one list per field.

    Values are positionally aligned: index i of each list is assumed to
    describe the same report. Nothing here checks that assumption; see
    MismatchPolicy.
    """

    amounts: list[str]
    transactions: list[str]
    departments: list[str]

    def counts(self) -> dict[str, int]:
        return {
            "amounts": len(self.amounts),
            "transactions": len(self.transactions),
            "departments": len(self.departments),
        }

    @property
    def aligned(self) -> bool:
        return len(set(self.counts().values())) <= 1


@dataclass(frozen=True)
class PageSuccess(Generic[ScraperReturnType]):
    """A page that was fetched and parsed."""

    offset: int
    url: str
    records: list[ScraperReturnType]

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class PageFailure:
    """A page whose fetch or parse raised."""

    offset: int
    url: str
    error: Exception

    @property
    def ok(self) -> bool:
        return False


PageOutcome = PageSuccess[ScraperReturnType] | PageFailure


class BaseScraper(Generic[ScraperReturnType]):
    """Base class for paginated listing scrapers.

    Subclasses describe where the listing lives and implement parse_page().
    The driver calls page_requests() to learn which pages to fetch, and
    parse_page() once per fetched page.

    Class Attributes:
        listing_url: URL fetched as-is for offset 0.
        page_base_url: Prefix for every later page; the offset is appended.
        page_offsets: Offsets to fetch, in order.
        msec_between_pages: Pause between consecutive page fetches.
        status: Development lifecycle status.
        version: Version string for this scraper (e.g., "2025-01-03").
    """

    listing_url: ClassVar[str] = ""
    page_base_url: ClassVar[str] = ""
    page_offsets: ClassVar[tuple[int, ...]] = (0,)
    msec_between_pages: ClassVar[int] = 0

    status: ClassVar[ScraperStatus] = ScraperStatus.IN_DEVELOPMENT
    version: ClassVar[str] = ""

    def __init__(
        self,
        listing_url: str | None = None,
        page_base_url: str | None = None,
        page_offsets: tuple[int, ...] | list[int] | None = None,
    ) -> None:
        """Initialize the scraper, optionally overriding the class defaults.

        Args:
            listing_url: Override for listing_url.
            page_base_url: Override for page_base_url.
            page_offsets: Override for page_offsets.
        """
        if listing_url is not None:
            self.listing_url = listing_url
        if page_base_url is not None:
            self.page_base_url = page_base_url
        if page_offsets is not None:
            self.page_offsets = tuple(page_offsets)

    def page_url(self, offset: int) -> str:
        """Build the URL for one page of the listing.

        Offset 0 is the bare listing URL; every other offset is
        page_base_url with the offset appended.
        """
        if offset == 0:
            return self.listing_url
        return f"{self.page_base_url}{offset}"

    def page_requests(self) -> Iterator[PageRequest]:
        """Yield one PageRequest per offset, in order."""
        for offset in self.page_offsets:
            yield PageRequest(offset=offset, url=self.page_url(offset))

    def parse_page(self, response: Response) -> list[ScraperReturnType]:
        """Turn one fetched page into records.

        Raises:
            NotImplementedError: Subclasses must implement this.
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement parse_page()"
        )
