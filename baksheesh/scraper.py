"""Scraper for the ipaidabribe.com "paid" reports listing.

Each listing page shows ten reports. For every report we keep three fields:
the amount paid, what it was paid for, and the department it was paid to.
The fields are queried independently with CSS selectors and paired up by
position.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from baksheesh.common.amount import normalize_amount
from baksheesh.common.checked_html import CheckedHtmlElement
from baksheesh.common.data_models import BribeReport
from baksheesh.common.exceptions import ShapeMismatchException
from baksheesh.data_types import (
    BaseScraper,
    ExtractedColumns,
    MismatchPolicy,
    Response,
    ScraperStatus,
)

logger = logging.getLogger(__name__)

AMOUNT_SELECTOR = "div.paid-amount span"
TRANSACTION_SELECTOR = "div.transaction a"
DEPARTMENT_SELECTOR = "div.name a"


def extract(html: str, request_url: str = "") -> ExtractedColumns:
    """Pull the raw amount, transaction and department text from a page.

    Text is kept verbatim, embedded whitespace and carriage returns included.
    A page with no reports on it gives three empty columns.
    """
    tree = CheckedHtmlElement.from_string(html, request_url)
    return ExtractedColumns(
        amounts=tree.checked_css_text(AMOUNT_SELECTOR, "amounts", min_count=0),
        transactions=tree.checked_css_text(
            TRANSACTION_SELECTOR, "transactions", min_count=0
        ),
        departments=tree.checked_css_text(
            DEPARTMENT_SELECTOR, "departments", min_count=0
        ),
    )


def build_records(
    columns: ExtractedColumns,
    policy: MismatchPolicy = MismatchPolicy.RAISE,
    request_url: str = "",
    strict_amounts: bool = False,
) -> list[BribeReport]:
    """Zip extracted columns into BribeReport rows.

    Args:
        columns: Output of extract().
        policy: What to do if the columns differ in length.
        request_url: Page the columns came from, for error context.
        strict_amounts: Raise on unparseable amounts instead of storing None.

    Raises:
        ShapeMismatchException: If the columns differ in length and policy
            is RAISE.
        AmountParseException: If strict_amounts is set and an amount
            can't be parsed.
    """
    if not columns.aligned:
        match policy:
            case MismatchPolicy.RAISE:
                raise ShapeMismatchException(columns.counts(), request_url)
            case MismatchPolicy.TRUNCATE:
                logger.warning(
                    "Column lengths differ on %s (%s); keeping %d rows",
                    request_url or "<unknown page>",
                    columns.counts(),
                    min(columns.counts().values()),
                )

    return [
        BribeReport(
            amount=normalize_amount(
                amount, strict=strict_amounts, request_url=request_url
            ),
            transaction=transaction,
            department=department,
        )
        for amount, transaction, department in zip(
            columns.amounts, columns.transactions, columns.departments
        )
    ]


class BribeListingScraper(BaseScraper[BribeReport]):
    """Scraper for ipaidabribe.com's "I paid a bribe" listing.

    The first page is the bare listing URL. Later pages take a ``?page=``
    offset that counts reports, not pages, so the offsets go up in tens.
    """

    listing_url: ClassVar[str] = "http://www.ipaidabribe.com/reports/paid"
    page_base_url: ClassVar[str] = (
        "http://www.ipaidabribe.com/reports/paid?page="
    )
    page_offsets: ClassVar[tuple[int, ...]] = (0, 10, 20, 30, 40)
    msec_between_pages: ClassVar[int] = 2000

    status: ClassVar[ScraperStatus] = ScraperStatus.ACTIVE
    version: ClassVar[str] = "2026-10-16"

    def __init__(
        self,
        listing_url: str | None = None,
        page_base_url: str | None = None,
        page_offsets: tuple[int, ...] | list[int] | None = None,
        mismatch_policy: MismatchPolicy = MismatchPolicy.RAISE,
        strict_amounts: bool = False,
    ) -> None:
        """Initialize the scraper.

        Args:
            listing_url: Override for the first page's URL.
            page_base_url: Override for the prefix of later pages.
            page_offsets: Override for the offsets to fetch.
            mismatch_policy: What to do when a page's columns differ in length.
            strict_amounts: Raise on unparseable amounts instead of storing None.
        """
        super().__init__(listing_url, page_base_url, page_offsets)
        self.mismatch_policy = mismatch_policy
        self.strict_amounts = strict_amounts

    def parse_page(self, response: Response) -> list[BribeReport]:
        columns = extract(response.text, response.url)
        records = build_records(
            columns,
            policy=self.mismatch_policy,
            request_url=response.url,
            strict_amounts=self.strict_amounts,
        )
        logger.debug("Parsed %d records from %s", len(records), response.url)
        return records
