"""Checked HTML element wrapper for CSS querying.

This module provides CheckedHtmlElement, a wrapper around
lxml.html.HtmlElement that validates selector results against expected
counts, so a listing page whose markup has changed fails loudly instead of
quietly producing nothing.
"""

from __future__ import annotations

from lxml import etree, html
from lxml.html import HtmlElement

from baksheesh.common.exceptions import (
    HTMLStructuralAssumptionException,
    ScraperAssumptionException,
)


class CheckedHtmlElement:
    """Wrapper around HtmlElement with validated CSS selectors.

    checked_css() raises HTMLStructuralAssumptionException when the number
    of matches falls outside [min_count, max_count]. Every other attribute
    is delegated to the wrapped element.
    """

    def __init__(self, element: HtmlElement, request_url: str = "") -> None:
        """Initialize the checked element wrapper.

        Args:
            element: The lxml HtmlElement to wrap.
            request_url: Optional URL for error context.
        """
        self._element = element
        self._request_url = request_url

    @classmethod
    def from_string(
        cls, text: str, request_url: str = ""
    ) -> CheckedHtmlElement:
        """Parse an HTML document and wrap its root element.

        Raises:
            ScraperAssumptionException: If the document is empty or unparseable,
                or is a str carrying an XML encoding declaration.
        """
        try:
            root = html.fromstring(text)
        except (etree.ParserError, ValueError) as e:
            raise ScraperAssumptionException(
                f"Could not parse page as HTML: {e}", request_url
            ) from e
        return cls(root, request_url)

    def checked_css(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[CheckedHtmlElement]:
        """Execute CSS selector query with count validation.

        Args:
            selector: CSS selector expression.
            description: Human-readable description of what's being selected.
            min_count: Minimum number of elements expected (default: 1).
            max_count: Maximum number of elements expected (None = unlimited).

        Returns:
            List of matching CheckedHtmlElements in document order.

        Raises:
            HTMLStructuralAssumptionException: If count doesn't match
                expectations, or the selector itself is invalid.

        Example::

            tree = CheckedHtmlElement.from_string(page_html)
            amounts = tree.checked_css("div.paid-amount span", "amounts", min_count=0)
        """
        try:
            results = self._element.cssselect(selector)
        except Exception as e:
            raise HTMLStructuralAssumptionException(
                selector=selector,
                description=description,
                expected_min=min_count,
                expected_max=max_count,
                actual_count=0,
                request_url=self._request_url,
            ) from e

        actual_count = len(results)
        if actual_count < min_count or (
            max_count is not None and actual_count > max_count
        ):
            raise HTMLStructuralAssumptionException(
                selector=selector,
                description=description,
                expected_min=min_count,
                expected_max=max_count,
                actual_count=actual_count,
                request_url=self._request_url,
            )

        return [
            CheckedHtmlElement(result, self._request_url) for result in results
        ]

    def checked_css_text(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[str]:
        """Like checked_css(), but return each match's verbatim text content."""
        return [
            element.text_content()
            for element in self.checked_css(
                selector, description, min_count, max_count
            )
        ]

    def __getattr__(self, name: str):
        """Delegate all other attributes to the wrapped element."""
        return getattr(self._element, name)
