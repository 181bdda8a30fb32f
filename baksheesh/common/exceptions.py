"""Exception types for scraper errors.

Two families live here. Assumption exceptions mean the page or its data no
longer looks the way the scraper expects; the scraper code needs attention.
Transient exceptions mean the network let us down; the same request might
succeed later, but nothing here retries it.
"""

from typing import Any


class ScraperAssumptionException(Exception):
    """Base class for scraper assumption violations.

    Scrapers make assumptions about page structure and data formats. When
    one of them breaks, they raise a subclass of this exception with enough
    context to diagnose the issue.
    """

    def __init__(
        self,
        message: str,
        request_url: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable description of the assumption violation.
            request_url: The URL of the page that triggered this error.
            context: Optional dict of additional context (selector, counts, etc).
        """
        self.message = message
        self.request_url = request_url
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        parts.append(f"URL: {self.request_url}")

        if self.context:
            parts.append("Context:")
            for key, value in self.context.items():
                parts.append(f"  {key}: {value}")

        return "\n".join(parts)


class HTMLStructuralAssumptionException(ScraperAssumptionException):
    """Raised when a CSS selector matches an unexpected number of nodes.

    Attributes:
        selector: The CSS selector that was used.
        description: What the selector was supposed to find.
        expected_min: Minimum number of nodes expected.
        expected_max: Maximum number of nodes expected (None = unlimited).
        actual_count: Number of nodes actually matched.
    """

    def __init__(
        self,
        selector: str,
        description: str,
        expected_min: int,
        expected_max: int | None,
        actual_count: int,
        request_url: str,
    ) -> None:
        self.selector = selector
        self.description = description
        self.expected_min = expected_min
        self.expected_max = expected_max
        self.actual_count = actual_count

        if expected_max is None:
            expected_str = f"at least {expected_min}"
        elif expected_min == expected_max:
            expected_str = f"exactly {expected_min}"
        else:
            expected_str = f"between {expected_min} and {expected_max}"

        message = (
            f"HTML structure mismatch: Expected {expected_str} "
            f"elements for '{description}', but found {actual_count}"
        )

        context = {
            "selector": selector,
            "expected_min": expected_min,
            "expected_max": expected_max
            if expected_max is not None
            else "unlimited",
            "actual_count": actual_count,
        }

        super().__init__(message, request_url, context)


class ShapeMismatchException(ScraperAssumptionException):
    """Raised when the per-field columns of a listing page differ in length.

    Amounts, transactions and departments are queried independently and
    paired up by position. If the columns are not the same length the
    pairing is meaningless past the shortest one.

    Attributes:
        counts: Mapping of column name to the number of values extracted.
    """

    def __init__(self, counts: dict[str, int], request_url: str) -> None:
        self.counts = dict(counts)
        summary = ", ".join(f"{name}={n}" for name, n in self.counts.items())
        super().__init__(
            f"Extracted columns have different lengths: {summary}",
            request_url,
            {"counts": self.counts},
        )


class AmountParseException(ScraperAssumptionException):
    """Raised by strict amount normalization when the text is not a number.

    Attributes:
        raw: The raw amount text as scraped.
        cleaned: The text left after prefix, suffix and comma removal.
    """

    def __init__(self, raw: str, cleaned: str, request_url: str = "") -> None:
        self.raw = raw
        self.cleaned = cleaned
        super().__init__(
            f"Could not parse amount {cleaned!r}",
            request_url,
            {"raw": repr(raw)},
        )


class TransientException(Exception):
    """Base class for network failures while fetching a page.

    Connection errors, timeouts and error status codes all land here. The
    driver decides what a failure means for the rest of the run; nothing
    retries.
    """

    pass


# The name used for fetch failures throughout the docs and the CLI.
NetworkError = TransientException


class HTMLResponseAssumptionException(TransientException):
    """Raised when the HTTP response has a non-success status code.

    Attributes:
        status_code: The actual HTTP status code received.
        expected_codes: List of status codes that were expected.
        url: The URL that returned the unexpected status.
        message: Human-readable error message.
    """

    def __init__(
        self,
        status_code: int,
        expected_codes: list[int],
        url: str,
    ) -> None:
        self.status_code = status_code
        self.expected_codes = expected_codes
        self.url = url

        expected_str = ", ".join(str(code) for code in expected_codes)
        self.message = (
            f"HTTP {status_code} from {url} (expected one of: {expected_str})"
        )
        super().__init__(self.message)


class RequestTimeoutException(TransientException):
    """Raised when a request times out.

    Attributes:
        url: The URL that timed out.
        timeout_seconds: The timeout duration in seconds.
        message: Human-readable error message.
    """

    def __init__(self, url: str, timeout_seconds: float | None) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.message = f"Request to {url} timed out after {timeout_seconds}s"
        super().__init__(self.message)


class RequestFailedException(TransientException):
    """Raised when no response could be obtained at all.

    Covers refused connections, DNS failures and similar transport errors.

    Attributes:
        url: The URL that could not be fetched.
        reason: Description of the underlying transport error.
    """

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        self.message = f"Request to {url} failed: {reason}"
        super().__init__(self.message)
