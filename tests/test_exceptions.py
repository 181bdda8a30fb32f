"""Tests for the exception hierarchy."""

import pytest

from baksheesh.common.exceptions import (
    AmountParseException,
    HTMLResponseAssumptionException,
    HTMLStructuralAssumptionException,
    NetworkError,
    RequestFailedException,
    RequestTimeoutException,
    ScraperAssumptionException,
    ShapeMismatchException,
    TransientException,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc_class",
        [HTMLResponseAssumptionException, RequestTimeoutException, RequestFailedException],
    )
    def test_network_failures_are_transient(self, exc_class):
        assert issubclass(exc_class, TransientException)
        assert issubclass(exc_class, NetworkError)

    @pytest.mark.parametrize(
        "exc_class",
        [HTMLStructuralAssumptionException, ShapeMismatchException, AmountParseException],
    )
    def test_parsing_failures_are_assumptions(self, exc_class):
        assert issubclass(exc_class, ScraperAssumptionException)
        assert not issubclass(exc_class, TransientException)


class TestMessages:
    def test_assumption_message_includes_url_and_context(self):
        exc = ScraperAssumptionException(
            "Something moved", "http://example.test/p", {"selector": "div.x"}
        )

        message = str(exc)
        assert "Something moved" in message
        assert "URL: http://example.test/p" in message
        assert "selector: div.x" in message

    def test_response_exception(self):
        exc = HTMLResponseAssumptionException(
            status_code=503, expected_codes=[200], url="http://example.test/p"
        )

        assert exc.status_code == 503
        assert str(exc) == "HTTP 503 from http://example.test/p (expected one of: 200)"

    def test_timeout_exception(self):
        exc = RequestTimeoutException(url="http://example.test/slow", timeout_seconds=1.5)

        assert "timed out after 1.5s" in str(exc)

    def test_request_failed_exception(self):
        exc = RequestFailedException(url="http://example.test/", reason="refused")

        assert exc.reason == "refused"
        assert str(exc) == "Request to http://example.test/ failed: refused"

    def test_shape_mismatch_message(self):
        exc = ShapeMismatchException(
            {"amounts": 10, "transactions": 10, "departments": 9}, "http://example.test/p"
        )

        assert "amounts=10, transactions=10, departments=9" in str(exc)
        assert exc.context == {"counts": exc.counts}
