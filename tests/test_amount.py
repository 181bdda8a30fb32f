"""Tests for amount text normalization."""

import logging

import pytest

from baksheesh.common.amount import clean_amount_text, normalize_amount
from baksheesh.common.exceptions import (
    AmountParseException,
    ScraperAssumptionException,
)


class TestNormalizeAmount:
    def test_strips_prefix_trailer_and_commas(self):
        """Prefix, everything from the CR on, and commas shall be removed."""
        assert normalize_amount("Paid INR 12,000\r\n2 days ago") == 12000

    def test_without_trailer(self):
        assert normalize_amount("Paid INR 500") == 500

    def test_without_prefix(self):
        """A missing prefix shall be a no-op, not an error."""
        assert normalize_amount("7,250\r\nyesterday") == 7250

    def test_only_first_prefix_removed(self):
        """Only the first occurrence of the prefix shall be removed."""
        assert normalize_amount("Paid INR Paid INR 5") is None

    def test_trailer_with_several_carriage_returns(self):
        """Everything after the first CR shall go, including later CRs."""
        assert normalize_amount("Paid INR 1,00,000\r\n3 hours ago\r\nmore") == 100000

    def test_decimal_amount(self):
        assert normalize_amount("Paid INR 1,234.50") == 1234.5

    def test_surrounding_whitespace_tolerated(self):
        assert normalize_amount("Paid INR  300 \r\n") == 300

    @pytest.mark.parametrize(
        "raw", ["Paid INR 1_000", "Paid INR 1e3", "Paid INR 0x10", "Paid INR 1 000"]
    )
    def test_only_plain_decimal_notation(self, raw):
        """Underscores, exponents and other float() extras are not amounts."""
        assert normalize_amount(raw) is None

    def test_huge_amount_is_not_infinite(self):
        assert normalize_amount("Paid INR " + "9" * 400) is None

    def test_returns_float(self):
        assert isinstance(normalize_amount("Paid INR 500"), float)

    @pytest.mark.parametrize(
        "raw",
        ["Paid INR a lot\r\n1 day ago", "Paid INR ", "", "Paid INR nan", "Paid INR inf"],
    )
    def test_unparseable_becomes_none(self, raw):
        """Unparseable amounts shall become the missing-value sentinel."""
        assert normalize_amount(raw) is None

    def test_unparseable_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="baksheesh.common.amount"):
            normalize_amount("Paid INR lots", request_url="http://example.test/p")

        assert "Unparseable amount" in caplog.text
        assert "http://example.test/p" in caplog.text

    def test_strict_raises(self):
        with pytest.raises(AmountParseException) as exc_info:
            normalize_amount("Paid INR lots\r\nnow", strict=True, request_url="http://x.test/")

        assert exc_info.value.cleaned == "lots"
        assert exc_info.value.raw == "Paid INR lots\r\nnow"
        assert exc_info.value.request_url == "http://x.test/"

    def test_strict_parse_error_is_assumption_exception(self):
        assert issubclass(AmountParseException, ScraperAssumptionException)

    def test_strict_returns_value_when_parseable(self):
        assert normalize_amount("Paid INR 9,999", strict=True) == 9999


class TestCleanAmountText:
    def test_clean_keeps_digits_only_text(self):
        assert clean_amount_text("Paid INR 12,000\r\n2 days ago") == "12000"

    def test_newline_without_cr_is_kept(self):
        """Only a carriage return starts the trailer."""
        assert clean_amount_text("Paid INR 10\nlater") == "10\nlater"
