"""Amount text normalization.

Listing pages render the amount as ``Paid INR 12,000`` followed by a
carriage return and the report's age ("2 days ago" and friends). This module
turns that text into a number.
"""

import logging
import math
import re
from typing import Literal, overload

from baksheesh.common.exceptions import AmountParseException

logger = logging.getLogger(__name__)

AMOUNT_PREFIX = "Paid INR "

# Everything from the first carriage return onwards is metadata.
_TRAILER = re.compile(r"\r.*", re.DOTALL)

# Plain base-10 integers and decimals. float() alone would also take
# "1_000", "1e3", "nan" and "inf".
_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)", re.ASCII)


def clean_amount_text(raw: str) -> str:
    """Strip the currency prefix, the trailer and thousands separators."""
    text = raw.replace(AMOUNT_PREFIX, "", 1)
    text = _TRAILER.sub("", text, count=1)
    return text.replace(",", "")


@overload
def normalize_amount(
    raw: str, strict: Literal[True], request_url: str = ""
) -> float: ...


@overload
def normalize_amount(
    raw: str, strict: bool = False, request_url: str = ""
) -> float | None: ...


def normalize_amount(
    raw: str, strict: bool = False, request_url: str = ""
) -> float | None:
    """Convert raw amount text to a number.

    Args:
        raw: Amount text exactly as scraped.
        strict: Raise instead of returning None when the text isn't a number.
        request_url: Page the text came from, for log and error context.

    Returns:
        The amount, or None if it could not be parsed and strict is False.

    Raises:
        AmountParseException: If strict is True and parsing fails.

    Example::

        >>> normalize_amount("Paid INR 12,000\\r\\n2 days ago")
        12000.0
    """
    cleaned = clean_amount_text(raw)
    if _NUMBER.fullmatch(cleaned.strip()):
        value = float(cleaned)
        if math.isfinite(value):
            return value

    if strict:
        raise AmountParseException(raw, cleaned, request_url)
    logger.warning(
        "Unparseable amount %r on %s, recording as missing",
        raw,
        request_url or "<unknown page>",
    )
    return None
