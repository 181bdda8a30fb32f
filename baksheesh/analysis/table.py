"""Combining per-page records into one table."""

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TypeVar

import pandas as pd

from baksheesh.common.data_models import BribeReport

T = TypeVar("T")

COLUMNS = ("amount", "transaction", "department")


def assemble(pages: Iterable[Sequence[T]]) -> list[T]:
    """Concatenate per-page record lists, page order then in-page order.

    No filtering, deduplication or coercion happens here.
    """
    return [record for page in pages for record in page]


def to_frame(records: Sequence[BribeReport]) -> pd.DataFrame:
    """Build a DataFrame with one row per record.

    Missing amounts become NaN; the amount column is always float64, even
    for an empty table.
    """
    return pd.DataFrame(
        {
            "amount": pd.Series(
                [r.amount for r in records], dtype="float64"
            ),
            "transaction": pd.Series(
                [r.transaction for r in records], dtype="object"
            ),
            "department": pd.Series(
                [r.department for r in records], dtype="object"
            ),
        },
        columns=list(COLUMNS),
    )


def write_csv(records: Sequence[BribeReport], path: Path | str) -> Path:
    """Write the combined table to CSV and return the path written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    to_frame(records).to_csv(path, index=False)
    return path
