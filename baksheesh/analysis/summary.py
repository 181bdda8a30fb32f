"""Descriptive statistics over the combined table.

Three views of the amount column:

- an overall summary (count, mean, standard deviation, five-number summary),
- a ranking of departments by mean amount,
- a histogram with log-spaced bins, ready for plotting.

Missing amounts are excluded everywhere, never imputed. Nothing here
mutates its input, so summarize() gives equal results for equal tables.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from typing import Any

import numpy as np
import pandas as pd

from baksheesh.analysis.table import to_frame
from baksheesh.common.data_models import BribeReport, DepartmentAggregate

DEFAULT_BINS = 20


def _optional(value: Any) -> float | None:
    value = float(value)
    return None if math.isnan(value) else value


@dataclass(frozen=True)
class AmountStats:
    """Overall statistics of the amount column.

    For an empty table count is 0 and every other field is None. Quartiles
    use linear interpolation between data points.
    """

    count: int = 0
    mean: float | None = None
    std: float | None = None
    min: float | None = None
    q1: float | None = None
    median: float | None = None
    q3: float | None = None
    max: float | None = None


@dataclass(frozen=True)
class AmountHistogram:
    """Bin edges and counts; len(edges) == len(counts) + 1 unless empty."""

    edges: tuple[float, ...] = ()
    counts: tuple[int, ...] = ()


@dataclass(frozen=True)
class Summary:
    overall: AmountStats
    by_department: list[DepartmentAggregate] = field(default_factory=list)
    histogram: AmountHistogram = field(default_factory=AmountHistogram)

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall": asdict(self.overall),
            "by_department": [d.model_dump() for d in self.by_department],
            "histogram": asdict(self.histogram),
        }


def amount_stats(amounts: pd.Series) -> AmountStats:
    """Count, mean, std and five-number summary of the non-null amounts."""
    values = amounts.dropna()
    if values.empty:
        return AmountStats()
    return AmountStats(
        count=int(values.count()),
        mean=_optional(values.mean()),
        std=_optional(values.std()),
        min=_optional(values.min()),
        q1=_optional(values.quantile(0.25)),
        median=_optional(values.median()),
        q3=_optional(values.quantile(0.75)),
        max=_optional(values.max()),
    )


def rank_departments(frame: pd.DataFrame) -> list[DepartmentAggregate]:
    """Mean amount per department, highest first.

    Departments are grouped by exact string equality. Means are rounded to
    one decimal before sorting; the sort is stable, so departments with the
    same rounded mean stay in order of first appearance. A department with
    no parseable amounts has no mean and is left out.
    """
    known = frame.dropna(subset=["amount"])
    means = (
        known.groupby("department", sort=False)["amount"]
        .mean()
        .round(1)
        .sort_values(ascending=False, kind="stable")
    )
    return [
        DepartmentAggregate(department=str(department), mean_amount=float(mean))
        for department, mean in means.items()
    ]


def amount_histogram(
    amounts: pd.Series, bins: int = DEFAULT_BINS
) -> AmountHistogram:
    """Histogram of amounts over log10-spaced bins.

    Bins span the smallest to the largest positive amount. Zero and negative
    amounts have no logarithm and are left out, as are missing ones.

    Raises:
        ValueError: If bins is less than 1.
    """
    if bins < 1:
        raise ValueError(f"bins must be at least 1, got {bins}")

    values = amounts.dropna()
    values = values[values > 0].to_numpy(dtype="float64")
    if values.size == 0:
        return AmountHistogram()

    low, high = float(values.min()), float(values.max())
    if low == high:
        return AmountHistogram(edges=(low, high), counts=(int(values.size),))

    edges = np.logspace(np.log10(low), np.log10(high), bins + 1)
    # logspace can miss the endpoints by an ulp, which would drop the extremes.
    edges[0], edges[-1] = low, high
    counts, edges = np.histogram(values, bins=edges)
    return AmountHistogram(
        edges=tuple(float(e) for e in edges),
        counts=tuple(int(c) for c in counts),
    )


def summarize(
    records: Sequence[BribeReport], bins: int = DEFAULT_BINS
) -> Summary:
    """Compute the overall stats, department ranking and histogram."""
    frame = to_frame(records)
    return Summary(
        overall=amount_stats(frame["amount"]),
        by_department=rank_departments(frame),
        histogram=amount_histogram(frame["amount"], bins),
    )
