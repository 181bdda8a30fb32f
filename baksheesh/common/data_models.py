"""Pydantic data models for scraped and derived data."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ScrapedData(BaseModel):
    """Base class for scraped data.

    Instances are frozen: a record is built once during extraction and never
    changes afterwards.
    """

    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dict of the record."""
        return self.model_dump(mode="json")


class BribeReport(ScrapedData):
    """One self-reported bribe from a listing page.

    Attributes:
        amount: Amount paid in INR, or None if the text couldn't be parsed.
        transaction: What the bribe was paid for, verbatim.
        department: The department it was paid to, verbatim.
    """

    amount: float | None
    transaction: str
    department: str


class DepartmentAggregate(BaseModel):
    """Mean amount paid to one department, rounded to one decimal."""

    model_config = ConfigDict(frozen=True)

    department: str
    mean_amount: float
