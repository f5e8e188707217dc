"""
Domain entities for the return-distribution request and its result.
Zero external dependencies. Pure Python dataclasses and enums only.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Union

from src.domain.errors import InvalidIntervalError, InvalidRangeError


class Interval(Enum):
    """Sampling interval of the price series. Closed set."""

    Daily = "Daily"
    Weekly = "Weekly"
    Monthly = "Monthly"

    @classmethod
    def parse(cls, value: Union["Interval", str]) -> "Interval":
        """Resolve *value* (an Interval or its case-insensitive name).

        Raises:
            InvalidIntervalError: if *value* names no known interval.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.name.lower() == value.strip().lower():
                    return member
        raise InvalidIntervalError(f"Invalid interval specified: {value!r}.")

    @classmethod
    def names(cls) -> list[str]:
        return [member.name for member in cls]


@dataclass(frozen=True)
class DateRange:
    from_date: date
    to_date: date

    @classmethod
    def of(cls, from_date: date, to_date: date) -> "DateRange":
        """Build a range, enforcing from_date <= to_date.

        Raises:
            InvalidRangeError: if *from_date* is later than *to_date*.
        """
        if from_date > to_date:
            raise InvalidRangeError("FromDate must be earlier than ToDate.")
        return cls(from_date=from_date, to_date=to_date)


@dataclass(frozen=True)
class DistributionResult:
    from_date: date
    to_date: date
    interval: Interval
    mean: float
    standard_deviation: float
    observations: int
