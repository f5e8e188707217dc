"""
Domain service: log returns of a closing-price series and their summary statistics.
Zero external dependencies. Pure functions over plain float sequences, no I/O.

Precondition for every function: all prices are strictly positive. This is
not checked here; math.log raises ValueError on non-positive input.
"""

import math
from typing import Sequence

from src.domain.errors import EmptyDataError


def log_returns(prices: Sequence[float]) -> list[float]:
    """Return the log returns of *prices*, one per price.

    The first element has no preceding price and is kept at ln(prices[0]),
    i.e. the return against an implicit baseline of 1. Every later element i
    is ln(prices[i]) - ln(prices[i - 1]). Callers needing true period returns
    must treat element 0 separately.

    Raises:
        EmptyDataError: if *prices* is empty.
    """
    if not prices:
        raise EmptyDataError("Price series cannot be empty.")

    returns = [math.log(prices[0])]
    for previous, current in zip(prices, prices[1:]):
        returns.append(math.log(current) - math.log(previous))
    return returns


def mean(prices: Sequence[float]) -> float:
    """Arithmetic mean of the log returns of *prices*.

    Raises:
        EmptyDataError: if *prices* is empty.
    """
    returns = log_returns(prices)
    return sum(returns) / len(returns)


def standard_deviation(prices: Sequence[float]) -> float:
    """Population standard deviation of the log returns of *prices*.

    SQRT(SUM((r - mean)^2) / N), with N the number of returns (not N - 1).

    Raises:
        EmptyDataError: if *prices* is empty.
    """
    returns = log_returns(prices)
    average = sum(returns) / len(returns)
    sum_of_squares = sum((r - average) ** 2 for r in returns)
    return math.sqrt(sum_of_squares / len(returns))
