"""
Use-case: mean and standard deviation of log returns over a date range.
Depends only on Domain ports, entities and services. No infrastructure imports.
"""

import logging
from datetime import date
from typing import Union

from src.domain.entities.distribution import DateRange, DistributionResult, Interval
from src.domain.errors import EmptyDataError
from src.domain.ports.price_data_port import IPriceDataProvider
from src.domain.services import return_calculator

logger = logging.getLogger(__name__)


class ComputeReturnDistributionUseCase:
    def __init__(self, provider: IPriceDataProvider) -> None:
        self._provider = provider

    def execute(
        self,
        from_date: date,
        to_date: date,
        interval: Union[Interval, str],
    ) -> DistributionResult:
        """Fetch closing prices for the range and summarise their log returns.

        Input is validated before the provider is called, so a rejected request
        never reaches the network.

        Args:
            from_date: First calendar day of the window (inclusive).
            to_date:   Last calendar day of the window (inclusive).
            interval:  Interval member or its name ('Daily', 'Weekly', 'Monthly').

        Raises:
            InvalidRangeError:    if *from_date* is later than *to_date*.
            InvalidIntervalError: if *interval* is not a recognised interval.
            UpstreamError:        propagated from IPriceDataProvider.
            EmptyDataError:       if the provider returns no price points.
        """
        date_range = DateRange.of(from_date, to_date)
        resolved = Interval.parse(interval)
        logger.info(
            "Computing %s return distribution from %s to %s",
            resolved.name,
            date_range.from_date.isoformat(),
            date_range.to_date.isoformat(),
        )

        prices = self._provider.get_closing_prices(date_range, resolved)
        if not prices:
            raise EmptyDataError(
                f"No price data returned for {date_range.from_date.isoformat()} "
                f"to {date_range.to_date.isoformat()} ({resolved.name})."
            )

        result = DistributionResult(
            from_date=date_range.from_date,
            to_date=date_range.to_date,
            interval=resolved,
            mean=return_calculator.mean(prices),
            standard_deviation=return_calculator.standard_deviation(prices),
            observations=len(prices),
        )
        logger.debug(
            "Distribution over %d prices: mean=%r standard_deviation=%r",
            result.observations,
            result.mean,
            result.standard_deviation,
        )
        return result
