"""
Port (interface) for historical price data providers.
Infrastructure adapters (e.g. PolygonPriceDataProvider) must implement this interface.
"""

from abc import ABC, abstractmethod

from src.domain.entities.distribution import DateRange, Interval


class IPriceDataProvider(ABC):
    @abstractmethod
    def get_closing_prices(self, date_range: DateRange, interval: Interval) -> list[float]:
        """Return the closing price of every bar in *date_range*, oldest first.

        Raises:
            InvalidIntervalError: if the provider has no granularity for *interval*.
            UpstreamError: if the provider reports a failure or is unreachable.
        """
        ...
