"""
Infrastructure adapter: Polygon.io aggregates API → IPriceDataProvider.
All Polygon-specific details (granularity tokens, URL shape, response fields)
are confined here; the rest of the codebase depends only on IPriceDataProvider.

The response is decoded through a narrow pydantic contract: only `status`,
`error` and each bar's close `c` are read, everything else is ignored.
"""

import logging
from typing import Optional

import httpx
from pydantic import BaseModel, ValidationError

from src.domain.entities.distribution import DateRange, Interval
from src.domain.errors import InvalidIntervalError, UpstreamError
from src.domain.ports.price_data_port import IPriceDataProvider
from src.infrastructure.config.settings import ProviderSettings

logger = logging.getLogger(__name__)

GRANULARITY = {
    Interval.Daily: "day",
    Interval.Weekly: "week",
    Interval.Monthly: "month",
}


class PolygonBar(BaseModel):
    c: float


class PolygonAggregatesResponse(BaseModel):
    status: str
    error: Optional[str] = None
    results: Optional[list[PolygonBar]] = None


class PolygonPriceDataProvider(IPriceDataProvider):
    """Fetches closing prices from the Polygon aggregates endpoint over HTTP."""

    def __init__(
        self,
        settings: ProviderSettings,
        client: Optional[httpx.Client] = None,
    ) -> None:
        """
        Args:
            settings: Base URL (ticker and multiplier included), API key and timeout.
            client:   Optional pre-configured httpx.Client (tests pass one built on
                      httpx.MockTransport). Pass nothing for normal instantiation.
        """
        self._settings = settings
        self._client = client or httpx.Client(
            timeout=settings.timeout_seconds,
            headers={"Accept": "application/json"},
        )

    def get_closing_prices(self, date_range: DateRange, interval: Interval) -> list[float]:
        granularity = GRANULARITY.get(interval)
        if granularity is None:
            raise InvalidIntervalError(f"Invalid interval specified: {interval!r}.")

        url = (
            f"{self._settings.base_url}/{granularity}"
            f"/{date_range.from_date.isoformat()}/{date_range.to_date.isoformat()}"
        )
        logger.debug("GET %s", url)

        payload = self._fetch(url)
        if payload.status == "ERROR":
            logger.warning("Polygon API returned an error: %s", payload.error)
            raise UpstreamError(f"Polygon API error: {payload.error}")
        if payload.results is None:
            raise UpstreamError(
                f"Polygon API response is missing 'results' (status {payload.status!r})."
            )
        return [bar.c for bar in payload.results]

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _fetch(self, url: str) -> PolygonAggregatesResponse:
        try:
            response = self._client.get(url, params={"apiKey": self._settings.api_key})
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Polygon API unreachable: %s", exc)
            raise UpstreamError(f"Polygon API request failed: {exc}") from exc

        try:
            payload = PolygonAggregatesResponse.model_validate(response.json())
        except ValueError as exc:
            # json.JSONDecodeError and pydantic.ValidationError both land here
            if response.is_error:
                raise UpstreamError(
                    f"Polygon API responded with HTTP {response.status_code}."
                ) from exc
            detail = "malformed response" if isinstance(exc, ValidationError) else "non-JSON response"
            raise UpstreamError(f"Polygon API returned a {detail}.") from exc

        if response.is_error and payload.status != "ERROR":
            raise UpstreamError(
                f"Polygon API responded with HTTP {response.status_code}: "
                f"{payload.error or payload.status}"
            )
        return payload
