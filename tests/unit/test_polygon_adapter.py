"""
Tests for PolygonPriceDataProvider against a fake Polygon API built on
httpx.MockTransport (no network access).
"""

import logging
from datetime import date

import httpx
import pytest

from src.domain.entities.distribution import DateRange, Interval
from src.domain.errors import UpstreamError
from src.infrastructure.config.settings import ProviderSettings, configure_logging
from src.infrastructure.market_data.polygon_adapter import PolygonPriceDataProvider

BASE_URL = "https://api.polygon.io/v2/aggs/ticker/AAPL/range/1"
SETTINGS = ProviderSettings(base_url=BASE_URL, api_key="test-key")
RANGE = DateRange(date(2024, 1, 2), date(2024, 1, 5))


def _provider(handler) -> tuple[PolygonPriceDataProvider, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = httpx.Client(transport=httpx.MockTransport(recording_handler))
    return PolygonPriceDataProvider(SETTINGS, client=client), seen


def _ok(results: list[dict]) -> httpx.Response:
    return httpx.Response(200, json={"status": "OK", "resultsCount": len(results), "results": results})


class TestRequest:
    @pytest.mark.parametrize(
        "interval, granularity",
        [(Interval.Daily, "day"), (Interval.Weekly, "week"), (Interval.Monthly, "month")],
    )
    def test_url_and_key(self, interval, granularity):
        provider, seen = _provider(lambda request: _ok([{"c": 1.0}]))

        provider.get_closing_prices(RANGE, interval)

        assert len(seen) == 1
        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == f"/v2/aggs/ticker/AAPL/range/1/{granularity}/2024-01-02/2024-01-05"
        assert request.url.params["apiKey"] == "test-key"


class TestResponse:
    def test_extracts_closes_in_order(self):
        bars = [
            {"o": 187.15, "h": 188.44, "l": 183.89, "c": 185.64, "v": 82488674, "t": 1704171600000},
            {"o": 184.22, "h": 185.88, "l": 183.43, "c": 184.25, "v": 58414460, "t": 1704258000000},
            {"o": 182.15, "h": 183.09, "l": 180.88, "c": 181.91, "v": 71983570, "t": 1704344400000},
        ]
        provider, _ = _provider(lambda request: _ok(bars))
        assert provider.get_closing_prices(RANGE, Interval.Daily) == [185.64, 184.25, 181.91]

    def test_ok_without_bars_is_empty(self):
        provider, _ = _provider(lambda request: _ok([]))
        assert provider.get_closing_prices(RANGE, Interval.Daily) == []

    def test_error_status_carries_provider_message(self):
        provider, _ = _provider(
            lambda request: httpx.Response(
                200, json={"status": "ERROR", "request_id": "abc", "error": "Unknown API Key"}
            )
        )
        with pytest.raises(UpstreamError, match="Unknown API Key"):
            provider.get_closing_prices(RANGE, Interval.Daily)

    def test_error_status_on_http_error(self):
        provider, _ = _provider(
            lambda request: httpx.Response(
                429, json={"status": "ERROR", "error": "You've exceeded the maximum requests per minute"}
            )
        )
        with pytest.raises(UpstreamError, match="maximum requests"):
            provider.get_closing_prices(RANGE, Interval.Daily)

    def test_http_error_without_error_status(self):
        provider, _ = _provider(
            lambda request: httpx.Response(403, json={"status": "NOT_AUTHORIZED", "message": "nope"})
        )
        with pytest.raises(UpstreamError, match="HTTP 403"):
            provider.get_closing_prices(RANGE, Interval.Daily)

    def test_http_error_with_non_json_body(self):
        provider, _ = _provider(lambda request: httpx.Response(502, text="Bad Gateway"))
        with pytest.raises(UpstreamError, match="HTTP 502"):
            provider.get_closing_prices(RANGE, Interval.Daily)

    def test_missing_results_rejected(self):
        provider, _ = _provider(lambda request: httpx.Response(200, json={"status": "OK"}))
        with pytest.raises(UpstreamError, match="results"):
            provider.get_closing_prices(RANGE, Interval.Daily)

    def test_missing_status_rejected(self):
        provider, _ = _provider(lambda request: httpx.Response(200, json={"results": [{"c": 1.0}]}))
        with pytest.raises(UpstreamError, match="malformed"):
            provider.get_closing_prices(RANGE, Interval.Daily)

    def test_bar_without_close_rejected(self):
        provider, _ = _provider(lambda request: _ok([{"o": 1.0}]))
        with pytest.raises(UpstreamError, match="malformed"):
            provider.get_closing_prices(RANGE, Interval.Daily)

    def test_non_json_body_rejected(self):
        provider, _ = _provider(lambda request: httpx.Response(200, text="<html></html>"))
        with pytest.raises(UpstreamError, match="non-JSON"):
            provider.get_closing_prices(RANGE, Interval.Daily)

    def test_transport_failure_is_upstream_error(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        provider, _ = _provider(refuse)
        with pytest.raises(UpstreamError, match="connection refused"):
            provider.get_closing_prices(RANGE, Interval.Daily)


class TestLogging:
    def test_api_key_never_logged(self, caplog):
        configure_logging({"LOG_LEVEL": "INFO"})
        caplog.set_level(logging.DEBUG)
        settings = ProviderSettings(base_url=BASE_URL, api_key="SECRET-KEY")
        client = httpx.Client(transport=httpx.MockTransport(lambda request: _ok([{"c": 1.0}])))

        PolygonPriceDataProvider(settings, client=client).get_closing_prices(RANGE, Interval.Daily)

        assert caplog.records
        assert all("SECRET-KEY" not in record.getMessage() for record in caplog.records)
        assert "SECRET-KEY" not in caplog.text


class TestInvalidBaseUrl:
    def test_unusable_url_is_upstream_error(self):
        settings = ProviderSettings(base_url="https://api.polygon.io/" + "a" * 70_000, api_key="k")
        client = httpx.Client(transport=httpx.MockTransport(lambda request: _ok([{"c": 1.0}])))
        with pytest.raises(UpstreamError, match="request failed"):
            PolygonPriceDataProvider(settings, client=client).get_closing_prices(RANGE, Interval.Daily)
