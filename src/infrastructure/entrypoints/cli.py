"""
CLI entry point: compute a return distribution from the command line.

This script is the Composition Root for one-off runs: it wires the Polygon
adapter to ComputeReturnDistributionUseCase and prints the result as JSON.

    export POLYGON_API_BASE_URL=https://api.polygon.io/v2/aggs/ticker/AAPL/range/1
    export POLYGON_API_KEY=<your-key>
    python -m src.infrastructure.entrypoints.cli 2024-01-01 2024-06-30 --interval Weekly
"""

import argparse
import json
import sys
from datetime import date
from typing import Optional, Sequence

from dotenv import load_dotenv

from src.application.use_cases.compute_distribution import ComputeReturnDistributionUseCase
from src.domain.entities.distribution import Interval
from src.domain.errors import ClientRequestError
from src.infrastructure.config.settings import ProviderSettings, configure_logging
from src.infrastructure.market_data.polygon_adapter import PolygonPriceDataProvider


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Mean and standard deviation of log returns of closing prices.",
    )
    parser.add_argument("from_date", type=date.fromisoformat, help="first day, YYYY-MM-DD")
    parser.add_argument("to_date", type=date.fromisoformat, help="last day, YYYY-MM-DD")
    parser.add_argument(
        "--interval",
        default=Interval.Daily.name,
        help=f"one of {', '.join(Interval.names())} (default: Daily)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    load_dotenv()

    try:
        configure_logging()
        provider = PolygonPriceDataProvider(ProviderSettings.from_env())
        try:
            result = ComputeReturnDistributionUseCase(provider).execute(
                args.from_date, args.to_date, args.interval
            )
        finally:
            provider.close()
    except ClientRequestError as exc:
        print(f"Request has invalid data: {exc}", file=sys.stderr)
        return 2
    except Exception as exc:
        print(f"An error occurred while processing the request: {exc}", file=sys.stderr)
        return 1

    print(
        json.dumps(
            {
                "fromDate": result.from_date.isoformat(),
                "toDate": result.to_date.isoformat(),
                "interval": result.interval.name,
                "mean": result.mean,
                "standardDeviation": result.standard_deviation,
                "observations": result.observations,
            },
            indent=2,
        )
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
