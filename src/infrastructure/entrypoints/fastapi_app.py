"""
FastAPI entry point for the stock return-distribution API.

build_app() is the Composition Root: it loads .env, resolves ProviderSettings
(a missing base URL or API key fails here, at startup), wires the Polygon
adapter into the use-cases and hands them to create_app().

Run locally:
    uvicorn src.infrastructure.entrypoints.fastapi_app:build_app --factory --reload --port 8000
"""

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncContextManager, AsyncIterator, Callable, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from src.application.use_cases.compute_distribution import ComputeReturnDistributionUseCase
from src.application.use_cases.list_intervals import ListIntervalsUseCase
from src.domain.entities.distribution import DistributionResult
from src.domain.errors import ClientRequestError, DistributionError
from src.infrastructure.config.settings import ProviderSettings, configure_logging
from src.infrastructure.market_data.polygon_adapter import PolygonPriceDataProvider

logger = logging.getLogger(__name__)

BAD_REQUEST_PREFIX = "Request has invalid data: "
SERVER_ERROR_PREFIX = "An error occurred while processing the request: "


class DistributionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_date: date = Field(alias="fromDate")
    to_date: date = Field(alias="toDate")
    # Validated by the use-case (InvalidIntervalError), not by the schema.
    interval: str


class DistributionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_date: date = Field(alias="fromDate")
    to_date: date = Field(alias="toDate")
    interval: str
    mean: float
    standard_deviation: float = Field(alias="standardDeviation")

    @classmethod
    def from_result(cls, result: DistributionResult) -> "DistributionResponse":
        return cls(
            from_date=result.from_date,
            to_date=result.to_date,
            interval=result.interval.name,
            mean=result.mean,
            standard_deviation=result.standard_deviation,
        )


def create_app(
    compute_use_case: ComputeReturnDistributionUseCase,
    intervals_use_case: ListIntervalsUseCase,
    lifespan: Optional[Callable[[FastAPI], AsyncContextManager[None]]] = None,
) -> FastAPI:
    """Build the FastAPI app around already-wired use-cases."""
    app = FastAPI(
        title="Stock Distribution API",
        version="1.0.0",
        description="Mean and standard deviation of log returns of stock closing prices.",
        lifespan=lifespan,
    )

    @app.exception_handler(ClientRequestError)
    async def client_error_handler(request: Request, exc: ClientRequestError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": f"{BAD_REQUEST_PREFIX}{exc}"})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages = [
            f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"detail": f"{BAD_REQUEST_PREFIX}{'; '.join(messages)}"},
        )

    @app.exception_handler(DistributionError)
    async def server_error_handler(request: Request, exc: DistributionError) -> JSONResponse:
        logger.error("%s failed: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": f"{SERVER_ERROR_PREFIX}{exc}"})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("%s failed unexpectedly", request.url.path)
        return JSONResponse(status_code=500, content={"detail": f"{SERVER_ERROR_PREFIX}{exc}"})

    @app.post(
        "/StockMonitor/distribution",
        response_model=DistributionResponse,
        response_model_by_alias=True,
        include_in_schema=False,
    )
    @app.post(
        "/stockmonitor/distribution",
        response_model=DistributionResponse,
        response_model_by_alias=True,
    )
    def get_distribution(body: DistributionRequest) -> DistributionResponse:
        """Mean and population standard deviation of log returns for the range."""
        result = compute_use_case.execute(body.from_date, body.to_date, body.interval)
        return DistributionResponse.from_result(result)

    @app.get("/StockMonitor/intervals", response_model=list[str], include_in_schema=False)
    @app.get("/stockmonitor/intervals", response_model=list[str])
    def get_intervals() -> list[str]:
        """Interval names accepted by /stockmonitor/distribution."""
        return intervals_use_case.execute()

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


def build_app() -> FastAPI:
    load_dotenv()
    configure_logging()

    # Composition Root: wire all dependencies once at startup
    settings = ProviderSettings.from_env()
    provider = PolygonPriceDataProvider(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        provider.close()

    app = create_app(
        ComputeReturnDistributionUseCase(provider),
        ListIntervalsUseCase(),
        lifespan=lifespan,
    )
    logger.info("Stock distribution API ready (upstream %s)", settings.base_url)
    return app
