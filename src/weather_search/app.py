"""Main FastAPI application."""

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger
from opentelemetry import metrics
from opentelemetry.exporter.prometheus import PrometheusMetricReader
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.resources import Resource
from prometheus_client import REGISTRY, generate_latest

from .api import health, routes
from .core.config import settings
from .services.session import ForecastSession


def setup_logging():
    """Configure loguru for structured logging.

    Sets up logging with the configured log level from settings.
    Logs are written to stderr with structured format.
    """
    logger.remove()

    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level> | {extra}",
        level=settings.LOG_LEVEL,
        serialize=False,
        colorize=True,
        backtrace=True,
        diagnose=settings.ENVIRONMENT != "production",
    )

    logger.info(
        "Logging configured",
        level=settings.LOG_LEVEL,
    )


def setup_metrics():
    """Configure OpenTelemetry metrics with Prometheus exporter.

    Metrics are exposed at /metrics in Prometheus text format.
    """
    reader = PrometheusMetricReader()

    resource = Resource.create(
        {
            "service.name": "weather-search",
            "service.version": "0.1.0",
        }
    )

    provider = MeterProvider(
        resource=resource,
        metric_readers=[reader],
    )

    metrics.set_meter_provider(provider)

    logger.info("OpenTelemetry metrics configured")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Startup creates the process-wide forecast session; shutdown cancels any
    pending search and waits for in-flight requests.

    Args:
        app: FastAPI application instance
    """
    logger.info("Starting Weather Search")

    logger.info(
        "Configuration loaded",
        upstream_timeout=settings.UPSTREAM_TIMEOUT,
        geocoding_base_url=settings.GEOCODING_BASE_URL,
        forecast_base_url=settings.FORECAST_BASE_URL,
        api_key_configured=settings.OPENWEATHER_API_KEY is not None,
        search_debounce_ms=settings.SEARCH_DEBOUNCE_MS,
        search_result_limit=settings.SEARCH_RESULT_LIMIT,
        forecast_days=settings.FORECAST_DAYS,
        label_from_timestamp=settings.FORECAST_LABEL_FROM_TIMESTAMP,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL,
    )

    if settings.OPENWEATHER_API_KEY is None:
        logger.warning("OPENWEATHER_API_KEY is not set, location search will fail")

    app.state.session = ForecastSession()
    logger.info("Application ready to serve requests")

    yield

    logger.info("Shutting down Weather Search")
    await app.state.session.aclose()
    app.state.session = None


setup_logging()

setup_metrics()

app = FastAPI(
    title="Weather Search",
    description="Debounced location search and five-entry weather forecast session",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.LOG_LEVEL == "DEBUG" else None,  # Swagger UI only in debug mode
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(routes.router, tags=["Session"])


@app.get("/metrics", include_in_schema=False)
async def metrics_endpoint():
    """Prometheus metrics endpoint."""
    return PlainTextResponse(generate_latest(REGISTRY).decode("utf-8"))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors.

    Logs the exception and returns a generic error response to avoid
    exposing internal details to clients.
    """
    logger.exception(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
    )

    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )


FastAPIInstrumentor.instrument_app(app)

logger.info("FastAPI application created")
