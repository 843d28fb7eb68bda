"""FastAPI application routes, middleware, and metrics."""

import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from fastapi.templating import Jinja2Templates
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
import uvicorn
from structlog.contextvars import bind_contextvars, clear_contextvars

from app.auth import authorize_stats
from app.config import HOST, PORT, RECENT_CITIES_LIMIT
from app.errors import ForecastServiceError
from app.geocoding.provider import geocoding_provider
from app.geocoding.store import coordinate_store
from app.health.health_check import is_database_available, is_weather_api_available
from app.logging_config import logger
from app.models.health import Dependencies, HealthResponse, ServiceStatus
from app.weather_service.weather import get_weather

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the cities table before serving requests."""
    coordinate_store().create_schema()
    logger.info("APP_STARTED")
    yield


app = FastAPI(lifespan=lifespan)

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "path", "status_code"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "HTTP request duration in seconds", ["path"]
)


@app.middleware("http")
async def request_logging(request: Request, call_next):
    """Log request details, attach a request ID, and record metrics.

    Args:
        request: Incoming HTTP request.
        call_next: FastAPI handler for the next middleware/app.

    Returns:
        The response produced by the downstream handler.
    """
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    bind_contextvars(request_id=request_id)
    start = time.perf_counter()
    response = None
    try:
        response = await call_next(request)
        response.headers["x-request-id"] = request_id
        return response
    finally:
        duration_s = time.perf_counter() - start
        duration_ms = round(duration_s * 1000, 2)
        status_code = getattr(response, "status_code", 500)
        logger.info(
            "HTTP_REQUEST",
            method=request.method,
            path=request.url.path,
            status_code=status_code,
            duration_ms=duration_ms,
        )
        REQUEST_COUNT.labels(
            method=request.method, path=request.url.path, status_code=status_code
        ).inc()
        REQUEST_LATENCY.labels(path=request.url.path).observe(duration_s)
        clear_contextvars()


@app.exception_handler(ForecastServiceError)
async def forecast_service_error_handler(request: Request, exc: ForecastServiceError):
    """Convert any resolution or forecast failure into a generic 500.

    The error class is logged so operators can tell an unknown city from an
    upstream or database outage, but clients always see the same status.

    Args:
        request: Incoming HTTP request.
        exc: Raised service error.

    Returns:
        A plain-text 500 response.
    """
    logger.error(
        "REQUEST_FAILED",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return PlainTextResponse(f"Something went wrong: {exc}", status_code=500)


@app.get("/")
def index(request: Request):
    """Render the city search form."""
    return templates.TemplateResponse(request, "index.html")


@app.get("/weather")
def weather(request: Request, city: str):
    """Render the hourly forecast for the requested city.

    Args:
        request: Incoming HTTP request.
        city: City name string from the query parameter.

    Returns:
        The rendered forecast page.
    """
    display = get_weather(city, store=coordinate_store(), provider=geocoding_provider)
    return templates.TemplateResponse(request, "weather.html", {"display": display})


@app.get("/stats")
def stats(request: Request, user: str = Depends(authorize_stats)):
    """Render the most recently cached cities.

    Args:
        request: Incoming HTTP request.
        user: Authenticated stats user.

    Returns:
        The rendered stats page.
    """
    cities = coordinate_store().list_recent(RECENT_CITIES_LIMIT)
    return templates.TemplateResponse(request, "stats.html", {"cities": cities})


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Report API health and dependency availability.

    Returns:
        A HealthResponse containing dependency status.
    """
    weather_api_available = await is_weather_api_available()
    return HealthResponse(
        status="ok",
        dependencies=Dependencies(
            weather_api=ServiceStatus.available
            if weather_api_available
            else ServiceStatus.not_available,
            database=is_database_available(),
        ),
    )


@app.get("/metrics")
async def metrics():
    """Expose Prometheus metrics for scraping."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


def run():
    """Serve the application with uvicorn on the configured host and port."""
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    run()
