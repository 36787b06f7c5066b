import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from config_loader import load_config
from models import ErrorResponse
from weather_service import UpstreamError, WeatherService

# Configure logging with Docker-friendly format
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(),  # Console output for Docker logs
        (
            logging.FileHandler("/app/logs/weather_proxy.log")
            if os.path.exists("/app/logs")
            else logging.NullHandler()
        ),
    ],
)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

# Global variables, loaded once per process
config = load_config()
weather_service = WeatherService(config.upstream)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    logger.info("Starting weather proxy")
    logger.info(f"Upstream: {config.upstream.base_url}")
    logger.info(f"Forecast window: {config.upstream.forecast_days} days")
    if not config.upstream.api_key:
        logger.warning("WEATHER_API_KEY is not set; upstream calls will be rejected")

    yield

    logger.info("Shutting down weather proxy")


# Create FastAPI app
app = FastAPI(
    title="Weather Proxy",
    description="Relays forecast requests to WeatherAPI.com without exposing the API key",
    version="1.0.0",
    lifespan=lifespan,
)


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    """Any origin may call the proxy."""
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


def error_response(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


@app.options("/api/weather")
async def weather_preflight():
    """Pre-flight negotiation: empty 200."""
    return Response(status_code=200)


@app.get("/api/weather")
async def get_weather(query: Optional[str] = None):
    """
    Relay a forecast request for `query` to the upstream provider.

    The upstream status and JSON body are passed through unchanged, whether
    the upstream succeeded or not.
    """
    if not query:
        return error_response(400, "Query parameter required")

    try:
        upstream = await weather_service.get_forecast(query)
    except UpstreamError as e:
        return error_response(500, "Failed to fetch weather data", str(e))

    return JSONResponse(status_code=upstream.status_code, content=upstream.body)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "credential_configured": bool(config.upstream.api_key),
        "forecast_days": config.upstream.forecast_days,
    }


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """Handle general exceptions."""
    logger.error(f"Unhandled exception: {weather_service.redact(str(exc))}")
    # Server errors bypass the http middleware, so CORS headers go on here
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
        headers=CORS_HEADERS,
    )


if __name__ == "__main__":
    import uvicorn

    host = config.server.host
    port = int(config.server.port)

    logger.info(f"Starting server on {host}:{port}")

    uvicorn.run(app, host=host, port=port, log_level=log_level.lower(), access_log=True)
