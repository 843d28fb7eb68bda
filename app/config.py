"""Runtime configuration read from the environment at startup."""

import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./forecast.db")

GEOCODING_URL = os.getenv(
    "GEOCODING_URL", "https://geocoding-api.open-meteo.com/v1/search"
)
FORECAST_URL = os.getenv("FORECAST_URL", "https://api.open-meteo.com/v1/forecast")

UPSTREAM_TIMEOUT_S = float(os.getenv("UPSTREAM_TIMEOUT_S", "5"))
UPSTREAM_RETRY_ATTEMPTS = int(os.getenv("UPSTREAM_RETRY_ATTEMPTS", "3"))
UPSTREAM_RETRY_BASE_DELAY_S = float(os.getenv("UPSTREAM_RETRY_BASE_DELAY_S", "0.3"))
UPSTREAM_RETRY_MAX_DELAY_S = float(os.getenv("UPSTREAM_RETRY_MAX_DELAY_S", "2.0"))
UPSTREAM_RETRY_JITTER = float(os.getenv("UPSTREAM_RETRY_JITTER", "0.5"))

BREAKER_FAILURE_THRESHOLD = int(os.getenv("BREAKER_FAILURE_THRESHOLD", "5"))
BREAKER_RESET_TIMEOUT_S = float(os.getenv("BREAKER_RESET_TIMEOUT_S", "30"))

STATS_USERNAME = os.getenv("STATS_USERNAME", "forecast")
STATS_PASSWORD = os.getenv("STATS_PASSWORD", "forecast")
RECENT_CITIES_LIMIT = int(os.getenv("RECENT_CITIES_LIMIT", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "3000"))
