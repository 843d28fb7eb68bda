"""HTTP GET with bounded retry, jittered backoff, and consistent logging."""

import random
import time

import httpx

from app.config import (
    UPSTREAM_RETRY_ATTEMPTS,
    UPSTREAM_RETRY_BASE_DELAY_S,
    UPSTREAM_RETRY_JITTER,
    UPSTREAM_RETRY_MAX_DELAY_S,
)
from app.errors import ExternalAPIError
from app.logging_config import logger

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


def backoff_delay(
    attempt: int,
    base_delay_s: float = UPSTREAM_RETRY_BASE_DELAY_S,
    max_delay_s: float = UPSTREAM_RETRY_MAX_DELAY_S,
    jitter: float = UPSTREAM_RETRY_JITTER,
) -> float:
    """Return the sleep before the attempt following ``attempt``.

    The exponential part is capped at ``max_delay_s``; up to ``jitter`` times
    that value is added on top so that concurrent clients spread out.
    """
    delay = min(base_delay_s * (2 ** (attempt - 1)), max_delay_s)
    return delay + random.uniform(0, delay * jitter)


def request_with_retry(
    *,
    url: str,
    params: dict,
    timeout: float,
    event_prefix: str,
    log_context: dict,
    error_message: str,
    error_cls: type[ExternalAPIError] = ExternalAPIError,
    attempts: int = UPSTREAM_RETRY_ATTEMPTS,
) -> httpx.Response:
    """Execute an HTTP GET with retry/backoff and consistent logging.

    Args:
        url: The URL to call.
        params: Query parameters to include in the request.
        timeout: Per-attempt timeout in seconds.
        event_prefix: Log event prefix for consistent names.
        log_context: Extra log fields for all events.
        error_message: Error message to wrap in ``error_cls``.
        error_cls: ExternalAPIError subclass raised on final failure.
        attempts: Maximum number of attempts.

    Returns:
        The successful HTTP response.

    Raises:
        ExternalAPIError: When the request fails after retries.
    """
    for attempt in range(1, attempts + 1):
        try:
            response = httpx.get(url, params=params, timeout=timeout)
            logger.info(
                f"{event_prefix}_RESPONSE",
                **log_context,
                status=response.status_code,
                attempt=attempt,
            )
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            retryable = status_code in RETRYABLE_STATUS_CODES
            logger.error(
                f"{event_prefix}_BAD_STATUS",
                **log_context,
                status=status_code,
                attempt=attempt,
                retryable=retryable,
            )
            if not retryable or attempt == attempts:
                raise error_cls(error_message) from exc
        except httpx.RequestError as exc:
            logger.error(
                f"{event_prefix}_REQUEST_FAILED",
                **log_context,
                error=str(exc),
                attempt=attempt,
            )
            if attempt == attempts:
                raise error_cls(error_message) from exc

        delay = backoff_delay(attempt)
        logger.info(
            f"{event_prefix}_RETRY",
            **log_context,
            attempt=attempt + 1,
            delay_s=round(delay, 3),
        )
        time.sleep(delay)

    raise error_cls(error_message)
