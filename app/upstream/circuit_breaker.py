"""Consecutive-failure circuit breaker for upstream HTTP calls."""

import threading
import time
from enum import Enum

from app.logging_config import logger


class CircuitOpenError(Exception):
    """Raised when a call is rejected because the circuit is open."""

    def __init__(self, name: str, retry_after_s: float):
        super().__init__(f"Circuit '{name}' is open, retry in {retry_after_s:.1f}s")
        self.name = name
        self.retry_after_s = retry_after_s


class BreakerState(str, Enum):
    """Circuit breaker states."""

    closed = "closed"
    open = "open"
    half_open = "half_open"


class CircuitBreaker:
    """Stop calling an upstream after repeated failures, then probe it again.

    The breaker opens after ``failure_threshold`` consecutive failures. While
    open, calls are rejected with CircuitOpenError. Once ``reset_timeout_s``
    has elapsed a single trial call is let through: success closes the
    circuit, failure opens it for another full timeout.
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        reset_timeout_s: float = 30.0,
        clock=time.monotonic,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.reset_timeout_s = reset_timeout_s
        self._clock = clock
        self._lock = threading.Lock()
        self._state = BreakerState.closed
        self._failures = 0
        self._opened_at = 0.0
        self._trial_in_flight = False
        self._generation = 0

    @property
    def state(self) -> BreakerState:
        with self._lock:
            if (
                self._state is BreakerState.open
                and self._clock() - self._opened_at >= self.reset_timeout_s
            ):
                return BreakerState.half_open
            return self._state

    def call(self, func, *args, **kwargs):
        """Invoke ``func`` through the breaker.

        Outcomes of calls admitted before the last state change are ignored,
        so a slow call that started while closed cannot close an open circuit.

        Raises:
            CircuitOpenError: If the circuit is open or a trial call is
                already running.
        """
        generation = self._before_call()
        try:
            result = func(*args, **kwargs)
        except Exception:
            self._on_failure(generation)
            raise
        except BaseException:
            self._release_trial(generation)
            raise
        self._on_success(generation)
        return result

    def _before_call(self) -> int:
        with self._lock:
            if self._state is BreakerState.closed:
                return self._generation
            elapsed = self._clock() - self._opened_at
            if self._state is BreakerState.open and elapsed >= self.reset_timeout_s:
                self._transition(BreakerState.half_open)
            if self._state is BreakerState.half_open and not self._trial_in_flight:
                self._trial_in_flight = True
                logger.info("CIRCUIT_HALF_OPEN", breaker=self.name)
                return self._generation
            raise CircuitOpenError(
                self.name, max(self.reset_timeout_s - elapsed, 0.0)
            )

    def _transition(self, state: BreakerState) -> None:
        # Caller holds the lock.
        self._state = state
        self._generation += 1
        self._trial_in_flight = False

    def _on_success(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._failures = 0
            if self._state is not BreakerState.closed:
                self._transition(BreakerState.closed)
                logger.info("CIRCUIT_CLOSED", breaker=self.name)

    def _on_failure(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._failures += 1
            if (
                self._state is BreakerState.half_open
                or self._failures >= self.failure_threshold
            ):
                self._transition(BreakerState.open)
                self._opened_at = self._clock()
                logger.warning(
                    "CIRCUIT_OPENED", breaker=self.name, failures=self._failures
                )

    def _release_trial(self, generation: int) -> None:
        with self._lock:
            if generation == self._generation:
                self._trial_in_flight = False
