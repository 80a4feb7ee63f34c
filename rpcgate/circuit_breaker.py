"""A circuit breaker whose counters live in Redis."""

from __future__ import annotations

import enum
import logging
import threading
import time
from datetime import timedelta
from typing import Any, Callable, TypeVar

import redis

from rpcgate.errors import CircuitBreakerOpenError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_FAILURE_THRESHOLD = 5
DEFAULT_HALF_OPEN_TIMEOUT = 30.0
DEFAULT_WINDOW_SIZE = 10.0
DEFAULT_SUCCESS_THRESHOLD = 2
DEFAULT_REDIS_KEY_PREFIX = "circuit_breaker:"
DEFAULT_REDIS_LOCK_DURATION = 10.0

# Share of failed requests in the window that trips the breaker.
FAILURE_RATIO = 0.5


class CircuitBreakerState(enum.IntEnum):
    """Closed lets requests through, half-open lets some, open blocks them."""

    CLOSED = 0
    HALF_OPEN = 1
    OPEN = 2


def _to_int(raw: Any) -> int:
    if raw is None:
        return 0
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


class CircuitBreaker:
    """Trips open when too many requests fail within a time window."""

    def __init__(
        self,
        name: str,
        redis_client: Any,
        failure_threshold: int = DEFAULT_FAILURE_THRESHOLD,
        success_threshold: int = DEFAULT_SUCCESS_THRESHOLD,
        half_open_timeout: float = DEFAULT_HALF_OPEN_TIMEOUT,
        window_size: float = DEFAULT_WINDOW_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self.redis_client = redis_client
        self.failure_threshold = failure_threshold
        self.success_threshold = success_threshold
        self.half_open_timeout = half_open_timeout
        self.window_size = window_size
        self._clock = clock
        self._lock = threading.RLock()
        self._state = CircuitBreakerState.CLOSED
        self._last_state_change = clock()

    @property
    def state(self) -> CircuitBreakerState:
        with self._lock:
            return self._state

    @property
    def redis_key(self) -> str:
        return DEFAULT_REDIS_KEY_PREFIX + self.name

    def execute(self, fn: Callable[[], T]) -> T:
        """Run ``fn`` if the breaker allows it and record how it went."""
        if not self.allow_request():
            raise CircuitBreakerOpenError()
        try:
            result = fn()
        except Exception:
            self.record_result(False)
            raise
        self.record_result(True)
        return result

    def allow_request(self) -> bool:
        """Tell whether a request may pass; an expired open state turns half-open."""
        with self._lock:
            if self._state is CircuitBreakerState.CLOSED:
                return True
            if self._state is CircuitBreakerState.HALF_OPEN:
                return True
            if self._clock() - self._last_state_change > self.half_open_timeout:
                self._set_state(CircuitBreakerState.HALF_OPEN)
                return True
            return False

    def _call(self, method: str, *args: Any) -> Any:
        try:
            return getattr(self.redis_client, method)(*args)
        except redis.RedisError as exc:
            logger.error("redis %s failed: %s", method, exc)
            return None

    def record_result(self, success: bool) -> None:
        """Count one request outcome and move the breaker if thresholds are met."""
        key = self.redis_key
        total_key, success_key, failure_key = key + ":total", key + ":success", key + ":failure"
        with self._lock:
            self._call("incr", total_key)
            if success:
                self._call("incr", success_key)
                if self._state is CircuitBreakerState.HALF_OPEN:
                    successes = _to_int(self._call("get", success_key))
                    if successes >= self.success_threshold:
                        self._set_state(CircuitBreakerState.CLOSED)
            else:
                self._call("incr", failure_key)
                if self._state is CircuitBreakerState.CLOSED:
                    total = _to_int(self._call("get", total_key))
                    failures = _to_int(self._call("get", failure_key))
                    if (
                        total > 0
                        and failures / total >= FAILURE_RATIO
                        and failures >= self.failure_threshold
                    ):
                        self._set_state(CircuitBreakerState.OPEN)
            window = timedelta(seconds=self.window_size)
            for counter in (total_key, success_key, failure_key):
                self._call("expire", counter, window)

    def _set_state(self, new_state: CircuitBreakerState) -> None:
        if self._state is new_state:
            return
        self._state = new_state
        self._last_state_change = self._clock()
        logger.info("Circuit breaker %s state changed to %s", self.name, new_state.name)
        key = self.redis_key
        self._call("delete", key + ":success", key + ":failure")