"""A token bucket rate limiter whose state lives in Redis."""

from __future__ import annotations

import logging
import threading
import time
from http import HTTPStatus
from typing import Any, Callable, Iterable

import redis

from rpcgate.errors import UNKNOWN_ERR, new_err_code_info
from rpcgate.response import JsonResult, http_response

logger = logging.getLogger(__name__)

STATE_TTL_SECONDS = 24 * 60 * 60
RATE_LIMIT_MESSAGE = "rate limit exceeded"


def send_json(start_response: Callable[..., Any], result: JsonResult) -> list[bytes]:
    """Start a WSGI response carrying ``result`` and return its body."""
    body = result.body_bytes()
    status = HTTPStatus(result.status_code)
    start_response(
        f"{status.value} {status.phrase}",
        [("Content-Type", result.content_type), ("Content-Length", str(len(body)))],
    )
    return [body]


class TokenBucket:
    """Refills ``rate`` tokens a second up to ``capacity``; each request takes one."""

    def __init__(
        self,
        rate: int,
        capacity: int,
        redis_client: Any,
        key: str = "token_bucket",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.rate = rate
        self.capacity = capacity
        self.redis_client = redis_client
        self.key = key
        self._clock = clock
        self._lock = threading.Lock()

    def _read_int(self, key: str, default: int) -> int:
        try:
            return int(self.redis_client.get(key))
        except (redis.RedisError, TypeError, ValueError):
            return default

    def _write(self, key: str, value: int) -> None:
        try:
            self.redis_client.set(key, value, ex=STATE_TTL_SECONDS)
        except redis.RedisError as exc:
            logger.error("redis set err: %s", exc)

    def get_tokens(self) -> int:
        """Refill the bucket for the time passed and return the tokens available."""
        with self._lock:
            now = int(self._clock())
            tokens = self._read_int(self.key + ":tokens", self.capacity)
            last_time = self._read_int(self.key + ":last_time", now)
            tokens = min(tokens + (now - last_time) * self.rate, self.capacity)
            self._write(self.key + ":tokens", tokens)
            self._write(self.key + ":last_time", now)
            return tokens

    def allow(self) -> bool:
        """Take one token if there is one."""
        if self.get_tokens() < 1:
            return False
        with self._lock:
            try:
                self.redis_client.decrby(self.key + ":tokens", 1)
            except redis.RedisError as exc:
                logger.error("redis decr err: %s", exc)
                return False
        return True

    def wrap(self, app: Callable[..., Iterable[bytes]]) -> Callable[..., Iterable[bytes]]:
        """Return a WSGI application that rejects requests beyond the limit."""

        def limited(environ: dict[str, Any], start_response: Callable[..., Any]) -> Iterable[bytes]:
            if self.allow():
                return app(environ, start_response)
            logger.error(RATE_LIMIT_MESSAGE)
            err = new_err_code_info(UNKNOWN_ERR, RATE_LIMIT_MESSAGE)
            return send_json(start_response, http_response(None, err))

        return limited