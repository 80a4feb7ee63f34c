"""WSGI middleware that guards each service behind its circuit breaker."""

from __future__ import annotations

import json
from typing import Any, Callable, Iterable, Mapping

from rpcgate.circuit_breaker import CircuitBreaker
from rpcgate.errors import STATUS_OK, CircuitBreakerOpenError

DEFAULT_SERVICE = "default_service"


def service_name(path: str) -> str:
    """Map a request path to a service name: ``/user/info`` -> ``user_service``."""
    if len(path) > 1:
        return path.removeprefix("/").split("/")[0] + "_service"
    return DEFAULT_SERVICE


def _succeeded(status_code: int, body: bytes) -> bool:
    """A 200 reply whose JSON ``status`` field, if readable, is the success code."""
    if status_code != 200:
        return False
    if not body:
        return True
    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return True
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return True
    status = data.get("status") or 0
    if isinstance(status, bool) or not isinstance(status, int) or not 0 <= status < 2**32:
        return True
    return status == STATUS_OK


class CircuitBreakerMiddleware:
    """Refuses requests to services whose breaker is open and records outcomes."""

    def __init__(
        self, app: Callable[..., Iterable[bytes]], breakers: Mapping[str, CircuitBreaker]
    ) -> None:
        self.app = app
        self.breakers = breakers

    def __call__(
        self, environ: dict[str, Any], start_response: Callable[..., Any]
    ) -> Iterable[bytes]:
        name = service_name(environ.get("PATH_INFO", ""))
        breaker = self.breakers.get(name) or self.breakers.get(DEFAULT_SERVICE)
        if breaker is None:
            return self.app(environ, start_response)

        if not breaker.allow_request():
            body = (str(CircuitBreakerOpenError()) + "\n").encode("utf-8")
            start_response(
                "400 Bad Request",
                [
                    ("Content-Type", "text/plain; charset=utf-8"),
                    ("X-Content-Type-Options", "nosniff"),
                    ("Content-Length", str(len(body))),
                ],
            )
            return [body]

        status_code = 200
        written: list[bytes] = []

        def capture(status: str, headers: list, exc_info: Any = None) -> Callable[[bytes], Any]:
            nonlocal status_code
            status_code = int(status.split(None, 1)[0])
            write = start_response(status, headers, exc_info)

            def tee(data: bytes) -> Any:
                written.append(data)
                return write(data)

            return tee

        result = self.app(environ, capture)
        try:
            chunks = list(result)
        finally:
            if hasattr(result, "close"):
                result.close()

        breaker.record_result(_succeeded(status_code, b"".join(written + chunks)))
        return chunks