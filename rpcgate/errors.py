"""Business error codes and the exceptions that carry them."""

from __future__ import annotations

# Common status codes.
PARAM_ERR = 100
IP_ILLEGAL = 102
OVERTIME = 103
LIMITED_FLOW = 104
UNKNOWN_ERR = 110
STATUS_OK = 200

# Soft-delete states.
DEL_STATE_NO = 0
DEL_STATE_YES = 1

DEFAULT_MESSAGE = "未知错误,请重试"

_MAX_CODE = 2**32 - 1


class CodeError(Exception):
    """An error with a numeric code and a message that is safe to show."""

    def __init__(self, code: int, info: str, cause: BaseException | None = None) -> None:
        if isinstance(code, bool) or not isinstance(code, int) or not 0 <= code <= _MAX_CODE:
            raise ValueError(f"error code must be an unsigned 32-bit integer, got {code!r}")
        super().__init__(code, info)
        self.code = code
        self.info = info
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"ErrCode:{self.code}，ErrInfo:{self.info}"


class CircuitBreakerOpenError(Exception):
    """Raised when a circuit breaker refuses a request."""

    def __init__(self, message: str = "circuit breaker is open") -> None:
        super().__init__(message)


def new_err_code_info(err_code: int, err_info: str) -> CodeError:
    """Custom code, custom message."""
    return CodeError(err_code, err_info)


def new_err_code(err_code: int) -> CodeError:
    """Custom code, generic message."""
    return CodeError(err_code, DEFAULT_MESSAGE)


def new_info(err_info: str) -> CodeError:
    """Generic code, custom message."""
    return CodeError(UNKNOWN_ERR, err_info)


def new_err(err: BaseException) -> CodeError:
    """Generic code and message, keeping the original error as the cause."""
    return CodeError(UNKNOWN_ERR, DEFAULT_MESSAGE, cause=err)


def is_code_error(err: object) -> bool:
    """Tell whether ``err`` is a :class:`CodeError`."""
    return isinstance(err, CodeError)