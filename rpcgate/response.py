"""The JSON envelope returned by HTTP handlers."""

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

from rpcgate.errors import PARAM_ERR, UNKNOWN_ERR, CodeError

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/json; charset=utf-8"
HIDDEN_MESSAGE = "未知错误，请重试"
# Codes below this are transport-level codes whose messages stay internal.
_INTERNAL_CODE_LIMIT = 17


@dataclass
class ResponseBean:
    """The response envelope: status code, message and payload."""

    status: int
    info: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


@dataclass
class JsonResult:
    """An HTTP status together with the envelope to send as JSON."""

    status_code: int
    bean: ResponseBean
    content_type: str = CONTENT_TYPE

    def body_bytes(self) -> bytes:
        return json.dumps(
            self.bean.to_dict(), ensure_ascii=False, separators=(",", ":")
        ).encode("utf-8")


def success(data: Any) -> ResponseBean:
    return ResponseBean(0, "OK", data)


def error(err_code: int, err_info: str) -> ResponseBean:
    return ResponseBean(err_code, err_info, {})


def raw_http_result(
    resp: Any, err: BaseException | None, default_error_status: int = HTTPStatus.OK
) -> JsonResult:
    """Build the reply for a handler result, mapping errors to codes."""
    if err is None:
        return JsonResult(int(HTTPStatus.OK), success(resp))

    logger.error("ERR: %r", err)
    err_code, err_msg = UNKNOWN_ERR, HIDDEN_MESSAGE
    if isinstance(err, CodeError):
        err_code = err.code
        if err_code >= _INTERNAL_CODE_LIMIT:
            err_msg = err.info
    elif callable(getattr(err, "code", None)) and callable(getattr(err, "details", None)):
        # An RPC error carries its status as code() and details().
        code = err.code()
        code = getattr(code, "value", code)
        if isinstance(code, tuple):
            code = code[0]
        if isinstance(code, int) and code >= _INTERNAL_CODE_LIMIT:
            err_code, err_msg = code, err.details() or ""
    return JsonResult(int(default_error_status), error(err_code, err_msg))


def http_response(resp: Any, err: BaseException | None) -> JsonResult:
    """General reply: HTTP 200 for success and failure alike."""
    return raw_http_result(resp, err, HTTPStatus.OK)


def auth_http_result(resp: Any, err: BaseException | None) -> JsonResult:
    """Authentication reply: HTTP 401 on failure."""
    return raw_http_result(resp, err, HTTPStatus.UNAUTHORIZED)


def grant_http_result(resp: Any, err: BaseException | None) -> JsonResult:
    """Authorisation reply: HTTP 403 on failure."""
    return raw_http_result(resp, err, HTTPStatus.FORBIDDEN)


def param_error_result(err: BaseException) -> JsonResult:
    """Reply for a request whose parameters could not be parsed."""
    return JsonResult(int(HTTPStatus.OK), error(PARAM_ERR, " 参数有误: " + str(err)))