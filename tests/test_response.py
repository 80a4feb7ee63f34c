import json
from dataclasses import dataclass

from rpcgate.errors import PARAM_ERR, UNKNOWN_ERR, new_err_code_info
from rpcgate.response import (
    CONTENT_TYPE,
    HIDDEN_MESSAGE,
    ResponseBean,
    auth_http_result,
    error,
    grant_http_result,
    http_response,
    param_error_result,
    raw_http_result,
    success,
)


@dataclass
class _Payload:
    ping: str


class _FakeRpcError(Exception):
    def __init__(self, code, message):
        super().__init__(message)
        self._code = code
        self._message = message

    def code(self):
        return self._code

    def details(self):
        return self._message


def test_success_bean():
    bean = success({"a": 1})
    assert bean.to_dict() == {"status": 0, "info": "OK", "data": {"a": 1}}


def test_error_bean_has_empty_data():
    bean = error(PARAM_ERR, "bad")
    assert bean.to_dict() == {"status": PARAM_ERR, "info": "bad", "data": {}}


def test_success_wire_bytes():
    result = http_response(None, None)
    assert result.body_bytes() == b'{"status":0,"info":"OK","data":null}'
    assert result.content_type == CONTENT_TYPE


def test_dataclass_payload_round_trip():
    result = http_response(_Payload(ping="pong"), None)
    assert result.status_code == 200
    assert json.loads(result.body_bytes()) == {
        "status": 0,
        "info": "OK",
        "data": {"ping": "pong"},
    }


def test_code_error_message_shown_for_business_codes():
    result = http_response(None, new_err_code_info(PARAM_ERR, "bad name"))
    assert result.status_code == 200
    assert result.bean == ResponseBean(PARAM_ERR, "bad name", {})


def test_code_error_message_hidden_for_transport_codes():
    result = http_response(None, new_err_code_info(5, "internal detail"))
    assert result.bean.status == 5
    assert result.bean.info == HIDDEN_MESSAGE


def test_plain_exception_maps_to_unknown():
    result = http_response(None, RuntimeError("db down"))
    assert result.bean.status == UNKNOWN_ERR
    assert result.bean.info == HIDDEN_MESSAGE


def test_rpc_status_with_business_code():
    result = http_response(None, _FakeRpcError(PARAM_ERR, "from rpc"))
    assert result.bean.status == PARAM_ERR
    assert result.bean.info == "from rpc"


def test_rpc_status_with_transport_code_is_hidden():
    result = http_response(None, _FakeRpcError(14, "unavailable"))
    assert result.bean.status == UNKNOWN_ERR
    assert result.bean.info == HIDDEN_MESSAGE


def test_auth_and_grant_statuses():
    assert auth_http_result(None, RuntimeError("x")).status_code == 401
    assert grant_http_result(None, RuntimeError("x")).status_code == 403
    assert auth_http_result("ok", None).status_code == 200


def test_raw_result_uses_given_status():
    result = raw_http_result(None, RuntimeError("x"), 403)
    assert result.status_code == 403


def test_param_error_result():
    result = param_error_result(ValueError("missing id"))
    assert result.status_code == 200
    assert result.bean.status == PARAM_ERR
    assert result.bean.info == " 参数有误: missing id"


def test_body_is_utf8_without_escapes():
    result = param_error_result(ValueError("x"))
    decoded = json.loads(result.body_bytes().decode("utf-8"))
    assert decoded["info"] == " 参数有误: x"
    assert "参数有误".encode("utf-8") in result.body_bytes()