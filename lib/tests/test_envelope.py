import json

import pytest

from etherpad_client.envelope import (
    Failure,
    FailureKind,
    ResponseCode,
    Success,
    decode,
    decode_version,
    encode_params,
)


@pytest.mark.parametrize("data", [None, {"groupID": "g.1"}, ["a", "b"], 0, "text"])
def test_decode_ok_returns_data_unchanged(data) -> None:
    body = '{"code": 0, "message": "ok", "data": %s}' % json.dumps(data)
    assert decode(body) == Success(data)


def test_decode_missing_data_is_null() -> None:
    assert decode(b'{"code": 0, "message": "ok"}') == Success(None)


@pytest.mark.parametrize("body", [
    b'{"message": "ok", "data": {}}',
    b'{"code": 0, "data": {}}',
    b'{"code": 0, "message": null}',
    b"[1, 2]",
    b"<html>bad gateway</html>",
    b"",
])
def test_decode_malformed(body: bytes) -> None:
    outcome = decode(body)
    assert isinstance(outcome, Failure)
    assert outcome.kind == FailureKind.MALFORMED_RESPONSE
    assert not outcome


@pytest.mark.parametrize("code", [
    ResponseCode.INVALID_PARAMETERS,
    ResponseCode.INTERNAL_ERROR,
    ResponseCode.INVALID_FUNCTION,
    ResponseCode.INVALID_API_KEY,
    42,
])
def test_decode_remote_error_keeps_code_and_message(code) -> None:
    outcome = decode('{"code": %d, "message": "padID does not exist", "data": null}' % int(code))
    assert outcome == Failure(FailureKind.REMOTE_ERROR, "padID does not exist", int(code))


def test_decode_accepts_string_ok_code() -> None:
    assert decode(b'{"code": "0", "message": "ok", "data": 3}') == Success(3)


def test_success_with_null_data_is_truthy() -> None:
    assert bool(Success(None)) is True


def test_encode_params_adds_apikey_and_drops_unset() -> None:
    params = encode_params({"padID": "p1", "rev": None, "text": "hi"}, "key")
    assert params == {"padID": "p1", "text": "hi", "apikey": "key"}


def test_encode_params_stringifies_values() -> None:
    params = encode_params({"validUntil": 1700000000, "publicStatus": True}, "key")
    assert params["validUntil"] == "1700000000"
    assert params["publicStatus"] == "true"


def test_decode_version() -> None:
    assert decode_version(b'{"currentVersion": "1.2.13"}') == "1.2.13"
    assert decode_version(b"not json") is None
    assert decode_version(b'{"currentVersion": ""}') is None
    assert decode_version(None) is None
