from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Mapping, Union


class ResponseCode(IntEnum):
    OK = 0
    INVALID_PARAMETERS = 1
    INTERNAL_ERROR = 2
    INVALID_FUNCTION = 3
    INVALID_API_KEY = 4


class FailureKind(str, Enum):
    MALFORMED_RESPONSE = "malformed_response"
    REMOTE_ERROR = "remote_error"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class Success:
    data: Any = None

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str = ""
    code: int | None = None

    def __bool__(self) -> bool:
        return False


Outcome = Union[Success, Failure]


def encode_params(params: Mapping[str, Any] | None, apikey: str) -> dict[str, str]:
    """Prepare request arguments; unset (None) values are not transmitted."""
    out: dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            out[key] = "true" if value else "false"
        else:
            out[key] = str(value)
    out["apikey"] = apikey
    return out


def decode(raw: bytes | str | None) -> Outcome:
    if not raw:
        return Failure(FailureKind.MALFORMED_RESPONSE, "empty response body")
    try:
        payload = json.loads(raw)
    except ValueError:
        return Failure(FailureKind.MALFORMED_RESPONSE, "response body is not JSON")
    return decode_payload(payload)


def decode_payload(payload: Any) -> Outcome:
    if not isinstance(payload, dict):
        return Failure(FailureKind.MALFORMED_RESPONSE, "response is not an object")
    code = payload.get("code")
    message = payload.get("message")
    if code is None or message is None:
        return Failure(FailureKind.MALFORMED_RESPONSE, "response misses code or message")

    if _is_ok(code):
        return Success(payload.get("data"))
    try:
        code = int(code)
    except (TypeError, ValueError):
        return Failure(FailureKind.MALFORMED_RESPONSE, f"invalid response code {code!r}")
    return Failure(FailureKind.REMOTE_ERROR, str(message), code)


def _is_ok(code: Any) -> bool:
    if isinstance(code, bool):
        return False
    if isinstance(code, int):
        return code == ResponseCode.OK
    # "0" sent as a string counts as OK too
    return isinstance(code, str) and code.strip() == "0"


def decode_version(raw: bytes | str | None) -> str | None:
    """Read ``currentVersion`` from the unauthenticated ``/api`` probe."""
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    version = data.get("currentVersion")
    if isinstance(version, str) and version.strip():
        return version.strip()
    return None
