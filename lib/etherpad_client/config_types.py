from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

DEFAULT_API_VERSION = "1.2"
DEFAULT_CONNECT_TIMEOUT_S = 300.0
DEFAULT_TIMEOUT_S = 0.0


@dataclass(frozen=True)
class ClientConfig:
    apikey: str = field(default="", repr=False)
    base_url: str = ""
    api_version: str = DEFAULT_API_VERSION
    connect_timeout_s: float = DEFAULT_CONNECT_TIMEOUT_S
    # 0 disables the overall timeout
    timeout_s: float = DEFAULT_TIMEOUT_S
    check_ssl: bool = True
    ignore_security: bool = False
    cookie_domain: str = ""
    cookie_time: int = 0
    blocked_hosts: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ClientConfig":
        """Build settings from the host's flat key/value store.

        Keys follow the plugin settings names: apikey, url, apiversion,
        connecttimeout, timeout, check_ssl, ignoresecurity, cookiedomain,
        cookietime, blockedhosts.
        """
        blocked = data.get("blockedhosts") or ()
        if isinstance(blocked, str):
            blocked = blocked.replace(",", "\n").splitlines()
        return cls(
            apikey=str(data.get("apikey") or "").strip(),
            base_url=str(data.get("url") or "").strip(),
            api_version=str(data.get("apiversion") or "").strip() or DEFAULT_API_VERSION,
            connect_timeout_s=_as_float(data.get("connecttimeout"), DEFAULT_CONNECT_TIMEOUT_S),
            timeout_s=_as_float(data.get("timeout"), DEFAULT_TIMEOUT_S),
            check_ssl=_as_bool(data.get("check_ssl"), True),
            ignore_security=_as_bool(data.get("ignoresecurity"), False),
            cookie_domain=str(data.get("cookiedomain") or "").strip(),
            cookie_time=int(_as_float(data.get("cookietime"), 0)),
            blocked_hosts=tuple(str(b).strip() for b in blocked if str(b).strip()),
        )

    def to_mapping(self) -> dict[str, Any]:
        return {
            "apikey": self.apikey,
            "url": self.base_url,
            "apiversion": self.api_version,
            "connecttimeout": self.connect_timeout_s,
            "timeout": self.timeout_s,
            "check_ssl": self.check_ssl,
            "ignoresecurity": self.ignore_security,
            "cookiedomain": self.cookie_domain,
            "cookietime": self.cookie_time,
            "blockedhosts": list(self.blocked_hosts),
        }


def _as_float(value: Any, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_bool(value: Any, default: bool) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    return str(value).strip().lower() in {"1", "true", "yes", "on"}
