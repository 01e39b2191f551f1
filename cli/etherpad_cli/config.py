from __future__ import annotations

import functools
import ipaddress
import os
import tomllib
from typing import Any
from urllib.parse import urlsplit

from platformdirs import user_config_dir

from etherpad_client.config_types import ClientConfig

from . import console

APP_NAME = "etherpad"
CONFIG_FILENAME = "config.toml"
ENV_CONFIG_PATH = "ETHERPAD_CONFIG"

# environment variable -> settings key
ENV_OVERRIDES = {
    "ETHERPAD_APIKEY": "apikey",
    "ETHERPAD_URL": "url",
    "ETHERPAD_API_VERSION": "apiversion",
    "ETHERPAD_CONNECT_TIMEOUT": "connecttimeout",
    "ETHERPAD_TIMEOUT": "timeout",
    "ETHERPAD_CHECK_SSL": "check_ssl",
    "ETHERPAD_IGNORE_SECURITY": "ignoresecurity",
    "ETHERPAD_COOKIE_DOMAIN": "cookiedomain",
    "ETHERPAD_COOKIE_TIME": "cookietime",
    "ETHERPAD_BLOCKED_HOSTS": "blockedhosts",
}


def config_path() -> str:
    override = os.getenv(ENV_CONFIG_PATH, "").strip()
    if override:
        return override
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def _is_local_host(host: str) -> bool:
    if host == "localhost" or host.endswith(".localhost"):
        return True
    try:
        addr = ipaddress.ip_address(host.strip("[]"))
    except ValueError:
        return False
    return addr.is_loopback or addr.is_private or addr.is_unspecified


def normalize_base_url(raw: str | None, *, warn: bool = False) -> str:
    """Server url as the client expects it: scheme, no trailing slash, no ``/api`` suffix.

    A url without scheme gets http:// for local hosts (an etherpad dev server
    on :9001) and https:// otherwise.
    """
    value = (raw or "").strip().rstrip("/")
    if value.lower().endswith("/api"):
        value = value[: -len("/api")].rstrip("/")
    if not value:
        return ""
    if urlsplit(value).scheme.lower() in {"http", "https"}:
        return value

    host = urlsplit(f"//{value}").hostname or ""
    normalized = f"{'http' if _is_local_host(host) else 'https'}://{value}"
    if warn:
        _warn_once(f"url missing scheme, assuming {normalized}")
    return normalized


@functools.lru_cache(maxsize=None)
def _warn_once(msg: str) -> None:
    console.warn(msg)


def read_settings_file(path: str) -> dict[str, Any]:
    """Settings live either at the top level or under an [etherpad] table."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    section = data.get("etherpad")
    if isinstance(section, dict):
        return {**{k: v for k, v in data.items() if not isinstance(v, dict)}, **section}
    return data


def apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    merged = dict(data)
    for env_var, key in ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value is not None and value.strip() != "":
            merged[key] = value.strip()
    return merged


def load_settings() -> ClientConfig:
    data = apply_env_overrides(read_settings_file(config_path()))
    data["url"] = normalize_base_url(str(data.get("url") or ""), warn=True)
    return ClientConfig.from_mapping(data)


def redacted(cfg: ClientConfig) -> dict[str, Any]:
    data = cfg.to_mapping()
    data["apikey"] = "(set)" if cfg.apikey else "(empty)"
    return data
