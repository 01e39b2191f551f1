from __future__ import annotations

import logging
from typing import Mapping

import httpx

from .config_types import ClientConfig
from .security import NetworkPolicy, SecurityPolicy, url_host

logger = logging.getLogger(__name__)

USER_AGENT = "etherpad-client/0.1.0"


class BlockedHostError(httpx.RequestError):
    """A request (or a redirect hop) targets a host the network policy refuses."""


def _timeout(cfg: ClientConfig) -> httpx.Timeout:
    # 0 means unbounded for both values
    overall = cfg.timeout_s or None
    connect = cfg.connect_timeout_s or None
    return httpx.Timeout(overall, connect=connect)


class Transport:
    """Blocking GET/POST returning the raw body, or None when the request failed.

    Unless ``ignore_security`` is set, every request and every redirect hop is
    checked against the network policy. The verdict is cached per host for
    the lifetime of the transport; httpx still resolves the name itself when
    connecting, so a host whose DNS answer changes between the check and the
    connection is not caught.
    """

    def __init__(
            self,
            cfg: ClientConfig,
            *,
            policy: SecurityPolicy | None = None,
            http_client: httpx.Client | None = None,
    ):
        self._cfg = cfg
        if cfg.ignore_security:
            self._policy = None
        else:
            self._policy = policy or NetworkPolicy(cfg.blocked_hosts)
        self._verdicts: dict[str, bool] = {}
        self._client = http_client or httpx.Client(
            timeout=_timeout(cfg),
            verify=cfg.check_ssl,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            follow_redirects=True,
        )
        if self._policy is not None:
            hooks = self._client.event_hooks
            hooks["request"] = [*hooks.get("request", []), self._check_request]
            self._client.event_hooks = hooks

    def close(self) -> None:
        self._client.close()

    def is_blocked(self, url: str) -> bool:
        if self._policy is None:
            return False
        host = url_host(url)
        if host not in self._verdicts:
            self._verdicts[host] = self._policy.is_blocked(url)
        return self._verdicts[host]

    def _check_request(self, request: httpx.Request) -> None:
        url = str(request.url)
        if self.is_blocked(url):
            raise BlockedHostError(f"{url_host(url)} is blocked by the network policy", request=request)

    def get(self, url: str, params: Mapping[str, str] | None = None) -> bytes | None:
        return self.request("GET", url, params)

    def post(self, url: str, params: Mapping[str, str] | None = None) -> bytes | None:
        return self.request("POST", url, params)

    def request(self, method: str, url: str, params: Mapping[str, str] | None = None) -> bytes | None:
        try:
            if method == "POST":
                r = self._client.post(url, data=dict(params or {}))
            else:
                r = self._client.get(url, params=dict(params or {}))
        except BlockedHostError as e:
            logger.warning("%s %s refused: %s", method, url, e)
            return None
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            return None

        if r.status_code >= 400:
            logger.warning("%s %s failed with %s", method, url, r.status_code)
            return None
        return r.content or None
