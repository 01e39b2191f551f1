from __future__ import annotations

import ipaddress
import logging
import socket
from typing import Iterable, Protocol
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)


class SecurityPolicy(Protocol):
    def is_blocked(self, url: str) -> bool:
        ...


def url_host(url: str) -> str:
    try:
        return (urlsplit((url or "").strip()).hostname or "").lower()
    except ValueError:
        return ""


def resolve_host_ips(host: str) -> list[str]:
    """All addresses the host resolves to, in resolver order, without duplicates."""
    if not host:
        return []
    try:
        infos = socket.getaddrinfo(host, None, proto=socket.IPPROTO_TCP)
    except (socket.gaierror, UnicodeError, OSError) as exc:
        logger.debug("could not resolve %s: %s", host, exc)
        return []
    ips: list[str] = []
    for info in infos:
        ip = str(info[4][0])
        if ip not in ips:
            ips.append(ip)
    return ips


def _is_internal(addr: ipaddress.IPv4Address | ipaddress.IPv6Address) -> bool:
    if isinstance(addr, ipaddress.IPv6Address) and addr.ipv4_mapped is not None:
        addr = addr.ipv4_mapped
    return (
        addr.is_loopback
        or addr.is_private
        or addr.is_link_local
        or addr.is_reserved
        or addr.is_multicast
        or addr.is_unspecified
    )


class NetworkPolicy:
    """Refuses hosts on internal networks and hosts listed in ``blocked_hosts``.

    ``blocked_hosts`` entries are hostnames or CIDR ranges.
    """

    def __init__(self, blocked_hosts: Iterable[str] = (), *, block_internal: bool = True):
        self.block_internal = block_internal
        self._names: set[str] = set()
        self._networks: list[ipaddress.IPv4Network | ipaddress.IPv6Network] = []
        for entry in blocked_hosts:
            entry = (entry or "").strip().lower()
            if not entry:
                continue
            try:
                self._networks.append(ipaddress.ip_network(entry, strict=False))
            except ValueError:
                self._names.add(entry)

    def is_blocked(self, url: str) -> bool:
        host = url_host(url)
        if not host:
            return True
        if host in self._names:
            return True
        for ip in resolve_host_ips(host):
            try:
                addr = ipaddress.ip_address(ip.split("%", 1)[0])
            except ValueError:
                continue
            if self.block_internal and _is_internal(addr):
                return True
            if any(addr in net for net in self._networks):
                return True
        return False


def is_url_blocked(url: str, policy: SecurityPolicy | None = None) -> str | None:
    """Describe a blocked server url as ``"host (ip1, ip2)"``, or None when it is allowed.

    Meant for settings screens: it needs no client and always resolves the
    host itself, whatever ``ignore_security`` says.
    """
    policy = policy or NetworkPolicy()
    if not policy.is_blocked(url):
        return None
    host = url_host(url)
    ips = ", ".join(resolve_host_ips(host))
    logger.info("server url %s is blocked (%s)", url, ips or "unresolved")
    return f"{host} ({ips})"
